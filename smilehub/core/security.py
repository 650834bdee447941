"""Security utilities for SmileHub.

Provides password hashing and signed, time-bounded bearer tokens that
carry the tenant identity.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel


class TokenData(BaseModel):
    """JWT token payload data."""

    tenant_id: int
    email: str
    exp: datetime | None = None


class SecurityManager:
    """Centralized security manager for password hashing and tokens.

    - JWT-based authentication (tenant id in ``sub``)
    - Password hashing with bcrypt (salted per hash)
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
    ):
        """Initialize security manager.

        Args:
            secret_key: Secret key for JWT signing
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Token expiration in minutes

        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string

        """
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored hash to compare against

        Returns:
            True if password matches, False otherwise

        """
        return self.pwd_context.verify(plain_password, hashed_password)

    def create_access_token(
        self,
        data: dict[str, Any],
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a JWT access token.

        Args:
            data: Token payload data
            expires_delta: Optional custom expiration time

        Returns:
            Encoded JWT token string

        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.access_token_expire_minutes)
        )
        to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def create_tenant_token(
        self,
        tenant_id: int,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token for a tenant."""
        return self.create_access_token(
            {"sub": str(tenant_id), "email": email},
            expires_delta=expires_delta,
        )

    def decode_token(self, token: str) -> TokenData | None:
        """Decode and validate a JWT token.

        Expired tokens and bad signatures are both rejected.

        Args:
            token: JWT token string

        Returns:
            TokenData if valid, None otherwise

        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return TokenData(
                tenant_id=int(payload.get("sub", "")),
                email=payload.get("email", ""),
                exp=datetime.fromtimestamp(payload.get("exp", 0), tz=timezone.utc),
            )
        except (JWTError, ValueError):
            return None
