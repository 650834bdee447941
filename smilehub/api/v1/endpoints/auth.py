"""
Authentication endpoints for SmileHub.

Practice accounts register with an email and password and exchange them
for a signed bearer token. Every protected endpoint resolves the caller's
tenant through ``get_current_tenant``.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from smilehub.api.v1.schemas import CamelModel
from smilehub.core.config import settings
from smilehub.core.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    NotFoundError,
)
from smilehub.core.logging import audit_logger
from smilehub.core.security import SecurityManager, TokenData
from smilehub.models.base import get_db
from smilehub.services.tenants import TenantStore

router = APIRouter()

# Bearer scheme; a missing header is reported by get_current_tenant
bearer_scheme = HTTPBearer(auto_error=False)

# Security manager instance
security = SecurityManager(
    secret_key=settings.secret_key,
    algorithm=settings.algorithm,
    access_token_expire_minutes=settings.access_token_expire_minutes,
)


class Credentials(CamelModel):
    """Registration and login request."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(CamelModel):
    """Login request; password rules are not re-checked here."""

    email: EmailStr
    password: str


class Token(CamelModel):
    """Access token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TenantResponse(CamelModel):
    """Registered tenant."""

    id: int
    email: str


class TenantProfile(TenantResponse):
    created_at: datetime | None = None
    password_changed_at: datetime | None = None


class PasswordChange(CamelModel):
    """Password change request."""

    current_password: str
    new_password: str = Field(..., min_length=6, max_length=72)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def get_current_tenant(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenData:
    """
    Validate the bearer token and return the caller's identity.

    No header yields 401; a bad, expired or orphaned token yields 403.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    token_data = security.decode_token(credentials.credentials)
    if token_data is None:
        raise InvalidTokenError()

    # Tokens outlive deleted accounts; refuse them
    try:
        await TenantStore(db, security).get(token_data.tenant_id)
    except NotFoundError:
        raise InvalidTokenError() from None

    return token_data


@router.post("/register", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    payload: Credentials,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantResponse:
    """Register a new practice account."""
    user = await TenantStore(db, security).register(payload.email, payload.password)

    audit_logger.log_authentication(
        tenant_id=user.id,
        email=user.email,
        success=True,
        method="register",
        ip_address=_client_ip(request),
    )
    return TenantResponse(id=user.id, email=user.email)


@router.post("/login", response_model=Token)
async def login(
    request: Request,
    payload: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Token:
    """
    Password login.

    Returns a JWT access token on successful authentication.
    """
    client_ip = _client_ip(request)
    try:
        user = await TenantStore(db, security).authenticate(payload.email, payload.password)
    except AuthenticationError:
        audit_logger.log_authentication(
            tenant_id=None,
            email=payload.email,
            success=False,
            ip_address=client_ip,
            failure_reason="invalid_credentials",
        )
        raise

    access_token = security.create_tenant_token(user.id, user.email)

    audit_logger.log_authentication(
        tenant_id=user.id,
        email=user.email,
        success=True,
        ip_address=client_ip,
    )

    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.get("/me", response_model=TenantProfile)
async def get_current_tenant_info(
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantProfile:
    """Get the authenticated practice account."""
    user = await TenantStore(db, security).get(current_tenant.tenant_id)
    return TenantProfile.model_validate(user)


@router.post("/change-password")
async def change_password(
    request: Request,
    password_data: PasswordChange,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Change the current tenant's password."""
    await TenantStore(db, security).change_password(
        current_tenant.tenant_id,
        password_data.current_password,
        password_data.new_password,
    )

    audit_logger.log_authentication(
        tenant_id=current_tenant.tenant_id,
        email=current_tenant.email,
        success=True,
        ip_address=_client_ip(request),
        method="password_change",
    )

    return {"message": "Password changed successfully"}
