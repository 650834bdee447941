"""
User database model.

A user is a practice account (tenant). Every patient row belongs to
exactly one user and is invisible to all others.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smilehub.models.base import Base

if TYPE_CHECKING:
    from smilehub.models.patient import Patient


class User(Base):
    """
    User model representing a practice account.

    Passwords are stored as bcrypt hashes. The email is stored lower-cased
    and is the login identifier.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Login credentials
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Password management
    password_changed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Patients are removed by the database (ON DELETE CASCADE)
    patients: Mapped[list["Patient"]] = relationship(
        "Patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
