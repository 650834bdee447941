"""
Patient database model.

Represents a dental patient owned by one tenant, with the treatment fee,
the payment history and image references kept on the row itself.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, CheckConstraint, Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from smilehub.models.base import Base


class Patient(Base):
    """
    Patient model.

    ``images`` is an ordered list of opaque references (data URLs or
    paths). ``payments`` is an ordered list of payment objects with
    ``id``, ``amount``, ``date``, ``method`` and ``notes`` keys. Both are
    replaced as whole lists; assign a new list to persist a change.
    """

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Owning practice
    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Demographics
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    mobile: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(nullable=True)

    # Clinical notes
    chief_complaint: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    diagnosis: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    treatment_plan: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    treatment_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Finances
    total_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    payments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Image references, insertion order
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("total_fee >= 0", name="total_fee_non_negative"),
        Index("ix_patients_tenant_created", "tenant_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, tenant_id={self.tenant_id}, name='{self.name}')>"
