"""Patient management endpoints for SmileHub.

All routes are scoped to the authenticated tenant. Request bodies are
validated in full before the store is touched.
"""

import datetime as dt
from typing import Annotated, Any
from uuid import uuid4

from fastapi import APIRouter, Depends, Path, status
from pydantic import Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from smilehub.api.v1.endpoints.auth import get_current_tenant
from smilehub.api.v1.schemas import CamelModel, Money
from smilehub.core.logging import audit_logger
from smilehub.core.security import TokenData
from smilehub.models.base import get_db
from smilehub.models.patient import Patient
from smilehub.services.ledger import summarize
from smilehub.services.patients import MAX_PATIENT_ID, PatientStore

router = APIRouter()

PAYMENT_METHODS = ("Cash", "Card", "UPI", "Bank Transfer")

PatientId = Annotated[int, Path(ge=1, le=MAX_PATIENT_ID, description="Patient ID")]


def _new_payment_id() -> str:
    return uuid4().hex[:12]


class PaymentIn(CamelModel):
    """A payment received from the patient."""

    id: str = Field(default_factory=_new_payment_id, description="Payment ID")
    amount: Money = Field(..., gt=0, max_digits=10, decimal_places=2, description="Amount paid")
    date: dt.date = Field(default_factory=dt.date.today, description="Payment date")
    method: str = Field(
        "Cash",
        min_length=1,
        max_length=50,
        description=f"Payment method, usually one of {', '.join(PAYMENT_METHODS)}",
    )
    notes: str | None = Field(None, max_length=1000, description="Free-text notes")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # The web client uses timestamps as ids
        if value is None or value == "":
            return _new_payment_id()
        if isinstance(value, int):
            return str(value)
        return value


class PaymentRecord(CamelModel):
    """Stored payment as returned to clients."""

    id: str | None = None
    amount: Money
    date: dt.date | None = None
    method: str | None = None
    notes: str | None = None


class PatientIn(CamelModel):
    """Full patient record sent on create and update."""

    name: str = Field(..., min_length=1, max_length=100, description="First name")
    surname: str | None = Field(None, max_length=100, description="Surname")
    gender: str | None = Field(None, max_length=20, description="Gender")
    mobile: str | None = Field(None, max_length=20, description="Mobile number")
    age: int | None = Field(None, ge=0, le=150, description="Age in years")
    chief_complaint: str | None = Field(None, description="Chief complaint")
    diagnosis: str | None = Field(None, description="Diagnosis")
    treatment_plan: str | None = Field(None, description="Treatment plan")
    treatment_type: str | None = Field(None, max_length=100, description="Treatment type")
    start_date: dt.date | None = Field(None, description="Treatment start date")
    total_fee: Money = Field(
        default=0, ge=0, max_digits=10, decimal_places=2, description="Total treatment fee"
    )
    images: list[str] = Field(default_factory=list, description="Image references")
    payments: list[PaymentIn] = Field(default_factory=list, description="Payment history")

    def to_columns(self) -> dict[str, Any]:
        """Column values for the patient store."""
        columns = self.model_dump(exclude={"payments"})
        columns["payments"] = [payment.model_dump(mode="json") for payment in self.payments]
        return columns


class PatientResponse(CamelModel):
    """Patient record with its computed ledger."""

    id: int
    tenant_id: int
    name: str
    surname: str | None
    gender: str | None
    mobile: str | None
    age: int | None
    chief_complaint: str | None
    diagnosis: str | None
    treatment_plan: str | None
    treatment_type: str | None
    start_date: dt.date | None
    total_fee: Money
    images: list[str]
    payments: list[PaymentRecord]
    total_paid: Money
    due_amount: Money
    created_at: dt.datetime | None
    updated_at: dt.datetime | None

    @classmethod
    def from_patient(cls, patient: Patient) -> "PatientResponse":
        ledger = summarize(patient.total_fee, patient.payments)
        return cls(
            id=patient.id,
            tenant_id=patient.tenant_id,
            name=patient.name,
            surname=patient.surname,
            gender=patient.gender,
            mobile=patient.mobile,
            age=patient.age,
            chief_complaint=patient.chief_complaint,
            diagnosis=patient.diagnosis,
            treatment_plan=patient.treatment_plan,
            treatment_type=patient.treatment_type,
            start_date=patient.start_date,
            total_fee=ledger.total_fee,
            images=list(patient.images or []),
            payments=list(patient.payments or []),
            total_paid=ledger.total_paid,
            due_amount=ledger.due_amount,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )


class ImageUpdate(CamelModel):
    """Replacement for a single image."""

    image_data: str = Field(..., min_length=1, description="Data URL or path of the new image")


class ImagesResponse(CamelModel):
    message: str
    images: list[str]


@router.get("", response_model=list[PatientResponse])
async def list_patients(
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[PatientResponse]:
    """List the tenant's patients, newest first."""
    patients = await PatientStore(db).list_patients(current_tenant.tenant_id)
    return [PatientResponse.from_patient(patient) for patient in patients]


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    payload: PatientIn,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PatientResponse:
    """Create a patient owned by the caller."""
    patient = await PatientStore(db).create(current_tenant.tenant_id, payload.to_columns())

    audit_logger.log_access(
        tenant_id=current_tenant.tenant_id,
        resource_type="patient",
        resource_id=patient.id,
        action="CREATE",
    )
    return PatientResponse.from_patient(patient)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: PatientId,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PatientResponse:
    """Get a single patient."""
    patient = await PatientStore(db).get(current_tenant.tenant_id, patient_id)

    audit_logger.log_access(
        tenant_id=current_tenant.tenant_id,
        resource_type="patient",
        resource_id=patient_id,
        action="VIEW",
    )
    return PatientResponse.from_patient(patient)


@router.get("/{patient_id}/original", response_model=PatientResponse)
async def get_original_patient(
    patient_id: PatientId,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PatientResponse:
    """Get the stored record, used by the client to revert unsaved edits."""
    patient = await PatientStore(db).get(current_tenant.tenant_id, patient_id)
    return PatientResponse.from_patient(patient)


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: PatientId,
    payload: PatientIn,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PatientResponse:
    """Replace a patient record."""
    patient = await PatientStore(db).update(
        current_tenant.tenant_id, patient_id, payload.to_columns()
    )

    audit_logger.log_access(
        tenant_id=current_tenant.tenant_id,
        resource_type="patient",
        resource_id=patient_id,
        action="UPDATE",
    )
    return PatientResponse.from_patient(patient)


@router.delete("/{patient_id}")
async def delete_patient(
    patient_id: PatientId,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Delete a patient permanently."""
    await PatientStore(db).delete(current_tenant.tenant_id, patient_id)

    audit_logger.log_access(
        tenant_id=current_tenant.tenant_id,
        resource_type="patient",
        resource_id=patient_id,
        action="DELETE",
    )
    return {"message": "Patient deleted successfully"}


@router.put("/{patient_id}/images/{index}", response_model=ImagesResponse)
async def replace_image(
    patient_id: PatientId,
    index: int,
    payload: ImageUpdate,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ImagesResponse:
    """Replace one image, e.g. after cropping or rotating it."""
    images = await PatientStore(db).replace_image_at(
        current_tenant.tenant_id, patient_id, index, payload.image_data
    )

    audit_logger.log_access(
        tenant_id=current_tenant.tenant_id,
        resource_type="patient",
        resource_id=patient_id,
        action="IMAGE_UPDATE",
        details={"index": index},
    )
    return ImagesResponse(message="Image updated successfully", images=images)


@router.delete("/{patient_id}/images/{index}", response_model=ImagesResponse)
async def delete_image(
    patient_id: PatientId,
    index: int,
    current_tenant: Annotated[TokenData, Depends(get_current_tenant)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ImagesResponse:
    """Remove one image; the last remaining image is kept."""
    images = await PatientStore(db).delete_image_at(current_tenant.tenant_id, patient_id, index)

    audit_logger.log_access(
        tenant_id=current_tenant.tenant_id,
        resource_type="patient",
        resource_id=patient_id,
        action="IMAGE_DELETE",
        details={"index": index},
    )
    return ImagesResponse(message="Image deleted successfully", images=images)
