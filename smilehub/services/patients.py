"""Tenant-scoped patient record store.

Every query filters on both the patient id and the caller's tenant id.
A patient that belongs to another tenant is reported exactly like one
that does not exist.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smilehub.core.exceptions import ImageIndexError, LastImageError, NotFoundError, StorageError
from smilehub.core.logging import get_logger
from smilehub.models.patient import Patient

logger = get_logger(__name__)

# Columns a tenant may set; everything else is owned by the store
MUTABLE_FIELDS = (
    "name",
    "surname",
    "gender",
    "mobile",
    "age",
    "chief_complaint",
    "diagnosis",
    "treatment_plan",
    "treatment_type",
    "start_date",
    "total_fee",
    "images",
    "payments",
)

PATIENT_NOT_FOUND = "Patient not found"

# Largest value an INTEGER primary key can hold
MAX_PATIENT_ID = 2**31 - 1


class PatientStore:
    """CRUD over the ``patients`` table for one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("patient_commit_failed", error=str(exc))
            raise StorageError() from exc

    async def _fetch(self, tenant_id: int, patient_id: int) -> Patient:
        if not 1 <= patient_id <= MAX_PATIENT_ID:
            raise NotFoundError(PATIENT_NOT_FOUND)
        try:
            result = await self.db.execute(
                select(Patient).where(Patient.id == patient_id, Patient.tenant_id == tenant_id)
            )
        except SQLAlchemyError as exc:
            logger.error("patient_query_failed", error=str(exc))
            raise StorageError() from exc

        patient = result.scalar_one_or_none()
        if patient is None:
            raise NotFoundError(PATIENT_NOT_FOUND)
        return patient

    @staticmethod
    def _apply(patient: Patient, fields: dict[str, Any]) -> None:
        """Full replace: fields missing from ``fields`` are cleared."""
        for name in MUTABLE_FIELDS:
            value = fields.get(name)
            if name in ("images", "payments"):
                value = list(value or [])
            setattr(patient, name, value)
        if patient.total_fee is None:
            patient.total_fee = 0

    async def create(self, tenant_id: int, fields: dict[str, Any]) -> Patient:
        """Insert a new patient owned by ``tenant_id``."""
        patient = Patient(tenant_id=tenant_id)
        self._apply(patient, fields)
        self.db.add(patient)
        await self._commit()
        await self.db.refresh(patient)

        logger.info("patient_created", tenant_id=tenant_id, patient_id=patient.id)
        return patient

    async def list_patients(self, tenant_id: int) -> Sequence[Patient]:
        """All patients of a tenant, newest first."""
        try:
            result = await self.db.execute(
                select(Patient)
                .where(Patient.tenant_id == tenant_id)
                .order_by(Patient.created_at.desc(), Patient.id.desc())
            )
        except SQLAlchemyError as exc:
            logger.error("patient_query_failed", error=str(exc))
            raise StorageError() from exc
        return result.scalars().all()

    async def get(self, tenant_id: int, patient_id: int) -> Patient:
        """Fetch one patient or raise ``NotFoundError``."""
        return await self._fetch(tenant_id, patient_id)

    async def update(self, tenant_id: int, patient_id: int, fields: dict[str, Any]) -> Patient:
        """Replace every mutable field of a patient."""
        patient = await self._fetch(tenant_id, patient_id)
        self._apply(patient, fields)
        await self._commit()
        await self.db.refresh(patient)

        logger.info("patient_updated", tenant_id=tenant_id, patient_id=patient_id)
        return patient

    async def delete(self, tenant_id: int, patient_id: int) -> None:
        patient = await self._fetch(tenant_id, patient_id)
        await self.db.delete(patient)
        await self._commit()

        logger.info("patient_deleted", tenant_id=tenant_id, patient_id=patient_id)

    async def replace_image_at(
        self, tenant_id: int, patient_id: int, index: int, image_ref: str
    ) -> list[str]:
        """Swap the image at ``index``; the list length is unchanged."""
        patient = await self._fetch(tenant_id, patient_id)
        images = list(patient.images or [])
        if not 0 <= index < len(images):
            raise ImageIndexError()

        images[index] = image_ref
        patient.images = images
        await self._commit()
        return images

    async def delete_image_at(self, tenant_id: int, patient_id: int, index: int) -> list[str]:
        """Remove the image at ``index``; the last image cannot be removed."""
        patient = await self._fetch(tenant_id, patient_id)
        images = list(patient.images or [])
        if not 0 <= index < len(images):
            raise ImageIndexError()
        if len(images) <= 1:
            raise LastImageError()

        del images[index]
        patient.images = images
        await self._commit()
        return images
