"""Optional demo data seeding (development only)."""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from smilehub.core.logging import get_logger
from smilehub.core.security import SecurityManager
from smilehub.services.patients import PatientStore
from smilehub.services.tenants import TenantStore

logger = get_logger(__name__)

DEMO_EMAIL = "demo@smilehub.app"
DEMO_PASSWORD = "demo1234"

DEMO_PATIENTS = [
    {
        "name": "John",
        "surname": "Doe",
        "gender": "Male",
        "mobile": "9000000000",
        "age": 42,
        "chief_complaint": "Pain in lower left molar",
        "diagnosis": "Irreversible pulpitis, tooth 36",
        "treatment_plan": "Root canal treatment followed by crown",
        "treatment_type": "Root Canal",
        "start_date": date(2024, 1, 15),
        "total_fee": Decimal("8000"),
        "images": [],
        "payments": [
            {"id": "demo-pay-1", "amount": 3000.0, "date": "2024-01-15", "method": "Cash", "notes": None},
            {"id": "demo-pay-2", "amount": 2000.0, "date": "2024-02-01", "method": "UPI", "notes": None},
        ],
    },
    {
        "name": "Jane",
        "surname": "Smith",
        "gender": "Female",
        "mobile": "9000000001",
        "age": 29,
        "chief_complaint": "Crooked front teeth",
        "diagnosis": "Class I malocclusion with crowding",
        "treatment_plan": "Fixed orthodontic appliance, 18 months",
        "treatment_type": "Orthodontics",
        "start_date": date(2024, 3, 4),
        "total_fee": Decimal("45000"),
        "images": [],
        "payments": [],
    },
]


async def seed_demo_tenant(db: AsyncSession, security: SecurityManager) -> int:
    """Create the demo tenant with sample patients if it does not exist yet."""
    tenants = TenantStore(db, security)
    if await tenants.find_by_email(DEMO_EMAIL) is not None:
        return 0

    tenant = await tenants.register(DEMO_EMAIL, DEMO_PASSWORD)
    patients = PatientStore(db)
    for demo in DEMO_PATIENTS:
        await patients.create(tenant.id, demo)

    logger.warning("Demo tenant seeded", email=DEMO_EMAIL, patients=len(DEMO_PATIENTS))
    return len(DEMO_PATIENTS)
