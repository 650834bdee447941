"""API v1 Router - Aggregates all API endpoints."""

from fastapi import APIRouter

from smilehub.api.v1.endpoints import auth, health, patients

api_router = APIRouter()

# Authentication endpoints (register, login, account)
api_router.include_router(
    auth.router,
    tags=["Authentication"],
)

# Patient management
api_router.include_router(
    patients.router,
    prefix="/patients",
    tags=["Patients"],
)

# Health
api_router.include_router(
    health.router,
    tags=["Health"],
)
