"""API v1 endpoints."""

from smilehub.api.v1.endpoints import auth, health, patients

__all__ = [
    "auth",
    "health",
    "patients",
]
