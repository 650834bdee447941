"""
Database models for SmileHub.

This module exports all SQLAlchemy models and database utilities.
"""

from smilehub.models.base import Base, async_session_maker, engine, get_db, init_db
from smilehub.models.patient import Patient
from smilehub.models.user import User

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "engine",
    "async_session_maker",
    "Patient",
    "User",
]
