"""Core configuration and utilities for the SmileHub backend."""

from smilehub.core.config import settings
from smilehub.core.logging import get_logger, setup_logging
from smilehub.core.security import SecurityManager

__all__ = ["settings", "SecurityManager", "setup_logging", "get_logger"]
