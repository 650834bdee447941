"""
Structured logging configuration for SmileHub.

Provides consistent, structured logging with support for different
output formats and log levels based on environment.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application context to log entries."""
    event_dict["app"] = "smilehub"
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output logs as JSON (for production)
    """
    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Shared processors for all outputs
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_app_context,
    ]

    if json_logs:
        # JSON output for production
        processors: list[Processor] = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # Human-readable output for development
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog BoundLogger
    """
    return structlog.get_logger(name)


class AuditLogger:
    """
    Specialized logger for the practice audit trail.

    Records who touched which patient record and every login attempt.
    Patient field values are never logged, only identifiers.
    """

    def __init__(self):
        """Initialize audit logger."""
        self.logger = get_logger("audit")

    def log_access(
        self,
        tenant_id: int | str,
        resource_type: str,
        resource_id: int | str,
        action: str,
        success: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Log a resource access event.

        Args:
            tenant_id: ID of the tenant accessing the resource
            resource_type: Type of resource (e.g., "patient")
            resource_id: ID of the accessed resource
            action: Action performed (e.g., "VIEW", "UPDATE")
            success: Whether the action succeeded
            details: Additional details
        """
        self.logger.info(
            "resource_access",
            tenant_id=str(tenant_id),
            resource_type=resource_type,
            resource_id=str(resource_id),
            action=action,
            success=success,
            details=details or {},
            audit_type="access",
        )

    def log_authentication(
        self,
        tenant_id: int | str | None,
        email: str,
        success: bool,
        method: str = "password",
        ip_address: str | None = None,
        failure_reason: str | None = None,
    ) -> None:
        """
        Log an authentication event.

        Args:
            tenant_id: ID of the authenticated tenant (None if unknown)
            email: Email address attempted
            success: Whether authentication succeeded
            method: Authentication method used
            ip_address: Client IP address
            failure_reason: Reason for failure (if applicable)
        """
        log_method = self.logger.info if success else self.logger.warning
        log_method(
            "authentication",
            tenant_id=str(tenant_id) if tenant_id is not None else None,
            email=email,
            success=success,
            method=method,
            ip_address=ip_address,
            failure_reason=failure_reason,
            audit_type="authentication",
        )


# Global audit logger instance
audit_logger = AuditLogger()
