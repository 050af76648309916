"""Structured logging configuration."""

import logging
import sys
from typing import Any

from clinic_booking.core.config import settings

# Record attributes copied into structured output when set via ``extra``
CONTEXT_FIELDS = ("request_id", "user_id", "action", "slot_id", "booking_id")


class StructuredFormatter(logging.Formatter):
    """key=value formatter used outside development."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return " ".join(f"{k}={v}" for k, v in log_data.items())


def setup_logging() -> None:
    """Configure application logging."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if settings.is_dev:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = StructuredFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


class AuditLogger:
    """Logger specifically for audit events."""

    def __init__(self) -> None:
        self.logger = get_logger("audit")

    def log(
        self,
        action: str,
        actor_role: str,
        actor_id: str,
        entity_type: str,
        entity_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Log an audit event."""
        self.logger.info(
            f"AUDIT: action={action} actor={actor_role}:{actor_id} "
            f"entity={entity_type}:{entity_id} metadata={metadata or {}}",
            extra={"action": action, "user_id": actor_id},
        )


class IntegrityLogger:
    """Logger for slot/booking divergence that needs operator follow-up.

    Nothing reconciles these automatically; every entry is a manual task.
    """

    def __init__(self) -> None:
        self.logger = get_logger("integrity")

    def fault(
        self,
        fault: str,
        slot_id: str | None,
        booking_id: str | None,
        detail: str,
    ) -> None:
        """Log an integrity fault."""
        self.logger.error(
            f"INTEGRITY: fault={fault} slot={slot_id or 'none'} "
            f"booking={booking_id or 'none'} detail={detail}",
            extra={"slot_id": slot_id, "booking_id": booking_id},
        )


audit_logger = AuditLogger()
integrity_logger = IntegrityLogger()
