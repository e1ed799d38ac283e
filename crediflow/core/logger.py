"""
Logging setup for the service.
Provides the application logger, correlation-aware adapters and a dedicated audit trail.
"""
import json
import logging
import sys
from typing import Any, Dict, Optional

from crediflow.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(correlation_id)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CorrelationIdFilter(logging.Filter):
    """Guarantees every record carries a correlation_id so the formatter never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configures the 'crediflow' logger hierarchy once and returns its root."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    app_logger = logging.getLogger("crediflow")
    app_logger.setLevel(log_level)

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        app_logger.addHandler(handler)

    # Reduce noise from external libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return app_logger


logger = setup_logging(settings.LOG_LEVEL)
audit_logger = logging.getLogger("crediflow.audit")


def get_logger_with_correlation(correlation_id: str) -> logging.LoggerAdapter:
    """Returns an adapter that stamps every record with the request correlation id."""
    return logging.LoggerAdapter(logger, {"correlation_id": correlation_id})


def audit_log(
    action: str,
    user: str,
    resource: str,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emits a structured audit record for a state-changing operation.
    The record is a single JSON document so it can be shipped to any log aggregator.
    """
    details = details or {}
    entry: Dict[str, Any] = {
        "action": action,
        "user": user,
        "resource": resource,
        "details": details,
    }
    audit_logger.info(
        json.dumps(entry, default=str),
        extra={"correlation_id": details.get("correlation_id", "-")}
    )
