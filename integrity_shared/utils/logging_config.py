"""
Integrity Logging Configuration
JSON structured logging for the service logger and its package loggers
"""

import logging
import sys
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, Optional

from pythonjsonlogger.json import JsonFormatter

PACKAGE_LOGGERS = ("app", "integrity_shared")

_CONTEXT_FIELDS = ("correlation_id", "request_id")


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


class CustomJsonFormatter(JsonFormatter):
    """Stamps UTC time, level and owning service on every record"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = _utc_now()
        log_record["level"] = record.levelname
        log_record["service"] = getattr(
            record, "service_name", record.name.split(".")[0]
        )
        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)


def build_formatter(json_logs: bool) -> logging.Formatter:
    if json_logs:
        return CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"name": "logger", "pathname": "file", "lineno": "line"},
        )
    return logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_logger(logger: logging.Logger, log_level: str, json_logs: bool) -> None:
    """Replace the logger's handlers with a single stdout handler."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(build_formatter(json_logs))
    logger.addHandler(handler)
    logger.propagate = False


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    json_logs: bool = True,
    packages: Iterable[str] = PACKAGE_LOGGERS,
) -> logging.Logger:
    """
    Configure the service logger and the top-level package loggers

    Module loggers (``app.application.sealing`` and so on) propagate to their
    package logger, so one call covers the whole service.

    Args:
        service_name: Name of the service (e.g., 'integrity-service')
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Emit JSON records instead of plain text
        packages: Package logger names configured alongside the service logger

    Returns:
        The service logger
    """
    for name in (service_name, *packages):
        configure_logger(logging.getLogger(name), log_level, json_logs)
    return logging.getLogger(service_name)


# ============================================================================
# BUSINESS EVENTS
# ============================================================================


class MetricsLogger:
    """Business events (seals created, failed verifications, duplicate scans)"""

    def __init__(self, service_name: str):
        self.logger = logging.getLogger(f"{service_name}.metrics")
        self.service_name = service_name

    def log_event(self, event_name: str, event_data: Dict[str, Any]) -> None:
        self.logger.info(
            f"EVENT: {event_name}",
            extra={
                "event_name": event_name,
                "event_data": event_data,
                "service_name": self.service_name,
            },
        )


# ============================================================================
# STRUCTURED LOGGING HELPERS
# ============================================================================


def log_error_with_context(
    logger: logging.Logger, error: Exception, context: Optional[Dict[str, Any]] = None
) -> None:
    """Log an exception with its type, message and traceback plus caller context."""
    extra: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    extra.update(context or {})
    logger.error(f"{type(error).__name__}: {error}", exc_info=True, extra=extra)


def log_performance(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    extra: Dict[str, Any] = {
        "operation": operation,
        "duration_ms": round(duration_ms, 3),
    }
    extra.update(metadata or {})
    logger.info(f"PERF: {operation} took {duration_ms:.1f}ms", extra=extra)
