"""
Logging configuration for AwareGuard Backend
Sets up structured logging with rotation and multiple outputs
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path

from app.core.config import settings

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
            "environment": settings.ENVIRONMENT,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def _rotating_handler(filename: str, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=filename,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging() -> None:
    """
    Configure application logging
    Sets up console and (optionally) rotating file handlers
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers = []

    # Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if settings.is_production():
        # Use JSON format in production
        console_formatter = JSONFormatter()
    else:
        # Use readable format in development
        console_formatter = logging.Formatter(fmt=settings.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        root_logger.addHandler(_rotating_handler(str(log_path), logging.DEBUG))
        root_logger.addHandler(
            _rotating_handler(str(log_path.with_name("error.log")), logging.ERROR)
        )

    # Configure third-party loggers
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )
    logging.getLogger("fastapi").setLevel(logging.INFO)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    root_logger.info(
        "Logging configured",
        extra={
            "log_level": settings.LOG_LEVEL,
            "log_file": settings.LOG_FILE,
        },
    )


class LoggerFactory:
    """Factory for creating loggers with consistent configuration"""

    @staticmethod
    def get_request_logger() -> logging.Logger:
        """Get logger for request/response logging"""
        return logging.getLogger("awareguard.request")

    @staticmethod
    def get_audit_logger() -> logging.Logger:
        """
        Get logger for audit events (payments, subscription changes)

        When file logging is enabled the audit trail also goes to its own
        rotating ``audit.log`` next to the main log file.
        """
        logger = logging.getLogger("awareguard.audit")

        if settings.LOG_FILE and not logger.handlers:
            audit_file = Path(settings.LOG_FILE).with_name("audit.log")
            audit_file.parent.mkdir(parents=True, exist_ok=True)
            logger.addHandler(_rotating_handler(str(audit_file), logging.INFO))

        return logger
