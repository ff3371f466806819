import logging
import logging.config
import structlog
from datetime import datetime, timezone
import uuid
from typing import Optional
import sys
import os

from reorder.config import get_log_settings


def configure_logging(log_level: Optional[str] = None, log_file: Optional[str] = None):
    """
    Configure structured logging for the reorder package.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR); defaults to REORDER_LOG_LEVEL
        log_file: Optional log file path; defaults to REORDER_LOG_FILE. If neither
            is set, logs to stdout only.
    """
    env_level, env_file = get_log_settings()
    log_level = (log_level or env_level).upper()
    log_file = log_file or env_file

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "detailed",
                "stream": sys.stdout
            }
        },
        "loggers": {
            "reorder": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False
            }
        }
    }

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "detailed",
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5
        }
        log_config["loggers"]["reorder"]["handlers"].append("file")

    logging.config.dictConfig(log_config)

    logger = structlog.get_logger("reorder")
    logger.info("Logging configured", level=log_level, file=log_file)

    return logger


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class ReorderContext:
    """Context manager for a reorder operation with correlation ID."""

    def __init__(self, collection_id, move_id=None, operation_id: Optional[str] = None):
        self.collection_id = collection_id
        self.move_id = move_id
        self.operation_id = operation_id or str(uuid.uuid4())[:8]
        self.logger = get_logger("reorder.service")
        self.start_time = None

    def __enter__(self):
        self.start_time = datetime.now(timezone.utc)
        self.logger.info(
            "Reorder operation started",
            collection_id=self.collection_id,
            move_id=self.move_id,
            operation_id=self.operation_id,
            start_time=self.start_time.isoformat()
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = (datetime.now(timezone.utc) - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(
                "Reorder operation completed",
                collection_id=self.collection_id,
                move_id=self.move_id,
                operation_id=self.operation_id,
                duration_seconds=duration,
                status="success"
            )
        else:
            self.logger.error(
                "Reorder operation failed",
                collection_id=self.collection_id,
                move_id=self.move_id,
                operation_id=self.operation_id,
                duration_seconds=duration,
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val)
            )

        return False  # Don't suppress exceptions
