"""
Logging configuration for the application.

Structured logging through structlog: JSON lines in production and a
colored console renderer for local development.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

import structlog
from dotenv import load_dotenv
from structlog.typing import FilteringBoundLogger


def setup_logging(level: str = "INFO", format_type: str = "json") -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Format type ("json" for production, "console" for development)
    """
    # Optional overrides kept out of the main .env
    load_dotenv(".env.logging")

    log_level_str = os.getenv("LOG_LEVEL", level).upper()
    log_format = os.getenv("LOG_FORMAT", format_type)
    log_dir = os.getenv("LOG_DIR", "logs")
    max_log_size = int(os.getenv("MAX_LOG_SIZE", "10485760"))  # 10MB
    backup_count = int(os.getenv("BACKUP_COUNT", "5"))
    log_encoding = os.getenv("LOG_ENCODING", "utf-8")

    os.makedirs(log_dir, exist_ok=True)

    log_level = getattr(logging, log_level_str, logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    file_handler = RotatingFileHandler(
        filename=os.path.join(log_dir, os.getenv("APP_LOG_FILE", "app.log")),
        maxBytes=max_log_size,
        backupCount=backup_count,
        encoding=log_encoding
    )
    file_handler.setLevel(log_level)

    error_handler = RotatingFileHandler(
        filename=os.path.join(log_dir, os.getenv("ERROR_LOG_FILE", "error.log")),
        maxBytes=max_log_size,
        backupCount=backup_count,
        encoding=log_encoding
    )
    error_handler.setLevel(logging.ERROR)

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=[console_handler, file_handler, error_handler],
        force=True,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    # Route through stdlib so the rotating file handlers receive every event
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        FilteringBoundLogger: Configured logger instance

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Record saved", record_id="UNILAG-CL-K000001")
        ```
    """
    return structlog.get_logger(name)
