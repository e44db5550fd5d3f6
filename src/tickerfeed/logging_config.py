"""Structured logging configuration with multiple output streams."""

import logging
import logging.handlers
from pathlib import Path

import structlog

from tickerfeed.config import LoggingConfig

FETCH_LOGGER_NAME = "tickerfeed.fetches"


def _rotating_handler(
    path: str,
    config: LoggingConfig,
    formatter: logging.Formatter,
) -> logging.handlers.RotatingFileHandler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: LoggingConfig) -> None:
    """Set up structured logging with console + file outputs."""
    # Ensure log directories exist
    for log_path in [config.app_log, config.fetch_log]:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)

    # Shared structlog processors
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    # Configure structlog
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # JSON formatter for both log files
    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    # Console formatter for human-readable output
    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=config.console_colors),
        foreign_pre_chain=shared_processors,
    )

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    # Silence HTTP client loggers; request URLs carry query strings
    for noisy_logger in config.quiet_loggers:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # App log file handler
    root_logger.addHandler(_rotating_handler(config.app_log, config, json_formatter))

    # Fetch log handler (separate logger, one record per page fetch)
    fetch_logger = logging.getLogger(FETCH_LOGGER_NAME)
    fetch_logger.addHandler(_rotating_handler(config.fetch_log, config, json_formatter))
    fetch_logger.propagate = config.fetches_to_app_log


def get_fetch_logger() -> structlog.stdlib.BoundLogger:
    """Get the page-fetch logger."""
    return structlog.get_logger(FETCH_LOGGER_NAME)
