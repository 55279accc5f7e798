"""Structured logging for the validation layer.

structlog is bridged to stdlib logging so a host service (API, worker, cron)
gets one consistent stream:
- JSON lines in production
- ConsoleRenderer in dev mode
- every entry tagged with the configured app name
"""

import logging
import logging.config

import structlog

from batchrules.core.config import Settings, get_settings


def app_name_injector(app_name: str):
    """Build a processor that stamps ``app`` onto every log entry."""

    def add_app_name(logger, method, event_dict):
        event_dict.setdefault("app", app_name)
        return event_dict

    return add_app_name


def configure_structlog(log_level: str = "INFO", json_logs: bool = True, app_name: str = "Batch Rules") -> None:
    """Configure structlog and the stdlib root logger.

    Must run before the first log call; structlog caches the processor chain
    on first use.

    Args:
        log_level: Root log level ("DEBUG", "INFO", "WARNING", "ERROR")
        json_logs: True for JSON output, False for ConsoleRenderer
        app_name: Value of the ``app`` key added to each entry
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        app_name_injector(app_name),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
    })

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from application settings (log level, renderer, app name)."""
    settings = settings or get_settings()
    configure_structlog(
        log_level=settings.log_level.upper(),
        json_logs=settings.json_logs and not settings.debug,
        app_name=settings.app_name,
    )
