"""
Centralized Logging Configuration.

structlog over the stdlib logging module. Every module gets its logger
from get_logger(); settings come from config/settings/logging.yaml,
validated by LoggingSchema.

Structured fields in every JSON log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - Log level
    logger      - Module path (e.g., notekeeper.backend.api.rpc.router)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file
    source      - Origin context (web, cli, api, seed, internal, unknown)
    request_id  - Request correlation ID (inside an HTTP request)
    procedure   - Procedure path (inside a procedure call, e.g. notes.getAll)

Usage:
    from notekeeper.backend.core.logging import get_logger, setup_logging

    setup_logging()                                    # values from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note_id})

    # Outside of HTTP requests
    log_with_source(logger, "seed", "info", "Notes seeded", count=5)

    # Tag every record emitted while serving one call of a batch
    with procedure_context("notes.update"):
        ...

Log File:
    logs/system.jsonl (all records, filter by 'source' or 'procedure')
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from notekeeper.backend.core.config import find_project_root, load_yaml_config
from notekeeper.backend.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "api",
    "seed",
    "internal",
    "unknown",
})
"""Recognized values of the `source` field. Always set explicitly, never derived from logger names."""

# Third-party loggers kept at WARNING regardless of the configured level
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpx")

_logging_config: LoggingSchema | None = None


def _load_logging_config() -> LoggingSchema:
    """
    Load and validate config/settings/logging.yaml (cached).

    Raises:
        FileNotFoundError: If logging.yaml does not exist
        pydantic.ValidationError: If the file does not match LoggingSchema
    """
    global _logging_config
    if _logging_config is None:
        _logging_config = LoggingSchema.model_validate(load_yaml_config("logging.yaml"))
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve the log file path relative to project root."""
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _file_handler(
    file_config: FileHandlerSchema,
    formatter: logging.Formatter,
) -> RotatingFileHandler:
    log_path = _resolve_log_path(file_config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Arguments left as None fall back to logging.yaml.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Console output format ('json' or 'console')
        enable_console: Write records to stdout
        enable_file_logging: Write JSON records to the rotating log file
    """
    config = _load_logging_config()
    handlers = config.handlers

    effective_level = (level or config.level).upper()
    effective_format = format_type or config.format
    console_enabled = handlers.console.enabled if enable_console is None else enable_console
    file_enabled = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    processors = _shared_processors()

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors,
    )
    if effective_format == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=processors,
        )
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, effective_level))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if file_enabled:
        root_logger.addHandler(_file_handler(handlers.file, json_formatter))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger, typically get_logger(__name__)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Used outside of HTTP request context, where the middleware has not
    bound a source (CLI commands, database seeding).

    Raises:
        AttributeError: If level is not a valid log level

    Example:
        log_with_source(logger, "seed", "info", "Notes seeded", count=5)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)


@contextmanager
def procedure_context(path: str) -> Iterator[None]:
    """
    Bind the procedure path to every record logged inside the block.

    Request-level context (request_id, source) bound by the middleware
    is kept; only `procedure` is added and removed again on exit.
    """
    with structlog.contextvars.bound_contextvars(procedure=path):
        yield
