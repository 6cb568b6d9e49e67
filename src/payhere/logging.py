"""Logging for the PayHere SDK.

SDK modules log through ``get_logger``, which binds a structlog logger to
a stdlib ``logging.Logger`` named after the module. Events therefore go
wherever the host application's stdlib logging sends them; nothing is
printed when the application has not set up logging.

``configure_logging`` is an optional one-call setup for applications that
want rendered SDK events:
- JSON lines (production) or colored console output (development)
- Credential masking (secrets, tokens, auth headers, signatures, card numbers)
- Optional log file rotated at midnight
"""

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, MutableMapping

import structlog

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"  # "json" or "console"
DEFAULT_LOG_RETENTION_DAYS = 30

# Keys whose values must never reach a log sink
SENSITIVE_PATTERNS = [
    re.compile(r".*token.*", re.IGNORECASE),
    re.compile(r".*secret.*", re.IGNORECASE),
    re.compile(r".*password.*", re.IGNORECASE),
    re.compile(r".*credential.*", re.IGNORECASE),
    re.compile(r".*digest.*", re.IGNORECASE),
    re.compile(r"authorization", re.IGNORECASE),
    re.compile(r"md5sig|hash", re.IGNORECASE),
    re.compile(r"card_no", re.IGNORECASE),
]

MASK = "***REDACTED***"

# Event names are passed under this key and are never masked
_EVENT_KEY = "event"


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """structlog logger writing to the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
        **initial_values,
    )


def _is_sensitive_key(key: str) -> bool:
    return key != _EVENT_KEY and any(p.fullmatch(key) for p in SENSITIVE_PATTERNS)


def _mask_sensitive_value(value: Any) -> Any:
    """Mask a sensitive value, keeping a short prefix of long strings."""
    if isinstance(value, str) and value:
        return value[:4] + MASK if len(value) > 8 else MASK
    if value is None:
        return value
    return MASK


def _mask_mapping(data: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    result = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            result[key] = _mask_sensitive_value(value)
        elif isinstance(value, dict):
            result[key] = _mask_mapping(value)
        elif isinstance(value, list):
            result[key] = [
                _mask_mapping(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


class SensitiveDataFilter:
    """structlog processor that masks credentials in event dictionaries."""

    def __call__(
        self,
        logger: logging.Logger,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        return _mask_mapping(event_dict)


def _pre_chain() -> list[structlog.types.Processor]:
    """Processors shared by SDK events and plain stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        SensitiveDataFilter(),
    ]


def _handlers(
    enable_console: bool,
    log_file: str | Path | None,
    retention_days: int,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            TimedRotatingFileHandler(
                filename=str(path),
                when="midnight",
                backupCount=retention_days,
                encoding="utf-8",
            )
        )
    return handlers


def configure_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: str | Path | None = None,
    retention_days: int = DEFAULT_LOG_RETENTION_DAYS,
    enable_console: bool = True,
) -> None:
    """Render SDK and application logs through structlog.

    Replaces the root logger's handlers.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" or "console".
        log_file: Optional log file path.
        retention_days: Rotated files to keep.
        enable_console: Whether to write to stdout.

    Example:
        >>> configure_logging(level="DEBUG", log_format="console")
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    pre_chain = _pre_chain()
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    handlers = _handlers(enable_console, log_file, retention_days)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    get_logger(__name__).info(
        "logging_configured",
        level=level,
        format=log_format,
        log_file=str(log_file) if log_file else None,
    )


__all__ = [
    "configure_logging",
    "get_logger",
    "SensitiveDataFilter",
    "SENSITIVE_PATTERNS",
    "MASK",
]
