"""structlog setup for the room server.

Environment variables:
- HOUSIE_LOG_FORMAT: "json" for one JSON object per line, "console" or unset
  for human-readable output.
- HOUSIE_LOG_LEVEL: standard level name, INFO when unset.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FORMAT_ENV = "HOUSIE_LOG_FORMAT"
LOG_LEVEL_ENV = "HOUSIE_LOG_LEVEL"
LOG_FILE_NAME_FORMAT = "housie-%Y%m%d-%H%M%S.log"

_LOG_FORMATS = frozenset({"json", "console", ""})
_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})

# Loggers that would otherwise drown room events at INFO.
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _enum_value(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Replace Enum instances (top level, in dicts and in lists) with their .value."""
    for key, value in event_dict.items():
        if isinstance(value, dict):
            event_dict[key] = {k: _enum_value(v) for k, v in value.items()}
        elif isinstance(value, (list, tuple)):
            event_dict[key] = [_enum_value(v) for v in value]
        else:
            event_dict[key] = _enum_value(value)
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def _env_choice(name: str, default: str, allowed: frozenset[str]) -> str:
    value = os.environ.get(name, default).strip().lower()
    if value not in allowed:
        msg = f"Invalid {name}={value!r}. Expected one of: {', '.join(sorted(v or '<unset>' for v in allowed))}."
        raise ValueError(msg)
    return value


def _resolve_json_mode() -> bool:
    return _env_choice(LOG_FORMAT_ENV, "", _LOG_FORMATS) == "json"


def _resolve_log_level() -> int:
    return logging.getLevelNamesMapping()[_env_choice(LOG_LEVEL_ENV, "info", _LOG_LEVELS).upper()]


def configure_structlog() -> None:
    """Route structlog through stdlib logging.

    Exceptions are rendered by the handler formatter, not here, so file and
    stdout output each format a traceback once.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _build_formatter(*, json_mode: bool, colors: bool = False) -> logging.Formatter:
    renderer = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _reset_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def setup_logging(log_dir: Path | str | None = None, level: int | None = None) -> Path | None:
    """Install stdout logging, plus a per-process log file when log_dir is set.

    Returns the log file path, or None when no file was opened. Pytest runs
    never open a file.
    """
    json_mode = _resolve_json_mode()
    configure_structlog()

    root = logging.getLogger()
    _reset_handlers(root)
    root.setLevel(level if level is not None else _resolve_log_level())
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_build_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root.addHandler(console)

    if log_dir is None or _is_test():
        return None

    target_dir = Path(log_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / datetime.now(tz=UTC).strftime(LOG_FILE_NAME_FORMAT)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(_build_formatter(json_mode=json_mode))
    root.addHandler(file_handler)
    return log_file
