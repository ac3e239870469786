"""Logging and profiling for the decoration engine, backed by telelog.

Each layer logs under its own name (``ENGINE``, ``MARKERS``, ``CONFIG``,
``ACTIONS``, ``ADAPTER``). Structured events are members of ``Event``; an
event is written to the layer its name starts with, so ``Event.RESCAN``
lands on ``codemark.engine`` unless the caller picks another logger.

The Textual demo owns the terminal, so its ``demo`` preset logs to a file.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ROOT = "codemark"
ENGINE = f"{ROOT}.engine"
MARKERS = f"{ROOT}.markers"
CONFIG = f"{ROOT}.config"
ACTIONS = f"{ROOT}.actions"
ADAPTER = f"{ROOT}.adapters.textual"

PRESETS = ("development", "quiet", "demo")
DEMO_LOG_FILE = "codemark-demo.log"


class Event(str, Enum):
    """Structured events, named ``<layer>.<what happened>``."""

    RESCAN = "engine.rescan"
    RECOMPOSE = "engine.recompose"
    SKIP = "engine.skip"
    SHADOWED_PREFIX = "markers.shadowed_prefix"
    UNKNOWN_KEY = "config.unknown_key"

    @property
    def logger_name(self) -> str:
        return f"{ROOT}.{self.value.partition('.')[0]}"


_LOGGERS: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"CODEMARK_{name}")


def _build_config(preset: Optional[str]) -> Any:
    config = tl.Config()
    log_file = _env("LOG_FILE")

    if preset is None:
        config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())
        config.with_console_output(_env("LOG_CONSOLE") != "0")
    elif preset == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
    elif preset == "quiet":
        config.with_min_level("ERROR")
        config.with_console_output(False)
    elif preset == "demo":
        config.with_min_level("DEBUG")
        config.with_console_output(False)
        log_file = log_file or DEMO_LOG_FILE
    else:
        raise ValueError(
            f"Unknown telemetry preset '{preset}' (expected one of {PRESETS})."
        )

    if log_file:
        config.with_file_output(log_file)
    # spans rely on logger.profile, which is a no-op unless profiling is on
    config.with_profiling(True)
    return config


def configure(preset: Optional[str] = None) -> None:
    """Rebuild the telelog config from ``preset`` or ``CODEMARK_*`` variables.

    Without a preset, ``CODEMARK_LOG_LEVEL`` (default ``INFO``),
    ``CODEMARK_LOG_FILE`` and ``CODEMARK_LOG_CONSOLE=0`` are honoured.
    Cached loggers are dropped so the next lookup picks up the new config.
    """

    global _CONFIG
    _CONFIG = _build_config(preset)
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or ROOT
    logger = _LOGGERS.get(logger_name)
    if logger is None:
        if _CONFIG is None:
            configure()
        logger = tl.Logger.with_config(logger_name, _CONFIG)
        _LOGGERS[logger_name] = logger
    return logger


def _emit(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    fields = [(key, str(value)) for key, value in data.items()]
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, fields)
    else:
        getattr(logger, level)(f"{message} {dict(fields)}")


def record_event(
    event: Event,
    *,
    level: str = "debug",
    logger_name: Optional[str] = None,
    **data: Any,
) -> None:
    """Log ``event`` with ``data`` as structured fields."""

    event = Event(event)
    logger = get_logger(logger_name or event.logger_name)
    _emit(logger, level, f"event::{event.value}", {"event": event.value, **data})


@dataclass
class SpanHandle:
    logger: Any
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def fail(self, reason: str) -> None:
        _emit(
            self.logger,
            "error",
            "span::fail",
            {"span": self.name, **self.metadata, "reason": reason},
        )


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the enclosed block; ``component`` also tracks it by that name.

    ``metadata`` is pushed as logger context for the duration of the block.
    An exception is logged as ``span::fail`` with the metadata and re-raised.
    """

    logger = get_logger(logger_name)
    context = {key: str(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        logger.add_context(key, value)

    handle = SpanHandle(logger, name, dict(context))
    try:
        with ExitStack() as stack:
            if component:
                stack.enter_context(logger.track_component(component))
            stack.enter_context(logger.profile(name))
            yield handle
    except Exception as exc:
        handle.fail(str(exc))
        raise
    finally:
        for key in context:
            logger.remove_context(key)


__all__ = [
    "ACTIONS",
    "ADAPTER",
    "CONFIG",
    "ENGINE",
    "Event",
    "MARKERS",
    "PRESETS",
    "ROOT",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
