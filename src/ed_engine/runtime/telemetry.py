"""Logging and timing for the editor, on top of telelog.

Editor output goes to stdout, so telelog's console sink stays off unless
``ED_ENGINE_LOG_CONSOLE`` is set. Everything else is read from ``ED_ENGINE_*``
variables when the module is first imported; call :func:`configure` to swap
the configuration later (tests do this).

Public surface:

* ``get_logger(name)`` -- cached ``telelog.Logger``
* ``record_event(name, level=..., data=...)`` -- one structured record
* ``span(name, ...)`` -- profile a block, track it as a component, and attach
  metadata as logger context while it runs
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "ED_ENGINE_"
DEFAULT_LOGGER_NAME = "ed_engine"

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def _getenv(name: str) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name)


def _flag(name: str) -> bool:
    return (_getenv(name) or "").lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class TelemetryConfig:
    """Plain view of the ``ED_ENGINE_LOG_*`` settings."""

    level: str = "WARNING"
    console: bool = False
    colored: bool = True
    json: bool = False
    file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        return cls(
            level=(_getenv("LOG_LEVEL") or "WARNING").upper(),
            console=_flag("LOG_CONSOLE"),
            colored=not _flag("NO_COLOR"),
            json=_flag("LOG_JSON"),
            file=_getenv("LOG_FILE") or "",
            buffered=_flag("LOG_BUFFERED"),
            buffer_size=int(_getenv("LOG_BUFFER_SIZE") or 2048),
        )

    def build(self) -> Any:
        """Translate into a ``telelog.Config``."""

        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.file:
            config.with_file_output(self.file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        return config


def configure(config: Optional[Any] = None) -> None:
    """Install ``config`` (a ``TelemetryConfig`` or a ready ``telelog.Config``).

    With no argument the environment is read again. Cached loggers are
    dropped so the next ``get_logger`` call picks up the change.
    """

    global _config
    if config is None:
        config = TelemetryConfig.from_env()
    if isinstance(config, TelemetryConfig):
        config = config.build()
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    name = name or DEFAULT_LOGGER_NAME
    logger = _loggers.get(name)
    if logger is None:
        if _config is None:
            configure()
        logger = tl.Logger.with_config(name, _config)
        _loggers[name] = logger
    return logger


def _text(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _emit(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    """Log ``message`` at ``level``, passing ``data`` as key/value pairs.

    Falls back to appending the pairs to the message when the logger has no
    ``<level>_with`` variant.
    """

    level = level.lower()
    pairs: List[Tuple[str, str]] = [(str(k), _text(v)) for k, v in data.items()]
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Write an ``event::<name>`` record carrying ``data``."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; collects metadata for records written inside it."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def note(self, message: str, **extra: Any) -> None:
        self._write("debug", message, extra)

    def fail(self, reason: str) -> None:
        self._write("error", "span::fail", {"reason": reason})

    def _write(self, level: str, message: str, extra: Dict[str, Any]) -> None:
        data: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            data["component"] = self.component
        data.update(extra)
        _emit(self.logger, level, message, data)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    expected: Tuple[type[BaseException], ...] = (),
) -> Iterator[SpanHandle]:
    """Time the enclosed block with ``logger.profile(name)``.

    ``component`` additionally wraps the block in ``track_component``.
    ``metadata`` is pushed as logger context for the duration of the block.
    Exceptions escaping the block are logged as ``span::fail`` unless they are
    instances of ``expected`` (the editor's ordinary user errors).
    """

    logger = get_logger(logger_name)
    handle = SpanHandle(logger=logger, name=name, component=component)
    with ExitStack() as stack:
        for key, value in (metadata or {}).items():
            handle.add_metadata(key, value)
            logger.add_context(key, handle.metadata[key])
            stack.callback(logger.remove_context, key)
        if component:
            stack.enter_context(logger.track_component(component))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            if not isinstance(exc, expected):
                handle.fail(str(exc))
            raise


configure()

__all__ = [
    "SpanHandle",
    "TelemetryConfig",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
