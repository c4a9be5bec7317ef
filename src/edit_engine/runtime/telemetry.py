"""Logging, profiling and structured events for the editing engine.

All engine modules log through telelog, but only via this module. Settings
come from ``EDIT_ENGINE_*`` environment variables unless a host calls
:func:`configure` with explicit settings or one of the named presets.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "EDIT_ENGINE_"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Plain description of a telelog configuration."""

    level: str = "INFO"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            level=(env("LOG_LEVEL") or "INFO").upper(),
            console=not env_flag("DISABLE_CONSOLE", False),
            colored=not env_flag("NO_COLOR", False),
            json=env_flag("LOG_JSON", False),
            log_file=env("LOG_FILE") or "",
            buffered=env_flag("LOG_BUFFERED", False),
            buffer_size=int(env("LOG_BUFFER_SIZE") or "2048"),
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG"),
    "production": TelemetrySettings(
        console=False, log_file="edit_engine.log", buffered=True
    ),
    # Per-keystroke spans are noisy; keep them out of the terminal.
    "performance": TelemetrySettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="edit_engine-performance.log",
        buffered=True,
    ),
}

_LOGGERS: MutableMapping[str, Any] = {}
_ACTIVE: Optional[Any] = None


def _preset(name: str) -> TelemetrySettings:
    try:
        settings = PRESETS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown preset '{name}'.") from None
    override = env("LOG_FILE")
    return replace(settings, log_file=override) if override else settings


def configure(
    *,
    settings: Optional[TelemetrySettings] = None,
    preset: Optional[str] = None,
    config: Optional[Any] = None,
) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    Exactly one of ``settings``, ``preset`` (``"development"``,
    ``"production"``, ``"performance"``) or a ready ``tl.Config`` may be
    given; with none of them the environment is read again.
    """

    global _ACTIVE
    if sum(option is not None for option in (settings, preset, config)) > 1:
        raise ValueError("Provide only one of `settings`, `preset` or `config`.")

    if preset is not None:
        settings = _preset(preset)
    if config is None:
        config = (settings or TelemetrySettings.from_env()).to_config()
    else:
        config.with_profiling(True)

    _ACTIVE = config
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached telelog logger for ``name`` (default ``edit_engine``)."""

    logger_name = name or env("LOGGER") or "edit_engine"
    logger = _LOGGERS.get(logger_name)
    if logger is None:
        if _ACTIVE is None:
            configure()
        logger = tl.Logger.with_config(logger_name, _ACTIVE)
        _LOGGERS[logger_name] = logger
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _emit(logger: Any, level: Any, message: str, payload: Dict[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str | Any = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; collects metadata reported on failure."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``component=True`` also tracks the block as a telelog component of the
    same name; a string picks a different component name. ``metadata`` is
    pushed as logger context while the block runs. An exception escaping
    the block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    handle = SpanHandle(log, name, component_name)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)
        log.add_context(key, handle.metadata[key])
    pushed = list(handle.metadata)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in pushed:
                log.remove_context(key)


__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "span",
]
