"""Telemetry for gstring, built on telelog.

Only four entry points are used by the rest of the package:

``configure(...)`` -- pick a preset or adopt an explicit ``telelog.Config``
``get_logger(name)`` -- cached logger bound to the active configuration
``record_event(name, ...)`` -- one structured ``event::<name>`` record
``span(name, ...)`` -- profile an edit and tag it with a component

Defaults come from ``GSTRING_*`` environment variables and stay at
``WARNING`` so that importing the library is silent.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "GSTRING_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "gstring")
DEFAULT_LOG_LEVEL = "WARNING"

# Preset name -> ordered ``with_<setting>`` calls applied to a fresh Config.
PRESETS: Dict[str, Tuple[Tuple[str, Any], ...]] = {
    "development": (
        ("min_level", "DEBUG"),
        ("console_output", True),
        ("colored_output", True),
        ("json_format", False),
    ),
    "production": (
        ("min_level", "INFO"),
        ("console_output", False),
        ("file_output", "gstring.log"),
        ("buffering", True),
    ),
    "performance": (
        ("min_level", "DEBUG"),
        ("console_output", False),
        ("buffering", True),
        ("json_format", True),
        ("file_output", "gstring-performance.log"),
    ),
}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    raw = env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _apply(config: Any, settings: Tuple[Tuple[str, Any], ...]) -> Any:
    for setting, value in settings:
        getattr(config, f"with_{setting}")(value)
    config.with_profiling(True)
    return config


def _preset_settings(preset: str) -> Tuple[Tuple[str, Any], ...]:
    try:
        settings = PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{preset}'; expected one of {sorted(PRESETS)}."
        ) from None
    log_file = env("LOG_FILE")
    if log_file:
        settings = tuple(
            (name, log_file if name == "file_output" else value)
            for name, value in settings
        )
    return settings


def _env_settings() -> Tuple[Tuple[str, Any], ...]:
    settings: List[Tuple[str, Any]] = [
        ("min_level", (env("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper())
    ]
    console = not env_flag("DISABLE_CONSOLE", False)
    settings.append(("console_output", console))
    if console:
        settings.append(("colored_output", not env_flag("NO_COLOR", False)))
    if env_flag("LOG_JSON", False):
        settings.append(("json_format", True))
    log_file = env("LOG_FILE")
    if log_file:
        settings.append(("file_output", log_file))
    if env_flag("LOG_BUFFERED", False):
        settings.append(("buffering", True))
        settings.append(("buffer_size", env_int("LOG_BUFFER_SIZE", 2048)))
    return tuple(settings)


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active configuration and drop cached loggers.

    ``preset`` names one of ``PRESETS``; ``config`` is a ready ``tl.Config``.
    With neither, the configuration is rebuilt from the environment.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset is not None:
        config = _apply(tl.Config(), _preset_settings(preset))
    elif config is None:
        config = _apply(tl.Config(), _env_settings())
    else:
        config.with_profiling(True)

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = _apply(tl.Config(), _env_settings())
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _log(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Log with structured pairs when the logger has ``<level>_with``."""

    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _stringify(val)) for key, val in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """What ``span`` yields: the logger plus the span's identifying payload."""

    logger: Any
    payload: Dict[str, Any]

    def fail(self, reason: str) -> None:
        _log(self.logger, "error", "span::fail", {**self.payload, "reason": reason})


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``, tracked under ``component`` if given.

    ``metadata`` is attached as logger context for the duration of the block.
    An exception escaping the block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    payload: Dict[str, Any] = {"span": name, **context}
    if component:
        payload["component"] = component

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))

        handle = SpanHandle(logger=log, payload=payload)
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "ENV_PREFIX",
    "PRESETS",
    "SpanHandle",
    "configure",
    "env",
    "env_flag",
    "env_int",
    "get_logger",
    "record_event",
    "span",
]
