"""Environment and ``.env`` configuration for the command-line tools.

Purpose
-------
Resolve the file path, trace level and server options used by the CLI from
explicit arguments, environment variables, and an optional ``.env`` file.

Contents
--------
* :data:`DOTENV_ENV_VAR` - toggle that enables ``.env`` loading.
* :func:`should_use_dotenv` / :func:`enable_dotenv` - dotenv handling.
* :class:`Settings` and :func:`build_settings` - merged configuration.

System Role
-----------
Only the CLI reads configuration from the environment. The library API
(:class:`lib_log_rotate.logger.Logger`) takes plain arguments so tests and host
applications never depend on process-wide state.

Precedence (highest first): explicit argument, environment variable, default.
``.env`` values never override variables that are already set.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from .adapters.static_server import DEFAULT_DIRECTORY, DEFAULT_PORT
from .domain.levels import TraceLevel
from .logger import DEFAULT_FILE_PATH, DEFAULT_TRACE_LEVEL

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LOG_USE_DOTENV"
ENV_FILE = "LOG_FILE"
ENV_TRACE_LEVEL = "LOG_TRACE_LEVEL"
ENV_SERVE_PORT = "LOG_SERVE_PORT"
ENV_SERVE_DIRECTORY = "LOG_SERVE_DIRECTORY"
ENV_DEMO_INTERVAL = "LOG_DEMO_INTERVAL"

DEFAULT_DEMO_INTERVAL = 5.0

_TRUTHY = {"1", "true", "yes", "on"}

_DOTENV_LOADED: Path | None = None


def _env_bool(value: str | None, default: bool) -> bool:
    """Interpret ``1/true/yes/on`` style strings.

    Examples
    --------
    >>> _env_bool(None, default=True)
    True
    >>> _env_bool(" On ", default=False)
    True
    >>> _env_bool("0", default=True)
    False
    """
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` should be loaded.

    An explicit CLI flag wins over the :data:`DOTENV_ENV_VAR` toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(explicit=None, env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    return _env_bool(env_value, default=False)


def enable_dotenv(search_from: str | os.PathLike[str] | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards from ``search_from``.

    Returns the loaded path or ``None`` when no file was found. Variables that
    are already present in the environment keep their values. Repeated calls
    load the file only once.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED
    if search_from is None:
        candidate = find_dotenv(usecwd=True)
    else:
        candidate = _find_upwards(Path(search_from))
    if not candidate:
        LOGGER.debug("no .env file found")
        return None
    path = Path(candidate).resolve()
    load_dotenv(path, override=False)
    _DOTENV_LOADED = path
    LOGGER.debug("loaded environment from %s", path)
    return path


def _find_upwards(start: Path) -> str:
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return str(candidate)
    return ""


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


@dataclass(slots=True, frozen=True)
class Settings:
    """Resolved configuration for the CLI commands."""

    file_path: Path
    trace_level: TraceLevel
    serve_port: int
    serve_directory: Path
    demo_interval: float


def build_settings(
    *,
    file_path: str | os.PathLike[str] | None = None,
    trace_level: TraceLevel | int | str | None = None,
    serve_port: int | None = None,
    serve_directory: str | os.PathLike[str] | None = None,
    demo_interval: float | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Merge explicit values with environment overrides and defaults.

    Raises
    ------
    ValueError
        When an environment value cannot be parsed or is out of range.

    Examples
    --------
    >>> settings = build_settings(environ={"LOG_TRACE_LEVEL": "warning", "LOG_SERVE_PORT": "9000"})
    >>> settings.trace_level, settings.serve_port
    (<TraceLevel.WARNING: 3>, 9000)
    >>> build_settings(trace_level="error", environ={"LOG_TRACE_LEVEL": "info"}).trace_level
    <TraceLevel.ERROR: 4>
    """
    env = os.environ if environ is None else environ

    resolved_file = Path(file_path) if file_path is not None else Path(env.get(ENV_FILE) or DEFAULT_FILE_PATH)
    resolved_level = TraceLevel.coerce(trace_level if trace_level is not None else env.get(ENV_TRACE_LEVEL) or DEFAULT_TRACE_LEVEL)
    resolved_port = serve_port if serve_port is not None else _parse_int(env.get(ENV_SERVE_PORT), DEFAULT_PORT, ENV_SERVE_PORT)
    if not 0 < resolved_port < 65536:
        raise ValueError(f"Port out of range: {resolved_port}")
    resolved_directory = Path(serve_directory) if serve_directory is not None else Path(env.get(ENV_SERVE_DIRECTORY) or DEFAULT_DIRECTORY)
    resolved_interval = (
        demo_interval if demo_interval is not None else _parse_float(env.get(ENV_DEMO_INTERVAL), DEFAULT_DEMO_INTERVAL, ENV_DEMO_INTERVAL)
    )
    if resolved_interval < 0:
        raise ValueError(f"Demo interval must not be negative: {resolved_interval}")

    return Settings(
        file_path=resolved_file,
        trace_level=resolved_level,
        serve_port=resolved_port,
        serve_directory=resolved_directory,
        demo_interval=resolved_interval,
    )


def _parse_int(raw: str | None, default: int, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _parse_float(raw: str | None, default: float, name: str) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


__all__ = [
    "DOTENV_ENV_VAR",
    "Settings",
    "build_settings",
    "enable_dotenv",
    "should_use_dotenv",
]
