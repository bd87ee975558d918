from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from dotenv import find_dotenv, load_dotenv

from weather_agent.errors import ConfigError

__all__ = ["Settings", "load_settings", "DEFAULT_WEATHER_URL"]

DEFAULT_WEATHER_URL: Final = "https://api.open-meteo.com/v1/forecast"
DEFAULT_MAX_LOOPS: Final = 5
DEFAULT_TIMEOUT: Final = 60.0

API_KEY_VAR: Final = "DASH_SCOPE_API_KEY"
BASE_URL_VAR: Final = "DASH_SCOPE_URL"
MODEL_VAR: Final = "DASH_SCOPE_MODEL"
MAX_LOOPS_VAR: Final = "WEATHER_AGENT_MAX_LOOPS"
WEATHER_URL_VAR: Final = "WEATHER_AGENT_WEATHER_URL"
TIMEOUT_VAR: Final = "WEATHER_AGENT_TIMEOUT"


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide configuration, loaded once at start-up."""

    api_key: str
    base_url: str
    model: str
    max_loops: int = DEFAULT_MAX_LOOPS
    weather_url: str = DEFAULT_WEATHER_URL
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"Settings(api_key='***', base_url={self.base_url!r}, model={self.model!r}, "
            f"max_loops={self.max_loops}, weather_url={self.weather_url!r}, "
            f"timeout={self.timeout})"
        )


def _required(env_var: str) -> str:
    try:
        value = os.environ[env_var]
    except KeyError as exc:
        raise ConfigError(f"{env_var} missing") from exc
    if not value.strip():
        raise ConfigError(f"{env_var} is empty")
    return value


def _int_var(env_var: str, default: int) -> int:
    raw = os.environ.get(env_var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{env_var} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{env_var} must not be negative, got {value}")
    return value


def _float_var(env_var: str, default: float) -> float:
    raw = os.environ.get(env_var)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{env_var} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{env_var} must be positive, got {value}")
    return value


def load_settings(
    env_file: str | os.PathLike[str] | None = None,
    *,
    require_env_file: bool = True,
) -> Settings:
    """
    Load the ``.env`` file into the environment and build ``Settings``.

    Args:
        env_file: Explicit path to the ``.env`` file. If None, it is searched
                  for from the current working directory upwards.
        require_env_file: Treat a missing ``.env`` file as a fatal error.

    Raises:
        ConfigError: if the env file or a required variable is missing, or a
                     value cannot be parsed.
    """
    if env_file is None:
        path = find_dotenv(usecwd=True)
    else:
        path = str(env_file) if Path(env_file).is_file() else ""

    if not path:
        if require_env_file:
            raise ConfigError("Error loading .env file")
    else:
        load_dotenv(path)

    return Settings(
        api_key=_required(API_KEY_VAR),
        base_url=_required(BASE_URL_VAR),
        model=_required(MODEL_VAR),
        max_loops=_int_var(MAX_LOOPS_VAR, DEFAULT_MAX_LOOPS),
        weather_url=os.environ.get(WEATHER_URL_VAR) or DEFAULT_WEATHER_URL,
        timeout=_float_var(TIMEOUT_VAR, DEFAULT_TIMEOUT),
    )
