"""Typed environment variable parsing helpers."""

import os
from typing import Optional

from athena_runner.errors import RunnerConfigError

_TRUTHY = ("true", "1", "yes", "on")
_FALSEY = ("false", "0", "no", "off", "")


def _read(name: str, required: bool) -> Optional[str]:
    value = os.getenv(name)
    if value is None and required:
        raise RunnerConfigError(f"Environment variable '{name}' is required but not set.")
    return value


def get_env_str(name: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """Get an environment variable as a string; blank values count as unset."""
    value = _read(name, required)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_env_int(name: str, default: Optional[int] = None, required: bool = False) -> Optional[int]:
    """Get an environment variable as an integer."""
    value = _read(name, required)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise RunnerConfigError(f"Environment variable '{name}' must be an integer, got '{value}'.")


def get_env_float(
    name: str, default: Optional[float] = None, required: bool = False
) -> Optional[float]:
    """Get an environment variable as a float."""
    value = _read(name, required)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise RunnerConfigError(f"Environment variable '{name}' must be a number, got '{value}'.")


def get_env_bool(
    name: str, default: Optional[bool] = None, required: bool = False
) -> Optional[bool]:
    """Get an environment variable as a boolean.

    Truthy: true, 1, yes, on
    Falsey: false, 0, no, off, (empty string)
    """
    value = _read(name, required)
    if value is None:
        return default

    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSEY:
        return False

    raise RunnerConfigError(f"Environment variable '{name}' must be a boolean, got '{value}'.")
