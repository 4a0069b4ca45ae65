"""Environment overrides for mediasync settings."""

from __future__ import annotations

import os


class ConfigurationError(RuntimeError):
    """Raised when an environment override cannot be used."""


def optional_positive_int(name: str) -> int | None:
    """Return the positive integer in ``name``, or ``None`` when it is unset or blank."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be positive, got {parsed}")
    return parsed
