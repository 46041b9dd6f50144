"""Runtime settings for recipe-narrative, read from the environment.

The CLI loads a .env file before this module is imported, so values placed
there are visible here. Other modules import the `settings` instance.
"""
from __future__ import annotations

from dataclasses import dataclass
import os


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


def _get_int(name: str, default: int | None = None) -> int | None:
    v = _get(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        # validate_settings() reports this with a readable message
        return default


@dataclass
class Settings:
    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)

    # Block splitting: candidate blocks this short (in characters) are noise
    MIN_BLOCK_CHARS: int = _get_int("MIN_BLOCK_CHARS", 50)

    # Seed for the random image fallback; unset means unseeded
    IMAGE_SEED: int | None = _get_int("IMAGE_SEED", None)


settings = Settings()


def validate_settings() -> None:
    """Validate numeric settings and raise a helpful RuntimeError if malformed.

    Reads the raw environment again so a .env loaded after import is honoured.
    """
    bad = []
    for name in ("MIN_BLOCK_CHARS", "IMAGE_SEED"):
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            continue
        try:
            int(raw)
        except ValueError:
            bad.append(f"{name}={raw!r} (expected an integer)")
    if bad:
        msg = (
            "Invalid environment variables: "
            + ", ".join(bad)
            + "\nPlease fix them in your .env or environment and try again."
        )
        raise RuntimeError(msg)
