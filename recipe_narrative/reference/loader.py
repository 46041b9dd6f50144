"""Load the static, versioned reference data shipped with the package.

The JSON files live next to this module so they can be edited without
touching code. They are read once at import time and never written.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"


class ReferenceDataError(RuntimeError):
    """Raised at process start when a reference data file is missing or malformed."""


def load_reference(filename: str, required_keys: tuple[str, ...] = ()) -> dict:
    path = DATA_DIR / filename
    if not path.exists():
        raise ReferenceDataError(f"Reference data file not found: {path}")
    try:
        with open(path, "r", encoding="utf8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as e:
        raise ReferenceDataError(f"Reference data file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ReferenceDataError(f"Reference data file {path} must hold a JSON object")
    missing = [k for k in required_keys if k not in data]
    if missing:
        raise ReferenceDataError(
            f"Reference data file {path} is missing keys: " + ", ".join(missing)
        )
    logger.debug("Loaded reference data %s (version %s)", filename, data.get("version", "-"))
    return data
