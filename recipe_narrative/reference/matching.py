"""Canonicalize ingredient names and match them against reference table keys."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)

ALIAS_MAP: Dict[str, str] = {
    "spring onions": "green onion",
    "spring onion": "green onion",
    "scallions": "green onion",
    "scallion": "green onion",
    "garbanzo beans": "chickpeas",
    "garbanzos": "chickpeas",
    "capsicum": "bell pepper",
    "coriander leaves": "cilantro",
    "prawns": "shrimp",
    "aubergine": "eggplant",
    "courgette": "zucchini",
}

# Name fragments shorter than this never match by containment in a key.
MIN_REVERSE_MATCH = 3


def canonicalize(name: str) -> str:
    """Lowercase, drop punctuation, collapse spaces, and apply the alias map."""
    if not name:
        return ""
    s = name.lower()
    # replace hyphens with spaces
    s = s.replace("-", " ")
    # remove punctuation
    s = re.sub(r"[\.,;:()\[\]\\/\"*!?]", " ", s)
    # collapse whitespace
    s = re.sub(r"\s+", " ", s).strip()
    if s in ALIAS_MAP:
        return ALIAS_MAP[s]
    for alias, target in ALIAS_MAP.items():
        s = re.sub(r"\b" + re.escape(alias) + r"\b", target, s)
    return s


def longest_match(name: str, keys: Iterable[str]) -> Optional[str]:
    """Return the longest key matching `name`, or None.

    Keys contained in the canonical name are preferred. Only when none is
    found are keys that contain the name considered. The longest key by
    character length wins; on equal length the first key seen wins.
    """
    can = canonicalize(name)
    if not can:
        return None
    keys = list(keys)

    best: Optional[str] = None
    for key in keys:
        if key in can and (best is None or len(key) > len(best)):
            best = key
    if best is not None:
        logger.debug("longest_match: '%s' -> '%s'", can, best)
        return best

    if len(can) < MIN_REVERSE_MATCH:
        return None
    for key in keys:
        if can in key and (best is None or len(key) > len(best)):
            best = key
    if best is not None:
        logger.debug("longest_match: '%s' contained in '%s'", can, best)
    return best
