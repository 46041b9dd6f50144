"""Unit table: synonym normalization and approximate gram weights.

The cup weight is the liquid weight (240 g) for everything except the few
dry ingredients listed in the per-ingredient overrides. There is no density
model behind these numbers.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from recipe_narrative.reference.loader import ReferenceDataError, load_reference
from recipe_narrative.reference.matching import longest_match

logger = logging.getLogger(__name__)

ITEM = "item"
SIZE_WORDS = ("small", "medium", "large", "whole", "each")
# Grams assumed per unit when neither table knows the unit.
FALLBACK_GRAMS_PER_UNIT = 50.0

_data = load_reference("units.json", required_keys=("synonyms", "grams", "ingredient_grams"))

UNIT_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {k.lower(): v for k, v in _data["synonyms"].items()}
)
CANONICAL_UNITS = frozenset(UNIT_SYNONYMS.values())
UNIT_GRAMS: Mapping[str, float] = MappingProxyType(
    {k: float(v) for k, v in _data["grams"].items()}
)
INGREDIENT_GRAMS: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        name: MappingProxyType({u: float(g) for u, g in per_unit.items()})
        for name, per_unit in _data["ingredient_grams"].items()
    }
)

if ITEM not in CANONICAL_UNITS:
    raise ReferenceDataError("units.json must map 'item' to itself")
_unknown = sorted(set(UNIT_GRAMS) - CANONICAL_UNITS)
if _unknown:
    raise ReferenceDataError("units.json grams table has non-canonical units: " + ", ".join(_unknown))


def normalize_unit(token: str | None) -> str:
    """Map a unit token to its canonical unit; unknown tokens become 'item'."""
    if not token:
        return ITEM
    key = token.strip().lower().rstrip(".")
    return UNIT_SYNONYMS.get(key, ITEM)


def unit_pattern(include_size_words: bool = False) -> str:
    """Regex alternation of unit synonyms, longest first so 'tbsp' beats 't'."""
    tokens = [
        s for s, canonical in UNIT_SYNONYMS.items()
        if canonical != ITEM and (include_size_words or canonical not in SIZE_WORDS)
    ]
    tokens.sort(key=lambda s: (-len(s), s))
    return "|".join(re.escape(t) for t in tokens)


def to_grams(amount: float, unit: str, name: str = "") -> float:
    """Approximate weight in grams of `amount` `unit` of ingredient `name`."""
    u = normalize_unit(unit)
    override_key = longest_match(name, INGREDIENT_GRAMS.keys()) if name else None
    if override_key is not None and u in INGREDIENT_GRAMS[override_key]:
        return amount * INGREDIENT_GRAMS[override_key][u]
    factor = UNIT_GRAMS.get(u)
    if factor:
        return amount * factor
    return amount * FALLBACK_GRAMS_PER_UNIT


def convert_amount(amount: float, from_unit: str, to_unit: str, name: str = "") -> float:
    """Convert between units by way of grams."""
    src = normalize_unit(from_unit)
    dst = normalize_unit(to_unit)
    if src == dst:
        return amount
    per_target = to_grams(1, dst, name)
    if per_target <= 0:
        logger.debug("convert_amount: no weight for target unit %s; keeping amount", dst)
        return amount
    return to_grams(amount, src, name) / per_target
