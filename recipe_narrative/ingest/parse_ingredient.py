"""Turn one free-text ingredient line into a (name, amount, unit) triple.

The parser is total: every string, including an empty one, yields a
ParsedIngredient with a positive amount and a canonical unit.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Optional

from recipe_narrative.models.recipe_schema import ParsedIngredient
from recipe_narrative.reference.units import ITEM, SIZE_WORDS, normalize_unit, unit_pattern

logger = logging.getLogger(__name__)

UNICODE_FRACTIONS = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 0.33,
    "⅔": 0.67,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}
_UF = "".join(UNICODE_FRACTIONS)

# Mixed numbers must come before plain integers in the alternation.
NUMBER = (
    rf"\d+\s+\d+/\d+"
    rf"|\d+/\d+"
    rf"|\d+\s*[{_UF}]"
    rf"|\d+(?:\.\d+)?"
    rf"|\.\d+"
    rf"|[{_UF}]"
)
UNITS = unit_pattern()
SIZES = "|".join(SIZE_WORDS)

VAGUE_AMOUNTS = {
    "pinch": (0.125, "tsp"),
    "dash": (0.125, "tsp"),
    "handful": (0.5, "cup"),
}

_NUMBER_UNIT_NAME = re.compile(rf"^({NUMBER})\s*({UNITS})\.?\s+(.+)$", re.I)
_NUMBER_SIZE_NAME = re.compile(rf"^({NUMBER})\s+({SIZES})\s+(.+)$", re.I)
_VAGUE_NAME = re.compile(
    r"^(a\s+pinch|pinch|a\s+dash|dash|a\s+handful|handful)(?:es)?\s+(?:of\s+)?(.+)$", re.I
)
_NUMBER_NAME = re.compile(rf"^({NUMBER})\s+(.+)$", re.I)

_LEADING_OF = re.compile(r"^of\s+", re.I)
_LEADING_ARTICLE = re.compile(r"^(a|an|some)\s+", re.I)

_BULLET = r"(?:[-•]|\*(?!\*))"
_NUMBER_WORDS = "a|an|one|two|three|four|five|six"
_INGREDIENT_SHAPES = (
    re.compile(rf"^{_BULLET}\s*(?:{NUMBER})"),
    re.compile(rf"^{_BULLET}\s*[a-zA-Z]"),
    re.compile(rf"^(?:{NUMBER})\s*(?:{UNITS}|{SIZES})\b", re.I),
    re.compile(rf"^(?:{NUMBER})\s+[a-z]"),
    re.compile(rf"\d+\s*(?:{UNITS})\b", re.I),
    re.compile(rf"^(?:{_NUMBER_WORDS})\s+(?:{UNITS})\b", re.I),
    re.compile(r"^(?:a\s+)?(?:pinch|dash|handful)\b", re.I),
)


def parse_number(raw: str) -> float:
    """Evaluate an integer, decimal, fraction, mixed number, or Unicode fraction.

    Anything unparseable, non-finite, or non-positive resolves to 1.
    """
    s = (raw or "").strip()
    value: Optional[float] = None
    try:
        m = re.match(r"^(\d+)\s+(\d+)/(\d+)$", s)
        if m:
            value = int(m.group(1)) + int(m.group(2)) / int(m.group(3))
        elif re.match(r"^\d+/\d+$", s):
            num, denom = s.split("/")
            value = int(num) / int(denom)
        elif s and s[-1] in UNICODE_FRACTIONS:
            whole = s[:-1].strip()
            value = (int(whole) if whole else 0) + UNICODE_FRACTIONS[s[-1]]
        else:
            value = float(s)
    except (ValueError, ZeroDivisionError, OverflowError):
        logger.debug("parse_number: could not parse '%s'; defaulting to 1", raw)
        value = None
    if value is None or not math.isfinite(value) or value <= 0:
        return 1.0
    return value


def _clean_name(name: str) -> str:
    name = re.sub(r"\s+", " ", name).strip()
    return _LEADING_OF.sub("", name).strip()


def parse_ingredient_text(text: str) -> ParsedIngredient:
    """Parse e.g. '2 cups flour' into name='flour', amount=2, unit='cup'."""
    raw = text or ""
    s = re.sub(r"\s+", " ", raw).strip()

    m = _NUMBER_UNIT_NAME.match(s)
    if m:
        amount_str, unit, name = m.groups()
        return ParsedIngredient(raw=raw, name=_clean_name(name), amount=parse_number(amount_str), unit=normalize_unit(unit))

    m = _NUMBER_SIZE_NAME.match(s)
    if m:
        amount_str, size, name = m.groups()
        return ParsedIngredient(raw=raw, name=_clean_name(name), amount=parse_number(amount_str), unit=normalize_unit(size))

    m = _VAGUE_NAME.match(s)
    if m:
        vague, name = m.groups()
        word = vague.lower().split()[-1]
        amount, unit = VAGUE_AMOUNTS[word]
        return ParsedIngredient(raw=raw, name=_clean_name(name), amount=amount, unit=unit)

    m = _NUMBER_NAME.match(s)
    if m:
        amount_str, name = m.groups()
        name = _LEADING_ARTICLE.sub("", _clean_name(name)).strip()
        return ParsedIngredient(raw=raw, name=name, amount=parse_number(amount_str), unit=ITEM)

    logger.debug("parse_ingredient_text: no pattern matched '%s'; using item fallback", s)
    return ParsedIngredient(raw=raw, name=_LEADING_ARTICLE.sub("", s).strip(), amount=1.0, unit=ITEM)


def is_ingredient_line(line: str) -> bool:
    trimmed = line.strip()
    if len(trimmed) < 3:
        return False
    return any(p.search(trimmed) for p in _INGREDIENT_SHAPES)


def clean_ingredient_line(line: str) -> Optional[str]:
    """Strip list bullets, list numbering, and emphasis markers."""
    cleaned = line.strip()
    cleaned = re.sub(rf"^{_BULLET}\s*", "", cleaned)
    cleaned = re.sub(r"^\d+[.)]\s+", "", cleaned)
    cleaned = cleaned.replace("**", "").replace("__", "").strip()
    return cleaned if len(cleaned) > 2 else None
