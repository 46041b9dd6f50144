"""Pull title, sections, and metadata out of one recipe block.

Lines are walked once, top to bottom. The current section is a local
`Section` value, so the extractor keeps no state between calls.
"""

from __future__ import annotations

import logging
import math
import re
from enum import Enum
from typing import List, Optional

from recipe_narrative.ingest.parse_ingredient import clean_ingredient_line, is_ingredient_line
from recipe_narrative.models.recipe_schema import Difficulty, ParsedBlock

logger = logging.getLogger(__name__)


class Section(Enum):
    TITLE = "title"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"


INGREDIENT_HEADERS = ("ingredient", "what you need", "you'll need", "you will need")
INSTRUCTION_HEADERS = ("instruction", "direction", "steps", "method", "how to make", "preparation")
# Header lines longer than this (without a trailing colon) are treated as prose.
MAX_HEADER_CHARS = 40

CUISINES = (
    "italian", "mexican", "asian", "chinese", "indian", "mediterranean", "french",
    "thai", "american", "japanese", "korean", "middle eastern", "greek",
)
DIETARY_KEYWORDS = (
    ("vegetarian", ("vegetarian",)),
    ("vegan", ("vegan",)),
    ("gluten-free", ("gluten-free", "gluten free")),
    ("dairy-free", ("dairy-free", "dairy free")),
    ("low-carb", ("low-carb", "low carb", "keto")),
    ("high-protein", ("high-protein", "high protein")),
    ("healthy", ("healthy", "nutritious")),
)
DIFFICULTY_WORDS = (
    (Difficulty.EASY, ("easy", "simple", "beginner")),
    (Difficulty.MEDIUM, ("medium", "intermediate", "moderate")),
    (Difficulty.HARD, ("hard", "difficult", "advanced", "expert")),
)

COOKING_VERBS = (
    "heat", "cook", "add", "mix", "stir", "combine", "place", "cut", "chop", "dice",
    "slice", "sauté", "saute", "simmer", "boil", "bake", "fry", "grill", "roast", "season",
    "serve", "garnish", "remove", "drain", "whisk", "blend", "fold", "pour", "preheat",
    "transfer", "toss", "marinate", "let", "bring", "reduce", "spread", "top",
)
PREPOSITIONAL_OPENERS = (
    "in a", "using a", "with a", "on a", "over", "under", "until", "when", "while",
    "after", "before", "meanwhile", "once",
)

_TIME_LABEL = re.compile(
    r"^(?:(?:total|cook(?:ing)?|prep(?:aration)?|bake|baking)\s*time|ready in|time|(?:prep|cook|total)\s*:)",
    re.I,
)
_SERVINGS_LABEL = re.compile(r"^(?:servings?|serves|yield|yields|makes|portions?)\b", re.I)
_DIFFICULTY_LABEL = re.compile(r"^(?:difficulty|skill level|level)\b", re.I)
_CUISINE_LABEL = re.compile(r"^(?:cuisine|style)\b", re.I)
_DESCRIPTION_LABEL = re.compile(r"^description\b", re.I)
_DIETARY_LABEL = re.compile(r"^(?:dietary|diet)\b", re.I)

_RECIPE_N = re.compile(r"recipe\s*\d+\s*:", re.I)
_LIST_ITEM = re.compile(r"^(?:\d+[.)]\s|[-•]\s|\*\s)")
_STEP_PREFIX = re.compile(r"^step\s*\d+\s*[:.)-]?\s*", re.I)
_DURATION = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*(?:-|to|–)\s*\d+(?:\.\d+)?)?\s*(hours?|hrs?|h|minutes?|mins?|m)\b",
    re.I,
)
_SERVING_PATTERNS = (
    re.compile(r"(\d+)\s*(?:servings?|portions?|people|persons?)", re.I),
    re.compile(r"serves?\s*:?\s*(\d+)", re.I),
    re.compile(r"servings?\W*(\d+)", re.I),
    re.compile(r"makes?\s*:?\s*(\d+)", re.I),
    re.compile(r"yields?\s*:?\s*(\d+)", re.I),
    re.compile(r"portions?\W*(\d+)", re.I),
)


def strip_markup(line: str) -> str:
    """Drop emphasis, heading marks, and a leading bullet."""
    s = line.strip()
    s = re.sub(r"\*\*|__", "", s)
    s = re.sub(r"^#+\s*", "", s)
    s = re.sub(r"^[-•*]\s*", "", s)
    return s.strip()


def extract_title(line: str) -> str:
    title = re.sub(r"\*\*|__", "", line).strip()
    title = re.sub(r"^#+\s*", "", title)
    title = re.sub(r"^recipe\s*\d+\s*[:.\-]\s*", "", title, flags=re.I)
    title = re.sub(r"^\d+[.)]\s*", "", title)
    title = re.sub(r"^[-•*]\s*", "", title)
    title = title.strip()

    # "Dinner idea: Lemon Chicken" -> "Lemon Chicken"
    if ":" in title:
        after = title.split(":", 1)[1].strip()
        if after:
            title = after
    return title.rstrip(":").strip()


def _duration_minutes(text: str) -> Optional[int]:
    total = 0.0
    found = False
    for amount, unit in _DURATION.findall(text):
        found = True
        if unit.lower().startswith("h"):
            total += float(amount) * 60
        else:
            total += float(amount)
    if found:
        # an absurd duration leaves the time unset
        return int(round(total)) if math.isfinite(total) else None
    bare = re.search(r"(\d+)", text)
    if not bare:
        return None
    try:
        minutes = int(bare.group(1))
        float(minutes)
    except (ValueError, OverflowError):
        return None
    return minutes


def extract_time(line: str) -> Optional[int]:
    """Minutes from a time line; a 'total' segment wins over prep + cook."""
    s = strip_markup(line)
    total = re.search(r"total[^:|;]*:?([^|;]*)", s, re.I)
    if total:
        minutes = _duration_minutes(total.group(1))
        if minutes is not None:
            return minutes
    return _duration_minutes(s)


def extract_servings(line: str) -> Optional[int]:
    for pattern in _SERVING_PATTERNS:
        m = pattern.search(line)
        if m:
            # servings divide float totals, so they must fit a float
            try:
                value = int(m.group(1))
                float(value)
            except (ValueError, OverflowError):
                return None
            return value if value > 0 else None
    return None


def extract_difficulty(line: str) -> Optional[Difficulty]:
    lower = line.lower()
    for level, words in DIFFICULTY_WORDS:
        if any(re.search(r"\b" + w + r"\b", lower) for w in words):
            return level
    return None


def extract_cuisine(text: str) -> Optional[str]:
    lower = text.lower()
    for cuisine in CUISINES:
        if re.search(r"\b" + re.escape(cuisine) + r"\b", lower):
            return cuisine.title()
    return None


def _labelled_value(line: str) -> str:
    s = strip_markup(line)
    return s.split(":", 1)[1].strip() if ":" in s else ""


def extract_dietary(text: str) -> List[str]:
    lower = text.lower()
    return [tag for tag, words in DIETARY_KEYWORDS if any(w in lower for w in words)]


def extract_description(line: str) -> Optional[str]:
    description = strip_markup(line)
    description = re.sub(r"^description\s*:\s*", "", description, flags=re.I).strip()
    if 10 < len(description) < 300:
        return description
    return None


def _section_header(line: str, strict: bool = False) -> Optional[Section]:
    """Section a header line opens, or None.

    With `strict`, the line must end with a colon or start with the keyword,
    so a title such as "5-Ingredient Pasta" is not read as a header.
    """
    if _LIST_ITEM.match(line.strip()):
        return None
    s = strip_markup(line)
    if not (s.endswith(":") or len(s.rstrip(":")) <= MAX_HEADER_CHARS):
        return None
    # quantities start ingredient lines, never headers
    if re.match(r"^[\d½¼¾⅓⅔⅛⅜⅝⅞]", s):
        return None
    lower = s.lower()
    for section, keywords in (
        (Section.INGREDIENTS, INGREDIENT_HEADERS),
        (Section.INSTRUCTIONS, INSTRUCTION_HEADERS),
    ):
        for k in keywords:
            if k not in lower:
                continue
            if strict and not (s.endswith(":") or lower.startswith(k)):
                continue
            return section
    return None


def _capture_metadata(line: str, data: ParsedBlock) -> bool:
    """Store a metadata line into `data`; False when the line is not metadata."""
    s = strip_markup(line)
    labelled = ":" in s

    if _TIME_LABEL.match(s):
        minutes = extract_time(s)
        if minutes is not None or labelled:
            if minutes is not None:
                data.cooking_time = minutes
            logger.debug("Found cooking time: %s minutes", minutes)
            return True
    if _SERVINGS_LABEL.match(s):
        servings = extract_servings(s)
        if servings is not None or labelled:
            if servings is not None:
                data.servings = servings
            logger.debug("Found servings: %s", servings)
            return True
    if _DIFFICULTY_LABEL.match(s):
        difficulty = extract_difficulty(s)
        if difficulty is not None or labelled:
            if difficulty is not None:
                data.difficulty = difficulty
            logger.debug("Found difficulty: %s", difficulty)
            return True
    if _CUISINE_LABEL.match(s):
        cuisine = extract_cuisine(s)
        if cuisine is None and labelled:
            value = _labelled_value(s)
            cuisine = value.title() if 0 < len(value) <= 30 else None
        if cuisine is not None or labelled:
            if cuisine is not None:
                data.cuisine = cuisine
            logger.debug("Found cuisine: %s", cuisine)
            return True
    if _DESCRIPTION_LABEL.match(s):
        data.description = extract_description(s)
        return True
    if _DIETARY_LABEL.match(s) and labelled:
        return True
    return False


def is_instruction_line(line: str) -> bool:
    trimmed = line.strip()
    if len(trimmed) < 5:
        return False
    if re.match(r"^\d+[.)]\s*", trimmed) or re.match(r"^[-*•]\s*", trimmed) or _STEP_PREFIX.match(trimmed):
        return True
    lower = strip_markup(trimmed).lower()
    if any(re.match(re.escape(v) + r"\b", lower) for v in COOKING_VERBS):
        return True
    if any(re.match(re.escape(p) + r"\b", lower) for p in PREPOSITIONAL_OPENERS):
        return True
    return "." in trimmed and len(trimmed) > 15


def clean_instruction_line(line: str) -> Optional[str]:
    """Strip list markers, sentence-case, and end with punctuation."""
    cleaned = line.strip()
    cleaned = re.sub(r"^[-*•]\s*", "", cleaned)
    cleaned = re.sub(r"^\d+[.)]\s*", "", cleaned)
    cleaned = _STEP_PREFIX.sub("", cleaned)
    cleaned = re.sub(r"\*\*|__", "", cleaned).strip()
    if cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
        if not cleaned.endswith((".", "!", "?")):
            cleaned += "."
    return cleaned if len(cleaned) > 3 else None


def _looks_like_title(line: str, index: int) -> bool:
    return (
        index == 0
        or "**" in line
        or line.lstrip().startswith("#")
        or bool(re.match(r"^[A-Z][^.]{10,}$", line))
        or bool(_RECIPE_N.search(line))
    )


def parse_recipe_block(block: str) -> Optional[ParsedBlock]:
    """Return the ParsedBlock for `block`, or None when it has no title or ingredients."""
    lines = [line.strip() for line in (block or "").split("\n")]
    lines = [line for line in lines if line]

    data = ParsedBlock()
    section = Section.TITLE

    for i, line in enumerate(lines):
        header = _section_header(line, strict=not data.title)

        if not data.title and header is None and _looks_like_title(line, i):
            s = strip_markup(line)
            if not (_TIME_LABEL.match(s) or _SERVINGS_LABEL.match(s)):
                title = extract_title(line)
                if title:
                    data.title = title
                    logger.debug("Found title: %s", title)
                    continue

        if _capture_metadata(line, data):
            continue

        if header is not None:
            section = header
            logger.debug("Switched to %s section", section.value)
            continue

        if (
            i == 1
            and data.title
            and data.description is None
            and 20 < len(line) < 200
            and not is_ingredient_line(line)
            and not _LIST_ITEM.match(line)
        ):
            data.description = extract_description(line)
            if data.description:
                continue

        if section is Section.INGREDIENTS and is_ingredient_line(line):
            ingredient = clean_ingredient_line(line)
            if ingredient:
                data.ingredients.append(ingredient)
        elif section is Section.INSTRUCTIONS and is_instruction_line(line):
            instruction = clean_instruction_line(line)
            if instruction:
                data.instructions.append(instruction)

    text = block or ""
    if not data.cuisine:
        data.cuisine = extract_cuisine(text)
    data.dietary = extract_dietary(text)

    if not data.is_valid():
        logger.info(
            "Block dropped | title=%r ingredients=%d instructions=%d",
            data.title,
            len(data.ingredients),
            len(data.instructions),
        )
        return None
    logger.debug(
        "Parsed block | title=%r ingredients=%d instructions=%d",
        data.title,
        len(data.ingredients),
        len(data.instructions),
    )
    return data
