"""Split a raw narrative into candidate per-recipe text blocks.

Strategies are tried in order; the first one that finds more than one block
wins. Each strategy takes the text (and a minimum block length) and returns
a list of blocks or None, so strategies can be reordered or tested alone.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Pattern, Tuple

from recipe_narrative.settings import settings

logger = logging.getLogger(__name__)

Strategy = Callable[[str, int], Optional[List[str]]]

SECTION_KEYWORDS = ("ingredient", "instruction", "cook", "recipe", "serve")
UNIT_TOKENS = ("cup", "tbsp", "tsp", "lb", "oz", "gram")


def _split_at(text: str, pattern: Pattern[str], min_chars: int) -> Optional[List[str]]:
    """Cut `text` at every match of `pattern`; each block runs to the next match."""
    starts = [m.start() for m in pattern.finditer(text)]
    if not starts:
        return None
    bounds = starts + [len(text)]
    blocks = []
    for start, end in zip(bounds, bounds[1:]):
        block = text[start:end].strip()
        if len(block) > min_chars:
            blocks.append(block)
    return blocks if len(blocks) > 1 else None


def _boundary_strategy(name: str, pattern: str, flags: int = 0) -> Tuple[str, Strategy]:
    compiled = re.compile(pattern, flags)

    def strategy(text: str, min_chars: int) -> Optional[List[str]]:
        return _split_at(text, compiled, min_chars)

    strategy.__name__ = name
    return name, strategy


def keyword_paragraphs(text: str, min_chars: int) -> Optional[List[str]]:
    """Blank-line paragraphs that read like recipe content rather than prose."""
    blocks = []
    for paragraph in re.split(r"\n\s*\n", text):
        paragraph = paragraph.strip()
        if len(paragraph) <= min_chars:
            continue
        lower = paragraph.lower()
        if any(k in lower for k in SECTION_KEYWORDS) and any(u in lower for u in UNIT_TOKENS):
            blocks.append(paragraph)
    return blocks or None


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    _boundary_strategy("bold_recipe_header", r"\*\*Recipe \d+:", re.I),
    _boundary_strategy("recipe_header", r"Recipe \d+:", re.I),
    _boundary_strategy("bold_numbered_header", r"\*\*\d+\.\s*[^*\n]+\*\*"),
    _boundary_strategy("markdown_recipe_heading", r"#{1,3}\s*Recipe", re.I),
    _boundary_strategy("markdown_numbered_heading", r"#{1,3}\s*\d+\."),
    # "1. Recipe Name" opening a paragraph; numbered steps inside a list do not qualify
    _boundary_strategy("numbered_title_line", r"(?:\A|\n[ \t]*\n)[ \t]*\d+\.[ \t]*[A-Z][^.\n]{10,}"),
    # "Recipe Name:" on its own line
    _boundary_strategy("colon_title_line", r"(?:\A|\n)[ \t]*[A-Z][^.\n]{15,}:[ \t]*\n"),
)


def split_into_blocks(text: str, min_chars: Optional[int] = None) -> List[str]:
    """Return the candidate recipe blocks of `text`, in input order. Never empty."""
    if min_chars is None:
        min_chars = settings.MIN_BLOCK_CHARS
    if not text or not text.strip():
        return [text or ""]

    for name, strategy in STRATEGIES:
        blocks = strategy(text, min_chars)
        if blocks:
            logger.info("Split narrative into %d blocks using %s", len(blocks), name)
            return blocks

    blocks = keyword_paragraphs(text, min_chars)
    if blocks:
        logger.info("Split narrative into %d blocks using keyword_paragraphs", len(blocks))
        return blocks

    logger.info("No recipe structure found; treating the whole narrative as one block")
    return [text.strip()]
