"""Pipeline entry point: narrative text in, list of Recipe records out.

The pipeline is pure and synchronous. It never raises: a block that cannot
be turned into a recipe is logged and dropped, and an unexpected failure of
the whole run yields an empty list.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from recipe_narrative.estimate.engine import estimate_ingredients
from recipe_narrative.ingest.extract_fields import parse_recipe_block
from recipe_narrative.ingest.parse_ingredient import parse_ingredient_text
from recipe_narrative.ingest.split_blocks import split_into_blocks
from recipe_narrative.models.recipe_schema import DEFAULT_SERVINGS, Recipe
from recipe_narrative.orchestrate.assemble import ChoiceSource, assemble_recipe

logger = logging.getLogger(__name__)


def _block_to_recipe(block: str, index: int, rng: Optional[ChoiceSource]) -> Optional[Recipe]:
    stage = "extract"
    try:
        parsed = parse_recipe_block(block)
        if parsed is None:
            return None

        stage = "ingredients"
        ingredients = [parse_ingredient_text(line) for line in parsed.ingredients]

        stage = "estimate"
        servings = parsed.servings or DEFAULT_SERVINGS
        estimated, nutrition = estimate_ingredients(ingredients, servings)

        stage = "assemble"
        return assemble_recipe(parsed, estimated, nutrition, index=index, rng=rng)
    except Exception:
        logger.exception("Block dropped | position=%d stage=%s snippet=%r", index + 1, stage, block[:100])
        return None


def parse_recipe_response(text: str, rng: Optional[ChoiceSource] = None) -> List[Recipe]:
    """Parse every recipe in `text`, in the order they appear.

    `rng` drives the random image fallback; pass a seeded `random.Random`
    for reproducible output.
    """
    if not text or not text.strip():
        logger.info("Empty narrative; no recipes")
        return []

    try:
        blocks = split_into_blocks(text)
        logger.info("Parsing narrative | chars=%d blocks=%d", len(text), len(blocks))
        recipes: List[Recipe] = []
        for index, block in enumerate(blocks):
            logger.debug("Parsing block %d: %r", index + 1, block[:100])
            recipe = _block_to_recipe(block, len(recipes), rng)
            if recipe is not None:
                recipes.append(recipe)
        logger.info("Parsed %d of %d blocks into recipes", len(recipes), len(blocks))
        return recipes
    except Exception:
        logger.exception("Narrative parse failed | snippet=%r", text[:200])
        return []


def recipes_to_payload(recipes: List[Recipe]) -> List[dict]:
    return [r.to_payload() for r in recipes]
