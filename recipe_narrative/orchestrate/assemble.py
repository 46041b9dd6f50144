"""Build the final Recipe record from a parsed block and its estimates."""

from __future__ import annotations

import logging
import random
import re
from typing import List, Optional, Protocol, Sequence

from recipe_narrative.estimate.engine import summarize_cost
from recipe_narrative.models.recipe_schema import (
    DEFAULT_COOKING_TIME,
    DEFAULT_CUISINE,
    DEFAULT_DIFFICULTY,
    DEFAULT_SERVINGS,
    EstimatedIngredient,
    NutritionInfo,
    ParsedBlock,
    Recipe,
)
from recipe_narrative.settings import settings

logger = logging.getLogger(__name__)


class ChoiceSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


_IMG = "https://images.unsplash.com/photo-{}?w=400&h=300&fit=crop&auto=format&q=80"

IMAGE_URLS = {
    "stir_fry": _IMG.format("1512058564366-18510be2db19"),
    "pasta": _IMG.format("1551892374-ecf8754cf8b0"),
    "rice_bowl": _IMG.format("1586190848861-99aa4a171e90"),
    "salmon": _IMG.format("1485963631004-f2f00b1d6606"),
    "mediterranean_bowl": _IMG.format("1546069901-ba9599a7e63c"),
    "pancakes": _IMG.format("1506084868230-bb9d95c24759"),
    "soup": _IMG.format("1414235077428-338989a2e8c0"),
    "curry": _IMG.format("1585937421612-70a008356fbe"),
    "thai": _IMG.format("1559314809-0f31657def5e"),
    "chinese": _IMG.format("1526318472351-c75fcf070305"),
    "japanese": _IMG.format("1579584425555-c3ce17fd4351"),
    "generic": _IMG.format("1504674900247-0877df9cc836"),
    "pizza": _IMG.format("1565299624946-b28f40a0ca4b"),
    "salad": _IMG.format("1572441713132-6cf4c02cc05d"),
    "tacos": _IMG.format("1563379091339-03246963d51a"),
    "burger": _IMG.format("1561758033-d89a9ad46330"),
}

# Checked against the title in this order; first hit wins.
DISH_CATEGORIES = (
    ("pasta", "pasta"),
    ("spaghetti", "pasta"),
    ("stir fry", "stir_fry"),
    ("salmon", "salmon"),
    ("fish", "salmon"),
    ("chicken", "stir_fry"),
    ("rice", "rice_bowl"),
    ("bowl", "mediterranean_bowl"),
    ("pancake", "pancakes"),
    ("soup", "soup"),
    ("salad", "salad"),
    ("pizza", "pizza"),
    ("taco", "tacos"),
    ("burger", "burger"),
    ("curry", "curry"),
)

CUISINE_CATEGORIES = {
    "italian": "pasta",
    "asian": "stir_fry",
    "chinese": "chinese",
    "japanese": "japanese",
    "thai": "thai",
    "indian": "curry",
    "mexican": "tacos",
    "mediterranean": "mediterranean_bowl",
    "american": "salmon",
    "french": "soup",
}

FALLBACK_POOL = (
    "stir_fry", "pasta", "rice_bowl", "salmon", "mediterranean_bowl", "pancakes", "soup",
    "curry", "thai", "chinese", "japanese", "generic", "pizza", "salad", "tacos",
)


def select_image_category(title: str, cuisine: Optional[str], rng: Optional[ChoiceSource] = None) -> str:
    title_lower = (title or "").lower()
    for keyword, category in DISH_CATEGORIES:
        if keyword in title_lower:
            logger.debug("Image category '%s' from dish keyword '%s'", category, keyword)
            return category
    if cuisine:
        category = CUISINE_CATEGORIES.get(cuisine.lower())
        if category:
            logger.debug("Image category '%s' from cuisine '%s'", category, cuisine)
            return category
    if rng is None:
        # fresh per call; IMAGE_SEED makes it repeatable
        rng = random.Random(settings.IMAGE_SEED)
    category = rng.choice(FALLBACK_POOL)
    logger.debug("Image category '%s' picked from the fallback pool", category)
    return category


def slugify(text: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return s[:60].rstrip("-") or "untitled"


def assemble_recipe(
    block: ParsedBlock,
    ingredients: List[EstimatedIngredient],
    nutrition: NutritionInfo,
    index: int = 0,
    rng: Optional[ChoiceSource] = None,
) -> Recipe:
    """Combine a parsed block and its estimates, filling defaults for missing fields."""
    servings = block.servings if block.servings and block.servings > 0 else DEFAULT_SERVINGS
    cooking_time = block.cooking_time if block.cooking_time is not None else DEFAULT_COOKING_TIME
    cuisine = block.cuisine[0].upper() + block.cuisine[1:] if block.cuisine else DEFAULT_CUISINE
    description = block.description or f"A delicious {block.cuisine or 'homestyle'} recipe"
    total, cost_per_serving = summarize_cost(ingredients, servings)
    category = select_image_category(block.title, block.cuisine, rng)

    recipe = Recipe(
        id=f"recipe-{index + 1}-{slugify(block.title)}",
        title=block.title,
        description=description,
        ingredients=ingredients,
        instructions=list(block.instructions),
        cooking_time=cooking_time,
        servings=servings,
        difficulty=block.difficulty or DEFAULT_DIFFICULTY,
        cuisine=cuisine,
        dietary=list(block.dietary),
        nutrition=nutrition,
        cost_per_serving=cost_per_serving,
        estimated_total_cost=total,
        image_category=category,
        image_url=IMAGE_URLS[category],
    )
    logger.info(
        "Recipe '%s': %.2f/serving, %s cal/serving",
        recipe.title,
        recipe.cost_per_serving,
        recipe.nutrition.calories,
    )
    return recipe
