"""Price and nutrition estimates from parsed ingredients.

Nothing here raises for a well-formed ParsedIngredient: an ingredient the
reference tables do not know gets the generic default price and the
vegetable-like default nutrition instead.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Iterable, List, Optional, Tuple

from recipe_narrative.models.recipe_schema import (
    DEFAULT_SERVINGS,
    EstimatedIngredient,
    NutritionInfo,
    ParsedIngredient,
    Recipe,
)
from recipe_narrative.reference.tables import find_nutrition, find_price
from recipe_narrative.reference.units import convert_amount, to_grams

logger = logging.getLogger(__name__)

MIN_DEFAULT_PRICE = 0.50
DEFAULT_PRICE_PER_UNIT = 0.25
# Per gram, for ingredients with no nutrition entry (roughly a vegetable).
DEFAULT_NUTRITION_PER_GRAM = NutritionInfo(calories=0.3, protein=0.02, carbs=0.07, fat=0.002, fiber=0.02)
NUTRIENTS = ("calories", "protein", "carbs", "fat", "fiber")
# Wide enough to quantize any finite float.
_ROUNDING = Context(prec=400)


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a cashier does (2.5 -> 3), independent of float quirks.

    Non-finite values (an overflowed estimate) round to 0.
    """
    if not math.isfinite(value):
        return 0.0
    exp = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exp, rounding=ROUND_HALF_UP, context=_ROUNDING))


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def estimate_price(ingredient: ParsedIngredient) -> Tuple[float, Optional[str]]:
    """Return (price rounded to cents, matched price-table key or None)."""
    key, entry = find_price(ingredient.name)
    if entry is None:
        price = max(MIN_DEFAULT_PRICE, ingredient.amount * DEFAULT_PRICE_PER_UNIT)
        logger.debug("estimate_price: no price entry for '%s'; default %.2f", ingredient.name, price)
        return round_half_up(price, 2), None

    converted = convert_amount(ingredient.amount, ingredient.unit, entry.unit, ingredient.name)
    price = (converted / entry.serving) * entry.price
    logger.debug(
        "estimate_price: '%s' matched '%s' (%.3f %s -> %.3f %s) = %.4f",
        ingredient.name, key, ingredient.amount, ingredient.unit, converted, entry.unit, price,
    )
    return round_half_up(max(price, 0.0), 2), key


def ingredient_nutrition(ingredient: ParsedIngredient) -> Tuple[NutritionInfo, float, Optional[str]]:
    """Return (unrounded nutrient totals, grams, matched nutrition key or None)."""
    grams = to_grams(ingredient.amount, ingredient.unit, ingredient.name)
    key, entry = find_nutrition(ingredient.name)
    if entry is None:
        values = {n: _finite(getattr(DEFAULT_NUTRITION_PER_GRAM, n) * grams) for n in NUTRIENTS}
        return NutritionInfo(**values), grams, None
    factor = grams / 100
    values = {n: _finite(getattr(entry, n) * factor) for n in NUTRIENTS}
    return NutritionInfo(**values), grams, key


def estimate_ingredient(ingredient: ParsedIngredient) -> Tuple[EstimatedIngredient, NutritionInfo]:
    price, price_key = estimate_price(ingredient)
    nutrition, grams, nutrition_key = ingredient_nutrition(ingredient)
    shown = NutritionInfo(
        calories=round_half_up(nutrition.calories),
        **{n: round_half_up(getattr(nutrition, n), 1) for n in NUTRIENTS if n != "calories"},
    )
    estimated = EstimatedIngredient(
        raw=ingredient.raw,
        name=ingredient.name,
        amount=ingredient.amount,
        unit=ingredient.unit,
        estimated_price=price,
        grams=round_half_up(grams, 1),
        nutrition=shown,
        price_source=price_key,
        nutrition_source=nutrition_key,
    )
    return estimated, nutrition


def per_serving(totals: NutritionInfo, servings: int) -> NutritionInfo:
    """Divide totals by servings; whole calories, one decimal for the rest."""
    return NutritionInfo(
        calories=round_half_up(totals.calories / servings),
        protein=round_half_up(totals.protein / servings, 1),
        carbs=round_half_up(totals.carbs / servings, 1),
        fat=round_half_up(totals.fat / servings, 1),
        fiber=round_half_up(totals.fiber / servings, 1),
    )


def estimate_ingredients(
    parsed: Iterable[ParsedIngredient], servings: Optional[int]
) -> Tuple[List[EstimatedIngredient], NutritionInfo]:
    """Estimate every ingredient and return them with per-serving nutrition."""
    if not servings or servings <= 0:
        servings = DEFAULT_SERVINGS

    estimated: List[EstimatedIngredient] = []
    totals = {n: 0.0 for n in NUTRIENTS}
    for ingredient in parsed:
        item, nutrition = estimate_ingredient(ingredient)
        estimated.append(item)
        for n in NUTRIENTS:
            totals[n] += getattr(nutrition, n)

    return estimated, per_serving(NutritionInfo(**totals), servings)


def summarize_cost(ingredients: Iterable[EstimatedIngredient], servings: int) -> Tuple[float, float]:
    """Return (estimated total cost, cost per serving), both rounded to cents."""
    total = round_half_up(sum(i.estimated_price for i in ingredients), 2)
    return total, round_half_up(total / servings, 2)


def refresh_estimates(recipe: Recipe, servings: Optional[int] = None) -> Recipe:
    """Recompute prices, nutrition and cost of an existing recipe.

    Pass `servings` to rescale per-serving figures for a different yield.
    """
    servings = servings if servings and servings > 0 else recipe.servings
    parsed = [
        ParsedIngredient(raw=i.raw, name=i.name, amount=i.amount, unit=i.unit)
        for i in recipe.ingredients
    ]
    ingredients, nutrition = estimate_ingredients(parsed, servings)
    total, cost_per_serving = summarize_cost(ingredients, servings)
    logger.info("Refreshed estimates for '%s' (servings=%d)", recipe.title, servings)
    return recipe.model_copy(
        update={
            "ingredients": tuple(ingredients),
            "servings": servings,
            "nutrition": nutrition,
            "estimated_total_cost": total,
            "cost_per_serving": cost_per_serving,
        }
    )
