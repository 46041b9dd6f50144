"""Price and nutrition reference tables, keyed by ingredient name."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from recipe_narrative.reference.loader import ReferenceDataError, load_reference
from recipe_narrative.reference.matching import longest_match
from recipe_narrative.reference.units import normalize_unit


@dataclass(frozen=True)
class PriceEntry:
    """Price of `serving` units of `unit`."""

    price: float
    unit: str
    serving: float


@dataclass(frozen=True)
class NutritionEntry:
    """Nutrients per 100 g."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


def _load_prices() -> Tuple[str, Mapping[str, PriceEntry]]:
    data = load_reference("prices.json", required_keys=("version", "entries"))
    entries = {}
    for name, row in data["entries"].items():
        try:
            entry = PriceEntry(float(row["price"]), normalize_unit(row["unit"]), float(row["serving"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ReferenceDataError(f"prices.json entry '{name}' is malformed: {e}") from e
        if entry.serving <= 0 or entry.price < 0:
            raise ReferenceDataError(f"prices.json entry '{name}' needs price >= 0 and serving > 0")
        entries[name.lower()] = entry
    return data["version"], MappingProxyType(entries)


def _load_nutrition() -> Tuple[str, Mapping[str, NutritionEntry]]:
    data = load_reference("nutrition.json", required_keys=("version", "entries"))
    entries = {}
    for name, row in data["entries"].items():
        try:
            entry = NutritionEntry(
                calories=float(row["calories"]),
                protein=float(row["protein"]),
                carbs=float(row["carbs"]),
                fat=float(row["fat"]),
                fiber=float(row.get("fiber", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ReferenceDataError(f"nutrition.json entry '{name}' is malformed: {e}") from e
        entries[name.lower()] = entry
    return data["version"], MappingProxyType(entries)


PRICE_TABLE_VERSION, PRICE_TABLE = _load_prices()
NUTRITION_TABLE_VERSION, NUTRITION_TABLE = _load_nutrition()


def find_price(name: str) -> Tuple[Optional[str], Optional[PriceEntry]]:
    key = longest_match(name, PRICE_TABLE.keys())
    return key, (PRICE_TABLE[key] if key is not None else None)


def find_nutrition(name: str) -> Tuple[Optional[str], Optional[NutritionEntry]]:
    key = longest_match(name, NUTRITION_TABLE.keys())
    return key, (NUTRITION_TABLE[key] if key is not None else None)
