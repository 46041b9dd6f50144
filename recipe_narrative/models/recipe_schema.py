from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recipe_narrative.reference.units import CANONICAL_UNITS


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


# Substituted for fields a narrative leaves out
DEFAULT_COOKING_TIME = 30
DEFAULT_SERVINGS = 4
DEFAULT_DIFFICULTY = Difficulty.MEDIUM
DEFAULT_CUISINE = "Other"


class NutritionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fat: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)


class ParsedBlock(BaseModel):
    """Fields pulled out of one recipe block, before estimation."""

    title: str = ""
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    cooking_time: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[Difficulty] = None
    cuisine: Optional[str] = None
    dietary: List[str] = Field(default_factory=list)

    def is_valid(self) -> bool:
        return bool(self.title.strip()) and len(self.ingredients) > 0


class ParsedIngredient(BaseModel):
    raw: str = ""
    name: str
    amount: float = Field(gt=0)
    unit: str

    @field_validator("unit")
    @classmethod
    def _unit_is_canonical(cls, v: str) -> str:
        if v not in CANONICAL_UNITS:
            raise ValueError(f"unit '{v}' is not a canonical unit")
        return v


class EstimatedIngredient(ParsedIngredient):
    model_config = ConfigDict(frozen=True)

    estimated_price: float = Field(default=0, ge=0, serialization_alias="estimatedPrice")
    grams: float = Field(default=0, ge=0)
    nutrition: NutritionInfo = Field(default_factory=NutritionInfo)
    price_source: Optional[str] = Field(default=None, serialization_alias="priceSource")
    nutrition_source: Optional[str] = Field(default=None, serialization_alias="nutritionSource")


class Recipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    ingredients: Tuple[EstimatedIngredient, ...]
    instructions: Tuple[str, ...] = ()
    cooking_time: int = Field(ge=0, serialization_alias="cookingTime")
    servings: int = Field(gt=0)
    difficulty: Difficulty = Difficulty.MEDIUM
    cuisine: str = "Other"
    dietary: Tuple[str, ...] = ()
    nutrition: NutritionInfo
    cost_per_serving: float = Field(ge=0, serialization_alias="costPerServing")
    estimated_total_cost: float = Field(ge=0, serialization_alias="estimatedTotalCost")
    image_category: str = Field(serialization_alias="imageCategory")
    image_url: str = Field(serialization_alias="imageUrl")

    def to_payload(self) -> dict:
        """JSON-ready dict with the camelCase keys the display side expects."""
        return self.model_dump(mode="json", by_alias=True)
