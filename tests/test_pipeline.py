import random

from recipe_narrative.estimate.engine import round_half_up
from recipe_narrative.ingest.split_blocks import split_into_blocks
from recipe_narrative.orchestrate import run
from recipe_narrative.orchestrate.run import parse_recipe_response, recipes_to_payload

STIR_FRY = (
    "**Recipe 1: Quick Chicken Stir Fry**\n**Ingredients:**\n- 1 lb chicken breast\n"
    "- 2 cups mixed vegetables\n**Instructions:**\n1. Cook chicken until done.\n"
    "**Cooking Time:** 20 minutes\n**Servings:** 4"
)

ONE_GOOD_ONE_BAD = """Here are two ideas for tonight.

**Recipe 1: Garlic Butter Pasta**
**Ingredients:**
- 8 oz spaghetti
- 3 tbsp butter
- 4 cloves garlic, minced
**Instructions:**
1. Boil the pasta until al dente.
2. Melt the butter with the garlic and toss.

**Recipe 2: Mystery Method**
**Instructions:**
1. Preheat the oven to 200C.
2. Bake everything for 20 minutes.
"""

THREE_RECIPES = """**Recipe 1: Lemon Salmon**
**Ingredients:**
- 2 salmon fillets
- 1 lemon, sliced

**Recipe 2: Veggie Fried Rice**
**Ingredients:**
- 2 cups cooked rice
- 2 eggs
- 1 cup peas

**Recipe 3: Tomato Soup**
**Ingredients:**
- 1 can crushed tomatoes
- 1 cup vegetable broth
"""


def test_single_recipe_narrative():
    recipes = parse_recipe_response(STIR_FRY)
    assert len(recipes) == 1
    recipe = recipes[0]
    assert recipe.title == "Quick Chicken Stir Fry"
    assert len(recipe.ingredients) == 2
    assert recipe.cooking_time == 20
    assert recipe.servings == 4
    assert recipe.image_category == "stir_fry"
    assert recipe.estimated_total_cost == 3.53
    assert recipe.cost_per_serving == round_half_up(recipe.estimated_total_cost / recipe.servings, 2)
    assert recipe.cost_per_serving >= 0
    for value in recipe.nutrition.model_dump().values():
        assert value >= 0


def test_block_without_ingredients_is_dropped():
    assert len(split_into_blocks(ONE_GOOD_ONE_BAD)) == 2
    recipes = parse_recipe_response(ONE_GOOD_ONE_BAD)
    assert [r.title for r in recipes] == ["Garlic Butter Pasta"]
    assert recipes[0].id == "recipe-1-garlic-butter-pasta"
    assert recipes[0].image_category == "pasta"


def test_recipes_keep_input_order():
    recipes = parse_recipe_response(THREE_RECIPES)
    assert [r.title for r in recipes] == ["Lemon Salmon", "Veggie Fried Rice", "Tomato Soup"]
    assert [r.id.split("-")[1] for r in recipes] == ["1", "2", "3"]


def test_empty_and_noise_input():
    assert parse_recipe_response("") == []
    assert parse_recipe_response("   \n  ") == []
    assert len(parse_recipe_response("lorem ipsum dolor sit amet " * 20)) <= 1


def test_seeded_rng_makes_output_reproducible():
    text = "Mystery Dish\nIngredients:\n- 1 cup something\n- 2 tbsp other thing"
    first = recipes_to_payload(parse_recipe_response(text, rng=random.Random(7)))
    second = recipes_to_payload(parse_recipe_response(text, rng=random.Random(7)))
    assert first == second
    assert len(first) == 1


def test_failures_are_contained(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("estimator exploded")

    monkeypatch.setattr(run, "estimate_ingredients", boom)
    assert parse_recipe_response(STIR_FRY) == []


def test_payload_is_json_ready():
    payload = recipes_to_payload(parse_recipe_response(STIR_FRY))
    assert payload[0]["title"] == "Quick Chicken Stir Fry"
    assert payload[0]["difficulty"] == "Medium"
    assert payload[0]["cuisine"] == "Other"
    assert payload[0]["ingredients"][0]["unit"] == "lb"
