from recipe_narrative.ingest.extract_fields import (
    clean_instruction_line,
    extract_difficulty,
    extract_servings,
    extract_time,
    extract_title,
    parse_recipe_block,
)
from recipe_narrative.models.recipe_schema import Difficulty

QUICK_STIR_FRY = (
    "**Recipe 1: Quick Chicken Stir Fry**\n**Ingredients:**\n- 1 lb chicken breast\n"
    "- 2 cups mixed vegetables\n**Instructions:**\n1. Cook chicken until done.\n"
    "**Cooking Time:** 20 minutes\n**Servings:** 4"
)

TOMATO_SOUP = """## Creamy Tomato Soup
A rich and comforting vegetarian soup for chilly evenings.
Cuisine: Italian
Difficulty: Easy
Prep Time: 10 minutes | Cook Time: 25 minutes
Serves 6
### Ingredients
- 2 tbsp olive oil
- 1 medium onion, diced
- 3 cloves garlic
- 1 can crushed tomatoes
- ½ cup heavy cream
- Salt to taste
### Instructions
1. heat the oil in a large pot
2. Add onion and garlic and cook for 5 minutes.
Step 3: pour in the tomatoes and simmer
- Stir in the cream
"""


def test_quick_stir_fry_block():
    data = parse_recipe_block(QUICK_STIR_FRY)
    assert data is not None
    assert data.title == "Quick Chicken Stir Fry"
    assert data.ingredients == ["1 lb chicken breast", "2 cups mixed vegetables"]
    assert data.instructions == ["Cook chicken until done."]
    assert data.cooking_time == 20
    assert data.servings == 4
    assert data.difficulty is None
    assert data.cuisine is None


def test_full_block_with_metadata():
    data = parse_recipe_block(TOMATO_SOUP)
    assert data.title == "Creamy Tomato Soup"
    assert data.description == "A rich and comforting vegetarian soup for chilly evenings."
    assert data.cuisine == "Italian"
    assert data.difficulty == Difficulty.EASY
    assert data.cooking_time == 35
    assert data.servings == 6
    assert data.ingredients == [
        "2 tbsp olive oil",
        "1 medium onion, diced",
        "3 cloves garlic",
        "1 can crushed tomatoes",
        "½ cup heavy cream",
        "Salt to taste",
    ]
    assert data.instructions == [
        "Heat the oil in a large pot.",
        "Add onion and garlic and cook for 5 minutes.",
        "Pour in the tomatoes and simmer.",
        "Stir in the cream.",
    ]
    assert data.dietary == ["vegetarian"]


def test_block_without_ingredients_is_dropped():
    block = "**Recipe 2: Mystery Method**\n**Instructions:**\n1. Preheat the oven.\n2. Bake for 20 minutes."
    assert parse_recipe_block(block) is None


def test_block_without_title_is_dropped():
    assert parse_recipe_block("") is None
    assert parse_recipe_block("**\n**") is None


def test_title_mentioning_a_section_keyword_is_still_the_title():
    block = "5-Ingredient Pasta\nIngredients:\n- 8 oz pasta\n- 2 tbsp butter"
    data = parse_recipe_block(block)
    assert data.title == "5-Ingredient Pasta"
    assert data.ingredients == ["8 oz pasta", "2 tbsp butter"]


def test_cuisine_and_dietary_are_derived_from_whole_block():
    block = (
        "Black Bean Bowls\nA hearty vegan and gluten-free Mexican dinner.\n"
        "What you need:\n- 1 can black beans\n- 1 cup rice"
    )
    data = parse_recipe_block(block)
    assert data.cuisine == "Mexican"
    assert data.dietary == ["vegan", "gluten-free"]
    assert data.ingredients == ["1 can black beans", "1 cup rice"]


def test_free_text_cuisine_label():
    block = "Ceviche\nCuisine: Peruvian\nIngredients:\n- 1 lb white fish\n- 4 limes"
    assert parse_recipe_block(block).cuisine == "Peruvian"


def test_extract_title():
    assert extract_title("**Recipe 1: Quick Chicken Stir Fry**") == "Quick Chicken Stir Fry"
    assert extract_title("**Dinner Idea: Lemon Chicken**") == "Lemon Chicken"
    assert extract_title("## 2. Garlic Pasta") == "Garlic Pasta"
    assert extract_title("Veggie Tacos:") == "Veggie Tacos"


def test_extract_time():
    assert extract_time("Cooking Time: 20 minutes") == 20
    assert extract_time("Total Time: 1 hour 15 minutes") == 75
    assert extract_time("Prep: 10 min | Cook: 20 min") == 30
    assert extract_time("Prep: 10 min | Total: 45 min") == 45
    assert extract_time("Cooking time: 20-25 minutes") == 20
    assert extract_time("Cooking time: 40") == 40
    assert extract_time("Cooking time: unknown") is None


def test_extract_servings():
    assert extract_servings("Servings: 4") == 4
    assert extract_servings("Serves 4-6") == 4
    assert extract_servings("Yield: 12 cookies") == 12
    assert extract_servings("Makes enough for everyone") is None


def test_extract_difficulty():
    assert extract_difficulty("Difficulty: Beginner friendly") == Difficulty.EASY
    assert extract_difficulty("Skill level: intermediate") == Difficulty.MEDIUM
    assert extract_difficulty("Difficulty: advanced") == Difficulty.HARD
    assert extract_difficulty("Difficulty: ?") is None


def test_clean_instruction_line():
    assert clean_instruction_line("- stir well") == "Stir well."
    assert clean_instruction_line("3) Serve hot!") == "Serve hot!"
    assert clean_instruction_line("Step 2: simmer for 10 minutes") == "Simmer for 10 minutes."
    assert clean_instruction_line("1. ok") is None


def test_absurd_numbers_leave_fields_unset():
    assert extract_time("Cooking time: " + "9" * 400 + " hours") is None
    assert extract_time("Cooking time: " + "9" * 5000) is None
    assert extract_servings("Servings: " + "9" * 5000) is None
    assert extract_servings("Servings: " + "9" * 400) is None


def test_absurd_time_keeps_the_block():
    block = "**Slow Bread**\nIngredients:\n- 2 cups flour\n- 1 tsp salt\nCooking time: " + "9" * 400 + " hours"
    data = parse_recipe_block(block)
    assert data.title == "Slow Bread"
    assert data.cooking_time is None
    assert len(data.ingredients) == 2
