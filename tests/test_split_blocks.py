from recipe_narrative.ingest import split_blocks
from recipe_narrative.ingest.split_blocks import STRATEGIES, keyword_paragraphs, split_into_blocks

TWO_RECIPES = """Here are two easy dinners for you.

**Recipe 1: Garlic Butter Pasta**
**Ingredients:**
- 8 oz pasta
- 2 tbsp butter

**Recipe 2: Lemon Salmon**
**Ingredients:**
- 2 salmon fillets
- 1 lemon, sliced
"""

BOLD_NUMBERED = """**1. Tomato Basil Bruschetta**
- 4 slices bread
- 2 medium tomatoes, diced
- 1 tbsp basil

**2. Spinach and Feta Omelette**
- 3 large eggs
- 1 cup spinach
- 2 oz feta cheese
"""


def _in_input_order(text, blocks):
    positions = [text.index(b) for b in blocks]
    return positions == sorted(positions)


def test_bold_recipe_headers_split_in_order():
    blocks = split_into_blocks(TWO_RECIPES)
    assert len(blocks) == 2
    assert blocks[0].startswith("**Recipe 1: Garlic Butter Pasta**")
    assert blocks[1].startswith("**Recipe 2: Lemon Salmon**")
    assert _in_input_order(TWO_RECIPES, blocks)


def test_bold_numbered_headers():
    blocks = split_into_blocks(BOLD_NUMBERED)
    assert [b.splitlines()[0] for b in blocks] == [
        "**1. Tomato Basil Bruschetta**",
        "**2. Spinach and Feta Omelette**",
    ]


def test_each_strategy_can_run_alone():
    strategies = dict(STRATEGIES)
    assert strategies["bold_recipe_header"](BOLD_NUMBERED, 10) is None
    assert len(strategies["bold_numbered_header"](BOLD_NUMBERED, 10)) == 2
    assert len(strategies["recipe_header"](TWO_RECIPES, 10)) == 2


def test_markdown_headings():
    text = (
        "## Recipe: Veggie Tacos\n- 8 tortillas\n- 1 can black beans\n- 1 cup salsa\n\n"
        "## Recipe: Fried Rice\n- 2 cups cooked rice\n- 2 eggs\n- 1 tbsp soy sauce\n"
    )
    blocks = split_into_blocks(text)
    assert len(blocks) == 2
    assert "Fried Rice" in blocks[1]


def test_numbered_steps_inside_one_recipe_do_not_split_it():
    text = (
        "Garlic Chicken\nIngredients\n- 1 lb chicken\n- 2 cloves garlic\n"
        "Instructions\n1. Heat the oil in a large pan\n2. Add the chicken and cook through"
    )
    assert split_into_blocks(text) == [text]


def test_keyword_paragraph_fallback_skips_prose():
    text = (
        "Pancakes need a few ingredients, namely 2 cups flour, 1 cup milk and 2 eggs. "
        "Cook on a hot griddle until golden.\n\n"
        "Thanks for reading this post, and enjoy the weekend with friends and family.\n\n"
        "For the smoothie you need these ingredients, 1 cup berries and 1 cup yogurt. "
        "Blend and serve cold."
    )
    blocks = split_into_blocks(text)
    assert len(blocks) == 2
    assert blocks[0].startswith("Pancakes")
    assert blocks[1].startswith("For the smoothie")
    assert keyword_paragraphs("short", 50) is None


def test_unstructured_text_is_one_block():
    assert split_into_blocks("just some words") == ["just some words"]


def test_empty_input_still_returns_a_block():
    assert split_into_blocks("") == [""]


def test_short_blocks_are_dropped(monkeypatch):
    text = "**Recipe 1: A**\n- 1 egg\n\n**Recipe 2: B**\n- 2 eggs\n\n**Recipe 3: C**\n- 3 eggs"
    # every block is under the default minimum, so no header strategy applies
    assert len(split_into_blocks(text)) == 1

    monkeypatch.setattr(split_blocks.settings, "MIN_BLOCK_CHARS", 5)
    assert len(split_into_blocks(text)) == 3
