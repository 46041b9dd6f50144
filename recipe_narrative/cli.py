"""Typer CLI for recipe-narrative (parse, ingredient, blocks, schema)."""

from __future__ import annotations

import json
import random
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from recipe_narrative.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

from recipe_narrative.estimate.engine import estimate_ingredients
from recipe_narrative.ingest.parse_ingredient import parse_ingredient_text
from recipe_narrative.ingest.split_blocks import split_into_blocks
from recipe_narrative.models.recipe_schema import Recipe
from recipe_narrative.orchestrate.run import parse_recipe_response, recipes_to_payload
from recipe_narrative.settings import validate_settings

app = typer.Typer()
console = Console()
# status lines go to stderr so stdout stays pure JSON
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


@app.command()
def parse(
    path: str = typer.Argument("-", help="Narrative file, or '-' for stdin."),
    seed: Optional[int] = typer.Option(None, help="Seed for the random image fallback."),
    compact: bool = typer.Option(False, help="Print JSON on one line."),
):
    """Parse a recipe narrative and print the recipes as JSON."""
    try:
        text = _read_source(path)
        rng = random.Random(seed) if seed is not None else None
        recipes = parse_recipe_response(text, rng=rng)
        payload = recipes_to_payload(recipes)
        if compact:
            console.print_json(json.dumps(payload, ensure_ascii=False), indent=None)
        else:
            console.print_json(json.dumps(payload, ensure_ascii=False))
        err_console.print(f"Parsed {len(recipes)} recipe(s).", style="dim")
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def ingredient(text: str, servings: int = 1):
    """Parse one ingredient line and show its estimates."""
    try:
        parsed = parse_ingredient_text(text)
        estimated, nutrition = estimate_ingredients([parsed], servings)
        console.print_json(
            json.dumps(
                {
                    "ingredient": estimated[0].model_dump(mode="json", by_alias=True),
                    "perServing": nutrition.model_dump(mode="json"),
                },
                ensure_ascii=False,
            )
        )
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def blocks(path: str = typer.Argument("-", help="Narrative file, or '-' for stdin.")):
    """Show how a narrative is split into candidate recipe blocks."""
    try:
        text = _read_source(path)
        table = Table(title="Recipe blocks")
        table.add_column("#", justify="right")
        table.add_column("Chars", justify="right")
        table.add_column("Start")
        for i, block in enumerate(split_into_blocks(text), start=1):
            table.add_row(str(i), str(len(block)), block[:80].replace("\n", " | "))
        console.print(table)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def schema():
    """Print the JSON schema of a Recipe record."""
    console.print_json(json.dumps(Recipe.model_json_schema(by_alias=True, mode="serialization")))


def main():
    # validate settings (dotenv already loaded at module import)
    validate_settings()
    app()


if __name__ == "__main__":
    main()
