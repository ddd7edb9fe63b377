# unit_tests/test_agent_recipe.py
"""
Unit Tests for Recipe Generation Agent
======================================
Run with: python -m pytest unit_tests/test_agent_recipe.py -v

Gemini is replaced by FakeGeminiClient (see conftest.py).
"""

import asyncio
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agents.nutrition_agent import MissingInputError
from agents.recipe_agent import (
    build_recipe_prompt,
    generate_recipes,
    generate_recipes_with_source,
    resolve_meal_types,
    split_ingredients,
)
from tools.gemini_client import RECIPE_PRESET
from tools.recipe_synthesizer import synthesize_recipes


def _recipe(title, ingredients):
    return {
        "title": title,
        "ingredients": ingredients,
        "steps": ["Prep everything.", "Cook.", "Serve."],
        "nutrition": {"calories": 300, "protein": 20, "fat": 15, "carbs": 10},
        "cookingTime": "15 minutes",
        "servings": 2,
    }


# =============================================================================
# INPUT HANDLING
# =============================================================================
def test_resolve_meal_types():
    assert resolve_meal_types({}) == ["lunch"]
    assert resolve_meal_types(None) == ["lunch"]
    assert resolve_meal_types({"snack": False}) == ["lunch"]
    assert resolve_meal_types({"dinner": True, "breakfast": True}) == ["breakfast", "dinner"]
    assert resolve_meal_types({"brunch": True}) == ["lunch"]


def test_split_ingredients():
    assert split_ingredients(" eggs, , spinach ,") == ["eggs", "spinach"]
    assert split_ingredients("") == []


def test_prompt_lists_meal_types_and_ingredients():
    prompt = build_recipe_prompt(["eggs", "spinach"], ["breakfast", "dinner"])
    assert "for breakfast, dinner meals" in prompt
    assert "main components: eggs, spinach." in prompt


def test_empty_ingredients_rejected(make_client):
    client = make_client([])
    with pytest.raises(MissingInputError):
        asyncio.run(generate_recipes(" , ", client=client))
    assert client.prompts == []


# =============================================================================
# PIPELINE
# =============================================================================
def test_coverage_filter_drops_recipe_missing_an_ingredient(make_client, orchestrator):
    print("\n" + "=" * 60)
    print("TEST: AI recipe missing an ingredient is filtered")
    print("=" * 60)

    reply = json.dumps([
        _recipe("Spinach Frittata", ["4 eggs", "2 cups spinach"]),
        _recipe("Cheese Omelette", ["3 eggs", "1/4 cup cheddar"]),
    ])
    client = make_client([reply])
    result = asyncio.run(
        generate_recipes_with_source("eggs, spinach", {}, client=client, orchestrator=orchestrator)
    )

    titles = [r.title for r in result.recipes]
    print(f"   Titles: {titles}")
    assert result.source == "ai"
    assert "Cheese Omelette" not in titles
    assert titles[0] == "Spinach Frittata"
    # topped up from the synthesizer
    assert len(result.recipes) == 2
    assert titles[1] == "Spinach and Egg Skillet"
    assert client.presets == [RECIPE_PRESET]
    print("✅ Coverage filter applied")


def test_top_up_disambiguates_duplicate_titles(make_client, orchestrator):
    reply = json.dumps([_recipe("Spinach and Egg Skillet", ["2 eggs", "1 cup spinach"])])
    client = make_client([reply])
    recipes = asyncio.run(generate_recipes("eggs, spinach", client=client, orchestrator=orchestrator))

    assert [r.title for r in recipes] == [
        "Spinach and Egg Skillet",
        "Alternative Spinach and Egg Skillet",
    ]


def test_no_covering_recipe_counts_as_failed_attempt(make_client, orchestrator, recording_sleep):
    reply = json.dumps([_recipe("Cheese Omelette", ["3 eggs", "1/4 cup cheddar"])])
    client = make_client([reply] * 3)
    result = asyncio.run(
        generate_recipes_with_source("eggs, spinach", None, client=client, orchestrator=orchestrator)
    )

    assert result.source == "fallback"
    assert result.attempts == 3
    assert recording_sleep.calls == [1.0, 2.0]
    assert all("Omelette" not in r.title for r in result.recipes)


def test_offline_fallback_matches_synthesizer(make_client):
    client = make_client(available=False)
    result = asyncio.run(generate_recipes_with_source("eggs, spinach", {}, client=client))

    assert result.source == "fallback"
    assert result.meal_types == ["lunch"]
    assert client.prompts == []
    expected = synthesize_recipes(["eggs", "spinach"], "lunch")
    assert [r.title for r in result.recipes] == [r.title for r in expected]


def test_transport_errors_then_success(make_client, orchestrator, recording_sleep):
    reply = json.dumps([
        _recipe("Chicken Rice Bowl", ["8 oz chicken", "1 cup rice"]),
        _recipe("Chicken Fried Rice", ["1 chicken breast", "2 cups cooked rice"]),
    ])
    client = make_client([RuntimeError("503"), reply])
    result = asyncio.run(
        generate_recipes_with_source("chicken, rice", {"dinner": True},
                                     client=client, orchestrator=orchestrator)
    )

    assert result.source == "ai"
    assert result.attempts == 2
    assert result.meal_types == ["dinner"]
    assert [r.title for r in result.recipes] == ["Chicken Rice Bowl", "Chicken Fried Rice"]
    assert recording_sleep.calls == [1.0]
