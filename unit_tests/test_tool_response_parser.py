# unit_tests/test_tool_response_parser.py
"""
Unit Tests for Gemini Response Parser Tool
==========================================
Run with: python -m pytest unit_tests/test_tool_response_parser.py -v
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tools.response_parser import (
    ParseOutcome,
    ResponseParseError,
    coerce_number,
    extract_json_block,
    parse_nutrition_response,
    parse_recipe_response,
    require_candidate,
    strip_code_fences,
)


RECIPES_JSON = [
    {
        "title": "Spinach Egg Scramble",
        "ingredients": ["3 eggs", "1 cup spinach"],
        "steps": ["Whisk the eggs.", "Wilt the spinach.", "Scramble together."],
        "nutrition": {"calories": "310 kcal", "protein": 20, "fat": 22, "carbs": 4},
        "cookingTime": "10 minutes",
        "servings": 2,
    },
    {
        "title": "Eggs Florentine",
        "ingredients": ["2 eggs", "2 cups spinach", "1 english muffin"],
        "steps": ["Poach the eggs.", "Serve on spinach and muffin."],
    },
]


# =============================================================================
# HELPERS
# =============================================================================
def test_strip_fences_and_extract_block():
    text = "Sure!\n```json\n[1, 2]\n```\nEnjoy"
    stripped = strip_code_fences(text)

    assert "```" not in stripped
    assert extract_json_block(stripped, "[", "]") == "[1, 2]"
    assert extract_json_block("no brackets", "{", "}") is None


def test_coerce_number():
    assert coerce_number("20g") == 20
    assert coerce_number(12.5) == 12.5
    assert coerce_number(-3) == 0
    assert coerce_number(None) == 0
    assert coerce_number(True) == 0
    assert coerce_number("lots") == 0


def test_coerce_number_rejects_non_finite():
    assert coerce_number(float("inf")) == 0
    assert coerce_number(float("nan"), 7) == 7
    assert coerce_number(10 ** 400, 5) == 5
    assert coerce_number("9" * 400 + " kcal", 5) == 5


# =============================================================================
# RECIPES
# =============================================================================
def test_recipes_from_fenced_json():
    print("\n" + "=" * 60)
    print("TEST: Recipe JSON inside code fences")
    print("=" * 60)

    raw = "Here you go:\n```json\n" + json.dumps(RECIPES_JSON) + "\n```"
    result = parse_recipe_response(raw)

    assert result.ok
    assert result.method == "json"
    assert [r.title for r in result.candidate] == ["Spinach Egg Scramble", "Eggs Florentine"]
    first, second = result.candidate
    assert first.nutrition.calories == 310
    assert first.cooking_time == "10 minutes"
    # missing fields get JSON defaults
    assert second.cooking_time == "30 minutes"
    assert second.servings == 2
    assert second.nutrition.calories == 0
    print("✅ Fenced JSON parsed")


def test_recipes_wrapped_in_object_or_single_object():
    wrapped = parse_recipe_response(json.dumps({"recipes": RECIPES_JSON}))
    assert wrapped.ok and len(wrapped.candidate) == 2

    single = parse_recipe_response(json.dumps(RECIPES_JSON[0]))
    assert single.ok
    assert single.candidate[0].title == "Spinach Egg Scramble"


def test_incomplete_json_recipes_are_dropped():
    broken = [{"title": "No Steps", "ingredients": ["eggs"]}, RECIPES_JSON[0]]
    result = parse_recipe_response(json.dumps(broken))

    assert [r.title for r in result.candidate] == ["Spinach Egg Scramble"]


def test_overflowing_servings_keep_sibling_recipes():
    overflowing = (
        '{"title": "Huge Batch", "ingredients": ["eggs"], "steps": ["Cook."], '
        '"servings": 1e999, "nutrition": {"calories": Infinity, "protein": NaN}}'
    )
    raw = f"[{json.dumps(RECIPES_JSON[0])}, {overflowing}]"
    result = parse_recipe_response(raw)

    assert result.ok
    assert [r.title for r in result.candidate] == ["Spinach Egg Scramble", "Huge Batch"]
    huge = result.candidate[1]
    assert huge.servings == 2
    assert huge.nutrition.calories == 0
    assert huge.nutrition.protein == 0


def test_recipes_from_labeled_prose():
    raw = (
        "Recipe 1: Garlic Chicken\n"
        "Ingredients:\n"
        "- 2 chicken breasts\n"
        "- 3 cloves garlic\n"
        "Steps:\n"
        "1. Season the chicken.\n"
        "2. Cook it with the garlic.\n"
        "Calories: 420\n"
        "Servings: 3\n"
    )
    result = parse_recipe_response(raw)

    assert result.ok
    assert result.method == "regex"
    recipe = result.candidate[0]
    assert recipe.title == "Garlic Chicken"
    assert recipe.ingredients == ["2 chicken breasts", "3 cloves garlic"]
    assert recipe.steps == ["Season the chicken.", "Cook it with the garlic."]
    assert recipe.nutrition.calories == 420
    assert recipe.nutrition.protein == 20
    assert recipe.servings == 3
    assert recipe.cooking_time == "30 minutes"


def test_recipe_failures_are_tagged():
    no_structure = parse_recipe_response("Sorry, I cannot help with that.")
    assert no_structure.outcome is ParseOutcome.STRUCTURE_FAILURE
    assert no_structure.candidate is None

    bad_json = parse_recipe_response("[{not json}]")
    assert bad_json.outcome is ParseOutcome.PARSE_FAILURE

    with pytest.raises(ResponseParseError):
        require_candidate(bad_json)


# =============================================================================
# NUTRITION
# =============================================================================
def test_nutrition_from_json_with_coercion():
    print("\n" + "=" * 60)
    print("TEST: Nutrition JSON normalization")
    print("=" * 60)

    raw = (
        "```json\n"
        '{"calories": "320", "protein": 25, "fat": "9.5g", '
        '"vitamins": {"A": "HIGH", "C": "bogus"}, "portionSize": "1 plate"}\n'
        "```"
    )
    result = parse_nutrition_response(raw)

    assert result.ok and result.method == "json"
    data = result.candidate
    assert data.calories == 320
    assert data.fat == 9.5
    assert data.fiber == 0
    assert data.vitamins.A == "high"
    assert data.vitamins.C == "medium"
    assert data.vitamins.D == "low"
    assert data.minerals.iron == "low"
    assert data.portion_size == "1 plate"
    assert data.notes == ""
    print("✅ Nutrition JSON normalized")


def test_nutrition_regex_fallback():
    raw = "Calories: 250\nProtein: 12g\nVitamin C: high\nIron: none"
    result = parse_nutrition_response(raw)

    assert result.ok and result.method == "regex"
    data = result.candidate
    assert data.calories == 250
    assert data.protein == 12
    assert data.fat == 12
    assert data.sodium == 400
    assert data.vitamins.C == "high"
    assert data.minerals.iron == "none"
    assert data.portion_size == "1 serving"


def test_non_finite_nutrition_numbers_use_defaults():
    result = parse_nutrition_response('{"calories": 1e999, "protein": 31, "fat": Infinity, "carbs": NaN}')

    assert result.ok and result.method == "json"
    assert result.candidate.calories == 0
    assert result.candidate.protein == 31
    assert result.candidate.fat == 0
    assert result.candidate.carbs == 0

    prose = parse_nutrition_response("Calories: " + "9" * 400 + "\nProtein: 12g")
    assert prose.ok and prose.method == "regex"
    assert prose.candidate.calories == 350
    assert prose.candidate.protein == 12


def test_truncated_json_recovers_through_regex():
    result = parse_nutrition_response('{"calories": 300, "protein": 18,')

    assert result.ok and result.method == "regex"
    assert result.candidate.calories == 300
    assert result.candidate.protein == 18


def test_nutrition_failures_are_tagged():
    assert parse_nutrition_response("I don't know.").outcome is ParseOutcome.STRUCTURE_FAILURE
    assert parse_nutrition_response("{not valid json}").outcome is ParseOutcome.PARSE_FAILURE
    assert parse_nutrition_response("[1, 2]").outcome is ParseOutcome.STRUCTURE_FAILURE
