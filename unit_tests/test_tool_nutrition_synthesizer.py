# unit_tests/test_tool_nutrition_synthesizer.py
"""
Unit Tests for Nutrition Synthesizer (Offline Fallback)
=======================================================
Run with: python -m pytest unit_tests/test_tool_nutrition_synthesizer.py -v
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tools.nutrition_synthesizer import (
    MAX_QUANTITY_MULTIPLIER,
    detect_multipliers,
    detect_portion_size,
    round_half_up,
    synthesize_nutrition,
)
from tools.realism_validator import clamp_nutrition


def test_pizza_scenario():
    """High tier, quantity multiplier of 2, high-calorie note."""
    print("\n" + "=" * 60)
    print("TEST: 2 slices of pepperoni pizza")
    print("=" * 60)

    description = "2 slices of pepperoni pizza"
    data = clamp_nutrition(synthesize_nutrition(description), description)

    print(f"   Calories: {data.calories}, portion: {data.portion_size}")
    assert data.calories > 500
    assert data.calories == 1000
    assert data.portion_size == "2 slice(s)"
    assert "High calorie food" in data.notes
    print("✅ Pizza scenario passed")


def test_low_calorie_food_with_fiber():
    data = synthesize_nutrition("apple")

    assert data.calories == 150
    assert data.fiber == 10
    assert data.vitamins.A == "medium"
    assert data.vitamins.C == "medium"
    assert "Good source of dietary fiber." in data.notes


def test_cooking_method_and_micronutrients():
    data = synthesize_nutrition("grilled salmon")

    assert data.calories == 270
    assert data.fat == 9
    assert "Baked/grilled preparation reduces fat content." in data.notes
    assert data.vitamins.D == "high"
    assert data.minerals.potassium == "high"


def test_only_first_cooking_method_applies():
    data = synthesize_nutrition("fried then baked tofu")
    assert "Fried preparation" in data.notes
    assert "Baked/grilled" not in data.notes


def test_portion_detection():
    assert detect_portion_size("a bowl of soup") == "1 bowl"
    assert detect_portion_size("chicken curry") == "1 serving"
    assert detect_portion_size("1.5 cups of oatmeal") == "1.5 cup(s)"
    assert detect_portion_size("some grams of rice") == "100 grams"


def test_multipliers():
    assert detect_multipliers("rice, beans, chicken, broccoli and corn") == (1.5, 1)
    assert detect_multipliers("3 pieces of sushi") == (1.0, 3)
    # mass units do not count as servings
    assert detect_multipliers("200 grams of rice") == (1.0, 1)
    # "and" inside a word is not a separator
    assert detect_multipliers("sandwich") == (1.0, 1)


def test_decimal_quantity_is_not_split():
    assert detect_multipliers("1.5 cups of rice") == (1.0, 1.5)
    assert detect_portion_size("1.5 cups of rice") == "1.5 cup(s)"

    one_cup = synthesize_nutrition("1 cup of rice")
    one_and_half = synthesize_nutrition("1.5 cups of rice")
    assert one_and_half.calories == round_half_up(one_cup.calories * 1.5)


def test_huge_quantity_is_capped():
    print("\n" + "=" * 60)
    print("TEST: 400-digit quantity")
    print("=" * 60)

    description = "1" + "0" * 400 + " slices of pizza"
    assert detect_multipliers(description) == (1.0, MAX_QUANTITY_MULTIPLIER)

    data = synthesize_nutrition(description)
    capped = synthesize_nutrition("20 slices of pizza")
    assert data.calories == capped.calories
    assert clamp_nutrition(data, description).calories == 1000
    print("✅ Quantity capped")


def test_never_fails_and_is_deterministic():
    for description in ["", "???", "xyzzy", "a full english breakfast with beans and toast"]:
        first = synthesize_nutrition(description)
        assert first == synthesize_nutrition(description)
        assert first.calories >= 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
