# tools/realism_validator.py
"""
HealthBite AI — Realism & Coverage Validator Tool
=================================================
Post-parse checks applied before anything reaches the UI:

  1. Nutrition realism clamp: keeps every numeric field inside plausible
     bounds, coerces vitamin/mineral levels into the enumeration and raises
     levels for foods known to be rich in them. Runs for AI and fallback
     data alike and is idempotent.
  2. Recipe ingredient coverage: a generated recipe survives only if every
     user ingredient appears in its ingredient list.

Bounds are heuristics, not nutrition facts.
"""

import math
import re
from typing import Dict, List, Sequence

from tools.food_classifier import contains_any
from tools.schemas import (
    MINERAL_DEFAULTS,
    VALID_LEVELS,
    VITAMIN_DEFAULTS,
    Minerals,
    NutritionData,
    Recipe,
    Vitamins,
)


# =============================================================================
# REALISM BOUNDS
# =============================================================================
REALISM_BOUNDS = {
    "calories_min": 100,
    "calories_max": 1000,
    "protein_max": 50,
    "fat_max": 50,
    "carbs_max": 100,
    "fiber_max": 25,
    "sugar_max": 50,
    "sodium_max": 2500,
}

NUMERIC_FIELDS = ("calories", "protein", "fat", "carbs", "fiber", "sugar", "sodium")

# Foods that legitimately sit under the calorie floor
VERY_LOW_CALORIE_FOODS = ["celery", "lettuce", "cucumber", "water"]

# Descriptions of whole meals may exceed the single-item ceiling
FULL_MEAL_WORDS = ["meal", "breakfast", "lunch", "dinner"]

# Keyword signals that push a vitamin/mineral level to "high"
VITAMIN_SIGNALS: Dict[str, List[str]] = {
    "A": ["carrot", "sweet potato", "spinach", "kale", "liver", "pumpkin", "butternut squash"],
    "C": ["orange", "lemon", "kiwi", "strawberry", "bell pepper", "broccoli",
          "brussels sprouts", "grapefruit"],
    "D": ["fish", "salmon", "tuna", "egg", "mushroom"],
}

MINERAL_SIGNALS: Dict[str, List[str]] = {
    "calcium": ["milk", "cheese", "yogurt", "tofu", "sardines"],
    "iron": ["beef", "spinach", "lentil", "bean", "liver"],
    "potassium": ["banana", "potato", "avocado", "spinach"],
}


# =============================================================================
# ERRORS
# =============================================================================
class IngredientCoverageError(ValueError):
    """No generated recipe used every ingredient the user supplied."""


class UnrealisticNutritionError(ValueError):
    """An AI nutrition candidate carried no usable values at all."""


# =============================================================================
# MICRONUTRIENT LEVELS
# =============================================================================
def coerce_level(value, default: str) -> str:
    """Lower-case a level string, falling back to the default if it is not enumerated."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in VALID_LEVELS:
            return lowered
    return default


def apply_micronutrient_overrides(
    vitamins: Dict[str, str],
    minerals: Dict[str, str],
    description: str
) -> None:
    """
    Raise vitamin/mineral levels to "high" for foods known to be rich in them.

    Shared by the fallback synthesizer and the realism clamp. Updates the
    dictionaries in place; fields without a keyword hit are left untouched.
    """
    for key, keywords in VITAMIN_SIGNALS.items():
        if contains_any(description, keywords):
            vitamins[key] = "high"

    for key, keywords in MINERAL_SIGNALS.items():
        if contains_any(description, keywords):
            minerals[key] = "high"


# =============================================================================
# NUTRITION REALISM CLAMP
# =============================================================================
def _bounded(value: float, upper: float) -> float:
    return min(max(value, 0), upper)


def _all_finite(data: NutritionData) -> bool:
    return all(math.isfinite(getattr(data, name)) for name in NUMERIC_FIELDS)


def clamp_nutrition(data: NutritionData, description: str) -> NutritionData:
    """
    Clamp nutrition values into realistic ranges for the described food.

    Args:
        data: Candidate nutrition data (AI-parsed or synthesized).
        description: The user's food description; drives the calorie
                     exceptions and the micronutrient signals.

    Returns:
        A new NutritionData; the input is not modified. Applying the clamp
        to its own output returns an equal record.

    Raises:
        UnrealisticNutritionError: a value is infinite or NaN.
    """
    if not _all_finite(data):
        raise UnrealisticNutritionError("Nutrition candidate has non-finite values")

    bounds = REALISM_BOUNDS
    calories = max(data.calories, 0)

    if not contains_any(description, VERY_LOW_CALORIE_FOODS):
        calories = max(calories, bounds["calories_min"])
    if not contains_any(description, FULL_MEAL_WORDS):
        calories = min(calories, bounds["calories_max"])

    vitamins = {
        key: coerce_level(getattr(data.vitamins, key), default)
        for key, default in VITAMIN_DEFAULTS.items()
    }
    minerals = {
        key: coerce_level(getattr(data.minerals, key), default)
        for key, default in MINERAL_DEFAULTS.items()
    }
    apply_micronutrient_overrides(vitamins, minerals, description)

    return data.model_copy(update={
        "calories": calories,
        "protein": _bounded(data.protein, bounds["protein_max"]),
        "fat": _bounded(data.fat, bounds["fat_max"]),
        "carbs": _bounded(data.carbs, bounds["carbs_max"]),
        "fiber": _bounded(data.fiber, bounds["fiber_max"]),
        "sugar": _bounded(data.sugar, bounds["sugar_max"]),
        "sodium": _bounded(data.sodium, bounds["sodium_max"]),
        "vitamins": Vitamins(**vitamins),
        "minerals": Minerals(**minerals),
    })


def is_repairable(data: NutritionData) -> bool:
    """An AI candidate with no calories and no macros is beyond repair."""
    if not _all_finite(data):
        return False
    return data.calories > 0 or (data.protein + data.fat + data.carbs) > 0


def ensure_repairable(data: NutritionData) -> NutritionData:
    if not is_repairable(data):
        raise UnrealisticNutritionError("Nutrition candidate has no calorie or macro values")
    return data


# =============================================================================
# RECIPE INGREDIENT COVERAGE
# =============================================================================
_LEADING_QUANTITY = re.compile(
    r"^\s*\d+(?:[./]\d+)?\s*"
    r"(?:cups?|tablespoons?|teaspoons?|tbsp|tsp|oz|ounces?|pounds?|lbs?|grams?|g|"
    r"ml|l|liters?|pieces?|slices?)?\b\s*",
    re.IGNORECASE,
)
_NON_LETTERS = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")


def _letters_only(text: str) -> str:
    text = _NON_LETTERS.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def normalize_ingredient(ingredient: str) -> str:
    """
    Reduce a user ingredient to the words a recipe must mention.

    Example:
        >>> normalize_ingredient("2 cups Brown Rice!")
        'brown rice'
    """
    return _letters_only(_LEADING_QUANTITY.sub("", ingredient or "", count=1))


def recipe_covers_ingredients(recipe: Recipe, user_ingredients: Sequence[str]) -> bool:
    """True when every normalized user ingredient is a substring of the recipe's ingredient text."""
    recipe_text = _letters_only(" ".join(recipe.ingredients))
    required = [normalize_ingredient(i) for i in user_ingredients]
    return all(name in recipe_text for name in required if name)


def filter_recipes_by_coverage(
    recipes: Sequence[Recipe],
    user_ingredients: Sequence[str]
) -> List[Recipe]:
    """Drop recipes that leave out any user ingredient. Dropped recipes are not repaired."""
    if not user_ingredients:
        return list(recipes)
    return [r for r in recipes if recipe_covers_ingredients(r, user_ingredients)]


def require_coverage(recipes: Sequence[Recipe], user_ingredients: Sequence[str]) -> List[Recipe]:
    """Like filter_recipes_by_coverage, but an empty result is a validation failure."""
    covered = filter_recipes_by_coverage(recipes, user_ingredients)
    if not covered:
        raise IngredientCoverageError(
            "Generated recipes did not include all required ingredients"
        )
    return covered


__all__ = [
    "REALISM_BOUNDS",
    "VITAMIN_SIGNALS",
    "MINERAL_SIGNALS",
    "IngredientCoverageError",
    "UnrealisticNutritionError",
    "coerce_level",
    "apply_micronutrient_overrides",
    "clamp_nutrition",
    "is_repairable",
    "ensure_repairable",
    "normalize_ingredient",
    "recipe_covers_ingredients",
    "filter_recipes_by_coverage",
    "require_coverage",
]
