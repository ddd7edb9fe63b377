# tools/nutrition_synthesizer.py
"""
HealthBite AI — Nutrition Synthesizer (Offline Fallback)
========================================================
Builds a complete NutritionData record from a food description using
keyword tables, portion detection and additive adjustments. Used whenever
Gemini is unavailable or its answers are unusable.

Never raises: any description, even gibberish, yields a valid record.

Pipeline:
  1. Base values
  2. Calorie-tier preset (low / medium / high)
  3. Additive adjustments per food signal
  4. Cooking-method adjustments
  5. Portion size string
  6. Portion x quantity multiplier, rounded
  7. Vitamin/mineral levels
"""

import math
import re
from typing import Dict, Optional, Tuple

from tools.food_classifier import CALORIE_TIER_KEYWORDS, contains_any, detect_calorie_tier
from tools.realism_validator import apply_micronutrient_overrides
from tools.schemas import Minerals, NutritionData, Vitamins


# =============================================================================
# BASE VALUES & PRESETS
# =============================================================================
BASE_VALUES = {
    "calories": 300,
    "protein": 15,
    "fat": 12,
    "carbs": 30,
    "fiber": 3,
    "sugar": 5,
    "sodium": 400,
}

TIER_PRESETS = {
    "low": {
        "values": {"calories": 150, "protein": 5, "fat": 3, "carbs": 15,
                   "fiber": 4, "sugar": 8, "sodium": 20},
        "note": "Low calorie food with high vitamin content.",
    },
    "medium": {
        "values": {"calories": 250, "protein": 20, "fat": 10, "carbs": 15,
                   "fiber": 1, "sugar": 2, "sodium": 200},
        "note": "Good source of protein with moderate calories.",
    },
    "high": {
        "values": {"calories": 500, "protein": 15, "fat": 25, "carbs": 45,
                   "fiber": 2, "sugar": 15, "sodium": 800},
        "note": "High calorie food with significant fat and carbohydrate content.",
    },
}

DEFAULT_NOTE = "Analysis based on typical preparation."

HIGH_PROTEIN_FOODS = [
    "chicken", "beef", "fish", "egg", "protein", "meat", "steak", "turkey",
    "tofu", "greek yogurt",
]

# (keywords, field deltas, note clause)
ADJUSTMENTS = [
    (
        HIGH_PROTEIN_FOODS,
        {"protein": 20, "calories": 50},
        "Excellent source of protein.",
    ),
    (
        ["cheese", "butter", "oil", "cream", "avocado", "nuts", "fried", "bacon", "sausage"],
        {"fat": 15, "calories": 100},
        "Contains significant fat content.",
    ),
    (
        ["bread", "pasta", "rice", "potato", "sugar", "cake", "cookie", "dessert",
         "sweet", "cereal", "oats"],
        {"carbs": 30, "calories": 80, "sugar": 5},
        "High in carbohydrates.",
    ),
    (
        ["beans", "lentils", "whole grain", "bran", "oats", "broccoli", "berries",
         "pear", "apple", "avocado"],
        {"fiber": 6},
        "Good source of dietary fiber.",
    ),
    (
        ["candy", "chocolate", "cake", "ice cream", "soda", "juice", "honey",
         "syrup", "dessert", "sweet"],
        {"sugar": 20, "calories": 60},
        "Contains added sugars.",
    ),
    (
        ["salt", "soy sauce", "processed", "canned", "bacon", "ham", "cheese",
         "pickle", "fast food", "snack"],
        {"sodium": 500},
        "High sodium content.",
    ),
]

# (keywords, field deltas, note clause); only the first matching method applies
COOKING_METHODS = [
    (["fried"], {"fat": 10, "calories": 100},
     "Fried preparation adds additional fat and calories."),
    (["baked", "grilled"], {"fat": -3, "calories": -30},
     "Baked/grilled preparation reduces fat content."),
    (["boiled", "steamed"], {"fat": -2, "calories": -20},
     "Boiled/steamed preparation preserves nutrients with minimal added fat."),
]

# Unit keywords -> display name; order decides which unit names the portion
PORTION_UNITS = [
    (("cup",), "cup"),
    (("slice",), "slice"),
    (("bowl",), "bowl"),
    (("piece",), "piece"),
    (("tablespoon", "tbsp"), "tablespoon"),
    (("teaspoon", "tsp"), "teaspoon"),
    (("ounce", "oz"), "ounce"),
    (("gram",), "gram"),
]

# Only countable units scale the values; "200 grams" is not 200 servings
QUANTITY_PATTERN = re.compile(
    r"(?<![\d.])(\d+(?:\.\d+)?)\s*(slice|piece|cup|bowl|plate|serving)s?\b"
)

# Anything scaled further lands on the realism ceiling anyway
MAX_QUANTITY_MULTIPLIER = 20.0

PORTION_PATTERN = re.compile(
    r"(?<![\d.])(\d+(?:\.\d+)?)\s*(cups?|slices?|bowls?|pieces?|tablespoons?|tbsp|teaspoons?|tsp|"
    r"ounces?|oz|grams?)\b"
)

ITEM_SPLIT_PATTERN = re.compile(r",|\band\b")


# =============================================================================
# HELPERS
# =============================================================================
def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _unit_name(token: str) -> Optional[str]:
    for keywords, name in PORTION_UNITS:
        if any(token.startswith(keyword) for keyword in keywords):
            return name
    return None


def detect_portion_size(description: str) -> str:
    """
    Describe the portion the values refer to.

    Examples:
        "2 slices of pizza"  -> "2 slice(s)"
        "a bowl of soup"     -> "1 bowl"
        "some grams of rice" -> "100 grams"
        "chicken curry"      -> "1 serving"
    """
    lowered = (description or "").lower()

    match = PORTION_PATTERN.search(lowered)
    if match:
        quantity = match.group(1)
        unit = _unit_name(match.group(2))
        if unit:
            return f"{quantity} {unit}(s)"

    for keywords, name in PORTION_UNITS:
        if any(re.search(rf"\b{re.escape(k)}", lowered) for k in keywords):
            return "100 grams" if name == "gram" else f"1 {name}"

    return "1 serving"


def detect_multipliers(description: str) -> Tuple[float, float]:
    """
    Return (portion multiplier, quantity multiplier) for a description.

    The quantity is read as a decimal ("1.5 cups" -> 1.5) and capped at
    MAX_QUANTITY_MULTIPLIER.
    """
    lowered = (description or "").lower()

    item_count = len(ITEM_SPLIT_PATTERN.split(lowered))
    portion_multiplier = 1.5 if item_count > 3 else 1.0

    match = QUANTITY_PATTERN.search(lowered)
    quantity_multiplier = min(float(match.group(1)), MAX_QUANTITY_MULTIPLIER) if match else 1.0

    return portion_multiplier, quantity_multiplier


def _micronutrient_levels(description: str) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Synthesizer baseline levels before the shared keyword overrides."""
    is_low_calorie = contains_any(description, CALORIE_TIER_KEYWORDS["low"])
    plant_level = "medium" if is_low_calorie else "low"

    vitamins = {"A": plant_level, "C": plant_level, "D": "low"}
    minerals = {"calcium": "medium", "iron": "low", "potassium": "medium"}

    if contains_any(description, ["milk", "yogurt", "fortified"]):
        vitamins["D"] = "medium"
    if contains_any(description, ["kale", "almonds", "fortified"]):
        minerals["calcium"] = "high"
    if contains_any(description, HIGH_PROTEIN_FOODS + ["quinoa", "fortified"]):
        minerals["iron"] = "high"
    if contains_any(description, ["sweet potato", "yogurt", "salmon", "beans"]):
        minerals["potassium"] = "high"

    return vitamins, minerals


# =============================================================================
# MAIN TOOL: synthesize_nutrition
# =============================================================================
def synthesize_nutrition(description: str) -> NutritionData:
    """
    Estimate nutrition for a food description without any AI call.

    Args:
        description: Free-text food description, e.g.
                     "2 slices of pepperoni pizza" or
                     "grilled salmon with rice and broccoli".

    Returns:
        NutritionData with whole-number values. Realism bounds are not
        applied here; callers run the realism clamp afterwards.

    Example:
        >>> data = synthesize_nutrition("2 slices of pepperoni pizza")
        >>> data.calories
        1000
        >>> data.portion_size
        '2 slice(s)'
    """
    text = (description or "").strip()

    # Step 1-2: base values, optionally replaced by a tier preset
    values = dict(BASE_VALUES)
    note = DEFAULT_NOTE
    tier = detect_calorie_tier(text)
    if tier:
        values = dict(TIER_PRESETS[tier]["values"])
        note = TIER_PRESETS[tier]["note"]
    notes = [note]

    # Step 3: additive adjustments
    for keywords, deltas, clause in ADJUSTMENTS:
        if contains_any(text, keywords):
            for field_name, delta in deltas.items():
                values[field_name] += delta
            notes.append(clause)

    # Step 4: cooking method
    for keywords, deltas, clause in COOKING_METHODS:
        if contains_any(text, keywords):
            for field_name, delta in deltas.items():
                values[field_name] = max(values[field_name] + delta, 0)
            notes.append(clause)
            break

    # Step 5-6: portion and multipliers
    portion_size = detect_portion_size(text)
    portion_multiplier, quantity_multiplier = detect_multipliers(text)
    factor = portion_multiplier * quantity_multiplier
    scaled = {name: round_half_up(value * factor) for name, value in values.items()}

    # Step 7: micronutrient levels (not scaled)
    vitamins, minerals = _micronutrient_levels(text)
    apply_micronutrient_overrides(vitamins, minerals, text)

    return NutritionData(
        **scaled,
        vitamins=Vitamins(**vitamins),
        minerals=Minerals(**minerals),
        portion_size=portion_size,
        notes=" ".join(notes),
    )


__all__ = [
    "BASE_VALUES",
    "TIER_PRESETS",
    "ADJUSTMENTS",
    "COOKING_METHODS",
    "synthesize_nutrition",
    "detect_portion_size",
    "detect_multipliers",
    "MAX_QUANTITY_MULTIPLIER",
    "round_half_up",
]
