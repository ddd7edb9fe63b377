# agents/nutrition_agent.py
"""
HealthBite AI — Nutrition Analysis Agent
========================================
Public entry point for "what is in this food?".

Pipeline:
  1. Reject empty descriptions (the only error a caller ever sees)
  2. Ask Gemini for a JSON breakdown, with bounded retries
  3. Parse (JSON, then regex) and reject candidates beyond repair
  4. On exhaustion or without a credential, synthesize offline
  5. Clamp every result into realistic ranges

Also hosts the daily energy calculator (BMR / TDEE).
"""

from typing import Dict, Optional

from tools.gemini_client import (
    NUTRITION_PRESET,
    GeminiTextClient,
    load_gemini_config,
)
from tools.nutrition_synthesizer import synthesize_nutrition
from tools.realism_validator import clamp_nutrition, ensure_repairable
from tools.response_parser import parse_nutrition_response, require_candidate
from tools.retry_orchestrator import RetryOrchestrator
from tools.schemas import EnergyNeeds, NutritionAnalysis, NutritionData


# =============================================================================
# ERRORS
# =============================================================================
class MissingInputError(ValueError):
    """The user submitted nothing to analyze."""


# =============================================================================
# PROMPT
# =============================================================================
NUTRITION_PROMPT_TEMPLATE = """You are a professional nutritionist with expertise in food composition analysis.

Analyze the nutritional content of the following food: "{description}".

CRITICAL REQUIREMENTS:
1. Return ONLY pure JSON with no additional text, explanations, or markdown
2. Use exactly the structure shown in the example below
3. Base your analysis on standard portion sizes and state the portion in "portionSize"
4. Consider ALL ingredients mentioned in the description
5. Pay attention to cooking methods (fried foods have more calories than baked)
6. If quantities are mentioned (e.g., "2 slices of pizza"), adjust values accordingly
7. For mixed dishes, calculate the combined nutritional value

Include total calories (kcal); protein, fat, carbs, fiber and sugar in grams;
sodium in mg; vitamins A, C, D and minerals calcium, iron, potassium as
"high", "medium", "low" or "none"; the portion size; and short notes.

Example format:
{{
  "calories": 350,
  "protein": 20,
  "fat": 15,
  "carbs": 30,
  "fiber": 4,
  "sugar": 6,
  "sodium": 500,
  "vitamins": {{"A": "medium", "C": "high", "D": "low"}},
  "minerals": {{"calcium": "medium", "iron": "low", "potassium": "medium"}},
  "portionSize": "1 cup (240ml)",
  "notes": "Analysis based on homemade preparation with standard ingredients."
}}"""


def build_nutrition_prompt(description: str) -> str:
    return NUTRITION_PROMPT_TEMPLATE.format(description=description.strip())


# =============================================================================
# MAIN PIPELINE
# =============================================================================
async def analyze_food_with_source(
    description: str,
    client: Optional[GeminiTextClient] = None,
    orchestrator: Optional[RetryOrchestrator] = None
) -> NutritionAnalysis:
    """
    Analyze a food description, reporting whether AI or the fallback answered.

    Args:
        description: Free-text food description, e.g. "grilled salmon with rice".
        client: Gemini client; defaults to one configured from the environment.
        orchestrator: Retry policy; defaults to the client's config.

    Returns:
        NutritionAnalysis whose nutrition is always clamped into realistic
        ranges.

    Raises:
        MissingInputError: description is empty or whitespace. Nothing else
        escapes.
    """
    if not description or not description.strip():
        raise MissingInputError("Please describe the food you want to analyze")
    description = description.strip()

    if client is None:
        client = GeminiTextClient(load_gemini_config())

    if client.available:
        orchestrator = orchestrator or RetryOrchestrator(client.config)
        prompt = build_nutrition_prompt(description)

        async def request() -> NutritionData:
            raw_text = await client.generate_text(prompt, NUTRITION_PRESET)
            candidate = require_candidate(parse_nutrition_response(raw_text))
            return clamp_nutrition(ensure_repairable(candidate), description)

        outcome = await orchestrator.call_with_retry(request, label="nutrition analysis")
        if outcome.succeeded:
            print(f"✅ Nutrition analysis from Gemini after {outcome.attempts} attempt(s)")
            return NutritionAnalysis(
                nutrition=outcome.value,
                source="ai",
                attempts=outcome.attempts,
            )
        print("⚠️ Gemini nutrition analysis exhausted, using offline estimate")
        attempts = outcome.attempts
    else:
        print("⚠️ GOOGLE_API_KEY not set, using offline nutrition estimate")
        attempts = 0

    return NutritionAnalysis(
        nutrition=clamp_nutrition(synthesize_nutrition(description), description),
        source="fallback",
        attempts=attempts,
    )


async def analyze_food(
    description: str,
    client: Optional[GeminiTextClient] = None,
    orchestrator: Optional[RetryOrchestrator] = None
) -> NutritionData:
    """Analyze a food description and return only the nutrition data."""
    analysis = await analyze_food_with_source(description, client, orchestrator)
    return analysis.nutrition


# =============================================================================
# ENERGY NEEDS
# =============================================================================
ACTIVITY_FACTORS: Dict[str, float] = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "super_active": 1.9,
}

KCAL_PER_KG = 7700

GOAL_FACTORS = {
    "lose": 0.8,
    "maintain": 1.0,
    "gain": 1.1,
}


def calculate_energy_needs(
    age: int,
    sex: str,
    height_cm: float,
    weight_kg: float,
    activity_level: str = "sedentary"
) -> EnergyNeeds:
    """
    Estimate daily energy expenditure with the Mifflin-St Jeor equation.

    The "deficit" is the activity share of TDEE (TDEE - BMR), i.e. what
    eating only at BMR would leave uncovered; weight change assumes
    7700 kcal per kg.

    Example:
        >>> calculate_energy_needs(30, "male", 180, 80).bmr
        1780
    """
    if age <= 0 or height_cm <= 0 or weight_kg <= 0:
        raise ValueError("Age, height and weight must be positive")
    sex = (sex or "").strip().lower()
    if sex not in ("male", "female"):
        raise ValueError(f"Unknown sex '{sex}', expected 'male' or 'female'")
    if activity_level not in ACTIVITY_FACTORS:
        raise ValueError(
            f"Unknown activity level '{activity_level}', "
            f"expected one of {', '.join(ACTIVITY_FACTORS)}"
        )

    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age + (5 if sex == "male" else -161)
    tdee = bmr * ACTIVITY_FACTORS[activity_level]

    daily_deficit = tdee - bmr
    weekly_deficit = daily_deficit * 7
    daily_kg = daily_deficit / KCAL_PER_KG
    weekly_kg = weekly_deficit / KCAL_PER_KG

    return EnergyNeeds(
        bmr=round(bmr),
        tdee=round(tdee),
        daily_calorie_deficit=round(daily_deficit),
        weekly_calorie_deficit=round(weekly_deficit),
        daily_weight_change_kg=round(daily_kg, 2),
        daily_weight_change_grams=round(daily_kg * 1000),
        weekly_weight_change_kg=round(weekly_kg, 2),
        weekly_weight_change_grams=round(weekly_kg * 1000),
        targets={goal: round(tdee * factor) for goal, factor in GOAL_FACTORS.items()},
    )


__all__ = [
    "MissingInputError",
    "build_nutrition_prompt",
    "analyze_food_with_source",
    "analyze_food",
    "ACTIVITY_FACTORS",
    "calculate_energy_needs",
]
