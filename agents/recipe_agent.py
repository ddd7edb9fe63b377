# agents/recipe_agent.py
"""
HealthBite AI — Recipe Generation Agent
=======================================
Public entry point for "what can I cook with these?".

Pipeline:
  1. Split the comma-separated ingredient list; reject an empty one
  2. Ask Gemini for two recipes, with bounded retries
  3. Parse (JSON, then regex), then drop any recipe that leaves out a
     user ingredient; if none survive the attempt counts as failed
  4. Top up from the offline synthesizer when fewer than two survive
  5. On exhaustion or without a credential, synthesize offline
"""

from typing import Dict, List, Mapping, Optional

from agents.nutrition_agent import MissingInputError
from tools.gemini_client import RECIPE_PRESET, GeminiTextClient, load_gemini_config
from tools.realism_validator import require_coverage
from tools.recipe_synthesizer import (
    ALTERNATIVE_PREFIX,
    RECIPES_PER_RESULT,
    synthesize_recipes,
)
from tools.response_parser import parse_recipe_response, require_candidate
from tools.retry_orchestrator import RetryOrchestrator
from tools.schemas import Recipe, RecipeSuggestions


# =============================================================================
# MEAL TYPES
# =============================================================================
MEAL_TYPES = ["breakfast", "lunch", "dinner", "snack"]
DEFAULT_MEAL_TYPE = "lunch"


def resolve_meal_types(selections: Optional[Mapping[str, bool]]) -> List[str]:
    """
    Selected meal types in canonical order; ["lunch"] when nothing is selected.

    Example:
        >>> resolve_meal_types({"dinner": True, "breakfast": True, "snack": False})
        ['breakfast', 'dinner']
    """
    selections = selections or {}
    chosen = [m for m in MEAL_TYPES if selections.get(m)]
    return chosen or [DEFAULT_MEAL_TYPE]


def split_ingredients(ingredients: str) -> List[str]:
    """Split a comma-separated ingredient string, dropping blanks."""
    return [item.strip() for item in (ingredients or "").split(",") if item.strip()]


# =============================================================================
# PROMPT
# =============================================================================
RECIPE_PROMPT_TEMPLATE = """You are a professional chef and nutrition expert. Generate exactly 2 creative, detailed, and gourmet recipes for {meal_types} meals that MUST use ALL of these ingredients as the main components: {ingredients}.

CRITICAL REQUIREMENTS:
1. The recipes MUST prominently feature and use ALL of the user's ingredients listed above.
2. Return ONLY pure JSON with no additional text, explanations, or markdown
3. Use exactly the structure shown in the example below
4. Pay careful attention to any quantities mentioned in ingredients
5. Include herbs, spices, and seasonings to make the dish flavorful
6. Provide at least 5-7 detailed cooking steps for each recipe
7. Ensure nutrition information is accurate and realistic

For each recipe, include a creative title, the complete ingredient list with
measurements (MUST include ALL user ingredients), step-by-step instructions,
nutrition (calories, protein, fat, carbs), cooking time and servings.

Example format:
[
  {{
    "title": "Fluffy Scrambled Eggs with Fresh Herbs",
    "ingredients": ["4 large eggs", "2 tbsp milk", "1 tbsp butter"],
    "steps": ["Crack eggs into a bowl...", "Add milk and whisk..."],
    "nutrition": {{"calories": 220, "protein": 14, "fat": 17, "carbs": 2}},
    "cookingTime": "10 minutes",
    "servings": 2
  }}
]"""


def build_recipe_prompt(ingredients: List[str], meal_types: List[str]) -> str:
    return RECIPE_PROMPT_TEMPLATE.format(
        meal_types=", ".join(meal_types),
        ingredients=", ".join(ingredients),
    )


# =============================================================================
# HELPERS
# =============================================================================
def top_up_recipes(
    recipes: List[Recipe],
    ingredients: List[str],
    meal_type: str
) -> List[Recipe]:
    """Pad a short AI result with synthesized recipes, keeping titles unique."""
    result = list(recipes)
    for extra in synthesize_recipes(ingredients, meal_type):
        if len(result) >= RECIPES_PER_RESULT:
            break
        if extra.title in {r.title for r in result}:
            extra.title = ALTERNATIVE_PREFIX + extra.title
        result.append(extra)
    return result


# =============================================================================
# MAIN PIPELINE
# =============================================================================
async def generate_recipes_with_source(
    ingredients: str,
    meal_type_selections: Optional[Mapping[str, bool]] = None,
    client: Optional[GeminiTextClient] = None,
    orchestrator: Optional[RetryOrchestrator] = None
) -> RecipeSuggestions:
    """
    Generate recipes for a comma-separated ingredient list.

    Args:
        ingredients: e.g. "chicken, rice, broccoli".
        meal_type_selections: checkbox state, e.g. {"dinner": True}.
        client: Gemini client; defaults to one configured from the environment.
        orchestrator: Retry policy; defaults to the client's config.

    Returns:
        RecipeSuggestions with at least two recipes. AI recipes always
        mention every user ingredient.

    Raises:
        MissingInputError: no ingredients given. Nothing else escapes.
    """
    ingredient_list = split_ingredients(ingredients)
    if not ingredient_list:
        raise MissingInputError("Please enter at least one ingredient")

    meal_types = resolve_meal_types(meal_type_selections)
    fallback_meal_type = meal_types[0]

    if client is None:
        client = GeminiTextClient(load_gemini_config())

    attempts = 0
    if client.available:
        orchestrator = orchestrator or RetryOrchestrator(client.config)
        prompt = build_recipe_prompt(ingredient_list, meal_types)

        async def request() -> List[Recipe]:
            raw_text = await client.generate_text(prompt, RECIPE_PRESET)
            candidates = require_candidate(parse_recipe_response(raw_text))
            return require_coverage(candidates, ingredient_list)

        outcome = await orchestrator.call_with_retry(request, label="recipe generation")
        attempts = outcome.attempts
        if outcome.succeeded:
            print(f"✅ {len(outcome.value)} recipe(s) from Gemini after {attempts} attempt(s)")
            return RecipeSuggestions(
                recipes=top_up_recipes(outcome.value, ingredient_list, fallback_meal_type),
                source="ai",
                meal_types=meal_types,
                attempts=attempts,
            )
        print("⚠️ Gemini recipe generation exhausted, using offline recipes")
    else:
        print("⚠️ GOOGLE_API_KEY not set, using offline recipes")

    return RecipeSuggestions(
        recipes=synthesize_recipes(ingredient_list, fallback_meal_type),
        source="fallback",
        meal_types=meal_types,
        attempts=attempts,
    )


async def generate_recipes(
    ingredients: str,
    meal_type_selections: Optional[Dict[str, bool]] = None,
    client: Optional[GeminiTextClient] = None,
    orchestrator: Optional[RetryOrchestrator] = None
) -> List[Recipe]:
    """Generate recipes and return only the list."""
    suggestions = await generate_recipes_with_source(
        ingredients, meal_type_selections, client, orchestrator
    )
    return suggestions.recipes


__all__ = [
    "MEAL_TYPES",
    "resolve_meal_types",
    "split_ingredients",
    "build_recipe_prompt",
    "top_up_recipes",
    "generate_recipes_with_source",
    "generate_recipes",
]
