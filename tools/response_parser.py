# tools/response_parser.py
"""
HealthBite AI — Gemini Response Parser Tool
===========================================
Turns raw Gemini completions into candidate recipes or nutrition data.

Gemini is asked for pure JSON but often wraps it in markdown fences, adds
commentary, or answers in labeled prose. The parser:

  1. Strips code fences
  2. Cuts the outermost [...] (recipes) or {...} (nutrition) block
  3. Parses it as JSON and validates it with Pydantic
  4. On any failure, falls back to a regex extractor for labeled fields

The result is tagged (ParseOutcome) instead of silently returning junk:
a candidate is only handed back when it is structurally complete.
"""

import json
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from tools.realism_validator import coerce_level
from tools.schemas import (
    MINERAL_DEFAULTS,
    VITAMIN_DEFAULTS,
    NutritionData,
    Recipe,
)


# =============================================================================
# FIELD DEFAULTS
# =============================================================================
# Regex path: values used when a labeled field cannot be found.
NUTRITION_FIELD_DEFAULTS: Dict[str, Any] = {
    "calories": 350,
    "protein": 15,
    "fat": 12,
    "carbs": 30,
    "fiber": 3,
    "sugar": 5,
    "sodium": 400,
    "portionSize": "1 serving",
    "notes": "",
    **{f"vitamin_{k}": v for k, v in VITAMIN_DEFAULTS.items()},
    **MINERAL_DEFAULTS,
}

RECIPE_FIELD_DEFAULTS: Dict[str, Any] = {
    "calories": 350,
    "protein": 20,
    "fat": 15,
    "carbs": 30,
    "cookingTime": "30 minutes",
    "servings": 4,
    "title": "Gourmet Recipe",
}

# JSON path: a model that answered in JSON but skipped a field gets these.
JSON_NUMBER_DEFAULT = 0
JSON_COOKING_TIME_DEFAULT = "30 minutes"
JSON_SERVINGS_DEFAULT = 2
JSON_PORTION_DEFAULT = "1 serving"

NUTRITION_NUMBER_FIELDS = ("calories", "protein", "fat", "carbs", "fiber", "sugar", "sodium")
RECIPE_NUMBER_FIELDS = ("calories", "protein", "fat", "carbs")

MAX_REGEX_RECIPES = 2


# =============================================================================
# RESULT TYPE
# =============================================================================
class ParseOutcome(Enum):
    OK = "ok"
    PARSE_FAILURE = "parse_failure"          # bracketed block found but not valid JSON
    STRUCTURE_FAILURE = "structure_failure"  # no bracketed block / wrong shape


class ResponseParseError(ValueError):
    """Raised when a pipeline needs a candidate and the response had none."""


@dataclass
class ParseResult:
    outcome: ParseOutcome
    candidate: Optional[Union[List[Recipe], NutritionData]] = None
    method: Optional[str] = None   # "json" or "regex"
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome is ParseOutcome.OK


def require_candidate(result: ParseResult):
    """Return the candidate or raise ResponseParseError with the parse error."""
    if not result.ok:
        raise ResponseParseError(f"{result.outcome.value}: {result.error}")
    return result.candidate


# =============================================================================
# LOW-LEVEL HELPERS
# =============================================================================
_FENCE = re.compile(r"```(?:json|JSON)?")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers, keeping their content."""
    return _FENCE.sub("", text or "")


def extract_json_block(text: str, opener: str, closer: str) -> Optional[str]:
    """Cut text from the first opener to the last closer, or None if absent."""
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end == -1 or end < start:
        return None
    return text[start:end + 1]


def coerce_number(value: Any, default: float = JSON_NUMBER_DEFAULT) -> float:
    """
    Coerce a JSON value to a non-negative number.

    Accepts numbers and numeric strings with units ("20g", "350 kcal").
    Booleans, missing values, unparseable strings and non-finite numbers
    (1e999, Infinity, NaN) yield the default.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        match = _NUMBER.search(value)
        if not match:
            return default
        value = match.group()
    elif not isinstance(value, (int, float)):
        return default

    try:
        number = float(value)
    except OverflowError:
        return default
    return max(number, 0) if math.isfinite(number) else default


def _coerce_servings(value: Any, default: int) -> int:
    servings = int(coerce_number(value, default))
    return servings if servings >= 1 else default


def _load_json(block: str, warnings: List[str]) -> Optional[Any]:
    try:
        return json.loads(block)
    except json.JSONDecodeError as e:
        warnings.append(f"JSON decode failed: {e}")
        return None


# =============================================================================
# RECIPES: JSON PATH
# =============================================================================
def _recipe_from_dict(raw: Dict[str, Any]) -> Optional[Recipe]:
    """Build a Recipe from a loosely shaped dict, or None if essentials are missing."""
    if not isinstance(raw, dict):
        return None

    title = raw.get("title")
    ingredients = raw.get("ingredients")
    steps = raw.get("steps") or raw.get("instructions")
    if not isinstance(title, str) or not isinstance(ingredients, list) or not isinstance(steps, list):
        return None

    nutrition = raw.get("nutrition") if isinstance(raw.get("nutrition"), dict) else {}
    cooking_time = raw.get("cookingTime") or raw.get("cooking_time")

    try:
        return Recipe(
            title=title.strip(),
            ingredients=[str(i).strip() for i in ingredients if str(i).strip()],
            steps=[str(s).strip() for s in steps if str(s).strip()],
            nutrition={name: coerce_number(nutrition.get(name)) for name in RECIPE_NUMBER_FIELDS},
            cooking_time=cooking_time if isinstance(cooking_time, str) and cooking_time.strip()
            else JSON_COOKING_TIME_DEFAULT,
            servings=_coerce_servings(raw.get("servings"), JSON_SERVINGS_DEFAULT),
        )
    except (ValidationError, ValueError, OverflowError):
        return None


def _recipes_from_json(data: Any) -> List[Recipe]:
    if isinstance(data, dict):
        data = data.get("recipes", [data])
    if not isinstance(data, list):
        return []
    recipes = [_recipe_from_dict(item) for item in data]
    return [r for r in recipes if r is not None]


# =============================================================================
# RECIPES: REGEX PATH
# =============================================================================
_RECIPE_SPLIT = re.compile(r"Recipe\s*\d*\s*:", re.IGNORECASE)
_TITLE = re.compile(r"\bTitle\s*:?\s*([^\n]+)", re.IGNORECASE)
# Section bodies run until the next labeled line
_INGREDIENTS = re.compile(
    r"Ingredients\s*:?[ \t]*\n?([\s\S]*?)(?=\n[\s#*]*(?:Steps|Instructions|Directions|Method|"
    r"Nutrition|Cooking Time|Servings)\b|$)",
    re.IGNORECASE,
)
_STEPS = re.compile(
    r"(?:Steps|Instructions|Directions|Method)\s*:?[ \t]*\n?([\s\S]*?)"
    r"(?=\n[\s#*]*(?:Nutrition|Calories|Cooking Time|Total Time|Servings|Notes)\b|$)",
    re.IGNORECASE,
)
_LIST_PREFIX = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")
_COOKING_TIME = re.compile(r"(?:cook(?:ing)?|total)\s+time\s*:?\s*([^\n]+)", re.IGNORECASE)
_SERVINGS = re.compile(r"(?:servings|yields|serves)\s*:?\s*(\d+)", re.IGNORECASE)


def _labeled_number(text: str, labels: str) -> Optional[float]:
    match = re.search(rf"(?:{labels})[\"']?\s*:?\s*[\"']?(\d+(?:\.\d+)?)", text, re.IGNORECASE)
    if not match:
        return None
    value = float(match.group(1))
    return value if math.isfinite(value) else None


def _clean_line(line: str) -> str:
    return _LIST_PREFIX.sub("", line).strip().strip("*#").strip()


def _list_items(section: str) -> List[str]:
    return [_clean_line(line) for line in section.splitlines() if _clean_line(line)]


def _recipe_from_block(block: str) -> Optional[Recipe]:
    title_match = _TITLE.search(block)
    if title_match:
        title = _clean_line(title_match.group(1))
    else:
        first_line = next((l for l in block.splitlines() if l.strip()), "")
        title = _clean_line(first_line) or RECIPE_FIELD_DEFAULTS["title"]

    ingredients_match = _INGREDIENTS.search(block)
    ingredients = _list_items(ingredients_match.group(1)) if ingredients_match else []

    steps_match = _STEPS.search(block)
    steps = _list_items(steps_match.group(1)) if steps_match else []

    if not ingredients or not steps:
        return None

    nutrition = {}
    for name, labels in (("calories", "calories"), ("protein", "protein"),
                         ("fat", "fat"), ("carbs", "carbs|carbohydrates")):
        value = _labeled_number(block, labels)
        nutrition[name] = value if value is not None else RECIPE_FIELD_DEFAULTS[name]

    time_match = _COOKING_TIME.search(block)
    servings_match = _SERVINGS.search(block)

    return Recipe(
        title=title,
        ingredients=ingredients,
        steps=steps,
        nutrition=nutrition,
        cooking_time=_clean_line(time_match.group(1)) if time_match
        else RECIPE_FIELD_DEFAULTS["cookingTime"],
        servings=_coerce_servings(servings_match.group(1) if servings_match else None,
                                  RECIPE_FIELD_DEFAULTS["servings"]),
    )


def extract_recipes_with_regex(text: str) -> List[Recipe]:
    """Best-effort extraction of up to two recipes from labeled prose."""
    blocks = [b for b in _RECIPE_SPLIT.split(strip_code_fences(text)) if b.strip()]
    recipes = []
    for block in blocks:
        recipe = _recipe_from_block(block)
        if recipe is not None:
            recipes.append(recipe)
        if len(recipes) >= MAX_REGEX_RECIPES:
            break
    return recipes


# =============================================================================
# MAIN TOOL: parse_recipe_response
# =============================================================================
def parse_recipe_response(raw_text: str) -> ParseResult:
    """
    Parse a Gemini recipe completion into candidate recipes.

    Accepts a JSON array of recipes, an object with a "recipes" array, or a
    single recipe object, with or without code fences and chatter.

    Returns:
        ParseResult with outcome OK and a non-empty list of Recipe objects,
        or a failure outcome when neither JSON nor labeled prose yielded a
        complete recipe.
    """
    warnings: List[str] = []
    text = strip_code_fences(raw_text)

    outcome = ParseOutcome.STRUCTURE_FAILURE
    error = "No JSON array found in response"

    for opener, closer in (("[", "]"), ("{", "}")):
        block = extract_json_block(text, opener, closer)
        if block is None:
            continue
        data = _load_json(block, warnings)
        if data is None:
            outcome, error = ParseOutcome.PARSE_FAILURE, warnings[-1]
            continue
        recipes = _recipes_from_json(data)
        if recipes:
            return ParseResult(ParseOutcome.OK, recipes, "json", warnings=warnings)
        outcome, error = ParseOutcome.STRUCTURE_FAILURE, "JSON held no complete recipe"

    recipes = extract_recipes_with_regex(raw_text or "")
    if recipes:
        return ParseResult(ParseOutcome.OK, recipes, "regex", warnings=warnings + [error])

    return ParseResult(outcome, error=error, warnings=warnings)


# =============================================================================
# NUTRITION: JSON PATH
# =============================================================================
def normalize_nutrition(data: Dict[str, Any]) -> NutritionData:
    """Coerce a loosely shaped nutrition dict into NutritionData."""
    vitamins = data.get("vitamins") if isinstance(data.get("vitamins"), dict) else {}
    minerals = data.get("minerals") if isinstance(data.get("minerals"), dict) else {}
    portion = data.get("portionSize") or data.get("portion_size")
    notes = data.get("notes")

    return NutritionData(
        **{name: coerce_number(data.get(name)) for name in NUTRITION_NUMBER_FIELDS},
        vitamins={k: coerce_level(vitamins.get(k), d) for k, d in VITAMIN_DEFAULTS.items()},
        minerals={k: coerce_level(minerals.get(k), d) for k, d in MINERAL_DEFAULTS.items()},
        portion_size=portion.strip() if isinstance(portion, str) and portion.strip()
        else JSON_PORTION_DEFAULT,
        notes=notes if isinstance(notes, str) else "",
    )


# =============================================================================
# NUTRITION: REGEX PATH
# =============================================================================
_NUTRITION_NUMBER_LABELS = {
    "calories": r"calories",
    "protein": r"protein",
    "fat": r"fat",
    "carbs": r"carbs|carbohydrates",
    "fiber": r"fiber|fibre",
    "sugar": r"sugars?",
    "sodium": r"sodium",
}

_LEVEL_LABELS = {
    "vitamin_A": r"vitamin\s*a",
    "vitamin_C": r"vitamin\s*c",
    "vitamin_D": r"vitamin\s*d",
    "calcium": r"calcium",
    "iron": r"iron",
    "potassium": r"potassium",
}


def extract_nutrition_with_regex(text: str) -> Optional[NutritionData]:
    """
    Best-effort extraction from labeled prose ("Calories: 350", "Vitamin C: high").

    Returns None when not a single labeled field could be located; otherwise
    fills every missing field from NUTRITION_FIELD_DEFAULTS.
    """
    text = strip_code_fences(text)
    found = 0
    values: Dict[str, Any] = {}

    for name, labels in _NUTRITION_NUMBER_LABELS.items():
        value = _labeled_number(text, labels)
        if value is not None:
            found += 1
        values[name] = value if value is not None else NUTRITION_FIELD_DEFAULTS[name]

    levels: Dict[str, str] = {}
    for name, labels in _LEVEL_LABELS.items():
        match = re.search(rf"(?:{labels})[\"']?\s*:\s*[\"']?(\w+)", text, re.IGNORECASE)
        if match:
            found += 1
        levels[name] = coerce_level(match.group(1) if match else None,
                                    NUTRITION_FIELD_DEFAULTS[name])

    portion_match = re.search(r"portion\s*size\s*:?\s*([^\n]+)", text, re.IGNORECASE)
    notes_match = re.search(r"notes\s*:?\s*([^\n]+)", text, re.IGNORECASE)

    if not found:
        return None

    return NutritionData(
        **values,
        vitamins={k: levels[f"vitamin_{k}"] for k in VITAMIN_DEFAULTS},
        minerals={k: levels[k] for k in MINERAL_DEFAULTS},
        portion_size=_clean_line(portion_match.group(1)) if portion_match
        else NUTRITION_FIELD_DEFAULTS["portionSize"],
        notes=_clean_line(notes_match.group(1)) if notes_match else NUTRITION_FIELD_DEFAULTS["notes"],
    )


# =============================================================================
# MAIN TOOL: parse_nutrition_response
# =============================================================================
def parse_nutrition_response(raw_text: str) -> ParseResult:
    """
    Parse a Gemini nutrition completion into candidate NutritionData.

    Returns:
        ParseResult with outcome OK and a NutritionData candidate (values
        not yet clamped), or a failure outcome when the text held neither a
        JSON object nor any labeled nutrition field.
    """
    warnings: List[str] = []
    text = strip_code_fences(raw_text)

    block = extract_json_block(text, "{", "}")
    if block is None:
        outcome, error = ParseOutcome.STRUCTURE_FAILURE, "No JSON object found in response"
    else:
        data = _load_json(block, warnings)
        if isinstance(data, dict):
            try:
                return ParseResult(ParseOutcome.OK, normalize_nutrition(data), "json",
                                   warnings=warnings)
            except ValidationError as e:
                warnings.append(f"Nutrition validation failed: {e}")
                outcome, error = ParseOutcome.STRUCTURE_FAILURE, warnings[-1]
        elif data is None:
            outcome, error = ParseOutcome.PARSE_FAILURE, warnings[-1]
        else:
            outcome, error = ParseOutcome.STRUCTURE_FAILURE, "JSON payload is not an object"

    extracted = extract_nutrition_with_regex(raw_text or "")
    if extracted is not None:
        return ParseResult(ParseOutcome.OK, extracted, "regex", warnings=warnings + [error])

    return ParseResult(outcome, error=error, warnings=warnings)


__all__ = [
    "ParseOutcome",
    "ParseResult",
    "ResponseParseError",
    "require_candidate",
    "NUTRITION_FIELD_DEFAULTS",
    "RECIPE_FIELD_DEFAULTS",
    "strip_code_fences",
    "extract_json_block",
    "coerce_number",
    "parse_recipe_response",
    "parse_nutrition_response",
    "extract_recipes_with_regex",
    "extract_nutrition_with_regex",
    "normalize_nutrition",
]
