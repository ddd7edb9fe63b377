# tools/schemas.py
"""
HealthBite AI — Shared Data Schemas
===================================
Pydantic models for the two results the assistant hands back to the UI:
recipes and nutrition breakdowns.

JSON field names follow the browser client (camelCase), Python code uses
snake_case attributes.
"""

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMERATED LEVELS
# =============================================================================
NutritionLevel = Literal["high", "medium", "low", "none"]
VALID_LEVELS = ("high", "medium", "low", "none")

VITAMIN_DEFAULTS = {"A": "medium", "C": "medium", "D": "low"}
MINERAL_DEFAULTS = {"calcium": "medium", "iron": "low", "potassium": "medium"}

ResultSource = Literal["ai", "fallback"]


# =============================================================================
# RECIPES
# =============================================================================
class RecipeNutrition(BaseModel):
    """Per-serving macro estimate attached to a recipe."""
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)


class Recipe(BaseModel):
    """A complete, displayable recipe."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    ingredients: List[str] = Field(..., min_length=1)
    steps: List[str] = Field(..., min_length=1)
    nutrition: RecipeNutrition = Field(default_factory=RecipeNutrition)
    cooking_time: str = Field("30 minutes", alias="cookingTime")
    servings: int = Field(2, ge=1)


# =============================================================================
# NUTRITION
# =============================================================================
class Vitamins(BaseModel):
    A: NutritionLevel = VITAMIN_DEFAULTS["A"]
    C: NutritionLevel = VITAMIN_DEFAULTS["C"]
    D: NutritionLevel = VITAMIN_DEFAULTS["D"]


class Minerals(BaseModel):
    calcium: NutritionLevel = MINERAL_DEFAULTS["calcium"]
    iron: NutritionLevel = MINERAL_DEFAULTS["iron"]
    potassium: NutritionLevel = MINERAL_DEFAULTS["potassium"]


class NutritionData(BaseModel):
    """
    Nutrition breakdown for one described portion of food.

    Grams for macros, fiber and sugar; kcal for calories; mg for sodium.
    """
    model_config = ConfigDict(populate_by_name=True)

    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fiber: float = Field(0, ge=0)
    sugar: float = Field(0, ge=0)
    sodium: float = Field(0, ge=0)
    vitamins: Vitamins = Field(default_factory=Vitamins)
    minerals: Minerals = Field(default_factory=Minerals)
    portion_size: str = Field("1 serving", alias="portionSize")
    notes: str = ""


# =============================================================================
# PIPELINE RESULTS
# =============================================================================
class NutritionAnalysis(BaseModel):
    """Nutrition result plus where it came from."""
    nutrition: NutritionData
    source: ResultSource
    attempts: int = 0


class RecipeSuggestions(BaseModel):
    """Recipe result plus where it came from."""
    recipes: List[Recipe]
    source: ResultSource
    meal_types: List[str] = Field(default_factory=list)
    attempts: int = 0


# =============================================================================
# ENERGY NEEDS
# =============================================================================
class EnergyNeeds(BaseModel):
    """Daily energy estimate for a person (kcal unless noted)."""
    bmr: int
    tdee: int
    daily_calorie_deficit: int
    weekly_calorie_deficit: int
    daily_weight_change_kg: float
    daily_weight_change_grams: int
    weekly_weight_change_kg: float
    weekly_weight_change_grams: int
    targets: Dict[str, int]


__all__ = [
    "EnergyNeeds",
    "NutritionLevel",
    "VALID_LEVELS",
    "VITAMIN_DEFAULTS",
    "MINERAL_DEFAULTS",
    "ResultSource",
    "RecipeNutrition",
    "Recipe",
    "Vitamins",
    "Minerals",
    "NutritionData",
    "NutritionAnalysis",
    "RecipeSuggestions",
]
