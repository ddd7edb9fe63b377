# api/app.py
"""
HealthBite AI — FastAPI Backend
===============================
HTTP surface for the recipe finder and the calorie calculator.

Run with: python -m api.app
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from dotenv import load_dotenv
load_dotenv()

from agents.nutrition_agent import (
    ACTIVITY_FACTORS,
    MissingInputError,
    analyze_food_with_source,
    calculate_energy_needs,
)
from agents.recipe_agent import generate_recipes_with_source
from tools.gemini_client import GeminiTextClient, load_gemini_config
from tools.schemas import EnergyNeeds, NutritionAnalysis, RecipeSuggestions


API_VERSION = "1.0.0"


# =============================================================================
# PYDANTIC MODELS
# =============================================================================
class NutritionRequest(BaseModel):
    description: str = ""


class RecipeRequest(BaseModel):
    ingredients: str = ""
    meal_types: Dict[str, bool] = Field(default_factory=dict)


class EnergyRequest(BaseModel):
    age: int
    sex: str = "male"
    height_cm: float
    weight_kg: float
    activity_level: str = "sedentary"


# =============================================================================
# APP SETUP
# =============================================================================
app = FastAPI(
    title="HealthBite AI API",
    version=API_VERSION,
    description="Recipe suggestions and nutrition estimates backed by Gemini"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_GEMINI_CLIENT: Optional[GeminiTextClient] = None


def get_gemini_client() -> GeminiTextClient:
    """One shared client per process, configured from the environment."""
    global _GEMINI_CLIENT
    if _GEMINI_CLIENT is None:
        _GEMINI_CLIENT = GeminiTextClient(load_gemini_config())
    return _GEMINI_CLIENT


# =============================================================================
# ROUTES
# =============================================================================
@app.get("/health")
async def health(client: GeminiTextClient = Depends(get_gemini_client)):
    return {
        "status": "online",
        "system": "HealthBite AI",
        "version": API_VERSION,
        "gemini": client.available,
        "timestamp": datetime.now().isoformat()
    }


@app.post("/api/v1/nutrition/analyze", response_model=NutritionAnalysis)
async def analyze_nutrition(
    request: NutritionRequest,
    client: GeminiTextClient = Depends(get_gemini_client)
):
    """Estimate nutrition for a free-text food description."""
    try:
        return await analyze_food_with_source(request.description, client=client)
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/v1/recipes/generate", response_model=RecipeSuggestions)
async def generate_recipe_suggestions(
    request: RecipeRequest,
    client: GeminiTextClient = Depends(get_gemini_client)
):
    """Suggest two recipes that use every listed ingredient."""
    try:
        return await generate_recipes_with_source(
            request.ingredients, request.meal_types, client=client
        )
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/v1/energy", response_model=EnergyNeeds)
async def energy_needs(request: EnergyRequest):
    """BMR, TDEE and goal targets for the given body metrics."""
    try:
        return calculate_energy_needs(
            request.age,
            request.sex,
            request.height_cm,
            request.weight_kg,
            request.activity_level,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/v1/energy/activity-levels")
async def activity_levels() -> List[str]:
    return list(ACTIVITY_FACTORS)


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    print("\n" + "=" * 50)
    print(f"🚀 HEALTHBITE AI API v{API_VERSION}")
    print("=" * 50)
    print(f"   • Gemini: {'✅' if get_gemini_client().available else '❌ (offline fallback only)'}")
    print("🔗 API Docs: http://localhost:8000/docs")
    print("=" * 50 + "\n")
    uvicorn.run(app, host="0.0.0.0", port=8000)
