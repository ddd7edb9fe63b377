# unit_tests/test_agent_nutrition.py
"""
Unit Tests for Nutrition Analysis Agent
=======================================
Run with: python -m pytest unit_tests/test_agent_nutrition.py -v

Gemini is replaced by FakeGeminiClient (see conftest.py).
"""

import asyncio
import json
import math
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from agents.nutrition_agent import (
    MissingInputError,
    analyze_food,
    analyze_food_with_source,
    build_nutrition_prompt,
    calculate_energy_needs,
)
from tools.gemini_client import NUTRITION_PRESET
from tools.realism_validator import REALISM_BOUNDS
from tools.schemas import VALID_LEVELS


AI_REPLY = json.dumps({
    "calories": 5000,
    "protein": 31,
    "fat": 4,
    "carbs": 0,
    "fiber": 0,
    "sugar": 0,
    "sodium": 74,
    "vitamins": {"A": "low", "C": "none", "D": "low"},
    "minerals": {"calcium": "low", "iron": "medium", "potassium": "medium"},
    "portionSize": "1 breast (170g)",
    "notes": "Lean protein."
})


# =============================================================================
# PIPELINE
# =============================================================================
def test_empty_description_rejected_before_any_call(make_client):
    client = make_client([AI_REPLY])
    with pytest.raises(MissingInputError):
        asyncio.run(analyze_food("   ", client=client))
    assert client.prompts == []


def test_offline_fallback_without_credential(make_client):
    print("\n" + "=" * 60)
    print("TEST: Offline nutrition fallback")
    print("=" * 60)

    client = make_client(available=False)
    analysis = asyncio.run(analyze_food_with_source("2 slices of pepperoni pizza", client=client))

    print(f"   Source: {analysis.source}, calories: {analysis.nutrition.calories}")
    assert analysis.source == "fallback"
    assert analysis.attempts == 0
    assert analysis.nutrition.calories > 500
    assert "High calorie" in analysis.nutrition.notes
    assert client.prompts == []
    print("✅ Fallback used without touching Gemini")


def test_ai_result_is_clamped(make_client, orchestrator):
    client = make_client([AI_REPLY])
    analysis = asyncio.run(
        analyze_food_with_source("grilled chicken breast", client=client, orchestrator=orchestrator)
    )

    assert analysis.source == "ai"
    assert analysis.attempts == 1
    assert analysis.nutrition.calories == REALISM_BOUNDS["calories_max"]
    assert analysis.nutrition.protein == 31
    assert analysis.nutrition.portion_size == "1 breast (170g)"
    assert client.presets == [NUTRITION_PRESET]
    assert '"grilled chicken breast"' in client.prompts[0]


def test_three_failures_then_single_fallback(make_client, orchestrator, recording_sleep):
    client = make_client([RuntimeError("503 Service Unavailable")] * 3)
    analysis = asyncio.run(
        analyze_food_with_source("banana", client=client, orchestrator=orchestrator)
    )

    assert analysis.source == "fallback"
    assert analysis.attempts == 3
    assert len(client.prompts) == 3
    assert recording_sleep.calls == [1.0, 2.0]


def test_unrepairable_candidate_triggers_retry(make_client, orchestrator, recording_sleep):
    empty = json.dumps({"calories": 0, "protein": 0, "fat": 0, "carbs": 0})
    client = make_client([empty, AI_REPLY])
    analysis = asyncio.run(
        analyze_food_with_source("chicken", client=client, orchestrator=orchestrator)
    )

    assert analysis.source == "ai"
    assert analysis.attempts == 2
    assert recording_sleep.calls == [1.0]


def test_infinite_calories_never_reach_the_caller(make_client, orchestrator):
    reply = '{"calories": 1e999, "protein": 31, "fat": 4, "carbs": 0}'
    client = make_client([reply])
    analysis = asyncio.run(
        analyze_food_with_source("chicken dinner", client=client, orchestrator=orchestrator)
    )

    assert analysis.source == "ai"
    assert math.isfinite(analysis.nutrition.calories)
    assert analysis.nutrition.calories == REALISM_BOUNDS["calories_min"]
    assert analysis.nutrition.protein == 31


def test_huge_quantity_does_not_escape(make_client):
    client = make_client(available=False)
    nutrition = asyncio.run(analyze_food("1" + "0" * 400 + " slices of pizza", client=client))

    assert nutrition.calories == REALISM_BOUNDS["calories_max"]


def test_unparseable_replies_fall_back(make_client, orchestrator):
    client = make_client(["Sorry, I can't help with that."] * 3)
    nutrition = asyncio.run(analyze_food("steamed broccoli", client=client, orchestrator=orchestrator))

    assert nutrition.calories >= REALISM_BOUNDS["calories_min"]
    assert nutrition.vitamins.C in VALID_LEVELS


def test_prompt_mentions_description():
    prompt = build_nutrition_prompt("  oatmeal with berries ")
    assert '"oatmeal with berries"' in prompt
    assert "ONLY pure JSON" in prompt


# =============================================================================
# ENERGY NEEDS
# =============================================================================
def test_energy_needs_male():
    print("\n" + "=" * 60)
    print("TEST: Mifflin-St Jeor energy needs")
    print("=" * 60)

    needs = calculate_energy_needs(30, "male", 180, 80, "sedentary")

    assert needs.bmr == 1780
    assert needs.tdee == 2136
    assert needs.daily_calorie_deficit == 356
    assert needs.weekly_calorie_deficit == 2492
    assert needs.daily_weight_change_kg == 0.05
    assert needs.weekly_weight_change_grams == 324
    assert needs.targets == {"lose": 1709, "maintain": 2136, "gain": 2350}
    print("✅ Energy needs passed")


def test_energy_needs_female():
    needs = calculate_energy_needs(25, "Female", 165, 60, "moderately_active")
    assert needs.bmr == 1345


def test_energy_needs_rejects_bad_input():
    with pytest.raises(ValueError):
        calculate_energy_needs(30, "male", 180, 80, "couch")
    with pytest.raises(ValueError):
        calculate_energy_needs(0, "male", 180, 80)
    with pytest.raises(ValueError):
        calculate_energy_needs(30, "robot", 180, 80)
