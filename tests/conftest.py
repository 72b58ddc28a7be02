"""
Pytest configuration and fixtures for Daily Recipes tests.
"""

import asyncio
import json
from datetime import datetime

import httpx
import pytest

from daily_recipes.config import RecipeSettings
from daily_recipes.models import GenerationContext, UserProfile, WeatherSnapshot

# Monday in summer
FIXED_NOW = datetime(2024, 7, 15, 18, 30)


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def openai_payload(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def mock_http_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler(request)."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def settings(tmp_path) -> RecipeSettings:
    """Settings isolated from the environment and .env files."""
    return RecipeSettings(
        _env_file=None,
        provider="openai",
        openai_api_key="sk-test",
        anthropic_api_key="ak-test",
        data_dir=tmp_path / "data",
        transport_retries=1,
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def sample_profile() -> UserProfile:
    return UserProfile(
        dietary_restrictions=["vegetarian", "nut-free"],
        cuisine_preferences=["italian", "german"],
        cooking_skill_level="medium",
        available_time=45,
        household_size=2,
        health_goals=["heart_healthy"],
    )


@pytest.fixture
def sample_context(sample_profile) -> GenerationContext:
    return GenerationContext(
        date="2024-07-15",
        day_of_week="Monday",
        season="summer",
        time_of_day="18:30",
        weather=WeatherSnapshot(temperature=15, condition="cloudy"),
        user_profile=sample_profile,
        learned_preferences={"vegetarian": 3, "time_quick": 1, "difficulty_hard": -1},
        region="DE",
        language="de",
        max_cooking_time=45,
        household_size=2,
        provider="openai",
        api_key="sk-test",
    )


@pytest.fixture
def recipe_data() -> dict:
    """A provider answer that follows the requested output schema."""
    return {
        "title": "Käsespätzle mit Röstzwiebeln",
        "description": "Cheesy Swabian noodles with crispy onions",
        "cookingTime": 30,
        "difficulty": "medium",
        "confidence": 85,
        "recommendationReason": "Comfort food for a cloudy evening",
        "personalizationFactors": {
            "weather": "Cloudy and mild",
            "season": "Summer onions",
            "time": "Monday evening",
            "preference": "Vegetarian",
        },
        "ingredients": [
            {"text": "400g Spätzle", "seasonal": False},
            {"text": "200g Bergkäse", "seasonal": False},
            {"text": "3 Zwiebeln", "seasonal": True, "alternative": "Shallots"},
        ],
        "instructions": [
            {"text": "Cook the Spätzle", "time": 10},
            {"text": "Fry the onions until crispy", "time": 15, "tip": "Dust with flour first"},
            {"text": "Layer Spätzle and cheese", "time": 5},
        ],
        "nutrition": {"calories": 650, "protein": 28, "carbs": 70, "fat": 30, "fiber": 4},
        "tags": ["vegetarian", "german", "comfort"],
        "seasonal": True,
        "sustainable": True,
        "isCreative": False,
        "estimatedCost": "low",
        "weatherContext": {"temperature": 15, "condition": "cloudy"},
    }


@pytest.fixture
def recipe_json(recipe_data) -> str:
    return json.dumps(recipe_data, ensure_ascii=False)
