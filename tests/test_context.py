"""Tests for generation context assembly and weather handling."""

import random
from datetime import datetime

import pytest
from pydantic import ValidationError

from conftest import FIXED_NOW
from daily_recipes.context import (
    MockWeatherSource,
    build_context,
    current_season,
    should_regenerate_for_weather,
)
from daily_recipes.models import Interaction, WeatherSnapshot
from daily_recipes.validation import parse_recipe


class TestCurrentSeason:
    @pytest.mark.parametrize(
        "month,season",
        [(1, "winter"), (2, "winter"), (3, "spring"), (5, "spring"), (6, "summer"),
         (8, "summer"), (9, "autumn"), (11, "autumn"), (12, "winter")],
    )
    def test_months(self, month, season):
        assert current_season(month) == season


class TestBuildContext:
    def test_time_fields(self, settings, sample_profile):
        context = build_context(settings, sample_profile, {}, [], FIXED_NOW)
        assert context.date == "2024-07-15"
        assert context.day_of_week == "Monday"
        assert context.season == "summer"
        assert context.time_of_day == "18:30"

    def test_profile_and_settings(self, settings, sample_profile):
        context = build_context(settings, sample_profile, {"spicy": 1}, [], FIXED_NOW)
        assert context.max_cooking_time == 45
        assert context.household_size == 2
        assert context.region == settings.region
        assert context.learned_preferences == {"spicy": 1}
        assert context.provider == "openai"
        assert context.api_key == "sk-test"

    def test_provider_override_picks_matching_key(self, settings, sample_profile):
        context = build_context(settings, sample_profile, {}, [], FIXED_NOW, provider="anthropic")
        assert context.provider == "anthropic"
        assert context.api_key == "ak-test"

    def test_explicit_api_key(self, settings, sample_profile):
        context = build_context(settings, sample_profile, {}, [], FIXED_NOW, api_key="sk-other")
        assert context.api_key == "sk-other"

    def test_preferences_are_copied(self, settings, sample_profile):
        weights = {"spicy": 1}
        context = build_context(settings, sample_profile, weights, [], FIXED_NOW)
        weights["spicy"] = 5
        assert context.learned_preferences == {"spicy": 1}

    def test_only_recent_interactions(self, settings, sample_profile):
        interactions = [
            Interaction(type="recipe_shown", data={"recipe": {"title": f"r{i}"}}) for i in range(25)
        ]
        context = build_context(settings, sample_profile, {}, interactions, FIXED_NOW)
        assert len(context.recent_interactions) == 10
        assert context.recent_interactions[-1].data["recipe"]["title"] == "r24"

    def test_context_is_frozen(self, sample_context):
        with pytest.raises(ValidationError):
            sample_context.season = "winter"

    def test_api_key_not_serialized(self, sample_context):
        assert "apiKey" not in sample_context.to_dict()
        assert "sk-test" not in repr(sample_context)


class TestShouldRegenerateForWeather:
    def test_large_change(self, recipe_json, sample_context):
        recipe = parse_recipe(recipe_json, sample_context)
        assert should_regenerate_for_weather(recipe, WeatherSnapshot(temperature=30))
        assert should_regenerate_for_weather(recipe, WeatherSnapshot(temperature=2))

    def test_small_change(self, recipe_json, sample_context):
        recipe = parse_recipe(recipe_json, sample_context)
        assert not should_regenerate_for_weather(recipe, WeatherSnapshot(temperature=25))

    def test_no_recipe(self):
        assert not should_regenerate_for_weather(None, WeatherSnapshot(temperature=30))

    def test_recipe_without_weather(self, recipe_data, sample_context):
        import json

        del recipe_data["weatherContext"]
        recipe = parse_recipe(json.dumps(recipe_data), sample_context)
        assert not should_regenerate_for_weather(recipe, WeatherSnapshot(temperature=40))


class TestMockWeatherSource:
    def test_seeded_is_reproducible(self):
        first = MockWeatherSource(random.Random(7)).current("Berlin", FIXED_NOW)
        second = MockWeatherSource(random.Random(7)).current("Berlin", FIXED_NOW)
        assert first == second

    def test_plausible_values(self):
        source = MockWeatherSource(random.Random(1))
        for _ in range(20):
            weather = source.current("Berlin", datetime(2024, 1, 1))
            assert 15 <= weather.temperature <= 35
            assert weather.condition in {"sunny", "cloudy", "rainy", "snowy"}
            assert weather.location == "Berlin"
