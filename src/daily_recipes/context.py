"""
Daily Recipes - Generation context assembly.

Collects time, weather, profile, and learned preferences into the frozen
GenerationContext that the prompt builder consumes. This is the only
place that reads the clock; callers pass `now` explicitly.
"""

import random
from collections.abc import Mapping, Sequence
from datetime import datetime

from daily_recipes.config import RecipeSettings
from daily_recipes.models import (
    MAX_CONTEXT_INTERACTIONS,
    GenerationContext,
    Interaction,
    Recipe,
    UserProfile,
    WeatherSnapshot,
)

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

WEATHER_CONDITIONS = ("sunny", "cloudy", "rainy", "snowy")

# Regenerate when the weather moved this many °C away from the recipe's
REGENERATE_TEMPERATURE_DELTA = 10.0


def current_season(month: int) -> str:
    """Meteorological season (northern hemisphere) for a month number."""
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def build_context(
    settings: RecipeSettings,
    profile: UserProfile,
    learned_preferences: Mapping[str, float],
    interactions: Sequence[Interaction],
    now: datetime,
    weather: WeatherSnapshot | None = None,
    provider: str | None = None,
    api_key: str | None = None,
) -> GenerationContext:
    """
    Build the context for one generation call.

    Args:
        settings: Region, language, creativity, budget, and feature flags
        profile: The user's explicit profile
        learned_preferences: Current preference weights (copied)
        interactions: Interaction log, oldest first; only the newest 10 are used
        now: Moment of generation
        weather: Current weather, if known
        provider: Overrides settings.provider
        api_key: Overrides the provider key from settings
    """
    provider = provider or settings.provider
    return GenerationContext(
        date=now.strftime("%Y-%m-%d"),
        day_of_week=WEEKDAY_NAMES[now.weekday()],
        season=current_season(now.month),
        time_of_day=now.strftime("%H:%M"),
        weather=weather,
        user_profile=profile,
        learned_preferences=dict(learned_preferences),
        recent_interactions=list(interactions)[-MAX_CONTEXT_INTERACTIONS:],
        creativity_level=settings.creativity_level,
        region=settings.region,
        language=settings.language,
        max_cooking_time=profile.available_time,
        household_size=profile.household_size,
        budget_level=settings.budget_level,
        generate_nutrition=settings.generate_nutrition,
        generate_tips=settings.generate_tips,
        consider_sustainability=settings.consider_sustainability,
        generate_image=settings.generate_image,
        provider=provider,
        api_key=api_key or settings.api_key_for(provider),
    )


def should_regenerate_for_weather(
    recipe: Recipe | None,
    weather: WeatherSnapshot,
    threshold: float = REGENERATE_TEMPERATURE_DELTA,
) -> bool:
    """True when the weather changed a lot since the recipe was generated."""
    if recipe is None or recipe.weather_context is None:
        return False
    if recipe.weather_context.temperature is None:
        return False
    return abs(weather.temperature - recipe.weather_context.temperature) > threshold


class MockWeatherSource:
    """
    Stand-in weather data source.

    Produces plausible random weather (15-35 °C). Pass a seeded
    random.Random for reproducible values.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def current(self, location: str, now: datetime | None = None) -> WeatherSnapshot:
        return WeatherSnapshot(
            location=location,
            temperature=round(15 + self.rng.random() * 20, 1),
            condition=self.rng.choice(WEATHER_CONDITIONS),
            humidity=round(40 + self.rng.random() * 40, 1),
            timestamp=now or datetime.now(),
        )
