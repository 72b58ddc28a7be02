"""
Daily Recipes - Recipe Service.

The single object that owns all mutable state: user profile, learned
preferences, interaction log, and recipe cache. Presentation layers talk
only to this service.

Usage:
    service = RecipeService()
    service.load_profile()

    context = service.context_for(datetime.now(), weather=weather)
    recipe = await service.generate_or_fallback(context)

    service.rate(recipe, "love")
    shopping_list = service.build_shopping_list(recipe)
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

from daily_recipes.config import RecipeSettings, get_settings
from daily_recipes.context import build_context, should_regenerate_for_weather
from daily_recipes.errors import RecipeError
from daily_recipes.llm.client import RecipeClient
from daily_recipes.models import (
    GenerationContext,
    Interaction,
    Rating,
    Recipe,
    RecipeCacheEntry,
    ShoppingList,
    UserProfile,
    WeatherSnapshot,
)
from daily_recipes.preferences import PreferenceLearner
from daily_recipes.prompts.builder import build_recipe_prompt
from daily_recipes.shopping import build_shopping_list
from daily_recipes.store import (
    JsonFileStore,
    KeyValueStore,
    ProfileRecord,
    ProfileRepository,
    RecipeCache,
)
from daily_recipes.validation import build_recipe, normalize_recipe_data, parse_recipe

logger = logging.getLogger(__name__)

FALLBACK_RECIPE: dict[str, Any] = {
    "title": "Simple Pasta with Tomato Sauce",
    "cookingTime": 20,
    "confidence": 50,
    "recommendationReason": "Fallback recipe (AI not available)",
    "ingredients": [
        "300g pasta",
        "400g tomato puree",
        "2 garlic cloves",
        "Olive oil, salt, pepper",
    ],
    "instructions": [
        "Cook the pasta in salted water",
        "Fry the garlic in olive oil",
        "Add the tomato puree and season",
        "Mix with the pasta",
    ],
    "difficulty": "easy",
    "seasonal": False,
    "tags": ["vegetarian", "quick"],
}


def placeholder_image_url(title: str) -> str:
    """Stand-in for real image generation."""
    return f"https://via.placeholder.com/400x300/4CAF50/ffffff?text={quote(title)}"


def fallback_recipe(context: GenerationContext, now: datetime | None = None) -> Recipe:
    """The fixed recipe shown when generation fails."""
    return build_recipe(normalize_recipe_data(FALLBACK_RECIPE, context, now))


class RecipeService:
    """
    Recipe generation, learning, and shopping lists for one user.

    Generations are serialized: only one runs at a time, so cache and
    preference updates never interleave.

    Args:
        settings: Application settings
        store: Key-value store for profile and cache (JSON files in data_dir by default)
        client: Provider client
    """

    def __init__(
        self,
        settings: RecipeSettings | None = None,
        store: KeyValueStore | None = None,
        client: RecipeClient | None = None,
    ):
        self.settings = settings or get_settings()
        self.store = store if store is not None else JsonFileStore(self.settings.data_dir)
        self.client = client or RecipeClient(self.settings)
        self.profiles = ProfileRepository(self.store)
        self.cache = RecipeCache(self.store, max_entries=self.settings.max_cached_recipes)
        self.user_profile = UserProfile()
        self.learner = PreferenceLearner(decay=self.settings.preference_decay)
        self.current_recipe: Recipe | None = None
        self._lock = asyncio.Lock()

    # =========================================================================
    # Profile
    # =========================================================================

    def load_profile(self) -> ProfileRecord:
        """Load profile, preferences, and interaction log from the store."""
        record = self.profiles.load()
        self.user_profile = record.user_profile
        self.learner = PreferenceLearner(
            weights=record.learned_preferences,
            interactions=record.interactions,
            decay=self.settings.preference_decay,
        )
        return record

    def save_profile(self) -> bool:
        return self.profiles.save(
            self.user_profile,
            self.learner.weights,
            self.learner.interactions,
        )

    def update_profile(self, **changes: Any) -> UserProfile:
        """Apply explicit profile changes (validated) and persist them."""
        self.user_profile = UserProfile.model_validate(
            {**self.user_profile.model_dump(), **changes}
        )
        self.save_profile()
        return self.user_profile

    @property
    def learned_preferences(self) -> dict[str, float]:
        return dict(self.learner.weights)

    # =========================================================================
    # Generation
    # =========================================================================

    def context_for(
        self,
        now: datetime,
        weather: WeatherSnapshot | None = None,
        provider: str | None = None,
        api_key: str | None = None,
    ) -> GenerationContext:
        """Build a generation context from the service's current state."""
        return build_context(
            self.settings,
            self.user_profile,
            self.learner.weights,
            self.learner.recent(),
            now,
            weather=weather,
            provider=provider,
            api_key=api_key,
        )

    async def generate(self, context: GenerationContext, now: datetime | None = None) -> Recipe:
        """
        Generate, validate, and cache one recipe.

        Raises:
            RecipeError: any provider, transport, parse, or validation failure
        """
        async with self._lock:
            logger.info(f"Generating AI recipe for {context.date}")

            prompt = build_recipe_prompt(context)
            content = await self.client.complete(prompt, context.provider, context.api_key)
            recipe = parse_recipe(content, context, now)

            if context.generate_image:
                recipe = recipe.model_copy(update={"image_url": placeholder_image_url(recipe.title)})

            self.cache.add(RecipeCacheEntry(date=context.date, recipe=recipe, context=context.to_dict()))
            self.current_recipe = recipe

        logger.info(f"AI recipe generated: {recipe.title}")
        return recipe

    async def generate_or_fallback(
        self,
        context: GenerationContext,
        now: datetime | None = None,
    ) -> Recipe:
        """Generate a recipe; on failure return the fixed fallback recipe."""
        try:
            return await self.generate(context, now)
        except RecipeError as e:
            logger.error(f"AI recipe generation failed, using fallback: {e}")
            recipe = fallback_recipe(context, now)
            self.current_recipe = recipe
            return recipe

    async def regenerate_for_weather(
        self,
        weather: WeatherSnapshot,
        now: datetime,
    ) -> Recipe | None:
        """Regenerate when the weather moved far from the current recipe's."""
        if not should_regenerate_for_weather(self.current_recipe, weather):
            return None
        logger.info(f"Weather changed to {weather.temperature}°C, regenerating recipe")
        return await self.generate_or_fallback(self.context_for(now, weather=weather), now)

    # =========================================================================
    # Feedback & Shopping
    # =========================================================================

    def record_interaction(self, interaction: Interaction) -> None:
        """Log an interaction, learn from it, and persist the profile."""
        self.learner.record(interaction)
        self.save_profile()

    def rate(self, recipe: Recipe, rating: Rating) -> None:
        self.record_interaction(Interaction.rating(recipe, rating))

    def build_shopping_list(self, recipe: Recipe, today: date | None = None) -> ShoppingList:
        return build_shopping_list(recipe, today)
