"""
Daily Recipes - Data models.

Python attributes are snake_case; the JSON the providers return and the
records we persist use camelCase names (cookingTime, generatedAt, ...).
Every model accepts both spellings and dumps camelCase via to_dict().
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Difficulty = Literal["easy", "medium", "hard"]
CostLevel = Literal["low", "medium", "high"]
SkillLevel = Literal["beginner", "medium", "advanced"]
MealTime = Literal["breakfast", "lunch", "dinner"]
InteractionType = Literal["recipe_shown", "rating"]
Rating = Literal["love", "like", "dislike", "skip"]

# Newest interactions handed to a single generation
MAX_CONTEXT_INTERACTIONS = 10


class CamelModel(BaseModel):
    """Base model with camelCase wire names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def _dedupe(values: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)


# =============================================================================
# User & Context
# =============================================================================


class WeatherSnapshot(CamelModel):
    """Current weather as delivered by the weather data source."""

    temperature: float  # °C
    condition: str = "mild"
    location: str | None = None
    humidity: float | None = None
    timestamp: datetime | None = None


class UserProfile(CamelModel):
    """
    Explicit user settings.

    Owned by the caller. The generation pipeline reads it but never
    changes it; updates go through RecipeService.update_profile.
    """

    dietary_restrictions: list[str] = Field(default_factory=list)
    cuisine_preferences: list[str] = Field(default_factory=list)
    cooking_skill_level: SkillLevel = "medium"
    available_time: int = Field(default=30, gt=0)  # minutes
    household_size: int = Field(default=2, ge=1)
    preferred_meal_times: list[MealTime] = Field(default_factory=lambda: ["dinner"])
    health_goals: list[str] = Field(default_factory=list)

    @field_validator(
        "dietary_restrictions",
        "cuisine_preferences",
        "preferred_meal_times",
        "health_goals",
    )
    @classmethod
    def _unique(cls, values: list[str]) -> list[str]:
        return _dedupe(values)


class Interaction(CamelModel):
    """A single user interaction, as kept in the interaction log."""

    type: InteractionType
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def shown(cls, recipe: "Recipe") -> "Interaction":
        return cls(type="recipe_shown", data={"recipe": recipe.summary()})

    @classmethod
    def rating(cls, recipe: "Recipe", rating: Rating) -> "Interaction":
        return cls(type="rating", data={"rating": rating, "recipe": recipe.summary()})


class GenerationContext(CamelModel):
    """
    Snapshot of everything one generation request depends on.

    Built fresh for every call by context.build_context and never
    modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    # Time
    date: str  # YYYY-MM-DD
    day_of_week: str
    season: str
    time_of_day: str  # HH:MM

    weather: WeatherSnapshot | None = None

    # User
    user_profile: UserProfile = Field(default_factory=UserProfile)
    learned_preferences: dict[str, float] = Field(default_factory=dict)
    recent_interactions: list[Interaction] = Field(default_factory=list)

    # Settings
    creativity_level: float = Field(default=0.7, ge=0.0, le=1.0)
    region: str = "DE"
    language: str = "de"

    # Constraints
    max_cooking_time: int = 30
    household_size: int = 2
    budget_level: CostLevel = "medium"

    # Features
    generate_nutrition: bool = True
    generate_tips: bool = True
    consider_sustainability: bool = True
    generate_image: bool = False

    # Provider
    provider: str = "openai"
    api_key: str | None = Field(default=None, exclude=True, repr=False)

    @field_validator("recent_interactions")
    @classmethod
    def _keep_most_recent(cls, values: list[Interaction]) -> list[Interaction]:
        return values[-MAX_CONTEXT_INTERACTIONS:]


# =============================================================================
# Recipe
# =============================================================================


class Ingredient(CamelModel):
    text: str
    seasonal: bool = False
    alternative: str | None = None


class Instruction(CamelModel):
    text: str
    time: int | None = None  # minutes for this step
    tip: str | None = None


class Nutrition(CamelModel):
    """Per-portion nutrition estimate (kcal, grams)."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None


class PersonalizationFactors(CamelModel):
    weather: str | None = None
    season: str | None = None
    time: str | None = None
    preference: str | None = None


class WeatherContext(CamelModel):
    """Weather the provider says it adapted the recipe to."""

    temperature: float | None = None
    condition: str | None = None


class Recipe(CamelModel):
    """
    A normalized recipe.

    Built by validation.parse_recipe from provider output. Use
    validation.normalize_recipe_data before constructing one from
    raw provider JSON; this model only enforces the invariants.
    """

    id: str
    title: str
    description: str | None = None
    cooking_time: int = Field(gt=0)
    total_time: int
    difficulty: Difficulty = "medium"
    confidence: int = Field(default=75, ge=0, le=100)
    recommendation_reason: str | None = None
    personalization_factors: PersonalizationFactors | None = None
    ingredients: list[Ingredient] = Field(min_length=1)
    instructions: list[Instruction] = Field(min_length=1)
    nutrition: Nutrition | None = None
    tags: list[str] = Field(default_factory=list)
    seasonal: bool = True
    sustainable: bool = True
    is_creative: bool = False
    estimated_cost: CostLevel = "medium"
    weather_context: WeatherContext | None = None
    generated_at: datetime | None = None
    source_context: dict[str, Any] = Field(default_factory=dict)
    image_url: str | None = None

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, values: list[str]) -> list[str]:
        return _dedupe(values)

    @model_validator(mode="after")
    def _total_covers_cooking(self) -> "Recipe":
        if self.total_time < self.cooking_time:
            raise ValueError("totalTime must be >= cookingTime")
        return self

    def summary(self) -> dict[str, Any]:
        """Compact view used in interaction logs and preference learning."""
        return {
            "id": self.id,
            "title": self.title,
            "tags": list(self.tags),
            "cookingTime": self.cooking_time,
            "difficulty": self.difficulty,
        }


class RecipeCacheEntry(CamelModel):
    date: str
    recipe: Recipe
    context: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Shopping List
# =============================================================================


class ShoppingItem(CamelModel):
    text: str
    category: str
    seasonal: bool = False


class ShoppingList(CamelModel):
    recipe_title: str
    date: str
    items: list[ShoppingItem] = Field(default_factory=list)
    estimated_cost: CostLevel = "medium"

    def grouped(self) -> dict[str, list[ShoppingItem]]:
        """Items by category, categories in first-seen order."""
        groups: dict[str, list[ShoppingItem]] = {}
        for item in self.items:
            groups.setdefault(item.category, []).append(item)
        return groups
