"""
Daily Recipes - Preference Learner.

Learns from ratings by adding to feature weights:
- every recipe tag
- time bucket ("time_quick", "time_medium", "time_long", "time_extended")
- difficulty ("difficulty_easy", ...)

love = +2, like = +1, dislike = -1, skip = no change.

Weights are plain running sums unless a decay factor below 1.0 is
configured, in which case existing weights shrink before each update.
"""

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from typing import Any

from daily_recipes.models import MAX_CONTEXT_INTERACTIONS, Interaction, Recipe

logger = logging.getLogger(__name__)

RATING_STRENGTH: dict[str, int] = {
    "love": 2,
    "like": 1,
    "dislike": -1,
    "skip": 0,
}

MAX_INTERACTIONS = 100


def categorize_time(minutes: float) -> str:
    """Time bucket for a cooking time in minutes."""
    if minutes <= 15:
        return "quick"
    if minutes <= 30:
        return "medium"
    if minutes <= 60:
        return "long"
    return "extended"


def _features(recipe: Recipe | Mapping[str, Any]) -> tuple[list[str], float | None, str]:
    """Tags, cooking time, and difficulty of a recipe or recipe summary."""
    if isinstance(recipe, Recipe):
        return list(recipe.tags), recipe.cooking_time, recipe.difficulty

    tags = recipe.get("tags") or []
    cooking_time = recipe.get("cookingTime", recipe.get("cooking_time"))
    if isinstance(cooking_time, bool) or not isinstance(cooking_time, (int, float)):
        cooking_time = None
    difficulty = recipe.get("difficulty") or "medium"
    return [tag for tag in tags if isinstance(tag, str)], cooking_time, difficulty


class PreferenceLearner:
    """
    Owns the learned weights and the interaction log.

    Args:
        weights: Previously learned weights
        interactions: Previously logged interactions (oldest first)
        decay: Factor applied to all weights before each reinforcement
        max_interactions: Interaction log size; oldest entries are dropped
    """

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        interactions: Iterable[Interaction] | None = None,
        decay: float = 1.0,
        max_interactions: int = MAX_INTERACTIONS,
    ):
        self.weights: dict[str, float] = dict(weights or {})
        self.interactions: deque[Interaction] = deque(interactions or (), maxlen=max_interactions)
        self.decay = decay

    def record(self, interaction: Interaction) -> None:
        """Log an interaction and learn from it if it is a rating."""
        self.interactions.append(interaction)
        logger.info(f"Learning from user interaction: {interaction.type}")

        if interaction.type == "rating":
            rating = interaction.data.get("rating")
            recipe = interaction.data.get("recipe")
            if not isinstance(recipe, (Recipe, Mapping)):
                logger.warning("Rating interaction without recipe data, nothing to learn")
                return
            self.process_rating(rating, recipe)

    def process_rating(self, rating: str, recipe: Recipe | Mapping[str, Any]) -> None:
        strength = RATING_STRENGTH.get(rating)
        if strength is None:
            logger.warning(f"Ignoring unknown rating: {rating!r}")
            return
        if strength:
            self.reinforce(recipe, strength)

    def reinforce(self, recipe: Recipe | Mapping[str, Any], strength: float) -> None:
        """Add strength to every feature of the recipe."""
        if self.decay < 1.0:
            self.weights = {key: value * self.decay for key, value in self.weights.items()}

        tags, cooking_time, difficulty = _features(recipe)

        keys = list(tags)
        if cooking_time is not None:
            keys.append(f"time_{categorize_time(cooking_time)}")
        keys.append(f"difficulty_{difficulty}")

        for key in keys:
            self.weights[key] = self.weights.get(key, 0) + strength

        logger.debug(f"Reinforced {len(keys)} preference keys by {strength}")

    def recent(self, n: int = MAX_CONTEXT_INTERACTIONS) -> list[Interaction]:
        """The n most recent interactions, oldest first."""
        if n <= 0:
            return []
        return list(self.interactions)[-n:]
