"""
Daily Recipes - Prompt construction.
"""

from daily_recipes.prompts.builder import build_recipe_prompt, weather_guidance
from daily_recipes.prompts.seasonal import seasonal_ingredients

__all__ = [
    "build_recipe_prompt",
    "seasonal_ingredients",
    "weather_guidance",
]
