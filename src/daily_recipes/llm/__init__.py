"""
Daily Recipes - LLM provider access.

Provides provider adapters and the HTTP client for recipe generation.
"""

from daily_recipes.llm.client import RecipeClient
from daily_recipes.llm.providers import ProviderConfig, get_adapter

__all__ = [
    "RecipeClient",
    "ProviderConfig",
    "get_adapter",
]
