"""
Daily Recipes - LLM-generated daily recipe recommendations.

Pipeline:
- Context: date, season, weather, user profile, learned preferences
- Prompt: structured generation request for the configured provider
- Validation: parse, check, and normalize the provider's JSON recipe
- Learning: ratings reinforce tags, time buckets, and difficulty
"""

__version__ = "1.0.0"
