"""
Daily Recipes - Recipe Prompt Builder.

Turns a GenerationContext into the natural-language generation request.

The builder is pure: the same context always yields the same prompt.
Everything time- or weather-dependent must already be in the context.

## Sections (in order)
1. Role framing
2. CONTEXT: date, season, region, language, household, time, budget, creativity
3. WEATHER: temperature, condition, guidance (only with weather data)
4. DIETARY RESTRICTIONS, LEARNED PREFERENCES, PREFERRED CUISINES, HEALTH GOALS
5. SEASONAL INGREDIENTS, RECENTLY SHOWN
6. COOKING SKILL, weekend note, SUSTAINABILITY (flag)
7. OUTPUT FORMAT: the recipe JSON schema
8. RULES
"""

from daily_recipes.models import GenerationContext, WeatherSnapshot
from daily_recipes.prompts.seasonal import seasonal_ingredients

# Temperature thresholds in °C
HOT_THRESHOLD = 25
COLD_THRESHOLD = 5

LIGHT_GUIDANCE = "Light, refreshing dishes"
HEARTY_GUIDANCE = "Warm, hearty dishes"
MODERATE_GUIDANCE = "Moderate dishes"

WEEKEND_DAYS = ("Saturday", "Sunday")

DEFAULT_WEATHER_TEMPERATURE = 20
DEFAULT_WEATHER_CONDITION = "mild"


def weather_guidance(temperature: float) -> str:
    """Dish guidance for a temperature in °C."""
    if temperature > HOT_THRESHOLD:
        return LIGHT_GUIDANCE
    if temperature < COLD_THRESHOLD:
        return HEARTY_GUIDANCE
    return MODERATE_GUIDANCE


def _format_number(value: float) -> str:
    return f"{value:g}"


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _context_section(context: GenerationContext) -> str:
    return f"""CONTEXT:
- Date: {context.date} ({context.day_of_week})
- Season: {context.season}
- Time of day: {context.time_of_day}
- Region: {context.region}
- Language: {context.language}
- Household size: {context.household_size} people
- Available time: {context.max_cooking_time} minutes
- Budget: {context.budget_level}
- Creativity level: {_format_number(context.creativity_level)}/1.0"""


def _weather_section(weather: WeatherSnapshot) -> str:
    return f"""WEATHER:
- Temperature: {_format_number(weather.temperature)}°C
- Conditions: {weather.condition}
- Recommendation: {weather_guidance(weather.temperature)}"""


def _preferences_section(preferences: dict[str, float]) -> str:
    lines = [f"- {key}: {_format_number(preferences[key])}" for key in sorted(preferences)]
    return "LEARNED PREFERENCES (from past ratings, positive = liked):\n" + "\n".join(lines)


def _recent_titles(context: GenerationContext) -> list[str]:
    titles: list[str] = []
    for interaction in context.recent_interactions:
        if interaction.type != "recipe_shown":
            continue
        recipe = interaction.data.get("recipe") or {}
        title = recipe.get("title") if isinstance(recipe, dict) else None
        if title and title not in titles:
            titles.append(title)
    return titles


def _output_schema(context: GenerationContext) -> str:
    weather = context.weather
    temperature = _format_number(weather.temperature) if weather else DEFAULT_WEATHER_TEMPERATURE
    condition = weather.condition if weather else DEFAULT_WEATHER_CONDITION

    return f"""OUTPUT FORMAT (strictly JSON):
{{
    "title": "Full recipe title",
    "description": "Short appetizing description",
    "cookingTime": minutes as a number,
    "difficulty": "easy|medium|hard",
    "confidence": number from 0-100 (how sure you are the user will like it),
    "recommendationReason": "Why do you recommend this recipe today?",
    "personalizationFactors": {{
        "weather": "Weather adaptation if applicable",
        "season": "Seasonal aspect",
        "time": "Time adaptation (weekday/time of day)",
        "preference": "Preference taken into account"
    }},
    "ingredients": [
        {{
            "text": "Full ingredient with amount",
            "seasonal": boolean,
            "alternative": "Optional: alternative if unavailable"
        }}
    ],
    "instructions": [
        {{
            "text": "Detailed instruction",
            "time": estimated minutes for this step as a number,
            "tip": "Optional: helpful cooking tip"
        }}
    ],
    "nutrition": {{
        "calories": number per portion,
        "protein": number in grams,
        "carbs": number in grams,
        "fat": number in grams,
        "fiber": number in grams
    }},
    "tags": ["vegetarian", "quick", "healthy", ...],
    "seasonal": boolean,
    "sustainable": boolean,
    "isCreative": boolean,
    "estimatedCost": "low|medium|high",
    "weatherContext": {{
        "temperature": {temperature},
        "condition": "{condition}"
    }}
}}"""


def _rules(context: GenerationContext) -> str:
    rules = [
        "Respond ONLY with the JSON object, no additional text",
        "Use metric units (g, ml, tbsp, tsp)",
        "Realistic cooking times and portions",
        "Respect ALL given restrictions",
        "Be creative but practical",
        f'Write ingredient names and instructions in language "{context.language}"',
    ]
    if context.generate_nutrition:
        rules.append("Estimate nutrition values realistically")
    else:
        rules.append("Nutrition may be omitted")
    if context.generate_tips:
        rules.append("Add a tip to steps where it helps")
    return "IMPORTANT RULES:\n" + "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, 1))


def build_recipe_prompt(context: GenerationContext) -> str:
    """
    Build the generation prompt for one recipe.

    Args:
        context: Generation context (time, weather, profile, preferences)

    Returns:
        Complete prompt string
    """
    profile = context.user_profile

    parts = [
        "You are a highly skilled cooking AI assistant. "
        "Generate a personalized recipe as JSON.",
        _context_section(context),
    ]

    if context.weather is not None:
        parts.append(_weather_section(context.weather))

    if profile.dietary_restrictions:
        parts.append("DIETARY RESTRICTIONS:\n" + _bullets(profile.dietary_restrictions))

    if context.learned_preferences:
        parts.append(_preferences_section(context.learned_preferences))

    if profile.cuisine_preferences:
        parts.append("PREFERRED CUISINES:\n" + _bullets(profile.cuisine_preferences))

    if profile.health_goals:
        parts.append("HEALTH GOALS:\n" + _bullets(profile.health_goals))

    seasonal = seasonal_ingredients(context.season, context.region)
    if seasonal:
        parts.append("SEASONAL INGREDIENTS (prefer these):\n" + ", ".join(seasonal))

    recent = _recent_titles(context)
    if recent:
        parts.append("RECENTLY SHOWN (do not repeat):\n" + _bullets(recent))

    guidance = [f"COOKING SKILL: {profile.cooking_skill_level}"]
    if context.day_of_week in WEEKEND_DAYS:
        guidance.append("WEEKEND: A more elaborate dish is welcome.")
    if context.consider_sustainability:
        guidance.append("SUSTAINABILITY: Prefer regional, seasonal, and eco-friendly ingredients.")
    parts.append("\n".join(guidance))

    parts.append(_output_schema(context))
    parts.append(_rules(context))

    return "\n\n".join(parts) + "\n"
