"""
Daily Recipes - Recipe validation and normalization.

Provider output is untrusted. It goes through three steps:

1. parse_recipe_text: strip markdown fences, decode JSON
2. validate_recipe_data: is it usable at all? (required fields, types)
3. normalize_recipe_data: fill defaults, coerce shapes, derive fields

parse_recipe runs all three and builds the typed Recipe.
"""

import json
import logging
import math
import re
import unicodedata
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from daily_recipes.errors import RecipeParseError, RecipeValidationError
from daily_recipes.models import GenerationContext, Recipe

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "ingredients", "instructions", "cookingTime")

DEFAULT_CONFIDENCE = 75
DEFAULT_DIFFICULTY = "medium"
DEFAULT_COST = "medium"

DIFFICULTY_ALIASES = {
    "easy": "easy",
    "leicht": "easy",
    "einfach": "easy",
    "medium": "medium",
    "mittel": "medium",
    "hard": "hard",
    "schwer": "hard",
    "difficult": "hard",
}

COST_ALIASES = {
    "low": "low",
    "niedrig": "low",
    "günstig": "low",
    "medium": "medium",
    "mittel": "medium",
    "high": "high",
    "hoch": "high",
    "teuer": "high",
}

NUTRITION_FIELDS = ("calories", "protein", "carbs", "fat", "fiber")
PERSONALIZATION_FIELDS = ("weather", "season", "time", "preference")

_FENCE_RE = re.compile(r"^```(?:json)?[ \t]*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+(?:[.,]\d+)?")
_UMLAUTS = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})


# =============================================================================
# Parsing
# =============================================================================


def strip_code_fence(text: str) -> str:
    """
    Remove markdown code-fence wrapping around a JSON answer.

    Examples:
        '```json\\n{"a": 1}\\n```' -> '{"a": 1}'
        '  {"a": 1}  ' -> '{"a": 1}'
    """
    text = text.strip()
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1)
    return text.strip()


def parse_recipe_text(text: str) -> dict[str, Any]:
    """Decode the provider's text into a JSON object."""
    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise RecipeParseError(f"Recipe response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RecipeParseError(f"Recipe response must be a JSON object, got {type(data).__name__}")
    return data


# =============================================================================
# Validation
# =============================================================================


def _finite(value: Any) -> float | None:
    """The value as a float, or None unless it is a finite JSON number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _is_number(value: Any) -> bool:
    return _finite(value) is not None


def _has_text(item: Any) -> bool:
    if isinstance(item, str):
        return bool(item.strip())
    if isinstance(item, dict):
        text = item.get("text")
        return isinstance(text, str) and bool(text.strip())
    return False


def validate_recipe_data(data: dict[str, Any]) -> None:
    """
    Check that a parsed recipe is usable.

    Raises:
        RecipeValidationError: naming the first missing or invalid field
    """
    for field in REQUIRED_FIELDS:
        if data.get(field) in (None, "", [], {}):
            raise RecipeValidationError(field)

    title = data["title"]
    if not isinstance(title, str) or not title.strip():
        raise RecipeValidationError("title", "Title must be a non-empty string")

    for field in ("ingredients", "instructions"):
        items = data[field]
        if not isinstance(items, list) or not items:
            raise RecipeValidationError(field, f"{field} must be a non-empty list")
        for index, item in enumerate(items):
            if not _has_text(item):
                raise RecipeValidationError(field, f"{field}[{index}] has no text")

    cooking_time = data["cookingTime"]
    if not _is_number(cooking_time) or cooking_time <= 0:
        raise RecipeValidationError("cookingTime", "cookingTime must be a positive finite number")


# =============================================================================
# Normalization
# =============================================================================


def slugify(title: str) -> str:
    """
    Derive a recipe id from its title.

    Examples:
        "Käsespätzle mit Röstzwiebeln" -> "kaesespaetzle-mit-roestzwiebeln"
        "Crème Brûlée!" -> "creme-brulee"
    """
    slug = title.lower().translate(_UMLAUTS)
    slug = unicodedata.normalize("NFKD", slug).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug or "recipe"


def parse_minutes(value: Any) -> int | None:
    """
    Coerce a duration to whole minutes.

    Examples:
        12 -> 12
        7.5 -> 8
        "5" -> 5
        "10 Min." -> 10
        "soon" -> None
    """
    number = _number(value)
    if number is None or number < 0:
        return None
    return math.ceil(number)


def _number(value: Any) -> float | None:
    """Finite number from a JSON number or the first number in a string."""
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        return _finite(float(match.group(0).replace(",", "."))) if match else None
    return _finite(value)


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _normalize_ingredient(item: Any) -> dict[str, Any]:
    if isinstance(item, str):
        return {"text": item.strip(), "seasonal": False, "alternative": None}
    return {
        "text": item["text"].strip(),
        "seasonal": item.get("seasonal") is True,
        "alternative": _optional_text(item.get("alternative")),
    }


def _normalize_instruction(item: Any) -> dict[str, Any]:
    if isinstance(item, str):
        return {"text": item.strip(), "time": None, "tip": None}
    return {
        "text": item["text"].strip(),
        "time": parse_minutes(item.get("time")),
        "tip": _optional_text(item.get("tip")),
    }


def _choice(value: Any, aliases: dict[str, str], default: str) -> str:
    if isinstance(value, str):
        return aliases.get(value.strip().lower(), default)
    return default


def _normalize_nutrition(value: Any) -> dict[str, float | None] | None:
    if not isinstance(value, dict):
        return None
    return {field: _number(value.get(field)) for field in NUTRITION_FIELDS}


def _normalize_factors(value: Any) -> dict[str, str | None] | None:
    if not isinstance(value, dict):
        return None
    return {field: _optional_text(value.get(field)) for field in PERSONALIZATION_FIELDS}


def _normalize_weather_context(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, dict):
        return None
    return {
        "temperature": _number(value.get("temperature")),
        "condition": _optional_text(value.get("condition")),
    }


def _normalize_tags(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]


def source_context(context: GenerationContext) -> dict[str, Any]:
    """The part of the context a recipe remembers it was generated for."""
    return {
        "weather": context.weather.to_dict() if context.weather else None,
        "season": context.season,
        "userProfile": context.user_profile.to_dict(),
    }


def total_time(cooking_time: int, instructions: list[dict[str, Any]]) -> int:
    """Cooking time plus the time of every step that states one."""
    return cooking_time + sum(step.get("time") or 0 for step in instructions)


def normalize_recipe_data(
    data: dict[str, Any],
    context: GenerationContext,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Fill defaults and derive computed fields on a validated recipe.

    Returns a new dict; the input is not modified. Values that are
    already set are kept, so normalizing a normalized recipe is a no-op.

    Args:
        data: Recipe data that passed validate_recipe_data
        context: Context the recipe was generated for
        now: Generation timestamp (defaults to the current time)
    """
    recipe = dict(data)

    recipe["id"] = slugify(recipe["title"])
    recipe["title"] = recipe["title"].strip()
    if not recipe.get("generatedAt"):
        recipe["generatedAt"] = (now or datetime.now()).isoformat()
    if not recipe.get("sourceContext"):
        recipe["sourceContext"] = source_context(context)

    recipe["ingredients"] = [_normalize_ingredient(item) for item in recipe["ingredients"]]
    recipe["instructions"] = [_normalize_instruction(item) for item in recipe["instructions"]]

    cooking_time = parse_minutes(recipe["cookingTime"])
    recipe["cookingTime"] = cooking_time

    supplied_total = parse_minutes(recipe.get("totalTime"))
    if not supplied_total:
        recipe["totalTime"] = total_time(cooking_time, recipe["instructions"])
    else:
        recipe["totalTime"] = max(supplied_total, cooking_time)

    confidence = _number(recipe.get("confidence"))
    if confidence is None:
        confidence = DEFAULT_CONFIDENCE
    recipe["confidence"] = min(max(round(confidence), 0), 100)

    recipe["difficulty"] = _choice(recipe.get("difficulty"), DIFFICULTY_ALIASES, DEFAULT_DIFFICULTY)
    recipe["estimatedCost"] = _choice(recipe.get("estimatedCost"), COST_ALIASES, DEFAULT_COST)

    recipe["seasonal"] = recipe.get("seasonal") is not False
    recipe["sustainable"] = recipe.get("sustainable") is not False
    recipe["isCreative"] = recipe.get("isCreative") is True

    recipe["tags"] = _normalize_tags(recipe.get("tags"))
    recipe["description"] = _optional_text(recipe.get("description"))
    recipe["recommendationReason"] = _optional_text(recipe.get("recommendationReason"))
    recipe["nutrition"] = _normalize_nutrition(recipe.get("nutrition"))
    recipe["personalizationFactors"] = _normalize_factors(recipe.get("personalizationFactors"))
    recipe["weatherContext"] = _normalize_weather_context(recipe.get("weatherContext"))

    return recipe


def build_recipe(data: dict[str, Any]) -> Recipe:
    """Construct the typed Recipe from normalized data."""
    try:
        return Recipe.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "recipe"
        raise RecipeValidationError(field, f"Invalid field {field}: {error['msg']}") from e


def parse_recipe(
    text: str,
    context: GenerationContext,
    now: datetime | None = None,
) -> Recipe:
    """
    Parse, validate, and normalize a provider answer into a Recipe.

    Raises:
        RecipeParseError: the text is not a JSON object
        RecipeValidationError: required fields are missing or invalid
    """
    data = parse_recipe_text(text)
    validate_recipe_data(data)
    recipe = build_recipe(normalize_recipe_data(data, context, now))
    logger.debug(f"Parsed recipe '{recipe.title}' ({recipe.id})")
    return recipe
