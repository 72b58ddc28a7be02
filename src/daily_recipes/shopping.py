"""
Daily Recipes - Shopping list builder.

Sorts recipe ingredients into purchasing groups by keyword. Categories are
checked in table order and the first keyword hit wins, so "Zitronenthymian"
lands in Produce (zitrone) before Spices & Herbs (thymian) and "Preiselbeeren"
in Produce (beere) before Grains & Legumes (reis).
"""

from datetime import date

from daily_recipes.models import Recipe, ShoppingItem, ShoppingList

OTHER = "Other"

# German keywords first, English equivalents after. Substring matches on
# the lowercased ingredient text.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Produce": (
        "tomate", "gurke", "zwiebel", "knoblauch", "karotte", "möhre", "apfel", "zitrone",
        "kartoffel", "salat", "spinat", "zucchini", "kürbis", "pilz", "beere", "paprikaschote",
        "tomato", "cucumber", "onion", "garlic", "carrot", "apple", "lemon",
        "potato", "lettuce", "spinach", "pumpkin", "mushroom", "berry", "berries", "bell pepper",
    ),
    "Meat & Fish": (
        "fleisch", "hähnchen", "rind", "schwein", "fisch", "lachs", "hack", "speck",
        "meat", "chicken", "beef", "pork", "fish", "salmon", "bacon",
    ),
    "Dairy": (
        "milch", "sahne", "butter", "käse", "joghurt", "quark",
        "milk", "cream", "cheese", "yogurt", "yoghurt",
    ),
    "Grains & Legumes": (
        "reis", "pasta", "nudel", "spätzle", "brot", "mehl", "linsen", "bohnen",
        "rice", "noodle", "bread", "flour", "lentil", "bean", "chickpea",
    ),
    "Spices & Herbs": (
        "salz", "pfeffer", "paprika", "basilikum", "petersilie", "thymian", "oregano",
        "salt", "pepper", "basil", "parsley", "thyme", "cumin",
    ),
}

CATEGORIES: tuple[str, ...] = (*CATEGORY_KEYWORDS, OTHER)


def categorize_ingredient(text: str) -> str:
    """
    Purchasing category for an ingredient description.

    Examples:
        "200g Hähnchenbrust" -> "Meat & Fish"
        "1 Zitrone" -> "Produce"
        "1 Packung Backpulver" -> "Other"
    """
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return OTHER


def build_shopping_list(recipe: Recipe, today: date | None = None) -> ShoppingList:
    """Shopping list for a recipe, one item per ingredient in recipe order."""
    items = [
        ShoppingItem(
            text=ingredient.text,
            category=categorize_ingredient(ingredient.text),
            seasonal=ingredient.seasonal,
        )
        for ingredient in recipe.ingredients
    ]
    return ShoppingList(
        recipe_title=recipe.title,
        date=(today or date.today()).isoformat(),
        items=items,
        estimated_cost=recipe.estimated_cost,
    )
