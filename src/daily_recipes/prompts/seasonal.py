"""Static table of in-season ingredients by region and season."""

DEFAULT_REGION = "DE"

SEASONAL_INGREDIENTS: dict[str, dict[str, list[str]]] = {
    "DE": {
        "spring": ["Spargel", "Rhabarber", "Spinat", "Radieschen", "Feldsalat", "junge Karotten"],
        "summer": ["Tomaten", "Gurken", "Zucchini", "Paprika", "Auberginen", "Beeren", "Steinfrüchte"],
        "autumn": ["Kürbis", "Äpfel", "Birnen", "Rosenkohl", "Wirsing", "Pilze", "Nüsse"],
        "winter": ["Grünkohl", "Rosenkohl", "Lauch", "Wurzelgemüse", "Kohl", "Zitrusfrüchte"],
    },
    "US": {
        "spring": ["asparagus", "peas", "spinach", "radishes", "strawberries", "spring onions"],
        "summer": ["tomatoes", "corn", "zucchini", "bell peppers", "peaches", "berries"],
        "autumn": ["pumpkin", "apples", "pears", "brussels sprouts", "sweet potatoes", "mushrooms"],
        "winter": ["kale", "leeks", "root vegetables", "cabbage", "citrus fruits"],
    },
}


def seasonal_ingredients(season: str, region: str = DEFAULT_REGION) -> list[str]:
    """
    In-season ingredients for a season.

    Unknown regions use the default region's table; unknown seasons
    have no seasonal ingredients.
    """
    table = SEASONAL_INGREDIENTS.get(region.upper(), SEASONAL_INGREDIENTS[DEFAULT_REGION])
    return list(table.get(season.lower(), []))
