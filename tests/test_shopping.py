"""Tests for shopping list building."""

from datetime import date

import pytest

from daily_recipes.shopping import OTHER, build_shopping_list, categorize_ingredient
from daily_recipes.validation import parse_recipe


class TestCategorizeIngredient:
    @pytest.mark.parametrize(
        "text,category",
        [
            ("200g Hähnchenbrust", "Meat & Fish"),
            ("1 Zitrone", "Produce"),
            ("2 Knoblauchzehen", "Produce"),
            ("200ml Sahne", "Dairy"),
            ("300g Pasta", "Grains & Legumes"),
            ("1 TL Salz", "Spices & Herbs"),
            ("500g chicken thighs", "Meat & Fish"),
            ("1 cup rice", "Grains & Legumes"),
        ],
    )
    def test_keywords(self, text, category):
        assert categorize_ingredient(text) == category

    def test_unknown_goes_to_other(self):
        assert categorize_ingredient("1 Packung Backpulver") == OTHER

    def test_first_category_wins(self):
        assert categorize_ingredient("2 Zweige Zitronenthymian") == "Produce"

    @pytest.mark.parametrize(
        "text",
        ["2 EL Preiselbeeren", "200g Heidelbeeren", "1 red bell pepper", "2 Paprikaschoten", "1 cup blueberries"],
    )
    def test_produce_ahead_of_shorter_keywords(self, text):
        assert categorize_ingredient(text) == "Produce"

    def test_plain_pepper_is_a_spice(self):
        assert categorize_ingredient("Salt and pepper") == "Spices & Herbs"
        assert categorize_ingredient("250g Basmati-Reis") == "Grains & Legumes"


class TestBuildShoppingList:
    def test_items_follow_recipe_order(self, recipe_json, sample_context):
        recipe = parse_recipe(recipe_json, sample_context)
        shopping = build_shopping_list(recipe, today=date(2024, 7, 15))

        assert shopping.recipe_title == "Käsespätzle mit Röstzwiebeln"
        assert shopping.date == "2024-07-15"
        assert shopping.estimated_cost == "low"
        assert [item.text for item in shopping.items] == ["400g Spätzle", "200g Bergkäse", "3 Zwiebeln"]
        assert shopping.items[2].seasonal is True

    def test_grouped(self, recipe_json, sample_context):
        recipe = parse_recipe(recipe_json, sample_context)
        groups = build_shopping_list(recipe).grouped()

        assert list(groups) == ["Grains & Legumes", "Dairy", "Produce"]
        assert [item.text for item in groups["Produce"]] == ["3 Zwiebeln"]
