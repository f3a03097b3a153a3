"""
Unit tests for shopping category classification.
"""

import pytest

from recipe_shopper.data.models import ShoppingListItem
from recipe_shopper.tools.categories import CATEGORY_ORDER, categorize, classify_item_name


class TestClassifyItemName:
    """Test keyword matching."""

    @pytest.mark.parametrize("name,category", [
        ("Broccoli", "Produce"),
        ("Whole Milk", "Dairy"),
        ("eggs", "Dairy"),
        ("Chicken Breast", "Meat & Seafood"),
        ("flour", "Pantry"),
        ("Soy Sauce", "Pantry"),
        ("Ground Cinnamon", "Spices & Seasonings"),
        ("salt", "Spices & Seasonings"),
        ("Sparkling Water", "Beverages"),
        ("Paper Towels", "Other"),
    ])
    def test_categories(self, name, category):
        assert classify_item_name(name) == category

    def test_case_insensitive(self):
        assert classify_item_name("GARLIC") == classify_item_name("garlic") == "Produce"

    def test_first_matching_category_wins(self):
        """Test items whose name matches keywords of two categories."""
        assert classify_item_name("Orange Juice") == "Produce"
        assert classify_item_name("Chicken Stock") == "Meat & Seafood"
        assert classify_item_name("Canned Cinnamon Apples") == "Produce"

    def test_empty_name(self):
        assert classify_item_name("") == "Other"
        assert classify_item_name(None) == "Other"


class TestCategorize:
    """Test grouping items for display."""

    def test_every_category_present_in_order(self):
        categories = categorize([])

        assert list(categories) == CATEGORY_ORDER
        assert all(items == [] for items in categories.values())

    def test_each_item_in_exactly_one_group(self):
        items = [
            ShoppingListItem(name="Bananas", amount="6"),
            ShoppingListItem(name="Cheddar Cheese", amount="1 block"),
            ShoppingListItem(name="Rice", amount="2 cups"),
            ShoppingListItem(name="Batteries", amount="4"),
        ]

        categories = categorize(items)
        grouped = [item for group in categories.values() for item in group]

        assert len(grouped) == len(items)
        assert categories["Produce"] == [items[0]]
        assert categories["Dairy"] == [items[1]]
        assert categories["Pantry"] == [items[2]]
        assert categories["Other"] == [items[3]]

    def test_groups_by_name_not_stored_category(self):
        """Test that grouping classifies from the item name."""
        item = ShoppingListItem(name="Salmon", amount="1 lb", category="Other")

        assert categorize([item])["Meat & Seafood"] == [item]
