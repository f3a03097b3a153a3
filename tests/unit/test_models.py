"""
Unit tests for data model serialization.
"""

from datetime import datetime

from recipe_shopper.data.models import (
    Ingredient,
    PlannedMeal,
    Recipe,
    ShoppingList,
    ShoppingListItem,
)


class TestShoppingListItem:
    """Test the stored camelCase item record."""

    def test_to_dict_uses_camel_case(self):
        item = ShoppingListItem(name="flour", amount="2 cups", recipe_title="Pancakes", custom_item=True)

        data = item.to_dict()

        assert data["recipeTitle"] == "Pancakes"
        assert data["customItem"] is True
        assert "addedAt" in data
        assert "recipe_title" not in data

    def test_from_dict_round_trip(self):
        item = ShoppingListItem(name="milk", amount="1 cup", category="Dairy", checked=True, notes="2%")

        assert ShoppingListItem.from_dict(item.to_dict()) == item

    def test_from_dict_fills_missing_fields(self):
        """Test that legacy records without ids or provenance still load."""
        item = ShoppingListItem.from_dict({"name": "eggs", "amount": 12})

        assert item.id
        assert item.amount == "12"
        assert item.category == "Other"
        assert item.recipe_title == ""
        assert item.checked is False
        assert item.added_at

    def test_recipe_sources(self):
        item = ShoppingListItem(name="salt", amount="1 tsp", recipe_title="Pancakes, Chicken Stir Fry")

        assert item.recipe_sources == ["Pancakes", "Chicken Stir Fry"]
        assert ShoppingListItem(name="x", amount="1").recipe_sources == []


class TestShoppingList:

    def test_checked_count_and_find_item(self):
        first = ShoppingListItem(name="a", amount="1", checked=True)
        second = ShoppingListItem(name="b", amount="1")
        shopping_list = ShoppingList(user_id=1, items=[first, second], id="sl_1")

        assert shopping_list.checked_count == 1
        assert shopping_list.find_item(second.id) is second
        assert shopping_list.find_item("missing") is None

    def test_round_trip(self):
        shopping_list = ShoppingList(
            user_id=3,
            items=[ShoppingListItem(name="a", amount="1")],
            created_at=datetime(2025, 1, 19, 9, 30),
            updated_at=datetime(2025, 1, 20, 10, 0),
            id="sl_2",
        )

        assert ShoppingList.from_dict(shopping_list.to_dict()) == shopping_list


class TestRecipeAndMeal:

    def test_recipe_to_dict_serializes_ingredients(self):
        recipe = Recipe(id="r1", title="Rice", ingredients=[Ingredient(name="rice", amount="1 cup")])

        assert recipe.to_dict()["ingredients"] == [
            {"name": "rice", "amount": "1 cup", "unit": "", "quantity": 0.0}
        ]

    def test_recipe_keeps_malformed_ingredients(self):
        recipe = Recipe.from_dict({"id": 5, "ingredients": "not json", "servings": 0})

        assert recipe.id == "5"
        assert recipe.title == "Untitled Recipe"
        assert recipe.ingredients == "not json"
        assert recipe.servings == 1

    def test_planned_meal_round_trip(self):
        meal = PlannedMeal(planned_date="2025-01-20", recipe=Recipe(id="r1", title="Rice"), servings=2)

        restored = PlannedMeal.from_dict(meal.to_dict())

        assert restored == meal
        assert str(restored) == "2025-01-20 - Dinner: Rice (2 servings)"

    def test_planned_meal_without_recipe(self):
        meal = PlannedMeal.from_dict({"planned_date": "2025-01-20", "recipe": None})

        assert meal.recipe is None
        assert "Unknown Recipe" in str(meal)
