"""
Integration tests for the SQLite store.
"""

from pathlib import Path

import pytest

from recipe_shopper.data.database import DatabaseInterface, StoreConnectionError
from recipe_shopper.data.models import Recipe, ShoppingListItem

pytestmark = pytest.mark.integration


class TestRecipes:

    def test_save_and_get_recipe(self, db, stir_fry_recipe):
        db.save_recipe(stir_fry_recipe)

        recipe = db.get_recipe("r_stir_fry")

        assert recipe.title == "Chicken Stir Fry"
        assert recipe.ingredients == stir_fry_recipe.ingredients
        assert recipe.servings == 2

    def test_malformed_ingredients_survive(self, db):
        """Test that text that is not JSON is stored and returned verbatim."""
        db.save_recipe(Recipe(id="r_bad", title="Bad", ingredients="flour, sugar", instructions=None))

        recipe = db.get_recipe("r_bad")

        assert recipe.ingredients == "flour, sugar"
        assert recipe.instructions is None

    def test_missing_recipe(self, db):
        assert db.get_recipe("nope") is None


class TestPlannedMeals:

    def test_range_is_inclusive(self, db, pancakes_recipe):
        db.save_recipe(pancakes_recipe)
        for day in ("2025-01-18", "2025-01-19", "2025-01-25", "2025-01-26"):
            db.add_planned_meal(pancakes_recipe.id, day)

        meals = db.get_planned_meals(1, "2025-01-19", "2025-01-25")

        assert [m.planned_date for m in meals] == ["2025-01-19", "2025-01-25"]
        assert meals[0].recipe.title == "Pancakes"
        assert meals[0].recipe.ingredients == pancakes_recipe.ingredients

    def test_meal_servings_and_type(self, db, planned_week):
        meals = db.get_planned_meals(1, *planned_week)

        assert [(m.meal_type, m.servings) for m in meals] == [("breakfast", 2), ("dinner", 1)]

    def test_meals_are_per_user(self, db, pancakes_recipe):
        db.save_recipe(pancakes_recipe)
        db.add_planned_meal(pancakes_recipe.id, "2025-01-20", user_id=2)

        assert db.get_planned_meals(1, "2025-01-19", "2025-01-25") == []
        assert len(db.get_planned_meals(2, "2025-01-19", "2025-01-25")) == 1

    def test_deleted_recipe_gives_none(self, db):
        db.add_planned_meal("r_gone", "2025-01-20")

        meals = db.get_planned_meals(1, "2025-01-19", "2025-01-25")

        assert len(meals) == 1
        assert meals[0].recipe is None


class TestShoppingLists:

    def test_active_list_is_created_once(self, db):
        first = db.get_active_shopping_list(1)
        second = db.get_active_shopping_list(1)

        assert first.id == second.id
        assert first.items == []
        assert first.is_completed is False

    def test_replace_items_keeps_list(self, db):
        shopping_list = db.get_active_shopping_list(1)
        items = [ShoppingListItem(name="flour", amount="2 cups", recipe_title="Pancakes")]

        db.replace_shopping_list_items(1, items)
        reloaded = db.get_active_shopping_list(1)

        assert reloaded.id == shopping_list.id
        assert reloaded.items == items

    def test_complete_and_history(self, db):
        first = db.get_active_shopping_list(1)

        completed = db.mark_shopping_list_completed(1)
        second = db.get_active_shopping_list(1)
        history = db.get_shopping_list_history(1)

        assert completed.id == first.id
        assert completed.is_completed is True
        assert second.id != first.id
        assert [sl.id for sl in history] == [second.id, first.id]
        assert db.get_shopping_list_history(1, limit=1)[0].id == second.id

    def test_complete_without_active_list(self, db):
        assert db.mark_shopping_list_completed(1) is None


class TestConnectionErrors:

    def test_unreachable_database(self, db, temp_db_dir):
        """Test that an unopenable database raises StoreConnectionError."""
        db.user_db = Path(temp_db_dir) / "missing" / "user_data.db"

        with pytest.raises(StoreConnectionError):
            db.get_planned_meals(1, "2025-01-19", "2025-01-25")

    def test_directory_that_cannot_be_created(self, temp_db_dir):
        blocker = Path(temp_db_dir) / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(StoreConnectionError):
            DatabaseInterface(db_dir=str(blocker / "data"))

    def test_creates_directory(self, temp_db_dir):
        db = DatabaseInterface(db_dir=str(Path(temp_db_dir) / "nested" / "data"))

        assert db.user_db.exists()
