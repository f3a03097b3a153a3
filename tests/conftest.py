"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import pytest
import tempfile
import shutil

from recipe_shopper.config import Settings
from recipe_shopper.data.database import DatabaseInterface
from recipe_shopper.data.models import PlannedMeal, Recipe
from recipe_shopper.services import ShoppingListService
from recipe_shopper.tools import ShoppingTools


@pytest.fixture
def temp_db_dir():
    """
    Create a temporary database directory for testing.

    This fixture is automatically cleaned up after each test.
    """
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def db(temp_db_dir):
    """
    Create a fresh DatabaseInterface for each test.

    Usage in tests:
        def test_something(db):
            db.save_recipe(...)
    """
    return DatabaseInterface(db_dir=temp_db_dir)


@pytest.fixture
def shopping_tools(db):
    return ShoppingTools(db)


@pytest.fixture
def service(db):
    return ShoppingListService(db)


@pytest.fixture
def settings(temp_db_dir):
    """Settings pointing at the temporary database directory."""
    return Settings(db_dir=temp_db_dir, default_user_id=1)


@pytest.fixture
def pancakes_recipe():
    """Recipe with plain string ingredients."""
    return Recipe(
        id="r_pancakes",
        title="Pancakes",
        ingredients=["2 cups flour", "2 eggs", "1 1/2 cups milk", "1 tsp salt"],
        instructions=["1. Mix dry ingredients", "2. Whisk in eggs and milk", "3) Cook on griddle"],
        servings=4,
    )


@pytest.fixture
def stir_fry_recipe():
    """Recipe with partially structured dict ingredients."""
    return Recipe(
        id="r_stir_fry",
        title="Chicken Stir Fry",
        ingredients=[
            {"name": "Chicken Breast", "amount": "1 lb"},
            {"ingredient": "Salt", "measure": "1 pinch"},
            {"item": "Soy Sauce", "quantity": "3 tbsp"},
            {"name": "Broccoli", "amount": 2},
        ],
        instructions=["- Slice chicken", "- Stir fry everything"],
        servings=2,
    )


@pytest.fixture
def empty_recipe():
    """Recipe that has no ingredients at all."""
    return Recipe(id="r_empty", title="Mystery Dish", ingredients=[], servings=1)


@pytest.fixture
def corrupted_recipe():
    """Recipe whose ingredient entries are all unusable."""
    return Recipe(
        id="r_corrupted",
        title="Broken Soup",
        ingredients=[{"name": "", "amount": "1 cup"}, {"name": "water"}, 42],
        servings=1,
    )


@pytest.fixture
def make_meal():
    """Factory building a PlannedMeal around a recipe."""

    def _make(recipe, planned_date="2025-01-20", servings=1, meal_type="dinner"):
        return PlannedMeal(planned_date=planned_date, recipe=recipe, meal_type=meal_type, servings=servings)

    return _make


@pytest.fixture
def planned_week(db, pancakes_recipe, stir_fry_recipe):
    """
    Store two recipes and plan them in the week of 2025-01-19.

    Pancakes are planned for two servings so their amounts are annotated.
    """
    db.save_recipe(pancakes_recipe)
    db.save_recipe(stir_fry_recipe)
    db.add_planned_meal(pancakes_recipe.id, "2025-01-20", servings=2, meal_type="breakfast")
    db.add_planned_meal(stir_fry_recipe.id, "2025-01-22", servings=1)
    return ("2025-01-19", "2025-01-25")
