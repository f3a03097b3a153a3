"""
Shopping list generation from planned meals.

Consolidates the ingredients of every meal planned in a date range into one
list of ShoppingListItem records, merged case-insensitively by name, with
provenance (which recipes need each item) and structured diagnostics for
recipes whose ingredient data could not be used.
"""

import logging
from typing import Any, Dict, List

from .. import errors
from ..data.database import ShoppingStore, StoreConnectionError
from ..data.models import PlannedMeal, ShoppingListItem
from ..parsing import diagnostics as diag
from ..parsing.diagnostics import Diagnostic
from ..parsing.normalizer import normalize_ingredients
from .categories import OTHER, classify_item_name

logger = logging.getLogger(__name__)

MULTIPLE_RECIPES = "(multiple recipes)"

# Diagnostic kinds meaning the whole ingredient field was unreadable
_UNREADABLE = (diag.UNPARSEABLE, diag.NOT_A_LIST)


class ShoppingTools:
    """Shopping list generation tools."""

    def __init__(self, store: ShoppingStore):
        """
        Initialize shopping tools.

        Args:
            store: Store providing planned meals
        """
        self.store = store

    def generate_shopping_list(self, user_id: int, start_date: str, end_date: str) -> Dict[str, Any]:
        """
        Generate a shopping list from the meals planned in a date range.

        Args:
            user_id: User whose meal plan to read
            start_date: First day, YYYY-MM-DD (inclusive)
            end_date: Last day, YYYY-MM-DD (inclusive)

        Returns:
            {"success": True, "items": [...], "warnings": [...], "diagnostics": {...}}
            or an error result with "error_kind" set
        """
        date_error = errors.validate_date_range(start_date, end_date)
        if date_error:
            return errors.error_result(errors.INVALID_DATE_RANGE, date_error)

        logger.info(f"Generating shopping list for user {user_id} ({start_date} to {end_date})")

        try:
            meals = self.store.get_planned_meals(user_id, start_date, end_date)
        except StoreConnectionError as e:
            logger.error(f"Cannot reach store while loading planned meals: {e}")
            return errors.error_result(errors.CONNECTION, errors.CONNECTION_MESSAGE)
        except Exception as e:
            logger.error(f"Error loading planned meals: {e}", exc_info=True)
            return errors.error_result(
                errors.STORE_ERROR, "Failed to generate shopping list. Please try again."
            )

        if not meals:
            logger.info("No meal plans found for date range")
            return errors.error_result(
                errors.NO_MEALS,
                errors.NO_MEALS_MESSAGE,
                diagnostics={"total_meal_plans": 0},
            )

        return self.consolidate_meals(meals)

    def consolidate_meals(self, meals: List[PlannedMeal]) -> Dict[str, Any]:
        """
        Merge the ingredients of planned meals into shopping list items.

        Amounts are never summed: units are free text, so merged items list
        every contributing amount followed by "(multiple recipes)".

        Args:
            meals: Planned meals with embedded recipes

        Returns:
            Result dictionary, see generate_shopping_list()
        """
        items: List[ShoppingListItem] = []
        items_by_key: Dict[str, ShoppingListItem] = {}
        amounts_by_key: Dict[str, List[str]] = {}
        titles_by_key: Dict[str, List[str]] = {}

        recipes_without_ingredients: List[str] = []
        recipes_with_invalid_ingredients: List[Dict[str, Any]] = []
        meals_without_recipe = 0
        all_diagnostics: List[Diagnostic] = []

        for meal in meals:
            recipe = meal.recipe
            if recipe is None:
                logger.warning(f"Planned meal {meal.id} on {meal.planned_date} has no recipe data")
                meals_without_recipe += 1
                continue

            recipe_diagnostics: List[Diagnostic] = []
            ingredients = normalize_ingredients(recipe.ingredients, recipe.title, recipe_diagnostics)
            all_diagnostics.extend(recipe_diagnostics)

            invalid_count = diag.count_invalid(recipe_diagnostics)
            if any(d.kind in _UNREADABLE for d in recipe_diagnostics):
                invalid_count += 1

            servings = max(meal.servings or 1, 1)
            logger.debug(
                f'Processing "{recipe.title}" with {len(ingredients)} ingredients, servings: {servings}'
            )

            if invalid_count:
                _add_invalid_recipe(recipes_with_invalid_ingredients, recipe.title, len(ingredients), invalid_count)
            elif not ingredients:
                logger.warning(f'Recipe "{recipe.title}" has no ingredients defined')
                if recipe.title not in recipes_without_ingredients:
                    recipes_without_ingredients.append(recipe.title)

            for ingredient in ingredients:
                key = ingredient.name.lower()
                amount = f"{ingredient.amount} ({servings} servings)" if servings > 1 else ingredient.amount

                existing = items_by_key.get(key)
                if existing is None:
                    item = ShoppingListItem(
                        name=ingredient.name,
                        amount=amount,
                        category=ingredient.category or OTHER,
                        recipe_title=recipe.title,
                        servings=servings,
                    )
                    items_by_key[key] = item
                    amounts_by_key[key] = [amount]
                    titles_by_key[key] = [recipe.title]
                    items.append(item)
                    continue

                amounts_by_key[key].append(amount)
                existing.amount = f"{' + '.join(amounts_by_key[key])} {MULTIPLE_RECIPES}"
                # Titles may themselves contain ", "
                if recipe.title not in titles_by_key[key]:
                    titles_by_key[key].append(recipe.title)
                    existing.recipe_title = ", ".join(titles_by_key[key])

        for item in items:
            if item.category == OTHER:
                item.category = classify_item_name(item.name)

        diagnostics = {
            "total_meal_plans": len(meals),
            "meals_without_recipe": meals_without_recipe,
            "recipes_without_ingredients": recipes_without_ingredients,
            "recipes_with_invalid_ingredients": recipes_with_invalid_ingredients,
            "entries": [d.to_dict() for d in all_diagnostics],
        }

        logger.debug(
            f"Shopping items generated: {len(items)}, "
            f"recipes without ingredients: {len(recipes_without_ingredients)}, "
            f"recipes with invalid ingredients: {len(recipes_with_invalid_ingredients)}"
        )

        if not items:
            logger.warning("No shopping items generated despite having meal plans")
            return errors.error_result(
                errors.NO_USABLE_INGREDIENTS,
                _no_items_message(recipes_without_ingredients, recipes_with_invalid_ingredients),
                diagnostics=diagnostics,
            )

        warnings = []
        if recipes_without_ingredients:
            warnings.append(f"{len(recipes_without_ingredients)} recipes have no ingredients defined")
        if recipes_with_invalid_ingredients:
            warnings.append(
                f"{len(recipes_with_invalid_ingredients)} recipes have some invalid ingredient data"
            )
        if meals_without_recipe:
            warnings.append(f"{meals_without_recipe} planned meals no longer have a recipe")

        logger.info(f"Shopping list generated with {len(items)} items from {len(meals)} meals")
        return {
            "success": True,
            "items": items,
            "num_items": len(items),
            "warnings": warnings,
            "diagnostics": diagnostics,
        }


def _add_invalid_recipe(entries: List[Dict[str, Any]], title: str, valid_count: int, invalid_count: int):
    """Record a recipe with dropped entries, once per title."""
    for entry in entries:
        if entry["title"] == title:
            return
    entries.append({"title": title, "valid_count": valid_count, "invalid_count": invalid_count})


def _no_items_message(recipes_without_ingredients: List[str], recipes_with_invalid_ingredients: List[Dict]) -> str:
    message = "No items in your shopping list. "

    if recipes_without_ingredients:
        message += (
            "The following recipes don't have ingredients defined: "
            f"{', '.join(recipes_without_ingredients)}. "
        )

    if recipes_with_invalid_ingredients:
        titles = ", ".join(entry["title"] for entry in recipes_with_invalid_ingredients)
        message += f"The following recipes have corrupted ingredient data: {titles}. "

    return message + "Please edit these recipes to add proper ingredients with names and amounts."
