#!/usr/bin/env python3
"""
Command-line entry point for the recipe shopping list.

Examples:
    recipe-shopper add-recipe --title "Pancakes" -i "2 cups flour" -i "2 eggs"
    recipe-shopper plan <recipe_id> 2025-01-20 --servings 2
    recipe-shopper generate --start 2025-01-19 --end 2025-01-25
    recipe-shopper show --by-category
"""

import argparse
import logging
import sys
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from . import errors
from .config import Settings, configure_logging
from .data.database import DatabaseInterface, StoreConnectionError
from .data.models import MEAL_TYPES, Recipe, new_id
from .parsing import normalize_instructions
from .services import ShoppingListService

logger = logging.getLogger(__name__)


def current_week_dates(today: Optional[date] = None) -> Tuple[str, str]:
    """Sunday-to-Saturday week containing ``today``, as YYYY-MM-DD strings."""
    today = today or date.today()
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    end = start + timedelta(days=6)
    return start.isoformat(), end.isoformat()


def _print_result(result: Dict[str, Any]) -> int:
    """Print a service result. Returns the process exit code."""
    if not result.get("success"):
        print(f"✗ {result.get('error')}", file=sys.stderr)
        return 1

    for warning in result.get("warnings", []):
        print(f"! {warning}")

    shopping_list = result.get("shopping_list")
    if shopping_list:
        progress = result["progress"]
        print(f"{shopping_list['name']} ({progress['checked']}/{progress['total']} checked)")
        for item in shopping_list["items"]:
            checkbox = "[x]" if item["checked"] else "[ ]"
            print(f"  {checkbox} {item['name']} - {item['amount']}  ({item['category']}, id={item['id']})")
    return 0


def _print_categories(result: Dict[str, Any]) -> int:
    if not result.get("success"):
        return _print_result(result)

    for category, items in result["categories"].items():
        if not items:
            continue
        print(f"\n{category.upper()}")
        print("-" * 30)
        for item in items:
            checkbox = "[x]" if item["checked"] else "[ ]"
            print(f"  {checkbox} {item['name']} - {item['amount']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-shopper",
        description="Generate and edit shopping lists from planned meals",
    )
    parser.add_argument("--db-dir", help="Directory containing the database")
    parser.add_argument("--user-id", type=int, help="User whose data to use")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    add_recipe = commands.add_parser("add-recipe", help="Save a recipe")
    add_recipe.add_argument("--title", required=True)
    add_recipe.add_argument("--id", help="Recipe id (generated if omitted)")
    add_recipe.add_argument("-i", "--ingredient", action="append", default=[], help="Ingredient line (repeatable)")
    add_recipe.add_argument("-s", "--step", action="append", default=[], help="Instruction line (repeatable)")
    add_recipe.add_argument("--servings", type=int, default=1)

    plan = commands.add_parser("plan", help="Plan a recipe for a date")
    plan.add_argument("recipe_id")
    plan.add_argument("date", help="YYYY-MM-DD")
    plan.add_argument("--servings", type=int, default=1)
    plan.add_argument("--meal-type", choices=MEAL_TYPES, default="dinner")

    generate = commands.add_parser("generate", help="Regenerate the list from the meal plan")
    generate.add_argument("--start", help="First day, YYYY-MM-DD (default: start of this week)")
    generate.add_argument("--end", help="Last day, YYYY-MM-DD (default: end of this week)")

    show = commands.add_parser("show", help="Show the active list")
    show.add_argument("--by-category", action="store_true")

    check = commands.add_parser("check", help="Toggle an item's checked state")
    check.add_argument("item_id")

    add = commands.add_parser("add", help="Add a custom item")
    add.add_argument("name")
    add.add_argument("--amount", default="")
    add.add_argument("--notes", default="")

    notes = commands.add_parser("notes", help="Set an item's notes")
    notes.add_argument("item_id")
    notes.add_argument("notes")

    delete = commands.add_parser("delete", help="Delete an item")
    delete.add_argument("item_id")

    commands.add_parser("clear", help="Delete all items")
    commands.add_parser("complete", help="Mark the list completed")

    history = commands.add_parser("history", help="Show recent lists")
    history.add_argument("--limit", type=int, default=10)

    share = commands.add_parser("share", help="Print the list as shareable text")
    share.add_argument("--title", default="Shopping List")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)

    user_id = args.user_id if args.user_id is not None else settings.default_user_id
    try:
        db = DatabaseInterface(db_dir=args.db_dir or settings.db_dir)
        return _run_command(args, db, user_id)
    except StoreConnectionError as e:
        logger.error(f"Cannot reach store: {e}")
        print(f"✗ {errors.CONNECTION_MESSAGE}", file=sys.stderr)
        return 1


def _run_command(args: argparse.Namespace, db: DatabaseInterface, user_id: int) -> int:
    service = ShoppingListService(db)

    if args.command == "add-recipe":
        recipe = Recipe(
            id=args.id or new_id(),
            title=args.title,
            ingredients=args.ingredient,
            instructions=[step.text for step in normalize_instructions(args.step, args.title)],
            servings=max(args.servings, 1),
        )
        db.save_recipe(recipe, user_id=user_id)
        print(f"✓ Recipe saved: {recipe.id}")
        return 0

    if args.command == "plan":
        date_error = errors.validate_date_range(args.date, args.date)
        if date_error:
            print(f"✗ {date_error}", file=sys.stderr)
            return 1
        if not db.get_recipe(args.recipe_id):
            print(f"✗ Recipe {args.recipe_id} not found", file=sys.stderr)
            return 1
        meal_id = db.add_planned_meal(
            args.recipe_id, args.date, servings=args.servings, meal_type=args.meal_type, user_id=user_id
        )
        print(f"✓ Meal planned: {meal_id}")
        return 0

    if args.command == "generate":
        default_start, default_end = current_week_dates()
        result = service.regenerate_from_meal_plan(user_id, args.start or default_start, args.end or default_end)
        return _print_result(result)

    if args.command == "show":
        if args.by_category:
            return _print_categories(service.get_categorized_items(user_id))
        return _print_result(service.get_shopping_list(user_id))

    if args.command == "check":
        return _print_result(service.check_item(user_id, args.item_id))

    if args.command == "add":
        return _print_result(service.add_custom_item(user_id, args.name, args.amount, args.notes))

    if args.command == "notes":
        return _print_result(service.update_notes(user_id, args.item_id, args.notes))

    if args.command == "delete":
        return _print_result(service.delete_item(user_id, args.item_id))

    if args.command == "clear":
        return _print_result(service.delete_all_items(user_id))

    if args.command == "complete":
        result = service.complete_shopping_list(user_id)
        if result.get("success"):
            print("✓ Shopping list completed")
        return _print_result(result)

    if args.command == "history":
        result = service.get_shopping_list_history(user_id, limit=args.limit)
        if not result.get("success"):
            return _print_result(result)
        for shopping_list in result["shopping_lists"]:
            status = "completed" if shopping_list["is_completed"] else "active"
            print(f"{shopping_list['created_at'][:10]}  {shopping_list['id']}  "
                  f"{len(shopping_list['items'])} items  ({status})")
        return 0

    if args.command == "share":
        result = service.format_shopping_list(user_id, title=args.title)
        if not result.get("success"):
            return _print_result(result)
        print(result["text"])
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
