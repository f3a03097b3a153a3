"""
Shopping list editing operations.

Every operation reads the user's active list from the store, applies one
change and writes the whole item array back. No list state is kept between
calls; the store is the only source of truth.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .. import errors
from ..data.database import ShoppingStore, StoreConnectionError
from ..data.models import ShoppingList, ShoppingListItem
from ..tools.categories import categorize, classify_item_name
from ..tools.shopping_tools import ShoppingTools

logger = logging.getLogger(__name__)

# Fields a client may change through update_item()
EDITABLE_FIELDS = ("name", "amount", "notes", "checked", "category")

ItemsMutation = Callable[[List[ShoppingListItem]], Optional[List[ShoppingListItem]]]


class ShoppingListService:
    """Read-modify-write operations on a user's active shopping list."""

    def __init__(self, store: ShoppingStore, tools: Optional[ShoppingTools] = None):
        """
        Initialize the service.

        Args:
            store: Store holding shopping lists and planned meals
            tools: Shopping list generator (defaults to one built on ``store``)
        """
        self.store = store
        self.tools = tools or ShoppingTools(store)

    # ==================== Results ====================

    @staticmethod
    def _list_result(shopping_list: ShoppingList, **extra: Any) -> Dict[str, Any]:
        result = {
            "success": True,
            "shopping_list": shopping_list.to_dict(),
            "progress": {
                "checked": shopping_list.checked_count,
                "total": len(shopping_list.items),
            },
        }
        result.update(extra)
        return result

    @staticmethod
    def _failure(action: str, e: Exception) -> Dict[str, Any]:
        if isinstance(e, StoreConnectionError):
            logger.error(f"Cannot reach store during {action}: {e}")
            return errors.error_result(errors.CONNECTION, errors.CONNECTION_MESSAGE)

        logger.error(f"Error during {action}: {e}", exc_info=True)
        return errors.error_result(errors.STORE_ERROR, f"Failed to {action}")

    def _mutate(self, user_id: int, action: str, mutation: ItemsMutation) -> Dict[str, Any]:
        """
        Apply ``mutation`` to the active list's items and save the result.

        A mutation returning None means nothing changed; the list is then
        returned without a write.
        """
        try:
            shopping_list = self.store.get_active_shopping_list(user_id)
            updated_items = mutation(list(shopping_list.items))
            if updated_items is None:
                return self._list_result(shopping_list)

            shopping_list = self.store.replace_shopping_list_items(user_id, updated_items)
            return self._list_result(shopping_list)

        except Exception as e:
            return self._failure(action, e)

    # ==================== Queries ====================

    def get_shopping_list(self, user_id: int) -> Dict[str, Any]:
        """Get the active shopping list, creating an empty one if needed."""
        try:
            shopping_list = self.store.get_active_shopping_list(user_id)
        except Exception as e:
            return self._failure("load shopping list", e)
        return self._list_result(shopping_list)

    def get_categorized_items(self, user_id: int) -> Dict[str, Any]:
        """Get the active list's items grouped by shopping category."""
        try:
            shopping_list = self.store.get_active_shopping_list(user_id)
        except Exception as e:
            return self._failure("load shopping list", e)

        return {
            "success": True,
            "categories": {
                category: [item.to_dict() for item in items]
                for category, items in categorize(shopping_list.items).items()
            },
        }

    def get_shopping_list_history(self, user_id: int, limit: int = 10) -> Dict[str, Any]:
        """Get recent shopping lists, newest first."""
        try:
            history = self.store.get_shopping_list_history(user_id, limit=limit)
        except Exception as e:
            return self._failure("load shopping list history", e)

        return {"success": True, "shopping_lists": [sl.to_dict() for sl in history]}

    # ==================== Item Operations ====================

    def check_item(self, user_id: int, item_id: str) -> Dict[str, Any]:
        """Toggle the checked state of one item. Unknown ids are ignored."""

        def toggle(items):
            for item in items:
                if item.id == item_id:
                    item.checked = not item.checked
                    return items
            return None

        return self._mutate(user_id, "update item check status", toggle)

    def add_custom_item(self, user_id: int, name: str, amount: str = "", notes: str = "") -> Dict[str, Any]:
        """
        Append a user-added item that does not come from a recipe.

        Args:
            user_id: List owner
            name: Item name (required)
            amount: Free-text amount, "1" if blank
            notes: Optional notes
        """
        name = (name or "").strip()
        if not name:
            return errors.error_result(errors.INVALID_INPUT, "Item name is required")

        new_item = ShoppingListItem(
            name=name,
            amount=(amount or "").strip() or "1",
            category=classify_item_name(name),
            notes=(notes or "").strip(),
            custom_item=True,
        )

        def append(items):
            return items + [new_item]

        result = self._mutate(user_id, "add item to shopping list", append)
        if result["success"]:
            logger.info(f"Added custom item {name!r} for user {user_id}")
            result["item"] = new_item.to_dict()
        return result

    def update_notes(self, user_id: int, item_id: str, notes: str) -> Dict[str, Any]:
        """Replace the notes of one item."""
        return self.update_item(user_id, item_id, {"notes": notes or ""})

    def update_item(self, user_id: int, item_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply field updates to one item.

        Only EDITABLE_FIELDS may be changed; ids, provenance and timestamps
        are owned by the list.
        """
        unknown = sorted(set(updates) - set(EDITABLE_FIELDS))
        if unknown:
            return errors.error_result(
                errors.INVALID_INPUT, f"Cannot update field(s): {', '.join(unknown)}"
            )
        if "name" in updates and not str(updates["name"] or "").strip():
            return errors.error_result(errors.INVALID_INPUT, "Item name cannot be empty")
        if "checked" in updates and not isinstance(updates["checked"], bool):
            return errors.error_result(errors.INVALID_INPUT, "checked must be true or false")

        def apply(items):
            for item in items:
                if item.id == item_id:
                    for key, value in updates.items():
                        setattr(item, key, value if key == "checked" else str(value or "").strip())
                    return items
            return None

        return self._mutate(user_id, "update item", apply)

    def delete_item(self, user_id: int, item_id: str) -> Dict[str, Any]:
        """Remove one item. Unknown ids are ignored."""

        def remove(items):
            remaining = [item for item in items if item.id != item_id]
            return remaining if len(remaining) != len(items) else None

        return self._mutate(user_id, "delete item", remove)

    def delete_all_items(self, user_id: int) -> Dict[str, Any]:
        """Empty the active list. The list record itself is kept."""
        logger.info(f"Deleting all items from shopping list for user {user_id}")
        return self._mutate(user_id, "delete all items", lambda items: [])

    # ==================== List Lifecycle ====================

    def regenerate_from_meal_plan(self, user_id: int, start_date: str, end_date: str) -> Dict[str, Any]:
        """
        Replace the active list's items with a fresh list from the meal plan.

        Args:
            user_id: List owner
            start_date: First day, YYYY-MM-DD (inclusive)
            end_date: Last day, YYYY-MM-DD (inclusive)

        Returns:
            List result with generation warnings, or the generation error
        """
        generated = self.tools.generate_shopping_list(user_id, start_date, end_date)
        if not generated.get("success"):
            return generated

        result = self._mutate(user_id, "save regenerated shopping list", lambda items: generated["items"])
        if result["success"]:
            result["warnings"] = generated.get("warnings", [])
            result["diagnostics"] = generated.get("diagnostics", {})
        return result

    def complete_shopping_list(self, user_id: int) -> Dict[str, Any]:
        """Mark the active list completed. The next access starts a new one."""
        try:
            completed = self.store.mark_shopping_list_completed(user_id)
        except Exception as e:
            return self._failure("complete shopping list", e)

        if completed is None:
            return errors.error_result(errors.INVALID_INPUT, "No active shopping list to complete")
        return self._list_result(completed)

    def format_shopping_list(self, user_id: int, title: str = "Shopping List") -> Dict[str, Any]:
        """Render the active list as plain text for sharing."""
        try:
            shopping_list = self.store.get_active_shopping_list(user_id)
        except Exception as e:
            return self._failure("load shopping list", e)

        if not shopping_list.items:
            return errors.error_result(errors.INVALID_INPUT, "No items to share")

        return {"success": True, "text": format_shopping_list_text(shopping_list.items, title)}


def format_shopping_list_text(items: List[ShoppingListItem], title: str = "Shopping List") -> str:
    """
    Format items as a plain-text list grouped by category.

    Args:
        items: Items to render
        title: Heading line

    Returns:
        Text suitable for email, SMS or clipboard
    """
    checked = sum(1 for item in items if item.checked)
    lines = [title, "=" * len(title), f"{checked}/{len(items)} items checked"]

    for category, category_items in categorize(items).items():
        if not category_items:
            continue

        lines.append("")
        lines.append(category.upper())
        for item in category_items:
            checkbox = "[x]" if item.checked else "[ ]"
            line = f"{checkbox} {item.name} - {item.amount}"
            if item.notes:
                line += f" ({item.notes})"
            lines.append(line)

            sources = item.recipe_sources
            if sources:
                recipes = ", ".join(sources[:2])
                if len(sources) > 2:
                    recipes += f", +{len(sources) - 2} more"
                lines.append(f"    For: {recipes}")

    return "\n".join(lines)
