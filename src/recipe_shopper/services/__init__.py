"""
Services operating on persisted shopping lists.
"""

from .shopping_list_service import ShoppingListService, format_shopping_list_text

__all__ = ["ShoppingListService", "format_shopping_list_text"]
