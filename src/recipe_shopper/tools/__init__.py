"""
Shopping list generation and categorization tools.
"""

from .categories import CATEGORY_ORDER, categorize, classify_item_name
from .shopping_tools import ShoppingTools

__all__ = ["CATEGORY_ORDER", "categorize", "classify_item_name", "ShoppingTools"]
