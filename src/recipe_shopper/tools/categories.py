"""
Shopping category classification.

Each category has a fixed keyword list matched as a case-insensitive
substring of the item name. An item goes to the first category (in
MATCH_ORDER) with a matching keyword, or to "Other".
"""

from typing import Dict, Iterable, List

from ..data.models import ShoppingListItem

OTHER = "Other"

# Display order of the returned grouping
CATEGORY_ORDER = [
    "Produce",
    "Dairy",
    "Meat & Seafood",
    "Pantry",
    "Spices & Seasonings",
    "Beverages",
    OTHER,
]

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "Produce": [
        "apple", "banana", "orange", "lettuce", "tomato", "onion", "garlic",
        "carrot", "potato", "pepper", "cucumber", "spinach", "broccoli",
        "mushroom", "herb", "lemon", "lime", "avocado", "celery", "ginger",
    ],
    "Dairy": ["milk", "cheese", "yogurt", "butter", "cream", "egg", "sour cream"],
    "Meat & Seafood": [
        "chicken", "beef", "pork", "fish", "salmon", "tuna", "turkey", "ham",
        "bacon", "sausage", "shrimp", "crab",
    ],
    "Pantry": [
        "flour", "sugar", "rice", "pasta", "bread", "oil", "vinegar", "sauce",
        "can", "jar", "box", "bag", "beans", "lentils", "quinoa", "oats", "cereal",
    ],
    "Spices & Seasonings": [
        "salt", "pepper", "paprika", "cumin", "oregano", "basil", "thyme",
        "rosemary", "cinnamon", "nutmeg", "vanilla", "bay leaves", "parsley",
        "cilantro", "dill",
    ],
    "Beverages": ["water", "juice", "wine", "beer", "soda", "tea", "coffee", "broth", "stock"],
}

# Pantry's container words ("can", "bag", "box") match too broadly, so it is
# checked after the specific categories.
MATCH_ORDER = [
    "Produce",
    "Dairy",
    "Meat & Seafood",
    "Spices & Seasonings",
    "Beverages",
    "Pantry",
]


def classify_item_name(name: str) -> str:
    """
    Category for a single item name.

    Args:
        name: Item name, e.g. "Chicken Breast"

    Returns:
        One of CATEGORY_ORDER
    """
    name_lower = (name or "").lower()
    for category in MATCH_ORDER:
        if any(keyword in name_lower for keyword in CATEGORY_KEYWORDS[category]):
            return category
    return OTHER


def categorize(items: Iterable[ShoppingListItem]) -> Dict[str, List[ShoppingListItem]]:
    """
    Group items by category.

    Every category is present in the result, in display order, even when
    empty. Each item appears in exactly one group.
    """
    categories: Dict[str, List[ShoppingListItem]] = {name: [] for name in CATEGORY_ORDER}
    for item in items:
        categories[classify_item_name(item.name)].append(item)
    return categories
