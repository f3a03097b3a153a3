"""
Data models for the recipe shopping pipeline.

These models define the core entities used throughout the system:
- Ingredient / Instruction: parsed recipe content
- Recipe: user recipe with free-form ingredient data
- PlannedMeal: a recipe assigned to a date in the weekly plan
- ShoppingListItem / ShoppingList: generated, editable shopping list
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def new_id() -> str:
    """Generate an opaque unique identifier."""
    return uuid.uuid4().hex


def _now_iso() -> str:
    return datetime.now().isoformat()


@dataclass
class Ingredient:
    """Structured ingredient parsed from recipe data."""

    name: str  # "flour"
    amount: str  # "2 cups" (display format)
    unit: str = ""  # "cups", may be empty
    quantity: float = 0.0  # 2.0, 0 if unparseable
    category: Optional[str] = None  # Upstream category, if supplied

    def __str__(self) -> str:
        """Human-readable ingredient string."""
        return f"{self.amount} {self.name}".strip()

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "quantity": self.quantity,
        }
        if self.category:
            data["category"] = self.category
        return data


@dataclass
class Instruction:
    """A single recipe step."""

    text: str
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict:
        return {"text": self.text, "id": self.id}


@dataclass
class Recipe:
    """Recipe as stored by the user.

    ``ingredients`` and ``instructions`` are kept exactly as they came from
    storage: lists of strings, lists of partial dicts, JSON-encoded strings or
    something malformed. The normalizer deals with all of these.
    """

    id: str
    title: str
    ingredients: Any = field(default_factory=list)
    instructions: Any = field(default_factory=list)
    servings: int = 1

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "ingredients": _serialize_raw(self.ingredients),
            "instructions": _serialize_raw(self.instructions),
            "servings": self.servings,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Recipe":
        """Create Recipe from dictionary."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "Untitled Recipe",
            ingredients=data.get("ingredients"),
            instructions=data.get("instructions"),
            servings=max(int(data.get("servings") or 1), 1),
        )


def _serialize_raw(value: Any) -> Any:
    """Serialize raw recipe content, turning dataclass entries into dicts."""
    if isinstance(value, list):
        return [
            entry.to_dict() if hasattr(entry, "to_dict") else entry
            for entry in value
        ]
    return value


MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


@dataclass
class PlannedMeal:
    """A planned meal for a specific date with embedded recipe."""

    planned_date: str  # ISO format: "2025-01-20"
    recipe: Optional[Recipe]  # None when the recipe was deleted
    meal_type: str = "dinner"  # "breakfast", "lunch", "dinner", "snack"
    servings: int = 1  # Multiplier applied on the shopping list
    id: str = field(default_factory=new_id)

    def __str__(self) -> str:
        """Human-readable string."""
        title = self.recipe.title if self.recipe else "Unknown Recipe"
        return f"{self.planned_date} - {self.meal_type.title()}: {title} ({self.servings} servings)"

    def to_dict(self) -> Dict:
        """
        Serialize to dictionary.

        Returns:
            Dictionary with all fields, recipe as nested dict
        """
        return {
            "id": self.id,
            "planned_date": self.planned_date,
            "meal_type": self.meal_type,
            "recipe": self.recipe.to_dict() if self.recipe else None,
            "servings": self.servings,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PlannedMeal":
        """Create PlannedMeal from dictionary."""
        recipe_data = data.get("recipe")
        return cls(
            id=data.get("id") or new_id(),
            planned_date=data["planned_date"],
            meal_type=data.get("meal_type", "dinner"),
            recipe=Recipe.from_dict(recipe_data) if recipe_data else None,
            servings=max(int(data.get("servings") or 1), 1),
        )


@dataclass
class ShoppingListItem:
    """Single line on a shopping list."""

    name: str  # "Flour"
    amount: str  # "2 cups (multiple recipes)"
    category: str = "Other"
    recipe_title: str = ""  # "Pancakes, Cookies"
    servings: int = 1
    checked: bool = False
    notes: str = ""
    custom_item: bool = False
    id: str = field(default_factory=new_id)
    added_at: str = field(default_factory=_now_iso)

    @property
    def recipe_sources(self) -> List[str]:
        """Recipe titles that contributed to this item."""
        return [title for title in self.recipe_title.split(", ") if title]

    def to_dict(self) -> Dict:
        """Convert to the camelCase record stored with the list."""
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "checked": self.checked,
            "category": self.category,
            "recipeTitle": self.recipe_title,
            "servings": self.servings,
            "notes": self.notes,
            "customItem": self.custom_item,
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ShoppingListItem":
        """Create ShoppingListItem from a stored record.

        Older records may lack ids, timestamps or provenance; those get
        defaults rather than failing the whole list.
        """
        return cls(
            id=str(data.get("id") or new_id()),
            name=data.get("name", ""),
            amount=str(data.get("amount") or ""),
            checked=bool(data.get("checked", False)),
            category=data.get("category") or "Other",
            recipe_title=data.get("recipeTitle", data.get("recipe_title", "")) or "",
            servings=int(data.get("servings") or 1),
            notes=data.get("notes") or "",
            custom_item=bool(data.get("customItem", data.get("custom_item", False))),
            added_at=data.get("addedAt") or data.get("added_at") or _now_iso(),
        )


@dataclass
class ShoppingList:
    """Persisted shopping list for one user."""

    user_id: int
    items: List[ShoppingListItem] = field(default_factory=list)
    name: str = "Shopping List"
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    id: Optional[str] = None

    @property
    def checked_count(self) -> int:
        return sum(1 for item in self.items if item.checked)

    def find_item(self, item_id: str) -> Optional[ShoppingListItem]:
        """Find an item by id, or None."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "is_completed": self.is_completed,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ShoppingList":
        """Create ShoppingList from dictionary."""
        return cls(
            id=data.get("id"),
            user_id=data["user_id"],
            name=data.get("name", "Shopping List"),
            items=[ShoppingListItem.from_dict(i) for i in data.get("items", [])],
            is_completed=bool(data.get("is_completed", False)),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
