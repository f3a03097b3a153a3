"""
Normalize raw recipe ingredient data into validated Ingredient records.

Recipes in storage carry ingredients in several shapes: lists of strings,
lists of partially structured dicts from older imports, JSON-encoded strings,
or plain garbage. Everything here degrades to omission plus a Diagnostic;
nothing raises on bad data.
"""

import json
import logging
from numbers import Number
from typing import Any, List, Optional

from ..data.models import Ingredient
from . import diagnostics as diag
from .diagnostics import Diagnostic
from .ingredient_parser import leading_quantity, parse_ingredient_text

logger = logging.getLogger(__name__)

NAME_KEYS = ("name", "ingredient", "item")
AMOUNT_KEYS = ("amount", "quantity", "measure")


def _first_present(data: dict, keys) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _coerce_text(value: Any) -> str:
    """String form of a scalar field, '' for anything unusable."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Number):
        return str(value).strip()
    return ""


def decode_entries(
    raw: Any,
    context_label: str,
    what: str,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> Optional[list]:
    """
    Turn stored recipe content into a list of entries.

    Args:
        raw: Stored value (list, JSON string, None, ...)
        context_label: Recipe title for diagnostics
        what: "ingredients" or "instructions", for messages
        diagnostics: Optional list that receives problems found

    Returns:
        List of raw entries, or None when nothing usable was found
    """
    if raw is None:
        diag.record(diagnostics, context_label, f"Recipe has no {what}", diag.MISSING)
        return None

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            diag.record(diagnostics, context_label, f"Failed to parse {what} string", diag.UNPARSEABLE)
            return None

    if not isinstance(raw, list):
        diag.record(
            diagnostics,
            context_label,
            f"Recipe has non-list {what} ({type(raw).__name__})",
            diag.NOT_A_LIST,
        )
        return None

    return raw


def validate_ingredient(
    ingredient: Any,
    context_label: str = "",
    index: int = 0,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> Optional[Ingredient]:
    """
    Validate a partially structured ingredient.

    The name may come from ``name``, ``ingredient`` or ``item`` and the amount
    from ``amount``, ``quantity`` or ``measure``. Both must be non-empty.

    Args:
        ingredient: dict or Ingredient to validate
        context_label: Recipe title for diagnostics
        index: Position in the recipe's ingredient list
        diagnostics: Optional list that receives problems found

    Returns:
        Validated Ingredient or None if invalid
    """
    if isinstance(ingredient, Ingredient):
        ingredient = ingredient.to_dict()

    if not isinstance(ingredient, dict):
        diag.record(diagnostics, context_label, "Invalid ingredient", diag.INVALID_ITEM, index)
        return None

    name = _coerce_text(_first_present(ingredient, NAME_KEYS))
    if not name:
        diag.record(
            diagnostics, context_label, "Missing or invalid ingredient name", diag.INVALID_ITEM, index
        )
        return None

    raw_amount = _first_present(ingredient, AMOUNT_KEYS)
    amount = _coerce_text(raw_amount)
    if not amount:
        diag.record(
            diagnostics, context_label, "Missing or invalid ingredient amount", diag.INVALID_ITEM, index
        )
        return None

    quantity = ingredient.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, Number):
        quantity = leading_quantity(amount)

    category = ingredient.get("category")
    return Ingredient(
        name=name,
        amount=amount,
        unit=_coerce_text(ingredient.get("unit")),
        quantity=float(quantity),
        category=category if isinstance(category, str) and category.strip() else None,
    )


def normalize_ingredients(
    ingredients: Any,
    context_label: str = "",
    diagnostics: Optional[List[Diagnostic]] = None,
) -> List[Ingredient]:
    """
    Normalize ingredients from storage, handling old and new formats.

    Args:
        ingredients: Raw ingredients (list, JSON string, None, ...)
        context_label: Recipe title used to tag diagnostics
        diagnostics: Optional list that receives problems found

    Returns:
        Validated ingredients in input order
    """
    entries = decode_entries(ingredients, context_label, "ingredients", diagnostics)
    if entries is None:
        return []

    normalized = []
    for index, entry in enumerate(entries):
        if isinstance(entry, str):
            ingredient = parse_ingredient_text(entry)
            if ingredient is None:
                diag.record(
                    diagnostics, context_label, "Blank ingredient text", diag.INVALID_ITEM, index
                )
        elif isinstance(entry, (dict, Ingredient)):
            ingredient = validate_ingredient(entry, context_label, index, diagnostics)
        else:
            ingredient = None
            diag.record(
                diagnostics,
                context_label,
                f"Unsupported ingredient type {type(entry).__name__}",
                diag.INVALID_ITEM,
                index,
                level=logging.DEBUG,
            )

        if ingredient is not None:
            normalized.append(ingredient)

    return normalized
