"""
Parse free-form ingredient text into structured Ingredient records.

Python-first parser - ordered regex patterns, no lookup tables beyond the
unit vocabulary.

Examples:
    "2 cups flour"        -> Ingredient(name="flour", amount="2 cups", unit="cups", quantity=2.0)
    "1 1/2 tsp salt"      -> Ingredient(name="salt", amount="1 1/2 tsp", unit="tsp", quantity=1.5)
    "3 eggs"              -> Ingredient(name="eggs", amount="3", unit="", quantity=3.0)
    "to taste black pepper" -> Ingredient(name="black pepper", amount="to taste", ...)
    "fresh basil"         -> Ingredient(name="fresh basil", amount="1", unit="", quantity=1.0)
"""

import re
from typing import Any, List, Optional

from ..data.models import Ingredient

UNIT_WORDS = [
    "cups", "cup",
    "tablespoons", "tablespoon", "tbsp", "tbs",
    "teaspoons", "teaspoon", "tsp",
    "ounces", "ounce", "oz",
    "pounds", "pound", "lbs", "lb",
    "grams", "gram", "g",
    "kilograms", "kilogram", "kg",
    "milliliters", "milliliter", "ml",
    "liters", "liter", "l",
    "gallons", "gallon",
    "quarts", "quart",
    "pints", "pint",
    "inches", "inch",
    "cloves", "clove",
    "pieces", "piece",
    "slices", "slice",
    "whole", "large", "medium", "small",
    "pinches", "pinch",
    "dashes", "dash",
    "handfuls", "handful",
]

# Longest first so "tbsp" is not cut short by "tbs", "lbs" by "lb", etc.
_UNIT = "|".join(sorted(UNIT_WORDS, key=len, reverse=True))
_NUMBER = r"\d+(?:\.\d+)?(?:\s+\d+/\d+)?"
_FRACTION = r"\d+/\d+"

# Order matters: first match wins.
PATTERNS = [
    re.compile(rf"^({_NUMBER})\s+({_UNIT})\s+(.+)$", re.IGNORECASE),
    re.compile(rf"^({_NUMBER})\s+(.+)$", re.IGNORECASE),
    re.compile(rf"^({_FRACTION})\s+({_UNIT})\s+(.+)$", re.IGNORECASE),
    re.compile(rf"^({_FRACTION})\s+(.+)$", re.IGNORECASE),
    re.compile(r"^(to\s+taste|as\s+needed)\s+(.+)$", re.IGNORECASE),
]


def parse_quantity(amount_text: str) -> float:
    """
    Numeric magnitude of a leading amount.

    Whole numbers, decimals, fractions and mixed fractions are supported;
    "1 1/2" is 1.5. Anything else is 0.

    Args:
        amount_text: e.g. "2", "0.5", "3/4", "1 1/2"

    Returns:
        Parsed quantity as float
    """
    total = 0.0
    for token in amount_text.split():
        if "/" in token:
            numerator, _, denominator = token.partition("/")
            try:
                total += float(numerator) / float(denominator)
            except (ValueError, ZeroDivisionError):
                return 0.0
        else:
            try:
                total += float(token)
            except ValueError:
                return 0.0
    return total


_LEADING_AMOUNT = re.compile(rf"^({_NUMBER}|{_FRACTION})(?:\s|$)")


def leading_quantity(text: str) -> float:
    """Quantity of the number at the start of ``text`` ("1 1/2 cups" -> 1.5), else 0."""
    match = _LEADING_AMOUNT.match(text.strip())
    return parse_quantity(match.group(1)) if match else 0.0


def parse_ingredient_text(ingredient_text: Any) -> Optional[Ingredient]:
    """
    Parse ingredient text into a structured Ingredient.

    Args:
        ingredient_text: Raw ingredient text like "2 cups flour"

    Returns:
        Ingredient, or None for non-string, empty or whitespace-only input
    """
    if not isinstance(ingredient_text, str):
        return None

    text = ingredient_text.strip()
    if not text:
        return None

    for pattern in PATTERNS:
        match = pattern.match(text)
        if not match:
            continue

        groups = match.groups()
        if len(groups) == 3:
            amount, unit, name = groups
            unit = unit.lower()
            return Ingredient(
                name=name.strip(),
                amount=f"{amount} {unit}".strip(),
                unit=unit,
                quantity=parse_quantity(amount),
            )

        amount, name = groups
        return Ingredient(
            name=name.strip(),
            amount=amount.strip(),
            unit="",
            quantity=parse_quantity(amount),
        )

    # No pattern matched, treat entire text as the ingredient name
    return Ingredient(name=text, amount="1", unit="", quantity=1.0)


def parse_ingredient_list(ingredient_texts: Any) -> List[Ingredient]:
    """Parse a list of ingredient strings, dropping entries that do not parse."""
    if not isinstance(ingredient_texts, list):
        return []

    parsed = (parse_ingredient_text(text) for text in ingredient_texts)
    return [ingredient for ingredient in parsed if ingredient is not None]


def ingredient_to_text(ingredient: Any) -> str:
    """Convert a structured ingredient back to text ("2 cups flour")."""
    if isinstance(ingredient, str):
        return ingredient

    if isinstance(ingredient, Ingredient):
        name, amount = ingredient.name, ingredient.amount
    elif isinstance(ingredient, dict):
        name, amount = ingredient.get("name"), ingredient.get("amount")
    else:
        return ""

    if not name:
        return ""
    return f"{amount or '1'} {name.strip()}".strip()
