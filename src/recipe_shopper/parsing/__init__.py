"""
Parsing and normalization of free-form recipe content.
"""

from .diagnostics import Diagnostic
from .ingredient_parser import (
    ingredient_to_text,
    parse_ingredient_list,
    parse_ingredient_text,
)
from .instruction_parser import (
    instruction_to_text,
    normalize_instructions,
    parse_instruction_list,
    parse_instruction_text,
)
from .normalizer import normalize_ingredients, validate_ingredient

__all__ = [
    "Diagnostic",
    "ingredient_to_text",
    "parse_ingredient_list",
    "parse_ingredient_text",
    "instruction_to_text",
    "normalize_instructions",
    "parse_instruction_list",
    "parse_instruction_text",
    "normalize_ingredients",
    "validate_ingredient",
]
