"""
Structured diagnostics for recipe data that could not be used.

Normalization never raises on bad user data. Instead each problem is
recorded as a Diagnostic (returned to the caller) and logged.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Diagnostic kinds
MISSING = "missing"  # No data at all
UNPARSEABLE = "unparseable"  # String that is not valid JSON
NOT_A_LIST = "not_a_list"  # Decoded value is not a list
INVALID_ITEM = "invalid_item"  # One entry dropped


@dataclass
class Diagnostic:
    """One problem found while normalizing a recipe's data."""

    context: str  # Recipe title or other label
    message: str
    kind: str
    index: Optional[int] = None  # Entry position for INVALID_ITEM

    def __str__(self) -> str:
        location = f" at index {self.index}" if self.index is not None else ""
        return f'{self.message}{location} in recipe "{self.context}"'

    def to_dict(self) -> Dict:
        return {
            "context": self.context,
            "message": self.message,
            "kind": self.kind,
            "index": self.index,
        }


def record(
    diagnostics: Optional[List[Diagnostic]],
    context: str,
    message: str,
    kind: str,
    index: Optional[int] = None,
    level: int = logging.WARNING,
) -> Diagnostic:
    """Create a diagnostic, log it and append it to ``diagnostics`` if given."""
    diagnostic = Diagnostic(context=context, message=message, kind=kind, index=index)
    logger.log(level, str(diagnostic))
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic


def count_invalid(diagnostics: List[Diagnostic]) -> int:
    """Number of individual entries that were dropped."""
    return sum(1 for d in diagnostics if d.kind == INVALID_ITEM)
