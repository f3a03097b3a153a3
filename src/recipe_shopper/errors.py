"""
Error kinds returned in ``{"success": False, ...}`` results.

Malformed recipe data is never an error on its own; these kinds cover the
cases a user has to act on.
"""

from datetime import datetime
from typing import Any, Dict, Optional

CONNECTION = "connection"  # Store unreachable
NO_MEALS = "no_meals"  # Nothing planned in the date range
NO_USABLE_INGREDIENTS = "no_usable_ingredients"  # Meals exist, no ingredients survived
INVALID_DATE_RANGE = "invalid_date_range"
INVALID_INPUT = "invalid_input"
STORE_ERROR = "store_error"  # Any other store failure

CONNECTION_MESSAGE = (
    "Cannot connect to database. The data store may be offline or unreachable. "
    "Please check your connection and try again."
)
NO_MEALS_MESSAGE = (
    "No items in your shopping list. "
    "Add some meals to your weekly plan to generate a shopping list."
)

DATE_FORMAT = "%Y-%m-%d"


def error_result(kind: str, message: str, **extra: Any) -> Dict[str, Any]:
    """Build a failure result in the shape every component returns."""
    result = {"success": False, "error": message, "error_kind": kind}
    result.update(extra)
    return result


def validate_date_range(start_date: str, end_date: str) -> Optional[str]:
    """
    Check a YYYY-MM-DD date range.

    Returns:
        Error message, or None when the range is valid
    """
    try:
        start = datetime.strptime(start_date, DATE_FORMAT)
        end = datetime.strptime(end_date, DATE_FORMAT)
    except (TypeError, ValueError):
        return f"Dates must use the YYYY-MM-DD format (got {start_date!r} and {end_date!r})"

    if start > end:
        return f"Start date {start_date} is after end date {end_date}"
    return None
