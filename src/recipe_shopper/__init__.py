"""
Recipe shopping list generation.

Turns planned meals into a deduplicated, categorized shopping list and
provides the operations for editing it.
"""

__version__ = "0.1.0"
