"""
HTTP surface for UI clients.
"""

from .app import create_app

__all__ = ["create_app"]
