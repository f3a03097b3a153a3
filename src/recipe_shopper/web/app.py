#!/usr/bin/env python3
"""
Flask JSON API for the shopping list.

Exposes the shopping list operations to a UI client. Authentication is
handled upstream; the current user id arrives in the X-User-Id header.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from .. import errors
from ..config import Settings, configure_logging
from ..data.database import DatabaseInterface, ShoppingStore
from ..main import current_week_dates
from ..services import ShoppingListService

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    errors.CONNECTION: 503,
    errors.INVALID_INPUT: 400,
    errors.INVALID_DATE_RANGE: 400,
    errors.NO_MEALS: 422,
    errors.NO_USABLE_INGREDIENTS: 422,
}


def _service() -> ShoppingListService:
    return current_app.extensions["shopping_list_service"]


def _user_id() -> int:
    """Current user from the X-User-Id header, else the configured default."""
    header = request.headers.get("X-User-Id")
    if header and header.isdigit():
        return int(header)
    return current_app.config["DEFAULT_USER_ID"]


def _respond(result: Dict[str, Any]):
    """Serialize a service result with a status code matching its error kind."""
    if result.get("success"):
        return jsonify(result), 200
    return jsonify(result), ERROR_STATUS.get(result.get("error_kind"), 500)


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(store: Optional[ShoppingStore] = None, settings: Optional[Settings] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        store: Shopping store to use (defaults to SQLite in settings.db_dir)
        settings: Application settings (defaults to the environment)

    Returns:
        Configured Flask app
    """
    settings = settings or Settings.from_env()
    store = store or DatabaseInterface(db_dir=settings.db_dir)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["DEFAULT_USER_ID"] = settings.default_user_id
    app.extensions["shopping_list_service"] = ShoppingListService(store)
    CORS(app)

    @app.route("/health")
    def health_check():
        """Health check endpoint."""
        return jsonify({"status": "healthy", "timestamp": datetime.now().isoformat()}), 200

    @app.route("/api/shopping-list", methods=["GET"])
    def api_get_shopping_list():
        """Get the active shopping list (optionally grouped by category)."""
        if request.args.get("group") == "category":
            return _respond(_service().get_categorized_items(_user_id()))
        return _respond(_service().get_shopping_list(_user_id()))

    @app.route("/api/shopping-list/generate", methods=["POST"])
    def api_generate_shopping_list():
        """Regenerate the active list from the meal plan."""
        data = _json_body()
        default_start, default_end = current_week_dates()
        start_date = data.get("start_date") or default_start
        end_date = data.get("end_date") or default_end

        logger.info(f"Regenerating shopping list for user {_user_id()} ({start_date} to {end_date})")
        result = _service().regenerate_from_meal_plan(_user_id(), start_date, end_date)
        if not result.get("success"):
            logger.warning(f"Shopping list generation failed: {result.get('error')}")
        return _respond(result)

    @app.route("/api/shopping-list/items", methods=["POST"])
    def api_add_item():
        """Add a custom item."""
        data = _json_body()
        return _respond(_service().add_custom_item(
            _user_id(),
            name=data.get("name", ""),
            amount=data.get("amount", ""),
            notes=data.get("notes", ""),
        ))

    @app.route("/api/shopping-list/items", methods=["DELETE"])
    def api_delete_all_items():
        """Delete every item, keeping the list."""
        return _respond(_service().delete_all_items(_user_id()))

    @app.route("/api/shopping-list/items/<item_id>/check", methods=["POST"])
    def api_check_item(item_id):
        """Toggle an item's checked state."""
        return _respond(_service().check_item(_user_id(), item_id))

    @app.route("/api/shopping-list/items/<item_id>/notes", methods=["PUT"])
    def api_update_notes(item_id):
        """Replace an item's notes."""
        return _respond(_service().update_notes(_user_id(), item_id, _json_body().get("notes", "")))

    @app.route("/api/shopping-list/items/<item_id>", methods=["PATCH"])
    def api_update_item(item_id):
        """Update editable fields of an item."""
        return _respond(_service().update_item(_user_id(), item_id, _json_body()))

    @app.route("/api/shopping-list/items/<item_id>", methods=["DELETE"])
    def api_delete_item(item_id):
        """Delete one item."""
        return _respond(_service().delete_item(_user_id(), item_id))

    @app.route("/api/shopping-list/complete", methods=["POST"])
    def api_complete_shopping_list():
        """Mark the active list completed."""
        return _respond(_service().complete_shopping_list(_user_id()))

    @app.route("/api/shopping-list/history", methods=["GET"])
    def api_shopping_list_history():
        """Recent shopping lists."""
        limit = request.args.get("limit", default=10, type=int)
        return _respond(_service().get_shopping_list_history(_user_id(), limit=limit))

    @app.route("/api/shopping-list/share", methods=["GET"])
    def api_share_shopping_list():
        """Plain-text rendering of the list for share targets."""
        title = request.args.get("title", "Shopping List")
        return _respond(_service().format_shopping_list(_user_id(), title=title))

    logger.info(f"Shopping list API initialized (default user {settings.default_user_id})")
    return app


def main():
    settings = Settings.from_env()
    configure_logging(settings)
    app = create_app(settings=settings)
    app.run(host="0.0.0.0", port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
