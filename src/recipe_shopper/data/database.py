"""
Storage interface for the recipe shopping pipeline.

``ShoppingStore`` is the contract the shopping components depend on. The
application owns the store and passes it in; nothing in this package keeps a
module-level connection.

``DatabaseInterface`` implements the contract on a single SQLite database
(user_data.db) holding recipes, planned meals and shopping lists.
"""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, List, Optional

from .models import PlannedMeal, Recipe, ShoppingList, ShoppingListItem, new_id

logger = logging.getLogger(__name__)


class StoreConnectionError(Exception):
    """Raised when the backing store cannot be reached."""


class ShoppingStore(ABC):
    """External store consumed by the shopping components."""

    @abstractmethod
    def get_planned_meals(self, user_id: int, start_date: str, end_date: str) -> List[PlannedMeal]:
        """Planned meals for a user with planned_date in [start_date, end_date]."""

    @abstractmethod
    def get_active_shopping_list(self, user_id: int) -> ShoppingList:
        """The user's not-completed list, created if absent."""

    @abstractmethod
    def replace_shopping_list_items(self, user_id: int, items: List[ShoppingListItem]) -> ShoppingList:
        """Overwrite the items of the active list."""

    @abstractmethod
    def mark_shopping_list_completed(self, user_id: int) -> Optional[ShoppingList]:
        """Soft-close the active list. Returns None if there was none."""

    @abstractmethod
    def get_shopping_list_history(self, user_id: int, limit: int = 10) -> List[ShoppingList]:
        """Most recent lists first, completed or not."""


def _encode_raw(value: Any) -> Optional[str]:
    """Encode raw recipe content for storage, keeping strings verbatim."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        value = [entry.to_dict() if hasattr(entry, "to_dict") else entry for entry in value]
    return json.dumps(value)


def _decode_raw(text: Optional[str]) -> Any:
    """Decode stored recipe content. Undecodable text comes back as-is."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class DatabaseInterface(ShoppingStore):
    """SQLite-backed store for recipes, meal plans and shopping lists."""

    def __init__(self, db_dir: str = "data"):
        """
        Initialize database interface.

        Args:
            db_dir: Directory containing database files
        """
        self.db_dir = Path(db_dir)
        try:
            self.db_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreConnectionError(f"Cannot create database directory {self.db_dir}: {e}") from e

        self.user_db = self.db_dir / "user_data.db"

        self._init_user_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, committing on success.

        Operational failures (missing file, locked database) are reported as
        StoreConnectionError so callers can tell them apart from bad data.
        """
        try:
            conn = sqlite3.connect(self.user_db)
        except sqlite3.OperationalError as e:
            raise StoreConnectionError(f"Cannot open database {self.user_db}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except sqlite3.OperationalError as e:
            raise StoreConnectionError(str(e)) from e
        finally:
            conn.close()

    def _init_user_database(self):
        """Initialize user data database schema."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    title TEXT NOT NULL,
                    ingredients_json TEXT,
                    instructions_json TEXT,
                    servings INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS planned_meals (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    recipe_id TEXT,
                    planned_date TEXT NOT NULL,
                    meal_type TEXT DEFAULT 'dinner',
                    servings INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_planned_meals_user_date
                ON planned_meals(user_id, planned_date)
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS shopping_lists (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL,
                    name TEXT NOT NULL DEFAULT 'Shopping List',
                    items_json TEXT NOT NULL,
                    is_completed BOOLEAN DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_shopping_lists_user
                ON shopping_lists(user_id, is_completed)
            """)

        logger.debug(f"Database initialized at {self.user_db}")

    # ==================== Recipe Operations ====================

    def save_recipe(self, recipe: Recipe, user_id: int = 1) -> str:
        """
        Save a recipe, replacing any recipe with the same id.

        Ingredient and instruction data are stored as given, so malformed
        legacy content survives the round trip.

        Returns:
            ID of saved recipe
        """
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO recipes
                (id, user_id, title, ingredients_json, instructions_json, servings, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    recipe.id,
                    user_id,
                    recipe.title,
                    _encode_raw(recipe.ingredients),
                    _encode_raw(recipe.instructions),
                    recipe.servings,
                    datetime.now().isoformat(),
                ),
            )

        logger.info(f"Saved recipe {recipe.id} ({recipe.title})")
        return recipe.id

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Get a recipe by ID."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,)).fetchone()
            return self._row_to_recipe(row) if row else None

    def _row_to_recipe(self, row: sqlite3.Row) -> Recipe:
        return Recipe(
            id=row["id"],
            title=row["title"],
            ingredients=_decode_raw(row["ingredients_json"]),
            instructions=_decode_raw(row["instructions_json"]),
            servings=row["servings"] or 1,
        )

    # ==================== Meal Plan Operations ====================

    def add_planned_meal(
        self,
        recipe_id: str,
        planned_date: str,
        servings: int = 1,
        meal_type: str = "dinner",
        user_id: int = 1,
    ) -> str:
        """
        Plan a recipe for a date.

        Returns:
            ID of the planned meal
        """
        meal_id = new_id()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO planned_meals
                (id, user_id, recipe_id, planned_date, meal_type, servings, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    meal_id,
                    user_id,
                    recipe_id,
                    planned_date,
                    meal_type,
                    max(servings, 1),
                    datetime.now().isoformat(),
                ),
            )

        logger.info(f"Planned recipe {recipe_id} on {planned_date} for user {user_id}")
        return meal_id

    def get_planned_meals(self, user_id: int, start_date: str, end_date: str) -> List[PlannedMeal]:
        """
        Get planned meals in a date range (inclusive on both ends).

        Meals whose recipe no longer exists are returned with recipe=None.
        """
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT pm.id AS meal_id, pm.planned_date, pm.meal_type,
                       pm.servings AS meal_servings, r.*
                FROM planned_meals pm
                LEFT JOIN recipes r ON r.id = pm.recipe_id
                WHERE pm.user_id = ? AND pm.planned_date BETWEEN ? AND ?
                ORDER BY pm.planned_date, pm.created_at
                """,
                (user_id, start_date, end_date),
            ).fetchall()

        meals = []
        for row in rows:
            recipe = self._row_to_recipe(row) if row["id"] is not None else None
            meals.append(PlannedMeal(
                id=row["meal_id"],
                planned_date=row["planned_date"],
                meal_type=row["meal_type"] or "dinner",
                recipe=recipe,
                servings=row["meal_servings"] or 1,
            ))

        logger.debug(f"Found {len(meals)} planned meals for user {user_id} ({start_date} to {end_date})")
        return meals

    # ==================== Shopping List Operations ====================

    def _row_to_shopping_list(self, row: sqlite3.Row) -> ShoppingList:
        return ShoppingList(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            items=[ShoppingListItem.from_dict(i) for i in json.loads(row["items_json"])],
            is_completed=bool(row["is_completed"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _find_active_row(self, conn: sqlite3.Connection, user_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(
            """
            SELECT * FROM shopping_lists
            WHERE user_id = ? AND is_completed = 0
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """,
            (user_id,),
        ).fetchone()

    def create_shopping_list(self, user_id: int, name: str = "Shopping List") -> ShoppingList:
        """Create a new, empty, not-completed shopping list."""
        shopping_list = ShoppingList(user_id=user_id, name=name, id=f"sl_{new_id()}")
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO shopping_lists
                (id, user_id, name, items_json, is_completed, created_at, updated_at)
                VALUES (?, ?, ?, ?, 0, ?, ?)
                """,
                (
                    shopping_list.id,
                    user_id,
                    name,
                    "[]",
                    shopping_list.created_at.isoformat(),
                    shopping_list.updated_at.isoformat(),
                ),
            )

        logger.info(f"Created shopping list {shopping_list.id} for user {user_id}")
        return shopping_list

    def get_active_shopping_list(self, user_id: int) -> ShoppingList:
        """Get the user's active shopping list, creating one if none exists."""
        with self._connect() as conn:
            row = self._find_active_row(conn, user_id)
            if row:
                return self._row_to_shopping_list(row)

        logger.info(f"No active shopping list for user {user_id}, creating one")
        return self.create_shopping_list(user_id)

    def replace_shopping_list_items(self, user_id: int, items: List[ShoppingListItem]) -> ShoppingList:
        """Overwrite the active list's items. The list record itself is kept."""
        shopping_list = self.get_active_shopping_list(user_id)
        shopping_list.items = list(items)
        shopping_list.updated_at = datetime.now()

        with self._connect() as conn:
            conn.execute(
                "UPDATE shopping_lists SET items_json = ?, updated_at = ? WHERE id = ?",
                (
                    json.dumps([item.to_dict() for item in shopping_list.items]),
                    shopping_list.updated_at.isoformat(),
                    shopping_list.id,
                ),
            )

        logger.debug(f"Saved {len(items)} items to shopping list {shopping_list.id}")
        return shopping_list

    def mark_shopping_list_completed(self, user_id: int) -> Optional[ShoppingList]:
        """Mark the active list completed. The next access starts a new list."""
        with self._connect() as conn:
            row = self._find_active_row(conn, user_id)
            if not row:
                return None

            shopping_list = self._row_to_shopping_list(row)
            shopping_list.is_completed = True
            shopping_list.updated_at = datetime.now()
            conn.execute(
                "UPDATE shopping_lists SET is_completed = 1, updated_at = ? WHERE id = ?",
                (shopping_list.updated_at.isoformat(), shopping_list.id),
            )

        logger.info(f"Completed shopping list {shopping_list.id} for user {user_id}")
        return shopping_list

    def get_shopping_list_history(self, user_id: int, limit: int = 10) -> List[ShoppingList]:
        """Get recent shopping lists for a user, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM shopping_lists
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()

        return [self._row_to_shopping_list(row) for row in rows]
