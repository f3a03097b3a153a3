"""
Runtime configuration.

Values come from the environment, optionally loaded from a .env file.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings."""

    db_dir: str = "data"
    default_user_id: int = 1
    debug: bool = False
    log_level: str = "INFO"
    secret_key: str = "dev-secret-key-change-in-production"
    port: int = 5000

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Build settings from environment variables (and .env if present)."""
        if load_env_file:
            load_dotenv()

        debug = _env_flag("DEBUG")
        return cls(
            db_dir=os.environ.get("RECIPE_SHOPPER_DB_DIR", "data"),
            default_user_id=int(os.environ.get("RECIPE_SHOPPER_USER_ID", "1")),
            debug=debug,
            log_level="DEBUG" if debug else os.environ.get("LOG_LEVEL", "INFO").upper(),
            secret_key=os.environ.get("FLASK_SECRET_KEY", "dev-secret-key-change-in-production"),
            port=int(os.environ.get("PORT", "5000")),
        )


def configure_logging(settings: Settings):
    """Set up root logging for an entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
