"""Static configuration for sigscope.

All user-editable settings (retention, database location, logging) live in a
single JSON file for quick edits without touching Python. A few values can be
overridden from the environment (or a .env file) for one-off runs.
"""

import json
import os

from dotenv import load_dotenv

from core.config import ScanConfig

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# config.json sits at the project root unless SIGSCOPE_CONFIG points elsewhere.
CONFIG_PATH = os.getenv("SIGSCOPE_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema.

    A missing file means defaults; a broken one is a startup error.
    """

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        try:
            loaded = json.load(handle)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Invalid config file {CONFIG_PATH}: {exc.msg}") from exc
    if not isinstance(loaded, dict):
        raise RuntimeError(f"Invalid config file {CONFIG_PATH}: root must be an object")
    return loaded


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database.
_database = _CONFIG.get("database", {})
DB_PATH = os.getenv("SIGSCOPE_DB_PATH") or _database.get(
    "path", os.path.join(os.path.dirname(__file__), "sigscope.db")
)
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(PROJECT_ROOT, DB_PATH)

# Known signatures older than this are forgotten on the next load.
EXPIRATION_DAYS = float(os.getenv("SIGSCOPE_EXPIRATION_DAYS") or _CONFIG.get("expiration_days", 3))
SCAN_CONFIG = ScanConfig(expiration_days=EXPIRATION_DAYS)

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
