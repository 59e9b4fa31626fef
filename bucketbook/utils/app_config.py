"""Pre-DB bootstrap configuration. Only depends on utils.constants.

Stores preferences that must be known before the DB is opened (db_folder) or
that pick a policy for the whole process (delete_policy, log_level).
Config lives in ~/.bucketbook/config.json.
"""
import json
import os
from pathlib import Path

from bucketbook.utils.constants import DB_FILE, DEFAULT_DELETE_POLICY, DEFAULT_LOG_LEVEL

CONFIG_DIR = Path.home() / ".bucketbook"
CONFIG_FILE = CONFIG_DIR / "config.json"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError):
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict) -> None:
    """Creates ~/.bucketbook/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_db_path() -> str:
    folder = get_db_folder()
    return os.path.join(folder, DB_FILE) if folder else DB_FILE


def get_delete_policy() -> str:
    """'cascade' or 'orphan'; anything else reads as the default."""
    value = load_config().get("delete_policy", DEFAULT_DELETE_POLICY)
    return value if value in ("cascade", "orphan") else DEFAULT_DELETE_POLICY


def set_delete_policy(policy: str) -> None:
    if policy not in ("cascade", "orphan"):
        raise ValueError("Delete policy must be cascade or orphan.")
    config = load_config()
    config["delete_policy"] = policy
    save_config(config)


def get_log_level() -> str:
    level = str(load_config().get("log_level", DEFAULT_LOG_LEVEL)).upper()
    return level if level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL") else DEFAULT_LOG_LEVEL
