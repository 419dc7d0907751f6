"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB (db_folder,
log_level). Config lives in ~/.mybudget/config.json to avoid a bootstrapping
problem.
"""
import json
import os
from pathlib import Path

from utils.constants import DEFAULT_LOG_LEVEL

CONFIG_DIR = Path.home() / ".mybudget"
CONFIG_FILE = CONFIG_DIR / "config.json"


def load_config(path: Path = CONFIG_FILE) -> dict:
    """Returns {} on missing or corrupt file — never raises."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError):
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict, path: Path = CONFIG_FILE) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder(path: Path = CONFIG_FILE) -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config(path).get("db_folder")


def set_db_folder(folder: str | None, path: Path = CONFIG_FILE) -> None:
    """Update db_folder in config and save."""
    config = load_config(path)
    if folder is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = folder
    save_config(config, path)


def get_log_level(path: Path = CONFIG_FILE) -> str:
    level = load_config(path).get("log_level", DEFAULT_LOG_LEVEL)
    return str(level).upper()
