"""Persistent JSON config helpers.

Stores the state-file location and the default user key.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

logger = logging.getLogger(__name__)

APP_NAME = "statustree"
CONFIG_FILENAME = "config.json"
STATE_FILENAME = "state.json"
DEFAULT_USER_KEY = "default"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STATE_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_state_path() -> Path:
    """Return the configured state-file path, or the platform default."""
    value = load_config().get("state_path")
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_STATE_PATH
    return Path(value.strip()).expanduser()


def save_state_path(path: Path) -> None:
    config = load_config()
    config["state_path"] = str(path)
    save_config(config)


def load_default_user() -> str:
    """Return persisted default user key, falling back to ``"default"``."""
    value = load_config().get("default_user")
    if not isinstance(value, str):
        return DEFAULT_USER_KEY
    stripped = value.strip()
    return stripped if stripped else DEFAULT_USER_KEY


def save_default_user(user_key: str) -> None:
    """Persist the default user key; blank keys are ignored."""
    stripped = str(user_key).strip()
    if not stripped:
        return
    config = load_config()
    config["default_user"] = stripped
    save_config(config)
