"""
Configuration loading - config/config.json with environment overrides
"""
import copy
import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.json"

DEFAULT_CONFIG = {
    "firebase": {
        "database_url": "",
        "auth": "",
        "reconnect_delay": 1.0,
        "timeout": 10.0,
    },
    "update_rate": 0.5,
    "chart": {
        "default_range": "1m",
    },
    "alert_settings": {
        "enable_notifications": False,
        "enable_desktop_notifications": True,
        "webhook_url": "",
    },
    "remote_console": {
        "enabled": True,
        "host": "localhost",
        "port": 8765,
        "http_port": 8080,
    },
}

ENV_OVERRIDES = {
    "TOXIROVER_FIREBASE_DATABASE_URL": ("firebase", "database_url"),
    "TOXIROVER_FIREBASE_AUTH": ("firebase", "auth"),
}


class ConfigError(Exception):
    """Raised when the configuration file cannot be used"""


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[str] = None) -> dict:
    """Load config.json on top of the defaults

    A missing file is not an error: the dashboard starts in demo mode.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    config = copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except FileNotFoundError:
        logger.warning("config.json not found at %s, using defaults", config_path)
        loaded = {}
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    _merge(config, loaded)

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[section][key] = value

    return config
