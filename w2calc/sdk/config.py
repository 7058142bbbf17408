"""Configuration management for W2 Calc.

Settings live in settings.json inside the config directory:
   - tax_rules_dir: extra directory of YYYY.yaml bracket files, searched
     before the packaged tax_rules/
   - tax_year: default year for bracket lookups
   - filing_status: default filing status for bracket lookups

Config directory resolution:
1. W2_CALC_CONFIG_PATH environment variable (if set)
2. XDG_CONFIG_HOME/w2-calc/ (default ~/.config/w2-calc/)
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "w2-calc"
SETTINGS_FILENAME = "settings.json"

DEFAULT_TAX_YEAR = "2025"
DEFAULT_FILING_STATUS = "single"

KNOWN_SETTINGS = ("tax_rules_dir", "tax_year", "filing_status")


def get_config_dir() -> Path:
    """Directory holding settings.json: $W2_CALC_CONFIG_PATH, else $XDG_CONFIG_HOME/w2-calc."""
    override = os.environ.get("W2_CALC_CONFIG_PATH")
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Read settings.json; a missing file means no settings."""
    path = get_settings_path()
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Write the whole settings dict, creating the config directory if needed."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings, f, indent=2)
    return path


def get_setting(key: str, default: Any = None) -> Any:
    """Look up one of KNOWN_SETTINGS (tax_year, filing_status, tax_rules_dir)."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting. Returns True if the key was present."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True
