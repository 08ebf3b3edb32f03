"""
Config Manager: User configuration with JSON I/O

Holds the launcher config dict and provides:
- JSON load/save to disk, creating a default file on first run
- Validation of field types and ranges
- KDE icon theme detection for the default config
- Conversion to the immutable ScanSettings used by the scanner
"""

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from xdg.BaseDirectory import xdg_config_home, xdg_data_dirs

from slayfi.models import ScanSettings

logger = logging.getLogger(__name__)

# Default config paths
DEFAULT_CONFIG_DIR = Path(xdg_config_home) / "slayfi"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.json"

# Config defaults
DEFAULT_APPS_PER_PAGE = 5
DEFAULT_TERMINAL_APP = "kitty"
DEFAULT_DESKTOP_ENVIRONMENT = "Hyprland"

APPS_PER_PAGE_MIN = 1
APPS_PER_PAGE_MAX = 0xFFFF

STRING_KEYS = ("terminal_app", "desktop_environment", "kde_icon_theme")


class ConfigError(Exception):
    """Raised when the config file cannot be read or is invalid."""


def default_lookup_dirs() -> List[str]:
    """applications/ under each XDG data dir, user dir first, duplicates removed."""
    dirs = []
    for data_dir in xdg_data_dirs:
        path = os.path.join(data_dir, "applications")
        if path not in dirs:
            dirs.append(path)
    return dirs


def get_default_config() -> Dict[str, Any]:
    return {
        "apps_per_page": DEFAULT_APPS_PER_PAGE,
        "terminal_app": DEFAULT_TERMINAL_APP,
        "desktop_environment": DEFAULT_DESKTOP_ENVIRONMENT,
        "kde_icon_theme": "",
        "lookup_dirs": default_lookup_dirs(),
    }


def get_kde_icon_theme() -> Optional[str]:
    """Ask kreadconfig5 for the KDE icon theme. Returns None when unavailable."""
    try:
        result = subprocess.run(
            ["kreadconfig5", "--file", "kdeglobals", "--group", "Icons", "--key", "Theme"],
            capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Failed to execute kreadconfig5: %s", exc)
        return None

    if result.returncode != 0:
        logger.debug("kreadconfig5 failed: %s", result.stderr.strip())
        return None

    theme = result.stdout.strip()
    if not theme:
        logger.debug("kreadconfig5 returned empty theme")
        return None
    return theme


class ConfigManager:
    """Manages the in-memory launcher config with JSON I/O and validation"""

    def __init__(self):
        self.config = {}
        self.new_config()

    def new_config(self) -> None:
        """Reset to the default config"""
        self.config = get_default_config()

    def load_json_file(self, path) -> None:
        """Load config from JSON file. Missing keys keep their defaults.

        Raises:
            ConfigError: if the file cannot be read, parsed or validated
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read config at {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse config from JSON at {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Config at {path} must be a JSON object")

        config = get_default_config()
        config.update({key: data[key] for key in config if key in data})

        is_valid, error = validate_config(config)
        if not is_valid:
            raise ConfigError(f"Invalid config at {path}: {error}")
        self.config = config

    def save_json_file(self, path) -> bool:
        """Save config to JSON file. Returns True on success."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.config, f, indent=2)
            return True
        except OSError as exc:
            logger.error("Error while writing to config file %s: %s", path, exc)
            return False

    def to_json(self) -> str:
        """Serialize config dict to JSON string"""
        return json.dumps(self.config, indent=2)

    def validate(self) -> Tuple[bool, str]:
        """Validate config structure. Returns (is_valid, error_message)."""
        return validate_config(self.config)

    def to_scan_settings(self) -> ScanSettings:
        """Snapshot the config as the immutable settings of one scan."""
        return ScanSettings(
            lookup_dirs=tuple(self.config["lookup_dirs"]),
            desktop_environment=self.config["desktop_environment"],
            terminal_app=self.config["terminal_app"],
            icon_theme_fallback=self.config["kde_icon_theme"],
        )

    def client_config(self) -> Dict[str, Any]:
        """The part of the config the front end needs."""
        return {"apps_per_page": self.config["apps_per_page"]}


def validate_config(config: Dict[str, Any]) -> Tuple[bool, str]:
    apps_per_page = config.get("apps_per_page")
    if isinstance(apps_per_page, bool) or not isinstance(apps_per_page, int):
        return False, "apps_per_page must be an integer"
    if apps_per_page < APPS_PER_PAGE_MIN or apps_per_page > APPS_PER_PAGE_MAX:
        return False, f"Invalid apps_per_page: {apps_per_page} (must be {APPS_PER_PAGE_MIN}-{APPS_PER_PAGE_MAX})"

    for key in STRING_KEYS:
        if not isinstance(config.get(key), str):
            return False, f"{key} must be a string"

    lookup_dirs = config.get("lookup_dirs")
    if not isinstance(lookup_dirs, list):
        return False, "lookup_dirs must be an array"
    for i, lookup_dir in enumerate(lookup_dirs):
        if not isinstance(lookup_dir, str) or not lookup_dir:
            return False, f"lookup_dirs[{i}]: must be a non-empty string"

    return True, ""


def load_or_create_config(path=DEFAULT_CONFIG_PATH) -> ConfigManager:
    """
    Load the config at ``path``, or create it with defaults on first run.

    A new config picks up the KDE icon theme (if any) as fallback theme.
    Failing to write the new file is logged but not fatal.

    Raises:
        ConfigError: if an existing file cannot be loaded
    """
    path = Path(path)
    manager = ConfigManager()
    logger.info("Attempting to load config from %s", path)

    if path.exists():
        manager.load_json_file(path)
        return manager

    icon_theme = get_kde_icon_theme()
    if icon_theme:
        manager.config["kde_icon_theme"] = icon_theme

    logger.info("Config file does not exist. Creating default at %s", path)
    if manager.save_json_file(path):
        logger.info("Config written to file successfully")
    return manager


def load_settings(path=DEFAULT_CONFIG_PATH) -> Tuple[ConfigManager, ScanSettings]:
    """Load the config and its ScanSettings, using defaults if loading fails."""
    try:
        manager = load_or_create_config(path)
    except ConfigError as exc:
        logger.error("Failed to load config: %s", exc)
        logger.info("Using default config")
        manager = ConfigManager()
    return manager, manager.to_scan_settings()
