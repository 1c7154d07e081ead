# moodlog/config/config_manager.py
'''
config_manager.py - Configuration management for moodlog
'''
from dataclasses import dataclass, fields, replace
from importlib.resources import files
import logging
import os
from pathlib import Path
from typing import Any, Dict
import toml

logger = logging.getLogger(__name__)

if "BASE_DIR" not in globals():
    _xdg = os.getenv("XDG_CONFIG_HOME")
    BASE_DIR = Path(_xdg) / "moodlog" if _xdg else Path.home() / ".moodlog"

if "USER_CONFIG" not in globals():
    USER_CONFIG = BASE_DIR / "config.toml"

if "DEFAULT_CONFIG" not in globals():
    # the shipped defaults, read from package resources
    DEFAULT_CONFIG = files("moodlog.config") \
        .joinpath("config.toml") \
        .read_text(encoding="utf-8")


@dataclass(frozen=True)
class EngineSettings:
    """
    Knobs for the correlation engine. Defaults mirror the [engine] section of the
    shipped config.toml.
    """
    window_days: int = 30
    heatmap_weeks: int = 8
    first_weekday: int = 1
    insight_threshold: float = 0.15
    top_habit_insights: int = 3
    weekly_spread: float = 0.3
    frequency_weight: float = 0.8
    min_frequency_days: int = 3
    min_health_samples: int = 3
    exclude_zero_steps: bool = True
    wisdom_log_limit: int = 15


def load_config() -> dict:
    """
    Load the user configuration from USER_CONFIG file.
    - If the config directory or file does not exist, create them with defaults.
    - Returns a dict parsed from TOML; on error, logs and returns empty dict.
    """
    try:
        # Ensure config directory exists
        BASE_DIR.mkdir(parents=True, exist_ok=True)
        # If no user config file, write default contents
        if not USER_CONFIG.exists():
            try:
                USER_CONFIG.write_text(DEFAULT_CONFIG, encoding="utf-8")
            except Exception as e:
                logger.error(
                    f"Failed to write default config to {USER_CONFIG}: {e}", exc_info=True)
        try:
            text = USER_CONFIG.read_text(encoding="utf-8")
        except Exception as e:
            logger.error(
                f"Failed to read config file {USER_CONFIG}: {e}", exc_info=True)
            return {}
        try:
            return toml.loads(text)
        except Exception as e:
            logger.error(
                f"Failed to parse TOML from {USER_CONFIG}: {e}", exc_info=True)
            return {}
    except Exception as e:
        logger.error(f"Unexpected error in load_config: {e}", exc_info=True)
        return {}


def save_config(doc: dict):
    """
    Save the given config dict to USER_CONFIG in TOML format.
    - On error, logs and returns False; otherwise returns True.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        logger.error(
            f"Failed to ensure config directory {BASE_DIR}: {e}", exc_info=True)
    try:
        toml_str = toml.dumps(doc)
    except Exception as e:
        logger.error(f"Failed to serialize config to TOML: {e}", exc_info=True)
        return False
    try:
        USER_CONFIG.write_text(toml_str, encoding="utf-8")
        return True
    except Exception as e:
        logger.error(
            f"Failed to write config to {USER_CONFIG}: {e}", exc_info=True)
        return False


def get_config_value(section: str, key: str, default=None) -> Any:
    """
    Return value for [section][key] in config, or default if missing.
    """
    try:
        config = load_config()
        return config.get(section, {}).get(key, default)
    except Exception as e:
        logger.error(
            f"Error getting config value for [{section}][{key}]: {e}", exc_info=True)
        return default


def set_config_value(section: str, key: str, value: Any) -> bool:
    """
    Set config[section][key] = value and persist.
    Returns True if saved successfully, False otherwise.
    """
    config = load_config()
    try:
        sec = config.get(section, {}) or {}
        sec[key] = value
        config[section] = sec
        success = save_config(config)
        if not success:
            logger.error(
                f"Failed to save config after setting [{section}][{key}]")
        return success
    except Exception as e:
        logger.error(
            f"Error setting config value for [{section}][{key}]: {e}", exc_info=True)
        return False


def delete_config_value(section: str, key: str) -> bool:
    """
    Delete key from config[section] if present, persist changes.
    Returns True if deleted (or key missing and treated as no-op), False on write error.
    """
    config = load_config()
    sec = config.get(section, {}) or {}
    if key not in sec:
        logger.warning(
            f"delete_config_value: '{key}' not found in section [{section}]. No action taken.")
        return True
    del sec[key]
    config[section] = sec
    success = save_config(config)
    if not success:
        logger.error(
            f"Failed to save config after deleting [{section}][{key}]")
    return success


def get_config_section(section: str) -> Dict[str, Any]:
    """
    Return config[section] as a dict, or empty dict if missing or malformed.
    """
    section_data = load_config().get(section, {})
    if not isinstance(section_data, dict):
        logger.warning(
            f"Config section [{section}] is not a table; ignoring it.")
        return {}
    return section_data


def get_engine_settings() -> EngineSettings:
    """
    Build EngineSettings from the [engine] section.
    Unknown keys are ignored; values that fail to convert keep their default.
    """
    section = get_config_section("engine")
    defaults = EngineSettings()
    overrides = {}
    for f in fields(EngineSettings):
        if f.name not in section:
            continue
        raw = section[f.name]
        default = getattr(defaults, f.name)
        try:
            if isinstance(default, bool):
                if not isinstance(raw, bool):
                    raise TypeError(f"expected true/false, got {raw!r}")
                overrides[f.name] = raw
            else:
                overrides[f.name] = type(default)(raw)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Invalid [engine] {f.name} = {raw!r} ({e}); using {default}")

    first_weekday = overrides.get("first_weekday", defaults.first_weekday)
    if not 1 <= first_weekday <= 7:
        logger.warning(
            f"[engine] first_weekday must be 1-7, got {first_weekday}; using 1")
        overrides["first_weekday"] = 1

    return replace(defaults, **overrides)
