from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from platformdirs import user_config_dir

from .errors import SettingsError

logger = logging.getLogger(__name__)

ENV_SETTINGS_FILE = "HAP_SETTINGS_FILE"
ENV_MAX_LISTENERS = "HAP_MAX_LISTENERS"
ENV_LOG_LEVEL = "HAP_LOG_LEVEL"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


@dataclass
class HapSettings:
    """Process-wide knobs for emitters.

    Values come from, in increasing precedence:
    - the packaged ``hap/config/default_settings.yaml``
    - a user YAML file (explicit path, ``HAP_SETTINGS_FILE``, or the
      platform user config dir)
    - environment variables ``HAP_MAX_LISTENERS`` and ``HAP_LOG_LEVEL``
    """

    # Listener count per event name above which a leak warning is logged; 0 disables.
    max_listeners: int = 10
    log_level: str = "WARNING"

    def validate(self) -> None:
        """Normalize values, resetting anything unusable to its default."""
        try:
            self.max_listeners = int(self.max_listeners)
        except (TypeError, ValueError):
            logger.warning("Invalid max_listeners %r; resetting to 10", self.max_listeners)
            self.max_listeners = 10
        if self.max_listeners < 0:
            logger.warning("Negative max_listeners %s; resetting to 10", self.max_listeners)
            self.max_listeners = 10
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            logger.warning("Unknown log_level %r; resetting to WARNING", self.log_level)
            level = "WARNING"
        self.log_level = level

    @staticmethod
    def default_user_path() -> Path:
        env_path = os.getenv(ENV_SETTINGS_FILE)
        if env_path:
            return Path(env_path)
        return Path(user_config_dir("hap")) / "settings.yaml"

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise SettingsError(f"Could not read settings from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "HapSettings":
        known = {f.name for f in dataclasses.fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown setting '%s'", key)
        settings = cls(**{k: v for k, v in data.items() if k in known})
        settings.validate()
        return settings

    @staticmethod
    def _env_overrides() -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        if os.getenv(ENV_MAX_LISTENERS):
            overrides["max_listeners"] = os.environ[ENV_MAX_LISTENERS]
        if os.getenv(ENV_LOG_LEVEL):
            overrides["log_level"] = os.environ[ENV_LOG_LEVEL]
        return overrides

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "HapSettings":
        """Load packaged defaults, overlay the user file and the environment."""
        try:
            with resources.files("hap.config").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(cls())

        explicit = user_path is not None
        path = Path(user_path) if explicit else cls.default_user_path()
        user_data: dict = {}
        if path.exists():
            user_data = cls._load_yaml(path)
            logger.info("Loaded user settings from %s", path)
        elif explicit:
            logger.warning("User settings file not found: %s", path)

        merged = cls._deep_merge(default_data, user_data)
        merged = cls._deep_merge(merged, cls._env_overrides())
        settings = cls._from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved settings to %s", path)


_SETTINGS: Optional[HapSettings] = None


def get_settings() -> HapSettings:
    """Return the process settings, loading them on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = HapSettings.load()
    return _SETTINGS


def reload_settings(user_path: Optional[Path] = None) -> HapSettings:
    global _SETTINGS
    _SETTINGS = HapSettings.load(user_path=user_path)
    return _SETTINGS
