"""Configuration helpers for embedding-playground.

Settings (runtime backend, model name, score thresholds, display preferences)
live in a single JSON document stored under the user's home directory. The
location can be overridden via the `EMBEDDING_PLAYGROUND_CONFIG_DIR` environment
variable which makes it straightforward to isolate state during tests.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv, find_dotenv

from .runtime import DEFAULT_BACKEND, DEFAULT_HASH_DIMENSIONS, DEFAULT_MODEL_NAME
from .similarity import GOOD_THRESHOLD, OK_THRESHOLD

# Load .env file early when this module is imported
load_dotenv(find_dotenv(usecwd=True))

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "EMBEDDING_PLAYGROUND_CONFIG_DIR"
CONFIG_FILENAME = "config.json"
CONFIG_VERSION = 1

# Environment variables take precedence over the stored file.
ENV_OVERRIDES = {
    "backend": "EMBEDDING_PLAYGROUND_BACKEND",
    "model_name": "EMBEDDING_PLAYGROUND_MODEL",
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "config_version": CONFIG_VERSION,
    "backend": DEFAULT_BACKEND,
    "model_name": DEFAULT_MODEL_NAME,
    "hash_dimensions": DEFAULT_HASH_DIMENSIONS,
    "hash_layout": "nested",
    "good_threshold": GOOD_THRESHOLD,
    "ok_threshold": OK_THRESHOLD,
    "vector_preview": 8,
}


def _resolve_config_dir(explicit: Optional[Path] = None) -> Path:
    """Return the directory that should host the config file."""
    if explicit is not None:
        return explicit
    override = os.environ.get(CONFIG_DIR_ENV)
    return Path(override).expanduser() if override else Path.home() / ".embedding-playground"


class ConfigManager:
    """Simple JSON-backed configuration helper."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = _resolve_config_dir(config_dir)
        self.config_path = self.config_dir / CONFIG_FILENAME
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            self._config = DEFAULT_CONFIG.copy()
            return self._config
        try:
            with self.config_path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable config at %s", self.config_path)
            data = DEFAULT_CONFIG.copy()
        if not isinstance(data, dict):
            logger.warning("Ignoring config at %s: expected a JSON object", self.config_path)
            data = DEFAULT_CONFIG.copy()

        data = self._apply_migrations(data)

        # Null values in the stored file fall back to defaults.
        merged = DEFAULT_CONFIG.copy()
        for key, value in data.items():
            if value is not None:
                merged[key] = value
        self._config = merged
        return self._config

    def save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)

        tmp_file = None
        tmp_path: Optional[Path] = None
        try:
            tmp_file = tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.config_dir, delete=False
            )
            json.dump(self._config, tmp_file, indent=2, sort_keys=True)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            tmp_path = Path(tmp_file.name)
        finally:
            if tmp_file is not None:
                tmp_file.close()

        if tmp_path is None:
            raise RuntimeError("Failed to persist configuration file.")

        os.replace(tmp_path, self.config_path)

    def get(self, key: str, default: Any = None) -> Any:
        env_var = ENV_OVERRIDES.get(key)
        if env_var and os.getenv(env_var):
            return os.getenv(env_var)
        value = self._config.get(key, default)
        if value is None:
            value = DEFAULT_CONFIG.get(key, default)
        return value

    def set(self, key: str, value: Any) -> None:
        self._config[key] = value
        self.save()

    def update(self, updates: Dict[str, Any]) -> None:
        self._config.update(updates)
        self._config["config_version"] = CONFIG_VERSION
        self.save()

    def as_dict(self) -> Dict[str, Any]:
        """Effective settings, with environment overrides applied."""
        return {key: self.get(key) for key in self._config}

    def _apply_migrations(self, data: Dict[str, Any]) -> Dict[str, Any]:
        version = data.get("config_version", CONFIG_VERSION)
        if version != CONFIG_VERSION:
            logger.info("Upgrading config from version %s to %s.", version, CONFIG_VERSION)
        data["config_version"] = CONFIG_VERSION
        return data


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    return ConfigManager(config_dir=config_dir).as_dict()


def update_config(
    updates: Dict[str, Any], config_dir: Optional[Path] = None
) -> Dict[str, Any]:
    manager = ConfigManager(config_dir=config_dir)
    manager.update(updates)
    return manager.as_dict()
