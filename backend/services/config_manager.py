"""
Configuration Manager - Handle compare backend settings persistence
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from models.diff import DiffOptions

# Largest document accepted for comparison (50MB)
DEFAULT_MAX_DOCUMENT_BYTES = 50 * 1024 * 1024


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None

    def __init__(self):
        config_dir = Path(os.environ.get("JSON_COMPARE_CONFIG_DIR") or Path.home() / ".json_compare")
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"[ConfigManager] Warning: Cannot write to {config_dir}: {e}")
            config_dir = Path(tempfile.gettempdir()) / "json_compare"
            config_dir.mkdir(parents=True, exist_ok=True)
            print(f"[ConfigManager] Using temporary config directory: {config_dir}")

        self._config_file = config_dir / "config.json"
        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next get_instance() re-reads the environment"""
        cls._instance = None

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, filling in defaults for missing sections"""
        config = self._default_config()
        if not self._config_file.exists():
            return config

        try:
            with open(self._config_file) as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"[ConfigManager] Error loading config: {e}")
            return config

        if not isinstance(stored, dict):
            print(f"[ConfigManager] Ignoring malformed config in {self._config_file}")
            return config

        for section, values in stored.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section] = {**config[section], **values}
            else:
                config[section] = values
        return config

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "diff": {
                "identityFields": ["id", "name"],
                "detectMoves": True,
                "indent": 2,
            },
            "limits": {"maxDocumentBytes": DEFAULT_MAX_DOCUMENT_BYTES},
            "server": {"host": "127.0.0.1", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._config.copy()

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        self._config.update(config)

        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def get_diff_options(self) -> DiffOptions:
        """Build the options passed into each diff call from the loaded settings"""
        cfg = self._config.get("diff", {})
        return DiffOptions(
            identity_fields=tuple(cfg.get("identityFields", ("id", "name"))),
            detect_moves=cfg.get("detectMoves", True),
            indent=cfg.get("indent", 2),
        )

    def get_max_document_bytes(self) -> int:
        """Size limit applied to each compared document"""
        return self._config.get("limits", {}).get("maxDocumentBytes", DEFAULT_MAX_DOCUMENT_BYTES)
