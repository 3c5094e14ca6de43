"""Configuration loading and validation for latencystats."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any

from .constants import (
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_MAX_BYTES,
    DEFAULT_TIMEOUT_MS,
    MIN_SAMPLE_MS,
)


class Config:
    """Configuration container with environment variable overrides."""

    def __init__(self, config_path: str = None, create_if_missing: bool = True):
        """
        Load configuration from YAML file with environment variable overrides.

        Configuration precedence (highest to lowest):
        1. Environment variables (LS_* prefix)
        2. config.local.yaml (if exists, local overrides)
        3. config.yaml (main config file)
        4. Default values

        Args:
            config_path: Path to config.yaml. If None, searches for config.yaml
                        in current directory and parent directories.
            create_if_missing: If True and config_path is None, create default config
                              if not found. If config_path is explicitly provided,
                              this is ignored (file must exist).
        """
        if config_path is None:
            config_path = self._find_config_file()
            config_file_path = Path(config_path)
            # Only create default if auto-discovered and missing
            if create_if_missing and not config_file_path.exists():
                self._create_default_config(config_path)
        else:
            config_file_path = Path(config_path)
            if not config_file_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")

        if Path(config_path).exists():
            with open(config_path, 'r') as f:
                self._raw = yaml.safe_load(f) or {}
        else:
            self._raw = {}

        # Local overrides sit next to the main file
        local_config_path = Path(config_path).parent / "config.local.yaml"
        if local_config_path.exists():
            with open(local_config_path, 'r') as f:
                local_config = yaml.safe_load(f) or {}
                self._deep_merge(self._raw, local_config)

        self._apply_env_overrides()
        self._validate()

    def _find_config_file(self) -> str:
        """Find config.yaml in current directory or parents."""
        current = Path.cwd()
        for path in [current] + list(current.parents):
            config_file = path / "config.yaml"
            if config_file.exists():
                return str(config_file)
        return str(current / "config.yaml")

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge override dict into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _create_default_config(self, path: str):
        """Create a default config.yaml file."""
        default_config = {
            "stats": {
                "timeout_ms": DEFAULT_TIMEOUT_MS,
            },
            "logging": {
                "level": "INFO",
                "console_level": "INFO",
                "to_file": False,
                "log_dir": DEFAULT_LOG_DIR,
                "rotation": {
                    "max_bytes": DEFAULT_LOG_MAX_BYTES,
                    "backup_count": DEFAULT_LOG_BACKUP_COUNT,
                    "when": "midnight"
                }
            },
        }
        with open(path, 'w') as f:
            yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)

    def _apply_env_overrides(self):
        """Apply environment variable overrides using LS_ prefix."""
        if os.getenv("LS_TIMEOUT_MS"):
            self._raw.setdefault("stats", {})["timeout_ms"] = int(os.getenv("LS_TIMEOUT_MS"))

        if os.getenv("LS_LOG_DIR"):
            self._raw.setdefault("logging", {})["log_dir"] = os.getenv("LS_LOG_DIR")
        if os.getenv("LS_LOG_LEVEL"):
            self._raw.setdefault("logging", {})["level"] = os.getenv("LS_LOG_LEVEL")
        if os.getenv("LS_CONSOLE_LEVEL"):
            self._raw.setdefault("logging", {})["console_level"] = os.getenv("LS_CONSOLE_LEVEL")

    def _validate(self):
        """Validate and normalize configuration values."""
        if self.timeout_ms <= MIN_SAMPLE_MS:
            raise ValueError(f"stats.timeout_ms must be greater than {MIN_SAMPLE_MS}, got {self.timeout_ms}")

    @property
    def timeout_ms(self) -> int:
        return int(self._raw.get("stats", {}).get("timeout_ms", DEFAULT_TIMEOUT_MS))

    @property
    def log_level(self) -> str:
        return self._raw.get("logging", {}).get("level", "INFO")

    @property
    def console_level(self) -> str:
        return self._raw.get("logging", {}).get("console_level", "INFO")

    @property
    def log_to_file(self) -> bool:
        return bool(self._raw.get("logging", {}).get("to_file", False))

    @property
    def log_dir(self) -> str:
        return self._raw.get("logging", {}).get("log_dir", DEFAULT_LOG_DIR)

    @property
    def log_rotation(self) -> Dict[str, Any]:
        """Get log rotation configuration with defaults."""
        rotation = self._raw.get("logging", {}).get("rotation", {})
        return {
            "max_bytes": rotation.get("max_bytes", DEFAULT_LOG_MAX_BYTES),
            "backup_count": rotation.get("backup_count", DEFAULT_LOG_BACKUP_COUNT),
            "when": rotation.get("when", "midnight")
        }
