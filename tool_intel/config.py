#!/usr/bin/env python3
"""Configuration Loader Module

Loads watcher tuning and CLI defaults for the tool-output intelligence layer.

Configuration files can be in YAML or JSON format and are searched
in the following order:
1. the current directory
2. ~/.config/tool-intel/

Example configuration structure:
{
  "watchers": {
    "input_wait_rows": 5,
    "mode_model_rows": 8,
    "prompt_scan_rows": 10,
    "prompt_poll_interval": 0.5,
    "activity_poll_interval": 0.5,
    "range_pump_interval": 0.25,
    "max_events": 200
  },
  "tmux": {
    "session": "main",
    "window": 0
  },
  "logging": {
    "level": "INFO"
  }
}
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


CONFIG_BASENAME = "tool_intel"
CONFIG_EXTENSIONS = [".yaml", ".yml", ".json"]
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class WatcherSettings:
    """Scan windows and timing for the terminal watchers."""

    input_wait_rows: int = 5
    mode_model_rows: int = 8
    prompt_scan_rows: int = 10
    prompt_poll_interval: float = 0.5
    activity_poll_interval: float = 0.5
    range_pump_interval: float = 0.25
    max_events: int = 200


@dataclass
class IntelConfig:
    """Represents a complete configuration."""

    watchers: WatcherSettings = field(default_factory=WatcherSettings)
    tmux_session: str = "main"
    tmux_window: int = 0
    log_level: str = "INFO"
    config_path: Optional[Path] = None


class IntelConfigLoader:
    """Loads and parses configuration files."""

    def __init__(self, search_paths: Optional[List[Path]] = None):
        """Initialize the config loader with search paths.

        Args:
            search_paths: List of directories to search for config files.
                         Defaults to ['.', '~/.config/tool-intel/']
        """
        self.logger = logging.getLogger(__name__)

        if search_paths is None:
            self.search_paths = [Path("."), Path.home() / ".config" / "tool-intel"]
        else:
            self.search_paths = search_paths

    def find_config_file(self) -> Optional[Path]:
        """Find the first configuration file in the search paths.

        Returns:
            Path to the config file if found, None otherwise
        """
        for search_path in self.search_paths:
            for ext in CONFIG_EXTENSIONS:
                config_path = search_path / f"{CONFIG_BASENAME}{ext}"
                if config_path.exists():
                    self.logger.debug(f"Found config file: {config_path}")
                    return config_path
        return None

    def parse_config_data(self, config_data: str, file_path: Path) -> Dict[str, Any]:
        """Parse configuration data based on file extension.

        Args:
            config_data: Configuration string
            file_path: Path to the config file (for extension detection)

        Returns:
            Parsed configuration data

        Raises:
            ValueError: If configuration format is invalid
        """
        ext = file_path.suffix.lower()

        if ext == ".json":
            try:
                data = json.loads(config_data)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON format: {e}")
        elif ext in [".yaml", ".yml"]:
            try:
                data = yaml.safe_load(config_data)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML format: {e}")
        else:
            raise ValueError(f"Unsupported file format: {ext}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping")
        return data

    def load_config(self, config_path: Optional[Path] = None) -> IntelConfig:
        """Load configuration, falling back to defaults when no file exists.

        Args:
            config_path: Explicit config file; searched for when omitted

        Returns:
            IntelConfig object with loaded configuration

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ValueError: If the config file is invalid
        """
        if config_path is None:
            config_path = self.find_config_file()
            if config_path is None:
                self.logger.debug("No config file found, using defaults")
                return IntelConfig()
        elif not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            config_data = self.parse_config_data(config_path.read_text(), config_path)
        except OSError as e:
            raise ValueError(f"Error loading config file {config_path}: {e}")

        config = self.build_config(config_data)
        config.config_path = config_path
        self.logger.info(f"Loaded configuration from {config_path}")
        return config

    def build_config(self, config_data: Dict[str, Any]) -> IntelConfig:
        """Merge parsed data over the defaults.

        Raises:
            ValueError: If a section has the wrong shape or an unknown key
        """
        watcher_data = config_data.get("watchers", {}) or {}
        if not isinstance(watcher_data, dict):
            raise ValueError("'watchers' section must be a mapping")

        known = {f.name for f in fields(WatcherSettings)}
        unknown = sorted(set(watcher_data) - known)
        if unknown:
            raise ValueError(f"Unknown watcher settings: {', '.join(unknown)}")

        tmux_data = config_data.get("tmux", {}) or {}
        logging_data = config_data.get("logging", {}) or {}
        if not isinstance(tmux_data, dict) or not isinstance(logging_data, dict):
            raise ValueError("'tmux' and 'logging' sections must be mappings")

        defaults = IntelConfig()
        return IntelConfig(
            watchers=WatcherSettings(**watcher_data),
            tmux_session=str(tmux_data.get("session", defaults.tmux_session)),
            tmux_window=tmux_data.get("window", defaults.tmux_window),
            log_level=str(logging_data.get("level", defaults.log_level)).upper(),
        )

    def validate_config(self, config: IntelConfig) -> List[str]:
        """Validate a configuration.

        Args:
            config: IntelConfig to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        watchers = config.watchers

        for name in ("input_wait_rows", "mode_model_rows", "prompt_scan_rows", "max_events"):
            value = getattr(watchers, name)
            if not isinstance(value, int) or value < 1:
                errors.append(f"{name} must be a positive integer")

        for name in ("prompt_poll_interval", "activity_poll_interval", "range_pump_interval"):
            value = getattr(watchers, name)
            if not isinstance(value, (int, float)) or value <= 0:
                errors.append(f"{name} must be a positive number of seconds")

        if not config.tmux_session:
            errors.append("tmux session name is required")
        if not isinstance(config.tmux_window, int) or config.tmux_window < 0:
            errors.append("tmux window must be a non-negative integer")

        if config.log_level not in LOG_LEVELS:
            errors.append(
                f"Invalid log level: '{config.log_level}'. "
                f"Must be one of {', '.join(LOG_LEVELS)}"
            )

        return errors
