#!/usr/bin/env python3
"""Unit tests for the configuration loader module."""

import json
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from tool_intel.config import IntelConfig, IntelConfigLoader, WatcherSettings


class TestIntelConfigLoader:
    """Test cases for IntelConfigLoader."""

    def test_default_search_paths(self):
        """Test that default search paths are set correctly."""
        loader = IntelConfigLoader()
        assert len(loader.search_paths) == 2
        assert loader.search_paths[0] == Path(".")
        assert loader.search_paths[1] == Path.home() / ".config" / "tool-intel"

    def test_find_config_file_not_found(self):
        loader = IntelConfigLoader(search_paths=[Path("/nonexistent")])
        assert loader.find_config_file() is None

    def test_find_config_file_prefers_yaml(self, tmp_path):
        (tmp_path / "tool_intel.json").write_text("{}")
        (tmp_path / "tool_intel.yaml").write_text("")

        loader = IntelConfigLoader(search_paths=[tmp_path])

        assert loader.find_config_file() == tmp_path / "tool_intel.yaml"

    def test_no_config_gives_defaults(self, tmp_path):
        loader = IntelConfigLoader(search_paths=[tmp_path])

        config = loader.load_config()

        assert config == IntelConfig()
        assert config.watchers.max_events == 200
        assert loader.validate_config(config) == []

    def test_load_yaml(self, tmp_path):
        config_file = tmp_path / "tool_intel.yaml"
        config_file.write_text(
            "watchers:\n"
            "  input_wait_rows: 6\n"
            "  prompt_poll_interval: 0.25\n"
            "tmux:\n"
            "  session: agents\n"
            "logging:\n"
            "  level: debug\n"
        )

        config = IntelConfigLoader(search_paths=[tmp_path]).load_config()

        assert config.watchers.input_wait_rows == 6
        assert config.watchers.prompt_poll_interval == 0.25
        assert config.watchers.mode_model_rows == 8
        assert config.tmux_session == "agents"
        assert config.log_level == "DEBUG"
        assert config.config_path == config_file

    def test_load_json_explicit_path(self, tmp_path):
        config_file = tmp_path / "custom.json"
        config_file.write_text(json.dumps({"watchers": {"max_events": 50}, "tmux": {"window": 2}}))

        config = IntelConfigLoader(search_paths=[]).load_config(config_file)

        assert config.watchers.max_events == 50
        assert config.tmux_window == 2

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            IntelConfigLoader().load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "tool_intel.yaml"
        config_file.write_text("watchers: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            IntelConfigLoader().load_config(config_file)

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "tool_intel.json"
        config_file.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            IntelConfigLoader().load_config(config_file)

    def test_unsupported_extension(self, tmp_path):
        config_file = tmp_path / "tool_intel.toml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="Unsupported file format"):
            IntelConfigLoader().load_config(config_file)

    def test_unknown_watcher_setting(self, tmp_path):
        config_file = tmp_path / "tool_intel.yaml"
        config_file.write_text("watchers:\n  bogus: 1\n")

        with pytest.raises(ValueError, match="bogus"):
            IntelConfigLoader().load_config(config_file)

    def test_non_mapping_document(self, tmp_path):
        config_file = tmp_path / "tool_intel.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            IntelConfigLoader().load_config(config_file)

    def test_validate_config_reports_errors(self):
        config = IntelConfig(
            watchers=WatcherSettings(input_wait_rows=0, range_pump_interval=-1),
            tmux_session="",
            log_level="LOUD",
        )

        errors = IntelConfigLoader().validate_config(config)

        assert len(errors) == 4
        assert any("input_wait_rows" in e for e in errors)
        assert any("range_pump_interval" in e for e in errors)
        assert any("session" in e for e in errors)
        assert any("LOUD" in e for e in errors)
