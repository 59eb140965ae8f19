"""Tests for sla_tracker.config."""

import json
from datetime import timezone

import pytest

from sla_tracker.config import SLATrackerConfig
from sla_tracker.quarter_data import TRACKED_COMPONENTS


class TestSLATrackerConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = SLATrackerConfig(str(tmp_path / "missing.json"))
        assert config.components == list(TRACKED_COMPONENTS)
        assert config.thresholds.target == 99.9
        assert config.thresholds.severe == 99.0
        assert config.thresholds.recent_days == 90
        assert config.timezone is timezone.utc
        assert config.recent_quarters == 8

    def test_partial_override_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "components": ["Actions"],
            "thresholds": {"target": 99.95},
            "output": {"formats": ["csv"]},
        }))
        config = SLATrackerConfig(str(path))

        assert config.components == ["Actions"]
        assert config.thresholds.target == 99.95
        assert config.thresholds.severe == 99.0
        assert config.output_formats == ["csv"]
        assert config.output_directory == "reports"

    def test_empty_component_list_rejected(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"components": []}))
        config = SLATrackerConfig(str(path))
        with pytest.raises(ValueError, match="at least one component"):
            config.components

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{")
        with pytest.raises(json.JSONDecodeError):
            SLATrackerConfig(str(path))

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env_config.json"
        path.write_text(json.dumps({"coverage": {"recent_days": 30}}))
        monkeypatch.setenv("SLA_TRACKER_CONFIG", str(path))

        config = SLATrackerConfig()
        assert config.config_file == str(path)
        assert config.thresholds.recent_days == 30
