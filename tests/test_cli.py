"""Tests for sla_tracker.cli."""

import json

import pytest

from sla_tracker.cli import main, resolve_quarters
from sla_tracker.config import SLATrackerConfig

NOW = "2025-11-22T17:28:57Z"


@pytest.fixture
def base_args(tmp_path):
    return [
        "--now", NOW,
        "--config", str(tmp_path / "missing.json"),
        "--output-dir", str(tmp_path / "out"),
        "--output-format", "json",
    ]


class TestResolveQuarters:
    def test_explicit_labels(self, tmp_path, now):
        config = SLATrackerConfig(str(tmp_path / "missing.json"))
        assert resolve_quarters(["2025-Q1", "2024-Q4"], 8, now, config) == [(2025, 1), (2024, 4)]

    def test_recent_quarters(self, tmp_path, now):
        config = SLATrackerConfig(str(tmp_path / "missing.json"))
        assert resolve_quarters(None, 3, now, config) == [(2025, 4), (2025, 3), (2025, 2)]

    def test_repeated_labels_reported_once(self, tmp_path, now):
        config = SLATrackerConfig(str(tmp_path / "missing.json"))
        labels = ["2025-Q1", "2024-Q4", "2025-Q1"]
        assert resolve_quarters(labels, 8, now, config) == [(2025, 1), (2024, 4)]

    def test_invalid_label(self, tmp_path, now):
        config = SLATrackerConfig(str(tmp_path / "missing.json"))
        with pytest.raises(ValueError):
            resolve_quarters(["2025-Q9"], 8, now, config)


class TestMain:
    def test_sample_run(self, base_args, tmp_path, capsys):
        assert main(base_args + ["--sample", "--recent", "2"]) == 0

        written = list((tmp_path / "out").glob("sla_report_*.json"))
        assert len(written) == 1
        report = json.loads(written[0].read_text())
        assert [q["label"] for q in report["quarters"]] == ["2025-Q4", "2025-Q3"]
        assert "Quarterly SLA Summary" in capsys.readouterr().out

    def test_incident_file_with_audit(self, base_args, tmp_path, capsys):
        archive = tmp_path / "incidents-archive.json"
        archive.write_text(json.dumps([{
            "id": "abc",
            "name": "Incident with Pages",
            "status": "resolved",
            "impact": "critical",
            "created_at": "2025-02-15T10:00:00Z",
            "updated_at": "2025-02-15T11:00:00Z",
            "started_at": "2025-02-15T10:00:00Z",
            "resolved_at": "2025-02-15T11:00:00Z",
            "incident_updates": [],
            "components": [{"name": "and Pages"}],
        }]))

        assert main(base_args + ["--incidents", str(archive), "--quarter", "2025-Q1", "--audit"]) == 0

        out = capsys.readouterr().out
        assert "No data-quality issues found" in out
        report = json.loads(next((tmp_path / "out").glob("sla_report_*.json")).read_text())
        pages = [r for r in report["quarters"][0]["results"] if r["component_name"] == "Pages"][0]
        assert pages["total_downtime_minutes"] == 60

    def test_requires_input(self, base_args, capsys):
        assert main(base_args) == 2
        assert "--incidents" in capsys.readouterr().out

    def test_invalid_quarter_raises(self, base_args):
        with pytest.raises(ValueError):
            main(base_args + ["--sample", "--quarter", "Q1"])

    def test_repeated_quarter_with_dashboard(self, base_args, tmp_path):
        args = base_args[:-1] + ["json", "dashboard", "--sample", "--quarter", "2025-Q1", "2025-Q1"]
        assert main(args) == 0

        out_dir = tmp_path / "out"
        assert len(list(out_dir.glob("sla_dashboard_*.png"))) == 1
        report = json.loads(next(out_dir.glob("sla_report_*.json")).read_text())
        assert [q["label"] for q in report["quarters"]] == ["2025-Q1"]

    def test_archive_must_be_a_list(self, base_args, tmp_path):
        archive = tmp_path / "incidents-archive.json"
        archive.write_text(json.dumps({"incidents": []}))
        with pytest.raises(ValueError, match="JSON array"):
            main(base_args + ["--incidents", str(archive)])

    def test_audit_reports_archive_issues(self, base_args, tmp_path, capsys):
        archive = tmp_path / "incidents-archive.json"
        archive.write_text(json.dumps([{
            "id": "open1",
            "status": "resolved",
            "impact": "minor",
            "created_at": "2025-08-01T10:00:00Z",
            "updated_at": "2025-08-01T10:30:00Z",
            "components": ["Actions"],
        }]))

        assert main(base_args + ["--incidents", str(archive), "--quarter", "2025-Q3", "--audit"]) == 0
        assert "no resolved_at: open1" in capsys.readouterr().out
