"""Tests for sla_tracker.resolution."""

from datetime import datetime, timezone

from sla_tracker.resolution import incident_end_time, incident_start_time
from conftest import make_incident


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestIncidentEndTime:
    def test_uses_resolved_at(self, now):
        incident = make_incident("1", "2025-01-01T10:00:00Z", "2025-01-01T11:00:00Z", "minor")
        assert incident_end_time(incident, now) == utc(2025, 1, 1, 11)

    def test_resolved_update_without_resolved_at(self, now):
        incident = make_incident("2", "2025-01-01T10:00:00Z", None, "minor",
                                 updates=[("resolved", "2025-01-01T12:00:00Z")])
        assert incident_end_time(incident, now) == utc(2025, 1, 1, 12)

    def test_resolved_update_wins_over_wrong_year_resolved_at(self, now):
        incident = make_incident("3", "2022-09-06T22:56:00Z", "2025-09-07T00:08:00Z", "minor",
                                 updates=[("resolved", "2022-09-07T00:08:00Z")])
        assert incident_end_time(incident, now) == utc(2022, 9, 7, 0, 8)

    def test_first_resolved_update_in_stored_order(self, now):
        incident = make_incident("4", "2025-01-01T10:00:00Z", None, "minor", updates=[
            ("resolved", "2025-01-01T15:00:00Z"),
            ("monitoring", "2025-01-01T11:00:00Z"),
            ("resolved", "2025-01-01T12:00:00Z"),
        ])
        assert incident_end_time(incident, now) == utc(2025, 1, 1, 15)

    def test_non_resolved_updates_are_ignored(self, now):
        incident = make_incident("5", "2025-01-01T10:00:00Z", "2025-01-01T11:00:00Z", "minor",
                                 updates=[("monitoring", "2025-01-01T10:30:00Z")])
        assert incident_end_time(incident, now) == utc(2025, 1, 1, 11)

    def test_resolved_status_falls_back_to_updated_at(self, now):
        incident = make_incident("6", "2025-01-01T10:00:00Z", None, "minor", status="resolved",
                                 updated_at="2025-01-01T13:00:00Z")
        assert incident_end_time(incident, now) == utc(2025, 1, 1, 13)

    def test_open_incident_uses_supplied_now(self, now):
        incident = make_incident("7", "2025-01-01T10:00:00Z", None, "minor")
        assert incident_end_time(incident, now) == now

    def test_open_incident_varies_with_clock(self, now):
        incident = make_incident("8", "2025-01-01T10:00:00Z", None, "minor")
        later = utc(2026, 1, 1)
        assert incident_end_time(incident, later) == later


class TestIncidentStartTime:
    def test_prefers_started_at(self):
        incident = make_incident("1", "2025-01-01T10:00:00Z", None, "minor",
                                 started_at="2025-01-01T09:30:00Z")
        assert incident_start_time(incident) == utc(2025, 1, 1, 9, 30)

    def test_falls_back_to_created_at(self):
        incident = make_incident("2", "2025-01-01T10:00:00Z", None, "minor")
        incident.started_at = None
        assert incident_start_time(incident) == utc(2025, 1, 1, 10)
