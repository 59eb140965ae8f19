"""Shared fixtures for the SLA tracker tests."""

from datetime import datetime, timezone
from typing import List, Optional

import pytest

from sla_tracker.models import Incident, IncidentUpdate, parse_timestamp

FIXED_NOW = datetime(2025, 11, 22, 17, 28, 57, tzinfo=timezone.utc)


def make_incident(
    incident_id: str,
    created_at: str,
    resolved_at: Optional[str],
    impact: str,
    components: List[str] = None,
    status: Optional[str] = None,
    updates: List[tuple] = None,
    updated_at: Optional[str] = None,
    started_at: Optional[str] = None,
) -> Incident:
    """Create a minimal incident; status defaults to resolved when resolved_at is set."""
    return Incident(
        id=incident_id,
        impact=impact,
        status=status or ("resolved" if resolved_at else "investigating"),
        created_at=parse_timestamp(created_at),
        updated_at=parse_timestamp(updated_at or created_at),
        started_at=parse_timestamp(started_at or created_at),
        resolved_at=parse_timestamp(resolved_at),
        updates=[IncidentUpdate(status=s, created_at=parse_timestamp(t)) for s, t in (updates or [])],
        components=components if components is not None else ["Git Operations"],
        name=f"Incident {incident_id}",
    )


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def incident_factory():
    return make_incident
