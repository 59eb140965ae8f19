"""
Incident Archive Loader
Author: CloudOps-SRE-Toolkit
Description: Build incident records from status-page JSON and audit archives for data-quality defects
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from collections import Counter

from .models import Impact, Incident, IncidentStatus, IncidentUpdate, parse_timestamp

logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in IncidentStatus}
VALID_IMPACTS = {i.value for i in Impact if i is not Impact.UNKNOWN}


def _component_name(component: Any) -> str:
    if isinstance(component, dict):
        return component.get('name', '')
    return str(component)


def _parse_field(incident_data: Dict[str, Any], key: str) -> Optional[datetime]:
    try:
        return parse_timestamp(incident_data.get(key))
    except ValueError:
        raise ValueError(f"Incident {incident_data.get('id')}: unparseable {key} "
                         f"{incident_data.get(key)!r}")


def load_incident(incident_data: Dict[str, Any]) -> Incident:
    """Build an Incident from one status-page record"""
    updates = []
    for update_data in incident_data.get('incident_updates') or []:
        updates.append(IncidentUpdate(
            status=update_data.get('status', ''),
            created_at=_parse_field(update_data, 'created_at'),
            body=update_data.get('body') or ''
        ))

    created_at = _parse_field(incident_data, 'created_at')
    return Incident(
        id=str(incident_data['id']),
        impact=incident_data.get('impact'),
        status=incident_data.get('status'),
        created_at=created_at,
        updated_at=_parse_field(incident_data, 'updated_at') or created_at,
        started_at=_parse_field(incident_data, 'started_at'),
        resolved_at=_parse_field(incident_data, 'resolved_at'),
        updates=updates,
        components=[_component_name(c) for c in incident_data.get('components') or []],
        name=incident_data.get('name', ''),
        shortlink=incident_data.get('shortlink')
    )


def load_incidents(incidents_data: List[Dict[str, Any]]) -> List[Incident]:
    incidents = [load_incident(incident_data) for incident_data in incidents_data]
    logger.info(f"Loaded {len(incidents)} incidents")
    return incidents


def read_incident_archive(path: str) -> List[Dict[str, Any]]:
    """Read the raw incident records from a JSON array on disk"""
    try:
        with open(path, 'r') as f:
            incidents_data = json.load(f)
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON in incident archive {path}")
        raise

    if not isinstance(incidents_data, list):
        raise ValueError(f"Incident archive {path} must contain a JSON array")

    return incidents_data


def load_incident_archive(path: str) -> List[Incident]:
    """Load a JSON array of incident records from disk"""
    return load_incidents(read_incident_archive(path))


@dataclass
class DataQualityReport:
    """Data-quality findings for a raw incident archive"""
    total_records: int
    duplicate_ids: List[str] = field(default_factory=list)
    missing_created_at: List[str] = field(default_factory=list)
    missing_updated_at: List[str] = field(default_factory=list)
    invalid_timestamps: List[str] = field(default_factory=list)
    invalid_statuses: List[str] = field(default_factory=list)
    invalid_impacts: List[str] = field(default_factory=list)
    resolved_without_timestamp: List[str] = field(default_factory=list)
    resolved_year_mismatch: List[str] = field(default_factory=list)
    impact_distribution: Dict[str, int] = field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        return not self.issues()

    def issues(self) -> List[str]:
        checks = [
            ("duplicate ids", self.duplicate_ids),
            ("null created_at", self.missing_created_at),
            ("null updated_at", self.missing_updated_at),
            ("unparseable timestamps", self.invalid_timestamps),
            ("unknown status", self.invalid_statuses),
            ("unknown impact", self.invalid_impacts),
            ("status resolved but no resolved_at", self.resolved_without_timestamp),
            ("resolved_at year disagrees with resolved update", self.resolved_year_mismatch),
        ]
        return [f"{len(ids)} incidents with {label}: {', '.join(ids[:10])}"
                for label, ids in checks if ids]


def _first_resolved_update(incident_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for update_data in incident_data.get('incident_updates') or []:
        if update_data.get('status') == IncidentStatus.RESOLVED.value:
            return update_data
    return None


def audit_incidents(incidents_data: List[Dict[str, Any]]) -> DataQualityReport:
    """Check raw incident records for the defects that break SLA calculation"""
    report = DataQualityReport(total_records=len(incidents_data))

    id_counts = Counter(str(r.get('id')) for r in incidents_data)
    report.duplicate_ids = sorted(i for i, count in id_counts.items() if count > 1)
    report.impact_distribution = dict(Counter(r.get('impact') for r in incidents_data))

    for incident_data in incidents_data:
        incident_id = str(incident_data.get('id'))

        if incident_data.get('created_at') is None:
            report.missing_created_at.append(incident_id)
        if incident_data.get('updated_at') is None:
            report.missing_updated_at.append(incident_id)
        if incident_data.get('status') not in VALID_STATUSES:
            report.invalid_statuses.append(incident_id)
        if incident_data.get('impact') not in VALID_IMPACTS:
            report.invalid_impacts.append(incident_id)

        try:
            incident = load_incident(incident_data)
        except KeyError:
            logger.debug("Skipping further checks on record without an id")
            continue
        except ValueError as e:
            logger.debug(f"Skipping further checks on {incident_id}: {e}")
            report.invalid_timestamps.append(incident_id)
            continue

        if incident.status == IncidentStatus.RESOLVED.value and incident.resolved_at is None:
            report.resolved_without_timestamp.append(incident_id)

        resolved_update = _first_resolved_update(incident_data)
        if incident.resolved_at is not None and resolved_update is not None:
            update_time = parse_timestamp(resolved_update.get('created_at'))
            if update_time is not None and update_time.year != incident.resolved_at.year:
                report.resolved_year_mismatch.append(incident_id)

    for issue in report.issues():
        logger.warning(issue)

    return report


def generate_sample_data(now: datetime, count: int = 40) -> List[Dict[str, Any]]:
    """Generate sample status-page incidents for demonstration"""
    components = ["Git Operations", "API Requests", "Issues", "Pull Requests",
                  "Webhooks", "Pages", "Actions", "Packages", "Copilot"]
    impacts = ["minor", "major", "minor", "critical", "none", "maintenance", "minor", "major"]

    incidents = []
    base_date = now - timedelta(days=365)

    for i in range(count):
        created_date = base_date + timedelta(days=i * 9, hours=i % 24)
        resolution_minutes = [20, 45, 90, 150, 30, 240, 60, 15][i % 8]
        resolved_date = created_date + timedelta(minutes=resolution_minutes)
        affected = [components[i % len(components)]]
        if i % 5 == 0:
            affected.append(components[(i + 3) % len(components)])

        incidents.append({
            'id': f'sample{i + 1:04d}',
            'name': f'Incident with {" and ".join(affected)}',
            'status': 'resolved',
            'impact': impacts[i % len(impacts)],
            'created_at': created_date.isoformat(),
            'updated_at': resolved_date.isoformat(),
            'started_at': created_date.isoformat(),
            'resolved_at': resolved_date.isoformat(),
            'incident_updates': [
                {'status': 'resolved', 'body': 'This incident has been resolved.',
                 'created_at': resolved_date.isoformat()},
                {'status': 'investigating', 'body': 'We are investigating reports of degraded performance.',
                 'created_at': created_date.isoformat()},
            ],
            'components': [{'name': name} for name in affected]
        })

    return incidents
