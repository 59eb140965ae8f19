"""
Weighted Downtime Engine
Author: CloudOps-SRE-Toolkit
Description: Severity-weighted downtime for a component over a window, merging overlapping incidents
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from .models import Impact, Incident, IncidentDuration, normalize_component_name
from .quarters import duration_minutes, total_minutes
from .resolution import incident_end_time, incident_start_time

logger = logging.getLogger(__name__)


def impact_multiplier(impact: Optional[str]) -> float:
    """Weight applied to an incident's duration; unrecognized impacts count as 0.5"""
    return Impact.from_value(impact).multiplier


def affects_component(incident: Incident, component_name: str) -> bool:
    target = normalize_component_name(component_name)
    return any(name == target for name in incident.component_names)


def filter_incidents_by_component(incidents: Iterable[Incident], component_name: str) -> List[Incident]:
    return [i for i in incidents if affects_component(i, component_name)]


def filter_incidents_by_date_range(incidents: Iterable[Incident], start: datetime,
                                   end: datetime) -> List[Incident]:
    """Incidents created within [start, end]"""
    return [i for i in incidents if start <= i.created_at <= end]


def incident_downtime(incident: Incident, now: datetime) -> float:
    """Weighted downtime of a single incident over its whole lifetime"""
    minutes = duration_minutes(incident_start_time(incident), incident_end_time(incident, now))
    return minutes * impact_multiplier(incident.impact)


def incident_downtime_in_period(incident: Incident, start: datetime, end: datetime,
                                now: datetime) -> float:
    """Weighted downtime of a single incident clamped to [start, end]"""
    incident_start = incident_start_time(incident)
    incident_end = incident_end_time(incident, now)

    if incident_end < start or incident_start > end:
        return 0

    clamped_start = max(incident_start, start)
    clamped_end = min(incident_end, end)
    return duration_minutes(clamped_start, clamped_end) * impact_multiplier(incident.impact)


def incidents_with_durations(incidents: Iterable[Incident], now: datetime) -> List[IncidentDuration]:
    results = []
    for incident in incidents:
        results.append(IncidentDuration(
            incident=incident,
            duration_minutes=duration_minutes(incident_start_time(incident),
                                              incident_end_time(incident, now)),
            weighted_downtime=incident_downtime(incident, now)
        ))
    return results


def weighted_downtime(incidents: Iterable[Incident], component_name: str, window_start: datetime,
                      window_end: datetime, now: datetime) -> Tuple[float, int]:
    """
    Total weighted downtime minutes for one component over [window_start, window_end).

    The window is cut into segments at every incident boundary. Each segment
    is charged at the highest multiplier among the incidents active at its
    midpoint, so concurrent incidents never stack beyond wall-clock time.

    Returns (weighted_minutes, matched_incident_count).
    """
    window_start = window_start.astimezone(timezone.utc)
    window_end = window_end.astimezone(timezone.utc)

    intervals = []
    for incident in incidents:
        if not affects_component(incident, component_name):
            continue
        start = incident_start_time(incident)
        end = incident_end_time(incident, now)
        if start < window_end and end > window_start:
            intervals.append((start, end, impact_multiplier(incident.impact)))

    points = {window_start, window_end}
    for start, end, _ in intervals:
        clamped_start = max(start, window_start)
        clamped_end = min(end, window_end)
        if clamped_start < clamped_end:
            points.add(clamped_start)
            points.add(clamped_end)
    breakpoints = sorted(points)

    downtime = 0.0
    for p1, p2 in zip(breakpoints, breakpoints[1:]):
        midpoint = p1 + (p2 - p1) / 2
        worst = max(
            (multiplier for start, end, multiplier in intervals if start <= midpoint <= end),
            default=0.0
        )
        downtime += total_minutes(p1, p2) * worst

    logger.debug(f"{component_name}: {len(intervals)} incidents over {len(breakpoints) - 1} segments, "
                 f"{downtime:.2f} weighted minutes")

    return min(downtime, total_minutes(window_start, window_end)), len(intervals)
