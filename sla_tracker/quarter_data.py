"""
Quarter Data Assembler
Author: CloudOps-SRE-Toolkit
Description: Compose per-component SLA results and quarter incidents into one reportable bundle
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Sequence

from .downtime import filter_incidents_by_date_range
from .models import Incident, QuarterData, normalize_component_name
from .quarters import format_quarter_label, quarter_bounds
from .sla import DEFAULT_THRESHOLDS, SLAThresholds, quarterly_sla

logger = logging.getLogger(__name__)

# Components covered by the GitHub Online Services SLA
TRACKED_COMPONENTS = (
    "Git Operations",
    "API Requests",
    "Issues",
    "Pull Requests",
    "Webhooks",
    "Pages",
    "Actions",
    "Packages",
)


def quarter_data(incidents: Sequence[Incident], year: int, quarter: int, now: datetime,
                 component_names: Sequence[str] = TRACKED_COMPONENTS,
                 thresholds: SLAThresholds = DEFAULT_THRESHOLDS,
                 tz: tzinfo = timezone.utc) -> QuarterData:
    """Calculate all SLA data for a specific quarter"""
    start, end = quarter_bounds(year, quarter, tz)

    # Display list: by creation time only, unlike the overlap test used for downtime
    quarter_incidents = filter_incidents_by_date_range(incidents, start, end)

    sla_results = quarterly_sla(incidents, year, quarter, component_names, now, thresholds, tz)

    tracked = {normalize_component_name(name) for name in component_names}
    tracked_incidents = [
        i for i in quarter_incidents
        if any(name in tracked for name in i.component_names)
    ]

    # min() keeps the first of equal values
    worst_component = min(sla_results, key=lambda r: r.uptime_percentage)

    data = QuarterData(
        year=year,
        quarter=quarter,
        quarter_label=format_quarter_label(year, quarter),
        start=start,
        end=end,
        sla_results=sla_results,
        avg_uptime=sum(r.uptime_percentage for r in sla_results) / len(sla_results),
        total_downtime=sum(r.total_downtime_minutes for r in sla_results),
        total_incidents=len(quarter_incidents),
        tracked_incidents=len(tracked_incidents),
        has_violation=any(r.sla_violation for r in sla_results),
        has_insufficient_data=any(r.has_insufficient_data for r in sla_results),
        worst_component=worst_component,
        quarter_incidents=quarter_incidents
    )

    logger.info(f"{data.quarter_label}: average uptime {data.avg_uptime:.4f}%, "
                f"{data.total_incidents} incidents ({data.tracked_incidents} on tracked components)")
    return data
