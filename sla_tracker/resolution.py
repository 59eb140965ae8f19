"""
Incident Resolution Resolver
Author: CloudOps-SRE-Toolkit
Description: Work out when an incident began and when it actually ended
"""

import logging
from datetime import datetime

from .models import Incident, IncidentStatus

logger = logging.getLogger(__name__)


def incident_start_time(incident: Incident) -> datetime:
    return incident.started_at or incident.created_at


def incident_end_time(incident: Incident, now: datetime) -> datetime:
    """
    Effective end of an incident, in priority order:

    1. created_at of the first update with status "resolved" (stored order).
       Updates win over resolved_at, which has been seen carrying the right
       day in the wrong year.
    2. resolved_at
    3. updated_at, when the incident is marked resolved without a timestamp
    4. now, for incidents that are still open
    """
    resolved_update = next(
        (u for u in incident.updates if u.status == IncidentStatus.RESOLVED.value),
        None
    )
    if resolved_update is not None:
        return resolved_update.created_at

    if incident.resolved_at is not None:
        return incident.resolved_at

    if incident.status == IncidentStatus.RESOLVED.value:
        logger.debug(f"Incident {incident.id} resolved without a timestamp, using updated_at")
        return incident.updated_at

    return now
