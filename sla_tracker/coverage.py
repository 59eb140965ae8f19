"""
Data Coverage Classifier
Author: CloudOps-SRE-Toolkit
Description: Decide whether a window without incidents means 100% uptime or no data
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable

from .models import CoverageResult, Incident

logger = logging.getLogger(__name__)

DEFAULT_RECENT_DAYS = 90

FUTURE_QUARTER = "Future quarter"
HAS_INCIDENTS = "Has incidents"
RECENT_NO_INCIDENTS = "Recent quarter with no incidents (100% uptime)"
BEFORE_TRACKING = "Historical quarter before tracking began"


def data_coverage(incidents: Iterable[Incident], window_start: datetime, window_end: datetime,
                  now: datetime, recent_days: int = DEFAULT_RECENT_DAYS) -> CoverageResult:
    """
    Classify data coverage for a window:
    - windows starting after now have no data yet
    - any incident created inside the window proves we were tracking
    - an empty window that ended within recent_days is taken as 100% uptime
    - an older empty window predates tracking
    """
    if window_start > now:
        return CoverageResult(False, FUTURE_QUARTER)

    if any(window_start <= i.created_at <= window_end for i in incidents):
        return CoverageResult(True, HAS_INCIDENTS)

    if window_end >= now - timedelta(days=recent_days):
        return CoverageResult(True, RECENT_NO_INCIDENTS)

    logger.debug(f"No incidents between {window_start.isoformat()} and {window_end.isoformat()}, "
                 f"treating window as untracked")
    return CoverageResult(False, BEFORE_TRACKING)
