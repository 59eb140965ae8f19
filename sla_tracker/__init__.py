"""
Quarterly SLA Tracker
Author: CloudOps-SRE-Toolkit
Description: Turn a status-page incident log into quarterly uptime and SLA-violation verdicts
"""

from .models import (
    Impact,
    Incident,
    IncidentStatus,
    IncidentUpdate,
    QuarterData,
    ServiceCredit,
    SLAResult,
    normalize_component_name,
)
from .quarter_data import TRACKED_COMPONENTS, quarter_data
from .sla import SLAThresholds, component_sla, overall_sla, quarterly_sla

__version__ = "1.0.0"
