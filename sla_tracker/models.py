"""
SLA Tracker Data Model
Author: CloudOps-SRE-Toolkit
Description: Incident records, enumerations and result value objects shared by the downtime engine
"""

import re
import logging
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Union
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_AND_PREFIX = re.compile(r'^and\s+', re.IGNORECASE)


class Impact(Enum):
    """Incident severity as published on the status page"""
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"
    MAINTENANCE = "maintenance"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "Impact":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def multiplier(self) -> float:
        """Fraction of the incident duration counted as downtime"""
        return IMPACT_MULTIPLIERS[self]


IMPACT_MULTIPLIERS: Dict[Impact, float] = {
    Impact.NONE: 0.0,
    Impact.MINOR: 0.25,        # partial degradation
    Impact.MAJOR: 0.75,        # significant issues
    Impact.CRITICAL: 1.0,      # complete outage
    Impact.MAINTENANCE: 0.0,   # scheduled, excluded from SLA
    Impact.UNKNOWN: 0.5,
}


class IncidentStatus(Enum):
    INVESTIGATING = "investigating"
    IDENTIFIED = "identified"
    MONITORING = "monitoring"
    RESOLVED = "resolved"
    POSTMORTEM = "postmortem"


class ServiceCredit(IntEnum):
    """Service credit tier, as a percentage of the quarterly fee"""
    NONE = 0
    PARTIAL = 10
    MAJOR = 25


def normalize_component_name(name: str) -> str:
    """Strip whitespace and the stray leading 'and ' left by list-joining upstream"""
    return _AND_PREFIX.sub('', name.strip()).strip()


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware datetime (naive values are taken as UTC)"""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class IncidentUpdate:
    """A single status update posted on an incident"""
    status: str
    created_at: datetime
    body: str = ""


@dataclass
class Incident:
    """Data class for a status-page incident record"""
    id: str
    impact: str
    status: str
    created_at: datetime
    updated_at: datetime
    started_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    updates: List[IncidentUpdate] = None
    components: List[str] = None
    name: str = ""
    shortlink: Optional[str] = None

    def __post_init__(self):
        if self.updates is None:
            self.updates = []
        if self.components is None:
            self.components = []

    @property
    def component_names(self) -> List[str]:
        """Affected component names after normalization, in stored order"""
        return [normalize_component_name(c) for c in self.components]


@dataclass(frozen=True)
class QuarterInfo:
    year: int
    quarter: int
    label: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class CoverageResult:
    """Whether an incident-free window means 100% uptime or missing data"""
    has_coverage: bool
    reason: str


@dataclass(frozen=True)
class SLAResult:
    """SLA outcome for one component over one window"""
    component_name: str
    uptime_percentage: float
    total_downtime_minutes: int
    incident_count: int
    sla_violation: bool
    service_credit: ServiceCredit
    has_insufficient_data: bool
    period_start: datetime
    period_end: datetime


@dataclass(frozen=True)
class IncidentDuration:
    incident: Incident
    duration_minutes: int
    weighted_downtime: float


@dataclass(frozen=True)
class QuarterData:
    """Every SLA figure reported for a single quarter"""
    year: int
    quarter: int
    quarter_label: str
    start: datetime
    end: datetime
    sla_results: List[SLAResult]
    avg_uptime: float
    total_downtime: int
    total_incidents: int
    tracked_incidents: int
    has_violation: bool
    has_insufficient_data: bool
    worst_component: SLAResult
    quarter_incidents: List[Incident]
