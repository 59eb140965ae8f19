"""
SLA Aggregator
Author: CloudOps-SRE-Toolkit
Description: Uptime percentages, SLA violations and service credits per component, quarter and overall
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import List, Sequence
from dataclasses import dataclass

from .coverage import DEFAULT_RECENT_DAYS, data_coverage
from .downtime import weighted_downtime
from .models import Incident, SLAResult, ServiceCredit
from .quarters import quarter_bounds, round_half_up, total_minutes

logger = logging.getLogger(__name__)

OVERALL_COMPONENT_NAME = "All Components"


@dataclass(frozen=True)
class SLAThresholds:
    """Uptime commitment per calendar quarter"""
    target: float = 99.9   # below this: 10% credit
    severe: float = 99.0   # below this: 25% credit
    recent_days: int = DEFAULT_RECENT_DAYS

    def service_credit(self, uptime_percentage: float) -> ServiceCredit:
        if uptime_percentage < self.severe:
            return ServiceCredit.MAJOR
        if uptime_percentage < self.target:
            return ServiceCredit.PARTIAL
        return ServiceCredit.NONE

    def is_violation(self, uptime_percentage: float) -> bool:
        return uptime_percentage < self.target


DEFAULT_THRESHOLDS = SLAThresholds()


def component_sla(incidents: Sequence[Incident], component_name: str, start: datetime,
                  end: datetime, now: datetime,
                  thresholds: SLAThresholds = DEFAULT_THRESHOLDS) -> SLAResult:
    """Calculate SLA for a single component over [start, end]"""
    coverage = data_coverage(incidents, start, end, now, thresholds.recent_days)
    downtime, matched = weighted_downtime(incidents, component_name, start, end, now)

    window_minutes = total_minutes(start, end)
    effective_downtime = min(downtime, window_minutes)
    # verdicts are taken on the rounded figure
    uptime = round((window_minutes - effective_downtime) / window_minutes * 100, 4)

    return SLAResult(
        component_name=component_name,
        uptime_percentage=uptime,
        total_downtime_minutes=round_half_up(downtime),
        incident_count=matched,
        sla_violation=thresholds.is_violation(uptime),
        service_credit=thresholds.service_credit(uptime),
        has_insufficient_data=not coverage.has_coverage,
        period_start=start,
        period_end=end
    )


def quarterly_sla(incidents: Sequence[Incident], year: int, quarter: int,
                  component_names: Sequence[str], now: datetime,
                  thresholds: SLAThresholds = DEFAULT_THRESHOLDS,
                  tz: tzinfo = timezone.utc) -> List[SLAResult]:
    """Calculate SLA for every component in a quarter, each independently"""
    start, end = quarter_bounds(year, quarter, tz)
    logger.info(f"Calculating {year}-Q{quarter} SLA for {len(component_names)} components")
    return [component_sla(incidents, name, start, end, now, thresholds) for name in component_names]


def overall_sla(incidents: Sequence[Incident], start: datetime, end: datetime,
                component_names: Sequence[str], now: datetime,
                thresholds: SLAThresholds = DEFAULT_THRESHOLDS) -> SLAResult:
    """Unweighted mean of per-component uptime, with downtime and incidents summed"""
    results = [component_sla(incidents, name, start, end, now, thresholds) for name in component_names]

    avg_uptime = sum(r.uptime_percentage for r in results) / len(results)
    total_downtime = sum(r.total_downtime_minutes for r in results)

    return SLAResult(
        component_name=OVERALL_COMPONENT_NAME,
        uptime_percentage=round(avg_uptime, 4),
        total_downtime_minutes=round_half_up(total_downtime),
        incident_count=sum(r.incident_count for r in results),
        sla_violation=thresholds.is_violation(avg_uptime),
        service_credit=thresholds.service_credit(avg_uptime),
        has_insufficient_data=any(r.has_insufficient_data for r in results),
        period_start=start,
        period_end=end
    )


def sla_status_label(uptime_percentage: float, has_insufficient_data: bool = False,
                     thresholds: SLAThresholds = DEFAULT_THRESHOLDS) -> str:
    if has_insufficient_data:
        return "Unknown"
    credit = thresholds.service_credit(uptime_percentage)
    if credit == ServiceCredit.NONE:
        return "Pass"
    return f"Violation ({credit.value}% credit)"


def sla_status_color(uptime_percentage: float, has_insufficient_data: bool = False,
                     thresholds: SLAThresholds = DEFAULT_THRESHOLDS) -> str:
    if has_insufficient_data:
        return "gray"
    return {
        ServiceCredit.NONE: "green",
        ServiceCredit.PARTIAL: "orange",
        ServiceCredit.MAJOR: "red",
    }[thresholds.service_credit(uptime_percentage)]


def describe_result(result: SLAResult, thresholds: SLAThresholds = DEFAULT_THRESHOLDS) -> str:
    return (f"{result.component_name}: {result.uptime_percentage:.4f}% "
            f"({sla_status_label(result.uptime_percentage, result.has_insufficient_data, thresholds)})")
