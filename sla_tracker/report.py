"""
SLA Report Generator
Author: CloudOps-SRE-Toolkit
Description: Build quarterly SLA reports and save them as JSON, CSV and a static dashboard image
"""

import os
import json
import logging
from datetime import datetime
from typing import Dict, List, Any, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .config import SLATrackerConfig
from .downtime import incidents_with_durations
from .models import Incident, QuarterData, SLAResult
from .quarter_data import quarter_data
from .quarters import format_duration
from .sla import overall_sla, sla_status_color, sla_status_label

logger = logging.getLogger(__name__)


class SLAReportGenerator:
    """Generate quarterly SLA reports from an incident archive"""

    def __init__(self, config: SLATrackerConfig):
        self.config = config
        self.thresholds = config.thresholds

    def calculate_quarters(self, incidents: Sequence[Incident], quarters: Sequence[tuple],
                           now: datetime) -> List[QuarterData]:
        """Calculate QuarterData for each (year, quarter), in the order given"""
        results = []
        for year, quarter in quarters:
            results.append(quarter_data(
                incidents, year, quarter, now,
                component_names=self.config.components,
                thresholds=self.thresholds,
                tz=self.config.timezone
            ))
        return results

    def _result_to_dict(self, result: SLAResult) -> Dict[str, Any]:
        return {
            "component_name": result.component_name,
            "uptime_percentage": result.uptime_percentage,
            "total_downtime_minutes": result.total_downtime_minutes,
            "downtime": format_duration(result.total_downtime_minutes),
            "incident_count": result.incident_count,
            "sla_violation": result.sla_violation,
            "service_credit": int(result.service_credit),
            "has_insufficient_data": result.has_insufficient_data,
            "status": sla_status_label(result.uptime_percentage, result.has_insufficient_data,
                                       self.thresholds),
            "period": {
                "start": result.period_start.isoformat(),
                "end": result.period_end.isoformat()
            }
        }

    def _quarter_to_dict(self, data: QuarterData, now: datetime) -> Dict[str, Any]:
        return {
            "label": data.quarter_label,
            "year": data.year,
            "quarter": data.quarter,
            "start": data.start.isoformat(),
            "end": data.end.isoformat(),
            "avg_uptime": round(data.avg_uptime, 4),
            "total_downtime_minutes": data.total_downtime,
            "total_incidents": data.total_incidents,
            "tracked_incidents": data.tracked_incidents,
            "has_violation": data.has_violation,
            "has_insufficient_data": data.has_insufficient_data,
            "worst_component": data.worst_component.component_name,
            "results": [self._result_to_dict(r) for r in data.sla_results],
            "incidents": [
                {
                    "id": d.incident.id,
                    "name": d.incident.name,
                    "impact": d.incident.impact,
                    "created_at": d.incident.created_at.isoformat(),
                    "duration_minutes": d.duration_minutes,
                    "duration": format_duration(d.duration_minutes),
                    "weighted_downtime": round(d.weighted_downtime, 2),
                    "components": d.incident.component_names
                }
                for d in incidents_with_durations(data.quarter_incidents, now)
            ]
        }

    def generate_recommendations(self, quarters: Sequence[QuarterData]) -> List[str]:
        """Summarize what the report calls for"""
        recommendations = []

        for data in quarters:
            credits = [r for r in data.sla_results if r.service_credit and not r.has_insufficient_data]
            if credits:
                names = ", ".join(f"{r.component_name} ({int(r.service_credit)}%)" for r in credits)
                recommendations.append(f"{data.quarter_label}: claim service credits for {names}.")

        untracked = [d.quarter_label for d in quarters if d.has_insufficient_data]
        if untracked:
            recommendations.append(f"No incident data for {', '.join(untracked)}; "
                                   f"uptime shown for these quarters is not meaningful.")

        if not recommendations:
            recommendations.append("All tracked components met the uptime commitment.")

        return recommendations

    def generate_report(self, incidents: Sequence[Incident], quarters: Sequence[QuarterData],
                        now: datetime) -> Dict[str, Any]:
        """Generate a JSON-serializable SLA report"""
        report = {
            "timestamp": now.isoformat(),
            "components": self.config.components,
            "thresholds": {
                "target": self.thresholds.target,
                "severe": self.thresholds.severe
            },
            "quarters": [self._quarter_to_dict(d, now) for d in quarters],
            "recommendations": self.generate_recommendations(quarters)
        }

        if quarters:
            start = min(d.start for d in quarters)
            end = max(d.end for d in quarters)
            overall = overall_sla(incidents, start, end, self.config.components, now, self.thresholds)
            report["overall"] = self._result_to_dict(overall)

        return report

    def save_report(self, report: Dict[str, Any], output_formats: List[str],
                    output_dir: str, now: datetime) -> List[str]:
        """Save report in specified formats, returning the written paths"""
        os.makedirs(output_dir, exist_ok=True)
        timestamp = now.strftime("%Y%m%d_%H%M%S")
        written = []

        if 'json' in output_formats:
            json_file = os.path.join(output_dir, f"sla_report_{timestamp}.json")
            with open(json_file, 'w') as f:
                json.dump(report, f, indent=2, default=str)
            logger.info(f"JSON report saved to: {json_file}")
            written.append(json_file)

        if 'csv' in output_formats:
            csv_file = os.path.join(output_dir, f"sla_report_{timestamp}.csv")
            self._save_csv_report(report, csv_file)
            logger.info(f"CSV report saved to: {csv_file}")
            written.append(csv_file)

        if 'dashboard' in output_formats:
            dashboard_file = os.path.join(output_dir, f"sla_dashboard_{timestamp}.png")
            self._generate_dashboard(report, dashboard_file)
            logger.info(f"Dashboard saved to: {dashboard_file}")
            written.append(dashboard_file)

        return written

    def results_frame(self, report: Dict[str, Any]) -> pd.DataFrame:
        """One row per quarter and component"""
        rows = []
        for quarter in report["quarters"]:
            for result in quarter["results"]:
                rows.append({
                    'Quarter': quarter["label"],
                    'Component': result["component_name"],
                    'Uptime %': result["uptime_percentage"],
                    'Downtime (min)': result["total_downtime_minutes"],
                    'Downtime': result["downtime"],
                    'Incidents': result["incident_count"],
                    'Status': result["status"],
                    'Service Credit %': result["service_credit"],
                    'Insufficient Data': result["has_insufficient_data"]
                })
        return pd.DataFrame(rows, columns=['Quarter', 'Component', 'Uptime %', 'Downtime (min)',
                                           'Downtime', 'Incidents', 'Status', 'Service Credit %',
                                           'Insufficient Data'])

    def _save_csv_report(self, report: Dict[str, Any], filename: str):
        """Save per-component results as CSV"""
        df = self.results_frame(report)
        df.to_csv(filename, index=False)

    def _generate_dashboard(self, report: Dict[str, Any], filename: str):
        """Generate a static SLA dashboard image"""
        df = self.results_frame(report)
        fig, axes = plt.subplots(2, 2, figsize=(15, 10))
        fig.suptitle('Quarterly SLA Dashboard', fontsize=16)

        # 1. Uptime heatmap, components x quarters
        if not df.empty:
            pivot = df.pivot(index='Component', columns='Quarter', values='Uptime %')
            sns.heatmap(pivot, annot=True, fmt='.3f', cmap='RdYlGn',
                        vmin=self.thresholds.severe, vmax=100, ax=axes[0, 0], cbar=False)
        axes[0, 0].set_title('Uptime % by Component')

        # 2. Latest quarter per component, coloured by status
        if report["quarters"]:
            latest = max(report["quarters"], key=lambda q: (q["year"], q["quarter"]))
            names = [r["component_name"] for r in latest["results"]]
            uptimes = [r["uptime_percentage"] for r in latest["results"]]
            colors = [sla_status_color(r["uptime_percentage"], r["has_insufficient_data"], self.thresholds)
                      for r in latest["results"]]
            axes[0, 1].barh(names, uptimes, color=colors)
            axes[0, 1].axvline(x=self.thresholds.target, color='red', linestyle='--', alpha=0.7)
            axes[0, 1].set_xlim(min(uptimes + [self.thresholds.severe]) - 0.1, 100)
            axes[0, 1].set_title(f'{latest["label"]} Uptime')
            axes[0, 1].set_xlabel('Uptime %')

        # 3. Weighted downtime per quarter
        labels = [q["label"] for q in report["quarters"]]
        downtime = [q["total_downtime_minutes"] for q in report["quarters"]]
        x = np.arange(len(labels))
        axes[1, 0].bar(x, downtime, color='lightcoral')
        axes[1, 0].set_xticks(x)
        axes[1, 0].set_xticklabels(labels, rotation=45, ha='right')
        axes[1, 0].set_title('Weighted Downtime (minutes)')

        # 4. Status distribution
        if not df.empty:
            sns.countplot(data=df, y='Status', ax=axes[1, 1], color='skyblue')
        else:
            axes[1, 1].text(0.5, 0.5, 'No results available',
                            ha='center', va='center', transform=axes[1, 1].transAxes)
        axes[1, 1].set_title('SLA Status Distribution')

        plt.tight_layout()
        plt.savefig(filename, dpi=150, bbox_inches='tight')
        plt.close(fig)
