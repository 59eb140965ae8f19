#!/usr/bin/env python3
"""
Quarterly SLA Tracker
Author: CloudOps-SRE-Toolkit
Description: Calculate quarterly uptime, SLA violations and service credits from a status-page incident archive
"""

import logging
import argparse
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .config import SLATrackerConfig
from .loader import (audit_incidents, generate_sample_data, load_incident_archive, load_incidents,
                     read_incident_archive)
from .models import parse_timestamp
from .quarters import format_duration, parse_quarter_label, recent_quarters
from .report import SLAReportGenerator
from .sla import describe_result

logger = logging.getLogger(__name__)


def setup_logging(log_file: Optional[str] = None, verbose: bool = False):
    """Configure logging"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def resolve_quarters(labels: Optional[List[str]], recent: int, now: datetime,
                     config: SLATrackerConfig) -> List[Tuple[int, int]]:
    """Quarters named on the command line, or the most recent ones, newest first"""
    if labels:
        quarters = []
        for label in labels:
            parsed = parse_quarter_label(label)
            if parsed is None:
                raise ValueError(f"Invalid quarter label '{label}', expected e.g. 2025-Q1")
            quarters.append(parsed)
        # repeated labels are reported once, first occurrence wins
        return list(dict.fromkeys(quarters))

    return [(q.year, q.quarter) for q in recent_quarters(now, recent, config.timezone)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Calculate quarterly SLA compliance from incident data')
    parser.add_argument('--incidents', help='JSON file with the incident archive')
    parser.add_argument('--sample', action='store_true', help='Generate sample data')
    parser.add_argument('--config', type=str, help='Configuration file path')
    parser.add_argument('--quarter', nargs='+', help='Quarters to report, e.g. 2025-Q1 2025-Q2')
    parser.add_argument('--recent', type=int, help='Number of most recent quarters to report')
    parser.add_argument('--output-format', nargs='+', choices=['json', 'csv', 'dashboard'],
                        help='Output formats')
    parser.add_argument('--output-dir', help='Directory for report files')
    parser.add_argument('--now', help='Evaluation time (ISO-8601) used for open incidents and coverage')
    parser.add_argument('--audit', action='store_true', help='Audit the archive for data-quality issues')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    try:
        config = SLATrackerConfig(args.config)
        now = parse_timestamp(args.now) if args.now else datetime.now(timezone.utc)

        incidents_data = None
        if args.sample:
            incidents_data = generate_sample_data(now)
        elif not args.incidents:
            print("Please provide --incidents file or use --sample to generate sample data")
            return 2

        if args.audit:
            if incidents_data is None:
                incidents_data = read_incident_archive(args.incidents)
            quality = audit_incidents(incidents_data)
            print(f"\n=== Data Quality ===")
            print(f"Records: {quality.total_records}")
            print(f"Impact distribution: {quality.impact_distribution}")
            for issue in quality.issues():
                print(f"  - {issue}")
            if quality.is_clean:
                print("No data-quality issues found")

        if incidents_data is None:
            incidents = load_incident_archive(args.incidents)
        else:
            incidents = load_incidents(incidents_data)
        quarters = resolve_quarters(args.quarter, args.recent or config.recent_quarters, now, config)

        generator = SLAReportGenerator(config)
        quarter_results = generator.calculate_quarters(incidents, quarters, now)
        report = generator.generate_report(incidents, quarter_results, now)

        generator.save_report(
            report,
            args.output_format or config.output_formats,
            args.output_dir or config.output_directory,
            now
        )

        # Print summary
        print(f"\n=== Quarterly SLA Summary ===")
        for data in quarter_results:
            status = "no data" if data.has_insufficient_data else (
                "VIOLATION" if data.has_violation else "met")
            print(f"\n{data.quarter_label}: {data.avg_uptime:.4f}% average uptime ({status}), "
                  f"{format_duration(data.total_downtime)} weighted downtime, "
                  f"{data.tracked_incidents}/{data.total_incidents} incidents on tracked components")
            for result in data.sla_results:
                print(f"  - {describe_result(result, config.thresholds)}")

        if report['recommendations']:
            print(f"\n📋 Key Recommendations:")
            for i, rec in enumerate(report['recommendations'][:5], 1):
                print(f"{i}. {rec}")

        logger.info("SLA calculation completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Error during SLA calculation: {str(e)}")
        raise


if __name__ == "__main__":
    raise SystemExit(main())
