"""
SLA Tracker Configuration
Author: CloudOps-SRE-Toolkit
Description: Load tracked components, thresholds and output settings from a JSON config file
"""

import os
import json
import logging
from datetime import timezone, tzinfo
from typing import Dict, List, Any, Optional
from zoneinfo import ZoneInfo

from .quarter_data import TRACKED_COMPONENTS
from .sla import SLAThresholds

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config/sla_tracker_config.json"


class SLATrackerConfig:
    """SLA tracker settings, falling back to defaults when no config file exists"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or os.getenv("SLA_TRACKER_CONFIG", DEFAULT_CONFIG_FILE)
        self.config = self._load_config(self.config_file)

    def _load_config(self, config_file: str) -> Dict[str, Any]:
        """Load configuration from file, merged over the defaults"""
        config = self._get_default_config()
        try:
            with open(config_file, 'r') as f:
                overrides = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Config file {config_file} not found. Using defaults.")
            return config
        except json.JSONDecodeError:
            logger.error(f"Invalid JSON in config file {config_file}")
            raise

        for section, value in overrides.items():
            if isinstance(value, dict) and isinstance(config.get(section), dict):
                config[section].update(value)
            else:
                config[section] = value

        logger.info(f"Loaded configuration from {config_file}")
        return config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration"""
        return {
            "components": list(TRACKED_COMPONENTS),
            "thresholds": {
                "target": 99.9,
                "severe": 99.0
            },
            "coverage": {
                "recent_days": 90
            },
            "timezone": "UTC",
            "output": {
                "formats": ["json", "csv"],
                "directory": "reports",
                "recent_quarters": 8
            }
        }

    @property
    def components(self) -> List[str]:
        components = list(self.config["components"] or [])
        if not components:
            raise ValueError(f"Config file {self.config_file} must list at least one component")
        return components

    @property
    def thresholds(self) -> SLAThresholds:
        return SLAThresholds(
            target=float(self.config["thresholds"]["target"]),
            severe=float(self.config["thresholds"]["severe"]),
            recent_days=int(self.config["coverage"]["recent_days"])
        )

    @property
    def timezone(self) -> tzinfo:
        name = self.config.get("timezone") or "UTC"
        if name.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(name)

    @property
    def output_formats(self) -> List[str]:
        return list(self.config["output"]["formats"])

    @property
    def output_directory(self) -> str:
        return self.config["output"]["directory"]

    @property
    def recent_quarters(self) -> int:
        return int(self.config["output"]["recent_quarters"])
