"""Batch harvesting of external objects and run reports."""

from .engine import Harvester
from .models import HarvestAction, HarvestReport, HarvestResult
from .reporter import format_harvest_report, report_to_json

__all__ = [
    "Harvester",
    "HarvestAction",
    "HarvestReport",
    "HarvestResult",
    "format_harvest_report",
    "report_to_json",
]
