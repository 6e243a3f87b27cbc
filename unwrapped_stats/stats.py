"""Main report generation logic for streaming history exports"""
import logging
from datetime import tzinfo
from typing import Any, Iterable, Optional

from unwrapped_stats.aggregator import aggregate
from unwrapped_stats.classifier import classify_skips
from unwrapped_stats.config import Settings
from unwrapped_stats.models.report import AggregateReport
from unwrapped_stats.normalizer import normalize_records
from unwrapped_stats.services.export_loader import load_export_records

logger = logging.getLogger(__name__)

class NoUsableDataError(ValueError):
    """Raised when no play event survives normalization."""
    pass

def build_report(records: Iterable[Any], tz: Optional[tzinfo] = None) -> AggregateReport:
    """Normalize, classify and aggregate raw records into a report"""
    events = normalize_records(records, tz)
    return aggregate(classify_skips(events))

class StatsGenerator:
    """Generates the listening report for an export on disk"""

    def __init__(self, settings: Settings):
        """Initialize generator with settings"""
        if not settings.INPUT_DIR:
            raise ValueError("INPUT_DIR is required")
        self.settings = settings

    def generate(self) -> AggregateReport:
        """Load the export, then derive the report from its play events"""
        logger.info(f"Loading streaming history from {self.settings.INPUT_DIR}")
        records = load_export_records(self.settings.INPUT_DIR)

        events = normalize_records(records, self.settings.tzinfo)
        if not events:
            raise NoUsableDataError(
                f"No usable streaming history found in {self.settings.INPUT_DIR} "
                f"({len(records)} records, none valid)"
            )

        first_listen = min(event.end_time for event in events)
        last_listen = max(event.end_time for event in events)
        logger.info(f"Listening window: {first_listen.isoformat()} to {last_listen.isoformat()}")

        report = aggregate(classify_skips(events))
        logger.info("Report generation successful.")
        return report
