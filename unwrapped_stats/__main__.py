"""Entry point for report generation"""
import json
import logging
import os
import sys
import traceback

from unwrapped_stats.config import settings
from unwrapped_stats.stats import StatsGenerator

logging.basicConfig(level=settings.LOG_LEVEL, format='%(message)s')
logger = logging.getLogger(__name__)

def run() -> None:
    """Generate the listening report for the configured input."""
    try:
        logger.info("Using configuration:")
        logger.info(json.dumps(settings.model_dump(), indent=2))

        generator = StatsGenerator(settings)
        report = generator.generate()

        # Save results
        os.makedirs(settings.OUTPUT_DIR, exist_ok=True)
        output_path = os.path.join(settings.OUTPUT_DIR, settings.REPORT_FILENAME)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(report.to_json_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Report written to {output_path}")

    except Exception as e:
        logger.error(f"Error during report generation: {e}")
        traceback.print_exc()
        sys.exit(1)

if __name__ == "__main__":
    run()
