import logging
import json
from .models import Summary

logger = logging.getLogger(__name__)

class ReportWriter:
    def __init__(self, report_file: str = "salvo_report.json"):
        self.report_file = report_file

    def save(self, summaries: dict[str, Summary]) -> bool:
        report = {name: summary.to_dict() for name, summary in summaries.items()}
        try:
            with open(self.report_file, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2)
            logger.info(f"Report saved to {self.report_file}")
            return True
        except OSError as e:
            logger.error(f"Failed to save report: {e}")
            return False
