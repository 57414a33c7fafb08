# reports package — text/JSON export of an analysis run
from services.waylight.reports.exporter import (
    generate_json_report,
    generate_text_report,
    report_filename,
)

__all__ = ["generate_json_report", "generate_text_report", "report_filename"]
