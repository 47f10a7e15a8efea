"""Output generation for forecasts (text, PDF)."""

from capacityplanner.output.formatting import format_date, format_months
from capacityplanner.output.pdf_generator import PDFGenerator
from capacityplanner.output.report_generator import ForecastReportGenerator

__all__ = [
    "ForecastReportGenerator",
    "PDFGenerator",
    "format_date",
    "format_months",
]
