"""Human-readable formatting of forecast values."""

import math
from datetime import date
from typing import Optional


def format_months(months: float) -> str:
    """Format a month count, e.g. "3 weeks", "4.5 months", "2y 3m"."""
    if not math.isfinite(months):
        return "∞"
    if months < 1:
        return f"{math.ceil(months * 4)} weeks"
    if months < 12:
        return f"{months:.1f} months"
    years = int(months // 12)
    remaining_months = round(months % 12)
    if remaining_months == 12:
        years, remaining_months = years + 1, 0
    if remaining_months == 0:
        return f"{years} {'year' if years == 1 else 'years'}"
    return f"{years}y {remaining_months}m"


def format_date(value: Optional[date]) -> str:
    """Format a date like "Jan 5, 2025", or "Never" for None."""
    if value is None:
        return "Never"
    return f"{value.strftime('%b')} {value.day}, {value.year}"
