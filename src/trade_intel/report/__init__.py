"""Report rendering for trade analyses and whale intelligence."""

from trade_intel.report.formatter import (
    ReportFormatter,
    format_currency,
    format_percentage,
    tier_display_name,
    truncate_address,
)
from trade_intel.report.models import FormattedReport

__all__ = [
    "FormattedReport",
    "ReportFormatter",
    "format_currency",
    "format_percentage",
    "tier_display_name",
    "truncate_address",
]
