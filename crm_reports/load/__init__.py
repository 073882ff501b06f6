"""
Load Layer
==========
Report snapshots fetched by token from Supabase.
"""

from crm_reports.load.reports import (
    ReportNotFoundError,
    get_enrichment_report_by_token,
    get_report_by_token,
)

__all__ = [
    "ReportNotFoundError",
    "get_report_by_token",
    "get_enrichment_report_by_token",
]
