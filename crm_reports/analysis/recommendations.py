"""
Recommendations
===============
Cleanup and enrichment suggestions derived from a report's fields.
"""

from dataclasses import dataclass
from typing import Sequence

from crm_reports.analysis.fields import CriticalColumn, FieldCategories
from crm_reports.analysis.issues import IssueStats
from crm_reports.models import Field, Report

FORMAT_KEYWORDS = ("inconsistent", "format")
CONTACT_KEYWORDS = ("linkedin", "website", "email", "phone")

# More empty fields than this suggests a CRM cleanup
CLEANUP_EMPTY_FIELDS = 10

# Fill-percentage cutoffs for enrichment opportunities, fixed regardless of
# the population thresholds in settings
FINANCIAL_GAP_PERCENTAGE = 25
CONTACT_GAP_PERCENTAGE = 50
INDUSTRY_GAP_PERCENTAGE = 70


@dataclass(frozen=True)
class RecommendedActions:
    empty_fields: int
    sparse_fields: int
    inconsistent_fields: int
    reduction_percentage: int

    @property
    def problematic_fields(self) -> int:
        return self.empty_fields + self.sparse_fields + self.inconsistent_fields


@dataclass(frozen=True)
class EnrichmentItem:
    key: str
    title: str
    description: str
    priority: str


def has_format_warning(field: Field) -> bool:
    return any(
        keyword in w.message.lower() for w in field.warnings for keyword in FORMAT_KEYWORDS
    )


def get_recommended_actions(
    report: Report,
    categories: FieldCategories,
    issue_stats: IssueStats,
) -> RecommendedActions | None:
    """
    Summarize fields worth cleaning up.

    Returns None when the report has no issues and no problematic fields.
    """
    empty = len(categories.empty)
    sparse = len(categories.critical)
    inconsistent = sum(1 for f in report.fields if has_format_warning(f))

    problematic = empty + sparse + inconsistent
    if issue_stats.total == 0 and problematic == 0:
        return None

    if report.total_fields > 0:
        reduction = (200 * problematic + report.total_fields) // (2 * report.total_fields)
    else:
        reduction = 0

    return RecommendedActions(
        empty_fields=empty,
        sparse_fields=sparse,
        inconsistent_fields=inconsistent,
        reduction_percentage=reduction,
    )


def _mentions(column: CriticalColumn, *keywords: str) -> bool:
    name = column.name.lower()
    return any(k in name for k in keywords)


def get_enrichment_opportunities(
    report: Report,
    columns: Sequence[CriticalColumn],
) -> list[EnrichmentItem]:
    """
    Enrichment strategies suggested by gaps in the critical columns.

    Returns an empty list when nothing in the report calls for enrichment.
    """
    revenue_missing = any(
        _mentions(c, "revenue") and c.fill_percentage < FINANCIAL_GAP_PERCENTAGE
        for c in columns
    )
    funding_missing = any(
        _mentions(c, "funding", "investment") and c.fill_percentage < FINANCIAL_GAP_PERCENTAGE
        for c in columns
    )
    contact_missing = any(
        _mentions(c, *CONTACT_KEYWORDS) and c.fill_percentage < CONTACT_GAP_PERCENTAGE
        for c in columns
    )
    industry_issues = any(
        _mentions(c, "industry") and (
            c.fill_percentage < INDUSTRY_GAP_PERCENTAGE or len(c.field.warnings) > 0
        )
        for c in columns
    )
    format_issues = any(has_format_warning(f) for f in report.fields)

    if not (
        revenue_missing or funding_missing or contact_missing or industry_issues or format_issues
    ):
        return []

    items = []

    if revenue_missing or funding_missing:
        items.append(
            EnrichmentItem(
                "discovery",
                "Data Discovery & Enrichment",
                "Fill critical gaps in revenue, funding, and financial data using premium data sources",
                "high",
            )
        )

    if contact_missing:
        items.append(
            EnrichmentItem(
                "contact",
                "Contact Information Gaps",
                "Contact information gaps detected; enrichment will improve outreach effectiveness",
                "high",
            )
        )

    if industry_issues or format_issues:
        items.append(
            EnrichmentItem(
                "standardization",
                "Standardization & Normalization",
                "Clean and standardize industry classifications, company sizes, and contact formats",
                "medium",
            )
        )

    empty_fields = sum(1 for f in report.fields if f.populated_count == 0)
    if empty_fields > CLEANUP_EMPTY_FIELDS:
        items.append(
            EnrichmentItem(
                "cleanup",
                "CRM Cleanup",
                f"Remove {empty_fields} unused fields to improve performance and user adoption",
                "medium",
            )
        )

    items.append(
        EnrichmentItem(
            "validation",
            "Quality Validation",
            "Implement ongoing data quality checks and validation rules",
            "low",
        )
    )
    items.append(
        EnrichmentItem(
            "reporting",
            "Results Reporting",
            "Provide detailed before/after analysis showing tangible improvements",
            "low",
        )
    )

    return items
