"""
Issue Statistics
================
Severity histogram and percentage breakdowns that always add up to 100.
"""

from dataclasses import asdict, dataclass
from typing import Sequence

from crm_reports.analysis.fields import FieldCategories
from crm_reports.models import Report, Severity

CATEGORY_LABELS = ["Empty Fields", "Critical Fields", "Warning Fields", "Good Fields"]


@dataclass
class IssueStats:
    """Issue counts by severity. ``unknown`` holds unrecognized severities
    and is not part of ``total``."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0
    unknown: int = 0

    def add(self, severity: Severity | None) -> None:
        if severity is None:
            self.unknown += 1
            return
        name = severity.value.lower()
        setattr(self, name, getattr(self, name) + 1)
        self.total += 1

    def to_dict(self) -> dict:
        return asdict(self)


def get_issue_stats(report: Report) -> IssueStats:
    """
    Count global issues and field warnings by severity.

    Args:
        report: Report snapshot

    Returns:
        IssueStats with critical + high + medium + low == total
    """
    stats = IssueStats()

    for issue in report.global_issues:
        stats.add(issue.severity)

    for f in report.fields:
        for warning in f.warnings:
            stats.add(warning.severity)

    return stats


def reconcile_percentages(counts: Sequence[int], total: int) -> list[int]:
    """
    Whole percentages for ``counts`` out of ``total`` that sum to exactly 100.

    Each exact percentage is floored; the points lost to flooring go one each
    to the entries with the largest fractional part, earlier entries first on
    ties. Works on integer numerators so exact percentages are never nudged
    by float error.

    Args:
        counts: Category counts, expected to sum to ``total``
        total: Denominator; zero or less yields all zeros

    Returns:
        List of ints, one per count
    """
    if total <= 0:
        return [0] * len(counts)

    floors = []
    fractions = []
    for count in counts:
        whole, frac = divmod(count * 100, total)
        floors.append(whole)
        fractions.append(frac)

    remainder = 100 - sum(floors)
    if remainder <= 0:
        return floors

    order = sorted(range(len(counts)), key=lambda i: (-fractions[i], i))
    for i in order[:remainder]:
        floors[i] += 1

    return floors


def field_category_breakdown(categories: FieldCategories, total_fields: int) -> list[dict]:
    """Counts and reconciled percentages for the four population buckets."""
    counts = categories.counts()
    percentages = reconcile_percentages(counts, total_fields)
    return [
        {"label": label, "count": count, "percentage": pct}
        for label, count, pct in zip(CATEGORY_LABELS, counts, percentages)
    ]


def severity_distribution(stats: IssueStats) -> list[dict]:
    """Non-zero severities in descending order, for distribution charts."""
    rows = [
        {"label": "Critical", "value": stats.critical},
        {"label": "High", "value": stats.high},
        {"label": "Medium", "value": stats.medium},
        {"label": "Low", "value": stats.low},
    ]
    return [r for r in rows if r["value"] > 0]
