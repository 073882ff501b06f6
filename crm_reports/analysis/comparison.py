"""
Comparison Rollup
=================
Dataset-wide totals and averages over per-column before/after statistics.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from crm_reports.models import ColumnComparisonStats, ColumnMapping

IMPROVEMENT_RATE_THRESHOLD = 0.1

# Relative improvement when there was nothing correct before
INFINITE_IMPROVEMENT = math.inf


class MappingTrend(str, Enum):
    IMPROVED = "improved"
    REGRESSED = "regressed"
    NEUTRAL = "neutral"


@dataclass
class ComparisonTotals:
    added: int = 0
    fixed: int = 0
    discarded: int = 0
    good: int = 0

    @property
    def total_changes(self) -> int:
        return self.added + self.fixed + self.discarded + self.good

    def shares(self) -> dict[str, float]:
        """Each bucket as a percentage of all changes; zeros when there are none."""
        total = self.total_changes
        if total == 0:
            return {"added": 0.0, "fixed": 0.0, "discarded": 0.0, "good": 0.0}
        return {
            "added": self.added / total * 100,
            "fixed": self.fixed / total * 100,
            "discarded": self.discarded / total * 100,
            "good": self.good / total * 100,
        }


@dataclass
class ComparisonRollup:
    totals: ComparisonTotals = field(default_factory=ComparisonTotals)
    avg_before: float = 0.0
    avg_after: float = 0.0
    compared_columns: int = 0

    @property
    def improvement(self) -> float:
        """Average accuracy gain in percentage points."""
        return self.avg_after - self.avg_before

    @property
    def relative_improvement(self) -> float:
        return relative_improvement(self.avg_before, self.avg_after)

    def to_dict(self) -> dict:
        return {
            "totals": {
                "added": self.totals.added,
                "fixed": self.totals.fixed,
                "discarded": self.totals.discarded,
                "good": self.totals.good,
                "total_changes": self.totals.total_changes,
            },
            "avg_before": self.avg_before,
            "avg_after": self.avg_after,
            "compared_columns": self.compared_columns,
            "improvement": self.improvement,
            "relative_improvement": format_relative_improvement(self.relative_improvement),
        }


def relative_improvement(before: float, after: float) -> float:
    """
    Accuracy gain relative to the starting accuracy, in percent.

    Returns INFINITE_IMPROVEMENT when ``before`` is zero, whatever ``after``
    is, so callers can tell it apart from a 0% change.
    """
    if before <= 0:
        return INFINITE_IMPROVEMENT
    return (after - before) / before * 100


def format_relative_improvement(value: float, signed: bool = False) -> str:
    """One decimal, or "∞"; ``signed`` prefixes the sign of the change."""
    if math.isinf(value):
        return "+∞" if signed else "∞"
    return f"{value:+.1f}" if signed else f"{value:.1f}"


def rollup_comparison_stats(column_mappings: Iterable[ColumnMapping]) -> ComparisonRollup:
    """
    Aggregate comparison statistics across column mappings.

    Mappings without comparison stats are skipped: they add nothing to the
    totals and are not counted in the accuracy averages.

    Args:
        column_mappings: Mappings of one enrichment report

    Returns:
        ComparisonRollup; averages are 0 when no mapping has stats
    """
    totals = ComparisonTotals()
    before_sum = 0.0
    after_sum = 0.0
    compared = 0

    for mapping in column_mappings:
        stats = mapping.comparison_stats
        if stats is None:
            continue

        totals.added += stats.added_new_data
        totals.fixed += stats.fixed_data
        totals.discarded += stats.discarded_invalid_data
        totals.good += stats.good_data
        before_sum += stats.correct_percentage_before
        after_sum += stats.correct_percentage_after
        compared += 1

    if compared == 0:
        return ComparisonRollup(totals=totals)

    return ComparisonRollup(
        totals=totals,
        avg_before=before_sum / compared,
        avg_after=after_sum / compared,
        compared_columns=compared,
    )


def improvement_rate(stats: ColumnComparisonStats) -> float:
    """Improved (added + fixed) share of all compared values, 0-1."""
    total = stats.total
    return stats.improved / total if total > 0 else 0.0


def classify_mapping_trend(
    stats: ColumnComparisonStats,
    threshold: float = IMPROVEMENT_RATE_THRESHOLD,
) -> MappingTrend:
    """
    Three-way direction of change for one column.

    Improved when more than ``threshold`` of its values were added or fixed,
    otherwise regressed when more values were discarded than added.
    """
    if improvement_rate(stats) > threshold:
        return MappingTrend.IMPROVED
    if stats.discarded_invalid_data > stats.added_new_data:
        return MappingTrend.REGRESSED
    return MappingTrend.NEUTRAL


def data_improvement_rate(column_mappings: Sequence[ColumnMapping]) -> float:
    """
    Mean improvement rate over all mappings, as a percentage.

    Mappings without stats count as 0 but stay in the denominator.
    """
    if not column_mappings:
        return 0.0
    rates = sum(
        improvement_rate(m.comparison_stats) for m in column_mappings if m.comparison_stats
    )
    return rates / len(column_mappings) * 100


def enrichment_coverage(records_modified: int, total_rows: int) -> float:
    """Share of rows touched by enrichment, as a percentage."""
    if total_rows <= 0:
        return 0.0
    return records_modified / total_rows * 100


def format_consolidated_mappings(column_mappings: Iterable[ColumnMapping]) -> list[ColumnMapping]:
    """Mappings whose export column settled on fewer formats than the CRM used."""
    return [
        m
        for m in column_mappings
        if m.comparison_stats
        and m.comparison_stats.crm_format_count > 1
        and m.comparison_stats.crm_format_count > m.comparison_stats.export_format_count
    ]
