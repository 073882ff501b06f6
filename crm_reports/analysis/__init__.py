"""
Analysis Layer
==============
Pure derivations over report snapshots: scores, buckets, histograms, rollups.
"""

from crm_reports.analysis.comparison import (
    ComparisonRollup,
    MappingTrend,
    classify_mapping_trend,
    relative_improvement,
    rollup_comparison_stats,
)
from crm_reports.analysis.fields import (
    FieldCategories,
    PopulationCategory,
    get_critical_columns,
    get_field_alerts,
    get_fields_by_category,
    population_rate,
)
from crm_reports.analysis.issues import IssueStats, get_issue_stats, reconcile_percentages
from crm_reports.analysis.scoring import calculate_data_quality_score

__all__ = [
    "ComparisonRollup",
    "FieldCategories",
    "IssueStats",
    "MappingTrend",
    "PopulationCategory",
    "calculate_data_quality_score",
    "classify_mapping_trend",
    "get_critical_columns",
    "get_field_alerts",
    "get_fields_by_category",
    "get_issue_stats",
    "population_rate",
    "reconcile_percentages",
    "relative_improvement",
    "rollup_comparison_stats",
]
