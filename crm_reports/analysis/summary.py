"""
Report Summaries
================
Runs every derivation over a report snapshot and logs the headline numbers.
"""

from dataclasses import dataclass, field

from prefect import get_run_logger, task

from crm_reports.analysis.comparison import (
    ComparisonRollup,
    classify_mapping_trend,
    data_improvement_rate,
    enrichment_coverage,
    format_consolidated_mappings,
    format_relative_improvement,
    relative_improvement,
    rollup_comparison_stats,
)
from crm_reports.analysis.fields import (
    FieldCategories,
    field_population_series,
    get_critical_columns,
    get_fields_by_category,
)
from crm_reports.analysis.issues import (
    IssueStats,
    field_category_breakdown,
    get_issue_stats,
    severity_distribution,
)
from crm_reports.analysis.recommendations import (
    get_enrichment_opportunities,
    get_recommended_actions,
)
from crm_reports.analysis.scoring import calculate_data_quality_score, score_band
from crm_reports.config import get_settings
from crm_reports.models import EnrichmentReport, Report


@dataclass
class ReportSummary:
    """Derived values for one data-quality report."""

    token: str
    company_name: str
    score: int
    band: str
    categories: FieldCategories
    issue_stats: IssueStats
    breakdown: list = field(default_factory=list)
    severity_distribution: list = field(default_factory=list)
    population_series: list = field(default_factory=list)
    critical_columns: list = field(default_factory=list)
    recommended_actions: dict | None = None
    enrichment_opportunities: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "company_name": self.company_name,
            "score": self.score,
            "band": self.band,
            "categories": self.categories.to_dict(),
            "issue_stats": self.issue_stats.to_dict(),
            "breakdown": self.breakdown,
            "severity_distribution": self.severity_distribution,
            "population_series": self.population_series,
            "critical_columns": self.critical_columns,
            "recommended_actions": self.recommended_actions,
            "enrichment_opportunities": self.enrichment_opportunities,
        }


@dataclass
class EnrichmentSummary:
    """Derived values for one enrichment report."""

    token: str
    filename: str
    rollup: ComparisonRollup
    data_improvement_rate: float
    coverage: float
    trends: dict = field(default_factory=dict)
    relative_improvements: dict = field(default_factory=dict)
    format_consolidated: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "filename": self.filename,
            "rollup": self.rollup.to_dict(),
            "data_improvement_rate": self.data_improvement_rate,
            "coverage": self.coverage,
            "trends": self.trends,
            "relative_improvements": self.relative_improvements,
            "format_consolidated": self.format_consolidated,
        }


def build_report_summary(report: Report) -> ReportSummary:
    """Compute every derived value for a data-quality report."""
    settings = get_settings()
    critical_threshold = settings.critical_population_threshold
    good_threshold = settings.good_population_threshold

    score = calculate_data_quality_score(report)
    categories = get_fields_by_category(
        report.fields, report.total_records, critical_threshold, good_threshold
    )
    issue_stats = get_issue_stats(report)
    critical_columns = get_critical_columns(report, critical_threshold, good_threshold)
    actions = get_recommended_actions(report, categories, issue_stats)
    opportunities = get_enrichment_opportunities(report, critical_columns)

    return ReportSummary(
        token=report.token,
        company_name=report.company_name,
        score=score,
        band=score_band(score),
        categories=categories,
        issue_stats=issue_stats,
        breakdown=field_category_breakdown(categories, report.total_fields),
        severity_distribution=severity_distribution(issue_stats),
        population_series=field_population_series(report.fields, report.total_records),
        critical_columns=[
            {
                "category": c.category_slug,
                "name": c.name,
                "column_name": c.column_name,
                "fill_percentage": c.fill_percentage,
                "missing": c.missing,
                "alerts": [
                    {"id": a.id, "message": a.message, "level": a.level.value} for a in c.alerts
                ],
            }
            for c in critical_columns
        ],
        recommended_actions=(
            {
                "empty_fields": actions.empty_fields,
                "sparse_fields": actions.sparse_fields,
                "inconsistent_fields": actions.inconsistent_fields,
                "reduction_percentage": actions.reduction_percentage,
            }
            if actions
            else None
        ),
        enrichment_opportunities=[
            {"key": i.key, "title": i.title, "priority": i.priority} for i in opportunities
        ],
    )


def build_enrichment_summary(report: EnrichmentReport) -> EnrichmentSummary:
    """Compute every derived value for an enrichment report."""
    settings = get_settings()
    mappings = report.column_mappings

    trends = {}
    improvements = {}
    for m in mappings:
        stats = m.comparison_stats
        if stats:
            column = m.export_column or m.crm_column
            trend = classify_mapping_trend(stats, settings.improvement_rate_threshold)
            trends[column] = trend.value
            improvements[column] = format_relative_improvement(
                relative_improvement(
                    stats.correct_percentage_before, stats.correct_percentage_after
                )
            )

    return EnrichmentSummary(
        token=report.token,
        filename=report.filename,
        rollup=rollup_comparison_stats(mappings),
        data_improvement_rate=data_improvement_rate(mappings),
        coverage=enrichment_coverage(report.records_modified_count, report.total_rows),
        trends=trends,
        relative_improvements=improvements,
        format_consolidated=[m.export_column for m in format_consolidated_mappings(mappings)],
    )


@task(name="summarize-report")
def summarize_report(report: Report) -> ReportSummary:
    """
    Summarize a data-quality report.

    Args:
        report: Loaded report snapshot

    Returns:
        ReportSummary
    """
    logger = get_run_logger()
    logger.info(f"🔍 Summarizing report for {report.company_name}")

    summary = build_report_summary(report)

    logger.info(f"   Quality score: {summary.score}% ({summary.band})")
    for row in summary.breakdown:
        logger.info(f"   {row['label']}: {row['count']:,} ({row['percentage']}%)")
    stats = summary.issue_stats
    logger.info(
        f"   Issues: {stats.total:,} "
        f"(🚨 {stats.critical} critical, ⚠️  {stats.high} high, "
        f"{stats.medium} medium, {stats.low} low)"
    )
    if stats.unknown:
        logger.warning(f"⚠️  {stats.unknown} issues with unrecognized severity ignored")

    return summary


@task(name="summarize-enrichment")
def summarize_enrichment(report: EnrichmentReport) -> EnrichmentSummary:
    """
    Summarize an enrichment report.

    Args:
        report: Loaded enrichment report snapshot

    Returns:
        EnrichmentSummary
    """
    logger = get_run_logger()
    logger.info(f"🔍 Summarizing enrichment of {report.filename}")

    summary = build_enrichment_summary(report)
    rollup = summary.rollup

    logger.info(f"   Compared columns: {rollup.compared_columns}/{len(report.column_mappings)}")
    logger.info(
        f"   Added: {rollup.totals.added:,}, Fixed: {rollup.totals.fixed:,}, "
        f"Discarded: {rollup.totals.discarded:,}, Good: {rollup.totals.good:,}"
    )
    logger.info(
        f"   Accuracy: {rollup.avg_before:.1f}% → {rollup.avg_after:.1f}% "
        f"({format_relative_improvement(rollup.relative_improvement, signed=True)}%)"
    )
    logger.info(f"   Coverage: {summary.coverage:.1f}% of rows modified")

    return summary
