"""
Quality Score
=============
Overall 0-100 data-quality score for a report.
"""

from crm_reports.models import Report

GOOD_SCORE = 80
FAIR_SCORE = 60


def calculate_data_quality_score(report: Report) -> int:
    """
    Share of fields without issues, as a whole percentage.

    Rounds half up. A report with no fields scores 0.

    Args:
        report: Report snapshot

    Returns:
        Score in [0, 100]
    """
    total = report.total_fields
    if total <= 0:
        return 0

    clean = total - report.fields_with_issues
    # floor(clean / total * 100 + 0.5) in integer arithmetic
    score = (200 * clean + total) // (2 * total)
    return max(0, min(100, score))


def score_band(score: int) -> str:
    """Map a score to 'good', 'fair' or 'poor'."""
    if score >= GOOD_SCORE:
        return "good"
    if score >= FAIR_SCORE:
        return "fair"
    return "poor"
