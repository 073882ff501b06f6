#!/usr/bin/env python3
"""
Report Summary Flow
===================
Loads a data-quality report by token and derives its summary.

Emits a Prefect event when the report scores below the configured minimum.

Usage:
    python -m crm_reports.flows.report_summary --token <report-token>
"""

import argparse

from prefect import flow, get_run_logger
from prefect.events import emit_event

from crm_reports.analysis.summary import summarize_report
from crm_reports.config import get_settings
from crm_reports.load.reports import get_report_by_token


@flow(name="summarize-report", log_prints=True)
def report_summary_flow(token: str) -> dict:
    """
    Load a report and compute its derived values.

    - Quality score and band
    - Field population buckets with reconciled percentages
    - Issue severity histogram
    - Critical columns, recommended actions, enrichment opportunities

    Args:
        token: Report token

    Returns:
        Report summary as a dict
    """
    logger = get_run_logger()
    settings = get_settings()
    logger.info(f"🚀 Starting summarize-report flow for {token}")

    report = get_report_by_token(token)
    summary = summarize_report(report)
    result = summary.to_dict()

    resource = {"prefect.resource.id": f"crm-reports.report.{report.token}"}
    if summary.score < settings.min_quality_score:
        logger.warning(
            f"❌ Low data quality: {summary.score}% (minimum {settings.min_quality_score}%)"
        )
        emit_event(
            event="crm.report.low-quality",
            resource=resource,
            payload={
                "score": summary.score,
                "min_quality_score": settings.min_quality_score,
                "issue_stats": summary.issue_stats.to_dict(),
            },
        )
    else:
        logger.info(f"✅ Data quality OK: {summary.score}%")
        emit_event(
            event="crm.report.summarized",
            resource=resource,
            payload={"score": summary.score, "band": summary.band},
        )

    return result


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Summarize a CRM data-quality report")
    parser.add_argument("--token", required=True, help="Report token")
    args = parser.parse_args()

    result = report_summary_flow(token=args.token)

    print("\nSummary complete!")
    print(f"Score: {result['score']}% ({result['band']})")
    print(f"Issues: {result['issue_stats']['total']}")


if __name__ == "__main__":
    main()
