#!/usr/bin/env python3
"""
Enrichment Summary Flow
=======================
Loads an enrichment report by token and rolls up its column comparisons.

Usage:
    python -m crm_reports.flows.enrichment_summary --token <report-token>
"""

import argparse

from prefect import flow, get_run_logger
from prefect.events import emit_event

from crm_reports.analysis.summary import summarize_enrichment
from crm_reports.load.reports import get_enrichment_report_by_token


@flow(name="summarize-enrichment", log_prints=True)
def enrichment_summary_flow(token: str) -> dict:
    """
    Load an enrichment report and compute its rollup.

    Args:
        token: Enrichment report token

    Returns:
        Enrichment summary as a dict
    """
    logger = get_run_logger()
    logger.info(f"🚀 Starting summarize-enrichment flow for {token}")

    report = get_enrichment_report_by_token(token)
    summary = summarize_enrichment(report)
    result = summary.to_dict()

    emit_event(
        event="crm.enrichment.summarized",
        resource={"prefect.resource.id": f"crm-reports.enrichment.{report.token}"},
        payload={
            "totals": result["rollup"]["totals"],
            "data_improvement_rate": summary.data_improvement_rate,
            "coverage": summary.coverage,
        },
    )

    logger.info("✅ Enrichment summary complete")
    return result


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Summarize a CRM enrichment report")
    parser.add_argument("--token", required=True, help="Enrichment report token")
    args = parser.parse_args()

    result = enrichment_summary_flow(token=args.token)
    rollup = result["rollup"]

    print("\nSummary complete!")
    print(f"Data improvement rate: {result['data_improvement_rate']:.1f}%")
    print(f"Accuracy: {rollup['avg_before']:.1f}% → {rollup['avg_after']:.1f}%")


if __name__ == "__main__":
    main()
