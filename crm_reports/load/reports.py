"""
Report Loader
=============
Fetches report snapshots by token from Supabase.

Reads are split from assembly: ``read_*`` functions hit the database,
``build_*`` functions turn rows into immutable snapshots.
"""

from datetime import datetime

from prefect import get_run_logger, task

from crm_reports.db import read_one, read_table
from crm_reports.models import (
    ColumnComparisonStats,
    ColumnMapping,
    EnrichmentReport,
    Field,
    FieldWarning,
    GlobalIssue,
    Report,
    severity_sort_key,
)

REPORT_TABLE = "Report"
FIELD_TABLE = "Field"
WARNING_TABLE = "Warning"
GLOBAL_ISSUE_TABLE = "GlobalIssue"
ENRICHMENT_REPORT_TABLE = "EnrichmentReport"
COLUMN_MAPPING_TABLE = "ColumnMapping"
COMPARISON_STATS_TABLE = "ColumnComparisonStats"


class ReportNotFoundError(LookupError):
    """No report exists for the given token."""

    def __init__(self, kind: str, token: str):
        super().__init__(f"{kind} not found: {token}")
        self.kind = kind
        self.token = token


def _pick(row: dict, *keys: str, default=None):
    """First present key; report rows may use snake_case or camelCase columns."""
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return default


def _parse_timestamp(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _require_token(token: str) -> str:
    if not token or not token.strip():
        raise ValueError("Report token is required")
    return token.strip()


# =============================================================================
# Assembly (pure)
# =============================================================================


def build_report(
    report_row: dict,
    field_rows: list[dict],
    warning_rows: list[dict],
    issue_rows: list[dict],
) -> Report:
    """
    Assemble a Report snapshot from its table rows.

    Fields are ordered by column name; warnings and global issues by
    severity, most severe first.

    Args:
        report_row: Row from the Report table
        field_rows: Rows from the Field table for this report
        warning_rows: Rows from the Warning table for those fields
        issue_rows: Rows from the GlobalIssue table for this report

    Returns:
        Report
    """
    warnings_by_field: dict[str, list[FieldWarning]] = {}
    for row in warning_rows:
        field_id = str(_pick(row, "field_id", "fieldId", default=""))
        warnings_by_field.setdefault(field_id, []).append(FieldWarning.from_dict(row))

    fields = []
    for row in sorted(field_rows, key=lambda r: r["column_name"]):
        warnings = sorted(warnings_by_field.get(str(row.get("id", "")), []), key=severity_sort_key)
        fields.append(Field.from_dict(row, warnings))

    issues = sorted((GlobalIssue.from_dict(r) for r in issue_rows), key=severity_sort_key)

    return Report(
        id=str(report_row.get("id", "")),
        token=report_row.get("token", ""),
        company_name=_pick(report_row, "company_name", "companyName", default=""),
        total_records=int(_pick(report_row, "total_records", "totalRecords", default=0)),
        total_fields=int(_pick(report_row, "total_fields", "totalFields", default=0)),
        fields_with_issues=int(
            _pick(report_row, "fields_with_issues", "fieldsWithIssues", default=0)
        ),
        generated_at=_parse_timestamp(_pick(report_row, "generated_at", "generatedAt")),
        config=report_row.get("config") or {},
        fields=tuple(fields),
        global_issues=tuple(issues),
    )


def dedupe_column_mappings(mappings: list[ColumnMapping]) -> list[ColumnMapping]:
    """
    Drop mappings without an export column, and repeat export columns.

    The first mapping for each export column wins.
    """
    seen: set[str] = set()
    unique = []
    for mapping in mappings:
        if not mapping.export_column:
            continue
        if mapping.export_column in seen:
            continue
        seen.add(mapping.export_column)
        unique.append(mapping)
    return unique


def build_enrichment_report(
    report_row: dict,
    mapping_rows: list[dict],
    stats_rows: list[dict],
) -> EnrichmentReport:
    """
    Assemble an EnrichmentReport snapshot from its table rows.

    Mappings are ordered by CRM column and deduplicated on export column.

    Args:
        report_row: Row from the EnrichmentReport table
        mapping_rows: Rows from the ColumnMapping table for this report
        stats_rows: Rows from the ColumnComparisonStats table for those mappings

    Returns:
        EnrichmentReport
    """
    stats_by_mapping = {
        str(row["column_mapping_id"]): ColumnComparisonStats.from_dict(row) for row in stats_rows
    }

    mappings = [
        ColumnMapping.from_dict(row, stats_by_mapping.get(str(row.get("id", ""))))
        for row in sorted(mapping_rows, key=lambda r: r["crm_column"])
    ]

    return EnrichmentReport(
        id=str(report_row.get("id", "")),
        token=report_row.get("token", ""),
        filename=report_row.get("filename") or "",
        total_rows=int(report_row.get("total_rows") or 0),
        created_at=_parse_timestamp(report_row.get("created_at")),
        total_crm_columns=int(report_row.get("total_crm_columns") or 0),
        total_export_columns=int(report_row.get("total_export_columns") or 0),
        new_columns_count=int(report_row.get("new_columns_count") or 0),
        many_to_one_count=int(report_row.get("many_to_one_count") or 0),
        columns_reduced_by_merging=int(report_row.get("columns_reduced_by_merging") or 0),
        records_modified_count=int(report_row.get("records_modified_count") or 0),
        export_columns_created=int(report_row.get("export_columns_created") or 0),
        column_mappings=tuple(dedupe_column_mappings(mappings)),
    )


# =============================================================================
# Reads
# =============================================================================


def read_report_rows(token: str) -> tuple[dict, list[dict], list[dict], list[dict]]:
    """
    Read a report and its related rows.

    Returns:
        Tuple of (report_row, field_rows, warning_rows, issue_rows)

    Raises:
        ReportNotFoundError: No report has this token
    """
    report_row = read_one(REPORT_TABLE, {"token": token})
    if report_row is None:
        raise ReportNotFoundError("Report", token)

    report_id = report_row["id"]
    field_rows = read_table(FIELD_TABLE, filters={"report_id": report_id}, order_by="column_name")
    field_ids = [row["id"] for row in field_rows]

    # An empty IN list is not valid PostgREST syntax
    warning_rows = (
        read_table(WARNING_TABLE, in_filters={"field_id": field_ids}) if field_ids else []
    )
    issue_rows = read_table(GLOBAL_ISSUE_TABLE, filters={"report_id": report_id})

    return report_row, field_rows, warning_rows, issue_rows


def read_enrichment_rows(token: str) -> tuple[dict, list[dict], list[dict]]:
    """
    Read an enrichment report and its related rows.

    Returns:
        Tuple of (report_row, mapping_rows, stats_rows)

    Raises:
        ReportNotFoundError: No enrichment report has this token
    """
    report_row = read_one(ENRICHMENT_REPORT_TABLE, {"token": token})
    if report_row is None:
        raise ReportNotFoundError("Enrichment report", token)

    mapping_rows = read_table(
        COLUMN_MAPPING_TABLE,
        filters={"enrichment_report_id": report_row["id"]},
        order_by="crm_column",
    )
    mapping_ids = [row["id"] for row in mapping_rows]
    stats_rows = (
        read_table(COMPARISON_STATS_TABLE, in_filters={"column_mapping_id": mapping_ids})
        if mapping_ids
        else []
    )

    return report_row, mapping_rows, stats_rows


@task(name="load-report")
def get_report_by_token(token: str) -> Report:
    """
    Load a data-quality report snapshot.

    Args:
        token: Report token

    Returns:
        Report
    """
    logger = get_run_logger()
    token = _require_token(token)
    logger.info(f"📥 Loading report {token}")

    report_row, field_rows, warning_rows, issue_rows = read_report_rows(token)
    report = build_report(report_row, field_rows, warning_rows, issue_rows)

    logger.info(
        f"   {len(report.fields):,} fields, {len(warning_rows):,} warnings, "
        f"{len(report.global_issues):,} global issues"
    )
    return report


@task(name="load-enrichment-report")
def get_enrichment_report_by_token(token: str) -> EnrichmentReport:
    """
    Load an enrichment report snapshot.

    Args:
        token: Enrichment report token

    Returns:
        EnrichmentReport
    """
    logger = get_run_logger()
    token = _require_token(token)
    logger.info(f"📥 Loading enrichment report {token}")

    report_row, mapping_rows, stats_rows = read_enrichment_rows(token)
    report = build_enrichment_report(report_row, mapping_rows, stats_rows)

    dropped = len(mapping_rows) - len(report.column_mappings)
    logger.info(
        f"   {len(report.column_mappings):,} column mappings "
        f"({dropped} without or with duplicate export column dropped)"
    )
    return report
