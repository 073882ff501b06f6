"""
Pytest Configuration
====================
Shared fixtures for all tests.
"""

import os

import pytest

from crm_reports.models import (
    ColumnComparisonStats,
    ColumnMapping,
    Field,
    FieldWarning,
    GlobalIssue,
    Report,
    Severity,
)


@pytest.fixture(scope="session", autouse=True)
def set_test_env():
    """Set up test environment variables before any tests run."""
    os.environ["SUPABASE_URL"] = os.environ.get("SUPABASE_URL", "https://test.supabase.co")
    os.environ["SUPABASE_SERVICE_KEY"] = os.environ.get("SUPABASE_SERVICE_KEY", "test-key")
    os.environ["ENVIRONMENT"] = os.environ.get("ENVIRONMENT", "dev")

    # Clear any cached settings
    from crm_reports.config import get_settings

    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Provide settings instance for tests."""
    from crm_reports.config import get_settings

    return get_settings()


def make_field(name: str, populated: int, *severities: str, message: str = "Issue") -> Field:
    """Field with one stored warning per severity given."""
    warnings = tuple(
        FieldWarning(id=f"{name}-w{i}", message=message, severity=Severity.parse(s))
        for i, s in enumerate(severities)
    )
    return Field(id=f"f-{name}", column_name=name, populated_count=populated, warnings=warnings)


def make_mapping(export_column: str | None, crm_column: str = "", **stats) -> ColumnMapping:
    """Column mapping; comparison stats are attached only when keyword stats are given."""
    return ColumnMapping(
        id=f"m-{crm_column or export_column}",
        crm_column=crm_column or (export_column or ""),
        export_column=export_column,
        comparison_stats=ColumnComparisonStats(**stats) if stats else None,
    )


@pytest.fixture
def sample_report() -> Report:
    """Ten fields over 100 records, three of them with stored warnings."""
    fields = (
        make_field("annual_revenue", 0, "CRITICAL"),
        make_field("company_name", 100),
        make_field("employee_count", 10, "HIGH"),
        make_field("industry", 50, "medium", message="Inconsistent format"),
        make_field("linkedin_url", 30),
        make_field("phone", 69),
        make_field("website", 70),
        make_field("city", 95),
        make_field("country", 99),
        make_field("founded_year", 0),
    )
    issues = (
        GlobalIssue(id="g1", title="Duplicates", description="", severity=Severity.HIGH),
        GlobalIssue(id="g2", title="Stale", description="", severity=Severity.LOW),
    )
    return Report(
        id="r1",
        token="tok-123",
        company_name="Acme",
        total_records=100,
        total_fields=10,
        fields_with_issues=3,
        config={
            "criticalColumns": {
                "company_info": {"Company Name": "company_name", "Website": "website"},
                "financial_data": {"Revenue": "annual_revenue", "Funding": "total_funding"},
            }
        },
        fields=fields,
        global_issues=issues,
    )
