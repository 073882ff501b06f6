"""
Tests for field classification and alerts.
"""

import pytest
from conftest import make_field

from crm_reports.analysis.fields import (
    AlertLevel,
    PopulationCategory,
    classify_population,
    field_population_series,
    get_critical_columns,
    get_field_alerts,
    get_fields_by_category,
    population_rate,
    rounded_population_rate,
)
from crm_reports.models import FieldWarning, Report, Severity

# =============================================================================
# Population rate
# =============================================================================


class TestPopulationRate:
    def test_basic(self):
        assert population_rate(25, 100) == 25.0

    def test_zero_records(self):
        assert population_rate(10, 0) == 0.0

    def test_clamped(self):
        assert population_rate(150, 100) == 100.0

    def test_rounded_half_up(self):
        assert rounded_population_rate(1, 8) == 13
        assert rounded_population_rate(5, 8) == 63
        assert rounded_population_rate(1, 3) == 33

    def test_rounded_zero_records(self):
        assert rounded_population_rate(3, 0) == 0


class TestClassifyPopulation:
    @pytest.mark.parametrize(
        "rate,expected",
        [
            (0, PopulationCategory.EMPTY),
            (0.5, PopulationCategory.CRITICAL),
            (24.99, PopulationCategory.CRITICAL),
            (25, PopulationCategory.WARNING),
            (69.99, PopulationCategory.WARNING),
            (70, PopulationCategory.GOOD),
            (100, PopulationCategory.GOOD),
        ],
    )
    def test_boundaries(self, rate, expected):
        assert classify_population(rate) is expected

    def test_custom_good_threshold(self):
        assert classify_population(72, good_threshold=75) is PopulationCategory.WARNING


# =============================================================================
# Bucketing
# =============================================================================


class TestGetFieldsByCategory:
    def test_sample_report(self, sample_report):
        categories = get_fields_by_category(sample_report.fields, sample_report.total_records)
        names = categories.to_dict()
        assert names["empty"] == ["annual_revenue", "founded_year"]
        assert names["critical"] == ["employee_count"]
        assert names["warning"] == ["industry", "linkedin_url", "phone"]
        assert names["good"] == ["company_name", "website", "city", "country"]

    def test_partition(self, sample_report):
        categories = get_fields_by_category(sample_report.fields, sample_report.total_records)
        buckets = [categories.empty, categories.critical, categories.warning, categories.good]
        ids = [f.id for bucket in buckets for f in bucket]
        assert sorted(ids) == sorted(f.id for f in sample_report.fields)
        assert len(ids) == len(set(ids))
        assert sum(categories.counts()) == len(sample_report.fields)

    def test_zero_records_everything_empty(self):
        fields = [make_field("a", 0), make_field("b", 5)]
        categories = get_fields_by_category(fields, 0)
        assert categories.counts() == [2, 0, 0, 0]

    def test_no_fields(self):
        assert get_fields_by_category([], 100).counts() == [0, 0, 0, 0]


# =============================================================================
# Alerts
# =============================================================================


class TestGetFieldAlerts:
    def test_empty_column(self):
        alerts = get_field_alerts("revenue", 0)
        assert len(alerts) == 1
        assert alerts[0].id == "revenue-fill"
        assert alerts[0].message == "Completely empty"
        assert alerts[0].level is AlertLevel.CRITICAL

    def test_very_low_coverage(self):
        [alert] = get_field_alerts("revenue", 10)
        assert alert.message == "Very low data coverage"
        assert alert.level is AlertLevel.CRITICAL

    def test_incomplete(self):
        [alert] = get_field_alerts("revenue", 50)
        assert alert.message == "Incomplete data"
        assert alert.level is AlertLevel.WARNING

    def test_well_populated_has_no_population_alert(self):
        assert get_field_alerts("revenue", 70) == []

    def test_stored_warnings_are_additive(self):
        warnings = [
            FieldWarning(id="w1", message="Bad values", severity=Severity.CRITICAL),
            FieldWarning(id="w2", message="Mixed case", severity=Severity.HIGH),
            FieldWarning(id="w3", message="Odd", severity=Severity.LOW),
            FieldWarning(id="w4", message="???", severity=None),
        ]
        alerts = get_field_alerts("revenue", 0, warnings)
        assert [a.id for a in alerts] == ["revenue-fill", "w1", "w2", "w3", "w4"]
        assert [a.level for a in alerts] == [
            AlertLevel.CRITICAL,
            AlertLevel.CRITICAL,
            AlertLevel.WARNING,
            AlertLevel.INFO,
            AlertLevel.INFO,
        ]


# =============================================================================
# Chart series and critical columns
# =============================================================================


def test_field_population_series_sorted_desc(sample_report):
    series = field_population_series(sample_report.fields, sample_report.total_records)
    values = [row["value"] for row in series]
    assert values == sorted(values, reverse=True)
    assert series[0]["name"] == "company_name"
    # ties keep field order
    assert [row["name"] for row in series if row["value"] == 0] == [
        "annual_revenue",
        "founded_year",
    ]


def test_field_population_series_rounds_half_up():
    fields = (make_field("a", 1), make_field("b", 5))
    series = field_population_series(fields, total_records=8)
    assert {row["name"]: row["value"] for row in series} == {"a": 13, "b": 63}
    assert [row["name"] for row in series] == ["b", "a"]


class TestGetCriticalColumns:
    def test_resolves_config(self, sample_report):
        columns = get_critical_columns(sample_report)
        assert [(c.category_slug, c.name) for c in columns] == [
            ("company_info", "Company Name"),
            ("company_info", "Website"),
            ("financial_data", "Revenue"),
            ("financial_data", "Funding"),
        ]

    def test_present_column(self, sample_report):
        columns = {c.name: c for c in get_critical_columns(sample_report)}
        revenue = columns["Revenue"]
        assert revenue.fill_percentage == 0.0
        assert revenue.missing is False
        assert [a.message for a in revenue.alerts] == ["Completely empty", "Issue"]
        assert revenue.has_critical

        website = columns["Website"]
        assert website.fill_percentage == 70.0
        assert website.alerts == ()

    def test_missing_column_is_empty_placeholder(self, sample_report):
        funding = {c.name: c for c in get_critical_columns(sample_report)}["Funding"]
        assert funding.missing is True
        assert funding.field.column_name == "total_funding"
        assert funding.field.populated_count == 0
        assert funding.field.warnings == ()
        assert [a.message for a in funding.alerts] == ["Completely empty"]

    def test_no_config(self):
        report = Report(
            id="r", token="t", company_name="A", total_records=1, total_fields=0,
            fields_with_issues=0, config={},
        )
        assert get_critical_columns(report) == []

    def test_list_config_ignored(self):
        report = Report(
            id="r", token="t", company_name="A", total_records=1, total_fields=0,
            fields_with_issues=0, config={"criticalColumns": []},
        )
        assert get_critical_columns(report) == []
