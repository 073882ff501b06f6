"""
Tests for report models and severity normalization.
"""

from crm_reports.models import (
    ColumnComparisonStats,
    ColumnMapping,
    Field,
    FieldWarning,
    GlobalIssue,
    Severity,
    severity_sort_key,
)


class TestSeverityParse:
    def test_case_insensitive(self):
        assert Severity.parse("critical") is Severity.CRITICAL
        assert Severity.parse("High") is Severity.HIGH
        assert Severity.parse(" medium ") is Severity.MEDIUM
        assert Severity.parse("LOW") is Severity.LOW

    def test_member_passes_through(self):
        assert Severity.parse(Severity.HIGH) is Severity.HIGH

    def test_unrecognized_is_none(self):
        assert Severity.parse("urgent") is None
        assert Severity.parse("") is None
        assert Severity.parse(None) is None
        assert Severity.parse(3) is None

    def test_rank_order(self):
        ranks = [s.rank for s in (Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)]
        assert ranks == sorted(ranks)


class TestFromDict:
    def test_warning_normalizes_severity(self):
        w = FieldWarning.from_dict({"id": 7, "message": "Bad", "severity": "high", "type": "DATA_QUALITY"})
        assert w.id == "7"
        assert w.severity is Severity.HIGH
        assert w.type == "DATA_QUALITY"
        assert w.meta == {}

    def test_global_issue_keeps_meta(self):
        issue = GlobalIssue.from_dict(
            {"id": "g", "title": "T", "severity": "Low", "meta": {"affected_count": 4}}
        )
        assert issue.severity is Severity.LOW
        assert issue.meta == {"affected_count": 4}
        assert issue.description == ""

    def test_field_defaults(self):
        f = Field.from_dict({"id": "f", "column_name": "city"})
        assert f.populated_count == 0
        assert f.format_count is None
        assert f.warnings == ()

    def test_comparison_stats_defaults(self):
        stats = ColumnComparisonStats.from_dict({"added_new_data": 3, "fixed_data": 2})
        assert stats.improved == 5
        assert stats.total == 5
        assert stats.crm_format_count == 1
        assert stats.correct_percentage_before == 0.0

    def test_mapping_additional_columns(self):
        m = ColumnMapping.from_dict(
            {
                "id": "m",
                "crm_column": "Phone 1",
                "export_column": "phone",
                "is_many_to_one": True,
                "additional_crm_columns": ["Phone 2"],
                "confidence": 0.9,
            }
        )
        assert m.is_many_to_one is True
        assert m.additional_crm_columns == ("Phone 2",)
        assert m.comparison_stats is None


def test_severity_sort_key_most_severe_first():
    warnings = [
        FieldWarning(id="a", message="", severity=Severity.LOW),
        FieldWarning(id="b", message="", severity=None),
        FieldWarning(id="c", message="", severity=Severity.CRITICAL),
        FieldWarning(id="d", message="", severity=Severity.MEDIUM),
    ]
    ordered = sorted(warnings, key=severity_sort_key)
    assert [w.id for w in ordered] == ["c", "d", "a", "b"]
