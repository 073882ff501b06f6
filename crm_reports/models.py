"""
Report Models
=============
Read-only snapshots of the report tables.

Records are normalized once at the loading boundary: severities become
``Severity`` members (or None when unrecognized), nested collections become
tuples.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Issue severity, ordered LOW < MEDIUM < HIGH < CRITICAL."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, value: Any) -> "Severity | None":
        """Case-insensitive lookup. Returns None for anything outside the enum."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


def severity_sort_key(item: "FieldWarning | GlobalIssue") -> int:
    """Sort key putting the most severe first; unknown severities last."""
    return -(item.severity.rank if item.severity else -1)


@dataclass(frozen=True)
class FieldWarning:
    """A stored warning attached to a field."""

    id: str
    message: str
    severity: Severity | None
    type: str = "OTHER"
    meta: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "FieldWarning":
        return cls(
            id=str(data.get("id", "")),
            message=data.get("message") or "",
            severity=Severity.parse(data.get("severity")),
            type=data.get("type") or "OTHER",
            meta=data.get("meta") or {},
        )


@dataclass(frozen=True)
class GlobalIssue:
    """A report-wide issue not tied to a single field."""

    id: str
    title: str
    description: str
    severity: Severity | None
    meta: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "GlobalIssue":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            severity=Severity.parse(data.get("severity")),
            meta=data.get("meta") or {},
        )


@dataclass(frozen=True)
class Field:
    """Per-column profile of the source CRM export."""

    id: str
    column_name: str
    populated_count: int
    inferred_type: str = ""
    format_count: int | None = None
    warnings: tuple[FieldWarning, ...] = ()

    @classmethod
    def from_dict(cls, data: dict, warnings: list[FieldWarning] | None = None) -> "Field":
        return cls(
            id=str(data.get("id", "")),
            column_name=data["column_name"],
            populated_count=int(data.get("populated_count") or 0),
            inferred_type=data.get("inferred_type") or "",
            format_count=data.get("format_count"),
            warnings=tuple(warnings or ()),
        )


@dataclass(frozen=True)
class Report:
    """Data-quality report for one CRM dataset."""

    id: str
    token: str
    company_name: str
    total_records: int
    total_fields: int
    fields_with_issues: int
    generated_at: datetime | None = None
    config: dict = field(default_factory=dict)
    fields: tuple[Field, ...] = ()
    global_issues: tuple[GlobalIssue, ...] = ()

    def get_field(self, column_name: str) -> Field | None:
        for f in self.fields:
            if f.column_name == column_name:
                return f
        return None


@dataclass(frozen=True)
class ColumnComparisonStats:
    """Before/after comparison of one CRM column against its export column."""

    added_new_data: int = 0
    fixed_data: int = 0
    discarded_invalid_data: int = 0
    good_data: int = 0
    not_found: int = 0
    correct_percentage_before: float = 0.0
    correct_percentage_after: float = 0.0
    crm_format_count: int = 1
    export_format_count: int = 1

    @property
    def improved(self) -> int:
        return self.added_new_data + self.fixed_data

    @property
    def total(self) -> int:
        return self.discarded_invalid_data + self.improved + self.good_data

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnComparisonStats":
        return cls(
            added_new_data=int(data.get("added_new_data") or 0),
            fixed_data=int(data.get("fixed_data") or 0),
            discarded_invalid_data=int(data.get("discarded_invalid_data") or 0),
            good_data=int(data.get("good_data") or 0),
            not_found=int(data.get("not_found") or 0),
            correct_percentage_before=float(data.get("correct_percentage_before") or 0.0),
            correct_percentage_after=float(data.get("correct_percentage_after") or 0.0),
            crm_format_count=int(data.get("crm_format_count") or 1),
            export_format_count=int(data.get("export_format_count") or 1),
        )


@dataclass(frozen=True)
class ColumnMapping:
    """Mapping of a CRM column onto an export column."""

    id: str
    crm_column: str
    export_column: str | None
    is_many_to_one: bool = False
    additional_crm_columns: tuple[str, ...] = ()
    confidence: float = 0.0
    reasoning: str = ""
    comparison_stats: ColumnComparisonStats | None = None

    @classmethod
    def from_dict(
        cls, data: dict, comparison_stats: ColumnComparisonStats | None = None
    ) -> "ColumnMapping":
        return cls(
            id=str(data.get("id", "")),
            crm_column=data["crm_column"],
            export_column=data.get("export_column"),
            is_many_to_one=bool(data.get("is_many_to_one")),
            additional_crm_columns=tuple(data.get("additional_crm_columns") or ()),
            confidence=float(data.get("confidence") or 0.0),
            reasoning=data.get("reasoning") or "",
            comparison_stats=comparison_stats,
        )


@dataclass(frozen=True)
class EnrichmentReport:
    """Result of enriching a CRM export, column by column."""

    id: str
    token: str
    filename: str
    total_rows: int
    created_at: datetime | None = None
    total_crm_columns: int = 0
    total_export_columns: int = 0
    new_columns_count: int = 0
    many_to_one_count: int = 0
    columns_reduced_by_merging: int = 0
    records_modified_count: int = 0
    export_columns_created: int = 0
    column_mappings: tuple[ColumnMapping, ...] = ()
