"""
Field Classification
====================
Population-rate buckets, per-field alerts and critical-column lookup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from crm_reports.models import Field, FieldWarning, Report, Severity

CRITICAL_POPULATION_THRESHOLD = 25.0
GOOD_POPULATION_THRESHOLD = 70.0


class PopulationCategory(str, Enum):
    EMPTY = "empty"
    CRITICAL = "critical"
    WARNING = "warning"
    GOOD = "good"


class AlertLevel(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


# Stored warning severities folded onto the three alert levels
_ALERT_LEVELS = {
    Severity.CRITICAL: AlertLevel.CRITICAL,
    Severity.HIGH: AlertLevel.WARNING,
    Severity.MEDIUM: AlertLevel.WARNING,
    Severity.LOW: AlertLevel.INFO,
}


@dataclass(frozen=True)
class FieldCategories:
    """Partition of a report's fields by population rate."""

    empty: tuple[Field, ...] = ()
    critical: tuple[Field, ...] = ()
    warning: tuple[Field, ...] = ()
    good: tuple[Field, ...] = ()

    def counts(self) -> list[int]:
        """Bucket sizes in display order: empty, critical, warning, good."""
        return [len(self.empty), len(self.critical), len(self.warning), len(self.good)]

    def to_dict(self) -> dict:
        return {
            "empty": [f.column_name for f in self.empty],
            "critical": [f.column_name for f in self.critical],
            "warning": [f.column_name for f in self.warning],
            "good": [f.column_name for f in self.good],
        }


@dataclass(frozen=True)
class FieldAlert:
    id: str
    message: str
    level: AlertLevel


@dataclass(frozen=True)
class CriticalColumn:
    """A configured column of interest, resolved against the report's fields."""

    category_slug: str
    name: str
    column_name: str
    fill_percentage: float
    field: Field
    alerts: tuple[FieldAlert, ...]
    missing: bool = False

    @property
    def has_critical(self) -> bool:
        return any(a.level is AlertLevel.CRITICAL for a in self.alerts)


def population_rate(populated_count: int, total_records: int) -> float:
    """Populated share of records as a percentage; 0 when there are no records."""
    if total_records <= 0:
        return 0.0
    rate = populated_count / total_records * 100
    return max(0.0, min(100.0, rate))


def rounded_population_rate(populated_count: int, total_records: int) -> int:
    """Population rate rounded half up to a whole percent."""
    if total_records <= 0:
        return 0
    populated = max(0, min(total_records, populated_count))
    return (200 * populated + total_records) // (2 * total_records)


def classify_population(
    rate: float,
    critical_threshold: float = CRITICAL_POPULATION_THRESHOLD,
    good_threshold: float = GOOD_POPULATION_THRESHOLD,
) -> PopulationCategory:
    """Bucket a population rate."""
    if rate == 0:
        return PopulationCategory.EMPTY
    if rate < critical_threshold:
        return PopulationCategory.CRITICAL
    if rate < good_threshold:
        return PopulationCategory.WARNING
    return PopulationCategory.GOOD


def get_fields_by_category(
    fields: Iterable[Field],
    total_records: int,
    critical_threshold: float = CRITICAL_POPULATION_THRESHOLD,
    good_threshold: float = GOOD_POPULATION_THRESHOLD,
) -> FieldCategories:
    """
    Partition fields into empty / critical / warning / good.

    Every field lands in exactly one bucket; input order is kept within
    each bucket.

    Args:
        fields: Fields to classify
        total_records: Record count the population rate is measured against
        critical_threshold: Rate below which a populated field is critical
        good_threshold: Rate from which a field is good

    Returns:
        FieldCategories
    """
    buckets: dict[PopulationCategory, list[Field]] = {c: [] for c in PopulationCategory}

    for f in fields:
        rate = population_rate(f.populated_count, total_records)
        buckets[classify_population(rate, critical_threshold, good_threshold)].append(f)

    return FieldCategories(
        empty=tuple(buckets[PopulationCategory.EMPTY]),
        critical=tuple(buckets[PopulationCategory.CRITICAL]),
        warning=tuple(buckets[PopulationCategory.WARNING]),
        good=tuple(buckets[PopulationCategory.GOOD]),
    )


def alert_level(severity: Severity | None) -> AlertLevel:
    return _ALERT_LEVELS.get(severity, AlertLevel.INFO)


def get_field_alerts(
    column_name: str,
    fill_percentage: float,
    warnings: Iterable[FieldWarning] = (),
    critical_threshold: float = CRITICAL_POPULATION_THRESHOLD,
    good_threshold: float = GOOD_POPULATION_THRESHOLD,
) -> list[FieldAlert]:
    """
    Alerts for one column: a synthesized population alert followed by the
    stored warnings.

    Args:
        column_name: Column the alerts belong to
        fill_percentage: Population rate of the column (0-100)
        warnings: Stored warnings for the column
        critical_threshold: Rate below which coverage is "very low"
        good_threshold: Rate below which data is "incomplete"

    Returns:
        List of FieldAlert, population alert first when present
    """
    alerts = []
    fill_id = f"{column_name}-fill"

    if fill_percentage == 0:
        alerts.append(FieldAlert(fill_id, "Completely empty", AlertLevel.CRITICAL))
    elif fill_percentage < critical_threshold:
        alerts.append(FieldAlert(fill_id, "Very low data coverage", AlertLevel.CRITICAL))
    elif fill_percentage < good_threshold:
        alerts.append(FieldAlert(fill_id, "Incomplete data", AlertLevel.WARNING))

    for w in warnings:
        alerts.append(FieldAlert(w.id, w.message, alert_level(w.severity)))

    return alerts


def field_population_series(fields: Iterable[Field], total_records: int) -> list[dict]:
    """Per-field chart rows, highest population rate first."""
    rows = [
        {
            "name": f.column_name,
            "value": rounded_population_rate(f.populated_count, total_records),
            "populated_count": f.populated_count,
            "warnings": len(f.warnings),
        }
        for f in fields
    ]
    # sorted() is stable, ties keep field order
    return sorted(rows, key=lambda r: r["value"], reverse=True)


def get_critical_columns(
    report: Report,
    critical_threshold: float = CRITICAL_POPULATION_THRESHOLD,
    good_threshold: float = GOOD_POPULATION_THRESHOLD,
) -> list[CriticalColumn]:
    """
    Resolve the report's ``criticalColumns`` config against its fields.

    The config maps category slug → display name → column name. A column
    that is not among the report's fields is resolved to an empty
    placeholder field (0% populated, no stored warnings).

    Args:
        report: Report snapshot
        critical_threshold: Passed through to the alert thresholds
        good_threshold: Passed through to the alert thresholds

    Returns:
        Resolved columns in config order
    """
    config = report.config if isinstance(report.config, dict) else {}
    critical = config.get("criticalColumns") or config.get("critical_columns") or {}
    if not isinstance(critical, dict):
        return []

    columns = []
    for category_slug, entries in critical.items():
        if not isinstance(entries, dict):
            continue
        for name, column_name in entries.items():
            field = report.get_field(column_name)
            missing = field is None
            if field is None:
                field = Field(id="", column_name=column_name, populated_count=0)

            fill = population_rate(field.populated_count, report.total_records)
            columns.append(
                CriticalColumn(
                    category_slug=category_slug,
                    name=name,
                    column_name=column_name,
                    fill_percentage=fill,
                    field=field,
                    alerts=tuple(
                        get_field_alerts(
                            column_name, fill, field.warnings, critical_threshold, good_threshold
                        )
                    ),
                    missing=missing,
                )
            )

    return columns
