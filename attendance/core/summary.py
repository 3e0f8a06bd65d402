"""Aggregation of subject records into totals and projections."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from attendance.core.calculator import (
    calculate_absent,
    calculate_percentage,
    calculate_projection,
)

# Targets offered by the projections panel and the advisor
SUPPORTED_TARGETS: tuple[int, ...] = (75, 85)
DEFAULT_TARGET = 75


@dataclass(frozen=True)
class SubjectRecord:
    """Snapshot of one subject as pushed to subscribers.

    Attributes:
        id: Opaque identifier assigned by the store.
        name: Subject name.
        type: Free-text category such as "Lecture" or "Lab".
        conducted: Classes held.
        present: Classes attended.
    """

    id: str
    name: str
    type: str
    conducted: int = 0
    present: int = 0

    @property
    def percentage(self) -> float:
        return calculate_percentage(self.present, self.conducted)

    @property
    def absent(self) -> int:
        return calculate_absent(self.present, self.conducted)

    def to_dict(self) -> dict[str, Any]:
        """Convert record to its wire representation."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "conducted": self.conducted,
            "present": self.present,
        }

    @classmethod
    def from_source(cls, source: Any) -> "SubjectRecord":
        """Build a record from an ORM row, a record or a mapping."""
        return cls(
            id=str(_read(source, "id") or ""),
            name=_read(source, "name") or "",
            type=_read(source, "type") or "",
            conducted=_count(source, "conducted"),
            present=_count(source, "present"),
        )


@dataclass(frozen=True)
class Summary:
    """Totals across every subject of one identity."""

    total_conducted: int = 0
    total_present: int = 0
    overall_percentage: float = 0.0

    @property
    def total_absent(self) -> int:
        # Not clamped: the overall row shows the raw difference
        return self.total_conducted - self.total_present

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_conducted": self.total_conducted,
            "total_present": self.total_present,
            "total_absent": self.total_absent,
            "overall_percentage": self.overall_percentage,
        }


@dataclass(frozen=True)
class ProjectionRow:
    """Classes needed per target for a single subject or for the overall total."""

    label: str
    needed: dict[int, int] = field(default_factory=dict)
    subject_id: Optional[str] = None


def _read(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _count(source: Any, key: str) -> int:
    value = _read(source, key)
    return int(value) if value else 0


def sort_records(records: Iterable[Any]) -> list[SubjectRecord]:
    """Convert records and order them by name, case-insensitively."""
    converted = [SubjectRecord.from_source(r) for r in records]
    return sorted(converted, key=lambda r: (r.name.casefold(), r.name))


def summarize(records: Iterable[Any]) -> Summary:
    """Fold subject records into totals.

    Records with a missing or empty count contribute zero to that total.

    Args:
        records: ORM rows, SubjectRecord values or mappings.

    Returns:
        Summary with totals and the overall percentage.
    """
    total_conducted = 0
    total_present = 0
    for record in records:
        total_conducted += _count(record, "conducted")
        total_present += _count(record, "present")

    return Summary(
        total_conducted=total_conducted,
        total_present=total_present,
        overall_percentage=calculate_percentage(total_present, total_conducted),
    )


def build_projection_table(
    records: Iterable[Any],
    targets: Iterable[int] = SUPPORTED_TARGETS,
) -> list[ProjectionRow]:
    """Build the projections panel: one row per subject, then an overall row.

    Args:
        records: Subject records in display order.
        targets: Target percentages to project for.

    Returns:
        Rows with classes needed for every target; the overall row is last.
    """
    targets = tuple(targets)
    snapshot = [SubjectRecord.from_source(r) for r in records]

    rows = [
        ProjectionRow(
            label=record.name,
            subject_id=record.id,
            needed={
                t: calculate_projection(record.present, record.conducted, t)
                for t in targets
            },
        )
        for record in snapshot
    ]

    summary = summarize(snapshot)
    rows.append(
        ProjectionRow(
            label="Overall",
            needed={
                t: calculate_projection(
                    summary.total_present, summary.total_conducted, t
                )
                for t in targets
            },
        )
    )
    return rows
