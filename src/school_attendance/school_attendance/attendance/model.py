from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one school day."""

    record_id: str
    student_id: str
    section_id: str
    date: date
    status: AttendanceStatus
    submitted_by: Optional[str] = None
    notes: Optional[str] = None
    proof_reference: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return self.status == AttendanceStatus.PRESENT


@dataclass(frozen=True)
class AttendanceEntry:
    """One row of a section submission, before it is persisted."""

    student_id: str
    status: AttendanceStatus
    notes: Optional[str] = None
    proof_reference: Optional[str] = None


@dataclass(frozen=True)
class AggregateWindow:
    """Working set of records bounded by a date range (per request, never persisted)."""

    start_date: Optional[date]
    end_date: Optional[date]
    records: Sequence[AttendanceRecord] = field(default_factory=tuple)


@dataclass(frozen=True)
class SectionTally:
    """Present/absent counts for one section, computed by the record store."""

    section_id: str
    present_count: int
    absent_count: int
