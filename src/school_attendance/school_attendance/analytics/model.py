from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence, Union

from ..core.enums import Intent, TrendDirection


@dataclass(frozen=True)
class AttendanceStats:
    """Counts for one bucket of records.

    total_count is derived, so present + absent == total always holds.
    """

    present_count: int = 0
    absent_count: int = 0

    @property
    def total_count(self) -> int:
        return self.present_count + self.absent_count

    @property
    def attendance_rate(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.present_count * 100 / self.total_count

    def to_dict(self) -> dict:
        return {
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "total_count": self.total_count,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class OverallGroup:
    stats: AttendanceStats

    @property
    def display_name(self) -> str:
        return "All records"

    def to_dict(self) -> dict:
        return self.stats.to_dict()


@dataclass(frozen=True)
class DayGroup:
    day: date
    stats: AttendanceStats

    @property
    def period(self) -> date:
        return self.day

    @property
    def display_name(self) -> str:
        return self.day.isoformat()

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), **self.stats.to_dict()}


@dataclass(frozen=True)
class WeekGroup:
    week_start: date
    stats: AttendanceStats

    @property
    def period(self) -> date:
        return self.week_start

    @property
    def display_name(self) -> str:
        return self.week_start.isoformat()

    def to_dict(self) -> dict:
        return {"week": self.week_start.isoformat(), **self.stats.to_dict()}


@dataclass(frozen=True)
class SectionGroup:
    section_id: str
    display_name: str
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {"section_id": self.section_id, "section_name": self.display_name, **self.stats.to_dict()}


@dataclass(frozen=True)
class StudentGroup:
    student_id: str
    display_name: str
    section_id: str
    stats: AttendanceStats
    student_number: Optional[str] = None
    last_absence: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.display_name,
            "student_number": self.student_number,
            "section_id": self.section_id,
            "last_absence": self.last_absence.isoformat() if self.last_absence else None,
            **self.stats.to_dict(),
        }


AggregateGroup = Union[OverallGroup, DayGroup, WeekGroup, SectionGroup, StudentGroup]
PeriodGroup = Union[DayGroup, WeekGroup]
EntityGroup = Union[SectionGroup, StudentGroup]


@dataclass(frozen=True)
class RankedEntry:
    key: str
    display_name: str
    metric_value: float

    def to_dict(self) -> dict:
        return {"key": self.key, "display_name": self.display_name, "metric_value": self.metric_value}


@dataclass(frozen=True)
class TrendResult:
    direction: TrendDirection
    recent_mean: float
    prior_mean: float

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "recent_mean": self.recent_mean,
            "prior_mean": self.prior_mean,
        }


# Formatter payloads, one per intent.


@dataclass(frozen=True)
class RatePayload:
    stats: AttendanceStats


@dataclass(frozen=True)
class AbsencePayload:
    total_absences: int
    top_absentees: Sequence[RankedEntry]


@dataclass(frozen=True)
class TrendPayload:
    trend: TrendResult
    window: int


@dataclass(frozen=True)
class StudentPerformancePayload:
    top_performers: Sequence[RankedEntry]
    needs_attention: Sequence[RankedEntry]


InsightPayload = Union[RatePayload, AbsencePayload, TrendPayload, StudentPerformancePayload, None]


@dataclass(frozen=True)
class Insight:
    """Answer to an attendance question. Produced per query, never persisted."""

    intent: Intent
    summary_text: str
    recommendations: list[str] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)
    supporting_data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "intent": self.intent.value,
            "summary": self.summary_text,
            "recommendations": list(self.recommendations),
            "alerts": list(self.alerts),
            "supporting_data": dict(self.supporting_data),
        }
