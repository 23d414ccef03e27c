from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import week_start
from ..core.enums import Grouping
from ..roster.model import Lookups
from .model import (
    AggregateGroup,
    AttendanceStats,
    DayGroup,
    OverallGroup,
    PeriodGroup,
    SectionGroup,
    StudentGroup,
    WeekGroup,
)

OVERALL_KEY = "all"


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    present = 0
    absent = 0
    for r in records:
        if r.is_present:
            present += 1
        else:
            absent += 1
    return AttendanceStats(present_count=present, absent_count=absent)


def _group_key(record: AttendanceRecord, grouping: Grouping) -> str:
    if grouping == Grouping.DAY:
        return record.date.isoformat()
    if grouping == Grouping.WEEK:
        return week_start(record.date).isoformat()
    if grouping == Grouping.SECTION:
        return record.section_id
    if grouping == Grouping.STUDENT:
        return record.student_id
    return OVERALL_KEY


def _build_group(grouping: Grouping, key: str, rows: Sequence[AttendanceRecord], lookups: Lookups) -> AggregateGroup:
    stats = summarize(rows)
    first = rows[0]

    if grouping == Grouping.DAY:
        return DayGroup(day=first.date, stats=stats)
    if grouping == Grouping.WEEK:
        return WeekGroup(week_start=week_start(first.date), stats=stats)
    if grouping == Grouping.SECTION:
        return SectionGroup(section_id=key, display_name=lookups.section_name(key), stats=stats)

    absences = [r.date for r in rows if not r.is_present]
    return StudentGroup(
        student_id=key,
        display_name=lookups.student_name(key),
        section_id=first.section_id,
        stats=stats,
        student_number=lookups.student_number(key),
        last_absence=max(absences) if absences else None,
    )


def aggregate(
    records: Iterable[AttendanceRecord],
    grouping: Grouping = Grouping.NONE,
    lookups: Optional[Lookups] = None,
) -> dict[str, AggregateGroup]:
    """Bucket records by ``grouping`` and count present/absent per bucket.

    Day and week keys are ISO dates (a week is keyed by its Monday); section
    and student keys are entity ids. Buckets without records are not emitted,
    so sparse weeks are missing rather than zero-filled. Iteration order of the
    result carries no meaning; use ``ordered_periods`` or the ranker.
    """

    grouping = Grouping(grouping)
    rows = tuple(records)

    if grouping == Grouping.NONE:
        return {OVERALL_KEY: OverallGroup(stats=summarize(rows))}

    lookups = lookups or Lookups()
    buckets: dict[str, list[AttendanceRecord]] = {}
    for r in rows:
        buckets.setdefault(_group_key(r, grouping), []).append(r)

    return {key: _build_group(grouping, key, bucket, lookups) for key, bucket in buckets.items()}


def ordered_periods(groups: Mapping[str, AggregateGroup]) -> list[PeriodGroup]:
    """Day/week groups in chronological order."""

    periods = [g for g in groups.values() if isinstance(g, (DayGroup, WeekGroup))]
    periods.sort(key=lambda g: g.period)
    return periods


def rate_series(groups: Mapping[str, AggregateGroup]) -> list[float]:
    return [g.stats.attendance_rate for g in ordered_periods(groups)]
