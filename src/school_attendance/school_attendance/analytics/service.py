from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Callable, Optional, Sequence

from ..attendance.model import AggregateWindow, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_local
from ..common.validators import require_date_order
from ..core.constants import (
    DEFAULT_STUDENT_PERFORMANCE_LIMIT,
    DEFAULT_TOP_ABSENT_LIMIT,
    DEFAULT_TREND_DAYS,
    DEFAULT_TREND_WINDOW,
)
from ..core.enums import Grouping, RankMetric
from ..core.exceptions import RecordFetchError, ValidationError
from ..roster.service import RosterService
from ..users.model import Viewer
from .aggregator import aggregate, ordered_periods, rate_series, summarize
from .model import AttendanceStats, Insight
from .pipeline import InsightPipeline
from .ranker import rank
from .trend import analyze_trend

logger = logging.getLogger(__name__)

FETCH_FAILED_ALERT = "Attendance data could not be loaded"


def _round2(value: float) -> float:
    return round(value * 100) / 100


@dataclass(frozen=True)
class AttendanceOverview:
    summary: dict
    trends: list[dict]
    student_performance: list[dict]


@dataclass(frozen=True)
class TrendReport:
    trends: list[dict]
    direction: str
    recent_average: float
    previous_average: float


class AnalyticsService:
    """Use case: attendance dashboards and the question-answering assistant.

    Fetches the record window (scoped by role), then hands it to the pure
    analytics functions.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        roster: RosterService,
        *,
        pipeline: Optional[InsightPipeline] = None,
        trend_window: int = DEFAULT_TREND_WINDOW,
        clock: Callable[[], date] = today_local,
    ):
        self._attendance = attendance
        self._roster = roster
        self._pipeline = pipeline or InsightPipeline(trend_window=trend_window)
        self._trend_window = int(trend_window)
        self._clock = clock

    def _fetch(
        self,
        viewer: Viewer,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        section_id: Optional[str] = None,
    ) -> AggregateWindow:
        require_date_order(start, end)
        records = self._attendance.get_window(
            start_date=start,
            end_date=end,
            section_id=section_id,
            submitted_by=viewer.scoped_submitter,
        )
        logger.debug("fetched %d records (%s..%s, section=%s)", len(records), start, end, section_id)
        return AggregateWindow(start_date=start, end_date=end, records=tuple(records))

    def _lookups(self, records: Sequence[AttendanceRecord]):
        return self._roster.build_lookups(
            {r.student_id for r in records},
            {r.section_id for r in records},
        )

    def attendance_overview(
        self,
        viewer: Viewer,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        section_id: Optional[str] = None,
        group_by: Grouping = Grouping.DAY,
    ) -> AttendanceOverview:
        group_by = Grouping(group_by)
        if group_by not in (Grouping.DAY, Grouping.WEEK):
            raise ValidationError("groupBy must be 'day' or 'week'")

        window = self._fetch(viewer, start=start, end=end, section_id=section_id)
        lookups = self._lookups(window.records)

        overall = summarize(window.records)
        periods = ordered_periods(aggregate(window.records, group_by, lookups))
        students = aggregate(window.records, Grouping.STUDENT, lookups)
        ranked = rank(students, RankMetric.ATTENDANCE_RATE_DESC, limit=DEFAULT_STUDENT_PERFORMANCE_LIMIT)

        return AttendanceOverview(
            summary={
                "total_records": overall.total_count,
                "present_records": overall.present_count,
                "absent_records": overall.absent_count,
                "overall_attendance_rate": _round2(overall.attendance_rate),
            },
            trends=[p.to_dict() for p in periods],
            student_performance=[students[e.key].to_dict() for e in ranked],
        )

    def section_overview(self, viewer: Viewer) -> list[dict]:
        tallies = self._attendance.section_tallies(submitted_by=viewer.scoped_submitter)
        counts = self._roster.student_counts()

        out = []
        for section in self._roster.list_sections():
            tally = tallies.get(section.section_id)
            stats = AttendanceStats(tally.present_count, tally.absent_count) if tally else AttendanceStats()
            out.append(
                {
                    "id": section.section_id,
                    "name": section.name,
                    "grade_level": section.grade_level,
                    "school_year": section.school_year,
                    "adviser_id": section.adviser_id,
                    "student_count": counts.get(section.section_id, 0),
                    "total_attendance_records": stats.total_count,
                    "attendance_rate": _round2(stats.attendance_rate),
                }
            )
        return out

    def top_absent(
        self,
        viewer: Viewer,
        *,
        limit: int = DEFAULT_TOP_ABSENT_LIMIT,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        window = self._fetch(viewer, start=start, end=end)
        lookups = self._lookups(window.records)
        students = aggregate(window.records, Grouping.STUDENT, lookups)
        absent_only = {k: g for k, g in students.items() if g.stats.absent_count > 0}

        out = []
        for entry in rank(absent_only, RankMetric.ABSENCE_COUNT, limit=limit):
            group = absent_only[entry.key]
            out.append(
                {
                    "student_id": group.student_id,
                    "student_name": group.display_name,
                    "student_number": group.student_number,
                    "section_id": group.section_id,
                    "section_name": lookups.section_name(group.section_id),
                    "absence_count": group.stats.absent_count,
                    "last_absence": group.last_absence.isoformat() if group.last_absence else None,
                }
            )
        return out

    def trends(self, viewer: Viewer, *, days: int = DEFAULT_TREND_DAYS) -> TrendReport:
        end = self._clock()
        window = self._fetch(viewer, start=end - timedelta(days=days), end=end)
        day_groups = aggregate(window.records, Grouping.DAY)
        result = analyze_trend(rate_series(day_groups), window=self._trend_window)

        return TrendReport(
            trends=[p.to_dict() for p in ordered_periods(day_groups)],
            direction=result.direction.value,
            recent_average=_round2(result.recent_mean),
            previous_average=_round2(result.prior_mean),
        )

    def ask(
        self,
        viewer: Viewer,
        query: str,
        *,
        days: int = DEFAULT_TREND_DAYS,
    ) -> Insight:
        """Answer a free-text question over the last ``days`` days.

        A failed fetch is answered like an empty window, plus an alert so the
        reader can tell "no attendance" apart from "could not load".
        """

        end = self._clock()
        try:
            window = self._fetch(viewer, start=end - timedelta(days=days), end=end)
        except RecordFetchError:
            logger.warning("attendance fetch failed for assistant query", exc_info=True)
            insight = self._pipeline.compute(query, (), None, as_of=end)
            return replace(insight, alerts=[*insight.alerts, FETCH_FAILED_ALERT])

        lookups = self._lookups(window.records)
        return self._pipeline.compute(query, window.records, lookups, as_of=end)
