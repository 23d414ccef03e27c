from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import ALERT_ABSENCE_COUNT, ALERT_OVERALL_RATE, ALERT_SECTION_RATE
from ..core.enums import Grouping, RankMetric
from ..roster.model import Lookups
from .aggregator import aggregate, summarize
from .formatter import pct
from .ranker import rank


@dataclass(frozen=True)
class AlertThresholds:
    overall_rate: float = ALERT_OVERALL_RATE
    section_rate: float = ALERT_SECTION_RATE
    absence_count: int = ALERT_ABSENCE_COUNT


def build_alerts(
    records: Sequence[AttendanceRecord],
    lookups: Lookups,
    thresholds: AlertThresholds = AlertThresholds(),
) -> list[str]:
    """Threshold alerts for a record window: overall rate, weak sections, frequent absentees."""

    if not records:
        return []

    alerts: list[str] = []

    overall = summarize(records)
    if overall.attendance_rate < thresholds.overall_rate:
        alerts.append(f"Overall attendance rate is below {thresholds.overall_rate:g}%")

    sections = aggregate(records, Grouping.SECTION, lookups)
    for entry in rank(sections, RankMetric.ATTENDANCE_RATE_ASC, limit=len(sections)):
        if entry.metric_value >= thresholds.section_rate:
            break
        alerts.append(f"Section {entry.display_name} has critically low attendance ({pct(entry.metric_value)})")

    students = aggregate(records, Grouping.STUDENT, lookups)
    for entry in rank(students, RankMetric.ABSENCE_COUNT, limit=len(students)):
        if entry.metric_value < thresholds.absence_count:
            break
        alerts.append(f"{entry.display_name} has {int(entry.metric_value)} absences")

    return alerts
