from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..core.constants import RATE_EXCELLENT, RATE_GOOD
from ..core.enums import Intent, TrendDirection
from ..core.exceptions import ValidationError
from .model import (
    AbsencePayload,
    InsightPayload,
    RankedEntry,
    RatePayload,
    StudentPerformancePayload,
    TrendPayload,
)

LABEL_EXCELLENT = "excellent"
LABEL_GOOD = "good"
LABEL_NEEDS_ATTENTION = "needs attention"

NO_DATA_MESSAGE = "No attendance data is available for the selected period."


@dataclass(frozen=True)
class RateThresholds:
    excellent: float = RATE_EXCELLENT
    good: float = RATE_GOOD


def quality_label(rate: float, thresholds: RateThresholds = RateThresholds()) -> str:
    if rate >= thresholds.excellent:
        return LABEL_EXCELLENT
    if rate >= thresholds.good:
        return LABEL_GOOD
    return LABEL_NEEDS_ATTENTION


def pct(value: float) -> str:
    return f"{value:.1f}%"


def _bullets(entries: Sequence[RankedEntry], render) -> str:
    if not entries:
        return "- None"
    return "\n".join(render(e) for e in entries)


def _absences(n: int) -> str:
    return f"{n} absence" if n == 1 else f"{n} absences"


_RATE_CLOSERS = {
    LABEL_EXCELLENT: "Excellent attendance rate!",
    LABEL_GOOD: "Good attendance rate.",
    LABEL_NEEDS_ATTENTION: "Attendance needs attention.",
}

_TREND_CLOSERS = {
    TrendDirection.IMPROVING: "Attendance is trending upward.",
    TrendDirection.DECLINING: "Attendance is declining.",
    TrendDirection.STABLE: "Attendance is stable.",
}

_DEFAULT_TEXT = (
    "**Attendance Assistant**\n\n"
    "I can help you analyze attendance data. Try asking:\n\n"
    '- "What\'s the attendance rate?"\n'
    '- "Who has the most absences?"\n'
    '- "Show me attendance trends"\n'
    '- "How is student performance?"'
)


@dataclass(frozen=True)
class InsightFormatter:
    """Renders fixed text templates from aggregate payloads.

    Pure: the same (intent, payload, as_of) always renders the same string.
    """

    thresholds: RateThresholds = field(default_factory=RateThresholds)

    def render(self, intent: Intent, payload: InsightPayload, *, as_of: Optional[date] = None) -> str:
        intent = Intent(intent)
        if intent == Intent.RATE:
            body = self._render_rate(self._expect(payload, RatePayload))
        elif intent == Intent.ABSENCE:
            body = self._render_absence(self._expect(payload, AbsencePayload))
        elif intent == Intent.TREND:
            body = self._render_trend(self._expect(payload, TrendPayload))
        elif intent == Intent.STUDENT_PERFORMANCE:
            body = self._render_student_performance(self._expect(payload, StudentPerformancePayload))
        else:
            body = _DEFAULT_TEXT
        return self._with_as_of(body, as_of)

    def render_no_data(self, *, as_of: Optional[date] = None) -> str:
        return self._with_as_of(NO_DATA_MESSAGE, as_of)

    def recommendations(self, intent: Intent, payload: InsightPayload) -> list[str]:
        intent = Intent(intent)
        if intent == Intent.RATE and isinstance(payload, RatePayload):
            label = quality_label(payload.stats.attendance_rate, self.thresholds)
            if label == LABEL_NEEDS_ATTENTION:
                return [f"Follow up with sections and students whose attendance is below {self.thresholds.good:g}%."]
            if label == LABEL_GOOD:
                return [f"Watch the sections closest to the {self.thresholds.good:g}% mark."]
            return ["Recognize the sections and students sustaining excellent attendance."]

        if intent == Intent.ABSENCE and isinstance(payload, AbsencePayload):
            if payload.top_absentees:
                return [
                    "Consider reaching out to students with frequent absences "
                    "to understand any challenges they might be facing."
                ]
            return []

        if intent == Intent.TREND and isinstance(payload, TrendPayload):
            if payload.trend.direction == TrendDirection.DECLINING:
                return ["Attendance is declining - consider intervention strategies."]
            if payload.trend.direction == TrendDirection.IMPROVING:
                return ["Keep the current attendance measures in place."]
            return []

        if intent == Intent.STUDENT_PERFORMANCE:
            return ["Focus on students with low attendance rates and celebrate those with excellent attendance."]

        return []

    @staticmethod
    def _expect(payload: InsightPayload, kind: type):
        if not isinstance(payload, kind):
            raise ValidationError(f"expected {kind.__name__}, got {type(payload).__name__}")
        return payload

    @staticmethod
    def _with_as_of(body: str, as_of: Optional[date]) -> str:
        if as_of is None:
            return body
        return f"As of {as_of.isoformat()}\n\n{body}"

    def _render_rate(self, payload: RatePayload) -> str:
        s = payload.stats
        label = quality_label(s.attendance_rate, self.thresholds)
        return (
            "**Attendance Overview**\n\n"
            f"- Overall Rate: {pct(s.attendance_rate)}\n"
            f"- Total Records: {s.total_count}\n"
            f"- Present: {s.present_count}\n"
            f"- Absent: {s.absent_count}\n"
            f"- Rating: {label}\n\n"
            f"{_RATE_CLOSERS[label]}"
        )

    def _render_absence(self, payload: AbsencePayload) -> str:
        top = _bullets(payload.top_absentees, lambda e: f"- {e.display_name}: {_absences(int(e.metric_value))}")
        return (
            "**Absence Analysis**\n\n"
            f"- Total Absences: {payload.total_absences}\n\n"
            "**Students with Most Absences**\n"
            f"{top}"
        )

    def _render_trend(self, payload: TrendPayload) -> str:
        t = payload.trend
        return (
            "**Attendance Trend Analysis**\n\n"
            f"- Recent {payload.window} days: {pct(t.recent_mean)}\n"
            f"- Previous {payload.window} days: {pct(t.prior_mean)}\n"
            f"- Trend: {t.direction.value}\n\n"
            f"{_TREND_CLOSERS[t.direction]}"
        )

    def _render_student_performance(self, payload: StudentPerformancePayload) -> str:
        def line(e: RankedEntry) -> str:
            return f"- {e.display_name}: {pct(e.metric_value)}"

        return (
            "**Student Performance Summary**\n\n"
            "**Top Performers**\n"
            f"{_bullets(payload.top_performers, line)}\n\n"
            "**Need Attention**\n"
            f"{_bullets(payload.needs_attention, line)}"
        )
