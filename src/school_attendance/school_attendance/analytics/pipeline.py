from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import DEFAULT_INSIGHT_TOP_LIMIT, DEFAULT_TREND_WINDOW
from ..core.enums import Grouping, Intent, RankMetric
from ..roster.model import Lookups
from .aggregator import aggregate, rate_series, summarize
from .alerts import AlertThresholds, build_alerts
from .enrichers import InsightEnricher, NoopInsightEnricher
from .formatter import InsightFormatter, quality_label
from .model import (
    AbsencePayload,
    Insight,
    InsightPayload,
    RatePayload,
    StudentPerformancePayload,
    TrendPayload,
)
from .ranker import rank
from .router import KeywordQueryRouter, QueryRouter
from .trend import analyze_trend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightPipeline:
    """Question + record window -> Insight.

    The router picks the intent, the aggregator/ranker/trend analyzer build
    the payload and the formatter renders it. No I/O happens here; callers
    fetch the window and lookups beforehand.
    """

    router: QueryRouter = field(default_factory=KeywordQueryRouter)
    formatter: InsightFormatter = field(default_factory=InsightFormatter)
    enricher: InsightEnricher = field(default_factory=NoopInsightEnricher)
    alert_thresholds: AlertThresholds = field(default_factory=AlertThresholds)
    trend_window: int = DEFAULT_TREND_WINDOW
    top_limit: int = DEFAULT_INSIGHT_TOP_LIMIT

    def compute(
        self,
        query: str,
        records: Sequence[AttendanceRecord],
        lookups: Optional[Lookups] = None,
        *,
        as_of: Optional[date] = None,
    ) -> Insight:
        lookups = lookups or Lookups()
        records = tuple(records)
        intent = self.router.classify(query)

        if not records:
            insight = Insight(
                intent=intent,
                summary_text=self.formatter.render_no_data(as_of=as_of),
                supporting_data={"total_records": 0, "attendance_rate": 0.0},
            )
            return self._enrich(insight, query)

        payload, data = self._build_payload(intent, records, lookups)
        insight = Insight(
            intent=intent,
            summary_text=self.formatter.render(intent, payload, as_of=as_of),
            recommendations=self.formatter.recommendations(intent, payload),
            alerts=build_alerts(records, lookups, self.alert_thresholds),
            supporting_data=data,
        )
        return self._enrich(insight, query)

    def _build_payload(
        self, intent: Intent, records: Sequence[AttendanceRecord], lookups: Lookups
    ) -> tuple[InsightPayload, dict]:
        overall = summarize(records)
        data: dict = {"total_records": overall.total_count, "attendance_rate": overall.attendance_rate}

        if intent == Intent.RATE:
            data.update(overall.to_dict())
            data["rating"] = quality_label(overall.attendance_rate, self.formatter.thresholds)
            return RatePayload(stats=overall), data

        if intent == Intent.ABSENCE:
            students = aggregate(records, Grouping.STUDENT, lookups)
            absent_only = {k: g for k, g in students.items() if g.stats.absent_count > 0}
            top = rank(absent_only, RankMetric.ABSENCE_COUNT, limit=self.top_limit)
            data["total_absences"] = overall.absent_count
            data["top_absentees"] = [e.to_dict() for e in top]
            return AbsencePayload(total_absences=overall.absent_count, top_absentees=top), data

        if intent == Intent.TREND:
            days = aggregate(records, Grouping.DAY, lookups)
            trend = analyze_trend(rate_series(days), window=self.trend_window)
            data["trend"] = trend.to_dict()
            data["window"] = self.trend_window
            return TrendPayload(trend=trend, window=self.trend_window), data

        if intent == Intent.STUDENT_PERFORMANCE:
            students = aggregate(records, Grouping.STUDENT, lookups)
            top = rank(students, RankMetric.ATTENDANCE_RATE_DESC, limit=self.top_limit)
            low = rank(students, RankMetric.ATTENDANCE_RATE_ASC, limit=self.top_limit)
            data["top_performers"] = [e.to_dict() for e in top]
            data["needs_attention"] = [e.to_dict() for e in low]
            return StudentPerformancePayload(top_performers=top, needs_attention=low), data

        return None, data

    def _enrich(self, insight: Insight, query: str) -> Insight:
        try:
            return self.enricher.enrich(insight, query)
        except Exception:
            logger.warning("insight enricher %s failed; returning plain insight", type(self.enricher).__name__, exc_info=True)
            return insight


def compute_insight(
    query: str,
    records: Sequence[AttendanceRecord],
    lookups: Optional[Lookups] = None,
    *,
    as_of: Optional[date] = None,
    pipeline: Optional[InsightPipeline] = None,
) -> Insight:
    """Answer ``query`` from an already-fetched record window."""

    return (pipeline or InsightPipeline()).compute(query, records, lookups, as_of=as_of)
