from __future__ import annotations

from typing import Mapping

from ..core.enums import RankMetric
from ..core.exceptions import ValidationError
from .model import EntityGroup, RankedEntry


def _metric_value(group: EntityGroup, metric: RankMetric) -> float:
    if metric == RankMetric.ABSENCE_COUNT:
        return group.stats.absent_count
    return group.stats.attendance_rate


def rank(groups: Mapping[str, EntityGroup], metric: RankMetric, *, limit: int) -> list[RankedEntry]:
    """Order student/section groups by ``metric`` and keep the first ``limit``.

    absence_count and attendance_rate_desc sort high to low, attendance_rate_asc
    low to high. Equal values fall back to display name ascending.
    """

    metric = RankMetric(metric)
    if limit < 0:
        raise ValidationError("limit must be >= 0")

    entries = [
        RankedEntry(key=key, display_name=group.display_name, metric_value=_metric_value(group, metric))
        for key, group in groups.items()
    ]

    if metric == RankMetric.ATTENDANCE_RATE_ASC:
        entries.sort(key=lambda e: (e.metric_value, e.display_name))
    else:
        entries.sort(key=lambda e: (-e.metric_value, e.display_name))

    return entries[:limit]
