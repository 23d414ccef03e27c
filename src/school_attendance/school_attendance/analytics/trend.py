from __future__ import annotations

from typing import Sequence

from ..core.constants import DEFAULT_TREND_WINDOW
from ..core.enums import TrendDirection
from ..core.exceptions import ValidationError
from .model import TrendResult


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def analyze_trend(rates: Sequence[float], *, window: int = DEFAULT_TREND_WINDOW) -> TrendResult:
    """Compare the mean of the last ``window`` periods with the ``window`` before it.

    ``rates`` must be in chronological order. A short history leaves the prior
    window partially filled; an empty window yields a mean of 0.0 and a
    ``stable`` direction. No regression or extrapolation.
    """

    if window < 1:
        raise ValidationError("window must be >= 1")

    series = list(rates)
    recent = series[-window:]
    prior = series[-2 * window : -window]

    recent_mean = _mean(recent)
    prior_mean = _mean(prior)

    if not recent or not prior:
        direction = TrendDirection.STABLE
    elif recent_mean > prior_mean:
        direction = TrendDirection.IMPROVING
    elif recent_mean < prior_mean:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    return TrendResult(direction=direction, recent_mean=recent_mean, prior_mean=prior_mean)
