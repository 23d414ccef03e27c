import pytest

from src.school_attendance.school_attendance.analytics.trend import analyze_trend
from src.school_attendance.school_attendance.core.enums import TrendDirection
from src.school_attendance.school_attendance.core.exceptions import ValidationError


def test_improving_when_recent_window_is_higher():
    result = analyze_trend([60, 70, 80, 90], window=2)

    assert result.direction == TrendDirection.IMPROVING
    assert result.recent_mean == 85
    assert result.prior_mean == 65


def test_declining_when_recent_window_is_lower():
    result = analyze_trend([90, 90, 50, 70], window=2)

    assert result.direction == TrendDirection.DECLINING
    assert result.recent_mean == 60
    assert result.prior_mean == 90


def test_equal_windows_are_stable():
    assert analyze_trend([80, 80, 80, 80], window=2).direction == TrendDirection.STABLE


def test_empty_series_is_stable_with_zero_means():
    result = analyze_trend([], window=7)

    assert result.direction == TrendDirection.STABLE
    assert result.recent_mean == 0.0
    assert result.prior_mean == 0.0


def test_short_history_without_prior_window_is_stable():
    result = analyze_trend([40, 100, 100], window=7)

    assert result.direction == TrendDirection.STABLE
    assert result.recent_mean == 80
    assert result.prior_mean == 0.0


def test_partial_prior_window_is_compared():
    # recent = last 3, prior = whatever remains of the 3 before it
    result = analyze_trend([50, 90, 90, 90], window=3)

    assert result.prior_mean == 50
    assert result.direction == TrendDirection.IMPROVING


def test_only_the_last_two_windows_count():
    result = analyze_trend([0, 0, 0, 80, 80, 80, 80], window=2)

    assert result.prior_mean == 80
    assert result.direction == TrendDirection.STABLE


def test_window_must_be_positive():
    with pytest.raises(ValidationError):
        analyze_trend([80, 90], window=0)
