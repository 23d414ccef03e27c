import pytest

from src.school_attendance.school_attendance.analytics.router import KeywordQueryRouter
from src.school_attendance.school_attendance.core.enums import Intent


@pytest.mark.parametrize(
    "query, expected",
    [
        ("What is the attendance rate?", Intent.RATE),
        ("Show me the PERCENTAGE of present students", Intent.RATE),
        ("who is most absent?", Intent.ABSENCE),
        ("Which students keep missing class", Intent.ABSENCE),
        ("any pattern this month?", Intent.TREND),
        ("Show me attendance trends", Intent.TREND),
        ("How is student performance?", Intent.STUDENT_PERFORMANCE),
        ("hello", Intent.DEFAULT),
        ("", Intent.DEFAULT),
    ],
)
def test_classify(query, expected):
    assert KeywordQueryRouter().classify(query) == expected


def test_rate_rule_wins_over_trend():
    assert KeywordQueryRouter().classify("What is the attendance rate trend?") == Intent.RATE


def test_absence_rule_wins_over_student_performance():
    assert KeywordQueryRouter().classify("student performance of absent kids") == Intent.ABSENCE


def test_student_performance_needs_both_keywords():
    router = KeywordQueryRouter()

    assert router.classify("list every student") == Intent.DEFAULT
    assert router.classify("overall performance") == Intent.DEFAULT


def test_none_query_is_default():
    assert KeywordQueryRouter().classify(None) == Intent.DEFAULT
