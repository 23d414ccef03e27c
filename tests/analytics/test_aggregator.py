from datetime import date

from src.school_attendance.school_attendance.analytics.aggregator import (
    OVERALL_KEY,
    aggregate,
    ordered_periods,
    rate_series,
    summarize,
)
from src.school_attendance.school_attendance.analytics.model import (
    DayGroup,
    OverallGroup,
    SectionGroup,
    StudentGroup,
    WeekGroup,
)
from src.school_attendance.school_attendance.core.enums import Grouping
from src.school_attendance.school_attendance.roster.model import Lookups, Section

from conftest import make_record, make_student


def _records():
    return [
        make_record("s1", date(2026, 3, 2), "present"),
        make_record("s2", date(2026, 3, 2), "absent"),
        make_record("s1", date(2026, 3, 3), "present"),
        make_record("s2", date(2026, 3, 3), "present"),
        make_record("s3", date(2026, 3, 9), "absent", section_id="sec-b"),
    ]


def test_summarize_counts_and_rate():
    stats = summarize(_records())

    assert stats.present_count == 3
    assert stats.absent_count == 2
    assert stats.total_count == 5
    assert stats.attendance_rate == 60.0


def test_empty_window_has_zero_rate():
    stats = summarize([])

    assert stats.total_count == 0
    assert stats.attendance_rate == 0


def test_no_grouping_returns_single_overall_bucket():
    groups = aggregate(_records())

    assert list(groups) == [OVERALL_KEY]
    assert isinstance(groups[OVERALL_KEY], OverallGroup)
    assert groups[OVERALL_KEY].stats.total_count == 5


def test_group_by_day_keys_are_iso_dates():
    groups = aggregate(_records(), Grouping.DAY)

    assert set(groups) == {"2026-03-02", "2026-03-03", "2026-03-09"}
    assert isinstance(groups["2026-03-02"], DayGroup)
    assert groups["2026-03-02"].stats.attendance_rate == 50.0
    assert groups["2026-03-03"].stats.attendance_rate == 100.0


def test_group_by_week_uses_monday_and_skips_empty_weeks():
    records = _records() + [make_record("s1", date(2026, 3, 22), "present")]  # a Sunday

    groups = aggregate(records, Grouping.WEEK)

    # 2026-03-02 and 2026-03-09 are Mondays; 2026-03-22 belongs to the week of 2026-03-16.
    assert set(groups) == {"2026-03-02", "2026-03-09", "2026-03-16"}
    assert all(isinstance(g, WeekGroup) for g in groups.values())
    assert groups["2026-03-02"].stats.total_count == 4


def test_group_by_student_resolves_display_names_and_last_absence():
    lookups = Lookups(students={"s2": make_student("s2", "Ben", "Diaz")})

    groups = aggregate(_records(), Grouping.STUDENT, lookups)

    ben = groups["s2"]
    assert isinstance(ben, StudentGroup)
    assert ben.display_name == "Ben Diaz"
    assert ben.last_absence == date(2026, 3, 2)
    # unknown ids fall back to the raw id
    assert groups["s3"].display_name == "s3"
    assert groups["s1"].last_absence is None


def test_group_by_section():
    lookups = Lookups(sections={"sec-b": Section("sec-b", "Bonifacio", "Grade 10", "2025-2026")})

    groups = aggregate(_records(), Grouping.SECTION, lookups)

    assert isinstance(groups["sec-a"], SectionGroup)
    assert groups["sec-a"].stats.total_count == 4
    assert groups["sec-b"].display_name == "Bonifacio"
    assert groups["sec-b"].stats.attendance_rate == 0.0


def test_counts_are_consistent_for_every_grouping():
    for grouping in Grouping:
        for group in aggregate(_records(), grouping).values():
            s = group.stats
            assert s.present_count + s.absent_count == s.total_count
            assert 0 <= s.attendance_rate <= 100


def test_aggregate_is_pure():
    records = _records()
    snapshot = list(records)

    first = aggregate(records, Grouping.STUDENT)
    second = aggregate(records, Grouping.STUDENT)

    assert first == second
    assert records == snapshot


def test_rate_series_is_chronological():
    groups = aggregate(list(reversed(_records())), Grouping.DAY)

    assert [g.day for g in ordered_periods(groups)] == [date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 9)]
    assert rate_series(groups) == [50.0, 100.0, 0.0]
