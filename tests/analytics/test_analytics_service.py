from datetime import date

import pytest

from src.school_attendance.school_attendance.analytics.formatter import NO_DATA_MESSAGE
from src.school_attendance.school_attendance.analytics.service import FETCH_FAILED_ALERT
from src.school_attendance.school_attendance.core.enums import Grouping, Intent, Role
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.roster.model import Section
from src.school_attendance.school_attendance.users.model import Viewer

from conftest import TODAY, make_record

ADMIN = Viewer("u-admin", Role.ADMIN)
BEADLE = Viewer("u-beadle", Role.BEADLE)


@pytest.fixture
def seeded(container, repos):
    repos["attendance_repo"].records = [
        make_record("s1", date(2026, 3, 16), "present"),
        make_record("s2", date(2026, 3, 16), "absent"),
        make_record("s1", date(2026, 3, 17), "present"),
        make_record("s2", date(2026, 3, 17), "absent"),
        make_record("s3", date(2026, 3, 17), "absent", section_id="sec-b", submitted_by="u-other"),
    ]
    return container.analytics_service


def test_overview_summary_and_daily_trend(seeded):
    overview = seeded.attendance_overview(ADMIN)

    assert overview.summary == {
        "total_records": 5,
        "present_records": 2,
        "absent_records": 3,
        "overall_attendance_rate": 40.0,
    }
    assert [t["date"] for t in overview.trends] == ["2026-03-16", "2026-03-17"]
    assert overview.student_performance[0]["student_name"] == "Ana Cruz"


def test_overview_weekly_grouping(seeded):
    overview = seeded.attendance_overview(ADMIN, group_by=Grouping.WEEK)

    assert overview.trends == [
        {"week": "2026-03-16", "present_count": 2, "absent_count": 3, "total_count": 5, "attendance_rate": 40.0}
    ]


def test_overview_rejects_entity_grouping(seeded):
    with pytest.raises(ValidationError):
        seeded.attendance_overview(ADMIN, group_by=Grouping.STUDENT)


def test_overview_rejects_reversed_dates(seeded):
    with pytest.raises(ValidationError):
        seeded.attendance_overview(ADMIN, start=date(2026, 3, 18), end=date(2026, 3, 1))


def test_beadle_only_sees_own_submissions(seeded, repos):
    overview = seeded.attendance_overview(BEADLE)

    assert overview.summary["total_records"] == 4
    assert repos["attendance_repo"].last_window_args["submitted_by"] == "u-beadle"


def test_section_overview_lists_every_section(seeded, repos):
    repos["students_repo"].create(student_number="x", first_name="New", last_name="Kid", middle_name=None, section_id="sec-c")
    repos["sections_repo"].sections["sec-c"] = Section("sec-c", "Grade 9 - Luna", "Grade 9", "2025-2026")
    rows = {r["id"]: r for r in seeded.section_overview(ADMIN)}

    assert rows["sec-a"]["attendance_rate"] == 50.0
    assert rows["sec-a"]["student_count"] == 2
    assert rows["sec-a"]["total_attendance_records"] == 4
    assert rows["sec-c"]["student_count"] == 1
    assert rows["sec-c"]["total_attendance_records"] == 0
    assert rows["sec-c"]["attendance_rate"] == 0.0


def test_top_absent(seeded):
    rows = seeded.top_absent(ADMIN, limit=5)

    assert [(r["student_name"], r["absence_count"]) for r in rows] == [("Ben Diaz", 2), ("Carla Reyes", 1)]
    assert rows[0]["last_absence"] == "2026-03-17"
    assert rows[1]["section_name"] == "Grade 10 - Bonifacio"


def test_trends_report(seeded):
    report = seeded.trends(ADMIN, days=30)

    assert report.direction == "stable"
    assert [t["date"] for t in report.trends] == ["2026-03-16", "2026-03-17"]


def test_ask_uses_clock_date(seeded):
    insight = seeded.ask(ADMIN, "what is the attendance rate?")

    assert insight.intent == Intent.RATE
    assert insight.summary_text.startswith(f"As of {TODAY.isoformat()}")
    assert "40.0%" in insight.summary_text


def test_ask_with_no_records(container):
    insight = container.analytics_service.ask(ADMIN, "who is absent?")

    assert NO_DATA_MESSAGE in insight.summary_text
    assert insight.alerts == []


def test_ask_when_fetch_fails(container, repos):
    repos["attendance_repo"].fail_fetch = True

    insight = container.analytics_service.ask(ADMIN, "attendance rate")

    assert NO_DATA_MESSAGE in insight.summary_text
    assert insight.alerts == [FETCH_FAILED_ALERT]


def test_section_overview_uses_counts_not_record_window(seeded, repos):
    seeded.section_overview(ADMIN)

    assert repos["attendance_repo"].last_window_args is None


def test_section_overview_is_scoped_for_beadles(seeded):
    rows = {r["id"]: r for r in seeded.section_overview(BEADLE)}

    assert rows["sec-a"]["total_attendance_records"] == 4
    assert rows["sec-b"]["total_attendance_records"] == 0
