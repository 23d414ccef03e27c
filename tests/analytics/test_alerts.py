from datetime import date

from src.school_attendance.school_attendance.analytics.alerts import AlertThresholds, build_alerts
from src.school_attendance.school_attendance.roster.model import Lookups, Section

from conftest import make_record, make_student


def test_no_alerts_for_healthy_window():
    records = [make_record("s1", date(2026, 3, d), "present") for d in range(2, 7)]

    assert build_alerts(records, Lookups()) == []


def test_no_alerts_for_empty_window():
    assert build_alerts([], Lookups()) == []


def test_low_section_and_frequent_absentee():
    records = [make_record("s1", date(2026, 3, d), "absent", section_id="sec-b") for d in range(2, 8)]
    records += [make_record("s2", date(2026, 3, d), "present") for d in range(2, 30)]
    lookups = Lookups(
        students={"s1": make_student("s1", "Jane", "Doe", section_id="sec-b")},
        sections={"sec-b": Section("sec-b", "Bonifacio", "Grade 10", "2025-2026")},
    )

    alerts = build_alerts(records, lookups)

    assert "Section Bonifacio has critically low attendance (0.0%)" in alerts
    assert "Jane Doe has 6 absences" in alerts
    # 28 of 34 present keeps the overall rate above 80%
    assert not any(a.startswith("Overall") for a in alerts)


def test_thresholds_are_configurable():
    records = [make_record("s1", date(2026, 3, 2), "absent"), make_record("s1", date(2026, 3, 3), "present")]

    alerts = build_alerts(records, Lookups(), AlertThresholds(overall_rate=60, section_rate=40, absence_count=1))

    assert alerts == ["Overall attendance rate is below 60%", "s1 has 1 absences"]
