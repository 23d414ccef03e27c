from __future__ import annotations

import uuid
from datetime import date
from typing import Iterable, Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.attendance.model import AttendanceEntry, AttendanceRecord, SectionTally
from src.school_attendance.school_attendance.container import wire
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Role
from src.school_attendance.school_attendance.core.exceptions import RecordFetchError
from src.school_attendance.school_attendance.roster.model import Section, Student
from src.school_attendance.school_attendance.users.model import User

TODAY = date(2026, 3, 20)


class InMemoryAttendance:
    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self.records: list[AttendanceRecord] = list(records)
        self.fail_fetch = False
        self.last_window_args: Optional[dict] = None

    def get_window(self, *, start_date=None, end_date=None, section_id=None, student_id=None, submitted_by=None):
        self.last_window_args = {
            "start_date": start_date,
            "end_date": end_date,
            "section_id": section_id,
            "student_id": student_id,
            "submitted_by": submitted_by,
        }
        if self.fail_fetch:
            raise RecordFetchError("database unavailable")
        rows = [
            r
            for r in self.records
            if (start_date is None or r.date >= start_date)
            and (end_date is None or r.date <= end_date)
            and (section_id is None or r.section_id == section_id)
            and (student_id is None or r.student_id == student_id)
            and (submitted_by is None or r.submitted_by == submitted_by)
        ]
        return sorted(rows, key=lambda r: (r.date, r.student_id))

    def section_tallies(self, *, submitted_by=None) -> dict[str, SectionTally]:
        counts: dict[str, list[int]] = {}
        for r in self.records:
            if submitted_by is not None and r.submitted_by != submitted_by:
                continue
            present_absent = counts.setdefault(r.section_id, [0, 0])
            present_absent[0 if r.is_present else 1] += 1
        return {sid: SectionTally(sid, p, a) for sid, (p, a) in counts.items()}

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return next((r for r in self.records if r.record_id == record_id), None)

    def count_for_section_and_date(self, section_id: str, day: date) -> int:
        return sum(1 for r in self.records if r.section_id == section_id and r.date == day)

    def replace_for_section_and_date(self, *, section_id: str, day: date, entries: Sequence[AttendanceEntry], submitted_by: str) -> int:
        self.records = [r for r in self.records if not (r.section_id == section_id and r.date == day)]
        for e in entries:
            self.records.append(
                AttendanceRecord(
                    record_id=str(uuid.uuid4()),
                    student_id=e.student_id,
                    section_id=section_id,
                    date=day,
                    status=e.status,
                    submitted_by=submitted_by,
                    notes=e.notes,
                    proof_reference=e.proof_reference,
                )
            )
        return len(entries)

    def delete_by_id(self, record_id: str) -> bool:
        before = len(self.records)
        self.records = [r for r in self.records if r.record_id != record_id]
        return len(self.records) < before


class InMemoryStudents:
    def __init__(self, students: Iterable[Student] = ()):
        self.students: dict[str, Student] = {s.student_id: s for s in students}

    def get_by_ids(self, student_ids):
        return [self.students[i] for i in student_ids if i in self.students]

    def list_for_section(self, section_id: str):
        return [s for s in self.students.values() if s.section_id == section_id]

    def get_by_number(self, student_number: str):
        return next((s for s in self.students.values() if s.student_number == student_number), None)

    def create(self, *, student_number, first_name, last_name, middle_name, section_id) -> str:
        student_id = f"st-{len(self.students) + 1}"
        self.students[student_id] = Student(
            student_id=student_id,
            student_number=student_number,
            first_name=first_name,
            last_name=last_name,
            middle_name=middle_name,
            section_id=section_id,
        )
        return student_id


class InMemorySections:
    def __init__(self, sections: Iterable[Section] = (), students: Optional[InMemoryStudents] = None):
        self.sections: dict[str, Section] = {s.section_id: s for s in sections}
        self._students = students

    def get_by_id(self, section_id: str):
        return self.sections.get(section_id)

    def list_all(self):
        return sorted(self.sections.values(), key=lambda s: s.name)

    def count_students(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for s in (self._students.students.values() if self._students else []):
            counts[s.section_id] = counts.get(s.section_id, 0) + 1
        return counts


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self.users: dict[str, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str):
        return self.users.get(user_id)

    def get_by_email(self, email: str):
        return next((u for u in self.users.values() if u.email == email), None)


def make_record(student_id: str, day: date, status: str, *, section_id: str = "sec-a", submitted_by: str = "u-beadle") -> AttendanceRecord:
    return AttendanceRecord(
        record_id=f"{student_id}-{day.isoformat()}",
        student_id=student_id,
        section_id=section_id,
        date=day,
        status=AttendanceStatus(status),
        submitted_by=submitted_by,
    )


def make_student(student_id: str, first: str, last: str, *, section_id: str = "sec-a", number: Optional[str] = None) -> Student:
    return Student(
        student_id=student_id,
        student_number=number or f"2025-{student_id}",
        first_name=first,
        last_name=last,
        section_id=section_id,
    )


@pytest.fixture
def sections() -> list[Section]:
    return [
        Section(section_id="sec-a", name="Grade 10 - Rizal", grade_level="Grade 10", school_year="2025-2026"),
        Section(section_id="sec-b", name="Grade 10 - Bonifacio", grade_level="Grade 10", school_year="2025-2026"),
    ]


@pytest.fixture
def students() -> list[Student]:
    return [
        make_student("s1", "Ana", "Cruz"),
        make_student("s2", "Ben", "Diaz"),
        make_student("s3", "Carla", "Reyes", section_id="sec-b"),
    ]


@pytest.fixture
def users() -> list[User]:
    return [
        User("u-admin", "Admin", "admin@school.test", generate_password_hash("admin123"), Role.ADMIN),
        User("u-beadle", "Bea Beadle", "beadle@school.test", generate_password_hash("beadle123"), Role.BEADLE),
        User("u-adviser", "Ada Adviser", "adviser@school.test", generate_password_hash("adviser123"), Role.ADVISER),
        User("u-off", "Old Account", "off@school.test", generate_password_hash("off123"), Role.ADMIN, is_active=False),
    ]


@pytest.fixture
def repos(sections, students, users):
    student_repo = InMemoryStudents(students)
    return {
        "users_repo": InMemoryUsers(users),
        "students_repo": student_repo,
        "sections_repo": InMemorySections(sections, student_repo),
        "attendance_repo": InMemoryAttendance(),
    }


@pytest.fixture
def container(repos):
    return wire(**repos, clock=lambda: TODAY)
