from __future__ import annotations

import uuid
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Section, Student
from .repository import SectionRepository, StudentRepository

_STUDENT_COLUMNS = "id, student_number, first_name, last_name, middle_name, section_id"
_SECTION_COLUMNS = "id, name, grade_level, school_year, adviser_id"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["id"]),
        student_number=str(r["student_number"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        middle_name=r.get("middle_name"),
        section_id=str(r["section_id"]),
    )


def _to_section(r: dict) -> Section:
    return Section(
        section_id=str(r["id"]),
        name=r["name"],
        grade_level=r["grade_level"],
        school_year=r["school_year"],
        adviser_id=r.get("adviser_id"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_ids(self, student_ids: Iterable[str]) -> Sequence[Student]:
        ids = sorted(set(student_ids))
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE id IN ({in_clause(ids)})", tuple(ids))
            return [_to_student(r) for r in fetchall(cur)]

    def list_for_section(self, section_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_STUDENT_COLUMNS} FROM students WHERE section_id=%s ORDER BY last_name, first_name",
                (section_id,),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_number(self, student_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE student_number=%s", (student_number,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def create(
        self,
        *,
        student_number: str,
        first_name: str,
        last_name: str,
        middle_name: Optional[str],
        section_id: str,
    ) -> str:
        student_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(id, student_number, first_name, last_name, middle_name, section_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (student_id, student_number, first_name, last_name, middle_name, section_id),
            )
        return student_id


class MySQLSectionRepository(SectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, section_id: str) -> Optional[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SECTION_COLUMNS} FROM sections WHERE id=%s", (section_id,))
            r = fetchone(cur)
            return _to_section(r) if r else None

    def list_all(self) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SECTION_COLUMNS} FROM sections ORDER BY name ASC")
            return [_to_section(r) for r in fetchall(cur)]

    def count_students(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT section_id, COUNT(*) AS n FROM students GROUP BY section_id")
            return {str(r["section_id"]): int(r["n"]) for r in fetchall(cur)}
