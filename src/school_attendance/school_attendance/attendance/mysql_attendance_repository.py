from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import RecordFetchError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import AttendanceEntry, AttendanceRecord, SectionTally
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, section_id, date, status, submitted_by, notes, proof_url"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(r["id"]),
        student_id=str(r["student_id"]),
        section_id=str(r["section_id"]),
        date=normalize_mysql_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        submitted_by=r.get("submitted_by"),
        notes=r.get("notes"),
        proof_reference=r.get("proof_url"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_window(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        section_id: Optional[str] = None,
        student_id: Optional[str] = None,
        submitted_by: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["1=1"]
        params: list = []
        if start_date:
            where.append("date >= %s")
            params.append(start_date)
        if end_date:
            where.append("date <= %s")
            params.append(end_date)
        if section_id:
            where.append("section_id = %s")
            params.append(section_id)
        if student_id:
            where.append("student_id = %s")
            params.append(student_id)
        if submitted_by:
            where.append("submitted_by = %s")
            params.append(submitted_by)

        try:
            with db_cursor(self._conn_factory, commit=False) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_records
                    WHERE {' AND '.join(where)}
                    ORDER BY date ASC, student_id ASC
                    """,
                    tuple(params),
                )
                return [_to_record(r) for r in fetchall(cur)]
        except mysql.connector.Error as e:
            raise RecordFetchError(f"could not load attendance records: {e}") from e

    def section_tallies(self, *, submitted_by: Optional[str] = None) -> dict[str, SectionTally]:
        where = "WHERE submitted_by = %s" if submitted_by else ""
        params = (submitted_by,) if submitted_by else ()
        try:
            with db_cursor(self._conn_factory, commit=False) as (_, cur):
                cur.execute(
                    f"""
                    SELECT section_id,
                           SUM(status = 'present') AS present_count,
                           SUM(status = 'absent') AS absent_count
                    FROM attendance_records
                    {where}
                    GROUP BY section_id
                    """,
                    params,
                )
                return {
                    str(r["section_id"]): SectionTally(
                        section_id=str(r["section_id"]),
                        present_count=int(r["present_count"] or 0),
                        absent_count=int(r["absent_count"] or 0),
                    )
                    for r in fetchall(cur)
                }
        except mysql.connector.Error as e:
            raise RecordFetchError(f"could not load section attendance counts: {e}") from e

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def count_for_section_and_date(self, section_id: str, day: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM attendance_records WHERE section_id=%s AND date=%s",
                (section_id, day),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def replace_for_section_and_date(
        self,
        *,
        section_id: str,
        day: date,
        entries: Sequence[AttendanceEntry],
        submitted_by: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE section_id=%s AND date=%s", (section_id, day))
            cur.executemany(
                """
                INSERT INTO attendance_records(id, student_id, section_id, date, status, submitted_by, notes, proof_url)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        str(uuid.uuid4()),
                        e.student_id,
                        section_id,
                        day,
                        e.status.value,
                        submitted_by,
                        e.notes,
                        e.proof_reference,
                    )
                    for e in entries
                ],
            )
            return len(entries)

    def delete_by_id(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE id=%s", (record_id,))
            return cur.rowcount > 0
