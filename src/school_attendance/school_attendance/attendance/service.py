from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..roster.repository import SectionRepository, StudentRepository
from ..users.model import Viewer
from ..users.service import require_role
from .model import AttendanceEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordPage:
    records: list[AttendanceRecord]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


def parse_entries(raw: Sequence[dict]) -> list[AttendanceEntry]:
    """Validate the ``records`` array of a mark request."""

    if not isinstance(raw, list):
        raise ValidationError("records must be a list")
    if not raw:
        raise ValidationError("records must contain at least one entry")

    entries: list[AttendanceEntry] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f"records[{i}] must be an object")
        student_id = str(item.get("student_id") or "").strip()
        if not student_id:
            raise ValidationError(f"records[{i}].student_id is required")
        try:
            status = AttendanceStatus(str(item.get("status") or "").strip().lower())
        except ValueError:
            raise ValidationError(f"records[{i}].status must be 'present' or 'absent'")
        entries.append(
            AttendanceEntry(
                student_id=student_id,
                status=status,
                notes=(item.get("notes") or None),
                proof_reference=(item.get("proof_reference") or None),
            )
        )
    return entries


class AttendanceService:
    """Use case: submit and browse section attendance."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        sections: SectionRepository,
    ):
        self._attendance = attendance
        self._students = students
        self._sections = sections

    def mark(
        self,
        viewer: Viewer,
        *,
        section_id: str,
        day: date,
        entries: Sequence[AttendanceEntry],
        replace: bool = False,
    ) -> int:
        """Record a section's attendance for one day.

        A second submission for the same section/date is rejected unless
        ``replace`` is set, in which case the earlier records are replaced
        wholesale.
        """

        if not entries:
            raise ValidationError("records must contain at least one entry")

        section = self._sections.get_by_id(section_id)
        if not section:
            raise NotFoundError("Section not found")

        ids = [e.student_id for e in entries]
        duplicates = sorted({sid for sid in ids if ids.count(sid) > 1})
        if duplicates:
            raise ValidationError(f"Students listed more than once: {', '.join(duplicates)}")

        roster = {s.student_id for s in self._students.list_for_section(section_id)}
        invalid = [sid for sid in ids if sid not in roster]
        if invalid:
            raise ValidationError(f"Some students do not belong to this section: {', '.join(invalid)}")

        existing = self._attendance.count_for_section_and_date(section_id, day)
        if existing and not replace:
            raise ConflictError(f"Attendance already marked for this date ({existing} records)")

        created = self._attendance.replace_for_section_and_date(
            section_id=section_id,
            day=day,
            entries=list(entries),
            submitted_by=viewer.user_id,
        )
        logger.info(
            "attendance %s for section %s on %s: %d records by %s",
            "replaced" if existing else "marked",
            section.name,
            day.isoformat(),
            created,
            viewer.user_id,
        )
        return created

    def list_records(
        self,
        viewer: Viewer,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        section_id: Optional[str] = None,
        student_id: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> RecordPage:
        rows = list(
            self._attendance.get_window(
                start_date=start,
                end_date=end,
                section_id=section_id,
                student_id=student_id,
                submitted_by=viewer.scoped_submitter,
            )
        )
        rows.sort(key=lambda r: (r.date, r.student_id), reverse=True)
        offset = (page - 1) * limit
        return RecordPage(records=rows[offset : offset + limit], total=len(rows), page=page, limit=limit)

    def remove(self, viewer: Viewer, record_id: str) -> None:
        require_role(viewer, Role.ADVISER)
        if not self._attendance.get_by_id(record_id):
            raise NotFoundError("Attendance record not found")
        self._attendance.delete_by_id(record_id)
        logger.info("attendance record %s deleted by %s", record_id, viewer.user_id)
