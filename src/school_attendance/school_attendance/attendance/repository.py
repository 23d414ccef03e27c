from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord, SectionTally


class AttendanceRepository(Protocol):
    def get_window(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        section_id: Optional[str] = None,
        student_id: Optional[str] = None,
        submitted_by: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records in the window, ordered by date ascending.

        Implementations raise RecordFetchError when the store is unreachable.
        """

        raise NotImplementedError

    def section_tallies(self, *, submitted_by: Optional[str] = None) -> dict[str, SectionTally]:
        """Per-section present/absent counts over all dates, keyed by section id."""

        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def count_for_section_and_date(self, section_id: str, day: date) -> int:
        raise NotImplementedError

    def replace_for_section_and_date(
        self,
        *,
        section_id: str,
        day: date,
        entries: Sequence[AttendanceEntry],
        submitted_by: str,
    ) -> int:
        """Delete any records of the section/date and insert ``entries`` in one transaction."""

        raise NotImplementedError

    def delete_by_id(self, record_id: str) -> bool:
        raise NotImplementedError
