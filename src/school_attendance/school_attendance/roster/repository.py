from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Section, Student


class StudentRepository(Protocol):
    def get_by_ids(self, student_ids: Iterable[str]) -> Sequence[Student]:
        raise NotImplementedError

    def list_for_section(self, section_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_number(self, student_number: str) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_number: str,
        first_name: str,
        last_name: str,
        middle_name: Optional[str],
        section_id: str,
    ) -> str:
        raise NotImplementedError


class SectionRepository(Protocol):
    def get_by_id(self, section_id: str) -> Optional[Section]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Section]:
        raise NotImplementedError

    def count_students(self) -> dict[str, int]:
        """section_id -> number of students on the roster."""

        raise NotImplementedError
