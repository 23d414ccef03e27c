from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on a section roster."""

    student_id: str
    student_number: str
    first_name: str
    last_name: str
    section_id: str
    middle_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Section:
    section_id: str
    name: str
    grade_level: str
    school_year: str
    adviser_id: Optional[str] = None


@dataclass(frozen=True)
class Lookups:
    """Read-only id -> entity maps used to resolve display names."""

    students: Mapping[str, Student] = field(default_factory=dict)
    sections: Mapping[str, Section] = field(default_factory=dict)

    def student_name(self, student_id: str) -> str:
        student = self.students.get(student_id)
        return student.display_name if student else student_id

    def student_number(self, student_id: str) -> Optional[str]:
        student = self.students.get(student_id)
        return student.student_number if student else None

    def section_name(self, section_id: str) -> str:
        section = self.sections.get(section_id)
        return section.name if section else section_id


@dataclass(frozen=True)
class ImportResult:
    created: int
    errors: list[str]
    total: int
