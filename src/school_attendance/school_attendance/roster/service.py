from __future__ import annotations

import csv
import io
import logging
from typing import Iterable, Optional, Sequence

from ..core.exceptions import NotFoundError, ValidationError
from .model import ImportResult, Lookups, Section, Student
from .repository import SectionRepository, StudentRepository

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("student_number", "first_name", "last_name", "middle_name")


class RosterService:
    """Use case: sections, students and display-name lookups."""

    def __init__(self, students: StudentRepository, sections: SectionRepository):
        self._students = students
        self._sections = sections

    def list_sections(self) -> Sequence[Section]:
        return self._sections.list_all()

    def get_section(self, section_id: str) -> Section:
        section = self._sections.get_by_id(section_id)
        if not section:
            raise NotFoundError("Section not found")
        return section

    def list_students(self, section_id: str) -> Sequence[Student]:
        self.get_section(section_id)
        return self._students.list_for_section(section_id)

    def student_counts(self) -> dict[str, int]:
        return self._sections.count_students()

    def build_lookups(self, student_ids: Iterable[str], section_ids: Optional[Iterable[str]] = None) -> Lookups:
        students = {s.student_id: s for s in self._students.get_by_ids(student_ids)}
        wanted = set(section_ids) if section_ids is not None else None
        sections = {
            s.section_id: s
            for s in self._sections.list_all()
            if wanted is None or s.section_id in wanted
        }
        return Lookups(students=students, sections=sections)

    def import_students_csv(self, section_id: str, text: str) -> ImportResult:
        """Bulk-create students from ``student_number,first_name,last_name,middle_name`` rows.

        Bad rows are reported as "Row N: ..." where N is the physical line in the
        file, and skipped; the remaining rows are created. Blank lines before the
        header are ignored.
        """

        self.get_section(section_id)
        if not isinstance(text, str):
            raise ValidationError("csv must be a string")
        if not text.strip():
            raise ValidationError("CSV file is empty")

        source = io.StringIO(text.rstrip())
        header_reader = csv.reader(source)
        header = next((row for row in header_reader if any(c.strip() for c in row)), None)
        if header is None:
            raise ValidationError("CSV header is missing")
        fieldnames = [h.strip().lower() for h in header]
        missing = [c for c in CSV_COLUMNS[:3] if c not in fieldnames]
        if missing:
            raise ValidationError(f"CSV header is missing columns: {', '.join(missing)}")

        created = 0
        errors: list[str] = []
        total = 0
        seen: set[str] = set()

        reader = csv.DictReader(source, fieldnames=fieldnames)
        for row in reader:
            i = header_reader.line_num + reader.line_num
            values = {k: (v or "").strip() for k, v in row.items() if k}
            if not any(values.values()):
                continue
            total += 1

            number = values.get("student_number", "")
            first = values.get("first_name", "")
            last = values.get("last_name", "")
            if not number or not first or not last:
                errors.append(f"Row {i}: Missing required fields (student_number, first_name, last_name)")
                continue
            if number in seen or self._students.get_by_number(number):
                errors.append(f"Row {i}: Student {number} already exists")
                continue

            self._students.create(
                student_number=number,
                first_name=first,
                last_name=last,
                middle_name=values.get("middle_name") or None,
                section_id=section_id,
            )
            seen.add(number)
            created += 1

        logger.info("roster import for section %s: %d created, %d errors", section_id, created, len(errors))
        return ImportResult(created=created, errors=errors, total=total)
