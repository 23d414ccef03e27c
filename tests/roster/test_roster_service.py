import pytest

from src.school_attendance.school_attendance.core.exceptions import NotFoundError, ValidationError


def test_import_creates_students_and_reports_bad_rows(container, repos):
    text = (
        "Student_Number,First_Name,Last_Name,Middle_Name\n"
        "2025-100,Lia,Santos,\n"
        ",Mark,Uy,\n"
        "\n"
        "2025-s1,Dup,Licate,\n"
        "2025-101,Noel,Ramos,Perez\n"
    )

    result = container.roster_service.import_students_csv("sec-b", text)

    assert result.created == 2
    assert result.total == 4
    assert result.errors == [
        "Row 3: Missing required fields (student_number, first_name, last_name)",
        "Row 5: Student 2025-s1 already exists",
    ]
    noel = repos["students_repo"].get_by_number("2025-101")
    assert noel.section_id == "sec-b"
    assert noel.middle_name == "Perez"


def test_duplicate_numbers_within_one_file(container):
    text = "student_number,first_name,last_name\n9,A,B\n9,C,D\n"

    result = container.roster_service.import_students_csv("sec-a", text)

    assert result.created == 1
    assert result.errors == ["Row 3: Student 9 already exists"]


def test_import_requires_header_columns(container):
    with pytest.raises(ValidationError, match="last_name"):
        container.roster_service.import_students_csv("sec-a", "student_number,first_name\n1,A\n")


def test_import_rejects_empty_file(container):
    with pytest.raises(ValidationError):
        container.roster_service.import_students_csv("sec-a", "   ")


def test_import_into_unknown_section(container):
    with pytest.raises(NotFoundError):
        container.roster_service.import_students_csv("missing", "student_number,first_name,last_name\n1,A,B\n")


def test_lookups_resolve_names(container):
    lookups = container.roster_service.build_lookups({"s1", "ghost"}, {"sec-a"})

    assert lookups.student_name("s1") == "Ana Cruz"
    assert lookups.student_name("ghost") == "ghost"
    assert lookups.section_name("sec-a") == "Grade 10 - Rizal"
    assert lookups.section_name("sec-b") == "sec-b"


def test_row_numbers_count_leading_blank_lines(container):
    text = "\n\nstudent_number,first_name,last_name\n2025-300,Ivy,Lao\n,No,Number\n"

    result = container.roster_service.import_students_csv("sec-a", text)

    assert result.created == 1
    assert result.errors == ["Row 5: Missing required fields (student_number, first_name, last_name)"]


def test_import_rejects_non_text_payload(container):
    with pytest.raises(ValidationError, match="csv must be a string"):
        container.roster_service.import_students_csv("sec-a", 1)
