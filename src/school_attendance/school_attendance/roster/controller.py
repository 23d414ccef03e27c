from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import json_body, login_required, role_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import Section, Student


def _section_to_json(s: Section) -> dict:
    return {
        "id": s.section_id,
        "name": s.name,
        "grade_level": s.grade_level,
        "school_year": s.school_year,
        "adviser_id": s.adviser_id,
    }


def _student_to_json(s: Student) -> dict:
    return {
        "id": s.student_id,
        "student_number": s.student_number,
        "first_name": s.first_name,
        "last_name": s.last_name,
        "middle_name": s.middle_name,
        "section_id": s.section_id,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sections", methods=["GET"], endpoint="sections_list")
    @login_required
    def sections_list():
        sections = container.roster_service.list_sections()
        return jsonify({"success": True, "sections": [_section_to_json(s) for s in sections]})

    @app.route("/api/sections/<section_id>/students", methods=["GET"], endpoint="section_students")
    @login_required
    def section_students(section_id: str):
        students = container.roster_service.list_students(section_id)
        return jsonify({"success": True, "students": [_student_to_json(s) for s in students]})

    @app.route("/api/sections/<section_id>/students/import", methods=["POST"], endpoint="section_students_import")
    @role_required(Role.COORDINATOR)
    def section_students_import(section_id: str):
        """Roster CSV import: multipart ``file`` or JSON ``{"csv": "..."}``."""

        if "file" in request.files:
            raw = request.files["file"].read()
            try:
                text = raw.decode("utf-8-sig")
            except UnicodeDecodeError:
                raise ValidationError("CSV file must be UTF-8 encoded")
        else:
            text = json_body().get("csv", "")

        result = container.roster_service.import_students_csv(section_id, text)
        return jsonify(
            {
                "success": True,
                "created": result.created,
                "errors": result.errors,
                "total": result.total,
            }
        )
