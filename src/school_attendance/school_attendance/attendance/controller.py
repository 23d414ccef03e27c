from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import int_in_range, optional_date, require_date, require_date_order, require_non_empty
from ..common.web import current_viewer, json_body, role_required
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import Role
from ..container import Container
from .model import AttendanceRecord
from .service import parse_entries


def _record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "student_id": r.student_id,
        "section_id": r.section_id,
        "date": r.date.isoformat(),
        "status": r.status.value,
        "submitted_by": r.submitted_by,
        "notes": r.notes,
        "proof_reference": r.proof_reference,
    }


def register(app: Flask, container: Container) -> None:
    def _mark(replace: bool):
        data = json_body()
        section_id = require_non_empty(data.get("section_id"), "section_id")
        day = require_date(data.get("date"), "date")
        entries = parse_entries(data.get("records") or [])

        created = container.attendance_service.mark(
            current_viewer(),
            section_id=section_id,
            day=day,
            entries=entries,
            replace=replace,
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Attendance marked successfully",
                    "records_created": created,
                    "date": day.isoformat(),
                    "section_id": section_id,
                }
            ),
            200 if replace else 201,
        )

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @role_required(Role.BEADLE)
    def attendance_mark():
        return _mark(replace=False)

    @app.route("/api/attendance/mark", methods=["PUT"], endpoint="attendance_resubmit")
    @role_required(Role.BEADLE)
    def attendance_resubmit():
        """Resubmission: replaces the section's records for that date."""
        return _mark(replace=True)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @role_required(Role.BEADLE)
    def attendance_list():
        start = optional_date(request.args.get("startDate"), "startDate")
        end = optional_date(request.args.get("endDate"), "endDate")
        require_date_order(start, end)

        result = container.attendance_service.list_records(
            current_viewer(),
            start=start,
            end=end,
            section_id=request.args.get("sectionId") or None,
            student_id=request.args.get("studentId") or None,
            page=int_in_range(request.args.get("page"), "page", default=1, minimum=1),
            limit=int_in_range(
                request.args.get("limit"), "limit", default=DEFAULT_PAGE_SIZE, minimum=1, maximum=MAX_PAGE_SIZE
            ),
        )
        return jsonify(
            {
                "success": True,
                "records": [_record_to_json(r) for r in result.records],
                "pagination": {
                    "page": result.page,
                    "limit": result.limit,
                    "total": result.total,
                    "pages": result.pages,
                },
            }
        )

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="attendance_delete")
    @role_required(Role.ADVISER)
    def attendance_delete(record_id: str):
        container.attendance_service.remove(current_viewer(), record_id)
        return jsonify({"success": True, "message": "Attendance record deleted"})
