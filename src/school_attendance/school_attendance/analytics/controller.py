from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask, jsonify, request

from ..common.validators import int_in_range, optional_date, require_non_empty
from ..common.web import current_viewer, json_body, login_required, role_required
from ..core.constants import DEFAULT_TOP_ABSENT_LIMIT, DEFAULT_TREND_DAYS, MAX_PAGE_SIZE
from ..core.enums import Grouping, Role
from ..core.exceptions import ValidationError
from ..container import Container


def _grouping(value: str | None) -> Grouping:
    try:
        grouping = Grouping((value or Grouping.DAY.value).lower())
    except ValueError:
        raise ValidationError("groupBy must be 'day' or 'week'")
    return grouping


def register(app: Flask, container: Container) -> None:
    @app.route("/api/analytics/attendance", methods=["GET"], endpoint="analytics_attendance")
    @role_required(Role.BEADLE)
    def analytics_attendance():
        overview = container.analytics_service.attendance_overview(
            current_viewer(),
            start=optional_date(request.args.get("startDate"), "startDate"),
            end=optional_date(request.args.get("endDate"), "endDate"),
            section_id=request.args.get("sectionId") or None,
            group_by=_grouping(request.args.get("groupBy")),
        )
        return jsonify(
            {
                "success": True,
                "summary": overview.summary,
                "trends": overview.trends,
                "student_performance": overview.student_performance,
            }
        )

    @app.route("/api/analytics/sections", methods=["GET"], endpoint="analytics_sections")
    @role_required(Role.BEADLE)
    def analytics_sections():
        return jsonify({"success": True, "sections": container.analytics_service.section_overview(current_viewer())})

    @app.route("/api/analytics/top-absent", methods=["GET"], endpoint="analytics_top_absent")
    @role_required(Role.BEADLE)
    def analytics_top_absent():
        rows = container.analytics_service.top_absent(
            current_viewer(),
            limit=int_in_range(
                request.args.get("limit"), "limit", default=DEFAULT_TOP_ABSENT_LIMIT, minimum=1, maximum=MAX_PAGE_SIZE
            ),
            start=optional_date(request.args.get("startDate"), "startDate"),
            end=optional_date(request.args.get("endDate"), "endDate"),
        )
        return jsonify({"success": True, "top_absent_students": rows})

    @app.route("/api/analytics/trends", methods=["GET"], endpoint="analytics_trends")
    @role_required(Role.BEADLE)
    def analytics_trends():
        report = container.analytics_service.trends(
            current_viewer(),
            days=int_in_range(request.args.get("days"), "days", default=DEFAULT_TREND_DAYS, minimum=1, maximum=366),
        )
        return jsonify(
            {
                "success": True,
                "trends": report.trends,
                "trend_direction": report.direction,
                "recent_average": report.recent_average,
                "previous_average": report.previous_average,
            }
        )

    @app.route("/api/ai/query", methods=["POST"], endpoint="ai_query")
    @login_required
    def ai_query():
        data = json_body()
        query = require_non_empty(data.get("query"), "query")
        insight = container.analytics_service.ask(current_viewer(), query)
        return jsonify(
            {
                "success": True,
                "query": query,
                "response": insight.summary_text,
                "insight": insight.to_dict(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "ai_service": "keyword",
                "context": data.get("context") or "attendance_monitoring",
            }
        )
