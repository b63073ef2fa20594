from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.responses import error_response, format_response, json_body, json_errors
from ..common.session import current_viewer, login_required, roles_required
from ..common.validators import optional_text
from ..core.enums import STAFF_ROLES, ApprovalStatus, DayStatus, Role
from ..core.exceptions import ValidationError
from ..container import Container
from . import time_policy
from .model import RecordFilters

API_PREFIX = "/api/v1/attendance"


def _parse_filters() -> RecordFilters:
    day_status = (request.args.get("day_status") or "").strip().upper()
    approval_status = (request.args.get("approval_status") or "").strip().upper()
    try:
        return RecordFilters(
            start_date=parse_optional_date(request.args.get("start"), "start"),
            end_date=parse_optional_date(request.args.get("end"), "end"),
            day_status=DayStatus(day_status) if day_status else None,
            approval_status=ApprovalStatus(approval_status) if approval_status else None,
        )
    except ValueError:
        raise ValidationError("Invalid status filter")


def _records_response(message: str, records):
    data = [r.to_dict() for r in records]
    return jsonify(format_response(True, message, data, {"count": len(data)}))


def register(app: Flask, container: Container) -> None:
    def _student_id():
        viewer = current_viewer()
        return viewer.student_id if viewer else None

    def _missing_student_profile():
        return error_response("Student profile not found", 400, "PRECONDITION_FAILED")

    @app.route(f"{API_PREFIX}/check-in", methods=["POST"], endpoint="attendance_check_in")
    @roles_required(Role.STUDENT)
    @json_errors
    def check_in():
        student_id = _student_id()
        if student_id is None:
            return _missing_student_profile()

        record = container.attendance_service.check_in(student_id, json_body())
        meta = {"punctuality": record.punctuality.value, "check_in_time": record.check_in_time.isoformat()}
        return jsonify(format_response(True, "Check-in successful", record.to_dict(), meta)), 201

    @app.route(f"{API_PREFIX}/check-out", methods=["PUT"], endpoint="attendance_check_out")
    @roles_required(Role.STUDENT)
    @json_errors
    def check_out():
        student_id = _student_id()
        if student_id is None:
            return _missing_student_profile()

        record = container.attendance_service.check_out(student_id, json_body())
        meta = {
            "check_out_time": record.check_out_time.isoformat(),
            "hours_worked": float(record.hours_worked) if record.hours_worked is not None else 0.0,
            "day_status": record.day_status.value,
        }
        return jsonify(format_response(True, "Check-out successful", record.to_dict(), meta))

    @app.route(f"{API_PREFIX}/today", methods=["GET"], endpoint="attendance_today")
    @roles_required(Role.STUDENT)
    @json_errors
    def today():
        student_id = _student_id()
        if student_id is None:
            return _missing_student_profile()

        record = container.attendance_service.get_today(student_id)
        message = "Check-in record found" if record else "Not checked in today"
        return jsonify(format_response(True, message, record.to_dict() if record else None))

    @app.route(f"{API_PREFIX}/my-attendance", methods=["GET"], endpoint="attendance_my_history")
    @roles_required(Role.STUDENT)
    @json_errors
    def my_attendance():
        student_id = _student_id()
        if student_id is None:
            return _missing_student_profile()

        records = container.attendance_service.get_history(student_id, current_viewer(), filters=_parse_filters())
        return _records_response("Attendance history retrieved successfully", records)

    @app.route(f"{API_PREFIX}/my-stats", methods=["GET"], endpoint="attendance_my_stats")
    @roles_required(Role.STUDENT)
    @json_errors
    def my_stats():
        student_id = _student_id()
        if student_id is None:
            return _missing_student_profile()

        stats = container.summary_service.get_stats(student_id, current_viewer())
        return jsonify(format_response(True, "Attendance statistics retrieved successfully", stats.to_dict()))

    @app.route(f"{API_PREFIX}/absence-request", methods=["POST"], endpoint="attendance_absence_request")
    @roles_required(Role.STUDENT)
    @json_errors
    def absence_request():
        student_id = _student_id()
        if student_id is None:
            return _missing_student_profile()

        payload = json_body()
        work_date = parse_optional_date(payload.get("date"), "date")
        reason = optional_text(payload.get("reason"), "Reason")
        if work_date is None or not reason:
            raise ValidationError("Date and reason are required")

        record = container.absence_service.submit_absence_request(student_id, work_date, reason)
        return jsonify(format_response(True, "Absence request submitted successfully", record.to_dict())), 201

    @app.route(f"{API_PREFIX}/student/<int:student_id>", methods=["GET"], endpoint="attendance_student_history")
    @roles_required(*STAFF_ROLES)
    @json_errors
    def student_history(student_id: int):
        records = container.attendance_service.get_history(student_id, current_viewer(), filters=_parse_filters())
        return _records_response("Student attendance retrieved successfully", records)

    @app.route(f"{API_PREFIX}/student/<int:student_id>/stats", methods=["GET"], endpoint="attendance_student_stats")
    @roles_required(*STAFF_ROLES)
    @json_errors
    def student_stats(student_id: int):
        stats = container.summary_service.get_stats(student_id, current_viewer())
        return jsonify(format_response(True, "Student attendance statistics retrieved successfully", stats.to_dict()))

    @app.route(f"{API_PREFIX}/placement/<int:placement_id>", methods=["GET"], endpoint="attendance_placement")
    @roles_required(*STAFF_ROLES)
    @json_errors
    def placement_records(placement_id: int):
        records = container.attendance_service.get_placement_records(
            placement_id, current_viewer(), filters=_parse_filters()
        )
        return _records_response("Placement attendance retrieved successfully", records)

    @app.route(f"{API_PREFIX}/summary/<int:student_id>", methods=["GET"], endpoint="attendance_summary")
    @roles_required(*STAFF_ROLES, Role.STUDENT)
    @json_errors
    def summary(student_id: int):
        data = container.summary_service.get_summary(student_id, current_viewer())
        return jsonify(format_response(True, "Attendance summary retrieved successfully", data.to_dict()))

    @app.route(f"{API_PREFIX}/mark-absent", methods=["POST"], endpoint="attendance_mark_absent")
    @roles_required(Role.ADMIN, Role.COORDINATOR)
    @json_errors
    def mark_absent():
        payload = json_body()
        target = parse_optional_date(payload.get("date"), "date")

        created = container.absence_sweeper.mark_absent_for_date(target)
        data = [r.to_dict() for r in created]
        return jsonify(format_response(True, f"Marked {len(data)} students as absent", data, {"count": len(data)}))

    @app.route(f"{API_PREFIX}/policy", methods=["GET"], endpoint="attendance_policy")
    @login_required
    def policy():
        return jsonify(format_response(True, "Attendance policy", time_policy.workday_policy()))
