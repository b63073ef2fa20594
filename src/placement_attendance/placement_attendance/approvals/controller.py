from __future__ import annotations

from flask import Flask, jsonify

from ..attendance.controller import API_PREFIX
from ..common.responses import format_response, json_body, json_errors
from ..common.session import current_viewer, roles_required
from ..common.validators import optional_text
from ..core.enums import SUPERVISOR_ROLES
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _signed_in_supervisor_id() -> int:
        # Raises AuthorizationError when the user has no supervisor profile.
        return container.approval_service.supervisor_id_for(current_viewer())

    @app.route(f"{API_PREFIX}/<int:attendance_id>/approve", methods=["POST"], endpoint="attendance_approve")
    @roles_required(*SUPERVISOR_ROLES)
    @json_errors
    def approve(attendance_id: int):
        supervisor_id = _signed_in_supervisor_id()

        payload = json_body()
        record = container.approval_service.approve(attendance_id, supervisor_id, payload.get("comment"))
        return jsonify(format_response(True, "Attendance approved successfully", record.to_dict()))

    @app.route(f"{API_PREFIX}/<int:attendance_id>/reject", methods=["POST"], endpoint="attendance_reject")
    @roles_required(*SUPERVISOR_ROLES)
    @json_errors
    def reject(attendance_id: int):
        supervisor_id = _signed_in_supervisor_id()

        payload = json_body()
        record = container.approval_service.reject(attendance_id, supervisor_id, payload.get("comment"))
        return jsonify(format_response(True, "Attendance rejected successfully", record.to_dict()))

    @app.route(f"{API_PREFIX}/<int:attendance_id>/reclassify", methods=["PATCH"], endpoint="attendance_reclassify")
    @roles_required(*SUPERVISOR_ROLES)
    @json_errors
    def reclassify(attendance_id: int):
        supervisor_id = _signed_in_supervisor_id()

        payload = json_body()
        comment = optional_text(payload.get("comment"), "Comment")
        if not payload.get("day_status") or not comment:
            raise ValidationError("Day status and comment are required")

        record = container.approval_service.reclassify(attendance_id, supervisor_id, payload["day_status"], comment)
        return jsonify(format_response(True, "Attendance reclassified successfully", record.to_dict()))

    @app.route(f"{API_PREFIX}/<int:attendance_id>/acknowledge", methods=["POST"], endpoint="attendance_acknowledge")
    @roles_required(*SUPERVISOR_ROLES)
    @json_errors
    def acknowledge(attendance_id: int):
        supervisor_id = _signed_in_supervisor_id()

        record = container.approval_service.acknowledge(attendance_id, supervisor_id)
        return jsonify(format_response(True, "Attendance acknowledged successfully", record.to_dict()))
