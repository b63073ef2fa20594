from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def format_response(success: bool, message: str, data: Any = None, meta: Optional[dict] = None) -> dict:
    """Response envelope shared by every JSON endpoint."""

    body: dict[str, Any] = {
        "success": success,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if data is not None:
        body["data"] = data
    if meta:
        body["meta"] = meta
    return body


def error_response(message: str, status: int, code: str):
    body = format_response(False, message)
    body["error"] = code
    return jsonify(body), status


def json_errors(view):
    """Turn domain errors into typed JSON errors; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(str(e), e.http_status, e.code)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return error_response("Internal server error", 500, "INTERNAL_ERROR")

    return wrapper


def json_body() -> dict:
    """The request's JSON object, or {} when the body is empty or not JSON."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload
