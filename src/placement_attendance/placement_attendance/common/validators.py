from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_string(value: Any, field_name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_non_empty(value: Any, field_name: str) -> str:
    value = require_string(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def optional_text(value: Any, field_name: str = "Text") -> Optional[str]:
    """Strip a free-text field, mapping blank input to None."""
    v = (require_string(value, field_name) or "").strip()
    return v or None
