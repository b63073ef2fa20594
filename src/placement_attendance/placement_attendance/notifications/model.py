from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class NotificationEvent:
    event_type: NotificationType
    recipient_ids: tuple[int, ...]
    title: str
    message: str
    student_id: Optional[int] = None
    attendance_id: Optional[int] = None
    created_at: Optional[datetime] = None
