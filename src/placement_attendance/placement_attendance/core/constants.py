"""Workday policy and anomaly thresholds.

Fixed institutional rules, not configuration.
"""

from datetime import time
from decimal import Decimal

# Institutional workday (single timezone).
WORK_START = time(8, 0)
WORK_END = time(16, 0)
GRACE_PERIOD_MINUTES = 15
MIN_REQUIRED_HOURS = Decimal("6")

# Anomaly detection thresholds.
ANOMALY_MIN_RECORDS = 5
LATENESS_RATE_THRESHOLD = 0.30
ABSENCE_RATE_THRESHOLD = 0.20
INCOMPLETE_RATE_THRESHOLD = 0.15
CONSECUTIVE_ABSENCE_WINDOW = 10
CONSECUTIVE_ABSENCE_THRESHOLD = 3

DEFAULT_STREAK_WINDOW = 30

MAX_ABSENCE_REASON_LENGTH = 500
MAX_NOTES_LENGTH = 500
MAX_SUPERVISOR_COMMENT_LENGTH = 1000
