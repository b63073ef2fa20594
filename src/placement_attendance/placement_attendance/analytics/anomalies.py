from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import (
    ABSENCE_RATE_THRESHOLD,
    ANOMALY_MIN_RECORDS,
    CONSECUTIVE_ABSENCE_THRESHOLD,
    CONSECUTIVE_ABSENCE_WINDOW,
    INCOMPLETE_RATE_THRESHOLD,
    LATENESS_RATE_THRESHOLD,
)
from ..core.enums import AnomalyType, DayStatus, Severity


@dataclass(frozen=True)
class AnomalyFinding:
    type: AnomalyType
    severity: Severity
    description: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "severity": self.severity.value, "description": self.description}


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, rounded half-up; 0 for an empty whole."""
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def consecutive_absences(records: Sequence[AttendanceRecord]) -> int:
    """Run of ABSENT days from the most recent record backward.

    `records` must be ordered newest first.
    """
    run = 0
    for record in records[:CONSECUTIVE_ABSENCE_WINDOW]:
        if record.day_status != DayStatus.ABSENT:
            break
        run += 1
    return run


class AnomalyAnalyzer:
    """Read-only behavioral checks over a student's attendance history."""

    def analyze(self, records: Sequence[AttendanceRecord]) -> list[AnomalyFinding]:
        ordered = sorted(records, key=lambda r: r.work_date, reverse=True)
        counts = Counter(r.day_status for r in ordered)
        total = len(ordered)
        findings: list[AnomalyFinding] = []

        on_time = counts[DayStatus.PRESENT_ON_TIME]
        late = counts[DayStatus.PRESENT_LATE]
        present = on_time + late
        if present > ANOMALY_MIN_RECORDS and late / present > LATENESS_RATE_THRESHOLD:
            findings.append(
                AnomalyFinding(
                    type=AnomalyType.FREQUENT_LATENESS,
                    severity=Severity.MEDIUM,
                    description=f"{percent(late, present)}% late arrivals detected",
                )
            )

        absent = counts[DayStatus.ABSENT]
        if total > ANOMALY_MIN_RECORDS and absent / total > ABSENCE_RATE_THRESHOLD:
            findings.append(
                AnomalyFinding(
                    type=AnomalyType.HIGH_ABSENCE_RATE,
                    severity=Severity.HIGH,
                    description=f"{percent(absent, total)}% absence rate",
                )
            )

        incomplete = counts[DayStatus.INCOMPLETE]
        if total > ANOMALY_MIN_RECORDS and incomplete / total > INCOMPLETE_RATE_THRESHOLD:
            findings.append(
                AnomalyFinding(
                    type=AnomalyType.FREQUENT_INCOMPLETE_DAYS,
                    severity=Severity.MEDIUM,
                    description=f"{incomplete} incomplete days (no checkout)",
                )
            )

        run = consecutive_absences(ordered)
        if run >= CONSECUTIVE_ABSENCE_THRESHOLD:
            findings.append(
                AnomalyFinding(
                    type=AnomalyType.CONSECUTIVE_ABSENCES,
                    severity=Severity.HIGH,
                    description=f"{run} consecutive absences detected",
                )
            )

        return findings
