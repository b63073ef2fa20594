"""Nightly job: mark actively placed students absent for a day with no record.

Usage: python scripts/mark_absent.py [YYYY-MM-DD]   (defaults to yesterday)
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.placement_attendance.placement_attendance.common.datetime_utils import parse_optional_date
from src.placement_attendance.placement_attendance.container import build_container


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    target = parse_optional_date(argv[0] if argv else None, "date")
    container = build_container(db_config=dict(settings.DB_CONFIG))
    created = container.absence_sweeper.mark_absent_for_date(target)
    print(f"OK: marked {len(created)} students absent")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
