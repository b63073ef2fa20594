"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from src.placement_attendance.placement_attendance.attendance.access import Viewer
from src.placement_attendance.placement_attendance.container import build_container
from src.placement_attendance.placement_attendance.core.enums import Role


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    admin = Viewer(user_id=1, role=Role.ADMIN)
    print(container.summary_service.get_summary(1, admin).to_dict())
    print(container.summary_service.get_stats(1, admin).to_dict())


if __name__ == "__main__":
    main()
