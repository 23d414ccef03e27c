"""Example: answer an attendance question through the service layer (no Flask)."""

import importlib
import logging

from config import get_settings_module

from src.school_attendance.school_attendance.container import build_container
from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.users.model import Viewer


def main():
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    viewer = Viewer(user_id="admin", role=Role.ADMIN)
    insight = container.analytics_service.ask(viewer, "What's the attendance rate?")
    logging.getLogger("example").info("\n%s", insight.summary_text)


if __name__ == "__main__":
    main()
