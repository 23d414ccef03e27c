import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

TREND_WINDOW = 7
RATE_EXCELLENT = 90.0
RATE_GOOD = 80.0
ALERT_OVERALL_RATE = 80.0
ALERT_SECTION_RATE = 70.0
ALERT_ABSENCE_COUNT = 5
