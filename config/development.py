import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)))

# Analytics knobs (percentages unless noted)
TREND_WINDOW = int(os.getenv("TREND_WINDOW", "7"))
RATE_EXCELLENT = float(os.getenv("RATE_EXCELLENT", "90"))
RATE_GOOD = float(os.getenv("RATE_GOOD", "80"))
ALERT_OVERALL_RATE = float(os.getenv("ALERT_OVERALL_RATE", "80"))
ALERT_SECTION_RATE = float(os.getenv("ALERT_SECTION_RATE", "70"))
ALERT_ABSENCE_COUNT = int(os.getenv("ALERT_ABSENCE_COUNT", "5"))
