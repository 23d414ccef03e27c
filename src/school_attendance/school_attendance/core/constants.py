"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TREND_WINDOW = 7
DEFAULT_TREND_DAYS = 30
DEFAULT_INSIGHT_TOP_LIMIT = 5
DEFAULT_TOP_ABSENT_LIMIT = 10
DEFAULT_STUDENT_PERFORMANCE_LIMIT = 20
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_SESSION_DAYS = 7

# Qualitative labels for an attendance rate (percent).
RATE_EXCELLENT = 90.0
RATE_GOOD = 80.0

# Alert thresholds.
ALERT_OVERALL_RATE = 80.0
ALERT_SECTION_RATE = 70.0
ALERT_ABSENCE_COUNT = 5
