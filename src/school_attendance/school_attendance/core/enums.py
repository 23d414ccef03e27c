from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Staff roles, lowest privilege first."""

    BEADLE = "beadle"
    ADVISER = "adviser"
    COORDINATOR = "coordinator"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_ORDER.index(self)

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


_ROLE_ORDER = [Role.BEADLE, Role.ADVISER, Role.COORDINATOR, Role.ADMIN]


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class Grouping(str, Enum):
    """How the aggregator buckets a record window."""

    NONE = "none"
    DAY = "day"
    WEEK = "week"
    SECTION = "section"
    STUDENT = "student"


class Intent(str, Enum):
    """Classified purpose of a free-text attendance question."""

    RATE = "rate"
    ABSENCE = "absence"
    TREND = "trend"
    STUDENT_PERFORMANCE = "student_performance"
    DEFAULT = "default"


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class RankMetric(str, Enum):
    ABSENCE_COUNT = "absence_count"
    ATTENDANCE_RATE_ASC = "attendance_rate_asc"
    ATTENDANCE_RATE_DESC = "attendance_rate_desc"
