from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .analytics.alerts import AlertThresholds
from .analytics.enrichers import InsightEnricher, NoopInsightEnricher
from .analytics.formatter import InsightFormatter, RateThresholds
from .analytics.pipeline import InsightPipeline
from .analytics.service import AnalyticsService
from .attendance.repository import AttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import today_local
from .core.constants import (
    ALERT_ABSENCE_COUNT,
    ALERT_OVERALL_RATE,
    ALERT_SECTION_RATE,
    DEFAULT_TREND_WINDOW,
    RATE_EXCELLENT,
    RATE_GOOD,
)
from .database.connection import DBConfig, DatabaseConnection
from .roster.mysql_roster_repository import MySQLSectionRepository, MySQLStudentRepository
from .roster.repository import SectionRepository, StudentRepository
from .roster.service import RosterService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class AnalyticsSettings:
    trend_window: int = DEFAULT_TREND_WINDOW
    rate_excellent: float = RATE_EXCELLENT
    rate_good: float = RATE_GOOD
    alert_overall_rate: float = ALERT_OVERALL_RATE
    alert_section_rate: float = ALERT_SECTION_RATE
    alert_absence_count: int = ALERT_ABSENCE_COUNT

    @classmethod
    def from_settings(cls, settings) -> "AnalyticsSettings":
        defaults = cls()
        return cls(
            trend_window=int(getattr(settings, "TREND_WINDOW", defaults.trend_window)),
            rate_excellent=float(getattr(settings, "RATE_EXCELLENT", defaults.rate_excellent)),
            rate_good=float(getattr(settings, "RATE_GOOD", defaults.rate_good)),
            alert_overall_rate=float(getattr(settings, "ALERT_OVERALL_RATE", defaults.alert_overall_rate)),
            alert_section_rate=float(getattr(settings, "ALERT_SECTION_RATE", defaults.alert_section_rate)),
            alert_absence_count=int(getattr(settings, "ALERT_ABSENCE_COUNT", defaults.alert_absence_count)),
        )

    def build_pipeline(self, enricher: Optional[InsightEnricher] = None) -> InsightPipeline:
        return InsightPipeline(
            formatter=InsightFormatter(RateThresholds(excellent=self.rate_excellent, good=self.rate_good)),
            enricher=enricher or NoopInsightEnricher(),
            alert_thresholds=AlertThresholds(
                overall_rate=self.alert_overall_rate,
                section_rate=self.alert_section_rate,
                absence_count=self.alert_absence_count,
            ),
            trend_window=self.trend_window,
        )


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    students_repo: StudentRepository
    sections_repo: SectionRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    roster_service: RosterService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService


def wire(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    sections_repo: SectionRepository,
    attendance_repo: AttendanceRepository,
    analytics: Optional[AnalyticsSettings] = None,
    enricher: Optional[InsightEnricher] = None,
    clock: Optional[Callable[[], date]] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""

    analytics = analytics or AnalyticsSettings()
    roster_service = RosterService(students_repo, sections_repo)

    return Container(
        users_repo=users_repo,
        students_repo=students_repo,
        sections_repo=sections_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        roster_service=roster_service,
        attendance_service=AttendanceService(attendance_repo, students_repo, sections_repo),
        analytics_service=AnalyticsService(
            attendance_repo,
            roster_service,
            pipeline=analytics.build_pipeline(enricher),
            trend_window=analytics.trend_window,
            clock=clock or today_local,
        ),
    )


def build_container(
    *,
    db_config: dict,
    analytics: Optional[AnalyticsSettings] = None,
    enricher: Optional[InsightEnricher] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return wire(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        sections_repo=MySQLSectionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        analytics=analytics,
        enricher=enricher,
    )
