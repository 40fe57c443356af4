"""시간대 변환 유틸리티 모듈.

Timezone helper module. All timestamps are persisted as UTC; work dates and
shift windows are evaluated in the configured local timezone (settings.TIMEZONE).
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from hr_attendance.config import settings


def local_tz() -> ZoneInfo:
    """설정된 현지 타임존을 반환합니다 (Configured local timezone)."""
    return ZoneInfo(settings.TIMEZONE)


def ensure_utc(value: datetime) -> datetime:
    """타임존 정보가 없는 값은 UTC로 간주하고 UTC로 정규화합니다.

    Normalize a datetime to UTC. Naive values are treated as UTC, which is
    how drivers without timezone support hand back stored timestamps.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime) -> datetime:
    """UTC 시각을 현지 시각으로 변환합니다 (UTC to local wall time)."""
    return ensure_utc(value).astimezone(local_tz())


def local_date(value: datetime) -> date:
    """시각이 속한 현지 근무일을 반환합니다 (Local calendar date of an instant)."""
    return to_local(value).date()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
