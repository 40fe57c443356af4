"""근무일 달력 유틸리티 모듈.

Working-day calendar helpers. The calendar itself (working weekdays and
company holidays) is configuration consumed from settings; these helpers
only count and test dates against it.
"""

import calendar
from datetime import date, timedelta

from hr_attendance.config import settings


def is_holiday(day: date) -> bool:
    """회사 휴일 여부 (Whether the date is a configured company holiday)."""
    return day in set(settings.HOLIDAYS)


def is_working_day(day: date) -> bool:
    """근무일 여부 — 근무 요일이면서 휴일이 아님.

    A working day falls on a configured working weekday and is not a holiday.
    """
    return day.weekday() in settings.WORKING_WEEKDAYS and not is_holiday(day)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """해당 월의 첫날과 마지막 날 (First and last date of a month)."""
    last_day: int = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def count_working_days(start: date, end: date) -> int:
    """기간 내 근무일 수를 셉니다 (양 끝 포함).

    Count working days in the inclusive range [start, end].

    Args:
        start: 시작일 (First date, inclusive)
        end: 종료일 (Last date, inclusive)

    Returns:
        int: 근무일 수, 범위가 비어 있으면 0 (Working days; 0 for an empty range)
    """
    count: int = 0
    day: date = start
    while day <= end:
        if is_working_day(day):
            count += 1
        day += timedelta(days=1)
    return count
