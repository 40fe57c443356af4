"""근태 도메인 닫힌 열거형 정의.

Closed enumerations for the attendance domain. Status values are only
produced by the time computation engine, except for the administrative
``absent`` and ``on_leave`` overrides.
"""

import enum


class AttendanceStatus(str, enum.Enum):
    """일별 근태 상태 (Daily attendance status)."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"
    EARLY_DEPARTURE = "early_departure"


class CorrectionStatus(str, enum.Enum):
    """정정 요청 상태 — approved/rejected는 종결 상태.

    Correction request status; approved and rejected are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CorrectionType(str, enum.Enum):
    """정정 요청 유형 (Correction request type)."""

    MISSED_CHECK_IN = "missed_check_in"
    MISSED_CHECK_OUT = "missed_check_out"
    WRONG_TIME = "wrong_time"
    FORGOT_PUNCH = "forgot_punch"


class ReviewDecision(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"


class AlertType(str, enum.Enum):
    """경고 유형 (Alert type)."""

    LATE_ARRIVAL = "late_arrival"
    EARLY_DEPARTURE = "early_departure"
    CONTINUOUS_ABSENCE = "continuous_absence"


class AlertSeverity(str, enum.Enum):
    MEDIUM = "medium"
    HIGH = "high"


class LocationLogType(str, enum.Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
