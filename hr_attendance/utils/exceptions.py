"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the attendance engine's
error categories: validation (400), not-found (404), state conflict (409)
and authorization (401/403). Services raise these directly; bulk operations
catch them per item and report ``detail`` as the failure reason.

Usage:
    from hr_attendance.utils.exceptions import NotFoundError, AlreadyCheckedInError
    raise NotFoundError("Correction request not found")
    raise AlreadyCheckedInError()
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (record, shift, correction request) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class NotCheckedInError(NotFoundError):
    """체크아웃할 출근 기록이 없음 — No open record to check out."""

    def __init__(self, detail: str = "Not checked in: check in first") -> None:
        super().__init__(detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when attempting to create a resource that violates a uniqueness constraint
    (e.g. duplicate shift code, duplicate geofence code).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 현재 상태와 충돌하는 요청.

    409 Conflict exception for state conflicts.
    Safe to retry after inspecting the current state of the resource.

    Args:
        detail: 오류 메시지 (Error message, default: "State conflict")
    """

    def __init__(self, detail: str = "State conflict") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class AlreadyCheckedInError(ConflictError):
    """이미 출근 처리됨 — Check-in already recorded for this employee-day."""

    def __init__(self, detail: str = "Already checked in for this date") -> None:
        super().__init__(detail=detail)


class AlreadyCheckedOutError(ConflictError):
    """이미 퇴근 처리됨 — Check-out already recorded for this employee-day."""

    def __init__(self, detail: str = "Already checked out for this date") -> None:
        super().__init__(detail=detail)


class InvalidStateError(ConflictError):
    """잘못된 상태 전이 — Transition not allowed from the current state."""

    def __init__(self, detail: str = "Invalid state for this operation") -> None:
        super().__init__(detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the caller lacks the required role, or reviews a correction
    outside their own department.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation catches
    (e.g. check-out not after check-in, rejection without review notes).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
