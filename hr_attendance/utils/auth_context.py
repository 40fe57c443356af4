"""호출자 인증 컨텍스트.

Caller authorization context. Built once per request from the bearer token
and the user directory, then passed explicitly into every service operation.

Level hierarchy (lower = higher authority):
    1 = admin
    2 = manager
    3 = employee
"""

from dataclasses import dataclass
from uuid import UUID

from hr_attendance.utils.exceptions import ForbiddenError

ADMIN_LEVEL: int = 1
MANAGER_LEVEL: int = 2
EMPLOYEE_LEVEL: int = 3


@dataclass(frozen=True)
class AuthContext:
    """요청자 신원과 역할, 소속 부서.

    Caller identity, role and department.

    Attributes:
        actor_id: 요청자 사용자 UUID (Acting user UUID)
        role: 역할 이름 (Role name, e.g. "admin", "manager", "employee")
        level: 역할 레벨 (Role level, 1=highest)
        department_id: 소속 부서 UUID (Department UUID, None if unassigned)
    """

    actor_id: UUID
    role: str
    level: int
    department_id: UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.level <= ADMIN_LEVEL

    @property
    def is_manager(self) -> bool:
        return self.level <= MANAGER_LEVEL

    def require_admin(self) -> None:
        """관리자 권한이 없으면 403 (Raise 403 unless the caller is an admin)."""
        if not self.is_admin:
            raise ForbiddenError("Administrative privileges required")

    def require_manager(self) -> None:
        """매니저 이상이 아니면 403 (Raise 403 unless manager or admin)."""
        if not self.is_manager:
            raise ForbiddenError("Manager privileges required")

    def can_view_department(self, department_id: UUID | None) -> bool:
        """부서 데이터 열람 가능 여부 — 관리자는 전체, 매니저는 자기 부서.

        Admins see every department; managers only their own.
        """
        if self.is_admin:
            return True
        return self.is_manager and department_id is not None and department_id == self.department_id
