"""직원 디렉터리 레포지토리 — 사용자/부서 조회 담당.

User directory repository — Read access to employees, their roles and
departments. The directory is owned by another system; the attendance
engine only looks employees up, lists active ones and finds the managers
of a department.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_attendance.models.organization import Department
from hr_attendance.models.user import Role, User
from hr_attendance.repositories.base import BaseRepository
from hr_attendance.utils.auth_context import MANAGER_LEVEL


class UserRepository(BaseRepository[User]):
    """직원 디렉터리 레포지토리.

    User directory repository.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_with_role(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> User | None:
        """역할과 부서를 함께 로드하여 사용자를 조회합니다.

        Retrieve a user with role and department eagerly loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        query: Select = (
            select(User)
            .options(selectinload(User.role), selectinload(User.department))
            .where(User.id == user_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_active_users(
        self,
        db: AsyncSession,
        department_id: UUID | None = None,
    ) -> Sequence[User]:
        """활성 직원 목록을 조회합니다 (Active employees, optionally by department)."""
        query: Select = select(User).where(User.is_active.is_(True))
        if department_id is not None:
            query = query.where(User.department_id == department_id)
        result = await db.execute(query.order_by(User.employee_code))
        return result.scalars().all()

    async def get_department_managers(
        self,
        db: AsyncSession,
        department_id: UUID | None,
    ) -> Sequence[User]:
        """부서의 매니저(레벨 2 이하) 목록을 조회합니다.

        Retrieve active users of the department whose role level is manager or higher.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            department_id: 부서 UUID, None이면 빈 목록 (Department UUID; None yields nothing)

        Returns:
            Sequence[User]: 매니저 목록 (Department managers)
        """
        if department_id is None:
            return []
        query: Select = (
            select(User)
            .join(Role, Role.id == User.role_id)
            .where(
                User.department_id == department_id,
                User.is_active.is_(True),
                Role.level <= MANAGER_LEVEL,
            )
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_department(
        self,
        db: AsyncSession,
        department_id: UUID,
    ) -> Department | None:
        result = await db.execute(select(Department).where(Department.id == department_id))
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
