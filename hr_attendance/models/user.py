"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and Role SQLAlchemy ORM model definitions.
The user directory is maintained elsewhere; these tables are the read model
the attendance engine consults for identity, role level and department.

Tables:
    - roles: 역할 (Roles, level-based hierarchy)
    - users: 직원 계정 (Employee accounts)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_attendance.database import Base


class Role(Base):
    """역할 모델 — 권한 수준을 정의.

    Role model — Defines permission levels.
    Lower level numbers indicate higher authority:
        1 = admin, 2 = manager, 3 = employee

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 역할 이름 (Role name, unique)
        level: 권한 레벨 (Permission level, 1=highest)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "roles"

    # 역할 고유 식별자 — Role unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 역할 이름 — Role display name ("admin", "manager", "employee")
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 권한 레벨 — Permission level (1=admin 최고 권한, 3=employee 최저 권한)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    users = relationship("User", back_populates="role")


class User(Base):
    """직원 모델 — 근태 대상 사용자.

    User model — Employee whose attendance is tracked.
    Each user has one role and belongs to at most one department.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        role_id: 역할 FK (Assigned role foreign key)
        department_id: 부서 FK (Department foreign key, optional)
        employee_code: 사번 (Unique employee code)
        full_name: 실명 (Full display name)
        email: 이메일 (Email address, optional)
        is_active: 활성 상태 (Active status, inactive users are skipped by bulk jobs)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        role: 사용자 역할 (Assigned role)
        department: 소속 부서 (Department)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 역할 FK — Assigned role (역할 삭제 시 제한됨, role deletion is restricted)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id"), nullable=False)
    # 부서 FK — Department membership (부서 삭제 시 NULL, set null on delete)
    department_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    # 사번 — Employee code shown on exports
    employee_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 이메일 — Email address (optional)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    role = relationship("Role", back_populates="users")
    department = relationship("Department", back_populates="users")
