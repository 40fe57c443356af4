"""초기 데이터 시드 스크립트 — 부서, 역할, 관리자, 기본 시프트 생성.

Seed script — Creates the initial department, role hierarchy, an admin
employee and a default day shift. Run once to bootstrap a development
database.

Usage:
    python -m hr_attendance.seed

Creates:
    - 1개 부서: "General" (1 department)
    - 3개 역할: admin(1), manager(2), employee(3) (3 roles)
    - 1개 관리자: ADM-001 (1 admin employee; an access token is printed)
    - 1개 시프트: GEN 09:00-18:00 (1 default shift assigned to the admin)
"""

import asyncio
from datetime import date, time

from sqlalchemy import select

from hr_attendance.database import async_session, engine, Base
from hr_attendance.models import Department, EmployeeShiftAssignment, Role, ShiftPolicy, User
from hr_attendance.utils.jwt import create_access_token


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts the department,
    role hierarchy, admin employee and default shift.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        # 역할이 하나라도 있으면 건너뜀 (Skip when any role already exists)
        result = await db.execute(select(Role).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        department: Department = Department(name="General", code="GEN")
        db.add(department)

        # 역할 계층 생성 — Create role hierarchy (level 1=admin ~ 3=employee)
        roles: dict[str, Role] = {}
        for name, level in [("admin", 1), ("manager", 2), ("employee", 3)]:
            roles[name] = Role(name=name, level=level)
            db.add(roles[name])
        await db.flush()

        admin: User = User(
            role_id=roles["admin"].id,
            department_id=department.id,
            employee_code="ADM-001",
            full_name="System Admin",
            email="admin@example.com",
            is_active=True,
        )
        shift: ShiftPolicy = ShiftPolicy(
            name="General Shift",
            code="GEN",
            start_time=time(9, 0),
            end_time=time(18, 0),
        )
        db.add_all([admin, shift])
        await db.flush()

        db.add(
            EmployeeShiftAssignment(
                user_id=admin.id,
                shift_id=shift.id,
                effective_from=date.today(),
                assigned_by=admin.id,
            )
        )
        await db.commit()

        token: str = create_access_token({"sub": str(admin.id)})
        print(f"Seeded: department={department.id}, admin={admin.id}")
        print(f"Admin access token: {token}")


if __name__ == "__main__":
    asyncio.run(seed())
