"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) DB, session, and httpx
client fixtures. Every test gets a fresh schema on its own engine, so no
cleanup between tests is needed.
"""

from collections.abc import AsyncGenerator
from datetime import date, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hr_attendance.database import Base, get_db
from hr_attendance.main import app
from hr_attendance.models import *  # noqa: F401,F403 — register all models with metadata
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.jwt import create_access_token

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 테스트 기준 근무일 (월요일) — Reference work date (a Monday)
WORK_DATE = date(2025, 3, 3)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 스키마를 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite 트랜잭션 처리 우회 — SAVEPOINT 사용을 위해 BEGIN을 직접 발행
    @event.listens_for(eng.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def department(db: AsyncSession):
    """테스트 부서를 생성합니다."""
    from hr_attendance.models.organization import Department
    d = Department(name="Operations", code="OPS")
    db.add(d)
    await db.flush()
    await db.refresh(d)
    return d


@pytest_asyncio.fixture
async def other_department(db: AsyncSession):
    from hr_attendance.models.organization import Department
    d = Department(name="Finance", code="FIN")
    db.add(d)
    await db.flush()
    await db.refresh(d)
    return d


@pytest_asyncio.fixture
async def roles(db: AsyncSession):
    """기본 3개 역할을 생성합니다."""
    from hr_attendance.models.user import Role
    result = {}
    for name, level in [("admin", 1), ("manager", 2), ("employee", 3)]:
        role = Role(name=name, level=level)
        db.add(role)
        await db.flush()
        await db.refresh(role)
        result[name] = role
    return result


async def _make_user(db: AsyncSession, role, department, code: str, name: str):
    from hr_attendance.models.user import User
    user = User(
        role_id=role.id,
        department_id=department.id if department else None,
        employee_code=code,
        full_name=name,
        email=f"{code.lower()}@test.com",
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, roles, department):
    """관리자 사용자를 생성합니다."""
    return await _make_user(db, roles["admin"], department, "ADM-001", "Test Admin")


@pytest_asyncio.fixture
async def manager_user(db: AsyncSession, roles, department):
    """매니저 사용자를 생성합니다."""
    return await _make_user(db, roles["manager"], department, "MGR-001", "Test Manager")


@pytest_asyncio.fixture
async def employee_user(db: AsyncSession, roles, department):
    """직원 사용자를 생성합니다."""
    return await _make_user(db, roles["employee"], department, "EMP-001", "Test Employee")


@pytest_asyncio.fixture
async def second_employee(db: AsyncSession, roles, department):
    return await _make_user(db, roles["employee"], department, "EMP-002", "Second Employee")


@pytest_asyncio.fixture
async def outside_employee(db: AsyncSession, roles, other_department):
    """다른 부서 직원 (Employee in another department)."""
    return await _make_user(db, roles["employee"], other_department, "EMP-900", "Finance Employee")


@pytest_asyncio.fixture
async def day_shift(db: AsyncSession):
    """09:00-18:00 기본 시프트 (유예 15분, 조퇴 기준 15분, 초과근무 30분, 휴게 60분)."""
    from hr_attendance.models.shift import ShiftPolicy
    shift = ShiftPolicy(
        name="Day",
        code="DAY",
        start_time=time(9, 0),
        end_time=time(18, 0),
        grace_period_minutes=15,
        early_departure_threshold_minutes=15,
        overtime_start_after_minutes=30,
        minimum_work_minutes=480,
        half_day_threshold_minutes=240,
        break_minutes=60,
    )
    db.add(shift)
    await db.flush()
    await db.refresh(shift)
    return shift


async def assign(db: AsyncSession, user, shift, effective_from: date = date(2025, 1, 1)):
    """테스트용 시프트 배정을 직접 생성합니다."""
    from hr_attendance.models.shift import EmployeeShiftAssignment
    assignment = EmployeeShiftAssignment(
        user_id=user.id,
        shift_id=shift.id,
        effective_from=effective_from,
        is_active=True,
    )
    db.add(assignment)
    await db.flush()
    return assignment


@pytest_asyncio.fixture
async def employee_on_shift(db: AsyncSession, employee_user, day_shift):
    """기본 시프트가 배정된 직원."""
    await assign(db, employee_user, day_shift)
    return employee_user


# ---------------------------------------------------------------------------
# 요청자 컨텍스트 / 토큰 (Caller contexts and tokens)
# ---------------------------------------------------------------------------
def context_for(user, role_name: str, level: int) -> AuthContext:
    return AuthContext(actor_id=user.id, role=role_name, level=level, department_id=user.department_id)


@pytest.fixture
def admin_auth(admin_user) -> AuthContext:
    return context_for(admin_user, "admin", 1)


@pytest.fixture
def manager_auth(manager_user) -> AuthContext:
    return context_for(manager_user, "manager", 2)


@pytest.fixture
def employee_auth(employee_user) -> AuthContext:
    return context_for(employee_user, "employee", 3)


def make_token(user) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id)})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def manager_token(manager_user) -> str:
    return make_token(manager_user)


@pytest.fixture
def employee_token(employee_user) -> str:
    return make_token(employee_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
