"""기본 CRUD 레포지토리 — 근태 도메인 레포지토리의 부모 클래스.

Base repository shared by the attendance, shift, geofence, correction,
alert, summary, notification and user repositories. Writes only flush;
the router (or the scheduler loop) owns the commit.

Usage:
    class GeofenceRepository(BaseRepository[GeofenceLocation]):
        def __init__(self) -> None:
            super().__init__(GeofenceLocation)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.database import Base

# 모델 타입 변수 — Bound to the declarative base
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Attributes:
        model: 관리 대상 모델 클래스 (Model class this repository manages)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """UUID로 단일 행을 조회합니다 (Single row by primary key, or None)."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        db: AsyncSession,
        *clauses: ColumnElement[bool],
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """조건절에 맞는 모든 행을 조회합니다.

        All rows matching the given WHERE clauses, optionally ordered.
        """
        query: Select = select(self.model)
        if clauses:
            query = query.where(*clauses)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """쿼리에 페이지네이션을 적용합니다.

        Run ``query`` for one page and count the full result set.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 필터/정렬이 적용된 SELECT (Filtered, ordered SELECT)
            page: 1부터 시작하는 페이지 번호 (1-based page number)
            per_page: 페이지 크기 (Page size)

        Returns:
            tuple[Sequence[ModelType], int]: (현재 페이지 행, 전체 개수)
                                             (Rows on this page, total count)
        """
        total: int = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
        result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        return result.scalars().all(), total

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """행을 추가하고 서버 기본값까지 다시 읽습니다 (Insert, flush and refresh)."""
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """주어진 필드만 덮어씁니다.

        Overwrite the given fields (None included) on an existing row.
        Unknown keys are ignored. Returns None when the row does not exist.
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, record_id: UUID) -> bool:
        """행을 삭제합니다 (Delete by primary key; False when missing)."""
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True
