"""부서 관련 SQLAlchemy ORM 모델 정의.

Department SQLAlchemy ORM model definitions.
Departments scope correction reviews and manager visibility.

Tables:
    - departments: 부서 (Departments)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_attendance.database import Base


class Department(Base):
    """부서 모델 — 직원 소속 단위.

    Department model — Organizational unit employees belong to.
    A correction request may only be reviewed by a manager of the same department.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 부서 이름 (Department name)
        code: 부서 코드 (Unique department code)
        created_at: 생성 일시 UTC (Creation timestamp)

    Relationships:
        users: 소속 직원 목록 (Members of the department)
    """

    __tablename__ = "departments"

    # 부서 고유 식별자 — Department unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 부서 이름 — Department display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 부서 코드 — Unique short code (e.g. "ENG", "HR")
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    users = relationship("User", back_populates="department")
