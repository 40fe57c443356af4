"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Builds the explicit ``AuthContext`` passed into every service operation
from the bearer token and the user directory.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
    5. 사용자 활성 상태를 확인하고 AuthContext를 구성
       (User active status is verified and an AuthContext is built)

Authorization Flow (require_level):
    1. get_auth_context로 호출자 컨텍스트 구성 (Caller context built)
    2. 역할 레벨이 max_level 이하인지 확인 (Level checked against max_level)
    3. 레벨이 높으면(숫자가 크면) 403 Forbidden 반환
       (Returns 403 if level exceeds max_level)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.database import get_db
from hr_attendance.models.user import User
from hr_attendance.repositories.user_repository import user_repository
from hr_attendance.utils.auth_context import ADMIN_LEVEL, MANAGER_LEVEL, AuthContext
from hr_attendance.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — Authorization 헤더에서 JWT 토큰 추출
# (Extracts JWT token from Authorization: Bearer <token> header)
security: HTTPBearer = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.
    Validates token signature, expiration, and user existence/active status.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 역할이 로드된 사용자 (Authenticated user with role loaded)

    Raises:
        HTTPException(401): 토큰이 유효하지 않거나 만료됨 (Invalid or expired token)
        HTTPException(401): 사용자를 찾을 수 없거나 비활성 (User not found or inactive)
    """
    try:
        payload: dict = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        user_uuid: UUID = UUID(user_id)
    except HTTPException:
        raise
    except (jwt.ExpiredSignatureError, jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user: User | None = await user_repository.get_with_role(db, user_uuid)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


async def get_auth_context(
    current_user: Annotated[User, Depends(get_current_user)],
) -> AuthContext:
    """인증된 사용자로부터 AuthContext를 구성합니다.

    Build the caller context (identity, role, department) for service calls.
    """
    return AuthContext(
        actor_id=current_user.id,
        role=current_user.role.name,
        level=current_user.role.level,
        department_id=current_user.department_id,
    )


def require_level(max_level: int) -> Callable[..., Awaitable[AuthContext]]:
    """역할 레벨 기반 권한 검사 의존성 팩토리.

    Dependency factory that creates a FastAPI dependency enforcing
    a maximum role level. Lower level = higher authority.

    Level hierarchy:
        1 = admin (최고 권한, highest authority)
        2 = manager
        3 = employee (최저 권한, lowest authority)

    Args:
        max_level: 허용되는 최대 역할 레벨 (Maximum allowed role level, inclusive)

    Returns:
        FastAPI 의존성 함수 — AuthContext 반환 또는 403 발생
        (FastAPI dependency returning AuthContext or raising 403)
    """
    async def _check(
        auth: Annotated[AuthContext, Depends(get_auth_context)],
    ) -> AuthContext:
        if auth.level > max_level:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return auth
    return _check


# 편의 의존성 — Pre-configured level dependencies for common role requirements
require_admin = require_level(ADMIN_LEVEL)      # 관리자만 허용 (Admin only, level 1)
require_manager = require_level(MANAGER_LEVEL)  # 관리자 + 매니저 허용 (Admin + manager, level <= 2)
