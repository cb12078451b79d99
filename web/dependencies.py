"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

import secrets
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger.engine import LedgerEngine
from core.types import Caller


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    조회 API에서 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    Ledger 변경, 참가자 관리 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


def get_engine(db: SQLiteAdapter = Depends(get_db)) -> LedgerEngine:
    """조회용 LedgerEngine"""
    return LedgerEngine(db)


def get_write_engine(db: SQLiteAdapter = Depends(get_db_write)) -> LedgerEngine:
    """변경용 LedgerEngine"""
    return LedgerEngine(db)


# =========================================================================
# 호출자 식별
# =========================================================================


def get_caller(
    authorization: str | None = Header(default=None),
    x_participant_id: int | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Caller:
    """요청 호출자 식별

    - Authorization: Bearer <admin_token> → 관리자
    - X-Participant-Id: <id> → 학부모 (앞단 인증 계층에서 확인된 ID)
    - 둘 다 없으면 401
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        admin_token = settings.admin_token
        if (
            scheme.lower() == "bearer"
            and admin_token
            and secrets.compare_digest(token.strip(), admin_token)
        ):
            return Caller.admin()
        raise HTTPException(status_code=401, detail="Invalid admin token")

    if x_participant_id is not None:
        return Caller.parent(x_participant_id)

    raise HTTPException(status_code=401, detail="Authentication required")


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    """관리자 전용 API"""
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller


def ensure_self_or_admin(caller: Caller, participant_id: int) -> None:
    """관리자 또는 본인(학부모)만 허용"""
    if not caller.can_contribute_for(participant_id):
        raise HTTPException(status_code=403, detail="Access denied for this participant")
