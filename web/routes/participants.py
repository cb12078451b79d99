"""
참가자 API 라우트

참가자 조회는 인증된 호출자 누구나, 생성/수정/삭제는 관리자 전용.
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.engine import LedgerEngine
from core.ledger.errors import ParticipantNotFoundError
from core.storage.participant_store import ParticipantData, ParticipantStore
from core.types import Caller
from web.dependencies import (
    ensure_self_or_admin,
    get_caller,
    get_db,
    get_db_write,
    get_engine,
    require_admin,
)
from web.models.requests import ParticipantRequest

router = APIRouter(prefix="/api/participants", tags=["Participants"])


def _to_data(request: ParticipantRequest) -> ParticipantData:
    return ParticipantData(
        first_name=request.first_name.strip(),
        last_name=request.last_name.strip(),
        child_name=request.child_name.strip(),
        phone=request.phone,
        email=request.email,
        is_excluded=request.is_excluded,
    )


@router.get("")
async def list_participants(
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """참가자 목록 (성, 이름 순, 잔액 포함)"""
    participants = await ParticipantStore(db).list_all()
    return {"success": True, "data": [p.to_dict() for p in participants]}


@router.get("/{participant_id}")
async def get_participant(
    participant_id: int,
    db: SQLiteAdapter = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """참가자 단건 조회"""
    participant = await ParticipantStore(db).get(participant_id)
    if participant is None:
        raise ParticipantNotFoundError(participant_id)
    return {"success": True, "data": participant.to_dict()}


@router.post("", status_code=201)
async def create_participant(
    request: ParticipantRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    caller: Caller = Depends(require_admin),
):
    """참가자 생성 (개인 계좌 함께 생성)"""
    store = ParticipantStore(db)
    participant_id = await store.create(_to_data(request))
    participant = await store.get(participant_id)
    return {
        "success": True,
        "data": participant.to_dict() if participant else {"id": participant_id},
        "message": "Participant created",
    }


@router.put("/{participant_id}")
async def update_participant(
    participant_id: int,
    request: ParticipantRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    caller: Caller = Depends(require_admin),
):
    """참가자 수정 (분배 제외 여부 포함)"""
    store = ParticipantStore(db)
    await store.update(participant_id, _to_data(request))
    participant = await store.get(participant_id)
    return {
        "success": True,
        "data": participant.to_dict() if participant else None,
        "message": "Participant updated",
    }


@router.delete("/{participant_id}")
async def delete_participant(
    participant_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
    caller: Caller = Depends(require_admin),
):
    """참가자 삭제 (납입 거래가 있으면 409)"""
    await ParticipantStore(db).delete(participant_id)
    return {"success": True, "message": "Participant deleted"}


@router.get("/{participant_id}/balance")
async def get_participant_balance(
    participant_id: int,
    engine: LedgerEngine = Depends(get_engine),
    caller: Caller = Depends(get_caller),
):
    """참가자 개인 계좌 잔액 (관리자 또는 본인)"""
    ensure_self_or_admin(caller, participant_id)
    balance = await engine.get_balance(participant_id)
    return {
        "success": True,
        "data": {"participant_id": participant_id, "balance": str(balance)},
    }
