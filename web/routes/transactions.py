"""
거래 API 라우트

납입/지출 등록, 취소, 재적용, 삭제, 수정 및 거래 피드 조회.
라우트 등록 순서 주의: 고정 경로(/statistics 등)를 /{transaction_id} 보다 먼저 등록.
"""

import logging

from fastapi import APIRouter, Depends, Query

from core.config.loader import Settings
from core.constants import Defaults
from core.ledger.engine import LedgerEngine
from core.types import Caller
from web.dependencies import (
    ensure_self_or_admin,
    get_app_settings,
    get_caller,
    get_engine,
    get_write_engine,
    require_admin,
)
from web.models.requests import (
    ContributionRequest,
    ExpenseRequest,
    TransactionUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


# =========================================================================
# 조회
# =========================================================================


@router.get("")
async def list_transactions(
    limit: int | None = Query(default=None, ge=1, le=Defaults.MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    engine: LedgerEngine = Depends(get_engine),
    settings: Settings = Depends(get_app_settings),
    caller: Caller = Depends(get_caller),
):
    """전체 거래 피드 (최신순, 취소 거래 포함)"""
    views = await engine.list_transactions(limit or settings.page_size, offset)
    return {"success": True, "data": [v.to_dict() for v in views]}


@router.get("/statistics")
async def get_statistics(
    engine: LedgerEngine = Depends(get_engine),
    caller: Caller = Depends(get_caller),
):
    """Ledger 통계 (활성 거래 기준)"""
    statistics = await engine.get_statistics()
    return {"success": True, "data": statistics.to_dict()}


@router.get("/participant/{participant_id}")
async def list_participant_transactions(
    participant_id: int,
    engine: LedgerEngine = Depends(get_engine),
    caller: Caller = Depends(get_caller),
):
    """참가자별 거래 피드 (관리자 또는 본인)"""
    ensure_self_or_admin(caller, participant_id)
    views = await engine.list_transactions_for_participant(participant_id)
    return {"success": True, "data": [v.to_dict() for v in views]}


@router.get("/{transaction_id}/distribution")
async def get_distribution(
    transaction_id: int,
    engine: LedgerEngine = Depends(get_engine),
    caller: Caller = Depends(get_caller),
):
    """지출 분배 조회"""
    shares = await engine.get_distribution(transaction_id)
    return {"success": True, "data": [s.to_dict() for s in shares]}


# =========================================================================
# 변경
# =========================================================================


@router.post("/contribution", status_code=201)
async def create_contribution(
    request: ContributionRequest,
    engine: LedgerEngine = Depends(get_write_engine),
    caller: Caller = Depends(get_caller),
):
    """납입 등록 (관리자 또는 본인)"""
    ensure_self_or_admin(caller, request.participant_id)
    transaction_id = await engine.apply_contribution(
        request.participant_id,
        request.amount,
        request.description.strip(),
        caller.actor_id,
    )
    return {
        "success": True,
        "data": {"id": transaction_id},
        "message": "Contribution created",
    }


@router.post("/expense", status_code=201)
async def create_expense(
    request: ExpenseRequest,
    engine: LedgerEngine = Depends(get_write_engine),
    caller: Caller = Depends(require_admin),
):
    """지출 등록 (관리자 전용)"""
    transaction_id = await engine.apply_expense(
        request.amount,
        request.description.strip(),
        caller.actor_id,
    )
    return {
        "success": True,
        "data": {"id": transaction_id},
        "message": "Expense created",
    }


@router.post("/{transaction_id}/cancel")
async def cancel_transaction(
    transaction_id: int,
    engine: LedgerEngine = Depends(get_write_engine),
    caller: Caller = Depends(require_admin),
):
    """거래 취소 (관리자 전용)"""
    await engine.cancel(transaction_id)
    return {"success": True, "message": "Transaction cancelled"}


@router.post("/{transaction_id}/reapply")
async def reapply_transaction(
    transaction_id: int,
    engine: LedgerEngine = Depends(get_write_engine),
    caller: Caller = Depends(require_admin),
):
    """취소된 거래 재적용 (관리자 전용)"""
    await engine.reapply(transaction_id)
    return {"success": True, "message": "Transaction reapplied"}


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    engine: LedgerEngine = Depends(get_write_engine),
    caller: Caller = Depends(require_admin),
):
    """납입 거래 삭제 (관리자 전용, 지출은 400)"""
    await engine.delete_transaction(transaction_id)
    return {"success": True, "message": "Transaction deleted"}


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    request: TransactionUpdateRequest,
    engine: LedgerEngine = Depends(get_write_engine),
    caller: Caller = Depends(require_admin),
):
    """취소된 거래 수정 (관리자 전용)"""
    await engine.edit_transaction(
        transaction_id,
        request.description.strip(),
        request.amount,
    )
    return {"success": True, "message": "Transaction updated"}
