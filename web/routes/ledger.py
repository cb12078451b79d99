"""
Ledger 점검 API 라우트

저장 잔액과 거래 기록 기반 잔액 비교, 지출 분배 합계 검사.
"""

from fastapi import APIRouter, Depends

from core.ledger.engine import LedgerEngine
from core.types import Caller
from web.dependencies import get_engine, require_admin

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])


@router.get("/reconcile")
async def reconcile(
    engine: LedgerEngine = Depends(get_engine),
    caller: Caller = Depends(require_admin),
):
    """잔액 정합성 검사 (관리자 전용)

    drifts, distribution_mismatches가 모두 비어 있으면 정상.
    """
    report = await engine.reconcile()
    return {"success": True, "data": report.to_dict()}
