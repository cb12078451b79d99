"""
FastAPI 애플리케이션

라우터 등록, Ledger 오류 → HTTP 응답 변환 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.ledger.errors import LedgerError
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import health, ledger, participants, transactions
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)

# 오류 종류별 HTTP 상태 코드
ERROR_STATUS_CODES: dict[str, int] = {
    "not_found": 404,
    "account_not_found": 404,
    "invalid_state": 409,
    "insufficient_funds": 409,
    "no_eligible_participants": 409,
    "unsupported_operation": 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema

    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

    logger.info(f"Web: DB 준비 완료 ({settings.db_path})")
    yield


app = FastAPI(
    title="GroupFund API",
    description="공동 기금 납입/지출 관리 API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 오류 처리
# =========================================================================


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Ledger 오류 → {"success": false, "error": kind, "detail": ...}"""
    status_code = ERROR_STATUS_CODES.get(exc.kind, 400)
    logger.warning(
        f"{request.method} {request.url.path} -> {status_code} {exc.kind}: {exc.detail}"
    )
    return JSONResponse(
        status_code=status_code,
        content={"success": False, **exc.to_dict()},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """엔진 입력 검증 실패 → 422"""
    logger.warning(f"{request.method} {request.url.path} -> 422: {exc}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "validation_error", "detail": str(exc)},
    )


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(participants.router)
app.include_router(transactions.router)
app.include_router(ledger.router)
