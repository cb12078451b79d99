"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")


class ApiResponse(BaseModel):
    """공통 성공 응답"""

    success: bool = Field(default=True, description="성공 여부")
    data: Any = Field(default=None, description="응답 데이터")
    message: str | None = Field(default=None, description="안내 메시지")


class ErrorResponse(BaseModel):
    """공통 오류 응답"""

    success: bool = Field(default=False, description="성공 여부")
    error: str = Field(..., description="오류 종류 (not_found, invalid_state 등)")
    detail: str = Field(..., description="오류 상세")
