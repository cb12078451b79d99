"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    ContributionRequest,
    ExpenseRequest,
    ParticipantRequest,
    TransactionUpdateRequest,
)
from web.models.responses import (
    ApiResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Requests
    "ContributionRequest",
    "ExpenseRequest",
    "ParticipantRequest",
    "TransactionUpdateRequest",
    # Responses
    "ApiResponse",
    "ErrorResponse",
    "HealthResponse",
]
