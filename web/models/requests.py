"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from core.ledger.money import MAX_AMOUNT


class ContributionRequest(BaseModel):
    """납입 등록 요청"""

    participant_id: int = Field(..., ge=1, description="참가자 ID")
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="납입액 (소수점 2자리)")
    description: str = Field(..., min_length=3, max_length=500, description="설명")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"participant_id": 1, "amount": "100.00", "description": "9월 회비"},
            ]
        }
    }


class ExpenseRequest(BaseModel):
    """지출 등록 요청

    현재 분배 대상 참가자에게 균등 분배.
    """

    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="지출액 (소수점 2자리)")
    description: str = Field(..., min_length=3, max_length=500, description="설명")


class TransactionUpdateRequest(BaseModel):
    """취소된 거래 수정 요청"""

    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="변경할 금액")
    description: str = Field(..., min_length=3, max_length=500, description="변경할 설명")


class ParticipantRequest(BaseModel):
    """참가자 생성/수정 요청"""

    first_name: str = Field(..., min_length=2, max_length=100, description="이름")
    last_name: str = Field(..., min_length=2, max_length=100, description="성")
    child_name: str = Field(..., min_length=2, max_length=100, description="자녀 이름")
    phone: str | None = Field(default=None, max_length=20, description="전화번호")
    email: str | None = Field(default=None, max_length=255, description="이메일")
    is_excluded: bool = Field(default=False, description="지출 분배 제외 여부")
