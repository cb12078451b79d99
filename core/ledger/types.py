"""
Ledger 타입 정의

거래 타입/상태 Enum과 Ledger 전반에서 주고받는 데이터 구조.
금액은 내부적으로 정수 센트(*_cents)로 보관하고, 외부로는 Decimal로 노출.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from core.ledger.money import from_cents


class TransactionType(str, Enum):
    """거래 유형

    str을 상속하여 JSON 직렬화 가능.
    """

    CONTRIBUTION = "contribution"  # 납입 (개인 계좌 + 공동 계좌 입금)
    EXPENSE = "expense"  # 지출 (공동 계좌 출금, 참가자별 분배)


class TransactionStatus(str, Enum):
    """거래 상태

    DB에서는 활성 = NULL, 취소 = 'cancelled'로 저장.
    """

    ACTIVE = "active"
    CANCELLED = "cancelled"

    @classmethod
    def from_db(cls, value: str | None) -> "TransactionStatus":
        if value is None or value != cls.CANCELLED.value:
            return cls.ACTIVE
        return cls.CANCELLED

    def to_db(self) -> str | None:
        if self is TransactionStatus.ACTIVE:
            return None
        return self.value


class AccountKind(str, Enum):
    """계좌 종류"""

    PERSONAL = "personal"
    GROUP = "group"


@dataclass(frozen=True)
class AccountRef:
    """계좌 참조 (종류 + ID)

    공동 계좌도 고정 ID로 같은 경로를 통해 접근.
    """

    kind: AccountKind
    id: int

    @classmethod
    def personal(cls, account_id: int) -> "AccountRef":
        return cls(kind=AccountKind.PERSONAL, id=account_id)


@dataclass(frozen=True)
class EligibleParticipant:
    """분배 대상 참가자 (제외되지 않은 참가자 + 개인 계좌)"""

    participant_id: int
    account_id: int


@dataclass(frozen=True)
class Share:
    """분배 몫 (참가자 1명당 1개)"""

    participant_id: int
    account_id: int
    amount_cents: int

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)


@dataclass
class Participant:
    """참가자"""

    id: int
    first_name: str
    last_name: str
    phone: str | None = None
    email: str | None = None
    child_name: str | None = None
    is_excluded: bool = False
    account_id: int | None = None
    balance_cents: int | None = None
    created_at: str | None = None

    @property
    def balance(self) -> Decimal:
        return from_cents(self.balance_cents)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "email": self.email,
            "child_name": self.child_name,
            "is_excluded": self.is_excluded,
            "account_id": self.account_id,
            "account_balance": str(self.balance),
            "created_at": self.created_at,
        }


@dataclass
class LedgerTransaction:
    """거래 기록 (Transaction Log 한 행)"""

    id: int
    type: str
    amount_cents: int
    description: str
    status: TransactionStatus
    created_by: str
    created_at: str
    participant_id: int | None = None
    personal_account_id: int | None = None
    group_account_id: int | None = None

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)

    @property
    def is_active(self) -> bool:
        return self.status is TransactionStatus.ACTIVE

    @property
    def is_cancelled(self) -> bool:
        return self.status is TransactionStatus.CANCELLED

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "type": self.type,
            "amount": str(self.amount),
            "description": self.description,
            "status": self.status.to_db(),
            "created_by": self.created_by,
            "created_at": self.created_at,
            "participant_id": self.participant_id,
            "personal_account_id": self.personal_account_id,
            "group_account_id": self.group_account_id,
        }


@dataclass
class TransactionFile:
    """거래 첨부 파일 메타데이터"""

    id: int
    transaction_id: int
    file_name: str
    file_path: str
    mime_type: str | None
    size: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (저장 경로는 노출하지 않음)"""
        return {
            "id": self.id,
            "file_name": self.file_name,
            "mime_type": self.mime_type,
            "size": self.size,
            "created_at": self.created_at,
        }


@dataclass
class DistributionShare:
    """지출 분배 조회 결과"""

    participant_id: int
    personal_account_id: int
    amount_cents: int
    first_name: str
    last_name: str
    child_name: str | None = None

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "participant_id": self.participant_id,
            "personal_account_id": self.personal_account_id,
            "amount": str(self.amount),
            "first_name": self.first_name,
            "last_name": self.last_name,
            "child_name": self.child_name,
        }


@dataclass
class TransactionView:
    """전체 거래 피드 항목 (참가자 이름, 잔액, 첨부 포함)"""

    transaction: LedgerTransaction
    first_name: str | None = None
    last_name: str | None = None
    child_name: str | None = None
    personal_balance_cents: int | None = None
    group_balance_cents: int | None = None
    files: list[TransactionFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        data = self.transaction.to_dict()
        data.update({
            "first_name": self.first_name,
            "last_name": self.last_name,
            "child_name": self.child_name,
            "personal_balance": (
                str(from_cents(self.personal_balance_cents))
                if self.personal_balance_cents is not None else None
            ),
            "group_balance": (
                str(from_cents(self.group_balance_cents))
                if self.group_balance_cents is not None else None
            ),
            "files": [f.to_dict() for f in self.files],
        })
        return data


@dataclass
class ParticipantTransactionView:
    """참가자별 거래 피드 항목

    납입: participant_amount = 납입액
    지출: participant_amount = 해당 참가자 분배 몫, total_expense_amount = 지출 총액
    """

    id: int
    type: str
    amount_cents: int
    description: str
    created_at: str
    participant_amount_cents: int
    total_expense_amount_cents: int | None = None
    files: list[TransactionFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "type": self.type,
            "amount": str(from_cents(self.amount_cents)),
            "description": self.description,
            "created_at": self.created_at,
            "participant_amount": str(from_cents(self.participant_amount_cents)),
            "total_expense_amount": (
                str(from_cents(self.total_expense_amount_cents))
                if self.total_expense_amount_cents is not None else None
            ),
            "files": [f.to_dict() for f in self.files],
        }


@dataclass(frozen=True)
class LedgerStatistics:
    """Ledger 통계 (활성 거래 기준)"""

    group_balance: Decimal
    total_participants: int
    total_contributions: int
    total_expenses: int
    total_contributed: Decimal
    total_spent: Decimal

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "group_balance": str(self.group_balance),
            "total_participants": self.total_participants,
            "total_contributions": self.total_contributions,
            "total_expenses": self.total_expenses,
            "total_contributed": str(self.total_contributed),
            "total_spent": str(self.total_spent),
        }
