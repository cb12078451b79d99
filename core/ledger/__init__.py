"""
공동 기금 Ledger

납입/지출이 개인 계좌와 공동 계좌 잔액을 어떻게 변경하는지 규정하는 엔진.

사용 예시:
```python
from core.ledger import LedgerEngine

engine = LedgerEngine(db)

# 납입 → 지출 → 취소
tx_id = await engine.apply_contribution(1, Decimal("100"), "월회비", "admin")
expense_id = await engine.apply_expense(Decimal("60"), "간식", "admin")
await engine.cancel(expense_id)

# 정합성 검사
report = await engine.reconcile()
assert report.consistent
```
"""

from core.ledger.accounts import GROUP_ACCOUNT, AccountStore
from core.ledger.distribution import distribute
from core.ledger.engine import LedgerEngine
from core.ledger.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidStateError,
    LedgerError,
    NoEligibleParticipantsError,
    NotFoundError,
    ParticipantNotFoundError,
    TransactionNotFoundError,
    UnsupportedOperationError,
)
from core.ledger.reconciler import BalanceDrift, DistributionMismatch, ReconcileReport, Reconciler
from core.ledger.transaction_log import TransactionLog
from core.ledger.types import (
    AccountKind,
    AccountRef,
    TransactionStatus,
    TransactionType,
)

__all__ = [
    # 핵심 클래스
    "LedgerEngine",
    "AccountStore",
    "TransactionLog",
    "Reconciler",
    "BalanceDrift",
    "DistributionMismatch",
    "ReconcileReport",
    "distribute",
    "GROUP_ACCOUNT",
    # Enum / 타입
    "TransactionType",
    "TransactionStatus",
    "AccountKind",
    "AccountRef",
    # 오류
    "LedgerError",
    "NotFoundError",
    "TransactionNotFoundError",
    "ParticipantNotFoundError",
    "InvalidStateError",
    "UnsupportedOperationError",
    "InsufficientFundsError",
    "NoEligibleParticipantsError",
    "AccountNotFoundError",
]
