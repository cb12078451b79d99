"""
잔액 정합성 검사기

저장된 계좌 잔액과 활성 거래 기록으로부터 다시 계산한 잔액을 비교하여
불일치(drift)를 감지. 활성 지출의 분배 합계도 함께 검사. 읽기 전용.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.accounts import GROUP_ACCOUNT, AccountStore
from core.ledger.money import from_cents
from core.ledger.transaction_log import TransactionLog
from core.ledger.types import AccountKind

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceDrift:
    """잔액 불일치 정보"""

    account_kind: AccountKind
    account_id: int
    expected_cents: int
    actual_cents: int

    @property
    def difference(self) -> Decimal:
        """저장 잔액 − 기대 잔액"""
        return from_cents(self.actual_cents - self.expected_cents)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "account_kind": self.account_kind.value,
            "account_id": self.account_id,
            "expected": str(from_cents(self.expected_cents)),
            "actual": str(from_cents(self.actual_cents)),
            "difference": str(self.difference),
        }


@dataclass(frozen=True)
class DistributionMismatch:
    """지출 분배 합계 불일치 정보"""

    transaction_id: int
    expected_cents: int
    actual_cents: int

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "transaction_id": self.transaction_id,
            "expected": str(from_cents(self.expected_cents)),
            "actual": str(from_cents(self.actual_cents)),
        }


@dataclass(frozen=True)
class ReconcileReport:
    """정합성 검사 결과"""

    drifts: list[BalanceDrift] = field(default_factory=list)
    mismatches: list[DistributionMismatch] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not self.drifts and not self.mismatches

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "consistent": self.consistent,
            "drifts": [d.to_dict() for d in self.drifts],
            "distribution_mismatches": [m.to_dict() for m in self.mismatches],
        }


class Reconciler:
    """잔액 정합성 검사기

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.accounts = AccountStore(db)
        self.log = TransactionLog(db)

    async def check(self) -> ReconcileReport:
        """잔액 불일치 + 분배 합계 불일치를 하나의 읽기 스냅샷에서 검사"""
        async with self.db.snapshot():
            drifts = await self._balance_drifts()
            mismatches = await self._distribution_mismatches()

        report = ReconcileReport(drifts=drifts, mismatches=mismatches)
        if not report.consistent:
            logger.warning(
                f"Ledger inconsistency detected: {len(drifts)} account(s), "
                f"{len(mismatches)} expense(s)"
            )
        return report

    async def find_drifts(self) -> list[BalanceDrift]:
        """모든 계좌의 잔액 불일치 조회

        Returns:
            불일치 목록 (정합 상태면 빈 리스트)
        """
        async with self.db.snapshot():
            drifts = await self._balance_drifts()

        if drifts:
            logger.warning(f"Balance drift detected: {len(drifts)} account(s)")
        return drifts

    async def find_distribution_mismatches(self) -> list[DistributionMismatch]:
        """분배 합계가 지출 금액과 다른 활성 지출 조회"""
        async with self.db.snapshot():
            return await self._distribution_mismatches()

    async def _distribution_mismatches(self) -> list[DistributionMismatch]:
        rows = await self.log.distribution_mismatches()
        return [
            DistributionMismatch(
                transaction_id=transaction_id,
                expected_cents=amount,
                actual_cents=distributed,
            )
            for transaction_id, amount, distributed in rows
        ]

    async def _balance_drifts(self) -> list[BalanceDrift]:
        drifts: list[BalanceDrift] = []

        expected_personal = await self.log.expected_personal_balances()
        actual_personal = await self.accounts.list_personal_balances()
        for account_id, actual in sorted(actual_personal.items()):
            expected = expected_personal.get(account_id, 0)
            if expected != actual:
                drifts.append(BalanceDrift(
                    account_kind=AccountKind.PERSONAL,
                    account_id=account_id,
                    expected_cents=expected,
                    actual_cents=actual,
                ))

        expected_group = await self.log.expected_group_balance()
        actual_group = await self.accounts.get_balance(GROUP_ACCOUNT)
        if expected_group != actual_group:
            drifts.append(BalanceDrift(
                account_kind=AccountKind.GROUP,
                account_id=GROUP_ACCOUNT.id,
                expected_cents=expected_group,
                actual_cents=actual_group,
            ))

        return drifts
