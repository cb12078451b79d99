"""
계좌 저장소

개인 계좌(참가자별)와 공동 계좌(단일 행)의 잔액 증감 및 조회.
잠금 정책 없음: 호출자가 작업 단위(transaction)를 잡고 있어야 함.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import LedgerConstants
from core.ledger.errors import AccountNotFoundError
from core.ledger.types import AccountKind, AccountRef

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


# 공동 계좌 (고정 ID)
GROUP_ACCOUNT = AccountRef(kind=AccountKind.GROUP, id=LedgerConstants.GROUP_ACCOUNT_ID)

# 계좌 종류 → 테이블
_ACCOUNT_TABLES: dict[AccountKind, str] = {
    AccountKind.PERSONAL: "personal_accounts",
    AccountKind.GROUP: "group_account",
}


class AccountStore:
    """계좌 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def adjust(self, account: AccountRef, delta_cents: int) -> None:
        """잔액 증감 (balance = balance + delta)

        단일 UPDATE 문으로 처리하므로 읽기-쓰기 사이 경합 없음.

        Args:
            account: 대상 계좌
            delta_cents: 증감액 (음수면 차감)

        Raises:
            AccountNotFoundError: 계좌가 없는 경우
        """
        table = _ACCOUNT_TABLES[account.kind]
        cursor = await self.db.execute(
            f"""
            UPDATE {table}
            SET balance = balance + ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (delta_cents, account.id),
        )
        if cursor.rowcount == 0:
            raise AccountNotFoundError(f"{account.kind.value} account not found: {account.id}")

        logger.debug(
            f"Account adjusted: {account.kind.value}:{account.id} {delta_cents:+d}"
        )

    async def credit(self, account: AccountRef, amount_cents: int) -> None:
        """입금"""
        await self.adjust(account, amount_cents)

    async def debit(self, account: AccountRef, amount_cents: int) -> None:
        """출금"""
        await self.adjust(account, -amount_cents)

    async def get_balance(self, account: AccountRef) -> int:
        """잔액 조회 (센트)

        Raises:
            AccountNotFoundError: 계좌가 없는 경우
        """
        table = _ACCOUNT_TABLES[account.kind]
        row = await self.db.fetchone(
            f"SELECT balance FROM {table} WHERE id = ?",
            (account.id,),
        )
        if row is None:
            raise AccountNotFoundError(f"{account.kind.value} account not found: {account.id}")
        return int(row[0])

    async def exists(self, account: AccountRef) -> bool:
        """계좌 존재 여부"""
        table = _ACCOUNT_TABLES[account.kind]
        row = await self.db.fetchone(
            f"SELECT 1 FROM {table} WHERE id = ?",
            (account.id,),
        )
        return row is not None

    async def get_personal_account_for(self, participant_id: int) -> AccountRef | None:
        """참가자의 개인 계좌 조회

        Returns:
            AccountRef 또는 None (계좌 없음)
        """
        row = await self.db.fetchone(
            "SELECT id FROM personal_accounts WHERE participant_id = ?",
            (participant_id,),
        )
        if row is None:
            return None
        return AccountRef.personal(int(row[0]))

    async def list_personal_balances(self) -> dict[int, int]:
        """개인 계좌 ID → 잔액 (센트)"""
        rows = await self.db.fetchall("SELECT id, balance FROM personal_accounts")
        return {int(row[0]): int(row[1]) for row in rows}
