"""
Ledger 엔진

납입/지출의 적용, 취소, 재적용, 삭제, 수정 규칙.
모든 변경 작업은 단일 작업 단위(SQLiteAdapter.transaction)로 실행:
잔액 변경과 거래 기록 변경이 함께 커밋되거나 함께 롤백됨.

비대칭 규칙:
- 납입 재적용: 원래 개인 계좌에 원래(또는 수정된) 금액을 다시 입금
- 지출 재적용: 현재 분배 대상 참가자를 다시 조회하여 새로 분배
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from core.constants import Defaults
from core.ledger.accounts import GROUP_ACCOUNT, AccountStore
from core.ledger.distribution import distribute
from core.ledger.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidStateError,
    NoEligibleParticipantsError,
    ParticipantNotFoundError,
    TransactionNotFoundError,
    UnsupportedOperationError,
)
from core.ledger.money import from_cents, positive_cents
from core.ledger.reconciler import ReconcileReport, Reconciler
from core.ledger.transaction_log import TransactionLog
from core.ledger.types import (
    AccountRef,
    DistributionShare,
    LedgerStatistics,
    LedgerTransaction,
    ParticipantTransactionView,
    Share,
    TransactionStatus,
    TransactionType,
    TransactionView,
)

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class LedgerEngine:
    """Ledger 엔진

    주입된 SQLiteAdapter 위에서 동작하는 상태 없는 서비스.
    실패 시 예외가 그대로 전파되며 작업 단위 전체가 롤백됨 (재시도 없음).

    Args:
        db: SQLite 어댑터 (쓰기 가능)

    사용 예시:
    ```python
    engine = LedgerEngine(db)
    tx_id = await engine.apply_contribution(1, Decimal("100"), "fee", "admin")
    await engine.cancel(tx_id)
    await engine.reapply(tx_id)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.accounts = AccountStore(db)
        self.log = TransactionLog(db)

    # -------------------------------------------------------------------------
    # 변경 작업
    # -------------------------------------------------------------------------

    async def apply_contribution(
        self,
        participant_id: int,
        amount: Decimal | int | str,
        description: str,
        created_by: str,
    ) -> int:
        """납입 적용

        개인 계좌 += amount, 공동 계좌 += amount, 활성 납입 거래 추가.

        Args:
            participant_id: 참가자 ID
            amount: 납입액 (> 0)
            description: 설명
            created_by: 등록자

        Returns:
            생성된 거래 ID

        Raises:
            ValueError: 금액이 0 이하인 경우
            ParticipantNotFoundError: 참가자가 없는 경우
            AccountNotFoundError: 개인 계좌가 없는 경우
        """
        amount_cents = positive_cents(amount)

        async with self.db.transaction():
            await self._require_participant(participant_id)

            account = await self.accounts.get_personal_account_for(participant_id)
            if account is None:
                raise AccountNotFoundError(
                    f"Personal account not found for participant: {participant_id}"
                )

            transaction_id = await self.log.insert_contribution(
                participant_id=participant_id,
                personal_account_id=account.id,
                amount_cents=amount_cents,
                description=description,
                created_by=str(created_by),
            )
            await self.accounts.credit(account, amount_cents)
            await self.accounts.credit(GROUP_ACCOUNT, amount_cents)

        logger.info(
            f"Contribution applied: #{transaction_id} participant={participant_id} "
            f"amount={from_cents(amount_cents)}",
            extra={"transaction_id": transaction_id, "participant_id": participant_id},
        )
        return transaction_id

    async def apply_expense(
        self,
        amount: Decimal | int | str,
        description: str,
        created_by: str,
    ) -> int:
        """지출 적용

        공동 계좌에서 차감하고 현재 분배 대상 참가자에게 균등 분배.

        Args:
            amount: 지출액 (> 0)
            description: 설명
            created_by: 등록자

        Returns:
            생성된 거래 ID

        Raises:
            ValueError: 금액이 0 이하인 경우
            InsufficientFundsError: 공동 계좌 잔액 < amount
            NoEligibleParticipantsError: 분배 대상 참가자가 없는 경우
        """
        amount_cents = positive_cents(amount)

        async with self.db.transaction():
            group_balance = await self.accounts.get_balance(GROUP_ACCOUNT)
            if group_balance < amount_cents:
                raise InsufficientFundsError(
                    f"Group account balance {from_cents(group_balance)} "
                    f"is less than expense amount {from_cents(amount_cents)}"
                )

            eligible = await self.log.get_eligible_participants()
            if not eligible:
                raise NoEligibleParticipantsError()

            shares = distribute(amount_cents, eligible)
            transaction_id = await self.log.insert_expense(
                amount_cents=amount_cents,
                description=description,
                created_by=str(created_by),
            )
            await self._apply_shares(transaction_id, shares, amount_cents)

        logger.info(
            f"Expense applied: #{transaction_id} amount={from_cents(amount_cents)} "
            f"participants={len(shares)}",
            extra={"transaction_id": transaction_id},
        )
        return transaction_id

    async def cancel(self, transaction_id: int) -> None:
        """거래 취소 (잔액 효과 되돌림, 기록은 유지)

        Raises:
            TransactionNotFoundError: 거래가 없는 경우
            InvalidStateError: 이미 취소된 거래인 경우
            UnsupportedOperationError: 납입/지출 이외 타입
        """
        async with self.db.transaction():
            transaction = await self._require_transaction(transaction_id)
            if not transaction.is_active:
                raise InvalidStateError(f"Transaction is already cancelled: {transaction_id}")

            if transaction.type == TransactionType.CONTRIBUTION.value:
                await self._reverse_contribution(transaction)
            elif transaction.type == TransactionType.EXPENSE.value:
                await self._reverse_expense(transaction)
            else:
                raise UnsupportedOperationError(
                    f"Cannot cancel transaction of type: {transaction.type}"
                )

            await self.log.set_status(transaction_id, TransactionStatus.CANCELLED)

        logger.info(f"Transaction cancelled: #{transaction_id} ({transaction.type})")

    async def reapply(self, transaction_id: int) -> None:
        """취소된 거래 재적용

        납입: 원래 개인 계좌에 다시 입금.
        지출: 기존 분배 행 삭제 후 현재 분배 대상 참가자로 다시 분배.

        Raises:
            TransactionNotFoundError: 거래가 없는 경우
            InvalidStateError: 취소 상태가 아닌 경우
            AccountNotFoundError: 납입 대상 개인 계좌가 더 이상 없는 경우
            NoEligibleParticipantsError: 지출 분배 대상이 없는 경우
            UnsupportedOperationError: 납입/지출 이외 타입
        """
        async with self.db.transaction():
            transaction = await self._require_transaction(transaction_id)
            if not transaction.is_cancelled:
                raise InvalidStateError(f"Transaction is not cancelled: {transaction_id}")

            if transaction.type == TransactionType.CONTRIBUTION.value:
                account = await self._contribution_account(transaction)
                await self.accounts.credit(account, transaction.amount_cents)
                await self.accounts.credit(GROUP_ACCOUNT, transaction.amount_cents)
            elif transaction.type == TransactionType.EXPENSE.value:
                # 분배 대상은 캐시하지 않고 현재 상태를 다시 조회
                eligible = await self.log.get_eligible_participants()
                if not eligible:
                    raise NoEligibleParticipantsError()

                await self.log.delete_distributions(transaction_id)
                shares = distribute(transaction.amount_cents, eligible)
                await self._apply_shares(transaction_id, shares, transaction.amount_cents)
            else:
                raise UnsupportedOperationError(
                    f"Cannot reapply transaction of type: {transaction.type}"
                )

            await self.log.set_status(transaction_id, TransactionStatus.ACTIVE)

        logger.info(f"Transaction reapplied: #{transaction_id} ({transaction.type})")

    async def delete_transaction(self, transaction_id: int) -> None:
        """납입 거래 삭제

        활성 상태면 먼저 입금을 되돌린 뒤 삭제, 취소 상태면 잔액 변경 없이 삭제.
        지출은 삭제 불가 (취소만 가능).

        Raises:
            TransactionNotFoundError: 거래가 없는 경우
            UnsupportedOperationError: 납입이 아닌 경우
        """
        async with self.db.transaction():
            transaction = await self._require_transaction(transaction_id)
            if transaction.type != TransactionType.CONTRIBUTION.value:
                raise UnsupportedOperationError(
                    f"Only contributions can be deleted, got: {transaction.type}"
                )

            if transaction.is_active:
                await self._reverse_contribution(transaction)

            await self.log.delete(transaction_id)

        logger.info(
            f"Contribution deleted: #{transaction_id} (was_active={transaction.is_active})"
        )

    async def edit_transaction(
        self,
        transaction_id: int,
        description: str,
        amount: Decimal | int | str,
    ) -> None:
        """취소된 거래의 설명/금액 수정

        잔액에는 영향 없음 (다음 재적용 시 반영).

        Raises:
            ValueError: 금액이 0 이하인 경우
            TransactionNotFoundError: 거래가 없는 경우
            InvalidStateError: 취소 상태가 아닌 경우
        """
        amount_cents = positive_cents(amount)

        async with self.db.transaction():
            transaction = await self._require_transaction(transaction_id)
            if not transaction.is_cancelled:
                raise InvalidStateError(
                    f"Only cancelled transactions can be edited: {transaction_id}"
                )

            await self.log.update_details(transaction_id, description, amount_cents)

        logger.info(
            f"Transaction edited: #{transaction_id} amount "
            f"{transaction.amount} -> {from_cents(amount_cents)}"
        )

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_balance(self, participant_id: int) -> Decimal:
        """참가자 개인 계좌 잔액

        Raises:
            ParticipantNotFoundError: 참가자가 없는 경우
            AccountNotFoundError: 개인 계좌가 없는 경우
        """
        await self._require_participant(participant_id)
        account = await self.accounts.get_personal_account_for(participant_id)
        if account is None:
            raise AccountNotFoundError(
                f"Personal account not found for participant: {participant_id}"
            )
        return from_cents(await self.accounts.get_balance(account))

    async def get_group_balance(self) -> Decimal:
        """공동 계좌 잔액"""
        return from_cents(await self.accounts.get_balance(GROUP_ACCOUNT))

    async def get_statistics(self) -> LedgerStatistics:
        """Ledger 통계 (활성 거래 기준, 단일 읽기 스냅샷)"""
        async with self.db.snapshot():
            contributions, contributed = await self.log.aggregate_active(TransactionType.CONTRIBUTION)
            expenses, spent = await self.log.aggregate_active(TransactionType.EXPENSE)
            group_balance = await self.get_group_balance()
            total_participants = await self.log.count_participants()

        return LedgerStatistics(
            group_balance=group_balance,
            total_participants=total_participants,
            total_contributions=contributions,
            total_expenses=expenses,
            total_contributed=from_cents(contributed),
            total_spent=from_cents(spent),
        )

    async def get_distribution(self, transaction_id: int) -> list[DistributionShare]:
        """지출 분배 조회

        Raises:
            TransactionNotFoundError: 거래가 없는 경우
        """
        await self._require_transaction(transaction_id)
        return await self.log.get_distribution_view(transaction_id)

    async def get_transaction(self, transaction_id: int) -> LedgerTransaction:
        """거래 단건 조회

        Raises:
            TransactionNotFoundError: 거래가 없는 경우
        """
        return await self._require_transaction(transaction_id)

    async def list_transactions(
        self,
        limit: int = Defaults.PAGE_SIZE,
        offset: int = 0,
    ) -> list[TransactionView]:
        """전체 거래 피드 (최신순)

        Raises:
            ValueError: limit/offset 범위 오류
        """
        if not 1 <= limit <= Defaults.MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {Defaults.MAX_PAGE_SIZE}: {limit}")
        if offset < 0:
            raise ValueError(f"offset must not be negative: {offset}")
        return await self.log.list_transactions(limit, offset)

    async def list_transactions_for_participant(
        self,
        participant_id: int,
    ) -> list[ParticipantTransactionView]:
        """참가자별 거래 피드 (취소 거래 제외)

        Raises:
            ParticipantNotFoundError: 참가자가 없는 경우
        """
        await self._require_participant(participant_id)
        return await self.log.list_for_participant(participant_id)

    async def reconcile(self) -> ReconcileReport:
        """저장 잔액과 거래 기록 기반 잔액 비교 + 지출 분배 합계 검사"""
        return await Reconciler(self.db).check()

    # -------------------------------------------------------------------------
    # 내부 헬퍼 (호출자가 작업 단위를 잡고 있어야 함)
    # -------------------------------------------------------------------------

    async def _require_transaction(self, transaction_id: int) -> LedgerTransaction:
        transaction = await self.log.get(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(transaction_id)
        return transaction

    async def _require_participant(self, participant_id: int) -> None:
        row = await self.db.fetchone(
            "SELECT 1 FROM participants WHERE id = ?",
            (participant_id,),
        )
        if row is None:
            raise ParticipantNotFoundError(participant_id)

    async def _contribution_account(self, transaction: LedgerTransaction) -> AccountRef:
        """납입 거래의 원래 개인 계좌 (없으면 AccountNotFoundError)"""
        if transaction.personal_account_id is None:
            raise AccountNotFoundError(
                f"Personal account no longer exists for transaction: {transaction.id}"
            )
        account = AccountRef.personal(transaction.personal_account_id)
        if not await self.accounts.exists(account):
            raise AccountNotFoundError(
                f"Personal account no longer exists: {transaction.personal_account_id}"
            )
        return account

    async def _reverse_contribution(self, transaction: LedgerTransaction) -> None:
        """납입 효과 되돌림 (개인 계좌/공동 계좌 −= amount)"""
        account = await self._contribution_account(transaction)
        await self.accounts.debit(account, transaction.amount_cents)
        await self.accounts.debit(GROUP_ACCOUNT, transaction.amount_cents)

    async def _reverse_expense(self, transaction: LedgerTransaction) -> None:
        """지출 효과 되돌림 (분배 몫 환급, 공동 계좌 += amount)"""
        for share in await self.log.get_distributions(transaction.id):
            await self.accounts.credit(AccountRef.personal(share.account_id), share.amount_cents)
        await self.accounts.credit(GROUP_ACCOUNT, transaction.amount_cents)

    async def _apply_shares(
        self,
        transaction_id: int,
        shares: list[Share],
        amount_cents: int,
    ) -> None:
        """분배 행 추가 + 개인 계좌 차감 + 공동 계좌 차감"""
        await self.log.insert_distributions(transaction_id, shares)
        for share in shares:
            await self.accounts.debit(AccountRef.personal(share.account_id), share.amount_cents)
        await self.accounts.debit(GROUP_ACCOUNT, amount_cents)
