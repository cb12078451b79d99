"""
거래 기록 저장소 (Transaction Log)

거래 추가, 상태 전환(취소/재적용), 납입 삭제, 지출 분배 행 관리,
전체/참가자별 피드 및 통계 집계.

쓰기 메서드는 커밋하지 않음: 호출자(LedgerEngine)의 작업 단위 안에서 실행.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from core.constants import LedgerConstants
from core.ledger.types import (
    DistributionShare,
    EligibleParticipant,
    LedgerTransaction,
    ParticipantTransactionView,
    Share,
    TransactionFile,
    TransactionStatus,
    TransactionType,
    TransactionView,
)

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

# 활성 거래 조건 (status NULL 또는 'cancelled' 이외)
ACTIVE_CONDITION = "(t.status IS NULL OR t.status != 'cancelled')"

_TRANSACTION_COLUMNS = """
    t.id, t.type, t.amount, t.description, t.status, t.created_by, t.created_at,
    t.participant_id, t.personal_account_id, t.group_account_id
"""


def _row_to_transaction(row: tuple[Any, ...]) -> LedgerTransaction:
    return LedgerTransaction(
        id=int(row[0]),
        type=row[1],
        amount_cents=int(row[2]),
        description=row[3] or "",
        status=TransactionStatus.from_db(row[4]),
        created_by=row[5],
        created_at=row[6],
        participant_id=row[7],
        personal_account_id=row[8],
        group_account_id=row[9],
    )


def row_to_file(row: tuple[Any, ...]) -> TransactionFile:
    return TransactionFile(
        id=int(row[0]),
        transaction_id=int(row[1]),
        file_name=row[2],
        file_path=row[3],
        mime_type=row[4],
        size=int(row[5] or 0),
        created_at=row[6],
    )


class TransactionLog:
    """거래 기록 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def insert_contribution(
        self,
        participant_id: int,
        personal_account_id: int,
        amount_cents: int,
        description: str,
        created_by: str,
    ) -> int:
        """납입 거래 추가 (활성 상태)

        Returns:
            생성된 거래 ID
        """
        cursor = await self.db.execute(
            """
            INSERT INTO transactions (
                type, amount, description, participant_id, personal_account_id,
                created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                TransactionType.CONTRIBUTION.value,
                amount_cents,
                description,
                participant_id,
                personal_account_id,
                created_by,
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        return int(cursor.lastrowid)

    async def insert_expense(
        self,
        amount_cents: int,
        description: str,
        created_by: str,
    ) -> int:
        """지출 거래 추가 (공동 계좌 대상, 활성 상태)

        Returns:
            생성된 거래 ID
        """
        cursor = await self.db.execute(
            """
            INSERT INTO transactions (
                type, amount, description, group_account_id, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                TransactionType.EXPENSE.value,
                amount_cents,
                description,
                LedgerConstants.GROUP_ACCOUNT_ID,
                created_by,
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        return int(cursor.lastrowid)

    async def set_status(self, transaction_id: int, status: TransactionStatus) -> None:
        """거래 상태 전환 (활성 ↔ 취소)"""
        await self.db.execute(
            "UPDATE transactions SET status = ? WHERE id = ?",
            (status.to_db(), transaction_id),
        )

    async def update_details(
        self,
        transaction_id: int,
        description: str,
        amount_cents: int,
    ) -> bool:
        """설명/금액 변경

        Returns:
            변경 여부
        """
        cursor = await self.db.execute(
            "UPDATE transactions SET description = ?, amount = ? WHERE id = ?",
            (description, amount_cents, transaction_id),
        )
        return cursor.rowcount > 0

    async def delete(self, transaction_id: int) -> None:
        """거래 행 삭제 (첨부/분배 행은 CASCADE)"""
        await self.db.execute(
            "DELETE FROM transactions WHERE id = ?",
            (transaction_id,),
        )

    async def insert_distributions(self, transaction_id: int, shares: list[Share]) -> None:
        """지출 분배 행 추가"""
        await self.db.executemany(
            """
            INSERT INTO expense_distributions (
                transaction_id, participant_id, personal_account_id, amount
            ) VALUES (?, ?, ?, ?)
            """,
            [
                (transaction_id, s.participant_id, s.account_id, s.amount_cents)
                for s in shares
            ],
        )

    async def delete_distributions(self, transaction_id: int) -> None:
        """지출 분배 행 전체 삭제"""
        await self.db.execute(
            "DELETE FROM expense_distributions WHERE transaction_id = ?",
            (transaction_id,),
        )

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get(self, transaction_id: int) -> LedgerTransaction | None:
        """거래 단건 조회

        Returns:
            LedgerTransaction 또는 None
        """
        row = await self.db.fetchone(
            f"SELECT {_TRANSACTION_COLUMNS} FROM transactions t WHERE t.id = ?",
            (transaction_id,),
        )
        if row is None:
            return None
        return _row_to_transaction(row)

    async def get_distributions(self, transaction_id: int) -> list[Share]:
        """지출 분배 행 조회 (잔액 복원용)"""
        rows = await self.db.fetchall(
            """
            SELECT participant_id, personal_account_id, amount
            FROM expense_distributions
            WHERE transaction_id = ?
            ORDER BY id
            """,
            (transaction_id,),
        )
        return [
            Share(participant_id=int(r[0]), account_id=int(r[1]), amount_cents=int(r[2]))
            for r in rows
        ]

    async def get_distribution_view(self, transaction_id: int) -> list[DistributionShare]:
        """지출 분배 조회 (참가자 이름 포함, 성/이름 순)"""
        rows = await self.db.fetchall(
            """
            SELECT ed.participant_id, ed.personal_account_id, ed.amount,
                   p.first_name, p.last_name, p.child_name
            FROM expense_distributions ed
            JOIN participants p ON ed.participant_id = p.id
            WHERE ed.transaction_id = ?
            ORDER BY p.last_name, p.first_name, p.id
            """,
            (transaction_id,),
        )
        return [
            DistributionShare(
                participant_id=int(r[0]),
                personal_account_id=int(r[1]),
                amount_cents=int(r[2]),
                first_name=r[3],
                last_name=r[4],
                child_name=r[5],
            )
            for r in rows
        ]

    async def get_eligible_participants(self) -> list[EligibleParticipant]:
        """현재 분배 대상 참가자 조회 (제외되지 않은 참가자 + 개인 계좌)

        캐시하지 않음: 지출 적용/재적용 시마다 현재 상태를 다시 조회.
        """
        rows = await self.db.fetchall(
            """
            SELECT p.id, pa.id
            FROM participants p
            JOIN personal_accounts pa ON p.id = pa.participant_id
            WHERE p.is_excluded = 0
            ORDER BY p.id
            """
        )
        return [EligibleParticipant(participant_id=int(r[0]), account_id=int(r[1])) for r in rows]

    async def get_files(self, transaction_ids: list[int]) -> dict[int, list[TransactionFile]]:
        """거래별 첨부 파일 조회"""
        if not transaction_ids:
            return {}

        placeholders = ",".join("?" for _ in transaction_ids)
        rows = await self.db.fetchall(
            f"""
            SELECT id, transaction_id, file_name, file_path, mime_type, size, created_at
            FROM transaction_files
            WHERE transaction_id IN ({placeholders})
            ORDER BY id
            """,
            tuple(transaction_ids),
        )

        files: dict[int, list[TransactionFile]] = {tid: [] for tid in transaction_ids}
        for row in rows:
            f = row_to_file(row)
            files[f.transaction_id].append(f)
        return files

    async def list_transactions(self, limit: int, offset: int) -> list[TransactionView]:
        """전체 거래 피드 (최신순, 페이지네이션)

        취소된 거래도 포함 (status로 구분).
        """
        rows = await self.db.fetchall(
            f"""
            SELECT {_TRANSACTION_COLUMNS},
                   p.first_name, p.last_name, p.child_name,
                   pa.balance, ga.balance
            FROM transactions t
            LEFT JOIN participants p ON t.participant_id = p.id
            LEFT JOIN personal_accounts pa ON t.personal_account_id = pa.id
            LEFT JOIN group_account ga ON t.group_account_id = ga.id
            ORDER BY t.created_at DESC, t.id DESC
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )

        views = [
            TransactionView(
                transaction=_row_to_transaction(row),
                first_name=row[10],
                last_name=row[11],
                child_name=row[12],
                personal_balance_cents=row[13],
                group_balance_cents=row[14],
            )
            for row in rows
        ]

        files = await self.get_files([v.transaction.id for v in views])
        for view in views:
            view.files = files.get(view.transaction.id, [])
        return views

    async def list_for_participant(self, participant_id: int) -> list[ParticipantTransactionView]:
        """참가자별 거래 피드 (최신순)

        본인 납입 + 본인에게 분배된 지출 (취소 거래 제외).
        """
        rows = await self.db.fetchall(
            f"""
            SELECT t.id, t.type, t.amount, t.description, t.created_at,
                   CASE WHEN t.type = 'expense' THEN ed.amount ELSE t.amount END,
                   CASE WHEN t.type = 'expense' THEN t.amount ELSE NULL END
            FROM transactions t
            LEFT JOIN expense_distributions ed
                ON t.id = ed.transaction_id AND ed.participant_id = ?
            WHERE {ACTIVE_CONDITION}
              AND (
                (t.type = 'contribution' AND t.participant_id = ?)
                OR (t.type = 'expense' AND ed.participant_id = ?)
              )
            ORDER BY t.created_at DESC, t.id DESC
            """,
            (participant_id, participant_id, participant_id),
        )

        views = [
            ParticipantTransactionView(
                id=int(r[0]),
                type=r[1],
                amount_cents=int(r[2]),
                description=r[3] or "",
                created_at=r[4],
                participant_amount_cents=int(r[5]),
                total_expense_amount_cents=r[6],
            )
            for r in rows
        ]

        files = await self.get_files([v.id for v in views])
        for view in views:
            view.files = files.get(view.id, [])
        return views

    async def aggregate_active(self, transaction_type: TransactionType) -> tuple[int, int]:
        """활성 거래 건수/합계 (센트)"""
        row = await self.db.fetchone(
            f"""
            SELECT COUNT(*), COALESCE(SUM(t.amount), 0)
            FROM transactions t
            WHERE t.type = ? AND {ACTIVE_CONDITION}
            """,
            (transaction_type.value,),
        )
        assert row is not None
        return int(row[0]), int(row[1])

    async def count_participants(self) -> int:
        """참가자 수"""
        row = await self.db.fetchone("SELECT COUNT(*) FROM participants")
        assert row is not None
        return int(row[0])

    async def expected_personal_balances(self) -> dict[int, int]:
        """활성 거래 기준 개인 계좌별 기대 잔액 (센트)

        납입 합계 − 활성 지출 분배 합계.
        """
        rows = await self.db.fetchall(
            f"""
            SELECT pa.id,
                   COALESCE((
                       SELECT SUM(t.amount) FROM transactions t
                       WHERE t.type = 'contribution'
                         AND t.personal_account_id = pa.id
                         AND {ACTIVE_CONDITION}
                   ), 0)
                   - COALESCE((
                       SELECT SUM(ed.amount) FROM expense_distributions ed
                       JOIN transactions t ON t.id = ed.transaction_id
                       WHERE ed.personal_account_id = pa.id
                         AND {ACTIVE_CONDITION}
                   ), 0)
            FROM personal_accounts pa
            """
        )
        return {int(r[0]): int(r[1]) for r in rows}

    async def expected_group_balance(self) -> int:
        """활성 거래 기준 공동 계좌 기대 잔액 (센트)"""
        _, contributed = await self.aggregate_active(TransactionType.CONTRIBUTION)
        _, spent = await self.aggregate_active(TransactionType.EXPENSE)
        return contributed - spent

    async def distribution_mismatches(self) -> list[tuple[int, int, int]]:
        """분배 합계가 금액과 다른 활성 지출

        Returns:
            (transaction_id, 지출 금액, 분배 합계) 목록 (센트, ID 오름차순)
        """
        rows = await self.db.fetchall(
            f"""
            SELECT t.id, t.amount, COALESCE(SUM(ed.amount), 0) AS distributed
            FROM transactions t
            LEFT JOIN expense_distributions ed ON ed.transaction_id = t.id
            WHERE t.type = 'expense' AND {ACTIVE_CONDITION}
            GROUP BY t.id, t.amount
            HAVING COALESCE(SUM(ed.amount), 0) != t.amount
            ORDER BY t.id
            """
        )
        return [(int(r[0]), int(r[1]), int(r[2])) for r in rows]
