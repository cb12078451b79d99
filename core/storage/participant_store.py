"""
ParticipantStore - 참가자 저장소

참가자 CRUD. 참가자 생성 시 개인 계좌를 같은 작업 단위에서 함께 생성.
거래 또는 활성 지출 분배가 남은 참가자는 삭제 불가, 삭제 시 개인 계좌는 CASCADE.
"""

import logging
from dataclasses import dataclass
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.errors import InvalidStateError, ParticipantNotFoundError
from core.ledger.transaction_log import ACTIVE_CONDITION
from core.ledger.types import Participant

logger = logging.getLogger(__name__)

_SELECT_PARTICIPANT = """
    SELECT p.id, p.first_name, p.last_name, p.phone, p.email, p.child_name,
           p.is_excluded, pa.id, pa.balance, p.created_at
    FROM participants p
    LEFT JOIN personal_accounts pa ON p.id = pa.participant_id
"""


@dataclass
class ParticipantData:
    """참가자 생성/수정 입력"""

    first_name: str
    last_name: str
    phone: str | None = None
    email: str | None = None
    child_name: str | None = None
    is_excluded: bool = False


def _row_to_participant(row: tuple[Any, ...]) -> Participant:
    return Participant(
        id=int(row[0]),
        first_name=row[1],
        last_name=row[2],
        phone=row[3],
        email=row[4],
        child_name=row[5],
        is_excluded=bool(row[6]),
        account_id=row[7],
        balance_cents=row[8],
        created_at=row[9],
    )


class ParticipantStore:
    """참가자 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def create(self, data: ParticipantData) -> int:
        """참가자 + 개인 계좌(잔액 0) 생성

        Returns:
            생성된 참가자 ID
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                INSERT INTO participants (
                    first_name, last_name, phone, email, child_name, is_excluded
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    data.first_name,
                    data.last_name,
                    data.phone,
                    data.email,
                    data.child_name,
                    1 if data.is_excluded else 0,
                ),
            )
            participant_id = int(cursor.lastrowid)

            await self.db.execute(
                "INSERT INTO personal_accounts (participant_id, balance) VALUES (?, 0)",
                (participant_id,),
            )

        logger.info(f"Participant created: #{participant_id} {data.last_name} {data.first_name}")
        return participant_id

    async def get(self, participant_id: int) -> Participant | None:
        """참가자 조회 (개인 계좌 잔액 포함)"""
        row = await self.db.fetchone(
            f"{_SELECT_PARTICIPANT} WHERE p.id = ?",
            (participant_id,),
        )
        if row is None:
            return None
        return _row_to_participant(row)

    async def list_all(self) -> list[Participant]:
        """전체 참가자 (성, 이름 순)"""
        rows = await self.db.fetchall(
            f"{_SELECT_PARTICIPANT} ORDER BY p.last_name, p.first_name, p.id"
        )
        return [_row_to_participant(row) for row in rows]

    async def update(self, participant_id: int, data: ParticipantData) -> None:
        """참가자 정보 수정 (제외 여부 포함)

        제외 여부 변경은 이후 적용/재적용되는 지출에만 영향.

        Raises:
            ParticipantNotFoundError: 참가자가 없는 경우
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE participants
                SET first_name = ?, last_name = ?, phone = ?, email = ?,
                    child_name = ?, is_excluded = ?
                WHERE id = ?
                """,
                (
                    data.first_name,
                    data.last_name,
                    data.phone,
                    data.email,
                    data.child_name,
                    1 if data.is_excluded else 0,
                    participant_id,
                ),
            )
            if cursor.rowcount == 0:
                raise ParticipantNotFoundError(participant_id)

        logger.info(f"Participant updated: #{participant_id} (excluded={data.is_excluded})")

    async def set_excluded(self, participant_id: int, is_excluded: bool) -> None:
        """분배 제외 여부만 변경

        Raises:
            ParticipantNotFoundError: 참가자가 없는 경우
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                "UPDATE participants SET is_excluded = ? WHERE id = ?",
                (1 if is_excluded else 0, participant_id),
            )
            if cursor.rowcount == 0:
                raise ParticipantNotFoundError(participant_id)

        logger.info(f"Participant #{participant_id} excluded={is_excluded}")

    async def delete(self, participant_id: int) -> None:
        """참가자 삭제

        납입 거래가 하나라도 있으면 거부 (취소된 납입 포함).
        활성 지출의 분배 몫이 있어도 거부 (분배 합계 = 지출 금액 유지).
        취소된 지출의 분배 행은 재적용 시 다시 계산되므로 함께 삭제.

        Raises:
            ParticipantNotFoundError: 참가자가 없는 경우
            InvalidStateError: 납입 거래 또는 활성 지출 분배가 있는 경우
        """
        async with self.db.transaction():
            row = await self.db.fetchone(
                "SELECT COUNT(*) FROM transactions WHERE participant_id = ?",
                (participant_id,),
            )
            if row is not None and int(row[0]) > 0:
                raise InvalidStateError(
                    f"Participant has {row[0]} transaction(s) and cannot be deleted: {participant_id}"
                )

            row = await self.db.fetchone(
                f"""
                SELECT COUNT(*) FROM expense_distributions ed
                JOIN transactions t ON t.id = ed.transaction_id
                WHERE ed.participant_id = ? AND {ACTIVE_CONDITION}
                """,
                (participant_id,),
            )
            if row is not None and int(row[0]) > 0:
                raise InvalidStateError(
                    f"Participant has {row[0]} active expense share(s) "
                    f"and cannot be deleted: {participant_id}"
                )

            await self.db.execute(
                "DELETE FROM expense_distributions WHERE participant_id = ?",
                (participant_id,),
            )

            cursor = await self.db.execute(
                "DELETE FROM participants WHERE id = ?",
                (participant_id,),
            )
            if cursor.rowcount == 0:
                raise ParticipantNotFoundError(participant_id)

        logger.info(f"Participant deleted: #{participant_id}")
