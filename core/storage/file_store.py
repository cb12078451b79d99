"""
TransactionFileStore - 거래 첨부 파일 메타데이터 저장소

파일 본문 저장은 외부 책임. 여기서는 메타데이터만 관리.
거래 행이 삭제되면 첨부 행은 CASCADE로 함께 삭제.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.errors import FileNotFoundInLedgerError, TransactionNotFoundError
from core.ledger.transaction_log import TransactionLog, row_to_file
from core.ledger.types import TransactionFile

logger = logging.getLogger(__name__)


class TransactionFileStore:
    """첨부 파일 메타데이터 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.log = TransactionLog(db)

    async def add(
        self,
        transaction_id: int,
        file_name: str,
        file_path: str,
        mime_type: str | None,
        size: int,
    ) -> int:
        """첨부 추가

        Returns:
            생성된 첨부 ID

        Raises:
            TransactionNotFoundError: 거래가 없는 경우
        """
        async with self.db.transaction():
            if await self.log.get(transaction_id) is None:
                raise TransactionNotFoundError(transaction_id)

            cursor = await self.db.execute(
                """
                INSERT INTO transaction_files (
                    transaction_id, file_name, file_path, mime_type, size
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (transaction_id, file_name, file_path, mime_type, size),
            )
            file_id = int(cursor.lastrowid)

        logger.info(f"File attached: #{file_id} -> transaction #{transaction_id}")
        return file_id

    async def list_for_transaction(self, transaction_id: int) -> list[TransactionFile]:
        """거래의 첨부 목록"""
        files = await self.log.get_files([transaction_id])
        return files.get(transaction_id, [])

    async def get(self, file_id: int) -> TransactionFile:
        """첨부 단건 조회

        Raises:
            FileNotFoundInLedgerError: 첨부가 없는 경우
        """
        row = await self.db.fetchone(
            """
            SELECT id, transaction_id, file_name, file_path, mime_type, size, created_at
            FROM transaction_files
            WHERE id = ?
            """,
            (file_id,),
        )
        if row is None:
            raise FileNotFoundInLedgerError(file_id)
        return row_to_file(row)

    async def delete(self, file_id: int) -> str:
        """첨부 메타데이터 삭제

        Returns:
            실제 파일 삭제용 저장 경로

        Raises:
            FileNotFoundInLedgerError: 첨부가 없는 경우
        """
        async with self.db.transaction():
            file = await self.get(file_id)
            await self.db.execute(
                "DELETE FROM transaction_files WHERE id = ?",
                (file_id,),
            )

        logger.info(f"File detached: #{file_id} (transaction #{file.transaction_id})")
        return file.file_path
