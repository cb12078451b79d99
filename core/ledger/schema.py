"""
Ledger 스키마 초기화

Web 시작 시 / init 스크립트에서 자동으로 Ledger 테이블 생성.
CREATE IF NOT EXISTS / INSERT OR IGNORE 패턴으로 여러 번 호출해도 안전하게 동작.

금액 컬럼은 모두 INTEGER (센트 단위).
"""

import logging
from typing import TYPE_CHECKING

from core.constants import LedgerConstants

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스 + 공동 계좌)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await _insert_group_account(db)
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # participants 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS participants (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name       TEXT NOT NULL,
            last_name        TEXT NOT NULL,
            phone            TEXT,
            email            TEXT,
            child_name       TEXT,
            is_excluded      INTEGER NOT NULL DEFAULT 0,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # personal_accounts 테이블 (참가자와 1:1, 참가자 삭제 시 CASCADE)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS personal_accounts (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            participant_id   INTEGER NOT NULL UNIQUE,
            balance          INTEGER NOT NULL DEFAULT 0,
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (participant_id) REFERENCES participants(id) ON DELETE CASCADE
        )
    """)

    # group_account 테이블 (단일 행)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS group_account (
            id               INTEGER PRIMARY KEY,
            balance          INTEGER NOT NULL DEFAULT 0,
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # transactions 테이블 (status: NULL=활성, 'cancelled'=취소)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id                  INTEGER PRIMARY KEY AUTOINCREMENT,
            type                TEXT NOT NULL,
            amount              INTEGER NOT NULL CHECK (amount > 0),
            description         TEXT NOT NULL DEFAULT '',
            participant_id      INTEGER,
            personal_account_id INTEGER,
            group_account_id    INTEGER,
            status              TEXT,
            created_by          TEXT NOT NULL,
            created_at          TEXT NOT NULL,
            FOREIGN KEY (participant_id) REFERENCES participants(id) ON DELETE SET NULL,
            FOREIGN KEY (personal_account_id) REFERENCES personal_accounts(id) ON DELETE SET NULL,
            FOREIGN KEY (group_account_id) REFERENCES group_account(id)
        )
    """)

    # expense_distributions 테이블 (분배 행이 남은 참가자/계좌는 삭제 불가)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS expense_distributions (
            id                  INTEGER PRIMARY KEY AUTOINCREMENT,
            transaction_id      INTEGER NOT NULL,
            participant_id      INTEGER NOT NULL,
            personal_account_id INTEGER NOT NULL,
            amount              INTEGER NOT NULL,
            created_at          TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (transaction_id) REFERENCES transactions(id) ON DELETE CASCADE,
            FOREIGN KEY (participant_id) REFERENCES participants(id) ON DELETE RESTRICT,
            FOREIGN KEY (personal_account_id) REFERENCES personal_accounts(id) ON DELETE RESTRICT
        )
    """)

    # transaction_files 테이블 (첨부 메타데이터)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transaction_files (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            transaction_id   INTEGER NOT NULL,
            file_name        TEXT NOT NULL,
            file_path        TEXT NOT NULL,
            mime_type        TEXT,
            size             INTEGER NOT NULL DEFAULT 0,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (transaction_id) REFERENCES transactions(id) ON DELETE CASCADE
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """Ledger 인덱스 생성"""
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_created_at
        ON transactions(created_at)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_participant
        ON transactions(participant_id, type)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_distributions_transaction
        ON expense_distributions(transaction_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_distributions_participant
        ON expense_distributions(participant_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transaction_files_transaction
        ON transaction_files(transaction_id)
    """)


async def _insert_group_account(db: "SQLiteAdapter") -> None:
    """공동 계좌 단일 행 생성 (이미 있으면 무시)"""
    async with db.transaction():
        await db.execute(
            "INSERT OR IGNORE INTO group_account (id, balance) VALUES (?, 0)",
            (LedgerConstants.GROUP_ACCOUNT_ID,),
        )
