"""
DB 초기화 스크립트

스키마 생성 (+ 선택적으로 데모 참가자 생성)

사용법:
    python -m scripts.init_db
    python -m scripts.init_db --seed
    python -m scripts.init_db --db data/demo.db --seed
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import load_config
from core.logging import setup_logging
from core.storage.participant_store import ParticipantData, ParticipantStore

logger = logging.getLogger(__name__)

# 데모 참가자 (이름, 성, 전화번호, 이메일, 자녀 이름)
DEMO_PARTICIPANTS: list[tuple[str, str, str, str, str]] = [
    ("Иван", "Иванов", "+7-999-123-45-67", "ivan@example.com", "Маша Иванова"),
    ("Петр", "Петров", "+7-999-234-56-78", "petr@example.com", "Саша Петров"),
    ("Анна", "Сидорова", "+7-999-345-67-89", "anna@example.com", "Даша Сидорова"),
    ("Мария", "Козлова", "+7-999-456-78-90", "maria@example.com", "Миша Козлов"),
]


async def seed_participants(db: SQLiteAdapter) -> int:
    """데모 참가자 생성 (참가자가 없을 때만)

    Returns:
        생성된 참가자 수
    """
    store = ParticipantStore(db)
    if await store.list_all():
        logger.info("참가자가 이미 있어 데모 데이터 생성을 건너뜁니다")
        return 0

    for first_name, last_name, phone, email, child_name in DEMO_PARTICIPANTS:
        await store.create(
            ParticipantData(
                first_name=first_name,
                last_name=last_name,
                phone=phone,
                email=email,
                child_name=child_name,
            )
        )
    return len(DEMO_PARTICIPANTS)


async def main(db_path: Path | None, seed: bool) -> None:
    """초기화 실행

    Args:
        db_path: DB 파일 경로 (None이면 settings.yaml 또는 기본 경로)
        seed: 데모 참가자 생성 여부
    """
    if db_path is None:
        db_path = load_config(allow_missing=True).db_path

    logger.info(f"DB 초기화 시작: {db_path}")

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)

        if seed:
            created = await seed_participants(db)
            logger.info(f"데모 참가자 {created}명 생성")

    logger.info("DB 초기화 완료 ✓")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="GroupFund DB 초기화"
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="DB 파일 경로 (기본: settings.yaml의 database.path)"
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="데모 참가자 생성"
    )
    args = parser.parse_args()

    setup_logging("scripts")
    asyncio.run(main(args.db, args.seed))
