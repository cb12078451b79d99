"""
pytest 공통 fixture 정의

임시 디렉토리의 SQLite DB + 스키마 초기화, 참가자 생성 헬퍼
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.ledger.engine import LedgerEngine
from core.storage.participant_store import ParticipantData, ParticipantStore


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
database:
  path: {(temp_dir / "groupfund.db").as_posix()}

web:
  host: 0.0.0.0
  port: 8080
  admin_token: "test_admin_token_xyz"

ledger:
  page_size: 20
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest_asyncio.fixture
async def db(temp_dir: Path) -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 초기화된 테스트용 DB"""
    db_path = temp_dir / "test_ledger.db"
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()
    await init_schema(adapter)

    yield adapter

    await adapter.close()


@pytest.fixture
def engine(db: SQLiteAdapter) -> LedgerEngine:
    """LedgerEngine 인스턴스"""
    return LedgerEngine(db)


@pytest.fixture
def participants(db: SQLiteAdapter) -> ParticipantStore:
    """ParticipantStore 인스턴스"""
    return ParticipantStore(db)


@pytest.fixture
def make_participant(participants: ParticipantStore) -> Callable[..., Awaitable[int]]:
    """참가자 생성 헬퍼

    사용 예시:
        p1 = await make_participant("Ivan")
    """

    async def _make(
        first_name: str,
        last_name: str = "Test",
        is_excluded: bool = False,
    ) -> int:
        return await participants.create(
            ParticipantData(
                first_name=first_name,
                last_name=last_name,
                child_name=f"{first_name} Jr",
                is_excluded=is_excluded,
            )
        )

    return _make
