"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → groupfund/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    # 거래 내역 페이지 크기
    PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 200


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DB_FILE: Path = DATA_DIR / "groupfund.db"


class LedgerConstants:
    """Ledger 고정값"""

    # 공동 계좌는 단일 행 (고정 ID)
    GROUP_ACCOUNT_ID: int = 1

    # 통화 소수 자릿수 (센트 단위 정수로 저장)
    CURRENCY_SCALE: int = 2

    # SQLite busy_timeout (ms)
    BUSY_TIMEOUT_MS: int = 30000

    # 거래 1건 최대 금액 (센트, 합계가 SQLite INTEGER 범위를 넘지 않도록 제한)
    MAX_AMOUNT_CENTS: int = 10**12
