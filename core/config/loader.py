"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths

# 설정 파일 경로를 덮어쓰는 환경 변수
CONFIG_ENV_VAR = "GROUPFUND_CONFIG"


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: Path
    admin_token: str
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT
    page_size: int = Defaults.PAGE_SIZE


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _resolve_path(value: str | Path) -> Path:
    """상대 경로는 프로젝트 루트 기준으로 해석"""
    path = Path(value).expanduser()
    if str(value) == ":memory:" or path.is_absolute():
        return path
    return PROJECT_ROOT / path


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigLoadError(f"settings.yaml의 '{name}' 섹션 형식이 잘못되었습니다")
    return section


def load_config(path: Path | None = None, allow_missing: bool = False) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 환경 변수 또는 기본 경로 사용)
        allow_missing: 파일이 없을 때 기본값 사용 여부
            (관리자 토큰이 비어 있으므로 관리자 API는 사용 불가)

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 포트/페이지 크기 값이 유효하지 않은 경우
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        path = Path(env_path) if env_path else Paths.SETTINGS_FILE

    if not path.exists():
        if allow_missing:
            return AppConfig(db_path=Paths.DB_FILE, admin_token="")
        raise ConfigLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise ConfigLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise ConfigLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    database = _section(data, "database")
    web = _section(data, "web")
    ledger = _section(data, "ledger")

    admin_token = web.get("admin_token", "")
    if not admin_token:
        raise ConfigLoadError("settings.yaml의 web 섹션에 'admin_token'이 없습니다")

    web_port = int(web.get("port", Defaults.WEB_PORT))
    if not 1 <= web_port <= 65535:
        raise ValueError(f"유효하지 않은 포트입니다: {web_port}")

    page_size = int(ledger.get("page_size", Defaults.PAGE_SIZE))
    if not 1 <= page_size <= Defaults.MAX_PAGE_SIZE:
        raise ValueError(
            f"유효하지 않은 page_size입니다: {page_size}. "
            f"허용 범위: 1~{Defaults.MAX_PAGE_SIZE}"
        )

    return AppConfig(
        db_path=_resolve_path(database.get("path", Paths.DB_FILE)),
        admin_token=str(admin_token),
        web_host=str(web.get("host", Defaults.WEB_HOST)),
        web_port=web_port,
        page_size=page_size,
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_config(config_path)

    @property
    def config(self) -> AppConfig:
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 파일 경로"""
        return self.config.db_path

    @property
    def admin_token(self) -> str:
        """관리자 Bearer 토큰"""
        return self.config.admin_token

    @property
    def web_host(self) -> str:
        return self.config.web_host

    @property
    def web_port(self) -> int:
        return self.config.web_port

    @property
    def page_size(self) -> int:
        """거래 내역 기본 페이지 크기"""
        return self.config.page_size

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
