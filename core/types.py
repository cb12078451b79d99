"""
타입 정의 모듈

Enum, Dataclass 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from dataclasses import dataclass
from enum import Enum


class CallerRole(str, Enum):
    """호출자 역할 (관리자 / 학부모)"""

    ADMIN = "admin"
    PARENT = "parent"


@dataclass(frozen=True)
class Caller:
    """호출자 (불변)

    인증 계층에서 확인된 호출자 정보.
    Ledger 변경 작업 전에 역할을 확인하는 데 사용.
    """

    role: CallerRole
    participant_id: int | None = None

    @classmethod
    def admin(cls) -> "Caller":
        """관리자 Caller 생성"""
        return cls(role=CallerRole.ADMIN)

    @classmethod
    def parent(cls, participant_id: int) -> "Caller":
        """학부모 Caller 생성"""
        return cls(role=CallerRole.PARENT, participant_id=participant_id)

    @property
    def is_admin(self) -> bool:
        return self.role == CallerRole.ADMIN

    @property
    def actor_id(self) -> str:
        """created_by 기록용 식별자"""
        if self.is_admin:
            return "admin"
        return f"participant:{self.participant_id}"

    def can_contribute_for(self, participant_id: int) -> bool:
        """해당 참가자의 납입을 등록할 수 있는지 여부

        관리자는 모든 참가자, 학부모는 본인만 가능.
        """
        if self.is_admin:
            return True
        return self.participant_id == participant_id
