"""
core/types.py 테스트

호출자 역할과 납입 권한 확인
"""

import pytest

from core.types import Caller, CallerRole


class TestCallerRole:
    """CallerRole 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert CallerRole.ADMIN.value == "admin"
        assert CallerRole.PARENT.value == "parent"

    def test_from_string(self) -> None:
        """문자열에서 생성"""
        assert CallerRole("admin") == CallerRole.ADMIN


class TestCaller:
    """Caller 테스트"""

    def test_admin(self) -> None:
        """관리자"""
        caller = Caller.admin()

        assert caller.is_admin is True
        assert caller.participant_id is None
        assert caller.actor_id == "admin"

    def test_parent(self) -> None:
        """학부모"""
        caller = Caller.parent(7)

        assert caller.is_admin is False
        assert caller.participant_id == 7
        assert caller.actor_id == "participant:7"

    def test_admin_can_contribute_for_anyone(self) -> None:
        """관리자는 모든 참가자 납입 가능"""
        caller = Caller.admin()

        assert caller.can_contribute_for(1) is True
        assert caller.can_contribute_for(99) is True

    def test_parent_can_contribute_only_for_self(self) -> None:
        """학부모는 본인 납입만 가능"""
        caller = Caller.parent(3)

        assert caller.can_contribute_for(3) is True
        assert caller.can_contribute_for(4) is False

    def test_frozen(self) -> None:
        """불변성 확인"""
        caller = Caller.parent(1)

        with pytest.raises(AttributeError):
            caller.participant_id = 2  # type: ignore
