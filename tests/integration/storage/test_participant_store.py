"""ParticipantStore 통합 테스트"""

from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.engine import LedgerEngine
from core.ledger.errors import InvalidStateError, ParticipantNotFoundError
from core.storage.participant_store import ParticipantData, ParticipantStore


class TestCreate:
    """참가자 생성 테스트"""

    @pytest.mark.asyncio
    async def test_create_with_account(
        self,
        participants: ParticipantStore,
        db: SQLiteAdapter,
    ) -> None:
        """참가자 + 개인 계좌(잔액 0) 함께 생성"""
        pid = await participants.create(ParticipantData(
            first_name="Ivan",
            last_name="Ivanov",
            phone="+7-999-123-45-67",
            email="ivan@example.com",
            child_name="Masha",
        ))

        participant = await participants.get(pid)

        assert participant is not None
        assert participant.first_name == "Ivan"
        assert participant.child_name == "Masha"
        assert participant.is_excluded is False
        assert participant.account_id is not None
        assert participant.balance == Decimal("0.00")

        row = await db.fetchone(
            "SELECT COUNT(*) FROM personal_accounts WHERE participant_id = ?",
            (pid,),
        )
        assert row[0] == 1

    @pytest.mark.asyncio
    async def test_get_missing(self, participants: ParticipantStore) -> None:
        """없는 참가자 → None"""
        assert await participants.get(404) is None


class TestListAll:
    """참가자 목록 테스트"""

    @pytest.mark.asyncio
    async def test_sorted_by_last_then_first_name(
        self,
        participants: ParticipantStore,
        make_participant,
    ) -> None:
        """성, 이름 순"""
        await make_participant("Petr", last_name="Petrov")
        await make_participant("Anna", last_name="Ivanova")
        await make_participant("Boris", last_name="Ivanova")

        names = [(p.last_name, p.first_name) for p in await participants.list_all()]

        assert names == [("Ivanova", "Anna"), ("Ivanova", "Boris"), ("Petrov", "Petr")]

    @pytest.mark.asyncio
    async def test_includes_balance(
        self,
        participants: ParticipantStore,
        engine: LedgerEngine,
        make_participant,
    ) -> None:
        """개인 계좌 잔액 포함"""
        pid = await make_participant("A")
        await engine.apply_contribution(pid, Decimal("12.50"), "fee", "admin")

        [participant] = await participants.list_all()

        assert participant.balance == Decimal("12.50")
        assert participant.to_dict()["account_balance"] == "12.50"


class TestUpdate:
    """참가자 수정 테스트"""

    @pytest.mark.asyncio
    async def test_update_fields(self, participants: ParticipantStore, make_participant) -> None:
        """정보 + 제외 여부 수정"""
        pid = await make_participant("A")

        await participants.update(pid, ParticipantData(
            first_name="Alexey",
            last_name="Smirnov",
            child_name="Kolya",
            is_excluded=True,
        ))

        participant = await participants.get(pid)
        assert participant.first_name == "Alexey"
        assert participant.last_name == "Smirnov"
        assert participant.is_excluded is True

    @pytest.mark.asyncio
    async def test_update_missing(self, participants: ParticipantStore) -> None:
        """없는 참가자 수정"""
        with pytest.raises(ParticipantNotFoundError):
            await participants.update(404, ParticipantData(first_name="X", last_name="Y"))

    @pytest.mark.asyncio
    async def test_set_excluded(self, participants: ParticipantStore, make_participant) -> None:
        """제외 여부만 변경"""
        pid = await make_participant("A")

        await participants.set_excluded(pid, True)
        assert (await participants.get(pid)).is_excluded is True

        await participants.set_excluded(pid, False)
        assert (await participants.get(pid)).is_excluded is False

    @pytest.mark.asyncio
    async def test_set_excluded_missing(self, participants: ParticipantStore) -> None:
        """없는 참가자"""
        with pytest.raises(ParticipantNotFoundError):
            await participants.set_excluded(404, True)


class TestDelete:
    """참가자 삭제 테스트"""

    @pytest.mark.asyncio
    async def test_delete_cascades_account(
        self,
        participants: ParticipantStore,
        make_participant,
        db: SQLiteAdapter,
    ) -> None:
        """삭제 시 개인 계좌도 삭제"""
        pid = await make_participant("A")

        await participants.delete(pid)

        assert await participants.get(pid) is None
        row = await db.fetchone("SELECT COUNT(*) FROM personal_accounts")
        assert row[0] == 0

    @pytest.mark.asyncio
    async def test_delete_refused_with_contributions(
        self,
        participants: ParticipantStore,
        engine: LedgerEngine,
        make_participant,
    ) -> None:
        """납입 거래가 있으면 삭제 거부 (취소된 납입 포함)"""
        pid = await make_participant("A")
        tx_id = await engine.apply_contribution(pid, Decimal("10"), "fee", "admin")
        await engine.cancel(tx_id)

        with pytest.raises(InvalidStateError):
            await participants.delete(pid)

        assert await participants.get(pid) is not None

    @pytest.mark.asyncio
    async def test_delete_missing(self, participants: ParticipantStore) -> None:
        """없는 참가자 삭제"""
        with pytest.raises(ParticipantNotFoundError):
            await participants.delete(404)

    @pytest.mark.asyncio
    async def test_delete_refused_with_active_expense_share(
        self,
        participants: ParticipantStore,
        engine: LedgerEngine,
        make_participant,
        db: SQLiteAdapter,
    ) -> None:
        """활성 지출 분배 몫이 있으면 삭제 거부 (잔액/분배 유지)"""
        p1 = await make_participant("A")
        p2 = await make_participant("B")
        await engine.apply_contribution(p1, Decimal("100"), "fee", "admin")
        expense_id = await engine.apply_expense(Decimal("60"), "snacks", "admin")

        with pytest.raises(InvalidStateError):
            await participants.delete(p2)

        shares = await engine.get_distribution(expense_id)
        assert sum(s.amount for s in shares) == Decimal("60.00")
        assert await engine.get_balance(p2) == Decimal("-30.00")
        assert await engine.get_group_balance() == Decimal("40.00")
        assert (await engine.reconcile()).consistent

    @pytest.mark.asyncio
    async def test_delete_after_expense_cancelled(
        self,
        participants: ParticipantStore,
        engine: LedgerEngine,
        make_participant,
        db: SQLiteAdapter,
    ) -> None:
        """취소된 지출 몫만 있으면 삭제 가능, 재적용 시 남은 참가자에게 분배"""
        p1 = await make_participant("A")
        p2 = await make_participant("B")
        await engine.apply_contribution(p1, Decimal("100"), "fee", "admin")
        expense_id = await engine.apply_expense(Decimal("60"), "snacks", "admin")
        await engine.cancel(expense_id)

        await participants.delete(p2)

        row = await db.fetchone(
            "SELECT COUNT(*) FROM expense_distributions WHERE participant_id = ?",
            (p2,),
        )
        assert row[0] == 0

        await engine.reapply(expense_id)

        shares = await engine.get_distribution(expense_id)
        assert [(s.participant_id, s.amount) for s in shares] == [(p1, Decimal("60.00"))]
        assert (await engine.reconcile()).consistent
