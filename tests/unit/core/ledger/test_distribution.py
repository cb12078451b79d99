"""
지출 분배 계산기 테스트

균등 분배, 나머지 센트 배정, 합계 보존 확인
"""

import pytest

from core.ledger.distribution import distribute
from core.ledger.errors import NoEligibleParticipantsError
from core.ledger.types import EligibleParticipant


def _participants(*ids: int) -> list[EligibleParticipant]:
    return [EligibleParticipant(participant_id=pid, account_id=pid + 100) for pid in ids]


class TestDistribute:
    """distribute 테스트"""

    def test_even_split(self) -> None:
        """나누어 떨어지는 경우"""
        shares = distribute(6000, _participants(1, 2))

        assert [s.amount_cents for s in shares] == [3000, 3000]

    def test_remainder_goes_to_lowest_ids(self) -> None:
        """나머지 센트는 ID가 작은 참가자부터 1센트씩"""
        shares = distribute(1000, _participants(3, 1, 2))

        assert [(s.participant_id, s.amount_cents) for s in shares] == [
            (1, 334),
            (2, 333),
            (3, 333),
        ]

    def test_remainder_two_cents(self) -> None:
        """나머지 2센트"""
        shares = distribute(11, _participants(1, 2, 3))

        assert [s.amount_cents for s in shares] == [4, 4, 3]

    def test_sum_equals_amount(self) -> None:
        """몫의 합계 = 지출액"""
        for amount in (1, 7, 99, 100, 12345, 999_999):
            for n in range(1, 8):
                shares = distribute(amount, _participants(*range(1, n + 1)))
                assert sum(s.amount_cents for s in shares) == amount

    def test_shares_differ_by_at_most_one_cent(self) -> None:
        """몫의 차이는 최대 1센트"""
        shares = distribute(10_001, _participants(1, 2, 3, 4, 5, 6, 7))
        amounts = [s.amount_cents for s in shares]

        assert max(amounts) - min(amounts) <= 1

    def test_amount_smaller_than_participant_count(self) -> None:
        """참가자 수보다 적은 센트 (일부는 0센트)"""
        shares = distribute(2, _participants(1, 2, 3))

        assert [s.amount_cents for s in shares] == [1, 1, 0]

    def test_single_participant(self) -> None:
        """참가자 1명"""
        shares = distribute(500, _participants(9))

        assert len(shares) == 1
        assert shares[0].amount_cents == 500
        assert shares[0].account_id == 109

    def test_deterministic(self) -> None:
        """같은 입력이면 같은 결과 (입력 순서 무관)"""
        a = distribute(1000, _participants(1, 2, 3))
        b = distribute(1000, _participants(3, 2, 1))

        assert a == b

    def test_no_participants(self) -> None:
        """참가자 없음"""
        with pytest.raises(NoEligibleParticipantsError):
            distribute(1000, [])

    def test_non_positive_amount(self) -> None:
        """0 이하 금액"""
        with pytest.raises(ValueError):
            distribute(0, _participants(1))

        with pytest.raises(ValueError):
            distribute(-5, _participants(1))

    def test_duplicate_participant(self) -> None:
        """중복 참가자"""
        with pytest.raises(ValueError, match="Duplicate"):
            distribute(100, _participants(1, 1))
