"""
금액 변환 유틸리티 테스트
"""

from decimal import Decimal

import pytest

from core.constants import LedgerConstants
from core.ledger.money import MAX_AMOUNT, from_cents, positive_cents, to_cents, to_decimal


class TestToDecimal:
    """to_decimal 테스트"""

    def test_quantizes_to_two_places(self) -> None:
        """소수 2자리로 정규화"""
        assert to_decimal("100") == Decimal("100.00")
        assert to_decimal(5) == Decimal("5.00")

    def test_rounds_half_up(self) -> None:
        """반올림 (HALF_UP)"""
        assert to_decimal("0.005") == Decimal("0.01")
        assert to_decimal("1.234") == Decimal("1.23")

    def test_float_via_string(self) -> None:
        """float는 문자열을 거쳐 변환"""
        assert to_decimal(0.1) == Decimal("0.10")
        assert to_decimal(19.99) == Decimal("19.99")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", True, None])
    def test_invalid(self, value: object) -> None:
        """숫자가 아닌 입력"""
        with pytest.raises(ValueError):
            to_decimal(value)  # type: ignore[arg-type]


class TestCents:
    """센트 변환 테스트"""

    def test_to_cents(self) -> None:
        """Decimal → 센트"""
        assert to_cents("100.50") == 10050
        assert to_cents(Decimal("0.01")) == 1

    def test_from_cents(self) -> None:
        """센트 → Decimal"""
        assert from_cents(10050) == Decimal("100.50")
        assert from_cents(-3000) == Decimal("-30.00")

    def test_from_cents_none(self) -> None:
        """None은 0"""
        assert from_cents(None) == Decimal("0.00")

    def test_positive_cents(self) -> None:
        """양수만 허용"""
        assert positive_cents("60") == 6000

        with pytest.raises(ValueError, match="positive"):
            positive_cents("0")

        with pytest.raises(ValueError, match="positive"):
            positive_cents("-1")

    def test_positive_cents_rounds_to_zero(self) -> None:
        """반올림 후 0이 되면 거부"""
        with pytest.raises(ValueError):
            positive_cents("0.004")


class TestAmountRange:
    """금액 범위 테스트"""

    def test_beyond_decimal_precision(self) -> None:
        """정밀도를 넘는 금액은 ValueError"""
        with pytest.raises(ValueError, match="out of range"):
            to_decimal(Decimal("1e30"))

    def test_max_amount_accepted(self) -> None:
        """최대 금액까지 허용"""
        assert MAX_AMOUNT == Decimal("10000000000.00")
        assert positive_cents(MAX_AMOUNT) == LedgerConstants.MAX_AMOUNT_CENTS

    @pytest.mark.parametrize("value", ["10000000000.01", "100000000000000000", Decimal("1e30")])
    def test_over_max_rejected(self, value: object) -> None:
        """최대 금액 초과는 ValueError (SQLite INTEGER 범위 초과 방지)"""
        with pytest.raises(ValueError):
            positive_cents(value)  # type: ignore[arg-type]
