"""
금액 변환 유틸리티

외부 표현: Decimal (소수 2자리) | 내부 저장: 정수 센트
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.constants import LedgerConstants

CENT = Decimal(1).scaleb(-LedgerConstants.CURRENCY_SCALE)  # Decimal("0.01")
_CENTS_PER_UNIT = 10 ** LedgerConstants.CURRENCY_SCALE

# 거래 1건 최대 금액 (Decimal)
MAX_AMOUNT = Decimal(LedgerConstants.MAX_AMOUNT_CENTS).scaleb(-LedgerConstants.CURRENCY_SCALE)


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """임의 입력을 소수 2자리 Decimal로 정규화

    float는 문자열을 거쳐 변환 (이진 부동소수점 오차 방지).

    Raises:
        ValueError: 숫자로 해석할 수 없는 경우
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        if isinstance(value, float):
            value = str(value)
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # 유효 자릿수(28) 초과
        raise ValueError(f"Amount out of range: {value!r}") from e


def to_cents(value: Decimal | int | float | str) -> int:
    """금액을 정수 센트로 변환

    Example:
        >>> to_cents("100.50")
        10050
    """
    return int(to_decimal(value) * _CENTS_PER_UNIT)


def from_cents(cents: int | None) -> Decimal:
    """정수 센트를 Decimal로 변환 (None은 0)

    Example:
        >>> from_cents(10050)
        Decimal('100.50')
    """
    if cents is None:
        return Decimal("0.00")
    return (Decimal(int(cents)) / _CENTS_PER_UNIT).quantize(CENT)


def positive_cents(value: Decimal | int | float | str) -> int:
    """양수 금액만 허용하여 센트로 변환 (최대 MAX_AMOUNT)

    Raises:
        ValueError: 0 이하이거나 최대 금액을 넘는 경우
    """
    cents = to_cents(value)
    if cents <= 0:
        raise ValueError(f"Amount must be positive: {value!r}")
    if cents > LedgerConstants.MAX_AMOUNT_CENTS:
        raise ValueError(f"Amount exceeds maximum {MAX_AMOUNT}: {value!r}")
    return cents
