"""
지출 분배 계산기

지출 금액을 현재 분배 대상 참가자에게 균등 분배.

정책:
- 금액은 정수 센트
- 기본 몫 = amount // n
- 나머지 r = amount % n 센트는 안정 정렬(참가자 ID 오름차순) 기준
  앞의 r명에게 1센트씩 추가
- 따라서 몫의 합계는 항상 amount와 정확히 일치

상태가 없는 순수 함수: 같은 입력이면 항상 같은 결과.
"""

from collections.abc import Sequence

from core.ledger.errors import NoEligibleParticipantsError
from core.ledger.types import EligibleParticipant, Share


def distribute(
    amount_cents: int,
    participants: Sequence[EligibleParticipant],
) -> list[Share]:
    """지출 금액 분배

    Args:
        amount_cents: 지출 금액 (센트, > 0)
        participants: 분배 대상 참가자 (1명 이상)

    Returns:
        참가자 ID 오름차순의 몫 목록 (참가자당 1개)

    Raises:
        ValueError: 금액이 0 이하인 경우 또는 참가자 중복
        NoEligibleParticipantsError: 참가자가 없는 경우

    Example:
        >>> shares = distribute(1000, [EligibleParticipant(1, 11), EligibleParticipant(2, 12), EligibleParticipant(3, 13)])
        >>> [s.amount_cents for s in shares]
        [334, 333, 333]
    """
    if amount_cents <= 0:
        raise ValueError(f"Amount must be positive: {amount_cents}")

    if not participants:
        raise NoEligibleParticipantsError()

    ordered = sorted(participants, key=lambda p: p.participant_id)
    if len({p.participant_id for p in ordered}) != len(ordered):
        raise ValueError("Duplicate participant in distribution set")

    n = len(ordered)
    base, remainder = divmod(amount_cents, n)

    return [
        Share(
            participant_id=p.participant_id,
            account_id=p.account_id,
            amount_cents=base + (1 if i < remainder else 0),
        )
        for i, p in enumerate(ordered)
    ]
