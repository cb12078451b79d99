"""
core/ledger/types.py, core/ledger/errors.py 테스트
"""

from decimal import Decimal

from core.ledger.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidStateError,
    LedgerError,
    NoEligibleParticipantsError,
    NotFoundError,
    ParticipantNotFoundError,
    TransactionNotFoundError,
    UnsupportedOperationError,
)
from core.ledger.types import (
    AccountKind,
    AccountRef,
    LedgerTransaction,
    Participant,
    Share,
    TransactionFile,
    TransactionStatus,
    TransactionType,
)


class TestTransactionStatus:
    """TransactionStatus 테스트"""

    def test_from_db(self) -> None:
        """DB 값 → 상태 (NULL = 활성)"""
        assert TransactionStatus.from_db(None) is TransactionStatus.ACTIVE
        assert TransactionStatus.from_db("cancelled") is TransactionStatus.CANCELLED

    def test_to_db(self) -> None:
        """상태 → DB 값"""
        assert TransactionStatus.ACTIVE.to_db() is None
        assert TransactionStatus.CANCELLED.to_db() == "cancelled"


class TestTransactionType:
    """TransactionType 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert TransactionType.CONTRIBUTION.value == "contribution"
        assert TransactionType.EXPENSE.value == "expense"


class TestAccountRef:
    """AccountRef 테스트"""

    def test_personal(self) -> None:
        """개인 계좌 참조"""
        ref = AccountRef.personal(5)

        assert ref.kind is AccountKind.PERSONAL
        assert ref.id == 5

    def test_hashable(self) -> None:
        """불변 + 해시 가능"""
        assert {AccountRef.personal(1), AccountRef.personal(1)} == {AccountRef.personal(1)}


class TestDataStructures:
    """데이터 구조 직렬화 테스트"""

    def test_share_amount(self) -> None:
        """몫 금액 Decimal"""
        assert Share(1, 11, 3334).amount == Decimal("33.34")

    def test_participant_to_dict(self) -> None:
        """참가자 직렬화 (잔액 문자열)"""
        participant = Participant(
            id=1,
            first_name="Ivan",
            last_name="Ivanov",
            account_id=10,
            balance_cents=-3000,
        )

        data = participant.to_dict()

        assert data["account_balance"] == "-30.00"
        assert data["is_excluded"] is False

    def test_transaction_to_dict(self) -> None:
        """거래 직렬화 (활성 상태는 None)"""
        transaction = LedgerTransaction(
            id=1,
            type="expense",
            amount_cents=6000,
            description="snacks",
            status=TransactionStatus.ACTIVE,
            created_by="admin",
            created_at="2026-01-01T00:00:00+00:00",
            group_account_id=1,
        )

        data = transaction.to_dict()

        assert data["amount"] == "60.00"
        assert data["status"] is None
        assert transaction.is_active is True
        assert transaction.is_cancelled is False

    def test_file_to_dict_hides_path(self) -> None:
        """첨부 직렬화 시 저장 경로 숨김"""
        file = TransactionFile(
            id=1,
            transaction_id=2,
            file_name="receipt.jpg",
            file_path="/srv/uploads/abc.jpg",
            mime_type="image/jpeg",
            size=1024,
            created_at="2026-01-01",
        )

        assert "file_path" not in file.to_dict()


class TestErrors:
    """오류 태그 테스트"""

    def test_kinds(self) -> None:
        """kind 태그"""
        assert TransactionNotFoundError(1).kind == "not_found"
        assert ParticipantNotFoundError(1).kind == "not_found"
        assert InvalidStateError("x").kind == "invalid_state"
        assert UnsupportedOperationError("x").kind == "unsupported_operation"
        assert InsufficientFundsError("x").kind == "insufficient_funds"
        assert NoEligibleParticipantsError().kind == "no_eligible_participants"
        assert AccountNotFoundError("x").kind == "account_not_found"

    def test_hierarchy(self) -> None:
        """상속 구조"""
        assert isinstance(TransactionNotFoundError(1), NotFoundError)
        assert isinstance(InvalidStateError("x"), LedgerError)

    def test_to_dict(self) -> None:
        """직렬화"""
        error = TransactionNotFoundError(42)

        assert error.to_dict() == {
            "error": "not_found",
            "detail": "Transaction not found: 42",
        }
        assert error.transaction_id == 42
