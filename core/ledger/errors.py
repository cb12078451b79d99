"""
Ledger 오류 정의

모든 Ledger 실패는 LedgerError 하위 타입으로 발생.
kind(태그)와 detail(사람이 읽을 수 있는 설명)만 가짐.
HTTP 상태 코드 변환은 호출 계층(web)의 책임.
"""


class LedgerError(Exception):
    """Ledger 오류 기본 타입"""

    kind: str = "ledger_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict[str, str]:
        """딕셔너리 변환"""
        return {"error": self.kind, "detail": self.detail}


class NotFoundError(LedgerError):
    """참조 대상 없음"""

    kind = "not_found"


class TransactionNotFoundError(NotFoundError):
    """거래 없음"""

    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class ParticipantNotFoundError(NotFoundError):
    """참가자 없음"""

    def __init__(self, participant_id: int):
        super().__init__(f"Participant not found: {participant_id}")
        self.participant_id = participant_id


class FileNotFoundInLedgerError(NotFoundError):
    """첨부 파일 없음"""

    def __init__(self, file_id: int):
        super().__init__(f"Transaction file not found: {file_id}")
        self.file_id = file_id


class InvalidStateError(LedgerError):
    """잘못된 상태에서의 작업 (예: 취소된 거래 재취소)"""

    kind = "invalid_state"


class UnsupportedOperationError(LedgerError):
    """거래 타입에 허용되지 않는 작업 (예: 지출 삭제)"""

    kind = "unsupported_operation"


class InsufficientFundsError(LedgerError):
    """공동 계좌 잔액 부족"""

    kind = "insufficient_funds"


class NoEligibleParticipantsError(LedgerError):
    """분배 대상 참가자 없음"""

    kind = "no_eligible_participants"

    def __init__(self, detail: str = "No eligible participants to distribute the expense"):
        super().__init__(detail)


class AccountNotFoundError(LedgerError):
    """개인 계좌 없음 (1:1 불변식 위반 또는 외부 삭제)"""

    kind = "account_not_found"
