"""
스토리지 모듈

참가자, 첨부 파일 메타데이터 등 Ledger 주변 저장소 제공
"""

from core.storage.file_store import TransactionFileStore
from core.storage.participant_store import ParticipantData, ParticipantStore

__all__ = [
    "ParticipantStore",
    "ParticipantData",
    "TransactionFileStore",
]
