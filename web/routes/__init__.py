"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- participants: 참가자 관리
- transactions: 납입/지출 및 거래 피드
- ledger: 잔액 정합성 검사
"""
