"""
어댑터 레이어

외부 자원(DB 등)과의 연동을 담당.
"""

from adapters.db import SQLiteAdapter, create_connection, init_schema

__all__ = [
    "SQLiteAdapter",
    "create_connection",
    "init_schema",
]
