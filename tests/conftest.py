"""pytest 共通設定: DB テスト基盤."""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import pytest

from sqlrec.schema import clear_cache

# --- 接続 URL ---
POSTGRESQL_URL = os.environ.get(
    "SQLREC_TEST_POSTGRESQL_URL",
    "host=localhost port=5432 dbname=sqlrec_test user=sqlrec password=sqlrec_test_pass",
)


class RecordingExecutor:
    """実行された SQL を記録する Executor."""

    def __init__(self, insert_ids: list[int] | None = None) -> None:
        self.calls: list[tuple[int, str, tuple[Any, ...]]] = []
        self._insert_ids = list(insert_ids or [])

    def exec(self, expected_rows: int, sql: str, *args: Any) -> int | None:
        self.calls.append((expected_rows, sql, args))
        if self._insert_ids:
            return self._insert_ids.pop(0)
        return None

    @property
    def statements(self) -> list[str]:
        return [sql for _, sql, _ in self.calls]


@pytest.fixture
def executor() -> RecordingExecutor:
    """記録用 Executor fixture."""
    return RecordingExecutor(insert_ids=[101, 102, 103])


@pytest.fixture(autouse=True)
def _fresh_struct_cache() -> Generator[None, None, None]:
    """テストごとにマッピング情報のキャッシュを破棄する."""
    clear_cache()
    yield
    clear_cache()


def _can_connect_postgresql() -> bool:
    """PostgreSQL に接続可能か判定する."""
    try:
        import psycopg

        conn = psycopg.connect(POSTGRESQL_URL, connect_timeout=3)
        conn.close()
    except Exception:
        return False
    return True


# --- DB 接続可否キャッシュ ---
_pg_available: bool | None = None


def _is_pg_available() -> bool:
    global _pg_available
    if _pg_available is None:
        _pg_available = _can_connect_postgresql()
    return _pg_available


# --- マーカーによる自動スキップ ---
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """DB マーカー付きテストを接続不可時に自動スキップする."""
    for item in items:
        if "postgresql" in item.keywords and not _is_pg_available():
            item.add_marker(pytest.mark.skip(reason="PostgreSQL is not available"))


# --- DB fixture ---
@pytest.fixture
def pg_conn() -> Generator[Any, None, None]:
    """PostgreSQL 接続 fixture."""
    import psycopg

    conn = psycopg.connect(POSTGRESQL_URL)
    try:
        yield conn
    finally:
        conn.close()
