"""
목적: SQLite 기반 벡터 영속 저장소를 제공한다.
설명: 표준 라이브러리 sqlite3 드라이버를 asyncio.to_thread로 감싸 이벤트 루프를 막지 않는다.
      `vectors` 테이블에 문서를, `meta` 테이블에 저장소 시그니처 같은 단일 값을 보관한다.
      임베딩은 JSON 배열로 저장해 정밀도 손실 없이 복원한다.
디자인 패턴: 저장소 패턴
참조: src/codebase_rag/integrations/db/base.py, src/codebase_rag/integrations/vector_store/store.py
"""

from __future__ import annotations

import asyncio
import json
import os
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional, Sequence

from codebase_rag.integrations.db.base import VectorPersistence
from codebase_rag.integrations.db.models import VectorDocument
from codebase_rag.shared.logging import Logger, create_default_logger

_CREATE_VECTORS_SQL = """
CREATE TABLE IF NOT EXISTS vectors (
    id TEXT PRIMARY KEY,
    file_path TEXT NOT NULL,
    content TEXT NOT NULL,
    embedding TEXT NOT NULL,
    metadata TEXT NOT NULL
)
"""
_CREATE_META_SQL = "CREATE TABLE IF NOT EXISTS meta (key TEXT PRIMARY KEY, value TEXT)"
_UPSERT_VECTOR_SQL = (
    "INSERT INTO vectors (id, file_path, content, embedding, metadata) VALUES (?, ?, ?, ?, ?) "
    "ON CONFLICT(id) DO UPDATE SET file_path=excluded.file_path, content=excluded.content, "
    "embedding=excluded.embedding, metadata=excluded.metadata"
)
_UPSERT_META_SQL = (
    "INSERT INTO meta (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value"
)


class SqliteVectorRepository(VectorPersistence):
    """SQLite 파일에 벡터 코퍼스를 보관하는 저장소.

    Args:
        database_path: SQLite 파일 경로. 상위 디렉터리는 초기화 시 생성한다.
        logger: 주입 가능한 로거.
    """

    def __init__(self, database_path: str | Path, logger: Optional[Logger] = None) -> None:
        self._database_path = Path(database_path)
        self._logger = logger or create_default_logger("SqliteVectorRepository")
        self._busy_timeout_ms = _read_busy_timeout_ms()
        self._init_lock = asyncio.Lock()
        self._initialized = False

    @property
    def database_path(self) -> Path:
        """SQLite 파일 경로를 반환한다."""

        return self._database_path

    async def initialize(self) -> None:
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            await asyncio.to_thread(self._initialize_sync)
            self._initialized = True
            self._logger.info(f"db.sqlite.initialized: path={self._database_path}")

    async def save_documents(self, documents: Sequence[VectorDocument]) -> None:
        await self.initialize()
        rows = [
            (
                document.id,
                document.file_path,
                document.content,
                json.dumps(document.embedding),
                json.dumps(document.metadata, ensure_ascii=False),
            )
            for document in documents
        ]
        await asyncio.to_thread(self._executemany, _UPSERT_VECTOR_SQL, rows)
        self._logger.debug(f"db.sqlite.saved: documents={len(rows)}")

    async def get_all_documents(self) -> list[VectorDocument]:
        await self.initialize()
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT id, file_path, content, embedding, metadata FROM vectors ORDER BY rowid",
        )
        return [
            VectorDocument(
                id=row["id"],
                file_path=row["file_path"],
                content=row["content"],
                embedding=json.loads(row["embedding"]),
                metadata=json.loads(row["metadata"]),
            )
            for row in rows
        ]

    async def clear_documents(self) -> None:
        await self.initialize()
        await asyncio.to_thread(self._execute, "DELETE FROM vectors")
        self._logger.info("db.sqlite.cleared")

    async def save_meta(self, key: str, value: str) -> None:
        await self.initialize()
        await asyncio.to_thread(self._executemany, _UPSERT_META_SQL, [(key, value)])

    async def get_meta(self, key: str) -> Optional[str]:
        await self.initialize()
        rows = await asyncio.to_thread(self._fetchall, "SELECT value FROM meta WHERE key = ?", (key,))
        if not rows:
            return None
        return rows[0]["value"]

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(
            str(self._database_path),
            timeout=self._busy_timeout_ms / 1000.0,
        )
        connection.row_factory = sqlite3.Row
        connection.execute(f"PRAGMA busy_timeout={self._busy_timeout_ms}")
        return connection

    def _initialize_sync(self) -> None:
        self._database_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as connection:
            try:
                connection.execute("PRAGMA journal_mode=WAL")
            except sqlite3.DatabaseError as error:
                self._logger.warning(f"db.sqlite.pragma.failed: error={error}")
            with connection:
                connection.execute(_CREATE_VECTORS_SQL)
                connection.execute(_CREATE_META_SQL)

    def _execute(self, sql: str, params: tuple = ()) -> None:
        with closing(self._connect()) as connection:
            with connection:
                connection.execute(sql, params)

    def _executemany(self, sql: str, rows: Sequence[tuple]) -> None:
        if not rows:
            return
        with closing(self._connect()) as connection:
            with connection:
                connection.executemany(sql, rows)

    def _fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with closing(self._connect()) as connection:
            return list(connection.execute(sql, params).fetchall())


def _read_busy_timeout_ms() -> int:
    raw = os.getenv("SQLITE_BUSY_TIMEOUT_MS", "5000")
    try:
        value = int(raw)
    except ValueError:
        return 5000
    return max(0, value)


__all__ = ["SqliteVectorRepository"]
