"""
목적: 인메모리 벡터 저장소를 제공한다.
설명: 코퍼스 전체를 선형 탐색하는 코사인 유사도 검색과 저장소 시그니처 관리를 담당한다.
      메모리 코퍼스가 세션의 기준 데이터이고, 영속 저장소는 재시작용 캐시로서
      백그라운드 작업으로 기록한다. 영속 실패는 로그만 남기고 호출자에게 전파하지 않는다.
디자인 패턴: 저장소 패턴, 라이트-비하인드 캐시
참조: src/codebase_rag/integrations/db/base.py, src/codebase_rag/integrations/vector_store/similarity.py
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Optional, Sequence

from codebase_rag.integrations.db.base import VectorPersistence
from codebase_rag.integrations.db.memory_repository import InMemoryVectorPersistence
from codebase_rag.integrations.vector_store.models import SearchResult, VectorDocument
from codebase_rag.integrations.vector_store.similarity import cosine_similarity
from codebase_rag.shared.const import SharedConst
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import Logger, create_default_logger

_ESTIMATED_BYTES_PER_DOCUMENT = 4000


class VectorStore:
    """선형 탐색 기반 벡터 저장소.

    Args:
        persistence: 영속 저장소. 생략하면 인메모리 구현을 사용한다.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        persistence: Optional[VectorPersistence] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._persistence = persistence or InMemoryVectorPersistence()
        self._logger = logger or create_default_logger("VectorStore")
        self._documents: list[VectorDocument] = []
        self._signature = ""
        self._restored = False
        self._restore_lock = asyncio.Lock()
        self._pending_writes: set[asyncio.Task] = set()

    @property
    def doc_count(self) -> int:
        """문서 수를 반환한다."""

        return len(self._documents)

    @property
    def signature(self) -> str:
        """현재 저장소 시그니처를 반환한다. 비어 있으면 빈 문자열이다."""

        return self._signature

    def get_store_signature(self) -> str:
        return self._signature

    def get_all_documents(self) -> list[VectorDocument]:
        """문서 목록의 얕은 복사본을 반환한다."""

        return list(self._documents)

    def memory_usage(self) -> str:
        """대략적인 메모리 사용량을 `"<MB> MB"` 형식으로 반환한다."""

        size = self.doc_count * _ESTIMATED_BYTES_PER_DOCUMENT
        return f"{size / 1024 / 1024:.2f} MB"

    async def ensure_restored(self) -> None:
        """영속 저장소에서 코퍼스를 한 번만 복원한다."""

        if self._restored:
            return
        async with self._restore_lock:
            if self._restored:
                return
            await self._restore()
            self._restored = True

    async def add_documents(self, documents: Sequence[VectorDocument], signature: str) -> None:
        """문서를 추가한다. 저장소 시그니처가 비어 있으면 `signature`를 채택한다.

        Raises:
            BaseAppException: 비어 있지 않은 저장소의 시그니처와 다를 때
                (VECTOR_STORE_SIGNATURE_CONFLICT). 이 경우 저장소는 변경되지 않는다.
        """

        await self.ensure_restored()
        if self._documents and self._signature and signature != self._signature:
            self._logger.warning(
                f"vector_store.signature.conflict: store={self._signature}, incoming={signature}"
            )
            detail = ExceptionDetail(
                code="VECTOR_STORE_SIGNATURE_CONFLICT",
                cause=f"store={self._signature}, incoming={signature}",
                hint="저장소를 비운 뒤 다시 수집하세요.",
                metadata={"store_signature": self._signature, "incoming_signature": signature},
            )
            raise BaseAppException(
                "Vector store already holds embeddings from a different model. Clear it before re-ingesting.",
                detail,
            )

        if not self._documents or not self._signature:
            self._signature = signature
            self._schedule_write(
                self._persistence.save_meta(SharedConst.STORE_SIGNATURE_META_KEY, signature),
                "save_meta",
            )
        batch = list(documents)
        self._documents.extend(batch)
        self._schedule_write(self._persistence.save_documents(batch), "save_documents")
        self._logger.info(
            f"vector_store.added: documents={len(batch)}, total={len(self._documents)}, signature={self._signature}"
        )

    async def clear(self) -> None:
        """코퍼스와 시그니처를 비우고 영속 저장소도 비운다."""

        await self.ensure_restored()
        # 이전 저장 작업이 비운 뒤에 다시 채우지 않도록 먼저 기다린다
        await self.flush()
        self._documents = []
        self._signature = ""
        try:
            await self._persistence.clear_documents()
            await self._persistence.save_meta(SharedConst.STORE_SIGNATURE_META_KEY, "")
        except Exception as error:  # noqa: BLE001 - 영속 실패는 메모리 상태에 영향을 주지 않는다
            self._logger.error(f"vector_store.persist.failed: op=clear, error={error}")
        self._logger.info("vector_store.cleared")

    def similarity_search(
        self,
        query_embedding: Sequence[float],
        top_k: int = 10,
        min_score: float = 0.0,
    ) -> list[SearchResult]:
        """코사인 유사도 상위 결과를 점수 내림차순으로 반환한다."""

        if not self._documents or top_k <= 0:
            return []
        scored = [
            SearchResult(document=document, score=cosine_similarity(query_embedding, document.embedding))
            for document in self._documents
        ]
        passing = [result for result in scored if result.score >= min_score]
        passing.sort(key=lambda result: result.score, reverse=True)
        return passing[:top_k]

    async def flush(self) -> None:
        """대기 중인 영속 기록이 모두 끝날 때까지 기다린다."""

        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    async def _restore(self) -> None:
        try:
            await self._persistence.initialize()
            documents, signature = await asyncio.gather(
                self._persistence.get_all_documents(),
                self._persistence.get_meta(SharedConst.STORE_SIGNATURE_META_KEY),
            )
        except Exception as error:  # noqa: BLE001 - 복원 실패 시 빈 저장소로 시작
            self._logger.error(f"vector_store.restore.failed: error={error}")
            return
        if documents:
            self._documents = list(documents)
            self._signature = signature or ""
            self._logger.info(
                f"vector_store.restored: documents={len(documents)}, signature={self._signature}"
            )

    def _schedule_write(self, operation: Awaitable[None], label: str) -> None:
        task = asyncio.ensure_future(operation)
        self._pending_writes.add(task)
        task.add_done_callback(lambda finished: self._on_write_done(finished, label))

    def _on_write_done(self, task: asyncio.Task, label: str) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            self._logger.warning(f"vector_store.persist.cancelled: op={label}")
            return
        error = task.exception()
        if error is not None:
            self._logger.error(f"vector_store.persist.failed: op={label}, error={error}")


__all__ = ["VectorStore"]
