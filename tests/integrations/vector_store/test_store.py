"""
목적: 벡터 저장소의 검색/시그니처/영속 동작을 검증한다.
설명: 점수 정렬과 top_k, 최소 점수, 시그니처 충돌 거부, 재시작 복원,
      영속 실패 격리, 비우기를 확인한다.
디자인 패턴: 저장소 패턴, 테스트 더블
참조: src/codebase_rag/integrations/vector_store/store.py
"""

from __future__ import annotations

from typing import Optional, Sequence

import pytest

from codebase_rag.integrations.db import InMemoryVectorPersistence, VectorDocument
from codebase_rag.integrations.vector_store import VectorStore
from codebase_rag.shared.exceptions import BaseAppException
from codebase_rag.shared.logging import InMemoryLogger


def _doc(doc_id: str, embedding: list[float], file_path: str = "a.py") -> VectorDocument:
    return VectorDocument(
        id=doc_id,
        file_path=file_path,
        content=doc_id,
        embedding=embedding,
        metadata={"start": 0, "end": len(doc_id)},
    )


class BrokenPersistence(InMemoryVectorPersistence):
    """쓰기마다 실패하는 영속 저장소."""

    async def save_documents(self, documents: Sequence[VectorDocument]) -> None:
        raise OSError("disk full")

    async def save_meta(self, key: str, value: str) -> None:
        raise OSError("disk full")


class UnreadablePersistence(InMemoryVectorPersistence):
    """복원 시 실패하는 영속 저장소."""

    async def get_all_documents(self) -> list[VectorDocument]:
        raise OSError("corrupted")

    async def get_meta(self, key: str) -> Optional[str]:
        return None


@pytest.mark.asyncio
async def test_similarity_search_orders_and_limits() -> None:
    """결과는 점수 내림차순이며 top_k와 최소 점수를 지켜야 한다."""

    store = VectorStore()
    await store.add_documents(
        [
            _doc("exact", [1.0, 0.0]),
            _doc("close", [0.9, 0.1]),
            _doc("orthogonal", [0.0, 1.0]),
            _doc("opposite", [-1.0, 0.0]),
        ],
        "openai:m",
    )

    top_two = store.similarity_search([1.0, 0.0], top_k=2)
    positive = store.similarity_search([1.0, 0.0], top_k=10, min_score=0.5)
    everything = store.similarity_search([1.0, 0.0], top_k=10, min_score=-1.0)

    assert [result.document.id for result in top_two] == ["exact", "close"]
    assert top_two[0].score == pytest.approx(1.0)
    assert [result.document.id for result in positive] == ["exact", "close"]
    assert [result.document.id for result in everything] == ["exact", "close", "orthogonal", "opposite"]
    assert store.similarity_search([1.0, 0.0], top_k=0) == []


@pytest.mark.asyncio
async def test_empty_store_search_and_memory_usage() -> None:
    """빈 저장소 검색은 빈 목록이고 메모리 사용량은 문서 수로 추정한다."""

    store = VectorStore()

    assert store.similarity_search([1.0, 0.0]) == []
    assert store.memory_usage() == "0.00 MB"

    await store.add_documents([_doc(f"d{i}", [1.0]) for i in range(262)], "openai:m")

    assert store.memory_usage() == "1.00 MB"


@pytest.mark.asyncio
async def test_signature_adopted_then_conflict_rejected() -> None:
    """빈 저장소는 시그니처를 채택하고, 다른 시그니처 추가는 거부해야 한다."""

    store = VectorStore()
    await store.add_documents([_doc("a-0", [1.0, 0.0])], "openai:m")
    await store.add_documents([_doc("a-1", [0.0, 1.0])], "openai:m")

    with pytest.raises(BaseAppException) as exc_info:
        await store.add_documents([_doc("b-0", [1.0, 1.0])], "gemini:text-embedding-004")

    assert exc_info.value.code == "VECTOR_STORE_SIGNATURE_CONFLICT"
    assert store.get_store_signature() == "openai:m"
    assert store.doc_count == 2


@pytest.mark.asyncio
async def test_restored_store_without_signature_adopts_incoming() -> None:
    """복원된 문서에 시그니처가 없으면 다음 추가의 시그니처를 채택해야 한다."""

    persistence = InMemoryVectorPersistence()
    await persistence.save_documents([_doc("old-0", [1.0, 0.0])])
    store = VectorStore(persistence)

    await store.add_documents([_doc("new-0", [0.0, 1.0])], "openai:m")
    await store.flush()

    assert store.signature == "openai:m"
    assert await persistence.get_meta("storeSignature") == "openai:m"
    with pytest.raises(BaseAppException) as exc_info:
        await store.add_documents([_doc("new-1", [1.0, 1.0])], "gemini:text-embedding-004")
    assert exc_info.value.code == "VECTOR_STORE_SIGNATURE_CONFLICT"
    assert store.doc_count == 2


@pytest.mark.asyncio
async def test_restore_from_persistence() -> None:
    """같은 영속 저장소로 만든 새 저장소는 문서와 시그니처를 복원해야 한다."""

    persistence = InMemoryVectorPersistence()
    first = VectorStore(persistence)
    await first.add_documents([_doc("a-0", [1.0, 0.0]), _doc("a-1", [0.0, 1.0])], "openai:m")
    await first.flush()

    second = VectorStore(persistence)
    await second.ensure_restored()

    assert persistence.initialized
    assert second.doc_count == 2
    assert second.signature == "openai:m"
    assert [result.document.id for result in second.similarity_search([0.0, 1.0], top_k=1)] == ["a-1"]


@pytest.mark.asyncio
async def test_persistence_failure_does_not_affect_memory() -> None:
    """영속 기록 실패는 로그만 남기고 메모리 코퍼스는 유지해야 한다."""

    logger = InMemoryLogger(name="store-test", emit_stdout=False)
    store = VectorStore(BrokenPersistence(), logger=logger)

    await store.add_documents([_doc("a-0", [1.0, 0.0])], "openai:m")
    await store.flush()

    assert store.doc_count == 1
    assert store.signature == "openai:m"
    messages = [record.message for record in logger.repository.list()]
    assert any(message.startswith("vector_store.persist.failed: op=save_documents") for message in messages)
    assert any(message.startswith("vector_store.persist.failed: op=save_meta") for message in messages)


@pytest.mark.asyncio
async def test_restore_failure_starts_empty() -> None:
    """복원 실패 시 빈 저장소로 시작해야 한다."""

    store = VectorStore(UnreadablePersistence())

    await store.ensure_restored()
    await store.add_documents([_doc("a-0", [1.0])], "openai:m")

    assert store.doc_count == 1


@pytest.mark.asyncio
async def test_clear_resets_memory_and_persistence() -> None:
    """비우기는 문서/시그니처와 영속 저장소를 모두 초기화해야 한다."""

    persistence = InMemoryVectorPersistence()
    store = VectorStore(persistence)
    await store.add_documents([_doc("a-0", [1.0])], "openai:m")

    await store.clear()

    assert store.doc_count == 0
    assert store.signature == ""
    assert await persistence.get_all_documents() == []
    assert await persistence.get_meta("storeSignature") == ""

    await store.add_documents([_doc("b-0", [1.0, 0.0])], "gemini:text-embedding-004")
    assert store.signature == "gemini:text-embedding-004"
