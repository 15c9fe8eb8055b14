"""
목적: 저장소 질의 공통 단계를 제공한다.
설명: 저장소 시그니처와 현재 임베딩 설정의 일치를 확인하고, 질의를 임베딩해 선형 검색한다.
      시그니처가 다르면 의미 없는 점수를 내기 전에 재수집 필요 오류로 중단한다.
디자인 패턴: 함수형 유틸
참조: src/codebase_rag/core/knowledge/service.py, src/codebase_rag/core/chat/rag_service.py
"""

from __future__ import annotations

from langchain_core.embeddings import Embeddings

from codebase_rag.integrations.vector_store import SearchResult, VectorStore
from codebase_rag.shared.config import LlmConfig
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail


def ensure_signature_compatible(store: VectorStore, config: LlmConfig) -> None:
    """저장소 시그니처가 현재 설정과 다르면 예외를 던진다.

    Raises:
        BaseAppException: 시그니처 불일치(RAG_SIGNATURE_MISMATCH).
    """

    store_signature = store.signature
    current_signature = config.embedding_signature()
    if store_signature and store_signature != current_signature:
        detail = ExceptionDetail(
            code="RAG_SIGNATURE_MISMATCH",
            cause=f"store={store_signature}, current={current_signature}",
            hint="현재 임베딩 설정으로 파일을 다시 수집하세요.",
            metadata={"store_signature": store_signature, "current_signature": current_signature},
        )
        raise BaseAppException(
            "Embedding Model Mismatch.\n\n"
            f"Files were ingested using: {store_signature}\n"
            f"Current Configuration is: {current_signature}\n\n"
            "Please re-ingest your files to match the current provider.",
            detail,
        )


async def search_store(
    store: VectorStore,
    embedder: Embeddings,
    config: LlmConfig,
    query: str,
    top_k: int,
    min_score: float,
) -> list[SearchResult]:
    """시그니처 확인 후 질의를 임베딩해 검색한다. 빈 저장소는 임베딩 없이 빈 목록이다."""

    await store.ensure_restored()
    ensure_signature_compatible(store, config)
    if store.doc_count == 0:
        return []
    try:
        query_embedding = await embedder.aembed_query(query)
    except Exception as error:  # noqa: BLE001 - 제공자 오류를 검색 오류로 정규화
        message = error.message if isinstance(error, BaseAppException) else str(error)
        detail = ExceptionDetail(
            code="RAG_QUERY_EMBEDDING_FAILED",
            cause=message,
            metadata={"signature": config.embedding_signature()},
        )
        raise BaseAppException(message, detail, error) from error
    return store.similarity_search(query_embedding, top_k, min_score)


__all__ = ["ensure_signature_compatible", "search_store"]
