"""
목적: 검색 증강(RAG) 컨텍스트 조회와 시스템 프롬프트 조립을 제공한다.
설명: 넉넉한 top_k로 먼저 가져온 뒤 관련도 임계값으로 거르고,
      결과 없음/약한 일치/일치 세 가지 상태를 구분해 컨텍스트 블록을 만든다.
      구조 질문이면 파일 경로 목록을 대체 컨텍스트로 덧붙인다.
디자인 패턴: 서비스 계층
참조: src/codebase_rag/core/knowledge/retrieval.py, src/codebase_rag/core/chat/prompts/system_prompt.py
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Optional

from langchain_core.embeddings import Embeddings

from codebase_rag.core.chat.models import RagContext, RagContextStatus, RagSource
from codebase_rag.core.chat.prompts import CONTEXT_SYSTEM_PROMPT, NO_CONTEXT_SYSTEM_PROMPT
from codebase_rag.core.knowledge import compute_file_paths, search_store
from codebase_rag.integrations.llm import ProviderEmbeddings, aclose_embeddings
from codebase_rag.integrations.vector_store import SearchResult, VectorStore
from codebase_rag.shared.config import LlmConfig, LlmConfigHolder, RagSettings
from codebase_rag.shared.logging import Logger, create_default_logger

WEAK_MATCH_BLOCK = "No high-quality code context found."
NO_CONTEXT_BLOCK = "No specific code context found (Low similarity scores)."


class RagService:
    """검색 증강 서비스.

    Args:
        store: 벡터 저장소.
        config_holder: LLM 설정 보관소. 조회마다 현재 스냅샷을 사용한다.
        settings: 검색 설정.
        embeddings_factory: 설정 스냅샷으로 임베딩 어댑터를 만드는 함수.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        store: VectorStore,
        config_holder: LlmConfigHolder,
        *,
        settings: Optional[RagSettings] = None,
        embeddings_factory: Callable[[LlmConfig], Embeddings] = ProviderEmbeddings.from_config,
        logger: Optional[Logger] = None,
    ) -> None:
        self._store = store
        self._config_holder = config_holder
        self._settings = settings or RagSettings()
        self._embeddings_factory = embeddings_factory
        self._logger = logger or create_default_logger("RagService")

    @property
    def settings(self) -> RagSettings:
        return self._settings

    @property
    def has_documents(self) -> bool:
        """저장소에 문서가 있는지 반환한다."""

        return self._store.doc_count > 0

    async def ensure_ready(self) -> None:
        """저장소 복원이 끝나도록 보장한다."""

        await self._store.ensure_restored()

    async def retrieve_context(
        self,
        query: str,
        min_relevance_score: Optional[float] = None,
    ) -> RagContext:
        """질의에 대한 컨텍스트 블록과 출처를 조회한다.

        Raises:
            BaseAppException: 저장소 시그니처 불일치(RAG_SIGNATURE_MISMATCH)
                또는 질의 임베딩 실패(RAG_QUERY_EMBEDDING_FAILED).
        """

        threshold = (
            self._settings.min_relevance_score if min_relevance_score is None else min_relevance_score
        )
        config = self._config_holder.get()
        embedder = self._embeddings_factory(config)
        try:
            raw_results = await search_store(
                self._store,
                embedder,
                config,
                query,
                top_k=self._settings.search_top_k,
                min_score=0.0,
            )
        finally:
            await aclose_embeddings(embedder)
        relevant = [result for result in raw_results if result.score >= threshold]
        self._logger.info(
            f"rag.retrieve.done: raw={len(raw_results)}, relevant={len(relevant)}, threshold={threshold}"
        )

        if relevant:
            return RagContext(
                context_block=_format_context_block(relevant),
                sources=_dedupe_sources(relevant),
                status=RagContextStatus.MATCHED,
            )

        if raw_results:
            status = RagContextStatus.WEAK_MATCH
            block = WEAK_MATCH_BLOCK
        else:
            status = RagContextStatus.NO_CONTEXT
            block = NO_CONTEXT_BLOCK
        if self._is_structure_question(query):
            listing = compute_file_paths(self._store)[: self._settings.structure_listing_limit]
            if listing:
                block += "\n\nExisting File Structure:\n" + "\n".join(listing)
        return RagContext(context_block=block, sources=[], status=status)

    def build_system_prompt(self, user_query: str, rag_context: Optional[RagContext]) -> str:
        """역할, 질의, (있다면) 컨텍스트와 인용 지시를 담은 시스템 프롬프트를 만든다."""

        if rag_context is not None and rag_context.context_block:
            return CONTEXT_SYSTEM_PROMPT.format(
                user_query=user_query,
                context_block=rag_context.context_block,
            )
        return NO_CONTEXT_SYSTEM_PROMPT.format(user_query=user_query)

    def _is_structure_question(self, query: str) -> bool:
        lowered = query.lower()
        return any(keyword in lowered for keyword in self._settings.structure_keywords)


def _dedupe_sources(results: Sequence[SearchResult]) -> list[RagSource]:
    best: dict[str, float] = {}
    for result in results:
        current = best.get(result.file_path)
        if current is None or result.score > current:
            best[result.file_path] = result.score
    sources = [RagSource(path=path, score=score) for path, score in best.items()]
    sources.sort(key=lambda source: source.score, reverse=True)
    return sources


def _format_context_block(results: Sequence[SearchResult]) -> str:
    return "\n".join(
        f"FILENAME: {result.file_path} (Match: {result.score * 100:.0f}%)\nCONTENT:\n{result.content}\n---"
        for result in results
    )


__all__ = ["NO_CONTEXT_BLOCK", "RagService", "WEAK_MATCH_BLOCK"]
