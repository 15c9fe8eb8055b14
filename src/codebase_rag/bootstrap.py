"""
목적: 애플리케이션 런타임 조립 함수를 제공한다.
설명: 설정을 읽어 영속 저장소, 벡터 저장소, 수집/검색/채팅/안내문 서비스를 한 번에 조립한다.
      호스트(UI)는 조립 결과의 서비스만 사용하고 생성 로직은 이 모듈에 고정한다.
디자인 패턴: 모듈 조립
참조: src/codebase_rag/shared/config/settings.py, src/codebase_rag/core/knowledge/service.py,
      src/codebase_rag/core/chat/service.py, src/codebase_rag/core/instructions/service.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from codebase_rag.core.chat import ChatClientFactory, ChatService, RagService
from codebase_rag.core.instructions import ProjectInstructionsService
from codebase_rag.core.knowledge import EmbeddingsFactory, KnowledgeBaseService
from codebase_rag.integrations.db import SqliteVectorRepository, VectorPersistence
from codebase_rag.integrations.llm import ChatCompletionClient, ProviderEmbeddings
from codebase_rag.integrations.vector_store import VectorStore
from codebase_rag.shared.config import AppSettings, LlmConfigHolder, load_settings
from codebase_rag.shared.logging import Logger, create_default_logger


@dataclass
class CodebaseRagRuntime:
    """조립된 런타임 구성 요소 묶음."""

    settings: AppSettings
    config_holder: LlmConfigHolder
    store: VectorStore
    knowledge_base: KnowledgeBaseService
    rag_service: RagService
    chat_service: ChatService
    instructions: ProjectInstructionsService

    async def start(self) -> None:
        """저장소 복원을 마친다."""

        await self.store.ensure_restored()

    async def shutdown(self) -> None:
        """대기 중인 영속 기록을 마무리한다."""

        await self.store.flush()


def build_runtime(
    settings: Optional[AppSettings] = None,
    *,
    persistence: Optional[VectorPersistence] = None,
    embeddings_factory: EmbeddingsFactory = ProviderEmbeddings.from_config,
    chat_client_factory: ChatClientFactory = ChatCompletionClient.from_config,
    logger: Optional[Logger] = None,
) -> CodebaseRagRuntime:
    """설정으로 런타임 구성 요소를 조립한다.

    Args:
        settings: 애플리케이션 설정. 생략하면 `.env`/환경 변수에서 읽는다.
        persistence: 영속 저장소. 생략하면 설정 경로의 SQLite 저장소를 사용한다.
        embeddings_factory: 설정 스냅샷으로 임베딩 어댑터를 만드는 함수.
        chat_client_factory: 설정 스냅샷으로 채팅 클라이언트를 만드는 함수.
        logger: 공용 로거.
    """

    # 1) 설정/로깅
    app_settings = settings or load_settings()
    runtime_logger = logger or create_default_logger("CodebaseRag")
    config_holder = LlmConfigHolder(app_settings.llm)

    # 2) 저장소: SQLite가 재시작용 캐시, 메모리 코퍼스가 세션 기준 데이터
    store = VectorStore(
        persistence=persistence or SqliteVectorRepository(app_settings.storage.database_path),
        logger=runtime_logger,
    )

    # 3) 서비스
    knowledge_base = KnowledgeBaseService(
        store,
        config_holder,
        settings=app_settings.ingestion,
        embeddings_factory=embeddings_factory,
        logger=runtime_logger,
    )
    rag_service = RagService(
        store,
        config_holder,
        settings=app_settings.rag,
        embeddings_factory=embeddings_factory,
        logger=runtime_logger,
    )
    chat_service = ChatService(
        rag_service,
        config_holder,
        chat_client_factory=chat_client_factory,
        logger=runtime_logger,
    )
    instructions = ProjectInstructionsService(
        store,
        config_holder,
        chat_client_factory=chat_client_factory,
        logger=runtime_logger,
    )

    runtime_logger.info(
        f"runtime.ready: chat={app_settings.llm.chat_provider}, "
        f"embedding={app_settings.llm.embedding_signature()}"
    )
    return CodebaseRagRuntime(
        settings=app_settings,
        config_holder=config_holder,
        store=store,
        knowledge_base=knowledge_base,
        rag_service=rag_service,
        chat_service=chat_service,
        instructions=instructions,
    )


__all__ = ["CodebaseRagRuntime", "build_runtime"]
