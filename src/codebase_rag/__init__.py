"""
목적: codebase_rag 패키지 공개 API를 제공한다.
설명: 코드베이스 검색 증강 어시스턴트의 런타임 조립 함수와 주요 서비스를 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/bootstrap.py
"""

from codebase_rag.bootstrap import CodebaseRagRuntime, build_runtime
from codebase_rag.core.chat import ChatService, RagService
from codebase_rag.core.instructions import ProjectInstructionsService
from codebase_rag.core.knowledge import KnowledgeBaseService
from codebase_rag.integrations.vector_store import VectorStore
from codebase_rag.shared.config import AppSettings, LlmConfigHolder, load_settings

__all__ = [
    "AppSettings",
    "ChatService",
    "CodebaseRagRuntime",
    "KnowledgeBaseService",
    "LlmConfigHolder",
    "ProjectInstructionsService",
    "RagService",
    "VectorStore",
    "build_runtime",
    "load_settings",
]
