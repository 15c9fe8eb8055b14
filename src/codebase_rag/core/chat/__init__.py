"""
목적: 채팅 도메인 공개 API를 제공한다.
설명: 검색 증강 서비스, 채팅 턴 서비스, 채팅 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/core/chat/rag_service.py, src/codebase_rag/core/chat/service.py
"""

from codebase_rag.core.chat.models import (
    ChatEvent,
    ChatEventType,
    ChatMessage,
    ChatRole,
    RagContext,
    RagContextStatus,
    RagSource,
)
from codebase_rag.core.chat.rag_service import NO_CONTEXT_BLOCK, WEAK_MATCH_BLOCK, RagService
from codebase_rag.core.chat.service import ChatClientFactory, ChatService

__all__ = [
    "ChatClientFactory",
    "ChatEvent",
    "ChatEventType",
    "ChatMessage",
    "ChatRole",
    "ChatService",
    "NO_CONTEXT_BLOCK",
    "RagContext",
    "RagContextStatus",
    "RagService",
    "RagSource",
    "WEAK_MATCH_BLOCK",
]
