"""
목적: 채팅/검색 증강 도메인 모델을 정의한다.
설명: 대화 메시지, 검색 컨텍스트와 출처, 스트리밍 이벤트를 Pydantic 모델로 제공한다.
디자인 패턴: 엔티티 패턴, DTO 패턴
참조: src/codebase_rag/core/chat/rag_service.py, src/codebase_rag/core/chat/service.py
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """UTC 기준 timezone-aware 현재 시각을 반환한다."""

    return datetime.now(timezone.utc)


class ChatRole(str, Enum):
    """대화 메시지 역할 타입."""

    USER = "user"
    ASSISTANT = "assistant"


class RagSource(BaseModel):
    """인용 표시용 출처 파일과 최고 점수."""

    path: str
    score: float


class ChatMessage(BaseModel):
    """대화 메시지."""

    role: ChatRole
    content: str
    sources: list[RagSource] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)


class RagContextStatus(str, Enum):
    """검색 컨텍스트 상태.

    MATCHED: 임계값을 넘은 청크가 있다.
    WEAK_MATCH: 검색 결과는 있었으나 모두 임계값 미만이다.
    NO_CONTEXT: 검색 결과 자체가 없다.
    """

    MATCHED = "matched"
    WEAK_MATCH = "weak_match"
    NO_CONTEXT = "no_context"


class RagContext(BaseModel):
    """프롬프트에 넣을 컨텍스트 블록과 출처 목록."""

    context_block: str
    sources: list[RagSource] = Field(default_factory=list)
    status: RagContextStatus


ChatEventType = Literal["references", "token", "error", "done"]


class ChatEvent(BaseModel):
    """채팅 턴 스트리밍 이벤트."""

    type: ChatEventType
    content: str = ""
    sources: list[RagSource] = Field(default_factory=list)
    context_status: Optional[RagContextStatus] = None
    error_code: Optional[str] = None


__all__ = [
    "ChatEvent",
    "ChatEventType",
    "ChatMessage",
    "ChatRole",
    "RagContext",
    "RagContextStatus",
    "RagSource",
    "utc_now",
]
