"""
목적: LLM 어댑터 공개 API를 제공한다.
설명: 임베딩 어댑터, 스트리밍 채팅 클라이언트, 오류 정규화 유틸을 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/integrations/llm/embeddings.py, src/codebase_rag/integrations/llm/chat_client.py
"""

from codebase_rag.integrations.llm.chat_client import ChatCompletionClient, ChatTarget
from codebase_rag.integrations.llm.const import LlmConst
from codebase_rag.integrations.llm.embeddings import EmbeddingTarget, ProviderEmbeddings, aclose_embeddings
from codebase_rag.integrations.llm.errors import describe_error, extract_error_message, parse_api_error

__all__ = [
    "ChatCompletionClient",
    "ChatTarget",
    "EmbeddingTarget",
    "LlmConst",
    "ProviderEmbeddings",
    "aclose_embeddings",
    "describe_error",
    "extract_error_message",
    "parse_api_error",
]
