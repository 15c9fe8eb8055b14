"""
목적: LLM 어댑터 공통 상수를 제공한다.
설명: Gemini REST 엔드포인트, 기본 온도, 타임아웃 등 어댑터 간에 공유하는 값을 정의한다.
디자인 패턴: 상수 객체
참조: src/codebase_rag/integrations/llm/embeddings.py, src/codebase_rag/integrations/llm/chat_client.py
"""


class LlmConst:
    """LLM 어댑터 상수 집합이다."""

    GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_API_KEY_HEADER = "x-goog-api-key"
    DEFAULT_TIMEOUT_SECONDS = 60.0
    CHAT_TEMPERATURE = 0.3
    DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful coding assistant."
    SSE_DATA_PREFIX = "data: "
    SSE_DONE_MARKER = "[DONE]"


__all__ = ["LlmConst"]
