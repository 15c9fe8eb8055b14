"""
목적: 채팅 프롬프트 공개 API를 제공한다.
설명: 컨텍스트 포함/미포함 시스템 프롬프트를 외부에 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/core/chat/prompts/system_prompt.py
"""

from codebase_rag.core.chat.prompts.system_prompt import CONTEXT_SYSTEM_PROMPT, NO_CONTEXT_SYSTEM_PROMPT

__all__ = ["CONTEXT_SYSTEM_PROMPT", "NO_CONTEXT_SYSTEM_PROMPT"]
