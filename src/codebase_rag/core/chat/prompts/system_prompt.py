"""
목적: 코드베이스 질의용 시스템 프롬프트를 정의한다.
설명: textwrap + PromptTemplate 기반 모듈 싱글턴 프롬프트를 제공한다.
      컨텍스트가 있을 때와 없을 때 두 가지 변형을 둔다.
디자인 패턴: 모듈 싱글턴
참조: src/codebase_rag/core/chat/rag_service.py
"""

from __future__ import annotations

import textwrap

from langchain_core.prompts import PromptTemplate

_SYSTEM_ROLE = "You are an advanced software engineer."

_CONTEXT_SYSTEM_PROMPT = textwrap.dedent(
"""
{role}
User Query: {user_query}

Here is the retrieved code context from the vector database:
{context_block}

Instructions:
- The context consists of smaller code snippets.
- Use the context to answer the query accurately.
- If the context contains the answer, cite the filename.
- If the context is irrelevant, answer based on general knowledge but mention that context was missing.
"""
).strip()

_NO_CONTEXT_SYSTEM_PROMPT = textwrap.dedent(
"""
{role}
User Query: {user_query}
Note: No code context provided (files not loaded or RAG disabled). Answer based on general knowledge.
"""
).strip()

CONTEXT_SYSTEM_PROMPT = PromptTemplate.from_template(_CONTEXT_SYSTEM_PROMPT).partial(role=_SYSTEM_ROLE)
NO_CONTEXT_SYSTEM_PROMPT = PromptTemplate.from_template(_NO_CONTEXT_SYSTEM_PROMPT).partial(role=_SYSTEM_ROLE)

__all__ = ["CONTEXT_SYSTEM_PROMPT", "NO_CONTEXT_SYSTEM_PROMPT"]
