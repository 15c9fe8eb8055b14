"""
목적: 채팅 1턴 처리 서비스를 제공한다.
설명: (선택적으로) 컨텍스트를 조회하고 시스템 프롬프트를 만든 뒤 응답을 스트리밍한다.
      검색 실패는 대화 안의 오류 이벤트로 알리고 컨텍스트 없이 답변을 이어 간다.
      채팅 제공자 오류는 마지막 오류 이벤트로 끝난다.
디자인 패턴: 서비스 계층, 이벤트 스트림
참조: src/codebase_rag/core/chat/rag_service.py, src/codebase_rag/integrations/llm/chat_client.py
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence
from typing import Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from codebase_rag.core.chat.models import ChatEvent, ChatMessage, ChatRole, RagContext
from codebase_rag.core.chat.rag_service import RagService
from codebase_rag.integrations.llm import ChatCompletionClient, describe_error
from codebase_rag.shared.config import LlmConfig, LlmConfigHolder
from codebase_rag.shared.exceptions import BaseAppException
from codebase_rag.shared.logging import Logger, create_default_logger

ChatClientFactory = Callable[[LlmConfig], ChatCompletionClient]


class ChatService:
    """검색 증강 채팅 턴 서비스."""

    def __init__(
        self,
        rag_service: RagService,
        config_holder: LlmConfigHolder,
        *,
        chat_client_factory: ChatClientFactory = ChatCompletionClient.from_config,
        logger: Optional[Logger] = None,
    ) -> None:
        self._rag_service = rag_service
        self._config_holder = config_holder
        self._chat_client_factory = chat_client_factory
        self._logger = logger or create_default_logger("ChatService")

    async def astream(
        self,
        user_query: str,
        history: Sequence[ChatMessage] = (),
        use_rag: bool = True,
    ) -> AsyncIterator[ChatEvent]:
        """한 턴의 이벤트(references/token/error/done)를 순서대로 반환한다."""

        rag_context: Optional[RagContext] = None
        if use_rag:
            await self._rag_service.ensure_ready()
        if use_rag and self._rag_service.has_documents:
            try:
                rag_context = await self._rag_service.retrieve_context(user_query)
            except BaseAppException as error:
                self._logger.warning(f"chat.retrieve.failed: code={error.code}, error={error.message}")
                yield ChatEvent(type="error", content=error.message, error_code=error.code)
            else:
                yield ChatEvent(
                    type="references",
                    sources=rag_context.sources,
                    context_status=rag_context.status,
                )

        system_prompt = self._rag_service.build_system_prompt(user_query, rag_context)
        messages = _to_langchain_messages(history)
        messages.append(HumanMessage(content=user_query))

        client = self._chat_client_factory(self._config_holder.get())
        parts: list[str] = []
        try:
            async for token in client.astream(messages, system_prompt):
                parts.append(token)
                yield ChatEvent(type="token", content=token)
        except BaseAppException as error:
            self._logger.error(f"chat.stream.failed: code={error.code}, error={error.message}")
            yield ChatEvent(type="error", content=describe_error(error), error_code=error.code)
            return
        yield ChatEvent(type="done", content="".join(parts))


def _to_langchain_messages(history: Sequence[ChatMessage]) -> list[BaseMessage]:
    messages: list[BaseMessage] = []
    for message in history:
        if message.role == ChatRole.ASSISTANT:
            messages.append(AIMessage(content=message.content))
        else:
            messages.append(HumanMessage(content=message.content))
    return messages


__all__ = ["ChatClientFactory", "ChatService"]
