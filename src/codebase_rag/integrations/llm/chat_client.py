"""
목적: 스트리밍 채팅 완성 클라이언트를 제공한다.
설명: LangChain 메시지를 제공자 요청 형식으로 변환하고, SSE 응답을 텍스트 조각 단위로 스트리밍한다.
      OpenAI 호환 경로는 `/chat/completions`, Gemini 경로는 `:streamGenerateContent?alt=sse`를 사용한다.
디자인 패턴: 어댑터 패턴
참조: src/codebase_rag/integrations/llm/embeddings.py, src/codebase_rag/integrations/llm/errors.py
"""

from __future__ import annotations

import json
import time
from typing import Any, AsyncIterator, Optional, Sequence

import httpx
from langchain_core.messages import AIMessage, BaseMessage, SystemMessage

from codebase_rag.integrations.llm.const import LlmConst
from codebase_rag.integrations.llm.errors import parse_api_error
from codebase_rag.shared.config import GeminiTarget, LlmConfig, OpenAICompatibleTarget
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import Logger, create_default_logger

ChatTarget = GeminiTarget | OpenAICompatibleTarget


class ChatCompletionClient:
    """선택된 제공자로 채팅 응답을 스트리밍한다.

    Args:
        target: 해석된 채팅 호출 대상.
        timeout: HTTP 타임아웃(초).
        transport: 테스트용 httpx 비동기 전송 계층.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        target: ChatTarget,
        *,
        timeout: float = LlmConst.DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[Any] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._target = target
        self._timeout = timeout
        self._transport = transport
        self._logger = logger or create_default_logger("ChatCompletionClient")

    @classmethod
    def from_config(cls, config: LlmConfig, **kwargs: Any) -> "ChatCompletionClient":
        """설정 스냅샷에서 채팅 클라이언트를 생성한다."""

        return cls(config.chat_target(), **kwargs)

    @property
    def target(self) -> ChatTarget:
        """호출 대상을 반환한다."""

        return self._target

    async def astream(
        self,
        messages: Sequence[BaseMessage],
        system_instruction: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """응답 텍스트 조각을 도착 순서대로 반환한다."""

        url, headers, payload = self._build_request(messages, system_instruction)
        base_url = self._base_url()
        start = time.monotonic()
        chunk_count = 0
        self._logger.info(
            f"llm.chat.start: provider={self._target.kind}, model={self._target.model}, messages={len(messages)}"
        )
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                async with client.stream("POST", url, json=payload, headers=headers) as response:
                    if response.status_code >= 400:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        raise self._status_error(response.status_code, body)
                    async for line in response.aiter_lines():
                        data = _parse_sse_line(line)
                        if data is None:
                            continue
                        if data == LlmConst.SSE_DONE_MARKER:
                            break
                        text = self._extract_text(data)
                        if text:
                            chunk_count += 1
                            yield text
        except httpx.TransportError as error:
            self._logger.error(f"llm.chat.connection_failed: url={base_url}, error={error}")
            detail = ExceptionDetail(
                code="LLM_CONNECTION_FAILED",
                cause=str(error),
                metadata={"base_url": base_url},
            )
            raise BaseAppException(
                f"Connection failed to {base_url}. Check URL/Internet.", detail, error
            ) from error
        elapsed_ms = int((time.monotonic() - start) * 1000)
        self._logger.info(f"llm.chat.done: chunks={chunk_count}, elapsed_ms={elapsed_ms}")

    async def acomplete(
        self,
        messages: Sequence[BaseMessage],
        system_instruction: Optional[str] = None,
    ) -> str:
        """스트리밍 결과를 모두 이어 붙인 전체 응답을 반환한다."""

        parts = [chunk async for chunk in self.astream(messages, system_instruction)]
        return "".join(parts)

    def _build_request(
        self,
        messages: Sequence[BaseMessage],
        system_instruction: Optional[str],
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        target = self._target
        headers = {"Content-Type": "application/json"}
        if isinstance(target, GeminiTarget):
            if not target.api_key:
                detail = ExceptionDetail(
                    code="CONFIG_API_KEY_MISSING",
                    cause="gemini api key is empty",
                    hint="설정에 키를 입력하거나 API_KEY 환경 변수를 지정하세요.",
                )
                raise BaseAppException("Gemini API Key is missing. Check settings or environment variables.", detail)
            headers[LlmConst.GEMINI_API_KEY_HEADER] = target.api_key
            url = f"{LlmConst.GEMINI_API_BASE_URL}/models/{target.model}:streamGenerateContent?alt=sse"
            payload: dict[str, Any] = {
                "contents": [
                    {
                        "role": "model" if isinstance(message, AIMessage) else "user",
                        "parts": [{"text": _to_text(message.content)}],
                    }
                    for message in messages
                    if not isinstance(message, SystemMessage)
                ],
                "generationConfig": {"temperature": LlmConst.CHAT_TEMPERATURE},
            }
            if system_instruction:
                payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
            return url, headers, payload

        if target.api_key:
            headers["Authorization"] = f"Bearer {target.api_key}"
        api_messages = [
            {"role": "system", "content": system_instruction or LlmConst.DEFAULT_SYSTEM_INSTRUCTION}
        ]
        api_messages.extend(
            {"role": _to_openai_role(message), "content": _to_text(message.content)}
            for message in messages
        )
        payload = {
            "model": target.model,
            "messages": api_messages,
            "temperature": LlmConst.CHAT_TEMPERATURE,
            "stream": True,
        }
        return f"{target.base_url.rstrip('/')}/chat/completions", headers, payload

    def _extract_text(self, data: str) -> str:
        try:
            chunk = json.loads(data)
        except ValueError:
            self._logger.debug("llm.chat.chunk.skipped: invalid json")
            return ""
        if not isinstance(chunk, dict):
            return ""
        if self._target.kind == "gemini":
            candidates = chunk.get("candidates") or []
            if not candidates:
                return ""
            parts = (candidates[0].get("content") or {}).get("parts") or []
            return "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict))
        choices = chunk.get("choices") or []
        if not choices:
            return ""
        content = (choices[0].get("delta") or {}).get("content")
        return content if isinstance(content, str) else ""

    def _status_error(self, status: int, body: str) -> BaseAppException:
        prefix = "Gemini API error" if self._target.kind == "gemini" else "API Error"
        message = parse_api_error(status, body, prefix)
        self._logger.error(f"llm.chat.failed: status={status}, model={self._target.model}")
        detail = ExceptionDetail(
            code="LLM_CHAT_FAILED",
            cause=f"status={status}",
            metadata={"model": self._target.model, "provider": self._target.kind},
        )
        return BaseAppException(message, detail)

    def _base_url(self) -> str:
        if isinstance(self._target, GeminiTarget):
            return LlmConst.GEMINI_API_BASE_URL
        return self._target.base_url


def _parse_sse_line(line: str) -> Optional[str]:
    stripped = line.strip()
    if not stripped.startswith(LlmConst.SSE_DATA_PREFIX):
        return None
    return stripped[len(LlmConst.SSE_DATA_PREFIX) :].strip()


def _to_openai_role(message: BaseMessage) -> str:
    if isinstance(message, AIMessage):
        return "assistant"
    if isinstance(message, SystemMessage):
        return "system"
    return "user"


def _to_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("text"), str):
                parts.append(item["text"])
        return "".join(parts)
    return str(content or "")


__all__ = ["ChatCompletionClient", "ChatTarget"]
