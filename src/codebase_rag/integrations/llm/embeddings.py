"""
목적: 제공자 중립 임베딩 어댑터를 제공한다.
설명: LangChain Embeddings 인터페이스를 구현하고, 해석된 호출 대상(GeminiTarget/OpenAICompatibleTarget)에
      따라 httpx로 REST 임베딩 API를 호출한다.
      비동기 클라이언트는 어댑터 수명 동안 하나를 재사용하고 aclose()로 닫는다.
디자인 패턴: 어댑터 패턴
참조: src/codebase_rag/shared/config/settings.py, src/codebase_rag/integrations/llm/errors.py
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx
from langchain_core.embeddings import Embeddings

from codebase_rag.integrations.llm.const import LlmConst
from codebase_rag.integrations.llm.errors import parse_api_error
from codebase_rag.shared.config import GeminiTarget, LlmConfig, OpenAICompatibleTarget
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import Logger, create_default_logger

EmbeddingTarget = GeminiTarget | OpenAICompatibleTarget


class ProviderEmbeddings(Embeddings):
    """선택된 제공자로 텍스트 임베딩을 생성한다.

    Args:
        target: 해석된 임베딩 호출 대상.
        timeout: HTTP 타임아웃(초).
        transport: 테스트용 httpx 전송 계층(MockTransport 등).
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        target: EmbeddingTarget,
        *,
        timeout: float = LlmConst.DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[Any] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._target = target
        self._timeout = timeout
        self._transport = transport
        self._logger = logger or create_default_logger("ProviderEmbeddings")
        self._async_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(cls, config: LlmConfig, **kwargs: Any) -> "ProviderEmbeddings":
        """설정 스냅샷에서 임베딩 어댑터를 생성한다."""

        return cls(config.embedding_target(), **kwargs)

    @property
    def target(self) -> EmbeddingTarget:
        """호출 대상을 반환한다."""

        return self._target

    def embed_query(self, text: str) -> list[float]:
        """단일 텍스트 임베딩을 동기로 생성한다."""

        url, headers, payload = self._build_request(text)
        start = time.monotonic()
        try:
            with httpx.Client(transport=self._transport, timeout=self._timeout) as client:
                response = client.post(url, json=payload, headers=headers)
        except httpx.TransportError as error:
            raise self._connection_error(error) from error
        return self._handle_response(response, start)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """여러 텍스트 임베딩을 순서대로 생성한다."""

        return [self.embed_query(text) for text in texts]

    async def aembed_query(self, text: str) -> list[float]:
        """단일 텍스트 임베딩을 비동기로 생성한다."""

        url, headers, payload = self._build_request(text)
        start = time.monotonic()
        try:
            response = await self._get_async_client().post(url, json=payload, headers=headers)
        except httpx.TransportError as error:
            raise self._connection_error(error) from error
        return self._handle_response(response, start)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        """여러 텍스트 임베딩을 비동기로 순서대로 생성한다."""

        return [await self.aembed_query(text) for text in texts]

    async def aclose(self) -> None:
        """보유한 비동기 HTTP 클라이언트를 닫는다. 이후 호출은 새 클라이언트를 연다."""

        client, self._async_client = self._async_client, None
        if client is not None:
            await client.aclose()

    async def __aenter__(self) -> "ProviderEmbeddings":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _get_async_client(self) -> httpx.AsyncClient:
        if self._async_client is None or self._async_client.is_closed:
            self._async_client = httpx.AsyncClient(transport=self._transport, timeout=self._timeout)
        return self._async_client

    def _build_request(self, text: str) -> tuple[str, dict[str, str], dict[str, Any]]:
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
            url = f"{LlmConst.GEMINI_API_BASE_URL}/models/{target.model}:embedContent"
            payload: dict[str, Any] = {
                "model": f"models/{target.model}",
                "content": {"parts": [{"text": text}]},
            }
            return url, headers, payload
        if target.api_key:
            headers["Authorization"] = f"Bearer {target.api_key}"
        url = f"{target.base_url.rstrip('/')}/embeddings"
        return url, headers, {"input": text, "model": target.model}

    def _handle_response(self, response: httpx.Response, start: float) -> list[float]:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        if response.status_code >= 400:
            prefix = "Gemini Embedding Error" if self._target.kind == "gemini" else "Embedding Error"
            message = parse_api_error(response.status_code, response.text, prefix)
            self._logger.error(
                f"llm.embedding.failed: status={response.status_code}, elapsed_ms={elapsed_ms}",
                metadata={"model": self._target.model},
            )
            detail = ExceptionDetail(
                code="LLM_EMBEDDING_FAILED",
                cause=f"status={response.status_code}",
                metadata={"model": self._target.model, "provider": self._target.kind},
            )
            raise BaseAppException(message, detail)

        vector = self._extract_vector(response.json())
        if not vector:
            detail = ExceptionDetail(
                code="LLM_EMBEDDING_EMPTY",
                cause="provider returned no embedding values",
                metadata={"model": self._target.model, "provider": self._target.kind},
            )
            raise BaseAppException("임베딩 결과가 비어 있습니다.", detail)
        self._logger.debug(f"llm.embedding.done: dim={len(vector)}, elapsed_ms={elapsed_ms}")
        return vector

    def _extract_vector(self, data: Any) -> list[float]:
        if not isinstance(data, dict):
            return []
        if self._target.kind == "gemini":
            values = (data.get("embedding") or {}).get("values")
            if not values:
                embeddings = data.get("embeddings") or []
                values = embeddings[0].get("values") if embeddings else None
        else:
            items = data.get("data") or []
            values = items[0].get("embedding") if items else None
        return [float(value) for value in values or []]

    def _connection_error(self, error: Exception) -> BaseAppException:
        base_url = (
            LlmConst.GEMINI_API_BASE_URL
            if isinstance(self._target, GeminiTarget)
            else self._target.base_url
        )
        self._logger.error(f"llm.embedding.connection_failed: url={base_url}, error={error}")
        detail = ExceptionDetail(
            code="LLM_CONNECTION_FAILED",
            cause=str(error),
            metadata={"base_url": base_url},
        )
        return BaseAppException(f"Connection failed to {base_url}. Check URL and network.", detail, error)


async def aclose_embeddings(embeddings: Embeddings) -> None:
    """임베딩 어댑터가 HTTP 클라이언트를 보유하고 있으면 닫는다."""

    if isinstance(embeddings, ProviderEmbeddings):
        await embeddings.aclose()


__all__ = ["EmbeddingTarget", "ProviderEmbeddings", "aclose_embeddings"]
