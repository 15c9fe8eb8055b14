"""
목적: 애플리케이션 설정 모델과 설정 보관소를 정의한다.
설명: LLM 제공자 설정, RAG/수집/저장소 설정을 Pydantic으로 검증하고,
      제공자 선택을 태그드 유니온(GeminiTarget | OpenAICompatibleTarget)으로 해석한다.
디자인 패턴: 값 객체, 스냅샷 보관소
참조: src/codebase_rag/shared/config/loader.py, src/codebase_rag/integrations/llm/embeddings.py
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from codebase_rag.shared.config.loader import ConfigLoader
from codebase_rag.shared.config.runtime_env_loader import RuntimeEnvironmentLoader

LlmProvider = Literal["gemini", "openai"]

_GEMINI_KEY_ENV_CANDIDATES = ("API_KEY", "GEMINI_API_KEY")


class GeminiConfig(BaseModel):
    """Gemini 제공자 설정."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    chat_model: str = "gemini-2.5-flash"
    embedding_model: str = "text-embedding-004"


class OpenAIEndpointConfig(BaseModel):
    """OpenAI 호환 엔드포인트 설정(LM Studio, Ollama, OpenAI 등)."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "http://localhost:1234/v1"
    api_key: str = ""
    model: str = ""


class GeminiTarget(BaseModel):
    """해석된 Gemini 호출 대상."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["gemini"] = "gemini"
    api_key: str
    model: str


class OpenAICompatibleTarget(BaseModel):
    """해석된 OpenAI 호환 호출 대상."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["openai"] = "openai"
    base_url: str
    api_key: str
    model: str


class LlmConfig(BaseModel):
    """채팅/임베딩 제공자 설정 스냅샷이다.

    불변 모델이며 변경은 LlmConfigHolder.update로 새 값을 만든다.
    """

    model_config = ConfigDict(frozen=True)

    chat_provider: LlmProvider = "openai"
    embedding_provider: LlmProvider = "openai"
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    openai_chat: OpenAIEndpointConfig = Field(
        default_factory=lambda: OpenAIEndpointConfig(model="openai/gpt-oss-20b")
    )
    openai_embedding: OpenAIEndpointConfig = Field(
        default_factory=lambda: OpenAIEndpointConfig(model="text-embedding-mxbai-embed-large-v1")
    )

    def embedding_model(self) -> str:
        """선택된 임베딩 모델 ID를 반환한다."""

        if self.embedding_provider == "gemini":
            return self.gemini.embedding_model
        return self.openai_embedding.model

    def embedding_signature(self) -> str:
        """벡터 공간 식별용 시그니처(`provider:model`)를 반환한다."""

        return f"{self.embedding_provider}:{self.embedding_model()}"

    def embedding_target(self) -> GeminiTarget | OpenAICompatibleTarget:
        """임베딩 호출 대상을 태그드 유니온으로 해석한다."""

        if self.embedding_provider == "gemini":
            return GeminiTarget(api_key=self.gemini_api_key(), model=self.gemini.embedding_model)
        endpoint = self.openai_embedding
        return OpenAICompatibleTarget(
            base_url=endpoint.base_url,
            api_key=endpoint.api_key,
            model=endpoint.model,
        )

    def chat_target(self) -> GeminiTarget | OpenAICompatibleTarget:
        """채팅 호출 대상을 태그드 유니온으로 해석한다."""

        if self.chat_provider == "gemini":
            return GeminiTarget(api_key=self.gemini_api_key(), model=self.gemini.chat_model)
        endpoint = self.openai_chat
        return OpenAICompatibleTarget(
            base_url=endpoint.base_url,
            api_key=endpoint.api_key,
            model=endpoint.model,
        )

    def gemini_api_key(self) -> str:
        """직접 입력한 키를 우선하고, 없으면 환경 변수 키를 사용한다."""

        if self.gemini.api_key.strip():
            return self.gemini.api_key.strip()
        for name in _GEMINI_KEY_ENV_CANDIDATES:
            value = (os.getenv(name) or "").strip()
            if value:
                return value
        return ""


class RagSettings(BaseModel):
    """검색 증강 설정."""

    model_config = ConfigDict(frozen=True)

    min_relevance_score: float = Field(default=0.55, ge=-1.0, le=1.0)
    search_top_k: int = Field(default=40, ge=1)
    structure_listing_limit: int = Field(default=200, ge=0)
    structure_keywords: tuple[str, ...] = ("project", "structure")


class IngestionSettings(BaseModel):
    """수집 파이프라인 설정."""

    model_config = ConfigDict(frozen=True)

    embedding_concurrency: int = Field(default=4, ge=1)
    download_concurrency: int = Field(default=10, ge=1)
    code_chunk_size: int = Field(default=500, ge=1)
    code_chunk_overlap: int = Field(default=50, ge=0)
    data_chunk_size: int = Field(default=800, ge=1)
    data_chunk_overlap: int = Field(default=100, ge=0)
    max_consecutive_failures: int = Field(default=3, ge=1)
    newline_window_ratio: float = Field(default=0.8, gt=0.0, le=1.0)
    min_chunk_ratio: float = Field(default=0.5, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_overlaps(self) -> "IngestionSettings":
        if self.code_chunk_overlap >= self.code_chunk_size:
            raise ValueError("code_chunk_overlap은 code_chunk_size보다 작아야 합니다.")
        if self.data_chunk_overlap >= self.data_chunk_size:
            raise ValueError("data_chunk_overlap은 data_chunk_size보다 작아야 합니다.")
        return self


class StorageSettings(BaseModel):
    """영속 저장소 설정."""

    model_config = ConfigDict(frozen=True)

    database_path: Path = Path("data/db/vectors.sqlite")


class AppSettings(BaseModel):
    """애플리케이션 전체 설정."""

    model_config = ConfigDict(frozen=True)

    llm: LlmConfig = Field(default_factory=LlmConfig)
    rag: RagSettings = Field(default_factory=RagSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


class LlmConfigHolder:
    """현재 LLM 설정을 보관하는 단일 주입 지점이다.

    여러 단계로 이뤄진 작업은 시작 시점에 get()으로 스냅샷을 잡고 끝까지 그 값을 사용한다.
    """

    def __init__(self, config: Optional[LlmConfig] = None) -> None:
        self._config = config or LlmConfig()
        self._lock = threading.Lock()

    def get(self) -> LlmConfig:
        """현재 설정 스냅샷을 반환한다."""

        with self._lock:
            return self._config

    def update(self, **changes: Any) -> LlmConfig:
        """일부 필드를 바꾼 새 설정으로 교체한다."""

        with self._lock:
            merged = self._config.model_dump()
            for key, value in changes.items():
                if isinstance(value, BaseModel):
                    value = value.model_dump()
                if isinstance(merged.get(key), dict) and isinstance(value, dict):
                    merged[key] = {**merged[key], **value}
                else:
                    merged[key] = value
            self._config = LlmConfig.model_validate(merged)
            return self._config


def load_settings(
    config_path: str | Path | None = None,
    overrides: Optional[Mapping[str, Any]] = None,
    project_root: Optional[Path] = None,
) -> AppSettings:
    """`.env`, JSON 파일, 환경 변수, 오버라이드 순으로 병합해 설정을 생성한다."""

    RuntimeEnvironmentLoader(project_root=project_root).load()
    raw = ConfigLoader().add_json_file(config_path).add_env().build(overrides)
    return AppSettings.model_validate(raw)


__all__ = [
    "AppSettings",
    "GeminiConfig",
    "GeminiTarget",
    "IngestionSettings",
    "LlmConfig",
    "LlmConfigHolder",
    "LlmProvider",
    "OpenAICompatibleTarget",
    "OpenAIEndpointConfig",
    "RagSettings",
    "StorageSettings",
    "load_settings",
]
