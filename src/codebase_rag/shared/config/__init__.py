"""
목적: 설정 모듈 공개 API를 제공한다.
설명: 설정 병합 로더, 런타임 환경 로더, 설정 모델과 보관소를 외부에 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/shared/config/loader.py, src/codebase_rag/shared/config/settings.py
"""

from codebase_rag.shared.config.loader import ConfigLoader
from codebase_rag.shared.config.runtime_env_loader import RuntimeEnvironmentLoader
from codebase_rag.shared.config.settings import (
    AppSettings,
    GeminiConfig,
    GeminiTarget,
    IngestionSettings,
    LlmConfig,
    LlmConfigHolder,
    LlmProvider,
    OpenAICompatibleTarget,
    OpenAIEndpointConfig,
    RagSettings,
    StorageSettings,
    load_settings,
)

__all__ = [
    "AppSettings",
    "ConfigLoader",
    "GeminiConfig",
    "GeminiTarget",
    "IngestionSettings",
    "LlmConfig",
    "LlmConfigHolder",
    "LlmProvider",
    "OpenAICompatibleTarget",
    "OpenAIEndpointConfig",
    "RagSettings",
    "RuntimeEnvironmentLoader",
    "StorageSettings",
    "load_settings",
]
