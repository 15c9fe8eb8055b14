"""
목적: pytest 공통 로깅 훅과 테스트 더블을 제공한다.
설명: 테스트 시작/종료와 결과를 로깅하고, 네트워크 없이 동작하는 임베딩 더블과 설정 보관소를 제공한다.
디자인 패턴: 테스트 훅, 테스트 더블
참조: pyproject.toml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

import pytest
from dotenv import load_dotenv
from langchain_core.embeddings import Embeddings

from codebase_rag.shared.config import LlmConfig, LlmConfigHolder
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail

_LOGGER = logging.getLogger("tests")


def _load_env_files() -> None:
    """프로젝트 루트에 .env가 있으면 로딩한다. 단위 테스트는 .env 없이 동작한다."""

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


_load_env_files()


class KeywordEmbeddings(Embeddings):
    """키워드 등장 횟수로 결정적 벡터를 만드는 테스트 임베딩.

    마지막 차원은 항상 1이라 영벡터가 나오지 않는다.
    """

    def __init__(self, vocabulary: Sequence[str] = ("alpha", "beta", "gamma", "delta")) -> None:
        self.vocabulary = tuple(vocabulary)
        self.calls: list[str] = []

    def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.vocabulary] + [1.0]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(text) for text in texts]

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


class MappingEmbeddings(Embeddings):
    """미리 정한 텍스트->벡터 매핑을 반환하는 테스트 임베딩."""

    def __init__(self, mapping: Mapping[str, list[float]], default: Optional[list[float]] = None) -> None:
        self.mapping = dict(mapping)
        self.default = default or [1.0, 0.0]

    def embed_query(self, text: str) -> list[float]:
        return list(self.mapping.get(text, self.default))

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(text) for text in texts]

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


class FailingEmbeddings(Embeddings):
    """항상 연결 실패를 던지는 테스트 임베딩."""

    def __init__(self) -> None:
        self.calls = 0

    def _fail(self) -> list[float]:
        self.calls += 1
        detail = ExceptionDetail(code="LLM_CONNECTION_FAILED", cause="stub")
        raise BaseAppException("Connection failed to http://localhost:1234/v1. Check URL and network.", detail)

    def embed_query(self, text: str) -> list[float]:
        return self._fail()

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._fail() for _ in texts]

    async def aembed_query(self, text: str) -> list[float]:
        return self._fail()


@pytest.fixture
def config_holder() -> LlmConfigHolder:
    """기본 OpenAI 호환 설정 보관소를 반환한다."""

    return LlmConfigHolder(LlmConfig())


@pytest.fixture
def keyword_embeddings() -> KeywordEmbeddings:
    return KeywordEmbeddings()


@pytest.fixture
def failing_embeddings() -> FailingEmbeddings:
    return FailingEmbeddings()


@pytest.fixture
def mapping_embeddings_factory() -> Callable[..., MappingEmbeddings]:
    return MappingEmbeddings


def pytest_sessionstart(session) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """테스트 세션 시작을 로깅한다."""

    _LOGGER.info("테스트 세션 시작")


def pytest_sessionfinish(session, exitstatus: int) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """테스트 세션 종료를 로깅한다."""

    _LOGGER.info("테스트 세션 종료 (exitstatus=%s)", exitstatus)


def pytest_runtest_logstart(nodeid: str, location) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """각 테스트 시작을 로깅한다."""

    _LOGGER.info("테스트 시작: %s", nodeid)


def pytest_runtest_logreport(report) -> None:  # noqa: D401 - pytest 훅 시그니처 유지
    """테스트 결과를 로깅한다."""

    if report.when != "call":
        return
    if report.passed:
        _LOGGER.info("테스트 완료: %s", report.nodeid)
        return
    if report.skipped:
        _LOGGER.warning("테스트 스킵: %s", report.nodeid)
        return
    _LOGGER.error("테스트 실패: %s", report.nodeid)
