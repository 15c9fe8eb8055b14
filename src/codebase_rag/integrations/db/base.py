"""
목적: 벡터 코퍼스 영속 계층 인터페이스를 정의한다.
설명: 1회 초기화, 일괄 업서트, 전체 조회, 비우기, 단일 메타 값 조회/저장을 표준화한다.
디자인 패턴: 저장소 패턴, 전략 패턴
참조: src/codebase_rag/integrations/db/sqlite_repository.py, src/codebase_rag/integrations/db/memory_repository.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from codebase_rag.integrations.db.models import VectorDocument


class VectorPersistence(ABC):
    """벡터 코퍼스 영속 계층 인터페이스."""

    @abstractmethod
    async def initialize(self) -> None:
        """저장소를 초기화한다. 여러 번 호출해도 한 번만 수행된다."""

    @abstractmethod
    async def save_documents(self, documents: Sequence[VectorDocument]) -> None:
        """문서를 ID 기준으로 일괄 업서트한다."""

    @abstractmethod
    async def get_all_documents(self) -> list[VectorDocument]:
        """저장된 전체 문서를 반환한다."""

    @abstractmethod
    async def clear_documents(self) -> None:
        """저장된 문서를 모두 삭제한다."""

    @abstractmethod
    async def save_meta(self, key: str, value: str) -> None:
        """메타 값을 저장한다."""

    @abstractmethod
    async def get_meta(self, key: str) -> Optional[str]:
        """메타 값을 조회한다. 없으면 None을 반환한다."""


__all__ = ["VectorPersistence"]
