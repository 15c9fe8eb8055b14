"""
목적: 인메모리 벡터 영속 저장소를 제공한다.
설명: 디스크 없이 동작하는 VectorPersistence 구현으로, 임시 세션과 테스트에서 사용한다.
디자인 패턴: 저장소 패턴
참조: src/codebase_rag/integrations/db/base.py
"""

from __future__ import annotations

from typing import Optional, Sequence

from codebase_rag.integrations.db.base import VectorPersistence
from codebase_rag.integrations.db.models import VectorDocument


class InMemoryVectorPersistence(VectorPersistence):
    """프로세스 메모리에만 보관하는 영속 저장소."""

    def __init__(self) -> None:
        self._documents: dict[str, VectorDocument] = {}
        self._meta: dict[str, str] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        self._initialized = True

    async def save_documents(self, documents: Sequence[VectorDocument]) -> None:
        for document in documents:
            self._documents[document.id] = document.model_copy(deep=True)

    async def get_all_documents(self) -> list[VectorDocument]:
        return [document.model_copy(deep=True) for document in self._documents.values()]

    async def clear_documents(self) -> None:
        self._documents.clear()

    async def save_meta(self, key: str, value: str) -> None:
        self._meta[key] = value

    async def get_meta(self, key: str) -> Optional[str]:
        return self._meta.get(key)


__all__ = ["InMemoryVectorPersistence"]
