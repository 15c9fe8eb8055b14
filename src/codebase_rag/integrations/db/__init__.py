"""
목적: 벡터 영속 계층 공개 API를 제공한다.
설명: 영속 인터페이스, 문서 모델, SQLite/인메모리 구현체를 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/integrations/db/base.py
"""

from codebase_rag.integrations.db.base import VectorPersistence
from codebase_rag.integrations.db.memory_repository import InMemoryVectorPersistence
from codebase_rag.integrations.db.models import VectorDocument
from codebase_rag.integrations.db.sqlite_repository import SqliteVectorRepository

__all__ = [
    "InMemoryVectorPersistence",
    "SqliteVectorRepository",
    "VectorDocument",
    "VectorPersistence",
]
