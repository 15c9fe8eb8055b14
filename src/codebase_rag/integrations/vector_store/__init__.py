"""
목적: 벡터 저장소 공개 API를 제공한다.
설명: 저장소, 검색 결과/문서 모델, 코사인 유사도 함수를 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/integrations/vector_store/store.py
"""

from codebase_rag.integrations.vector_store.models import SearchResult, VectorDocument
from codebase_rag.integrations.vector_store.similarity import cosine_similarity
from codebase_rag.integrations.vector_store.store import VectorStore

__all__ = ["SearchResult", "VectorDocument", "VectorStore", "cosine_similarity"]
