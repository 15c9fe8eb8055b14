"""
목적: 벡터 저장소 검색 모델을 정의한다.
설명: 문서와 코사인 점수 쌍으로 검색 결과를 표현하고, 문서 모델을 재노출한다.
디자인 패턴: 값 객체
참조: src/codebase_rag/integrations/db/models.py
"""

from __future__ import annotations

from pydantic import BaseModel

from codebase_rag.integrations.db.models import VectorDocument


class SearchResult(BaseModel):
    """유사도 검색 결과."""

    document: VectorDocument
    score: float

    @property
    def file_path(self) -> str:
        return self.document.file_path

    @property
    def content(self) -> str:
        return self.document.content


__all__ = ["SearchResult", "VectorDocument"]
