"""
목적: 벡터 문서 저장 모델을 정의한다.
설명: 청크 본문, 임베딩, 원본 파일 경로, 오프셋 메타데이터를 하나의 문서로 표현한다.
디자인 패턴: 데이터 전송 객체(DTO)
참조: src/codebase_rag/integrations/db/sqlite_repository.py, src/codebase_rag/integrations/vector_store/store.py
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class VectorDocument(BaseModel):
    """임베딩된 청크 문서.

    Args:
        id: `{file_path}-{chunk_index}` 형식의 문서 ID.
        file_path: 원본 파일 상대 경로.
        content: 청크 본문.
        embedding: 임베딩 벡터.
        metadata: 최소 `start`/`end` 문자 오프셋을 포함한다.
    """

    id: str
    file_path: str
    content: str
    embedding: list[float] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def start(self) -> int:
        """청크 시작 오프셋을 반환한다."""

        return int(self.metadata.get("start", 0))

    @property
    def end(self) -> int:
        """청크 끝 오프셋(배타)을 반환한다."""

        return int(self.metadata.get("end", self.start + len(self.content)))


__all__ = ["VectorDocument"]
