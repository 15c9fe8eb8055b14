"""
목적: GitHub 저장소 소스 모델을 정의한다.
설명: 저장소 참조(owner/repo), 트리 항목, 브랜치가 해석된 트리 결과를 표현한다.
디자인 패턴: 값 객체
참조: src/codebase_rag/integrations/github/source.py
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RepoReference(BaseModel):
    """GitHub 저장소 참조."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """`owner/repo` 형식 이름을 반환한다."""

        return f"{self.owner}/{self.repo}"


class TreeEntry(BaseModel):
    """재귀 트리 목록의 단일 항목."""

    model_config = ConfigDict(frozen=True)

    path: str
    type: str
    size: Optional[int] = None

    @property
    def is_blob(self) -> bool:
        """파일(blob) 항목인지 여부를 반환한다."""

        return self.type == "blob"


class RepositoryTree(BaseModel):
    """브랜치가 확정된 저장소 트리."""

    model_config = ConfigDict(frozen=True)

    reference: RepoReference
    branch: str
    entries: list[TreeEntry] = Field(default_factory=list)

    def blobs(self) -> list[TreeEntry]:
        """blob 항목만 반환한다."""

        return [entry for entry in self.entries if entry.is_blob]


__all__ = ["RepoReference", "RepositoryTree", "TreeEntry"]
