"""
목적: 지식 베이스 수집 모델을 정의한다.
설명: 로컬 입력 파일, 수집 대상 소스 파일, 수집 결과 보고서, 파일 트리 노드를 표현한다.
디자인 패턴: 데이터 모델 모듈
참조: src/codebase_rag/core/knowledge/service.py, src/codebase_rag/core/knowledge/file_view.py
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class LocalFile:
    """로컬 디스크의 입력 파일."""

    relative_path: str
    location: Path


@dataclass(frozen=True)
class SourceFile:
    """필터와 텍스트 판정을 통과한 수집 대상 파일."""

    path: str
    content: str


class IngestionOutcome(str, Enum):
    """수집 종료 결과."""

    COMPLETED = "completed"
    EMPTY = "empty"
    ABORTED = "aborted"


class IngestionReport(BaseModel):
    """수집 실행 결과 요약."""

    outcome: IngestionOutcome
    files_total: int = 0
    files_processed: int = 0
    vectors_created: int = 0
    failed_chunks: int = 0
    skipped_files: int = 0
    message: str = ""


class FileNode(BaseModel):
    """파일 탐색기 트리 노드."""

    name: str
    path: str
    type: Literal["file", "folder"]
    level: int
    is_open: bool = False
    children: list["FileNode"] = Field(default_factory=list)


__all__ = [
    "FileNode",
    "IngestionOutcome",
    "IngestionReport",
    "LocalFile",
    "SourceFile",
]
