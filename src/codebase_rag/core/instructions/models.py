"""
목적: 프로젝트 안내문 도메인 모델을 정의한다.
설명: 폴더/파일 단위로 생성한 안내문과 생성 상태를 Pydantic 모델로 제공한다.
디자인 패턴: 엔티티 패턴
참조: src/codebase_rag/core/instructions/service.py
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

ROOT_FOLDER = "."


class InstructionStatus(str, Enum):
    """안내문 생성 상태."""

    PENDING = "pending"
    GENERATING = "generating"
    DONE = "done"
    ERROR = "error"


class FileInstruction(BaseModel):
    """파일 하나에 대한 안내문."""

    file_path: str
    file_name: str
    instruction: str = ""
    status: InstructionStatus = InstructionStatus.PENDING
    error: Optional[str] = None


class FolderInstruction(BaseModel):
    """폴더 하나에 대한 안내문과 소속 파일 안내문.

    `file_instructions`는 파일 경로를 키로 하며 `files` 순서와 같은 순서로 채운다.
    """

    folder_path: str
    files: list[str] = Field(default_factory=list)
    instruction: str = ""
    status: InstructionStatus = InstructionStatus.PENDING
    error: Optional[str] = None
    file_instructions: dict[str, FileInstruction] = Field(default_factory=dict)


def folder_of(file_path: str) -> str:
    """파일 경로의 상위 폴더를 반환한다. 최상위 파일은 `"."`이다."""

    parts = file_path.split("/")
    return "/".join(parts[:-1]) if len(parts) > 1 else ROOT_FOLDER


def file_name_of(file_path: str) -> str:
    return file_path.split("/")[-1] or file_path


__all__ = [
    "FileInstruction",
    "FolderInstruction",
    "InstructionStatus",
    "ROOT_FOLDER",
    "file_name_of",
    "folder_of",
]
