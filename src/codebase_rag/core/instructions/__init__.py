"""
목적: 프로젝트 안내문 도메인 공개 API를 제공한다.
설명: 폴더/파일 안내문 생성 서비스와 안내문 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/core/instructions/service.py
"""

from codebase_rag.core.instructions.models import (
    ROOT_FOLDER,
    FileInstruction,
    FolderInstruction,
    InstructionStatus,
    file_name_of,
    folder_of,
)
from codebase_rag.core.instructions.service import (
    NO_FILES_STATUS,
    InstructionClientFactory,
    ProjectInstructionsService,
)

__all__ = [
    "FileInstruction",
    "FolderInstruction",
    "InstructionClientFactory",
    "InstructionStatus",
    "NO_FILES_STATUS",
    "ProjectInstructionsService",
    "ROOT_FOLDER",
    "file_name_of",
    "folder_of",
]
