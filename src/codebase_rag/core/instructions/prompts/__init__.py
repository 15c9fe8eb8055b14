"""
목적: 프로젝트 안내문 프롬프트 공개 API를 제공한다.
설명: 폴더/파일 안내문 시스템 프롬프트와 사용자 프롬프트 템플릿을 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/core/instructions/prompts/instruction_prompt.py
"""

from codebase_rag.core.instructions.prompts.instruction_prompt import (
    FILE_SYSTEM_PROMPT,
    FILE_USER_PROMPT,
    FOLDER_SYSTEM_PROMPT,
    FOLDER_USER_PROMPT,
)

__all__ = ["FILE_SYSTEM_PROMPT", "FILE_USER_PROMPT", "FOLDER_SYSTEM_PROMPT", "FOLDER_USER_PROMPT"]
