"""
목적: 수집 대상 파일 필터를 제공한다.
설명: 차단 파일명, 차단 디렉터리, 바이너리 확장자만 거르는 허용 기본 필터이다.
      확장자가 없는 파일(Dockerfile 등)은 허용한다. 대소문자를 구분하지 않는다.
디자인 패턴: 순수 함수
참조: src/codebase_rag/core/knowledge/const.py
"""

from __future__ import annotations

from codebase_rag.core.knowledge.const import (
    BINARY_EXTENSIONS,
    BLOCKED_DIRECTORIES,
    BLOCKED_FILENAMES,
)


def is_file_allowed(path: str) -> bool:
    """경로가 수집 대상인지 판정한다."""

    lower = path.replace("\\", "/").lower()
    parts = lower.split("/")
    file_name = parts[-1]

    if file_name in BLOCKED_FILENAMES:
        return False
    if any(part in BLOCKED_DIRECTORIES for part in parts):
        return False
    if "." in file_name and file_name[file_name.rindex(".") :] in BINARY_EXTENSIONS:
        return False
    return True


def is_probably_text(content: str) -> bool:
    """NUL 문자가 없고 공백 외 내용이 있으면 텍스트로 본다."""

    return "\0" not in content and bool(content.strip())


__all__ = ["is_file_allowed", "is_probably_text"]
