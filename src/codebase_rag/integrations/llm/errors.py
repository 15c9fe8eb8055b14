"""
목적: LLM 제공자 API 오류 응답을 정규화한다.
설명: 제공자별 JSON 오류 봉투에서 사람이 읽을 수 있는 메시지를 추출하고,
      추출에 실패하면 상태 코드와 잘린 원문 본문으로 메시지를 구성한다.
디자인 패턴: 함수형 유틸
참조: src/codebase_rag/integrations/llm/embeddings.py, src/codebase_rag/integrations/llm/chat_client.py
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from codebase_rag.shared.exceptions import BaseAppException

_MAX_RAW_BODY_CHARS = 200
_MAX_DESCRIBED_CHARS = 300
_EMBEDDED_JSON_PATTERN = re.compile(r"\{[\s\S]*\}")
_STATUS_PREFIX_PATTERN = re.compile(
    r"^(?:OpenAI API Error|Embedding API Error|API Error|Error)\s*\(\d+\):\s*",
    re.IGNORECASE,
)


def extract_error_message(body: Any) -> Optional[str]:
    """오류 응답 본문에서 메시지를 추출한다.

    지원 형태: ``{"error": {"message": ...}}``, ``{"message": ...}``, ``{"error": "..."}``.
    """

    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except (TypeError, ValueError):
            return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    if isinstance(error, str) and error.strip():
        return error.strip()
    return None


def parse_api_error(status: int, body: str, prefix: str) -> str:
    """상태 코드와 본문으로 사용자용 오류 메시지를 만든다."""

    message = extract_error_message(body)
    if message:
        return message
    return f"{prefix} ({status}): {(body or '')[:_MAX_RAW_BODY_CHARS]}"


def describe_error(error: BaseException) -> str:
    """임의의 예외에서 사람이 읽을 수 있는 메시지를 만든다.

    도메인 예외는 정규화된 메시지를 그대로 쓰고, 그 외에는 메시지 안의 JSON 오류 봉투를
    해석하거나 상태 코드 접두사를 걷어낸 뒤 길이를 제한한다.
    """

    if isinstance(error, BaseAppException):
        return error.message
    message = str(error).strip()
    if not message:
        return type(error).__name__
    match = _EMBEDDED_JSON_PATTERN.search(message)
    if match:
        extracted = extract_error_message(match.group(0))
        if extracted:
            return extracted
    message = _STATUS_PREFIX_PATTERN.sub("", message)
    if len(message) > _MAX_DESCRIBED_CHARS:
        message = message[:_MAX_DESCRIBED_CHARS] + "..."
    return message


__all__ = ["describe_error", "extract_error_message", "parse_api_error"]
