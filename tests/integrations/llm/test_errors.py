"""
목적: 제공자 오류 메시지 정규화 유틸을 검증한다.
설명: JSON 오류 봉투 추출, 상태 코드 폴백, 예외 설명 규칙을 확인한다.
디자인 패턴: 단위 테스트
참조: src/codebase_rag/integrations/llm/errors.py
"""

from __future__ import annotations

import json

from codebase_rag.integrations.llm import describe_error, extract_error_message, parse_api_error
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail


def test_extract_error_message_supports_known_shapes() -> None:
    """알려진 세 가지 오류 봉투 형태에서 메시지를 추출해야 한다."""

    assert extract_error_message({"error": {"message": "model not loaded"}}) == "model not loaded"
    assert extract_error_message('{"message": "quota exceeded"}') == "quota exceeded"
    assert extract_error_message(b'{"error": "invalid api key"}') == "invalid api key"
    assert extract_error_message("<html>bad gateway</html>") is None
    assert extract_error_message([1, 2]) is None


def test_parse_api_error_falls_back_to_truncated_body() -> None:
    """추출에 실패하면 접두사/상태 코드/잘린 본문으로 메시지를 만든다."""

    body = "x" * 500

    message = parse_api_error(502, body, "Embedding Error")

    assert message == f"Embedding Error (502): {'x' * 200}"
    assert parse_api_error(400, json.dumps({"error": {"message": "bad"}}), "API Error") == "bad"


def test_describe_error_normalizes_messages() -> None:
    """예외 종류별로 사람이 읽을 수 있는 설명을 만들어야 한다."""

    domain = BaseAppException("Could not find branch main or master in o/r.", ExceptionDetail(code="X"))
    embedded = RuntimeError('API Error (401): {"error": {"message": "Unauthorized key"}}')
    prefixed = RuntimeError("OpenAI API Error (500): upstream exploded")
    long_error = RuntimeError("y" * 400)

    assert describe_error(domain) == "Could not find branch main or master in o/r."
    assert describe_error(embedded) == "Unauthorized key"
    assert describe_error(prefixed) == "upstream exploded"
    assert describe_error(long_error) == "y" * 300 + "..."
    assert describe_error(RuntimeError()) == "RuntimeError"
