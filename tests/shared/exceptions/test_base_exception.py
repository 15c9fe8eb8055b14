"""
목적: 공통 예외 모델과 베이스 예외 동작을 검증한다.
설명: 예외 메시지/상세 모델/원본 예외 저장 및 직렬화 결과를 확인한다.
디자인 패턴: 도메인 예외 객체, DTO
참조: src/codebase_rag/shared/exceptions/base.py, src/codebase_rag/shared/exceptions/models.py
"""

from __future__ import annotations

from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail


def test_base_app_exception_to_dict() -> None:
    """BaseAppException의 직렬화 결과를 검증한다."""

    detail = ExceptionDetail(
        code="GITHUB_REPO_INVALID",
        cause="unparsable repository reference",
        hint="owner/repo 형식을 사용하세요.",
        metadata={"reference": "not-a-repo"},
    )
    original = ValueError("bad reference")
    error = BaseAppException(message="Invalid GitHub URL.", detail=detail, original=original)

    result = error.to_dict()

    assert error.message == "Invalid GitHub URL."
    assert error.code == "GITHUB_REPO_INVALID"
    assert error.original is original
    assert str(error) == "Invalid GitHub URL."
    assert result["detail"]["metadata"]["reference"] == "not-a-repo"
    assert "ValueError" in result["original"]


def test_base_app_exception_without_original() -> None:
    """원본 예외가 없으면 직렬화 값이 None이어야 한다."""

    error = BaseAppException("수집이 이미 진행 중입니다.", ExceptionDetail(code="INGESTION_IN_PROGRESS"))

    assert error.original is None
    assert error.to_dict()["original"] is None
    assert error.detail.metadata == {}
