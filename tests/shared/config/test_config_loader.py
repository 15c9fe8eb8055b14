"""
목적: 설정 로더 병합 규칙을 검증한다.
설명: dict/JSON 파일/환경 변수 소스의 깊은 병합과 값 해석을 확인한다.
디자인 패턴: 빌더 패턴
참조: src/codebase_rag/shared/config/loader.py
"""

from __future__ import annotations

import json

import pytest

from codebase_rag.shared.config import ConfigLoader


def test_config_loader_merges_sources_in_order(tmp_path, monkeypatch) -> None:
    """나중 소스가 앞선 소스를 덮어쓰되 중첩 키는 보존해야 한다."""

    config_path = tmp_path / "settings.json"
    config_path.write_text(
        json.dumps({"rag": {"min_relevance_score": 0.4, "search_top_k": 20}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("CODEBASE_RAG__RAG__MIN_RELEVANCE_SCORE", "0.7")
    monkeypatch.setenv("CODEBASE_RAG__LLM__EMBEDDING_PROVIDER", "gemini")

    merged = (
        ConfigLoader()
        .add_dict({"rag": {"structure_listing_limit": 50}})
        .add_json_file(config_path)
        .add_env()
        .build({"ingestion": {"embedding_concurrency": 2}})
    )

    assert merged["rag"] == {
        "structure_listing_limit": 50,
        "min_relevance_score": 0.7,
        "search_top_k": 20,
    }
    assert merged["llm"]["embedding_provider"] == "gemini"
    assert merged["ingestion"]["embedding_concurrency"] == 2


def test_config_loader_parses_env_literals(monkeypatch) -> None:
    """환경 변수의 bool/null/JSON 리터럴을 해석해야 한다."""

    monkeypatch.setenv("CODEBASE_RAG__FLAGS__ENABLED", "true")
    monkeypatch.setenv("CODEBASE_RAG__FLAGS__EMPTY", "null")
    monkeypatch.setenv("CODEBASE_RAG__RAG__STRUCTURE_KEYWORDS", '["tree", "layout"]')
    monkeypatch.setenv("CODEBASE_RAG__LLM__OPENAI_CHAT__BASE_URL", "http://localhost:11434/v1")

    merged = ConfigLoader().add_env().build()

    assert merged["flags"] == {"enabled": True, "empty": None}
    assert merged["rag"]["structure_keywords"] == ["tree", "layout"]
    assert merged["llm"]["openai_chat"]["base_url"] == "http://localhost:11434/v1"


def test_config_loader_missing_file_behavior(tmp_path) -> None:
    """선택 파일은 건너뛰고, 필수 파일은 예외를 던져야 한다."""

    missing = tmp_path / "missing.json"

    assert ConfigLoader().add_json_file(missing).build() == {}
    with pytest.raises(FileNotFoundError):
        ConfigLoader().add_json_file(missing, required=True)


def test_config_loader_rejects_non_object_json(tmp_path) -> None:
    """최상위가 객체가 아닌 JSON은 거부해야 한다."""

    config_path = tmp_path / "settings.json"
    config_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigLoader().add_json_file(config_path)
