"""
목적: 인메모리 로거와 로그 모델 동작을 검증한다.
설명: 로그 기록, 컨텍스트 병합, 저장소 크기 제한, stdout 출력을 확인한다.
디자인 패턴: 전략 패턴, 저장소 패턴
참조: src/codebase_rag/shared/logging/logger.py, src/codebase_rag/shared/logging/models.py
"""

from __future__ import annotations

import json

from codebase_rag.shared.logging import (
    InMemoryLogger,
    InMemoryLogRepository,
    LogContext,
    LogLevel,
    create_default_logger,
)


def test_inmemory_logger_records_log() -> None:
    """기본 로거가 로그를 기록하는지 확인한다."""

    logger = create_default_logger("unit-test")
    logger.info("ingest.start: files=3", metadata={"files": 3})

    records = logger.repository.list()

    assert len(records) == 1
    assert records[0].level == LogLevel.INFO
    assert records[0].message == "ingest.start: files=3"
    assert records[0].logger_name == "unit-test"
    assert records[0].metadata == {"files": 3}


def test_logger_with_context_merges_tags() -> None:
    """컨텍스트 병합 규칙이 올바른지 확인한다."""

    base_context = LogContext(trace_id="trace-1", operation="ingest", tags={"source": "local", "env": "dev"})
    logger = InMemoryLogger(name="ctx-test", base_context=base_context, emit_stdout=False)

    logger.info("기본 컨텍스트 로그")
    child_logger = logger.with_context(
        LogContext(trace_id="trace-2", source="octo/repo", tags={"env": "prod"})
    )
    child_logger.error("확장 컨텍스트 로그")

    records = logger.repository.list()

    assert len(records) == 2
    assert records[0].context is not None
    assert records[0].context.tags["env"] == "dev"
    assert records[1].context is not None
    assert records[1].context.trace_id == "trace-2"
    assert records[1].context.operation == "ingest"
    assert records[1].context.source == "octo/repo"
    assert records[1].context.tags == {"source": "local", "env": "prod"}


def test_repository_drops_oldest_records() -> None:
    """저장소 상한을 넘으면 오래된 레코드부터 밀려나야 한다."""

    logger = InMemoryLogger(name="bounded", repository=InMemoryLogRepository(max_records=2), emit_stdout=False)
    for index in range(3):
        logger.debug(f"event-{index}")

    messages = [record.message for record in logger.repository.list()]

    assert messages == ["event-1", "event-2"]


def test_logger_writes_json_line_to_stdout(capsys) -> None:
    """stdout 출력이 켜져 있으면 JSON 한 줄로 기록해야 한다."""

    logger = InMemoryLogger(name="stdout-test", emit_stdout=True)
    logger.warning("vector_store.persist.failed: op=save_documents")

    payload = json.loads(capsys.readouterr().out.strip())

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "stdout-test"
    assert payload["message"].startswith("vector_store.persist.failed")
