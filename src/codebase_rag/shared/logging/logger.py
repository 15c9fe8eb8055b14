"""
목적: 로거 인터페이스와 기본 구현체를 제공한다.
설명: 크기 제한이 있는 인메모리 저장소 기반 로거를 포함하며 저장소 주입을 지원한다.
디자인 패턴: 전략 패턴, 저장소 패턴
참조: src/codebase_rag/shared/logging/models.py
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, List, Optional

from codebase_rag.shared.logging.models import LogContext, LogLevel, LogRecord

_DEFAULT_MAX_RECORDS = 5000


class LogRepository(ABC):
    """로그 저장소 인터페이스."""

    @abstractmethod
    def add(self, record: LogRecord) -> None:
        """로그 레코드를 저장한다."""

    @abstractmethod
    def list(self) -> List[LogRecord]:
        """저장된 로그를 반환한다."""


class InMemoryLogRepository(LogRepository):
    """오래된 레코드부터 밀어내는 인메모리 로그 저장소."""

    def __init__(self, max_records: int = _DEFAULT_MAX_RECORDS) -> None:
        self._records: Deque[LogRecord] = deque(maxlen=max(1, int(max_records)))

    def add(self, record: LogRecord) -> None:
        self._records.append(record)

    def list(self) -> List[LogRecord]:
        return list(self._records)


class Logger(ABC):
    """로거 인터페이스."""

    @abstractmethod
    def log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """로그를 기록한다."""

    @abstractmethod
    def with_context(self, context: LogContext) -> "Logger":
        """컨텍스트가 합쳐진 새 로거를 반환한다."""

    def debug(self, message: str, metadata: Optional[dict[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, message, metadata=metadata)

    def info(self, message: str, metadata: Optional[dict[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, message, metadata=metadata)

    def warning(self, message: str, metadata: Optional[dict[str, Any]] = None) -> None:
        self.log(LogLevel.WARNING, message, metadata=metadata)

    def error(self, message: str, metadata: Optional[dict[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, message, metadata=metadata)

    def critical(self, message: str, metadata: Optional[dict[str, Any]] = None) -> None:
        self.log(LogLevel.CRITICAL, message, metadata=metadata)


class InMemoryLogger(Logger):
    """인메모리 로거 구현체."""

    def __init__(
        self,
        name: str,
        repository: Optional[LogRepository] = None,
        base_context: Optional[LogContext] = None,
        emit_stdout: Optional[bool] = None,
    ) -> None:
        self._name = name
        self._repository = repository or InMemoryLogRepository()
        self._base_context = base_context
        self._emit_stdout = _read_emit_stdout_env() if emit_stdout is None else emit_stdout

    @property
    def name(self) -> str:
        """로거 이름을 반환한다."""

        return self._name

    @property
    def repository(self) -> LogRepository:
        """저장소를 반환한다."""

        return self._repository

    def log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        record = LogRecord(
            level=level,
            message=message,
            timestamp=datetime.now(timezone.utc),
            logger_name=self._name,
            context=self._merge_context(context),
            metadata=metadata or {},
        )
        self._repository.add(record)
        if self._emit_stdout:
            self._write_stdout(record)

    def with_context(self, context: LogContext) -> "Logger":
        return InMemoryLogger(
            name=self._name,
            repository=self._repository,
            base_context=self._merge_context(context),
            emit_stdout=self._emit_stdout,
        )

    def _merge_context(self, context: Optional[LogContext]) -> Optional[LogContext]:
        if self._base_context is None:
            return context
        if context is None:
            return self._base_context
        return LogContext(
            trace_id=context.trace_id or self._base_context.trace_id,
            operation=context.operation or self._base_context.operation,
            source=context.source or self._base_context.source,
            tags={**self._base_context.tags, **context.tags},
        )

    def _write_stdout(self, record: LogRecord) -> None:
        payload: dict[str, object] = {
            "timestamp": record.timestamp.astimezone(timezone.utc).isoformat(),
            "level": record.level.value,
            "logger": record.logger_name,
            "message": record.message,
        }
        if record.context is not None:
            payload["context"] = record.context.model_dump(exclude_none=True)
        if record.metadata:
            payload["metadata"] = record.metadata
        print(json.dumps(payload, ensure_ascii=False, default=str), flush=True)


def _read_emit_stdout_env() -> bool:
    raw = os.getenv("LOG_STDOUT")
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def create_default_logger(name: str) -> InMemoryLogger:
    """기본 인메모리 로거를 생성한다."""

    return InMemoryLogger(name=name)
