"""
목적: shared 패키지의 공개 API를 제공한다.
설명: 예외/로깅/런타임 공통 모듈에 대한 접근 포인트를 제공한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/shared/exceptions, src/codebase_rag/shared/logging, src/codebase_rag/shared/runtime
"""

from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import (
    InMemoryLogger,
    LogContext,
    LogLevel,
    LogRecord,
    Logger,
    LogRepository,
    create_default_logger,
)
from codebase_rag.shared.runtime import StatusBoard, run_concurrent

__all__ = [
    "BaseAppException",
    "ExceptionDetail",
    "InMemoryLogger",
    "LogContext",
    "LogLevel",
    "LogRecord",
    "Logger",
    "LogRepository",
    "StatusBoard",
    "create_default_logger",
    "run_concurrent",
]
