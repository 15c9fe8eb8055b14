"""
목적: 런타임 유틸 공개 API를 제공한다.
설명: 동시 실행 제한 조합기와 상태 보드를 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/shared/runtime/concurrency.py, src/codebase_rag/shared/runtime/status.py
"""

from codebase_rag.shared.runtime.concurrency import run_concurrent
from codebase_rag.shared.runtime.status import StatusBoard, StatusListener

__all__ = ["StatusBoard", "StatusListener", "run_concurrent"]
