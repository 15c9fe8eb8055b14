"""
목적: 호스트 UI가 구독/폴링할 수 있는 상태 문자열 보드를 제공한다.
설명: 최신 상태 값과 최근 이력을 보관하고 변경 시 구독자에게 알린다.
디자인 패턴: 옵저버 패턴
참조: src/codebase_rag/core/knowledge/service.py
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import Optional

from codebase_rag.shared.logging import Logger, create_default_logger

StatusListener = Callable[[str], None]


class StatusBoard:
    """관찰 가능한 상태 문자열 보관소."""

    def __init__(
        self,
        initial: str = "",
        history_size: int = 100,
        logger: Optional[Logger] = None,
    ) -> None:
        self._value = initial
        self._history: deque[str] = deque(maxlen=max(1, int(history_size)))
        self._listeners: list[StatusListener] = []
        self._logger = logger or create_default_logger("StatusBoard")

    @property
    def value(self) -> str:
        """현재 상태 문자열을 반환한다."""

        return self._value

    def history(self) -> list[str]:
        """최근 상태 이력을 오래된 순서로 반환한다."""

        return list(self._history)

    def set(self, message: str) -> None:
        """상태를 갱신하고 구독자에게 알린다."""

        self._value = message
        self._history.append(message)
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception as error:  # noqa: BLE001 - 구독자 오류는 상태 갱신을 막지 않는다
                self._logger.warning(f"status.listener.failed: error={error}")

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """구독자를 등록하고 해제 함수를 반환한다."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


__all__ = ["StatusBoard", "StatusListener"]
