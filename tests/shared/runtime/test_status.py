"""
목적: 상태 보드의 구독/이력 동작을 검증한다.
설명: 상태 갱신 알림, 구독 해제, 구독자 오류 격리를 확인한다.
디자인 패턴: 옵저버 패턴
참조: src/codebase_rag/shared/runtime/status.py
"""

from __future__ import annotations

from codebase_rag.shared.logging import InMemoryLogger
from codebase_rag.shared.runtime import StatusBoard


def test_status_board_notifies_subscribers() -> None:
    """상태가 바뀌면 구독자에게 알리고 해제 후에는 알리지 않아야 한다."""

    board = StatusBoard(initial="Idle")
    received: list[str] = []
    unsubscribe = board.subscribe(received.append)

    board.set("Scanning 3 files...")
    unsubscribe()
    board.set("Done! Indexed 3 files.")

    assert board.value == "Done! Indexed 3 files."
    assert received == ["Scanning 3 files..."]
    assert board.history() == ["Scanning 3 files...", "Done! Indexed 3 files."]


def test_status_board_isolates_listener_errors() -> None:
    """구독자 예외는 로깅만 하고 다른 구독자 알림을 막지 않아야 한다."""

    logger = InMemoryLogger(name="status-test", emit_stdout=False)
    board = StatusBoard(history_size=2, logger=logger)
    received: list[str] = []

    def broken(_: str) -> None:
        raise RuntimeError("listener failure")

    board.subscribe(broken)
    board.subscribe(received.append)
    for message in ("a", "b", "c"):
        board.set(message)

    assert received == ["a", "b", "c"]
    assert board.history() == ["b", "c"]
    assert any("status.listener.failed" in record.message for record in logger.repository.list())
