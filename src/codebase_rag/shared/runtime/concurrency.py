"""
목적: N개 동시 실행 제한 조합기를 제공한다.
설명: 세마포어로 동시 실행 수를 제한하고, 하나가 끝나면 대기 중인 다음 항목을 시작한다.
디자인 패턴: 함수형 유틸
참조: src/codebase_rag/core/knowledge/service.py
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


async def run_concurrent(
    items: Sequence[ItemT],
    limit: int,
    worker: Callable[[ItemT], Awaitable[ResultT]],
) -> list[ResultT]:
    """항목별 작업을 최대 `limit`개까지 동시에 실행한다.

    Args:
        items: 처리할 항목 목록.
        limit: 동시 실행 상한(1 미만이면 1로 간주).
        worker: 항목 하나를 처리하는 코루틴 함수.

    Returns:
        입력 순서와 같은 순서의 결과 목록. 모든 작업이 끝난 뒤 반환한다.

    Raises:
        worker가 던진 첫 예외. 이 경우 남은 작업은 취소된다.
    """

    if not items:
        return []

    semaphore = asyncio.Semaphore(max(1, int(limit)))

    async def _guarded(item: ItemT) -> ResultT:
        async with semaphore:
            return await worker(item)

    tasks = [asyncio.ensure_future(_guarded(item)) for item in items]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


__all__ = ["run_concurrent"]
