"""
목적: 벡터 유사도 계산 유틸을 제공한다.
설명: 코사인 유사도를 계산하며, 길이 불일치나 영벡터는 예외 없이 0으로 처리한다.
디자인 패턴: 함수형 유틸
참조: src/codebase_rag/integrations/vector_store/store.py
"""

from __future__ import annotations

import math
from typing import Sequence


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """두 벡터의 코사인 유사도를 [-1, 1] 범위로 계산한다."""

    if len(a) != len(b) or not a:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    # 부동소수 오차로 1을 살짝 넘는 값을 보정
    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))


__all__ = ["cosine_similarity"]
