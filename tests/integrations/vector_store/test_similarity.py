"""
목적: 코사인 유사도 계산을 검증한다.
설명: 범위 보정, 자기 유사도, 길이 불일치/영벡터 처리를 확인한다.
디자인 패턴: 단위 테스트
참조: src/codebase_rag/integrations/vector_store/similarity.py
"""

from __future__ import annotations

import pytest

from codebase_rag.integrations.vector_store import cosine_similarity


def test_cosine_similarity_basic_values() -> None:
    """같은 방향은 1, 반대 방향은 -1, 직교는 0이어야 한다."""

    assert cosine_similarity([0.3, 0.4, 0.5], [0.3, 0.4, 0.5]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0


def test_cosine_similarity_degenerate_inputs() -> None:
    """길이 불일치/빈 벡터/영벡터는 예외 없이 0이어야 한다."""

    assert cosine_similarity([1.0, 2.0], [1.0]) == 0.0
    assert cosine_similarity([], []) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_cosine_similarity_stays_in_range() -> None:
    """부동소수 오차가 있어도 [-1, 1] 범위를 벗어나지 않아야 한다."""

    vector = [0.1] * 1000
    score = cosine_similarity(vector, vector)

    assert -1.0 <= score <= 1.0
