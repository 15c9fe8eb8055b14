"""
목적: 소스 텍스트를 겹치는 청크로 분할한다.
설명: 고정 크기 창을 전진시키되, 자르기 직전 줄바꿈(없으면 `;`/`}`) 경계로 당겨 맞춘다.
      당긴 결과가 창의 `min_chunk_ratio`보다 짧아지면 원래 위치에서 자른다.
      다음 청크는 `end - overlap`에서 시작한다.
디자인 패턴: 함수형 변환 모듈
참조: src/codebase_rag/core/knowledge/service.py
"""

from __future__ import annotations

from dataclasses import dataclass

from codebase_rag.core.knowledge.const import DATA_EXTENSIONS
from codebase_rag.shared.config import IngestionSettings


@dataclass(frozen=True)
class TextChunk:
    """원문 오프셋이 기록된 청크."""

    text: str
    start: int
    end: int


def chunk_text(
    text: str,
    chunk_size: int,
    overlap: int,
    *,
    newline_window_ratio: float = 0.8,
    min_chunk_ratio: float = 0.5,
) -> list[TextChunk]:
    """텍스트를 경계 보정된 겹치는 청크 목록으로 분할한다.

    Args:
        text: 원문.
        chunk_size: 창 크기(문자 수).
        overlap: 인접 청크 겹침 문자 수.
        newline_window_ratio: 이 비율 뒤쪽에서 줄바꿈을 찾지 못하면 `;`/`}`를 찾는다.
        min_chunk_ratio: 보정된 청크가 이 비율보다 짧으면 보정을 버린다.

    Raises:
        ValueError: `chunk_size <= 0`, `overlap < 0`, `overlap >= chunk_size`인 경우.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size는 1 이상이어야 합니다.")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap은 0 이상, chunk_size 미만이어야 합니다.")

    length = len(text)
    if length <= chunk_size:
        return [TextChunk(text=text, start=0, end=length)]

    chunks: list[TextChunk] = []
    start = 0
    while start < length:
        end = start + chunk_size
        if end < length:
            split = text.rfind("\n", 0, end + 1)
            if split < start + chunk_size * newline_window_ratio:
                split = max(text.rfind(";", 0, end + 1), text.rfind("}", 0, end + 1))
            if split > start + chunk_size * min_chunk_ratio:
                end = split + 1
        else:
            end = length

        chunks.append(TextChunk(text=text[start:end], start=start, end=end))
        if end >= length:
            break
        next_start = end - overlap
        # 큰 overlap과 짧은 보정 청크가 겹치면 제자리걸음하므로 겹침 없이 전진한다
        start = next_start if next_start > start else end
    return chunks


def resolve_chunk_params(path: str, settings: IngestionSettings) -> tuple[int, int]:
    """파일 확장자에 맞는 (chunk_size, overlap)을 반환한다."""

    lower = path.lower()
    if any(lower.endswith(extension) for extension in DATA_EXTENSIONS):
        return settings.data_chunk_size, settings.data_chunk_overlap
    return settings.code_chunk_size, settings.code_chunk_overlap


def chunk_file(path: str, content: str, settings: IngestionSettings) -> list[TextChunk]:
    """파일 종류에 맞는 창 크기로 본문을 분할한다."""

    size, overlap = resolve_chunk_params(path, settings)
    return chunk_text(
        content,
        size,
        overlap,
        newline_window_ratio=settings.newline_window_ratio,
        min_chunk_ratio=settings.min_chunk_ratio,
    )


__all__ = ["TextChunk", "chunk_file", "chunk_text", "resolve_chunk_params"]
