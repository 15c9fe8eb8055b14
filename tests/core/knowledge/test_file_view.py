"""
목적: 파일 단위 파생 뷰를 검증한다.
설명: 고유 경로 목록, 폴더 우선 트리 정렬, 겹침 제거 본문 재구성을 확인한다.
디자인 패턴: 단위 테스트
참조: src/codebase_rag/core/knowledge/file_view.py
"""

from __future__ import annotations

import pytest

from codebase_rag.core.knowledge import build_file_tree, chunk_text, compute_file_paths, reconstruct_file
from codebase_rag.integrations.db import VectorDocument
from codebase_rag.integrations.vector_store import VectorStore


def _chunk_doc(path: str, index: int, content: str, start: int, end: int) -> VectorDocument:
    return VectorDocument(
        id=f"{path}-{index}",
        file_path=path,
        content=content,
        embedding=[1.0],
        metadata={"start": start, "end": end},
    )


def test_reconstruct_file_removes_overlap() -> None:
    """겹치는 청크는 겹친 부분을 한 번만 포함해야 한다."""

    documents = [
        _chunk_doc("a.txt", 1, "DEFGH", 3, 8),
        _chunk_doc("a.txt", 0, "ABCDE", 0, 5),
        _chunk_doc("b.txt", 0, "zzz", 0, 3),
    ]

    assert reconstruct_file(documents, "a.txt") == "ABCDEFGH"
    assert reconstruct_file(documents, "missing.txt") == ""


def test_reconstruct_file_round_trips_chunker_output() -> None:
    """청크 분할 결과를 재구성하면 원문과 같아야 한다."""

    text = "".join(f"const value{index} = {index};\n" for index in range(120))
    documents = [
        _chunk_doc("src/values.js", index, chunk.text, chunk.start, chunk.end)
        for index, chunk in enumerate(chunk_text(text, 500, 50))
    ]

    assert len(documents) > 1
    assert reconstruct_file(documents, "src/values.js") == text


def test_build_file_tree_orders_folders_first() -> None:
    """각 레벨은 폴더 먼저, 대소문자 무시 이름순이어야 한다."""

    tree = build_file_tree(
        ["src/b.py", "README.md", "src/a/x.py", "docs/Guide.md", "a.txt"],
        open_paths=["src"],
    )

    assert [(node.name, node.type) for node in tree] == [
        ("docs", "folder"),
        ("src", "folder"),
        ("a.txt", "file"),
        ("README.md", "file"),
    ]
    src = tree[1]
    assert src.is_open
    assert not tree[0].is_open
    assert [(node.name, node.level) for node in src.children] == [("a", 1), ("b.py", 1)]
    nested = src.children[0].children[0]
    assert (nested.path, nested.level, nested.type) == ("src/a/x.py", 2, "file")


@pytest.mark.asyncio
async def test_compute_file_paths_is_sorted_and_unique() -> None:
    """저장소 경로 목록은 중복 없이 정렬되어야 한다."""

    store = VectorStore()
    await store.add_documents(
        [
            _chunk_doc("src/z.py", 0, "z", 0, 1),
            _chunk_doc("src/a.py", 0, "a", 0, 1),
            _chunk_doc("src/z.py", 1, "zz", 1, 3),
        ],
        "openai:m",
    )

    assert compute_file_paths(store) == ["src/a.py", "src/z.py"]
