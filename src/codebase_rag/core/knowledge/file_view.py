"""
목적: 저장된 청크에서 파일 단위 뷰를 파생한다.
설명: 고유 파일 경로 목록, 폴더 우선 정렬 트리, 겹침을 제거한 파일 본문 재구성을 제공한다.
      모두 요청 시점에 저장소에서 다시 계산하는 풀 방식이다.
디자인 패턴: 함수형 변환 모듈
참조: src/codebase_rag/integrations/vector_store/store.py, src/codebase_rag/core/knowledge/models.py
"""

from __future__ import annotations

from typing import Iterable, Sequence

from codebase_rag.core.knowledge.models import FileNode
from codebase_rag.integrations.vector_store import VectorDocument, VectorStore


def compute_file_paths(store: VectorStore) -> list[str]:
    """저장소 문서의 고유 파일 경로를 정렬해 반환한다."""

    return sorted({document.file_path for document in store.get_all_documents()})


def build_file_tree(paths: Iterable[str], open_paths: Iterable[str] = ()) -> list[FileNode]:
    """경로 목록으로 중첩 트리를 만든다. 각 레벨은 폴더 먼저, 이름순이다."""

    opened = set(open_paths)
    root: list[FileNode] = []
    for path in sorted(paths):
        parts = path.split("/")
        level_nodes = root
        current_path = ""
        for index, part in enumerate(parts):
            is_file = index == len(parts) - 1
            current_path = f"{current_path}/{part}" if current_path else part
            node = next((item for item in level_nodes if item.name == part), None)
            if node is None:
                node = FileNode(
                    name=part,
                    path=current_path,
                    type="file" if is_file else "folder",
                    level=index,
                    is_open=current_path in opened,
                )
                level_nodes.append(node)
                level_nodes.sort(key=lambda item: (item.type != "folder", item.name.lower(), item.name))
            level_nodes = node.children
    return root


def reconstruct_file(documents: Sequence[VectorDocument], path: str) -> str:
    """청크를 시작 오프셋 순으로 이어 붙여 파일 본문을 복원한다.

    앞 청크 끝과 겹치는 `prev_end - next_start` 문자는 다음 청크에서 잘라낸다.
    """

    chunks = sorted(
        (document for document in documents if document.file_path == path),
        key=lambda document: document.start,
    )
    reconstructed = ""
    last_end = 0
    for chunk in chunks:
        if chunk.start <= last_end and reconstructed:
            overlap = last_end - chunk.start
            if overlap < len(chunk.content):
                reconstructed += chunk.content[overlap:]
        else:
            reconstructed += chunk.content
        last_end = max(last_end, chunk.end)
    return reconstructed


__all__ = ["build_file_tree", "compute_file_paths", "reconstruct_file"]
