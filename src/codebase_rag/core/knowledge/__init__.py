"""
목적: 지식 베이스 공개 API를 제공한다.
설명: 청커, 파일 필터, 수집 서비스, 파일 뷰 파생 함수와 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/core/knowledge/service.py
"""

from codebase_rag.core.knowledge.chunking import TextChunk, chunk_file, chunk_text, resolve_chunk_params
from codebase_rag.core.knowledge.file_filter import is_file_allowed, is_probably_text
from codebase_rag.core.knowledge.file_view import build_file_tree, compute_file_paths, reconstruct_file
from codebase_rag.core.knowledge.models import (
    FileNode,
    IngestionOutcome,
    IngestionReport,
    LocalFile,
    SourceFile,
)
from codebase_rag.core.knowledge.retrieval import ensure_signature_compatible, search_store
from codebase_rag.core.knowledge.service import ABORTED_STATUS, EmbeddingsFactory, KnowledgeBaseService

__all__ = [
    "ABORTED_STATUS",
    "EmbeddingsFactory",
    "FileNode",
    "IngestionOutcome",
    "IngestionReport",
    "KnowledgeBaseService",
    "LocalFile",
    "SourceFile",
    "TextChunk",
    "build_file_tree",
    "chunk_file",
    "chunk_text",
    "compute_file_paths",
    "ensure_signature_compatible",
    "is_file_allowed",
    "is_probably_text",
    "reconstruct_file",
    "resolve_chunk_params",
    "search_store",
]
