"""
목적: GitHub 저장소 소스 공개 API를 제공한다.
설명: 저장소 참조 파서, 소스 어댑터, 트리 모델을 노출한다.
디자인 패턴: 퍼사드
참조: src/codebase_rag/integrations/github/source.py
"""

from codebase_rag.integrations.github.models import RepoReference, RepositoryTree, TreeEntry
from codebase_rag.integrations.github.source import GitHubRepositorySource, parse_repo_reference

__all__ = [
    "GitHubRepositorySource",
    "RepoReference",
    "RepositoryTree",
    "TreeEntry",
    "parse_repo_reference",
]
