"""
목적: GitHub 저장소 소스 어댑터를 제공한다.
설명: 저장소 참조를 해석하고, 재귀 트리 목록과 raw 파일 본문을 REST로 조회한다.
      기본 브랜치는 `main` -> `master` 순으로 탐색하며 404는 다음 후보로 넘어간다.
디자인 패턴: 어댑터 패턴
참조: src/codebase_rag/integrations/github/models.py, src/codebase_rag/core/knowledge/service.py
"""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

import httpx

from codebase_rag.integrations.github.models import RepoReference, RepositoryTree, TreeEntry
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import Logger, create_default_logger

_DEFAULT_API_BASE_URL = "https://api.github.com"
_DEFAULT_RAW_BASE_URL = "https://raw.githubusercontent.com"
_DEFAULT_BRANCH_CANDIDATES = ("main", "master")
_URL_PREFIX_PATTERN = re.compile(r"^(?:https?://)?(?:www\.)?github\.com/", re.IGNORECASE)
_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def parse_repo_reference(reference: str) -> RepoReference:
    """`owner/repo` 또는 GitHub URL에서 저장소 참조를 추출한다.

    Raises:
        BaseAppException: 형식이 올바르지 않은 경우(GITHUB_REPO_INVALID).
    """

    raw = (reference or "").strip()
    clean = _URL_PREFIX_PATTERN.sub("", raw).strip("/")
    parts = [part for part in clean.split("/") if part]
    if len(parts) >= 2:
        owner, repo = parts[0], parts[1]
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if _NAME_PATTERN.match(owner) and repo and _NAME_PATTERN.match(repo):
            return RepoReference(owner=owner, repo=repo)
    detail = ExceptionDetail(
        code="GITHUB_REPO_INVALID",
        cause=f"unparsable repository reference: {raw!r}",
        hint="https://github.com/owner/repo 또는 owner/repo 형식을 사용하세요.",
        metadata={"reference": raw},
    )
    raise BaseAppException("Invalid GitHub URL. Expected format: https://github.com/owner/repo", detail)


class GitHubRepositorySource:
    """GitHub REST 기반 저장소 소스.

    Args:
        api_base_url: GitHub API 기본 URL.
        raw_base_url: raw 콘텐츠 기본 URL.
        token: 선택적 액세스 토큰(비공개 저장소/레이트 리밋 완화용).
        branch_candidates: 기본 브랜치 탐색 순서.
        timeout: HTTP 타임아웃(초).
        transport: 테스트용 httpx 비동기 전송 계층.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        *,
        api_base_url: str = _DEFAULT_API_BASE_URL,
        raw_base_url: str = _DEFAULT_RAW_BASE_URL,
        token: Optional[str] = None,
        branch_candidates: Sequence[str] = _DEFAULT_BRANCH_CANDIDATES,
        timeout: float = 30.0,
        transport: Optional[Any] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._raw_base_url = raw_base_url.rstrip("/")
        self._token = token
        self._branch_candidates = tuple(branch_candidates)
        self._timeout = timeout
        self._transport = transport
        self._logger = logger or create_default_logger("GitHubRepositorySource")

    async def resolve_tree(self, reference: RepoReference) -> RepositoryTree:
        """기본 브랜치를 탐색해 재귀 트리를 반환한다.

        Raises:
            BaseAppException: 후보 브랜치가 모두 없을 때(GITHUB_BRANCH_NOT_FOUND).
        """

        for branch in self._branch_candidates:
            entries = await self.fetch_tree(reference, branch)
            if entries is not None:
                self._logger.info(
                    f"github.tree.resolved: repo={reference.full_name}, branch={branch}, entries={len(entries)}"
                )
                return RepositoryTree(reference=reference, branch=branch, entries=entries)
            self._logger.info(f"github.branch.missing: repo={reference.full_name}, branch={branch}")

        candidates = " or ".join(self._branch_candidates)
        detail = ExceptionDetail(
            code="GITHUB_BRANCH_NOT_FOUND",
            cause=f"none of the branches exist: {candidates}",
            metadata={"owner": reference.owner, "repo": reference.repo},
        )
        raise BaseAppException(
            f"Could not find branch {candidates} in {reference.full_name}.", detail
        )

    async def fetch_tree(self, reference: RepoReference, branch: str) -> Optional[list[TreeEntry]]:
        """브랜치의 재귀 트리를 조회한다. 브랜치가 없으면(404) None을 반환한다."""

        url = f"{self._api_base_url}/repos/{reference.owner}/{reference.repo}/git/trees/{branch}"
        response = await self._get(reference, url, params={"recursive": "1"})
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise self._api_error(reference, f"GitHub API Error: {response.status_code}", response.status_code)
        payload = response.json()
        if payload.get("truncated"):
            self._logger.warning(f"github.tree.truncated: repo={reference.full_name}, branch={branch}")
        return [
            TreeEntry.model_validate(item)
            for item in payload.get("tree") or []
            if isinstance(item, dict) and item.get("path")
        ]

    async def fetch_text(self, reference: RepoReference, branch: str, path: str) -> str:
        """raw 파일 본문을 텍스트로 조회한다."""

        url = f"{self._raw_base_url}/{reference.owner}/{reference.repo}/{branch}/{path}"
        response = await self._get(reference, url)
        if response.status_code >= 400:
            raise self._api_error(reference, f"Fetch Error: {response.status_code}", response.status_code)
        return response.text

    async def _get(
        self,
        reference: RepoReference,
        url: str,
        params: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                return await client.get(url, params=params, headers=headers)
        except httpx.TransportError as error:
            self._logger.error(f"github.request.failed: repo={reference.full_name}, url={url}, error={error}")
            detail = ExceptionDetail(
                code="GITHUB_API_ERROR",
                cause=str(error),
                metadata={"owner": reference.owner, "repo": reference.repo, "url": url},
            )
            raise BaseAppException(
                f"GitHub request failed for {reference.full_name}: {error}", detail, error
            ) from error

    def _api_error(self, reference: RepoReference, message: str, status: int) -> BaseAppException:
        self._logger.error(f"github.response.failed: repo={reference.full_name}, status={status}")
        detail = ExceptionDetail(
            code="GITHUB_API_ERROR",
            cause=f"status={status}",
            metadata={"owner": reference.owner, "repo": reference.repo, "status": status},
        )
        return BaseAppException(f"{message} ({reference.full_name})", detail)


__all__ = ["GitHubRepositorySource", "parse_repo_reference"]
