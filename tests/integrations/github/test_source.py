"""
목적: GitHub 저장소 소스 어댑터 동작을 검증한다.
설명: 참조 파싱, main -> master 브랜치 폴백, 브랜치 없음, raw 본문 조회, 오류 상태를 확인한다.
디자인 패턴: 테스트 더블(Mock Transport)
참조: src/codebase_rag/integrations/github/source.py
"""

from __future__ import annotations

import httpx
import pytest

from codebase_rag.integrations.github import GitHubRepositorySource, RepoReference, parse_repo_reference
from codebase_rag.shared.exceptions import BaseAppException


@pytest.mark.parametrize(
    "reference",
    [
        "octo/hello",
        "https://github.com/octo/hello",
        "http://www.github.com/octo/hello.git",
        "github.com/octo/hello/tree/main/src",
        "  https://github.com/octo/hello/  ",
    ],
)
def test_parse_repo_reference_variants(reference: str) -> None:
    """지원하는 참조 형식에서 owner/repo를 추출해야 한다."""

    assert parse_repo_reference(reference) == RepoReference(owner="octo", repo="hello")


@pytest.mark.parametrize("reference", ["", "octo", "https://github.com/octo", "octo/he llo"])
def test_parse_repo_reference_rejects_invalid(reference: str) -> None:
    """형식이 맞지 않으면 GITHUB_REPO_INVALID를 던져야 한다."""

    with pytest.raises(BaseAppException) as exc_info:
        parse_repo_reference(reference)

    assert exc_info.value.code == "GITHUB_REPO_INVALID"
    assert exc_info.value.message == "Invalid GitHub URL. Expected format: https://github.com/owner/repo"


@pytest.mark.asyncio
async def test_resolve_tree_falls_back_to_master() -> None:
    """main 트리가 없으면 master 트리를 사용해야 한다."""

    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        if request.url.path.endswith("/git/trees/main"):
            return httpx.Response(404, json={"message": "Not Found"})
        assert request.url.params["recursive"] == "1"
        return httpx.Response(
            200,
            json={
                "truncated": True,
                "tree": [
                    {"path": "src", "type": "tree"},
                    {"path": "src/app.py", "type": "blob", "size": 12, "sha": "abc"},
                ],
            },
        )

    source = GitHubRepositorySource(transport=httpx.MockTransport(handler))

    tree = await source.resolve_tree(RepoReference(owner="octo", repo="hello"))

    assert tree.branch == "master"
    assert [entry.path for entry in tree.blobs()] == ["src/app.py"]
    assert requested == ["/repos/octo/hello/git/trees/main", "/repos/octo/hello/git/trees/master"]


@pytest.mark.asyncio
async def test_resolve_tree_without_known_branch() -> None:
    """main/master가 모두 없으면 GITHUB_BRANCH_NOT_FOUND를 던져야 한다."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    source = GitHubRepositorySource(transport=httpx.MockTransport(handler))

    with pytest.raises(BaseAppException) as exc_info:
        await source.resolve_tree(RepoReference(owner="octo", repo="hello"))

    assert exc_info.value.code == "GITHUB_BRANCH_NOT_FOUND"
    assert exc_info.value.message == "Could not find branch main or master in octo/hello."


@pytest.mark.asyncio
async def test_fetch_tree_error_status() -> None:
    """404 이외의 오류 상태는 GITHUB_API_ERROR로 변환되어야 한다."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "rate limited"})

    source = GitHubRepositorySource(transport=httpx.MockTransport(handler))

    with pytest.raises(BaseAppException) as exc_info:
        await source.fetch_tree(RepoReference(owner="octo", repo="hello"), "main")

    assert exc_info.value.code == "GITHUB_API_ERROR"
    assert exc_info.value.message == "GitHub API Error: 403 (octo/hello)"


@pytest.mark.asyncio
async def test_fetch_text_uses_raw_url_and_token() -> None:
    """raw 본문은 브랜치/경로 URL로 조회하고 토큰이 있으면 헤더에 실어야 한다."""

    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if request.url.path.endswith("missing.py"):
            return httpx.Response(404, text="404: Not Found")
        return httpx.Response(200, text="print('hi')\n")

    source = GitHubRepositorySource(token="ghp-test", transport=httpx.MockTransport(handler))
    reference = RepoReference(owner="octo", repo="hello")

    text = await source.fetch_text(reference, "main", "src/app.py")

    assert text == "print('hi')\n"
    assert str(captured[0].url) == "https://raw.githubusercontent.com/octo/hello/main/src/app.py"
    assert captured[0].headers["Authorization"] == "Bearer ghp-test"
    with pytest.raises(BaseAppException) as exc_info:
        await source.fetch_text(reference, "main", "missing.py")
    assert exc_info.value.message == "Fetch Error: 404 (octo/hello)"
