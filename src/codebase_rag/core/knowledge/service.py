"""
목적: 코드베이스 지식 베이스 수집 파이프라인을 제공한다.
설명: 로컬 파일 또는 GitHub 저장소에서 텍스트 파일을 모아 청크로 나누고,
      제한된 동시성으로 임베딩한 뒤 한 번에 벡터 저장소에 추가한다.
      연속 임베딩 실패가 한도에 닿으면 제공자 장애로 보고 수집을 중단한다.
디자인 패턴: 파이프라인, 서킷 브레이커
참조: src/codebase_rag/shared/runtime/concurrency.py, src/codebase_rag/core/knowledge/chunking.py,
      src/codebase_rag/integrations/github/source.py
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from langchain_core.embeddings import Embeddings

from codebase_rag.core.knowledge.chunking import chunk_file
from codebase_rag.core.knowledge.const import BLOCKED_DIRECTORIES
from codebase_rag.core.knowledge.file_filter import is_file_allowed, is_probably_text
from codebase_rag.core.knowledge.file_view import compute_file_paths
from codebase_rag.core.knowledge.models import (
    IngestionOutcome,
    IngestionReport,
    LocalFile,
    SourceFile,
)
from codebase_rag.core.knowledge.retrieval import search_store
from codebase_rag.integrations.github import (
    GitHubRepositorySource,
    RepositoryTree,
    TreeEntry,
    parse_repo_reference,
)
from codebase_rag.integrations.llm import ProviderEmbeddings, aclose_embeddings
from codebase_rag.integrations.vector_store import SearchResult, VectorDocument, VectorStore
from codebase_rag.shared.config import IngestionSettings, LlmConfig, LlmConfigHolder
from codebase_rag.shared.const import SharedConst
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import Logger, create_default_logger
from codebase_rag.shared.runtime import StatusBoard, run_concurrent

EmbeddingsFactory = Callable[[LlmConfig], Embeddings]

ABORTED_STATUS = "Aborted: Connection Failed."


@dataclass
class _VectorizeRun:
    """한 번의 벡터화 실행 동안 공유되는 집계 상태."""

    max_consecutive_failures: int
    files_processed: int = 0
    vectors_created: int = 0
    failed_chunks: int = 0
    consecutive_failures: int = 0
    aborted: bool = False
    abort_reason: str = ""

    def record_success(self) -> None:
        self.consecutive_failures = 0
        self.vectors_created += 1

    def record_failure(self, reason: str) -> None:
        self.failed_chunks += 1
        self.consecutive_failures += 1
        if self.consecutive_failures >= self.max_consecutive_failures:
            self.aborted = True
            self.abort_reason = reason


class KnowledgeBaseService:
    """지식 베이스 수집/조회 서비스.

    Args:
        store: 벡터 저장소.
        config_holder: LLM 설정 보관소. 수집 시작 시점에 한 번 스냅샷을 잡는다.
        settings: 수집 설정.
        embeddings_factory: 설정 스냅샷으로 임베딩 어댑터를 만드는 함수.
        github_source: GitHub 저장소 소스.
        status: 진행 상태 보드.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        store: VectorStore,
        config_holder: LlmConfigHolder,
        *,
        settings: Optional[IngestionSettings] = None,
        embeddings_factory: EmbeddingsFactory = ProviderEmbeddings.from_config,
        github_source: Optional[GitHubRepositorySource] = None,
        status: Optional[StatusBoard] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._store = store
        self._config_holder = config_holder
        self._settings = settings or IngestionSettings()
        self._embeddings_factory = embeddings_factory
        self._logger = logger or create_default_logger("KnowledgeBaseService")
        self._github = github_source or GitHubRepositorySource(logger=self._logger)
        self._status = status or StatusBoard(logger=self._logger)
        self._ingesting = False

    @property
    def is_ingesting(self) -> bool:
        """수집 진행 여부를 반환한다."""

        return self._ingesting

    @property
    def status(self) -> StatusBoard:
        """진행 상태 보드를 반환한다."""

        return self._status

    def file_paths(self) -> list[str]:
        """저장소에 있는 고유 파일 경로를 정렬해 반환한다."""

        return compute_file_paths(self._store)

    def total_files(self) -> int:
        return len(self.file_paths())

    async def search(
        self,
        query: str,
        top_k: int = 10,
        min_score: float = 0.0,
    ) -> list[SearchResult]:
        """현재 임베딩 설정으로 저장소를 검색한다."""

        config = self._config_holder.get()
        embedder = self._embeddings_factory(config)
        try:
            return await search_store(self._store, embedder, config, query, top_k, min_score)
        finally:
            await aclose_embeddings(embedder)

    async def ingest_files(self, files: Sequence[LocalFile]) -> IngestionReport:
        """로컬 파일 묶음을 수집한다.

        Raises:
            BaseAppException: 진행 중 수집이 있거나(INGESTION_IN_PROGRESS)
                유효한 텍스트 파일이 없을 때(INGESTION_NO_VALID_FILES).
        """

        snapshot = list(files)
        async with self._ingestion_guard():
            config = self._config_holder.get()
            return await self._ingest_local(snapshot, config)

    async def ingest_directory(self, root: str | Path) -> IngestionReport:
        """디렉터리를 재귀 탐색해 수집한다. 경로는 루트 기준 POSIX 상대 경로이다.

        Raises:
            BaseAppException: 루트가 디렉터리가 아니거나 유효 파일이 없을 때
                (INGESTION_NO_VALID_FILES), 진행 중 수집이 있을 때.
        """

        root_path = Path(root)
        async with self._ingestion_guard():
            config = self._config_holder.get()
            if not await asyncio.to_thread(root_path.is_dir):
                raise _no_valid_files(f"Folder not found: {root_path}", root=str(root_path))
            files = await asyncio.to_thread(_walk_directory, root_path)
            return await self._ingest_local(files, config)

    async def ingest_github_repo(self, repo_url: str) -> IngestionReport:
        """GitHub 저장소를 수집한다.

        Raises:
            BaseAppException: 저장소 참조 오류, 브랜치 없음, GitHub API 오류,
                유효 파일 없음, 진행 중 수집이 있을 때.
        """

        async with self._ingestion_guard():
            config = self._config_holder.get()
            self._status.set("Clearing old database...")
            await self._store.clear()
            reference = parse_repo_reference(repo_url)
            self._logger.info(f"ingest.github.start: repo={reference.full_name}")
            self._status.set(f"Fetching GitHub Tree for {reference.full_name}...")
            tree = await self._github.resolve_tree(reference)

            blobs = tree.blobs()
            allowed = [entry for entry in blobs if is_file_allowed(entry.path)]
            if not allowed:
                raise _no_valid_files(
                    "No valid source files found in repository.",
                    scanned=len(blobs),
                    repo=reference.full_name,
                )
            self._status.set(f"Found {len(allowed)} files. Downloading...")
            sources = await self._download(tree, allowed)
            skipped = len(blobs) - len(sources)
            if not sources:
                raise _no_valid_files(
                    "No valid text files could be downloaded from repository.",
                    scanned=len(allowed),
                    repo=reference.full_name,
                )
            return await self._vectorize(sources, skipped, config)

    async def _ingest_local(self, files: list[LocalFile], config: LlmConfig) -> IngestionReport:
        self._logger.info(f"ingest.local.start: files={len(files)}")
        self._status.set("Clearing old database...")
        await self._store.clear()
        self._status.set(f"Scanning {len(files)} files...")
        sources, skipped = await self._read_local_files(files)
        if not sources:
            raise _no_valid_files(
                f"No valid text files found. Scanned {len(files)} files. "
                "Check if you selected a folder with only binaries or ignored folders.",
                scanned=len(files),
            )
        return await self._vectorize(sources, skipped, config)

    @asynccontextmanager
    async def _ingestion_guard(self) -> AsyncIterator[None]:
        if self._ingesting:
            detail = ExceptionDetail(
                code="INGESTION_IN_PROGRESS",
                cause="ingestion guard is already held",
                hint="진행 중인 수집이 끝난 뒤 다시 시도하세요.",
            )
            raise BaseAppException("Ingestion is already in progress.", detail)
        self._ingesting = True
        try:
            yield
        except BaseAppException as error:
            self._status.set(f"Error: {error.message}")
            self._logger.error(f"ingest.failed: code={error.code}, error={error.message}")
            raise
        except Exception as error:
            self._status.set(f"Error: {error}")
            self._logger.error(f"ingest.failed: error={error}")
            raise
        finally:
            self._ingesting = False

    async def _read_local_files(self, files: list[LocalFile]) -> tuple[list[SourceFile], int]:
        sources: list[SourceFile] = []
        skipped = 0

        async def read_one(local_file: LocalFile) -> None:
            nonlocal skipped
            path = local_file.relative_path
            if not is_file_allowed(path):
                skipped += 1
                return
            try:
                content = await asyncio.to_thread(
                    local_file.location.read_text,
                    encoding=SharedConst.DEFAULT_ENCODING,
                    errors="replace",
                )
            except OSError as error:
                self._logger.warning(f"ingest.read.failed: path={path}, error={error}")
                skipped += 1
                return
            if not is_probably_text(content):
                self._logger.debug(f"ingest.read.skipped: path={path}, reason=binary_or_empty")
                skipped += 1
                return
            sources.append(SourceFile(path=path, content=content))

        await run_concurrent(files, self._settings.download_concurrency, read_one)
        self._logger.info(f"ingest.scan.done: valid={len(sources)}, skipped={skipped}")
        return sources, skipped

    async def _download(self, tree: RepositoryTree, entries: list[TreeEntry]) -> list[SourceFile]:
        sources: list[SourceFile] = []
        errors: list[BaseAppException] = []
        total = len(entries)

        async def download_one(entry: TreeEntry) -> None:
            try:
                content = await self._github.fetch_text(tree.reference, tree.branch, entry.path)
            except BaseAppException as error:
                self._logger.warning(f"ingest.download.failed: path={entry.path}, error={error.message}")
                errors.append(error)
            else:
                if is_probably_text(content):
                    sources.append(SourceFile(path=entry.path, content=content))
            self._status.set(f"Downloading: {len(sources)}/{total}")

        await run_concurrent(entries, self._settings.download_concurrency, download_one)
        if not sources and errors:
            raise errors[0]
        return sources

    async def _vectorize(self, sources: list[SourceFile], skipped: int, config: LlmConfig) -> IngestionReport:
        embedder = self._embeddings_factory(config)
        try:
            return await self._embed_and_store(sources, skipped, config.embedding_signature(), embedder)
        finally:
            await aclose_embeddings(embedder)

    async def _embed_and_store(
        self,
        sources: list[SourceFile],
        skipped: int,
        signature: str,
        embedder: Embeddings,
    ) -> IngestionReport:
        total = len(sources)
        run = _VectorizeRun(max_consecutive_failures=self._settings.max_consecutive_failures)
        pending: list[VectorDocument] = []

        self._status.set(f"Preparing to vectorize {total} files...")
        self._logger.info(f"ingest.vectorize.start: files={total}, signature={signature}")

        async def process(source: SourceFile) -> None:
            if run.aborted:
                return
            try:
                chunks = chunk_file(source.path, source.content, self._settings)
                for index, chunk in enumerate(chunks):
                    if run.aborted:
                        break
                    try:
                        embedding = await embedder.aembed_query(chunk.text)
                    except Exception as error:  # noqa: BLE001 - 청크 단위 실패는 집계 후 계속한다
                        reason = error.message if isinstance(error, BaseAppException) else str(error)
                        self._logger.warning(
                            f"ingest.chunk.failed: path={source.path}, index={index}, error={reason}"
                        )
                        run.record_failure(reason)
                        continue
                    run.record_success()
                    pending.append(
                        VectorDocument(
                            id=f"{source.path}-{index}",
                            file_path=source.path,
                            content=chunk.text,
                            embedding=embedding,
                            metadata={"start": chunk.start, "end": chunk.end},
                        )
                    )
            finally:
                run.files_processed += 1
                if not run.aborted:
                    self._status.set(
                        f"Vectorizing... {run.files_processed}/{total} files ({run.vectors_created} vectors)"
                    )

        await run_concurrent(sources, self._settings.embedding_concurrency, process)

        if run.aborted:
            self._status.set(ABORTED_STATUS)
            self._logger.error(
                f"ingest.aborted: failures={run.consecutive_failures}, reason={run.abort_reason}"
            )
            return IngestionReport(
                outcome=IngestionOutcome.ABORTED,
                files_total=total,
                files_processed=run.files_processed,
                vectors_created=0,
                failed_chunks=run.failed_chunks,
                skipped_files=skipped,
                message=(
                    f"{ABORTED_STATUS} Failed to reach the embedding provider "
                    f"{run.consecutive_failures} times in a row. Reason: {run.abort_reason}"
                ),
            )

        if not pending:
            message = "Finished, but no vectors were generated."
            self._status.set(message)
            self._logger.warning(f"ingest.empty: files={total}, failed_chunks={run.failed_chunks}")
            return IngestionReport(
                outcome=IngestionOutcome.EMPTY,
                files_total=total,
                files_processed=run.files_processed,
                failed_chunks=run.failed_chunks,
                skipped_files=skipped,
                message=message,
            )

        self._status.set(f"Saving {len(pending)} vectors to database...")
        await self._store.add_documents(pending, signature)
        message = f"Done! Indexed {total} files."
        if run.failed_chunks:
            message += f" ({run.failed_chunks} chunks failed)"
        self._status.set(message)
        self._logger.info(
            f"ingest.done: files={total}, vectors={len(pending)}, failed_chunks={run.failed_chunks}"
        )
        return IngestionReport(
            outcome=IngestionOutcome.COMPLETED,
            files_total=total,
            files_processed=run.files_processed,
            vectors_created=len(pending),
            failed_chunks=run.failed_chunks,
            skipped_files=skipped,
            message=message,
        )


def _walk_directory(root: Path) -> list[LocalFile]:
    files: list[LocalFile] = []
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name.lower() not in BLOCKED_DIRECTORIES)
        for filename in sorted(filenames):
            location = Path(current) / filename
            files.append(LocalFile(relative_path=location.relative_to(root).as_posix(), location=location))
    return files


def _no_valid_files(message: str, **metadata: object) -> BaseAppException:
    detail = ExceptionDetail(
        code="INGESTION_NO_VALID_FILES",
        cause="no file passed the filter and text heuristic",
        metadata=dict(metadata),
    )
    return BaseAppException(message, detail)


__all__ = ["ABORTED_STATUS", "EmbeddingsFactory", "KnowledgeBaseService"]
