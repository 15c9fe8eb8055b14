"""
목적: 수집된 코드베이스로 폴더/파일 단위 프로젝트 안내문을 생성한다.
설명: 저장소 문서를 폴더별, 파일별로 묶고(청크는 파일 본문으로 복원),
      폴더 안내문과 그 폴더의 파일 안내문을 순서대로 LLM에 요청한다.
      항목 하나의 실패는 해당 항목을 error 상태로 기록하고 다음 항목으로 진행한다.
      진행 상황은 StatusBoard로 알리고, 결과는 마크다운 한 문서로 내보낼 수 있다.
디자인 패턴: 서비스 계층
참조: src/codebase_rag/core/knowledge/service.py, src/codebase_rag/core/knowledge/file_view.py,
      src/codebase_rag/integrations/llm/chat_client.py
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from langchain_core.messages import HumanMessage

from codebase_rag.core.instructions.models import (
    FileInstruction,
    FolderInstruction,
    InstructionStatus,
    file_name_of,
    folder_of,
)
from codebase_rag.core.instructions.prompts import (
    FILE_SYSTEM_PROMPT,
    FILE_USER_PROMPT,
    FOLDER_SYSTEM_PROMPT,
    FOLDER_USER_PROMPT,
)
from codebase_rag.core.knowledge import reconstruct_file
from codebase_rag.integrations.llm import ChatCompletionClient, describe_error
from codebase_rag.integrations.vector_store import VectorDocument, VectorStore
from codebase_rag.shared.config import LlmConfig, LlmConfigHolder
from codebase_rag.shared.exceptions import BaseAppException, ExceptionDetail
from codebase_rag.shared.logging import Logger, create_default_logger
from codebase_rag.shared.runtime import StatusBoard

InstructionClientFactory = Callable[[LlmConfig], ChatCompletionClient]

NO_FILES_STATUS = "No files loaded. Ingest a project first."

_MAX_FOLDER_FILE_CHARS = 3000
_MAX_FILE_CHARS = 4000
_TRUNCATED_SUFFIX = "\n... (truncated)"


class ProjectInstructionsService:
    """프로젝트 안내문 생성 서비스.

    Args:
        store: 벡터 저장소. 안내문 원문은 저장된 청크에서 복원한다.
        config_holder: LLM 설정 보관소. 생성 실행 시작 시점에 한 번 스냅샷을 잡는다.
        chat_client_factory: 설정 스냅샷으로 채팅 클라이언트를 만드는 함수.
        status: 진행 상태 보드.
        logger: 주입 가능한 로거.
    """

    def __init__(
        self,
        store: VectorStore,
        config_holder: LlmConfigHolder,
        *,
        chat_client_factory: InstructionClientFactory = ChatCompletionClient.from_config,
        status: Optional[StatusBoard] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._store = store
        self._config_holder = config_holder
        self._chat_client_factory = chat_client_factory
        self._logger = logger or create_default_logger("ProjectInstructionsService")
        self._status = status or StatusBoard(logger=self._logger)
        self._instructions: dict[str, FolderInstruction] = {}
        self._generating = False

    @property
    def is_generating(self) -> bool:
        return self._generating

    @property
    def status(self) -> StatusBoard:
        """진행 상태 보드를 반환한다."""

        return self._status

    @property
    def instructions(self) -> dict[str, FolderInstruction]:
        """폴더 경로별 안내문의 얕은 복사본을 반환한다."""

        return dict(self._instructions)

    def folder_paths(self) -> list[str]:
        return sorted(self._instructions)

    def total_items(self) -> int:
        """폴더 수와 파일 수의 합을 반환한다."""

        return sum(1 + len(folder.files) for folder in self._instructions.values())

    def completed_items(self) -> int:
        """완료 상태인 폴더/파일 안내문 수를 반환한다."""

        count = 0
        for folder in self._instructions.values():
            if folder.status == InstructionStatus.DONE:
                count += 1
            count += sum(
                1 for item in folder.file_instructions.values() if item.status == InstructionStatus.DONE
            )
        return count

    def progress(self) -> int:
        """완료 비율을 0~100 정수 백분율로 반환한다."""

        total = self.total_items()
        if total == 0:
            return 0
        return round(self.completed_items() / total * 100)

    async def generate_all(self) -> dict[str, FolderInstruction]:
        """모든 폴더와 파일의 안내문을 생성한다.

        폴더는 경로 알파벳 순으로, 각 폴더 안내문 다음에 그 폴더의 파일 안내문을 생성한다.
        저장소가 비어 있으면 상태만 남기고 빈 결과를 반환한다.

        Raises:
            BaseAppException: 다른 생성이 진행 중일 때(INSTRUCTIONS_IN_PROGRESS).
        """

        async with self._generation_guard():
            await self._store.ensure_restored()
            documents = self._store.get_all_documents()
            if not documents:
                self._status.set(NO_FILES_STATUS)
                self._logger.warning("instructions.skipped: reason=empty_store")
                return {}

            grouped = _group_by_folder(documents)
            self._instructions = {
                folder_path: _new_folder_entry(folder_path, files) for folder_path, files in grouped.items()
            }
            client = self._chat_client_factory(self._config_holder.get())
            folders = sorted(grouped)
            self._logger.info(f"instructions.generate.start: folders={len(folders)}, items={self.total_items()}")

            for index, folder_path in enumerate(folders, start=1):
                files = grouped[folder_path]
                self._status.set(f"Folder {index}/{len(folders)}: {folder_path}")
                try:
                    await self.generate_for_folder(folder_path, files, client)
                except Exception as error:  # noqa: BLE001 - 항목 실패는 기록하고 다음 항목으로 진행한다
                    self._logger.warning(
                        f"instructions.folder.failed: folder={folder_path}, error={describe_error(error)}"
                    )
                for file_path, content in files.items():
                    self._status.set(f"File: {file_name_of(file_path)} ({folder_path})")
                    try:
                        await self.generate_for_file(file_path, content, client)
                    except Exception as error:  # noqa: BLE001 - 항목 실패는 기록하고 다음 항목으로 진행한다
                        self._logger.warning(
                            f"instructions.file.failed: path={file_path}, error={describe_error(error)}"
                        )

            completed, total = self.completed_items(), self.total_items()
            self._status.set(f"Done! {completed}/{total} items")
            self._logger.info(f"instructions.generate.done: completed={completed}, total={total}")
            return self.instructions

    async def generate_for_folder(
        self,
        folder_path: str,
        files: Mapping[str, str],
        client: Optional[ChatCompletionClient] = None,
    ) -> FolderInstruction:
        """폴더 안내문 하나를 생성한다.

        Args:
            folder_path: 폴더 경로(최상위는 `"."`).
            files: 파일 경로 -> 파일 본문.
            client: 채팅 클라이언트. 생략하면 현재 설정으로 만든다.

        Raises:
            Exception: 채팅 호출 실패. 항목은 error 상태로 남는다.
        """

        entry = self._instructions.get(folder_path)
        if entry is None:
            entry = _new_folder_entry(folder_path, files)
            self._instructions[folder_path] = entry
        entry.status = InstructionStatus.GENERATING

        prompt = FOLDER_USER_PROMPT.format(
            folder_path=folder_path,
            file_list=", ".join(file_name_of(path) for path in files),
            file_contents="\n\n".join(
                f"### {file_name_of(path)}\n```\n{_truncate(content, _MAX_FOLDER_FILE_CHARS)}\n```"
                for path, content in files.items()
            ),
        )
        chat_client = client or self._chat_client_factory(self._config_holder.get())
        try:
            entry.instruction = await chat_client.acomplete([HumanMessage(content=prompt)], FOLDER_SYSTEM_PROMPT)
        except Exception as error:
            entry.status = InstructionStatus.ERROR
            entry.error = describe_error(error)
            raise
        entry.status = InstructionStatus.DONE
        entry.error = None
        return entry

    async def generate_for_file(
        self,
        file_path: str,
        content: str,
        client: Optional[ChatCompletionClient] = None,
    ) -> FileInstruction:
        """파일 안내문 하나를 생성한다.

        Raises:
            Exception: 채팅 호출 실패. 항목은 error 상태로 남는다.
        """

        folder_path = folder_of(file_path)
        folder = self._instructions.get(folder_path)
        if folder is None:
            folder = _new_folder_entry(folder_path, {file_path: content})
            self._instructions[folder_path] = folder
        entry = folder.file_instructions.get(file_path)
        if entry is None:
            entry = FileInstruction(file_path=file_path, file_name=file_name_of(file_path))
            folder.file_instructions[file_path] = entry
            folder.files.append(file_path)
        entry.status = InstructionStatus.GENERATING

        prompt = FILE_USER_PROMPT.format(
            file_name=entry.file_name,
            file_path=file_path,
            content=_truncate(content, _MAX_FILE_CHARS),
        )
        chat_client = client or self._chat_client_factory(self._config_holder.get())
        try:
            entry.instruction = await chat_client.acomplete([HumanMessage(content=prompt)], FILE_SYSTEM_PROMPT)
        except Exception as error:
            entry.status = InstructionStatus.ERROR
            entry.error = describe_error(error)
            raise
        entry.status = InstructionStatus.DONE
        entry.error = None
        return entry

    async def regenerate_folder(self, folder_path: str) -> FolderInstruction:
        """폴더 안내문과 그 폴더의 파일 안내문을 다시 생성한다.

        Raises:
            BaseAppException: 폴더에 저장된 파일이 없거나(INSTRUCTIONS_TARGET_NOT_FOUND)
                다른 생성이 진행 중일 때. 채팅 실패는 남은 항목을 건너뛰고 전파한다.
        """

        async with self._generation_guard():
            await self._store.ensure_restored()
            grouped = _group_by_folder(self._store.get_all_documents())
            files = grouped.get(folder_path)
            if not files:
                raise _target_not_found(folder_path)
            self._status.set(f"Regenerating: {folder_path}")
            client = self._chat_client_factory(self._config_holder.get())
            self._instructions[folder_path] = _new_folder_entry(folder_path, files)

            entry = await self.generate_for_folder(folder_path, files, client)
            for file_path, content in files.items():
                self._status.set(f"File: {file_name_of(file_path)}")
                await self.generate_for_file(file_path, content, client)
            self._status.set("Done!")
            self._logger.info(f"instructions.regenerate.done: folder={folder_path}, files={len(files)}")
            return entry

    async def regenerate_file(self, file_path: str) -> FileInstruction:
        """파일 안내문 하나를 다시 생성한다.

        Raises:
            BaseAppException: 저장된 파일이 아니거나(INSTRUCTIONS_TARGET_NOT_FOUND)
                다른 생성이 진행 중일 때. 채팅 실패는 전파한다.
        """

        async with self._generation_guard():
            await self._store.ensure_restored()
            content = reconstruct_file(self._store.get_all_documents(), file_path)
            if not content:
                raise _target_not_found(file_path)
            self._status.set(f"Regenerating: {file_name_of(file_path)}")
            entry = await self.generate_for_file(file_path, content)
            self._status.set("Done!")
            self._logger.info(f"instructions.regenerate.done: path={file_path}")
            return entry

    def export_markdown(self, generated_at: Optional[datetime] = None) -> str:
        """완료된 안내문을 폴더 경로 순으로 마크다운 한 문서로 만든다. 없으면 빈 문자열이다."""

        if not self._instructions:
            return ""
        timestamp = (generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
        lines = ["# Project Instructions", "", f"> Generated: {timestamp}", "", "---", ""]
        for folder_path in self.folder_paths():
            folder = self._instructions[folder_path]
            if folder.status != InstructionStatus.DONE or not folder.instruction:
                continue
            lines += [f"# Folder: {folder_path}", "", folder.instruction, ""]
            finished = sorted(
                (
                    item
                    for item in folder.file_instructions.values()
                    if item.status == InstructionStatus.DONE and item.instruction
                ),
                key=lambda item: item.file_name,
            )
            if finished:
                lines += ["## Files (detailed)", ""]
                for item in finished:
                    lines += [f"### File: {item.file_name}", "", item.instruction, ""]
            lines += ["---", ""]
        return "\n".join(lines)

    def clear(self) -> None:
        """생성된 안내문과 상태를 모두 비운다."""

        self._instructions = {}
        self._status.set("")

    @asynccontextmanager
    async def _generation_guard(self) -> AsyncIterator[None]:
        if self._generating:
            detail = ExceptionDetail(
                code="INSTRUCTIONS_IN_PROGRESS",
                cause="instruction generation is already running",
                hint="진행 중인 생성이 끝난 뒤 다시 시도하세요.",
            )
            raise BaseAppException("Instruction generation is already in progress.", detail)
        self._generating = True
        try:
            yield
        except Exception as error:
            message = describe_error(error)
            self._status.set(f"Error: {message}")
            self._logger.error(f"instructions.failed: error={message}")
            raise
        finally:
            self._generating = False


def _group_by_folder(documents: Sequence[VectorDocument]) -> dict[str, dict[str, str]]:
    by_path: dict[str, list[VectorDocument]] = {}
    for document in documents:
        by_path.setdefault(document.file_path, []).append(document)
    grouped: dict[str, dict[str, str]] = {}
    for path in sorted(by_path):
        grouped.setdefault(folder_of(path), {})[path] = reconstruct_file(by_path[path], path)
    return grouped


def _new_folder_entry(folder_path: str, files: Mapping[str, str]) -> FolderInstruction:
    return FolderInstruction(
        folder_path=folder_path,
        files=list(files),
        file_instructions={
            path: FileInstruction(file_path=path, file_name=file_name_of(path)) for path in files
        },
    )


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + _TRUNCATED_SUFFIX


def _target_not_found(path: str) -> BaseAppException:
    detail = ExceptionDetail(
        code="INSTRUCTIONS_TARGET_NOT_FOUND",
        cause="no stored document matches the requested path",
        metadata={"path": path},
    )
    return BaseAppException(f"No loaded files found for: {path}", detail)


__all__ = ["InstructionClientFactory", "NO_FILES_STATUS", "ProjectInstructionsService"]
