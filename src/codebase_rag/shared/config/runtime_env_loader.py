"""
목적: 런타임 환경별 `.env` 로딩을 제공한다.
설명: 프로젝트 루트 `.env`를 로드한 뒤 `ENV` 값에 맞는 `.env.<env>` 파일을 추가로 로드한다.
디자인 패턴: 전략 패턴
참조: src/codebase_rag/shared/config/settings.py
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from codebase_rag.shared.logging import Logger, create_default_logger


class RuntimeEnvironmentLoader:
    """런타임 환경별 `.env` 로더이다.

    동작 순서:
    1. 프로젝트 루트의 `.env`를 로드한다(이미 설정된 환경 변수는 유지).
    2. `ENV` 값을 읽어 런타임 환경을 결정한다. 비어 있으면 `local`이다.
    3. `<root>/.env.<env>` 파일이 있으면 추가로 로드한다.
    """

    _ENV_ALIASES = {
        "development": "dev",
        "staging": "stg",
        "production": "prod",
    }

    def __init__(
        self,
        project_root: Optional[Path] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._project_root = Path(project_root or Path.cwd())
        self._logger = logger or create_default_logger("RuntimeEnvironmentLoader")

    @property
    def project_root(self) -> Path:
        """프로젝트 루트 경로를 반환한다."""

        return self._project_root

    def load(self) -> str:
        """환경 파일을 로드하고 결정된 런타임 환경 이름을 반환한다."""

        root_env = self._project_root / ".env"
        if root_env.exists():
            load_dotenv(root_env, override=False)
        env_name = self._resolve_env_name()
        stage_env = self._project_root / f".env.{env_name}"
        if env_name != "local" and stage_env.exists():
            load_dotenv(stage_env, override=False)
            self._logger.info(f"config.env.loaded: env={env_name}, path={stage_env}")
        return env_name

    def _resolve_env_name(self) -> str:
        raw = (os.getenv("ENV") or "").strip().lower()
        if not raw:
            return "local"
        return self._ENV_ALIASES.get(raw, raw)
