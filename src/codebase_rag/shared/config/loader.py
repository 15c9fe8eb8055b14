"""
목적: 애플리케이션 설정 로더를 제공한다.
설명: dict/JSON 파일/환경 변수를 순서대로 깊은 병합해 설정 사전을 생성한다.
디자인 패턴: 빌더 패턴
참조: src/codebase_rag/shared/config/settings.py, src/codebase_rag/shared/const/__init__.py
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from codebase_rag.shared.const import SharedConst
from codebase_rag.shared.logging import Logger, create_default_logger


class ConfigLoader:
    """설정 로더 구현체이다.

    나중에 추가된 소스가 앞선 소스를 덮어쓴다.

    Args:
        logger: 주입 가능한 로거.
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger or create_default_logger("ConfigLoader")
        self._sources: list[Dict[str, Any]] = []

    def add_dict(self, data: Optional[Mapping[str, Any]]) -> "ConfigLoader":
        """딕셔너리 설정을 추가한다."""

        if data:
            self._sources.append(dict(data))
        return self

    def add_json_file(
        self,
        path: str | Path | None,
        required: bool = False,
    ) -> "ConfigLoader":
        """JSON 파일 설정을 추가한다."""

        if not path:
            if required:
                raise ValueError("설정 파일 경로가 비어 있습니다.")
            return self
        file_path = Path(path)
        if not file_path.exists():
            if required:
                raise FileNotFoundError(str(file_path))
            self._logger.warning(f"config.file.missing: path={file_path}")
            return self
        try:
            payload = json.loads(file_path.read_text(encoding=SharedConst.DEFAULT_ENCODING))
        except json.JSONDecodeError as exc:
            raise ValueError(f"JSON 설정 파일 파싱에 실패했습니다: {file_path}") from exc
        if not isinstance(payload, dict):
            raise ValueError("JSON 설정 파일은 최상위가 객체여야 합니다.")
        self._sources.append(payload)
        return self

    def add_env(
        self,
        prefix: str = SharedConst.ENV_PREFIX,
        delimiter: str = SharedConst.ENV_NESTED_DELIMITER,
    ) -> "ConfigLoader":
        """접두사가 붙은 환경 변수를 중첩 키로 변환해 추가한다.

        예: ``CODEBASE_RAG__RAG__MIN_RELEVANCE_SCORE=0.6`` -> ``{"rag": {"min_relevance_score": 0.6}}``
        """

        env_data: Dict[str, Any] = {}
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            parts = [part.lower() for part in key[len(prefix) :].split(delimiter) if part]
            if not parts:
                continue
            self._assign_nested(env_data, parts, self._parse_value(value))
        if env_data:
            self._sources.append(env_data)
        return self

    def build(self, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """수집된 설정을 병합해 반환한다."""

        merged: Dict[str, Any] = {}
        for source in self._sources:
            merged = self._merge(merged, source)
        if overrides:
            merged = self._merge(merged, dict(overrides))
        return merged

    def _assign_nested(self, root: Dict[str, Any], keys: list[str], value: Any) -> None:
        current = root
        for part in keys[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[keys[-1]] = value

    def _merge(self, base: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in incoming.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _parse_value(self, raw: str) -> Any:
        lowered = raw.strip().lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        if lowered in {"null", "none"}:
            return None
        # 숫자/배열/객체 리터럴은 JSON으로 해석하고, 실패하면 원문을 유지한다.
        if lowered[:1] in set("-0123456789[{"):
            try:
                return json.loads(raw)
            except json.JSONDecodeError:
                return raw
        return raw
