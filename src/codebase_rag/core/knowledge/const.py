"""
목적: 지식 베이스 수집 상수를 제공한다.
설명: 바이너리 확장자, 차단 디렉터리/파일명, 데이터·문서 확장자 집합을 정의한다.
디자인 패턴: 상수 모듈
참조: src/codebase_rag/core/knowledge/file_filter.py, src/codebase_rag/core/knowledge/chunking.py
"""

from __future__ import annotations

BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {
        # 이미지
        ".png", ".jpg", ".jpeg", ".gif", ".ico", ".svg", ".webp", ".avif", ".bmp", ".tiff", ".psd",
        # 오디오/비디오
        ".mp4", ".mp3", ".wav", ".ogg", ".webm", ".mov", ".avi", ".mkv", ".flac", ".aac",
        # 압축
        ".zip", ".tar", ".gz", ".tgz", ".rar", ".7z", ".iso", ".dmg",
        # 바이너리 문서
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        # 실행 파일/라이브러리
        ".exe", ".dll", ".so", ".dylib", ".bin", ".obj", ".o", ".a", ".lib", ".class", ".pyc", ".pyd",
        # 데이터베이스
        ".db", ".sqlite", ".sqlite3", ".mdb", ".parquet",
        # 기타
        ".ds_store", ".map", ".woff", ".woff2", ".ttf", ".eot", ".suo", ".ntvs", ".njsproj",
    }
)

BLOCKED_DIRECTORIES: frozenset[str] = frozenset(
    {
        "node_modules", ".git", ".angular", ".nx", ".vscode", ".idea",
        "dist", "build", "out", "coverage", ".next", ".nuxt", ".cache",
        "__pycache__", "venv", "target", "vendor", "bin", "obj", ".gradle",
    }
)

BLOCKED_FILENAMES: frozenset[str] = frozenset(
    {
        "package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb",
        "cargo.lock", "gemfile.lock", "composer.lock", "poetry.lock",
        ".yarn-integrity", ".ds_store", "thumbs.db",
    }
)

DATA_EXTENSIONS: frozenset[str] = frozenset(
    {".json", ".yaml", ".yml", ".csv", ".xml", ".md", ".txt"}
)


__all__ = [
    "BINARY_EXTENSIONS",
    "BLOCKED_DIRECTORIES",
    "BLOCKED_FILENAMES",
    "DATA_EXTENSIONS",
]
