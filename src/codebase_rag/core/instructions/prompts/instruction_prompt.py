"""
목적: 프로젝트 안내문 생성용 프롬프트를 정의한다.
설명: 폴더 안내문(구조/접근 방식/개선점)과 파일 요약 안내문 두 가지 프롬프트를
      textwrap + PromptTemplate 모듈 싱글턴으로 제공한다.
디자인 패턴: 모듈 싱글턴
참조: src/codebase_rag/core/instructions/service.py, src/codebase_rag/core/chat/prompts/system_prompt.py
"""

from __future__ import annotations

import textwrap

from langchain_core.prompts import PromptTemplate

FOLDER_SYSTEM_PROMPT = (
    "You are an architecture assistant that analyzes code projects. Be specific and useful."
)

FILE_SYSTEM_PROMPT = (
    "You are a documentation assistant. Answer briefly and to the point. Only the essential information."
)

_FOLDER_USER_PROMPT = textwrap.dedent(
"""
Analyze the folder "{folder_path}" of the project.

Files in the folder: {file_list}

File contents:
{file_contents}

Write a detailed guide for this folder in markdown:

## Folder overview
What this folder is and its role in the project.

## Files
For each file: its purpose and main entities (classes, functions, interfaces).

## Approach
Patterns, principles and coding style used in this folder.

## Improvement tips
Recommendations to improve the architecture, structure or readability.

## Potential issues
Logic errors, anti-patterns or likely bugs, if any.
"""
).strip()

_FILE_USER_PROMPT = textwrap.dedent(
"""
Describe the file "{file_name}" (path: {file_path}).

Content:
```
{content}
```

Briefly describe:
- **Purpose**: what this file is for and what it does (1-2 sentences)
- **Main entities**: classes, functions, interfaces, constants with a short description of each
- **Dependencies**: what the file depends on (key imports)

Format: markdown, no filler, as compact as possible.
"""
).strip()

FOLDER_USER_PROMPT = PromptTemplate.from_template(_FOLDER_USER_PROMPT)
FILE_USER_PROMPT = PromptTemplate.from_template(_FILE_USER_PROMPT)

__all__ = ["FILE_SYSTEM_PROMPT", "FILE_USER_PROMPT", "FOLDER_SYSTEM_PROMPT", "FOLDER_USER_PROMPT"]
