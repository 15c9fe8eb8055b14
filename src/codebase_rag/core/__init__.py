"""
목적: 핵심 도메인 패키지를 정의한다.
설명: 지식 베이스 수집, 검색 증강 채팅, 프로젝트 안내문 생성 로직을 하위 패키지로 제공한다.
디자인 패턴: 패키지 구성
참조: src/codebase_rag/core/knowledge, src/codebase_rag/core/chat, src/codebase_rag/core/instructions
"""
