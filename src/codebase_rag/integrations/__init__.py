"""
목적: 외부 연동 패키지를 정의한다.
설명: LLM, GitHub, 영속 저장소, 벡터 저장소 어댑터를 하위 패키지로 제공한다.
디자인 패턴: 패키지 구성
참조: src/codebase_rag/integrations/llm, src/codebase_rag/integrations/vector_store
"""
