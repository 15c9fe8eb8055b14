"""
목적: 공통 상수 집합을 제공한다.
설명: 프로젝트 전역에서 사용하는 인코딩/환경 변수 규칙 값을 정의한다.
디자인 패턴: 상수 객체
참조: src/codebase_rag/shared/config/loader.py
"""


class SharedConst:
    """공통 상수 집합이다.

    Attributes:
        DEFAULT_ENCODING: 기본 파일 인코딩.
        ENV_PREFIX: 설정 환경 변수 접두사.
        ENV_NESTED_DELIMITER: 환경 변수 키를 중첩 경로로 해석하는 구분자.
        STORE_SIGNATURE_META_KEY: 벡터 저장소 시그니처 메타 키.
    """

    DEFAULT_ENCODING = "utf-8"
    ENV_PREFIX = "CODEBASE_RAG__"
    ENV_NESTED_DELIMITER = "__"
    STORE_SIGNATURE_META_KEY = "storeSignature"


__all__ = ["SharedConst"]
