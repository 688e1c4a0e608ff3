"""
커스텀 예외 클래스 정의
"""
from typing import Any, Dict, Optional


class KycReviewError(Exception):
    """기본 예외 클래스"""
    pass


class ValidationError(KycReviewError):
    """입력 검증 실패 시 발생하는 예외"""
    def __init__(self, message: str, field: str = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.field = field
        self.details = details
        super().__init__(f"검증 실패: {message}")


class InvalidStatusError(ValidationError):
    """허용되지 않은 케이스 상태 또는 상태 전이"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, field="status", details=details)


class PreconditionFailedError(ValidationError):
    """작업 선행 조건이 충족되지 않았을 때 발생하는 예외"""
    pass


class NotFoundError(KycReviewError):
    """엔티티를 찾을 수 없을 때 발생하는 예외"""
    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity}을(를) 찾을 수 없습니다: {identifier}")


class ConstraintViolationError(KycReviewError):
    """유니크 제약 조건 위반 시 발생하는 예외"""
    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(f"제약 조건 위반: {message}")


class UnauthorizedError(KycReviewError):
    """인증 실패 (잘못된 자격 증명, 토큰 또는 웹훅 시크릿)"""
    def __init__(self, message: str = "인증이 필요합니다."):
        super().__init__(message)


class AnalysisTriggerFailed(KycReviewError):
    """외부 분석기 호출 실패 시 발생하는 예외"""
    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(f"분석 요청 실패: {message}")


class StorageError(KycReviewError):
    """저장소(DB/파일) 오류 시 발생하는 예외"""
    def __init__(self, message: str):
        super().__init__(f"저장소 오류: {message}")
