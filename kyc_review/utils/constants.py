"""
상수 정의 모듈
하드코딩된 값들을 한 곳에 모아 관리
"""
from enum import Enum
from typing import Dict, FrozenSet, List


# ============================================================================
# 케이스 상태
# ============================================================================

class CaseStatus(str, Enum):
    """케이스 상태 Enum"""
    PENDING = "pending"
    AI_READY = "ai_ready"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


CASE_STATUSES: List[str] = [s.value for s in CaseStatus]

# 상태 변경 API로 진입 가능한 상태 -> 허용되는 이전 상태
# pending은 생성 시에만, ai_ready는 분석 결과 수신 시에만 설정된다.
STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    CaseStatus.IN_REVIEW.value: frozenset({
        CaseStatus.PENDING.value,
        CaseStatus.AI_READY.value,
        CaseStatus.IN_REVIEW.value,
    }),
    CaseStatus.APPROVED.value: frozenset(CASE_STATUSES),
    CaseStatus.REJECTED.value: frozenset(CASE_STATUSES),
}


# ============================================================================
# 고객 유형
# ============================================================================

class ClientType(str, Enum):
    """고객 유형 Enum"""
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


# ============================================================================
# 문서 유형
# ============================================================================

class DocumentType(str, Enum):
    """증빙 문서 유형 Enum"""
    PASSPORT = "passport"
    BR_CERT = "br_cert"
    ADDRESS_PROOF = "address_proof"
    SCREENING_REPORT = "screening_report"
    OTHER = "other"


DOCUMENT_TYPES: List[str] = [d.value for d in DocumentType]


# ============================================================================
# 사용자 역할
# ============================================================================

class UserRole(str, Enum):
    """사용자 역할 Enum"""
    ADMIN = "admin"
    USER = "user"


# ============================================================================
# 파일 업로드
# ============================================================================

ALLOWED_EXTENSIONS: FrozenSet[str] = frozenset({
    ".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png", ".txt", ".xlsx", ".xls", ".csv"
})

DEFAULT_MIME_TYPE: str = "application/octet-stream"


# ============================================================================
# 케이스 목록 조회
# ============================================================================

# sortBy 파라미터 -> Case 모델 속성
CASE_SORT_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "caseNumber": "case_number",
    "clientName": "client_name",
    "status": "status",
    "riskScore": "risk_score",
}

DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

# 케이스 번호 충돌 시 재생성 횟수
CASE_NUMBER_MAX_ATTEMPTS: int = 5

# 동시 수신된 분석 결과가 요약 유니크 키에서 충돌할 때 재적용 횟수
INGEST_MAX_ATTEMPTS: int = 2

MIN_RISK_SCORE: int = 1
MAX_RISK_SCORE: int = 5
