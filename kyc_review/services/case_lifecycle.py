"""
케이스 라이프사이클 서비스 모듈

케이스 생성, 조회, 필드 수정, 상태 변경, 삭제를 담당한다.
각 작업은 하나의 DB 트랜잭션으로 적용된다.
"""
from typing import Any, Dict, List, Optional
from kyc_review.db.connection import DatabaseManager
from kyc_review.db.models import Case
from kyc_review.db.repositories import (
    AnalysisSummaryRepository,
    CaseRepository,
    DocumentRepository,
    FindSpec,
    UserRepository,
)
from kyc_review.schemas import CaseCreate, CasePatch, parse_model, patch_values
from kyc_review.services.file_storage import LocalFileStorage
from kyc_review.types import CaseListPage
from kyc_review.utils.constants import (
    CASE_NUMBER_MAX_ATTEMPTS,
    CASE_SORT_FIELDS,
    CASE_STATUSES,
    CaseStatus,
    ClientType,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    STATUS_TRANSITIONS,
)
from kyc_review.utils.exceptions import (
    ConstraintViolationError,
    InvalidStatusError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from kyc_review.utils.helpers import generate_case_number, normalize_text, utcnow
from kyc_review.utils.logger import get_logger
from kyc_review.utils.response import pagination_meta

logger = get_logger(__name__)


def _apply_date_rule(values: Dict[str, Any], client_type: str) -> None:
    """고객 유형에 맞지 않는 날짜 필드는 비운다"""
    if client_type == ClientType.INDIVIDUAL.value:
        values["date_of_incorporation"] = None
    elif client_type == ClientType.CORPORATE.value:
        values["date_of_birth"] = None


def case_detail_json(case: Case) -> Dict[str, Any]:
    """
    케이스 상세 응답 생성

    Args:
        case: 세션에 연결된 Case 인스턴스

    Returns:
        문서 목록, 분석 요약, 담당 RM 정보를 포함한 딕셔너리
    """
    data = case.to_json()
    data["documents"] = [document.to_json() for document in case.documents]
    data["aiSummary"] = case.analysis_summary.to_json() if case.analysis_summary else None
    data["relationshipManager"] = (
        case.relationship_manager.to_brief() if case.relationship_manager else None
    )
    return data


def case_list_item_json(case: Case, document_count: int) -> Dict[str, Any]:
    """케이스 목록 항목 응답 생성"""
    data = case.to_json()
    summary = case.analysis_summary
    data["aiSummary"] = (
        {"riskScore": summary.risk_score, "recommendation": summary.recommendation}
        if summary else None
    )
    data["relationshipManager"] = (
        case.relationship_manager.to_brief() if case.relationship_manager else None
    )
    data["documentCount"] = document_count
    return data


class CaseLifecycleService:
    """케이스 라이프사이클 관리 클래스"""

    def __init__(self, db_manager: DatabaseManager, storage: Optional[LocalFileStorage] = None):
        self.db_manager = db_manager
        self.storage = storage

    def create_case(self, fields: Dict[str, Any], owner_id: str) -> Dict[str, Any]:
        """
        새 케이스 생성

        Args:
            fields: 요청 본문 (camelCase 키)
            owner_id: 담당 RM 사용자 ID

        Returns:
            생성된 케이스 상세

        Raises:
            ValidationError: 필수 필드 누락 또는 형식 오류
            ConstraintViolationError: 케이스 번호를 끝내 확보하지 못한 경우
        """
        data = parse_model(CaseCreate, fields if fields is not None else {})
        values = data.model_dump()
        values["client_type"] = data.client_type.value
        _apply_date_rule(values, values["client_type"])

        for attempt in range(1, CASE_NUMBER_MAX_ATTEMPTS + 1):
            case_number = generate_case_number()
            try:
                with self.db_manager.get_db_session() as session:
                    UserRepository(session).get_or_raise(owner_id)
                    case = CaseRepository(session).create(
                        case_number=case_number,
                        status=CaseStatus.PENDING.value,
                        risk_score=None,
                        rm_id=owner_id,
                        **values
                    )
                    result = case_detail_json(case)
            except ConstraintViolationError as e:
                if e.field != "case_number":
                    raise
                logger.warning(
                    f"케이스 번호 충돌 (시도 {attempt}/{CASE_NUMBER_MAX_ATTEMPTS}): {case_number}"
                )
                continue

            logger.info(f"케이스 생성 완료: {result['id']} ({result['caseNumber']})")
            return result

        raise ConstraintViolationError("케이스 번호를 생성하지 못했습니다.", field="case_number")

    def get_case(self, case_id: str) -> Dict[str, Any]:
        """
        케이스 상세 조회

        Raises:
            NotFoundError: 케이스가 없는 경우
        """
        with self.db_manager.get_db_session() as session:
            case = CaseRepository(session).get_or_raise(case_id)
            return case_detail_json(case)

    def list_cases(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        rm_id: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE
    ) -> CaseListPage:
        """
        케이스 목록 조회 (검색/필터/정렬/페이지네이션)

        Args:
            search: 고객명 또는 케이스 번호 부분 일치 (대소문자 무시)
            status: 상태 필터
            rm_id: 담당 RM 필터
            sort_by: 정렬 기준 (createdAt, updatedAt, caseNumber, clientName, status, riskScore)
            sort_order: asc 또는 desc
            page: 페이지 번호 (1부터)
            limit: 페이지 크기 (1~100)

        Returns:
            {"cases": [...], "pagination": {...}}
        """
        if sort_by not in CASE_SORT_FIELDS:
            raise ValidationError(
                f"정렬할 수 없는 필드입니다: {sort_by}",
                field="sortBy",
                details={"allowed": list(CASE_SORT_FIELDS)}
            )
        sort_order = (sort_order or "desc").lower()
        if sort_order not in ("asc", "desc"):
            raise ValidationError(f"정렬 방향이 올바르지 않습니다: {sort_order}", field="sortOrder")
        if status and status not in CASE_STATUSES:
            raise InvalidStatusError(f"알 수 없는 상태입니다: {status}", details={"allowed": CASE_STATUSES})
        if page < 1:
            raise ValidationError("page는 1 이상이어야 합니다.", field="page")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit은 1~{MAX_PAGE_SIZE} 사이여야 합니다.", field="limit")

        search = normalize_text(search) if search else None
        spec = FindSpec(
            search=search or None,
            search_fields=CaseRepository.SEARCH_FIELDS,
            filters={"status": status or None, "rm_id": rm_id or None},
            order_by=CASE_SORT_FIELDS[sort_by],
            descending=sort_order == "desc",
            offset=(page - 1) * limit,
            limit=limit
        )

        with self.db_manager.get_db_session() as session:
            repo = CaseRepository(session)
            total = repo.count(spec)
            cases = repo.find(spec)
            counts = repo.document_counts([case.id for case in cases])
            items = [case_list_item_json(case, counts.get(case.id, 0)) for case in cases]

        return {"cases": items, "pagination": pagination_meta(page, limit, total)}

    def update_case_fields(self, case_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        """
        케이스 필드 수정

        수정 불가 필드(id, caseNumber, createdAt, rmId, status 등)는 조용히 무시한다.

        Args:
            case_id: 케이스 ID
            partial: 변경할 필드 (camelCase 키)

        Returns:
            수정된 케이스 상세
        """
        values = patch_values(parse_model(CasePatch, partial if partial is not None else {}))

        with self.db_manager.get_db_session() as session:
            repo = CaseRepository(session)
            case = repo.get_or_raise(case_id)
            if values:
                _apply_date_rule(values, values.get("client_type", case.client_type))
                repo.update(case_id, values)
                logger.info(f"케이스 필드 수정: {case_id} - {sorted(values)}")
            return case_detail_json(case)

    def update_case_status(self, case_id: str, new_status: str, acting_user_id: str) -> Dict[str, Any]:
        """
        케이스 상태 변경

        Args:
            case_id: 케이스 ID
            new_status: 변경할 상태 (in_review, approved, rejected)
            acting_user_id: 변경을 수행하는 사용자 ID

        Returns:
            변경된 케이스 상세

        Raises:
            NotFoundError: 케이스가 없는 경우
            InvalidStatusError: 알 수 없는 상태 또는 허용되지 않은 전이
        """
        with self.db_manager.get_db_session() as session:
            repo = CaseRepository(session)
            case = repo.get_or_raise(case_id)

            if new_status not in CASE_STATUSES:
                raise InvalidStatusError(
                    f"알 수 없는 상태입니다: {new_status}",
                    details={"allowed": CASE_STATUSES}
                )

            allowed_from = STATUS_TRANSITIONS.get(new_status, frozenset())
            if case.status not in allowed_from:
                raise InvalidStatusError(
                    f"'{case.status}' 상태에서 '{new_status}' 상태로 변경할 수 없습니다.",
                    details={"current": case.status, "requested": new_status}
                )

            values: Dict[str, Any] = {"status": new_status}
            now = utcnow()
            if new_status == CaseStatus.APPROVED.value:
                values.update(approved_at=now, approved_by=acting_user_id)
            elif new_status == CaseStatus.REJECTED.value:
                values.update(rejected_at=now, rejected_by=acting_user_id)

            previous = case.status
            repo.update(case_id, values)
            result = case_detail_json(case)

        logger.info(f"케이스 상태 변경: {case_id} {previous} -> {new_status} (by {acting_user_id})")
        return result

    def delete_case(self, case_id: str) -> None:
        """
        케이스 삭제 (문서, 분석 요약 함께 삭제)

        DB 삭제가 커밋된 뒤 저장된 파일을 best-effort로 정리한다.
        """
        with self.db_manager.get_db_session() as session:
            documents = DocumentRepository(session).list_for_case(case_id)
            locators = [document.locator for document in documents]
            CaseRepository(session).delete(case_id)

        logger.info(f"케이스 삭제 완료: {case_id} (문서 {len(locators)}건)")
        self._discard_files(locators)
        if self.storage is not None:
            self.storage.delete_case_dir(case_id)

    def get_summary(self, case_id: str) -> Dict[str, Any]:
        """
        케이스 분석 요약 조회

        Raises:
            NotFoundError: 케이스 또는 분석 요약이 없는 경우
        """
        with self.db_manager.get_db_session() as session:
            CaseRepository(session).get_or_raise(case_id)
            summary = AnalysisSummaryRepository(session).get_by_case_id(case_id)
            if summary is None:
                raise NotFoundError("AnalysisSummary", case_id)
            return summary.to_json()

    def _discard_files(self, locators: List[str]) -> None:
        if self.storage is None:
            return
        for locator in locators:
            try:
                self.storage.delete(locator)
            except StorageError as e:
                logger.warning(f"케이스 파일 정리 실패: {locator} - {str(e)}")
