"""
AI 분석 요청/결과 수신 서비스 모듈

요청(trigger)은 외부 분석기로 케이스 정보를 보내기만 하고 엔티티를 변경하지 않는다.
결과 수신(ingest)은 분석 요약 upsert와 케이스 상태 변경을 하나의 트랜잭션으로 적용한다.
"""
from typing import Any, Dict
from kyc_review.db.connection import DatabaseManager
from kyc_review.db.models import Case, Document
from kyc_review.db.repositories import (
    AnalysisSummaryRepository,
    CaseRepository,
    DocumentRepository,
)
from kyc_review.schemas import AnalysisResult, parse_model
from kyc_review.services.analyzer_client import AnalyzerClient
from kyc_review.types import AnalyzerPayload, TriggerResult
from kyc_review.utils.constants import INGEST_MAX_ATTEMPTS, CaseStatus, DocumentType
from kyc_review.utils.exceptions import ConstraintViolationError, PreconditionFailedError
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)


def build_analyzer_payload(case: Case, report: Document) -> AnalyzerPayload:
    """외부 분석기 요청 본문 생성"""
    return {
        "caseId": case.id,
        "caseNumber": case.case_number,
        "clientName": case.client_name,
        "clientType": case.client_type,
        "country": case.country,
        "businessType": case.business_type,
        "industry": case.industry,
        "sourceOfWealth": case.source_of_wealth,
        "screeningReport": {
            "id": report.id,
            "fileName": report.file_name,
            "locator": report.locator,
            "mimeType": report.mime_type,
        },
    }


class AnalysisService:
    """분석 요청 및 결과 반영 클래스"""

    def __init__(self, db_manager: DatabaseManager, analyzer_client: AnalyzerClient):
        self.db_manager = db_manager
        self.analyzer_client = analyzer_client

    def trigger_analysis(self, case_id: str) -> TriggerResult:
        """
        케이스 분석 요청

        가장 최근에 업로드된 screening_report 문서를 기준으로 요청한다.

        Args:
            case_id: 케이스 ID

        Returns:
            {"triggered": bool, "caseId": str, "response": 분석기 응답}

        Raises:
            NotFoundError: 케이스가 없는 경우
            PreconditionFailedError: screening_report 문서가 없는 경우
            AnalysisTriggerFailed: 분석기 호출 실패
        """
        with self.db_manager.get_db_session() as session:
            case = CaseRepository(session).get_or_raise(case_id)
            reports = DocumentRepository(session).list_for_case(
                case_id, DocumentType.SCREENING_REPORT.value
            )
            if not reports:
                raise PreconditionFailedError(
                    "분석을 요청하려면 screening_report 문서가 필요합니다.",
                    field="documents"
                )
            payload = build_analyzer_payload(case, reports[0])

        if not self.analyzer_client.is_configured:
            logger.warning(f"분석기 URL이 설정되지 않아 분석 요청을 건너뜀: {case_id}")
            return {"triggered": False, "caseId": case_id, "response": None}

        response = self.analyzer_client.send(payload)
        logger.info(f"분석 요청 완료: {case_id} (report={payload['screeningReport']['id']})")
        return {"triggered": True, "caseId": case_id, "response": response}

    def trigger_analysis_quietly(self, case_id: str) -> bool:
        """
        업로드 후 백그라운드 분석 요청

        실패는 로그만 남기고 호출자에게 전파하지 않는다.

        Returns:
            실제로 요청을 보냈으면 True
        """
        try:
            return self.trigger_analysis(case_id)["triggered"]
        except Exception as e:
            logger.error(f"자동 분석 요청 실패: {case_id} - {str(e)}")
            return False

    def ingest_analysis_result(self, case_id: str, result: Dict[str, Any]) -> Dict[str, Any]:
        """
        분석 결과 반영

        같은 결과가 다시 들어와도 요약은 1건으로 유지되며 processedAt만 갱신된다.

        Args:
            case_id: 케이스 ID
            result: 분석기 콜백 본문

        Returns:
            저장된 분석 요약

        Raises:
            ValidationError: 필수 필드 누락 또는 riskScore 범위 오류
            NotFoundError: 케이스가 없는 경우
        """
        payload = dict(result or {})
        if case_id is not None:
            payload["caseId"] = case_id
        data = parse_model(AnalysisResult, payload)

        for attempt in range(1, INGEST_MAX_ATTEMPTS + 1):
            try:
                saved = self._apply_result(data)
            except ConstraintViolationError as e:
                # 같은 케이스의 요약을 다른 요청이 먼저 생성함: 새 트랜잭션에서 갱신으로 재적용
                if e.field != "case_id" or attempt == INGEST_MAX_ATTEMPTS:
                    raise
                logger.warning(
                    f"분석 요약 동시 생성 충돌 (시도 {attempt}/{INGEST_MAX_ATTEMPTS}): {data.case_id}"
                )
                continue

            logger.info(f"분석 결과 반영 완료: {data.case_id} (riskScore={data.risk_score})")
            return saved

    def _apply_result(self, data: AnalysisResult) -> Dict[str, Any]:
        """요약 upsert와 케이스 상태 변경을 한 트랜잭션으로 적용"""
        with self.db_manager.get_db_session() as session:
            cases = CaseRepository(session)
            cases.get_or_raise(data.case_id)
            summary = AnalysisSummaryRepository(session).upsert(data.case_id, {
                "risk_score": data.risk_score,
                "summary": data.summary,
                "red_flags": list(data.red_flags),
                "missing_info": list(data.missing_info),
                "recommendation": data.recommendation,
                "processing_time": data.processing_time,
                "model_used": data.model_used,
            })
            cases.update(data.case_id, {
                "status": CaseStatus.AI_READY.value,
                "risk_score": data.risk_score,
            })
            return summary.to_json()
