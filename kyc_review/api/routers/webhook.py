"""
외부 분석기 콜백 API 라우터
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends
from kyc_review.api.auth import verify_webhook_key
from kyc_review.api.dependencies import get_analysis_service
from kyc_review.services.analysis_service import AnalysisService
from kyc_review.utils.response import success_response
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])


@router.post("/analyzer", dependencies=[Depends(verify_webhook_key)])
async def receive_analysis_result(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: AnalysisService = Depends(get_analysis_service)
):
    """분석 결과 수신 (사용자 토큰 대신 X-API-Key로 보호)"""
    payload = payload or {}
    summary = service.ingest_analysis_result(payload.get("caseId"), payload)
    return success_response(summary, message="분석 결과가 반영되었습니다.")
