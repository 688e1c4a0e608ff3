"""
케이스 관련 API 라우터
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from kyc_review.api.auth import get_current_user
from kyc_review.api.dependencies import get_analysis_service, get_case_service
from kyc_review.services.analysis_service import AnalysisService
from kyc_review.services.case_lifecycle import CaseLifecycleService
from kyc_review.utils.constants import DEFAULT_PAGE_SIZE
from kyc_review.utils.response import success_response
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cases", tags=["cases"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_case(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 생성 (요청자가 담당 RM)"""
    case = service.create_case(payload, owner_id=current_user["id"])
    return success_response(case, message="케이스가 생성되었습니다.")


@router.get("")
async def list_cases(
    search: Optional[str] = None,
    case_status: Optional[str] = Query(default=None, alias="status"),
    rm_id: Optional[str] = Query(default=None, alias="rmId"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    _: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 목록 조회"""
    result = service.list_cases(
        search=search,
        status=case_status,
        rm_id=rm_id,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit
    )
    return success_response(result)


@router.get("/{case_id}")
async def get_case(
    case_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 상세 조회 (문서, 분석 요약, 담당 RM 포함)"""
    return success_response(service.get_case(case_id))


@router.put("/{case_id}")
async def update_case(
    case_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    _: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 필드 수정"""
    case = service.update_case_fields(case_id, payload)
    return success_response(case, message="케이스가 수정되었습니다.")


@router.delete("/{case_id}")
async def delete_case(
    case_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 삭제"""
    service.delete_case(case_id)
    return success_response({"id": case_id}, message="케이스가 삭제되었습니다.")


@router.patch("/{case_id}/status")
async def update_case_status(
    case_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 상태 변경 (in_review / approved / rejected)"""
    new_status = (payload or {}).get("status")
    case = service.update_case_status(case_id, new_status, acting_user_id=current_user["id"])
    return success_response(case, message="케이스 상태가 변경되었습니다.")


@router.get("/{case_id}/summary")
async def get_case_summary(
    case_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: CaseLifecycleService = Depends(get_case_service)
):
    """케이스 분석 요약 조회"""
    return success_response(service.get_summary(case_id))


@router.post("/{case_id}/trigger-analysis")
def trigger_analysis(
    case_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    service: AnalysisService = Depends(get_analysis_service)
):
    """수동 분석 요청 (외부 호출이 있으므로 스레드풀에서 실행)"""
    result = service.trigger_analysis(case_id)
    message = "분석이 요청되었습니다." if result["triggered"] else "분석기가 설정되지 않아 요청을 건너뛰었습니다."
    return success_response(result, message=message)
