"""
사용자 인증 API 라우터
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, status
from kyc_review.api.auth import get_current_user
from kyc_review.api.dependencies import get_user_service
from kyc_review.services.user_service import UserService
from kyc_review.utils.response import success_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: UserService = Depends(get_user_service)
):
    """사용자 등록 (역할은 항상 user)"""
    return success_response(service.register(payload), message="등록되었습니다.")


@router.post("/login")
async def login(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    service: UserService = Depends(get_user_service)
):
    """이메일/비밀번호 로그인"""
    return success_response(service.login(payload))


@router.get("/me")
async def me(current_user: Dict[str, Any] = Depends(get_current_user)):
    """현재 사용자 정보"""
    return success_response(current_user)


@router.post("/logout")
async def logout(_: Dict[str, Any] = Depends(get_current_user)):
    """로그아웃 (토큰은 클라이언트에서 폐기)"""
    return success_response(None, message="로그아웃되었습니다.")
