"""
API 인증 모듈
"""
import hmac
from typing import Any, Dict, Optional
from fastapi import Depends, Header, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from kyc_review.api.dependencies import get_user_service
from kyc_review.services.user_service import UserService, decode_access_token
from kyc_review.utils.exceptions import NotFoundError, UnauthorizedError
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)

# 헤더 누락도 401로 응답하기 위해 auto_error 비활성화
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    user_service: UserService = Depends(get_user_service)
) -> Dict[str, Any]:
    """
    Bearer 토큰으로 현재 사용자 확인

    Args:
        credentials: HTTP Bearer 토큰

    Returns:
        사용자 정보 (비밀번호 제외)

    Raises:
        UnauthorizedError: 토큰 누락/만료/위조 또는 사용자 없음
    """
    if credentials is None:
        raise UnauthorizedError()

    user_id = decode_access_token(credentials.credentials)
    try:
        return user_service.get_user(user_id)
    except NotFoundError:
        logger.warning(f"토큰의 사용자를 찾을 수 없음: {user_id}")
        raise UnauthorizedError("유효하지 않은 토큰입니다.")


def verify_webhook_key(request: Request, x_api_key: Optional[str] = Header(default=None)) -> None:
    """
    분석기 콜백의 X-API-Key 검증

    키가 설정되지 않은 환경에서는 검증하지 않는다.

    Raises:
        UnauthorizedError: 키 불일치
    """
    expected = request.app.state.webhook_api_key
    if not expected:
        return

    if not x_api_key or not hmac.compare_digest(x_api_key.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("잘못된 웹훅 API 키 시도")
        raise UnauthorizedError("유효하지 않은 API 키입니다.")
