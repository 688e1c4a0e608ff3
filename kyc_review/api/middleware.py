"""
API 미들웨어 모듈
"""
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from kyc_review.utils.logger import get_logger
from kyc_review.utils.helpers import mask_personal_info

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청 로깅 미들웨어"""

    async def dispatch(self, request: Request, call_next):
        """요청 처리 및 로깅"""
        start_time = time.time()

        # 요청 정보 로깅
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        logger.info(
            f"요청 수신: {method} {path} - IP: {client_ip}"
        )

        # 요청 바디 로깅 (개인정보 마스킹, 파일 업로드 본문은 제외)
        content_type = request.headers.get("content-type", "")
        if method in ["POST", "PUT", "PATCH"] and "multipart/form-data" not in content_type:
            try:
                body = await request.body()
                masked_body = mask_personal_info(body.decode("utf-8"))
                logger.debug(f"요청 바디: {masked_body}")
            except UnicodeDecodeError as e:
                logger.warning(f"요청 바디 로깅 실패: {str(e)}")

        try:
            response = await call_next(request)

            process_time = time.time() - start_time

            logger.info(
                f"응답 완료: {method} {path} - "
                f"상태: {response.status_code} - "
                f"소요 시간: {process_time:.3f}초"
            )

            # 응답 시간 헤더 추가
            response.headers["X-Process-Time"] = str(process_time)

            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"요청 처리 실패: {method} {path} - "
                f"오류: {str(e)} - "
                f"소요 시간: {process_time:.3f}초"
            )
            raise
