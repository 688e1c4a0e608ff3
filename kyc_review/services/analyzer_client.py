"""
외부 분석기(웹훅) 클라이언트 모듈
"""
from typing import Any, Dict, Optional
import requests
from config.settings import settings
from kyc_review.types import AnalyzerPayload
from kyc_review.utils.exceptions import AnalysisTriggerFailed
from kyc_review.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)


class AnalyzerClient:
    """외부 분석기 호출 래퍼 클래스"""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """
        분석기 클라이언트 초기화

        Args:
            webhook_url: 분석 요청을 받을 URL (None이면 설정에서 가져옴, 빈 값이면 미설정)
            api_key: X-API-Key 헤더로 전달할 키
            timeout: 요청 타임아웃 (초)
            session: 재사용할 requests 세션
        """
        self.webhook_url = settings.analyzer_webhook_url if webhook_url is None else webhook_url
        self.api_key = settings.analyzer_api_key if api_key is None else api_key
        self.timeout = timeout or settings.analyzer_timeout_seconds
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    @log_execution_time()
    def send(self, payload: AnalyzerPayload) -> Dict[str, Any]:
        """
        분석 요청 전송

        Args:
            payload: 케이스/문서 정보

        Returns:
            분석기 응답 본문 (JSON이 아니면 빈 딕셔너리)

        Raises:
            AnalysisTriggerFailed: 전송 실패 또는 2xx 이외의 응답
        """
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key

        try:
            response = self.session.post(
                self.webhook_url,
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
        except requests.Timeout as e:
            logger.error(f"분석기 응답 시간 초과: caseId={payload['caseId']}")
            raise AnalysisTriggerFailed(f"응답 시간 초과 ({self.timeout}초)") from e
        except requests.RequestException as e:
            logger.error(f"분석기 연결 실패: caseId={payload['caseId']} - {str(e)}")
            raise AnalysisTriggerFailed(str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(
                f"분석기 오류 응답: caseId={payload['caseId']} - 상태: {response.status_code}"
            )
            raise AnalysisTriggerFailed(
                f"분석기가 {response.status_code} 응답을 반환했습니다.",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError:
            return {}
