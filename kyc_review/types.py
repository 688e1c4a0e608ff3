"""
공통 타입 정의
"""
from typing import TypedDict, Optional, List, Dict, Any


class ScreeningReportInfo(TypedDict):
    """분석 대상 스크리닝 리포트 정보"""
    id: str
    fileName: str
    locator: str
    mimeType: str


class AnalyzerPayload(TypedDict):
    """외부 분석기로 전송하는 요청 본문"""
    caseId: str
    caseNumber: str
    clientName: str
    clientType: str
    country: str
    businessType: Optional[str]
    industry: Optional[str]
    sourceOfWealth: Optional[str]
    screeningReport: ScreeningReportInfo


class TriggerResult(TypedDict, total=False):
    """분석 요청 결과"""
    triggered: bool
    caseId: str
    response: Optional[Dict[str, Any]]


class CaseListPage(TypedDict):
    """케이스 목록 페이지"""
    cases: List[Dict[str, Any]]
    pagination: Dict[str, int]
