"""
API 의존성 모듈

애플리케이션 시작 시 app.state 에 등록한 리소스(DB, 파일 저장소, 분석기 클라이언트)를
요청 단위 서비스 객체로 묶어 라우터에 주입한다.
"""
from fastapi import BackgroundTasks, Depends, Request
from kyc_review.db.connection import DatabaseManager
from kyc_review.services.analysis_service import AnalysisService
from kyc_review.services.case_lifecycle import CaseLifecycleService
from kyc_review.services.document_intake import DocumentIntakeService
from kyc_review.services.user_service import UserService


def get_db_manager(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_user_service(db_manager: DatabaseManager = Depends(get_db_manager)) -> UserService:
    return UserService(db_manager)


def get_case_service(request: Request) -> CaseLifecycleService:
    return CaseLifecycleService(request.app.state.db_manager, request.app.state.storage)


def get_analysis_service(request: Request) -> AnalysisService:
    return AnalysisService(request.app.state.db_manager, request.app.state.analyzer_client)


def get_document_service(
    request: Request,
    background_tasks: BackgroundTasks,
    analysis_service: AnalysisService = Depends(get_analysis_service)
) -> DocumentIntakeService:
    """screening_report 업로드 시 응답 이후 분석 요청을 실행하도록 구성"""
    def dispatch(case_id: str) -> None:
        background_tasks.add_task(analysis_service.trigger_analysis_quietly, case_id)

    return DocumentIntakeService(
        request.app.state.db_manager,
        request.app.state.storage,
        request.app.state.max_file_size,
        analysis_dispatcher=dispatch
    )
