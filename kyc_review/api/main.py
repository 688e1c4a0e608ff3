"""
FastAPI 애플리케이션 메인 파일
"""
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from config.settings import settings
from kyc_review.utils.logger import setup_logging, get_logger
from kyc_review.api.middleware import LoggingMiddleware
from kyc_review.api.error_handler import register_exception_handlers
from kyc_review.api.routers import auth, cases, documents, webhook
from kyc_review.db.connection import DatabaseManager
from kyc_review.services.analyzer_client import AnalyzerClient
from kyc_review.services.file_storage import LocalFileStorage

# 로깅 초기화
setup_logging()
logger = get_logger(__name__)

API_TITLE = "KYC 케이스 심사 API"
API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """리소스 준비 및 정리 (주입되지 않은 리소스만 여기서 생성/해제)"""
    logger.info("애플리케이션 시작")

    owns_db = app.state.db_manager is None
    if owns_db:
        app.state.db_manager = DatabaseManager()
    if app.state.storage is None:
        app.state.storage = LocalFileStorage()
    if app.state.analyzer_client is None:
        app.state.analyzer_client = AnalyzerClient()

    app.state.db_manager.create_tables()
    if app.state.db_manager.health_check():
        logger.info("데이터베이스 연결 확인 완료")
    else:
        logger.warning("데이터베이스 연결 확인 실패")

    if not app.state.analyzer_client.is_configured:
        logger.warning("분석기 URL이 설정되지 않음: 분석 요청은 건너뜀")

    try:
        yield
    finally:
        logger.info("애플리케이션 종료")
        if owns_db:
            app.state.db_manager.close()


def create_app(
    db_manager: Optional[DatabaseManager] = None,
    storage: Optional[LocalFileStorage] = None,
    analyzer_client: Optional[AnalyzerClient] = None,
    webhook_api_key: Optional[str] = None,
    max_file_size: Optional[int] = None
) -> FastAPI:
    """
    애플리케이션 생성

    Args:
        db_manager: DB 관리자 (None이면 시작 시 설정값으로 생성)
        storage: 파일 저장소 (None이면 시작 시 upload_dir 로 생성)
        analyzer_client: 외부 분석기 클라이언트 (None이면 시작 시 설정값으로 생성)
        webhook_api_key: 콜백 검증 키 (None이면 settings.analyzer_api_key)
        max_file_size: 업로드 최대 크기 bytes (None이면 settings.max_file_size_bytes)

    Returns:
        FastAPI 인스턴스
    """
    app = FastAPI(
        title=API_TITLE,
        description="KYC 온보딩 케이스 관리 및 AI 리스크 분석 연동 백엔드",
        version=API_VERSION,
        lifespan=lifespan
    )

    app.state.db_manager = db_manager
    app.state.storage = storage
    app.state.analyzer_client = analyzer_client
    app.state.webhook_api_key = settings.analyzer_api_key if webhook_api_key is None else webhook_api_key
    app.state.max_file_size = max_file_size or settings.max_file_size_bytes

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 로깅 미들웨어
    app.add_middleware(LoggingMiddleware)

    # 에러 핸들러 등록
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return {
            "message": API_TITLE,
            "version": API_VERSION,
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check(request: Request):
        """헬스 체크 엔드포인트"""
        db_healthy = request.app.state.db_manager.health_check()
        return {
            "status": "healthy" if db_healthy else "unhealthy",
            "database": "healthy" if db_healthy else "unhealthy"
        }

    # 라우터 등록
    app.include_router(auth.router)
    app.include_router(cases.router)
    app.include_router(documents.router)
    app.include_router(webhook.router)

    return app


app = create_app()
