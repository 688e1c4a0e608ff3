"""
Pytest 설정 및 픽스처
"""
import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient
from kyc_review.api.main import create_app
from kyc_review.db.connection import DatabaseManager
from kyc_review.services.analyzer_client import AnalyzerClient
from kyc_review.services.file_storage import LocalFileStorage
from kyc_review.services.user_service import UserService, create_access_token

WEBHOOK_KEY = "test-webhook-key"
MAX_FILE_SIZE = 1024 * 1024


@pytest.fixture
def db_manager():
    """인메모리 SQLite DB 픽스처"""
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.close()


@pytest.fixture
def storage(tmp_path):
    """임시 디렉토리 파일 저장소 픽스처"""
    return LocalFileStorage(str(tmp_path / "uploads"))


@pytest.fixture
def analyzer_client():
    """외부 분석기 클라이언트 모킹"""
    client = Mock(spec=AnalyzerClient)
    client.is_configured = True
    client.send.return_value = {"status": "accepted"}
    return client


@pytest.fixture
def rm_user(db_manager):
    """담당 RM 사용자 픽스처"""
    return UserService(db_manager).ensure_user(
        email="rm@example.com",
        username="rmuser",
        password="password",
        name="Relationship Manager",
        role="user"
    )


@pytest.fixture
def reviewer(db_manager):
    """승인/거절을 수행하는 관리자 픽스처"""
    return UserService(db_manager).ensure_user(
        email="admin@example.com",
        username="admin",
        password="password",
        name="Admin User",
        role="admin"
    )


@pytest.fixture
def app(db_manager, storage, analyzer_client):
    """테스트용 애플리케이션 픽스처"""
    return create_app(
        db_manager=db_manager,
        storage=storage,
        analyzer_client=analyzer_client,
        webhook_api_key=WEBHOOK_KEY,
        max_file_size=MAX_FILE_SIZE
    )


@pytest.fixture
def client(app):
    """테스트 클라이언트 픽스처"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(rm_user):
    """RM 사용자 인증 헤더"""
    return {"Authorization": f"Bearer {create_access_token(rm_user['id'])}"}


@pytest.fixture
def reviewer_headers(reviewer):
    """관리자 인증 헤더"""
    return {"Authorization": f"Bearer {create_access_token(reviewer['id'])}"}


@pytest.fixture
def webhook_headers():
    return {"X-API-Key": WEBHOOK_KEY}


@pytest.fixture
def sample_case_input():
    """케이스 생성 요청 샘플"""
    return {
        "clientType": "individual",
        "clientName": "Jane Roe",
        "country": "Hong Kong",
        "nationality": "British",
        "dateOfBirth": "1985-04-12",
    }
