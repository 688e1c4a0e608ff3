"""
애플리케이션 설정 관리 모듈
"""
from pydantic_settings import BaseSettings
from typing import List
from dotenv import load_dotenv

# 환경 변수 로드
load_dotenv(encoding='utf-8')


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # Database
    database_url: str = "sqlite:///./kyc_cases.db"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    logging_config_path: str = "config/logging.yaml"

    # Environment
    environment: str = "development"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # File Upload
    upload_dir: str = "./data/uploads"
    max_file_size_mb: int = 10

    # External analyzer (워크플로 엔진)
    analyzer_webhook_url: str = ""
    analyzer_api_key: str = ""
    analyzer_timeout_seconds: float = 5.0

    # Auth
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7

    # Seed
    seed_password: str = "password"

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS Origins를 리스트로 변환"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# 전역 설정 인스턴스
settings = Settings()
