"""
데이터베이스 초기화 스크립트 (테이블 생성 + 기본 데이터)
"""
import sys
import os

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config.settings import settings
from kyc_review.db.connection import DatabaseManager
from kyc_review.db.seed import seed_database
from kyc_review.utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def init_database(with_seed: bool = True):
    """데이터베이스 초기화"""
    db_manager = DatabaseManager(settings.database_url)
    try:
        db_manager.create_tables()
        logger.info("테이블 생성 완료")

        if with_seed:
            result = seed_database(db_manager, settings.seed_password)
            logger.info(f"기본 데이터 생성 완료: 사용자 {result['users']}명, 새 케이스 {result['cases']}건")
            logger.info("로그인 계정: admin@example.com / rm@example.com")
    finally:
        db_manager.close()


if __name__ == "__main__":
    try:
        init_database(with_seed="--no-seed" not in sys.argv)
    except Exception as e:
        logger.error(f"데이터베이스 초기화 실패: {e}")
        sys.exit(1)
