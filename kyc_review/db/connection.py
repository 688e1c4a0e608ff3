"""
데이터베이스 연결 관리 모듈
"""
from sqlalchemy import create_engine, Engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from typing import Generator, Optional
from config.settings import settings
from kyc_review.db.base import Base
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """데이터베이스 연결 관리 클래스"""

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self.database_url = database_url or settings.database_url
        self.engine: Engine = None
        self.SessionLocal: sessionmaker = None
        self._initialize(echo)

    def _initialize(self, echo: bool):
        """데이터베이스 연결 초기화"""
        try:
            if self.database_url.startswith("sqlite"):
                engine_kwargs = {"connect_args": {"check_same_thread": False}}
                # 인메모리 DB는 모든 세션이 하나의 연결을 공유해야 한다
                if self.database_url in ("sqlite://", "sqlite:///:memory:"):
                    engine_kwargs["poolclass"] = StaticPool
            else:
                engine_kwargs = {
                    "pool_size": 5,
                    "max_overflow": 10,
                    "pool_pre_ping": True,  # 연결 유효성 사전 확인
                }

            self.engine = create_engine(self.database_url, echo=echo, **engine_kwargs)

            if self.engine.dialect.name == "sqlite":
                event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine
            )

            logger.info(f"데이터베이스 연결 초기화 완료: dialect={self.engine.dialect.name}")
        except Exception as e:
            logger.error(f"데이터베이스 연결 초기화 실패: {str(e)}")
            raise

    def create_tables(self) -> None:
        """모델 메타데이터 기준으로 테이블 생성 (이미 있으면 건너뜀)"""
        # 모델 등록
        import kyc_review.db.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("테이블 생성 확인 완료")

    def get_session(self) -> Session:
        """
        데이터베이스 세션 획득

        Returns:
            Session 인스턴스
        """
        return self.SessionLocal()

    @contextmanager
    def get_db_session(self) -> Generator[Session, None, None]:
        """
        하나의 트랜잭션 단위 세션

        블록이 정상 종료되면 한 번에 커밋하고, 예외가 발생하면 롤백한다.

        Example:
            with db_manager.get_db_session() as session:
                # DB 작업 수행
                pass
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.debug(f"데이터베이스 세션 롤백: {str(e)}")
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        """
        데이터베이스 연결 상태 확인

        Returns:
            연결 상태 (True: 정상, False: 오류)
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.debug("데이터베이스 연결 상태: 정상")
            return True
        except Exception as e:
            logger.error(f"데이터베이스 연결 상태 확인 실패: {str(e)}")
            return False

    def close(self):
        """데이터베이스 연결 종료"""
        if self.engine:
            self.engine.dispose()
            logger.info("데이터베이스 연결 종료")
