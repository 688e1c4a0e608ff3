"""
사용자 등록/로그인 및 토큰 발급 서비스 모듈
"""
from datetime import timedelta
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from passlib.hash import pbkdf2_sha256
from config.settings import settings
from kyc_review.db.connection import DatabaseManager
from kyc_review.db.repositories import UserRepository
from kyc_review.schemas import LoginRequest, UserCreate, parse_model
from kyc_review.utils.constants import UserRole
from kyc_review.utils.exceptions import ConstraintViolationError, UnauthorizedError
from kyc_review.utils.helpers import utcnow
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return pbkdf2_sha256.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pbkdf2_sha256.verify(password, hashed)
    except ValueError:
        # 해시 형식이 아닌 값
        return False


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """
    JWT 액세스 토큰 발급

    Args:
        user_id: 토큰 주체 (sub)
        expires_minutes: 만료 시간 (None이면 설정값)

    Returns:
        서명된 토큰 문자열
    """
    issued_at = utcnow()
    minutes = settings.jwt_expire_minutes if expires_minutes is None else expires_minutes
    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """
    토큰 검증 후 사용자 ID 반환

    Raises:
        UnauthorizedError: 서명 불일치, 만료, 형식 오류
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"토큰 검증 실패: {str(e)}")
        raise UnauthorizedError("유효하지 않은 토큰입니다.") from e

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("유효하지 않은 토큰입니다.")
    return user_id


class UserService:
    """사용자 관리 클래스"""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def register(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        사용자 등록

        Args:
            fields: {email, username, password, name}

        Returns:
            {"token": str, "user": 사용자 정보}

        Raises:
            ValidationError: 필수 필드 누락
            ConstraintViolationError: 이메일 또는 사용자명 중복
        """
        data = parse_model(UserCreate, fields if fields is not None else {})
        email = data.email.lower()

        with self.db_manager.get_db_session() as session:
            repo = UserRepository(session)
            existing = repo.find_by_email_or_username(email, data.username)
            if existing is not None:
                field = "email" if existing.email == email else "username"
                raise ConstraintViolationError("이미 사용 중인 계정 정보입니다.", field=field)

            user = repo.create(
                email=email,
                username=data.username,
                password=hash_password(data.password),
                name=data.name,
                role=UserRole.USER.value
            )
            user_json = user.to_json()

        logger.info(f"사용자 등록 완료: {user_json['id']}")
        return {"token": create_access_token(user_json["id"]), "user": user_json}

    def login(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        이메일/비밀번호 로그인

        Raises:
            UnauthorizedError: 자격 증명 불일치
        """
        data = parse_model(LoginRequest, fields if fields is not None else {})

        with self.db_manager.get_db_session() as session:
            user = UserRepository(session).get_by(email=data.email.lower())
            if user is None or not verify_password(data.password, user.password):
                logger.warning("로그인 실패: 잘못된 자격 증명")
                raise UnauthorizedError("이메일 또는 비밀번호가 올바르지 않습니다.")
            user_json = user.to_json()

        logger.info(f"로그인 성공: {user_json['id']}")
        return {"token": create_access_token(user_json["id"]), "user": user_json}

    def get_user(self, user_id: str) -> Dict[str, Any]:
        with self.db_manager.get_db_session() as session:
            return UserRepository(session).get_or_raise(user_id).to_json()

    def ensure_user(self, email: str, username: str, password: str, name: str, role: str) -> Dict[str, Any]:
        """시드용: 이메일 기준으로 없을 때만 생성"""
        with self.db_manager.get_db_session() as session:
            repo = UserRepository(session)
            user = repo.get_by(email=email)
            if user is None:
                user = repo.create(
                    email=email,
                    username=username,
                    password=hash_password(password),
                    name=name,
                    role=role
                )
                logger.info(f"시드 사용자 생성: {email}")
            return user.to_json()
