"""
업로드 파일 저장소 모듈

파일 바이트는 upload_dir 아래 케이스별 디렉토리에 저장하고,
DB에는 upload_dir 기준 상대 경로(locator)만 기록한다.
"""
import shutil
import uuid
from pathlib import Path
from typing import Optional
from config.settings import settings
from kyc_review.utils.exceptions import NotFoundError, StorageError
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)


class LocalFileStorage:
    """로컬 디스크 파일 저장소"""

    def __init__(self, upload_dir: Optional[str] = None):
        """
        저장소 초기화

        Args:
            upload_dir: 저장 루트 디렉토리 (None이면 설정에서 가져옴)
        """
        self.root = Path(upload_dir or settings.upload_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"파일 저장소 초기화 완료: {self.root}")

    def save(self, case_id: str, file_name: str, content: bytes) -> str:
        """
        파일 저장

        Args:
            case_id: 케이스 ID (하위 디렉토리명)
            file_name: 원본 파일명 (확장자만 사용)
            content: 파일 바이트

        Returns:
            upload_dir 기준 상대 경로
        """
        extension = Path(file_name).suffix.lower()
        locator = f"{case_id}/{uuid.uuid4().hex}{extension}"
        target = self.resolve(locator)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error(f"파일 저장 실패: {locator} - {str(e)}")
            raise StorageError(f"파일을 저장할 수 없습니다: {file_name}") from e

        logger.info(f"파일 저장 완료: {locator} ({len(content)} bytes)")
        return locator

    def resolve(self, locator: str) -> Path:
        """
        locator를 절대 경로로 변환

        Raises:
            StorageError: 저장 루트 밖을 가리키는 경우
        """
        path = (self.root / locator).resolve()
        if path != self.root and self.root not in path.parents:
            raise StorageError(f"허용되지 않은 파일 경로입니다: {locator}")
        return path

    def exists(self, locator: str) -> bool:
        return self.resolve(locator).is_file()

    def open_path(self, locator: str) -> Path:
        """다운로드용 파일 경로 (없으면 NotFoundError)"""
        path = self.resolve(locator)
        if not path.is_file():
            raise NotFoundError("File", locator)
        return path

    def delete(self, locator: str) -> bool:
        """
        파일 삭제

        Returns:
            실제로 삭제했으면 True, 이미 없으면 False
        """
        path = self.resolve(locator)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"삭제할 파일 없음: {locator}")
            return False
        except OSError as e:
            logger.error(f"파일 삭제 실패: {locator} - {str(e)}")
            raise StorageError(f"파일을 삭제할 수 없습니다: {locator}") from e

        logger.info(f"파일 삭제 완료: {locator}")
        return True

    def delete_case_dir(self, case_id: str) -> None:
        """케이스 디렉토리 전체 삭제 (best-effort)"""
        path = self.resolve(case_id)
        if path == self.root:
            return
        shutil.rmtree(path, ignore_errors=True)
