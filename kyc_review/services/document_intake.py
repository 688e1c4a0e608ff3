"""
증빙 문서 업로드/조회/삭제 서비스 모듈
"""
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from kyc_review.db.connection import DatabaseManager
from kyc_review.db.repositories import CaseRepository, DocumentRepository
from kyc_review.services.file_storage import LocalFileStorage
from kyc_review.utils.constants import (
    ALLOWED_EXTENSIONS,
    DEFAULT_MIME_TYPE,
    DOCUMENT_TYPES,
    DocumentType,
)
from kyc_review.utils.exceptions import StorageError, ValidationError
from kyc_review.utils.helpers import sanitize_filename
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)

# 스크리닝 리포트 업로드 후 분석 요청을 맡길 콜백 (caseId 인자)
AnalysisDispatcher = Callable[[str], Any]


class DocumentIntakeService:
    """증빙 문서 관리 클래스"""

    def __init__(
        self,
        db_manager: DatabaseManager,
        storage: LocalFileStorage,
        max_file_size: int,
        analysis_dispatcher: Optional[AnalysisDispatcher] = None
    ):
        """
        Args:
            db_manager: DB 관리자
            storage: 파일 저장소
            max_file_size: 허용 최대 파일 크기 (bytes)
            analysis_dispatcher: screening_report 업로드 시 호출할 분석 요청 콜백
        """
        self.db_manager = db_manager
        self.storage = storage
        self.max_file_size = max_file_size
        self.analysis_dispatcher = analysis_dispatcher

    def _validate(
        self,
        content: Optional[bytes],
        document_type: Optional[str],
        file_name: Optional[str]
    ) -> str:
        """업로드 입력 검증 후 정리된 파일명 반환"""
        if not content:
            raise ValidationError("업로드할 파일이 없습니다.", field="file")

        if document_type not in DOCUMENT_TYPES:
            raise ValidationError(
                f"허용되지 않은 문서 유형입니다: {document_type}",
                field="documentType",
                details={"allowed": DOCUMENT_TYPES}
            )

        safe_name = sanitize_filename(file_name)
        if not safe_name:
            raise ValidationError("파일명이 올바르지 않습니다.", field="file")

        extension = Path(safe_name).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"허용되지 않은 파일 형식입니다: {extension or '(없음)'}",
                field="file",
                details={"allowed": sorted(ALLOWED_EXTENSIONS)}
            )

        if len(content) > self.max_file_size:
            raise ValidationError(
                f"파일 크기가 제한({self.max_file_size} bytes)을 초과했습니다.",
                field="file",
                details={"size": len(content), "maxSize": self.max_file_size}
            )

        return safe_name

    def upload_document(
        self,
        case_id: str,
        content: Optional[bytes],
        document_type: Optional[str],
        file_name: Optional[str],
        mime_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        문서 업로드

        검증을 모두 통과한 뒤에만 파일을 저장하고, 메타데이터 저장이
        실패하면 이미 저장한 파일을 삭제한다.

        Args:
            case_id: 케이스 ID
            content: 파일 바이트
            document_type: 문서 유형
            file_name: 원본 파일명
            mime_type: 클라이언트가 보낸 MIME 타입

        Returns:
            생성된 문서 정보

        Raises:
            NotFoundError: 케이스가 없는 경우
            ValidationError: 파일/문서 유형/확장자/크기 검증 실패
        """
        locator = None
        try:
            with self.db_manager.get_db_session() as session:
                CaseRepository(session).get_or_raise(case_id)
                safe_name = self._validate(content, document_type, file_name)

                locator = self.storage.save(case_id, safe_name, content)
                document = DocumentRepository(session).create(
                    case_id=case_id,
                    document_type=document_type,
                    file_name=safe_name,
                    locator=locator,
                    file_size=len(content),
                    mime_type=mime_type or DEFAULT_MIME_TYPE
                )
                result = document.to_json()
        except Exception:
            if locator is not None:
                self._discard(locator)
            raise

        logger.info(
            f"문서 업로드 완료: {result['id']} (case={case_id}, type={document_type}, "
            f"size={result['fileSize']})"
        )

        if document_type == DocumentType.SCREENING_REPORT.value:
            self._dispatch_analysis(case_id)

        return result

    def _dispatch_analysis(self, case_id: str) -> None:
        if self.analysis_dispatcher is None:
            return
        try:
            self.analysis_dispatcher(case_id)
        except Exception as e:
            logger.error(f"분석 요청 예약 실패: case={case_id} - {str(e)}", exc_info=True)

    def _discard(self, locator: str) -> None:
        try:
            self.storage.delete(locator)
            logger.info(f"고아 파일 정리 완료: {locator}")
        except StorageError as e:
            logger.error(f"고아 파일 정리 실패: {locator} - {str(e)}")

    def list_documents(self, case_id: str) -> List[Dict[str, Any]]:
        """
        케이스 문서 목록 (업로드 시각 내림차순)

        Raises:
            NotFoundError: 케이스가 없는 경우
        """
        with self.db_manager.get_db_session() as session:
            CaseRepository(session).get_or_raise(case_id)
            return [
                document.to_json()
                for document in DocumentRepository(session).list_for_case(case_id)
            ]

    def get_document(self, document_id: str) -> Dict[str, Any]:
        with self.db_manager.get_db_session() as session:
            return DocumentRepository(session).get_or_raise(document_id).to_json()

    def get_document_file(self, document_id: str) -> Tuple[Dict[str, Any], Path]:
        """
        다운로드할 문서 정보와 파일 경로

        Raises:
            NotFoundError: 문서 레코드 또는 저장된 파일이 없는 경우
        """
        document = self.get_document(document_id)
        path = self.storage.open_path(document["filePath"])
        return document, path

    def delete_document(self, document_id: str) -> None:
        """
        문서 삭제 (저장된 파일 -> 레코드 순)

        Raises:
            NotFoundError: 문서가 없는 경우
            StorageError: 파일 삭제 실패 (레코드는 유지됨)
        """
        with self.db_manager.get_db_session() as session:
            repo = DocumentRepository(session)
            document = repo.get_or_raise(document_id)
            self.storage.delete(document.locator)
            repo.delete(document_id)

        logger.info(f"문서 삭제 완료: {document_id}")
