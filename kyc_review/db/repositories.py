"""
엔티티 저장소 모듈

세션 하나를 받아 엔티티별 조회/생성/수정/삭제를 수행한다.
커밋은 호출자(DatabaseManager.get_db_session)가 담당한다.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from kyc_review.db.models import AnalysisSummary, Case, Document, User
from kyc_review.utils.exceptions import ConstraintViolationError, NotFoundError, StorageError
from kyc_review.utils.helpers import generate_id, utcnow
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FindSpec:
    """목록 조회 조건"""
    search: Optional[str] = None
    search_fields: Sequence[str] = ()
    filters: Dict[str, Any] = field(default_factory=dict)
    order_by: Optional[str] = None
    descending: bool = False
    offset: int = 0
    limit: Optional[int] = None


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"


class Repository:
    """엔티티 저장소 기본 클래스"""

    model = None
    entity_name: str = ""
    id_prefix: str = ""
    unique_fields: Sequence[str] = ()

    def __init__(self, session: Session):
        self.session = session

    def _column(self, name: str):
        mapper = self.model.__mapper__
        if name not in mapper.column_attrs:
            raise ValueError(f"{self.entity_name}에 없는 필드입니다: {name}")
        return getattr(self.model, name)

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as e:
            message = str(e.orig)
            violated = None
            for name in self.unique_fields:
                column_name = self._column(name).property.columns[0].name
                if column_name in message:
                    violated = name
                    break
            logger.warning(f"{self.entity_name} 제약 조건 위반: {message}")
            raise ConstraintViolationError(
                f"{self.entity_name}의 고유 값이 중복되었습니다.", field=violated
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"{self.entity_name} 저장 실패: {str(e)}")
            raise StorageError(str(e)) from e

    def _apply(self, query, spec: FindSpec):
        if spec.search and spec.search_fields:
            pattern = _like_pattern(spec.search)
            query = query.filter(or_(*[
                func.lower(self._column(name)).like(pattern, escape="\\")
                for name in spec.search_fields
            ]))
        for name, value in spec.filters.items():
            if value is None:
                continue
            query = query.filter(self._column(name) == value)
        return query

    def get(self, entity_id: str):
        if not entity_id:
            return None
        return self.session.get(self.model, entity_id)

    def get_or_raise(self, entity_id: str):
        entity = self.get(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def get_by(self, **criteria):
        """유니크 필드로 단건 조회"""
        for name in criteria:
            if name not in self.unique_fields:
                raise ValueError(f"유니크 필드가 아닙니다: {name}")
        return self.session.query(self.model).filter_by(**criteria).first()

    def find(self, spec: Optional[FindSpec] = None) -> List[Any]:
        spec = spec or FindSpec()
        query = self._apply(self.session.query(self.model), spec)
        if spec.order_by:
            column = self._column(spec.order_by)
            query = query.order_by(column.desc() if spec.descending else column.asc())
        if spec.offset:
            query = query.offset(spec.offset)
        if spec.limit is not None:
            query = query.limit(spec.limit)
        return query.all()

    def count(self, spec: Optional[FindSpec] = None) -> int:
        spec = spec or FindSpec()
        return self._apply(self.session.query(self.model), spec).count()

    def create(self, **values):
        values.setdefault("id", generate_id(self.id_prefix))
        entity = self.model(**values)
        self.session.add(entity)
        self._flush()
        return entity

    def update(self, entity_id: str, values: Dict[str, Any]):
        entity = self.get_or_raise(entity_id)
        for name, value in values.items():
            self._column(name)
            setattr(entity, name, value)
        self._flush()
        return entity

    def delete(self, entity_id: str) -> None:
        entity = self.get_or_raise(entity_id)
        self.session.delete(entity)
        self._flush()


class UserRepository(Repository):
    model = User
    entity_name = "User"
    id_prefix = "user"
    unique_fields = ("email", "username", "id")

    def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        return self.session.query(User).filter(
            or_(User.email == email, User.username == username)
        ).first()


class CaseRepository(Repository):
    model = Case
    entity_name = "Case"
    id_prefix = "case"
    unique_fields = ("case_number", "id")

    SEARCH_FIELDS = ("client_name", "case_number")

    def document_counts(self, case_ids: Sequence[str]) -> Dict[str, int]:
        """케이스별 문서 개수"""
        if not case_ids:
            return {}
        rows = self.session.query(Document.case_id, func.count(Document.id)).filter(
            Document.case_id.in_(list(case_ids))
        ).group_by(Document.case_id).all()
        return {case_id: count for case_id, count in rows}


class DocumentRepository(Repository):
    model = Document
    entity_name = "Document"
    id_prefix = "doc"
    unique_fields = ("id",)

    def list_for_case(self, case_id: str, document_type: Optional[str] = None) -> List[Document]:
        """케이스 문서 목록 (업로드 시각 내림차순)"""
        query = self.session.query(Document).filter(Document.case_id == case_id)
        if document_type:
            query = query.filter(Document.document_type == document_type)
        return query.order_by(Document.uploaded_at.desc(), Document.id.desc()).all()


class AnalysisSummaryRepository(Repository):
    model = AnalysisSummary
    entity_name = "AnalysisSummary"
    id_prefix = "sum"
    unique_fields = ("case_id", "id")

    def get_by_case_id(self, case_id: str) -> Optional[AnalysisSummary]:
        return self.get_by(case_id=case_id)

    def upsert(self, case_id: str, values: Dict[str, Any]) -> AnalysisSummary:
        """케이스의 요약을 통째로 교체하거나 새로 생성"""
        values = dict(values, processed_at=utcnow())
        existing = self.get_by_case_id(case_id)
        if existing is None:
            return self.create(case_id=case_id, **values)
        return self.update(existing.id, values)
