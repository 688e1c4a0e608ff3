"""
엔티티 저장소 단위 테스트
"""
import pytest
from datetime import datetime
from kyc_review.db.repositories import (
    AnalysisSummaryRepository,
    CaseRepository,
    DocumentRepository,
    FindSpec,
    UserRepository,
)
from kyc_review.utils.exceptions import ConstraintViolationError, NotFoundError


def _make_case(session, rm_id, name, case_number, **extra):
    values = dict(
        case_number=case_number,
        client_type="individual",
        client_name=name,
        country="Hong Kong",
        rm_id=rm_id,
    )
    values.update(extra)
    return CaseRepository(session).create(**values)


class TestRepository:
    """공통 CRUD 테스트"""

    @pytest.mark.unit
    def test_create_assigns_prefixed_id(self, db_manager, rm_user):
        with db_manager.get_db_session() as session:
            case = _make_case(session, rm_user["id"], "Jane Roe", "KYC-20240101-AAAAAA")
            assert case.id.startswith("case_")
            assert case.status == "pending"

    @pytest.mark.unit
    def test_duplicate_unique_field_raises_constraint_violation(self, db_manager, rm_user):
        with db_manager.get_db_session() as session:
            _make_case(session, rm_user["id"], "Jane Roe", "KYC-20240101-AAAAAA")

        with pytest.raises(ConstraintViolationError) as exc_info:
            with db_manager.get_db_session() as session:
                _make_case(session, rm_user["id"], "John Doe", "KYC-20240101-AAAAAA")

        assert exc_info.value.field == "case_number"

    @pytest.mark.unit
    def test_duplicate_email_detected(self, db_manager, rm_user):
        with pytest.raises(ConstraintViolationError) as exc_info:
            with db_manager.get_db_session() as session:
                UserRepository(session).create(
                    email="rm@example.com",
                    username="another",
                    password="x",
                    name="Another"
                )
        assert exc_info.value.field == "email"

    @pytest.mark.unit
    def test_update_and_delete_missing_id_raise_not_found(self, db_manager):
        with db_manager.get_db_session() as session:
            repo = CaseRepository(session)
            with pytest.raises(NotFoundError):
                repo.update("case_missing", {"country": "Japan"})
            with pytest.raises(NotFoundError):
                repo.delete("case_missing")

    @pytest.mark.unit
    def test_update_rejects_unknown_field(self, db_manager, rm_user):
        with db_manager.get_db_session() as session:
            case = _make_case(session, rm_user["id"], "Jane Roe", "KYC-20240101-AAAAAA")
            with pytest.raises(ValueError):
                CaseRepository(session).update(case.id, {"not_a_column": 1})

    @pytest.mark.unit
    def test_get_by_requires_unique_field(self, db_manager):
        with db_manager.get_db_session() as session:
            with pytest.raises(ValueError):
                CaseRepository(session).get_by(country="Japan")


class TestFind:
    """검색/필터/정렬/페이지네이션 테스트"""

    @pytest.fixture
    def seeded(self, db_manager, rm_user):
        with db_manager.get_db_session() as session:
            _make_case(session, rm_user["id"], "Alpha Trading", "KYC-20240101-000001", status="pending")
            _make_case(session, rm_user["id"], "beta holdings", "KYC-20240101-000002", status="in_review")
            _make_case(session, rm_user["id"], "Gamma 100% Ltd", "KYC-20240101-000003", status="pending")
        return db_manager

    @pytest.mark.unit
    def test_search_is_case_insensitive(self, seeded):
        with seeded.get_db_session() as session:
            spec = FindSpec(search="BETA", search_fields=CaseRepository.SEARCH_FIELDS)
            names = [case.client_name for case in CaseRepository(session).find(spec)]
        assert names == ["beta holdings"]

    @pytest.mark.unit
    def test_search_matches_case_number(self, seeded):
        with seeded.get_db_session() as session:
            spec = FindSpec(search="000003", search_fields=CaseRepository.SEARCH_FIELDS)
            assert CaseRepository(session).count(spec) == 1

    @pytest.mark.unit
    def test_search_escapes_wildcards(self, seeded):
        with seeded.get_db_session() as session:
            spec = FindSpec(search="%", search_fields=CaseRepository.SEARCH_FIELDS)
            names = [case.client_name for case in CaseRepository(session).find(spec)]
        assert names == ["Gamma 100% Ltd"]

    @pytest.mark.unit
    def test_status_filter_sort_and_paging(self, seeded):
        with seeded.get_db_session() as session:
            repo = CaseRepository(session)
            spec = FindSpec(filters={"status": "pending"}, order_by="case_number", descending=True)
            numbers = [case.case_number for case in repo.find(spec)]
            assert numbers == ["KYC-20240101-000003", "KYC-20240101-000001"]

            page = FindSpec(order_by="case_number", offset=1, limit=1)
            assert [case.case_number for case in repo.find(page)] == ["KYC-20240101-000002"]
            assert repo.count(FindSpec(filters={"status": None})) == 3

    @pytest.mark.unit
    def test_document_counts(self, seeded):
        with seeded.get_db_session() as session:
            cases = CaseRepository(session).find(FindSpec(order_by="case_number"))
            DocumentRepository(session).create(
                case_id=cases[0].id, document_type="passport", file_name="p.pdf",
                locator="x/p.pdf", file_size=10, mime_type="application/pdf"
            )
            counts = CaseRepository(session).document_counts([case.id for case in cases])
        assert counts == {cases[0].id: 1}


class TestDocumentAndSummary:
    """문서 정렬 및 분석 요약 upsert 테스트"""

    @pytest.mark.unit
    def test_list_for_case_orders_newest_first(self, db_manager, rm_user):
        with db_manager.get_db_session() as session:
            case = _make_case(session, rm_user["id"], "Jane Roe", "KYC-20240101-AAAAAA")
            repo = DocumentRepository(session)
            for day, doc_type in [(1, "passport"), (3, "screening_report"), (2, "screening_report")]:
                repo.create(
                    case_id=case.id, document_type=doc_type, file_name=f"d{day}.pdf",
                    locator=f"{case.id}/d{day}.pdf", file_size=1, mime_type="application/pdf",
                    uploaded_at=datetime(2024, 1, day)
                )

            all_docs = [doc.file_name for doc in repo.list_for_case(case.id)]
            reports = [doc.file_name for doc in repo.list_for_case(case.id, "screening_report")]

        assert all_docs == ["d3.pdf", "d2.pdf", "d1.pdf"]
        assert reports == ["d3.pdf", "d2.pdf"]

    @pytest.mark.unit
    def test_upsert_keeps_single_summary(self, db_manager, rm_user):
        values = {"risk_score": 3, "summary": "s", "recommendation": "r"}
        with db_manager.get_db_session() as session:
            case = _make_case(session, rm_user["id"], "Jane Roe", "KYC-20240101-AAAAAA")
            repo = AnalysisSummaryRepository(session)
            first = repo.upsert(case.id, values)
            second = repo.upsert(case.id, dict(values, risk_score=4))

            assert first.id == second.id
            assert repo.count() == 1
            assert repo.get_by_case_id(case.id).risk_score == 4
