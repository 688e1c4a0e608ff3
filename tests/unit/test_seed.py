"""
기본 데이터 시드 단위 테스트
"""
import pytest
from unittest.mock import patch
from kyc_review.db.repositories import AnalysisSummaryRepository, CaseRepository, FindSpec
from kyc_review.db.seed import seed_database
from kyc_review.services.analysis_service import AnalysisService
from kyc_review.services.user_service import UserService


@pytest.mark.unit
def test_seed_is_idempotent(db_manager):
    first = seed_database(db_manager, "password")
    second = seed_database(db_manager, "password")

    assert first == {"users": 2, "cases": 3}
    assert second == {"users": 2, "cases": 0}

    with db_manager.get_db_session() as session:
        cases = CaseRepository(session)
        assert cases.count() == 3
        tech = cases.find(FindSpec(filters={"client_name": "Tech Innovations Ltd"}))[0]
        assert tech.status == "in_review"
        assert tech.risk_score == 2
        summary = AnalysisSummaryRepository(session).get_by_case_id(tech.id)
        assert summary.model_used == "llama2"
        assert summary.risk_score == tech.risk_score
        assert AnalysisSummaryRepository(session).count() == 1
        others = [case for case in cases.find(FindSpec()) if case.id != tech.id]
        assert {case.status for case in others} == {"pending"}
        assert all(case.risk_score is None for case in others)
        assert summary.missing_info == ["Expected monthly transaction volume", "List of major clients"]


@pytest.mark.unit
def test_seed_users_can_log_in(db_manager):
    seed_database(db_manager, "password")

    result = UserService(db_manager).login({"email": "admin@example.com", "password": "password"})

    assert result["user"]["role"] == "admin"
    assert result["token"]


@pytest.mark.unit
def test_seed_summary_arrives_through_ingestion(db_manager):
    with patch.object(
        AnalysisService, "ingest_analysis_result", wraps=AnalysisService(db_manager, None).ingest_analysis_result
    ) as ingest:
        seed_database(db_manager, "password")

    ingest.assert_called_once()
    assert ingest.call_args.args[1]["risk_score"] == 2
