"""
개발용 기본 데이터 시드

관리자/RM 계정과 샘플 케이스 3건을 만든다. 이미 있는 데이터는 건너뛴다.
"""
from datetime import date
from typing import Any, Dict, List
from kyc_review.db.connection import DatabaseManager
from kyc_review.db.repositories import CaseRepository, FindSpec
from kyc_review.services.analysis_service import AnalysisService
from kyc_review.services.case_lifecycle import CaseLifecycleService
from kyc_review.services.user_service import UserService
from kyc_review.utils.constants import CaseStatus, UserRole
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)

SEED_USERS: List[Dict[str, str]] = [
    {"email": "admin@example.com", "username": "admin", "name": "Admin User", "role": UserRole.ADMIN.value},
    {"email": "rm@example.com", "username": "rmuser", "name": "Relationship Manager", "role": UserRole.USER.value},
]

SAMPLE_CASES: List[Dict[str, Any]] = [
    {
        "client_type": "corporate",
        "client_name": "ABC Trading Limited",
        "date_of_incorporation": date(2020, 1, 15),
        "country": "Hong Kong",
        "nationality": "Hong Kong",
        "business_type": "Trading",
        "industry": "Import/Export",
        "source_of_wealth": "Business profits from international trading",
    },
    {
        "client_type": "individual",
        "client_name": "John Smith",
        "date_of_birth": date(1980, 5, 20),
        "country": "United Kingdom",
        "nationality": "British",
        "business_type": "Professional",
        "industry": "Finance",
        "source_of_wealth": "Employment income and investments",
    },
    {
        "client_type": "corporate",
        "client_name": "Tech Innovations Ltd",
        "date_of_incorporation": date(2019, 3, 10),
        "country": "Singapore",
        "nationality": "Singapore",
        "business_type": "Technology",
        "industry": "Software Development",
        "source_of_wealth": "Software licensing and consulting services",
    },
]

# Tech Innovations Ltd 케이스에 들어오는 분석 결과 (수신 후 in_review로 넘긴다)
SAMPLE_ANALYSIS_CLIENT = "Tech Innovations Ltd"
SAMPLE_ANALYSIS_RESULT: Dict[str, Any] = {
    "risk_score": 2,
    "summary": (
        "Singapore-based technology company with a clean corporate structure. "
        "No adverse media findings. Established track record in software development "
        "with reputable clients."
    ),
    "red_flags": [],
    "missing_info": ["Expected monthly transaction volume", "List of major clients"],
    "recommendation": (
        "Proceed with onboarding as Low-Medium Risk. Request additional information on "
        "transaction patterns and major clients for documentation purposes."
    ),
    "model_used": "llama2",
}


def seed_database(db_manager: DatabaseManager, password: str) -> Dict[str, int]:
    """
    기본 데이터 생성

    Args:
        db_manager: DB 관리자
        password: 시드 계정 공통 비밀번호

    Returns:
        새로 만든 사용자/케이스 수
    """
    user_service = UserService(db_manager)
    users = {}
    for seed_user in SEED_USERS:
        users[seed_user["email"]] = user_service.ensure_user(password=password, **seed_user)
    rm_id = users["rm@example.com"]["id"]
    admin_id = users["admin@example.com"]["id"]

    case_service = CaseLifecycleService(db_manager)
    analysis_service = AnalysisService(db_manager, analyzer_client=None)
    created_cases = 0
    for sample in SAMPLE_CASES:
        with db_manager.get_db_session() as session:
            spec = FindSpec(filters={"client_name": sample["client_name"]}, limit=1)
            if CaseRepository(session).find(spec):
                continue

        case = case_service.create_case(sample, owner_id=rm_id)
        created_cases += 1
        logger.info(f"샘플 케이스 생성: {sample['client_name']}")

        if sample["client_name"] == SAMPLE_ANALYSIS_CLIENT:
            analysis_service.ingest_analysis_result(case["id"], SAMPLE_ANALYSIS_RESULT)
            case_service.update_case_status(case["id"], CaseStatus.IN_REVIEW.value, admin_id)

    return {"users": len(users), "cases": created_cases}
