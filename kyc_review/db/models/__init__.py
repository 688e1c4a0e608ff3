"""Database Models 모듈"""

from kyc_review.db.models.user import User
from kyc_review.db.models.case import Case
from kyc_review.db.models.document import Document
from kyc_review.db.models.analysis_summary import AnalysisSummary

__all__ = [
    "User",
    "Case",
    "Document",
    "AnalysisSummary",
]
