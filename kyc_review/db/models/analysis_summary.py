"""
AnalysisSummary 모델 - 외부 분석기가 돌려준 리스크 요약
"""
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from kyc_review.db.base import BaseModel
from kyc_review.utils.helpers import utcnow


class AnalysisSummary(BaseModel):
    """분석 요약 테이블 (케이스당 최대 1건)"""
    __tablename__ = "analysis_summaries"
    __table_args__ = (
        CheckConstraint("\"riskScore\" >= 1 AND \"riskScore\" <= 5", name="check_summary_risk_score"),
    )

    id = Column(String(50), primary_key=True)
    case_id = Column("caseId", String(50), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, unique=True)
    risk_score = Column("riskScore", Integer, nullable=False)
    summary = Column(Text, nullable=False)
    red_flags = Column("redFlags", JSON, nullable=False, default=list)
    missing_info = Column("missingInfo", JSON, nullable=False, default=list)
    recommendation = Column(Text, nullable=False)
    processing_time = Column("processingTime", Integer)  # ms
    model_used = Column("modelUsed", String(100))
    processed_at = Column("processedAt", DateTime, nullable=False, default=utcnow)

    # Relationships
    case = relationship("Case", back_populates="analysis_summary")
