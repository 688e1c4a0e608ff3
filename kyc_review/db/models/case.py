"""
Case 모델
"""
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from kyc_review.db.base import BaseModel
from kyc_review.utils.helpers import utcnow


class Case(BaseModel):
    """KYC 온보딩 케이스 마스터 테이블"""
    __tablename__ = "cases"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'ai_ready', 'in_review', 'approved', 'rejected')",
            name="check_case_status"
        ),
        CheckConstraint("\"clientType\" IN ('individual', 'corporate')", name="check_client_type"),
        CheckConstraint(
            "\"riskScore\" IS NULL OR (\"riskScore\" >= 1 AND \"riskScore\" <= 5)",
            name="check_case_risk_score"
        ),
    )

    id = Column(String(50), primary_key=True)
    case_number = Column("caseNumber", String(50), nullable=False, unique=True, index=True)
    client_type = Column("clientType", String(20), nullable=False)
    client_name = Column("clientName", String(255), nullable=False)
    date_of_birth = Column("dateOfBirth", Date)
    date_of_incorporation = Column("dateOfIncorporation", Date)
    country = Column(String(100), nullable=False)
    nationality = Column(String(100))
    business_type = Column("businessType", String(255))
    industry = Column(String(255))
    source_of_wealth = Column("sourceOfWealth", String(1000))
    status = Column(String(20), nullable=False, default="pending", index=True)
    risk_score = Column("riskScore", Integer)
    rm_id = Column("rmId", String(50), ForeignKey("users.id"), nullable=False, index=True)
    approved_at = Column("approvedAt", DateTime)
    approved_by = Column("approvedBy", String(50))
    rejected_at = Column("rejectedAt", DateTime)
    rejected_by = Column("rejectedBy", String(50))
    created_at = Column("createdAt", DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column("updatedAt", DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    relationship_manager = relationship("User", back_populates="cases")
    documents = relationship(
        "Document",
        back_populates="case",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Document.uploaded_at.desc()"
    )
    analysis_summary = relationship(
        "AnalysisSummary",
        back_populates="case",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True
    )
