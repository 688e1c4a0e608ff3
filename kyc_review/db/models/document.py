"""
Document 모델 - 케이스에 첨부된 증빙 파일 정보
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from kyc_review.db.base import BaseModel
from kyc_review.utils.helpers import utcnow


class Document(BaseModel):
    """증빙 문서 테이블"""
    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint(
            "\"documentType\" IN ('passport', 'br_cert', 'address_proof', 'screening_report', 'other')",
            name="check_document_type"
        ),
    )

    id = Column(String(50), primary_key=True)
    case_id = Column("caseId", String(50), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    document_type = Column("documentType", String(30), nullable=False, index=True)
    file_name = Column("fileName", String(255), nullable=False)
    locator = Column("filePath", String(500), nullable=False)  # upload_dir 기준 상대 경로
    file_size = Column("fileSize", Integer, nullable=False)  # bytes
    mime_type = Column("mimeType", String(100), nullable=False)
    uploaded_at = Column("uploadedAt", DateTime, nullable=False, default=utcnow)

    # Relationships
    case = relationship("Case", back_populates="documents")
