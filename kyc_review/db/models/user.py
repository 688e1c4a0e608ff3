"""
User 모델
"""
from sqlalchemy import Column, String, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from kyc_review.db.base import BaseModel
from kyc_review.utils.helpers import utcnow


class User(BaseModel):
    """사용자 (RM / 관리자) 테이블"""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'user')", name="check_user_role"),
    )
    __hidden_columns__ = ("password",)

    id = Column(String(50), primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)  # 해시값
    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column("createdAt", DateTime, nullable=False, default=utcnow)
    updated_at = Column("updatedAt", DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    cases = relationship("Case", back_populates="relationship_manager")

    def to_brief(self):
        """케이스 응답에 포함되는 요약 정보"""
        return {"id": self.id, "name": self.name, "email": self.email}
