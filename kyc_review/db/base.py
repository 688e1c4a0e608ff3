"""
데이터베이스 Base 클래스
"""
from datetime import date, datetime
from sqlalchemy import inspect
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BaseModel(Base):
    """기본 모델 클래스"""
    __abstract__ = True

    # to_json 에서 제외할 컬럼 (예: 비밀번호 해시)
    __hidden_columns__ = ()

    def to_dict(self):
        """모델을 딕셔너리로 변환 (키는 DB 컬럼명)"""
        return {
            attr.columns[0].name: getattr(self, attr.key)
            for attr in inspect(self).mapper.column_attrs
        }

    def to_json(self):
        """모델을 JSON 직렬화 가능한 딕셔너리로 변환"""
        result = {}
        for name, value in self.to_dict().items():
            if name in self.__hidden_columns__:
                continue
            if isinstance(value, (datetime, date)):
                result[name] = value.isoformat()
            else:
                result[name] = value
        return result
