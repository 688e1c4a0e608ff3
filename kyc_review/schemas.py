"""
입력 데이터 스키마 (케이스 생성/수정, 분석 결과, 사용자 등록)

외부 입력은 camelCase 키로 들어오며, 검증 실패는 ValidationError(400)로 변환한다.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from kyc_review.utils.constants import ClientType, MAX_RISK_SCORE, MIN_RISK_SCORE
from kyc_review.utils.exceptions import ValidationError
from kyc_review.utils.helpers import parse_date

ModelT = TypeVar("ModelT", bound=BaseModel)


class _InputModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


def parse_model(model_cls: Type[ModelT], data: Any) -> ModelT:
    """
    pydantic 검증 후 실패 시 도메인 ValidationError 발생

    Args:
        model_cls: 검증할 모델 클래스
        data: 요청 데이터

    Returns:
        검증된 모델 인스턴스
    """
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        loc = first.get("loc") or ()
        field = ".".join(str(part) for part in loc) or None
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "잘못된 입력"))
        raise ValidationError(
            message,
            field=field,
            details={"errors": [
                {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
                for err in errors
            ]}
        ) from e


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _CaseFields(_InputModel):
    nationality: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_incorporation: Optional[date] = None
    business_type: Optional[str] = None
    industry: Optional[str] = None
    source_of_wealth: Optional[str] = None

    @field_validator(
        "nationality", "business_type", "industry", "source_of_wealth", mode="before"
    )
    @classmethod
    def _optional_text(cls, value):
        return _blank_to_none(value)

    @field_validator("date_of_birth", "date_of_incorporation", mode="before")
    @classmethod
    def _lenient_date(cls, value):
        return parse_date(_blank_to_none(value))


class CaseCreate(_CaseFields):
    """케이스 생성 입력"""
    client_type: ClientType
    client_name: str = Field(min_length=1, max_length=255)
    country: str = Field(min_length=1, max_length=100)


class CasePatch(_CaseFields):
    """
    케이스 필드 수정 입력

    수정 가능한 필드만 정의한다. id, caseNumber, createdAt, rmId, status,
    riskScore 및 승인/거절 기록은 정의되지 않으므로 조용히 무시된다.
    """
    client_type: Optional[ClientType] = None
    client_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    country: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("client_type", "client_name", "country")
    @classmethod
    def _required_when_present(cls, value):
        if value is None:
            raise ValueError("필수 필드는 비울 수 없습니다")
        return value


class AnalysisResult(_InputModel):
    """외부 분석기 콜백 페이로드"""
    case_id: str = Field(min_length=1)
    risk_score: int = Field(ge=MIN_RISK_SCORE, le=MAX_RISK_SCORE)
    summary: str = Field(min_length=1)
    recommendation: str = Field(min_length=1)
    red_flags: List[str] = Field(default_factory=list)
    missing_info: List[str] = Field(default_factory=list)
    processing_time: Optional[int] = None
    model_used: Optional[str] = None

    @field_validator("red_flags", "missing_info", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return [] if value is None else value


class UserCreate(_InputModel):
    """사용자 등록 입력"""
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)


class LoginRequest(_InputModel):
    """로그인 입력"""
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


def patch_values(patch: CasePatch) -> Dict[str, Any]:
    """요청에 실제로 포함된 필드만 추출 (모델 속성명 기준)"""
    values = patch.model_dump(exclude_unset=True)
    if "client_type" in values and isinstance(values["client_type"], ClientType):
        values["client_type"] = values["client_type"].value
    return values
