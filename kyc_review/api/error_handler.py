"""
API 에러 핸들러 모듈
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from kyc_review.utils.exceptions import (
    AnalysisTriggerFailed,
    ConstraintViolationError,
    InvalidStatusError,
    NotFoundError,
    PreconditionFailedError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from kyc_review.utils.response import error_response
from kyc_review.utils.logger import get_logger

logger = get_logger(__name__)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 형식(경로/쿼리/본문 타입) 검증 에러 핸들러"""
    errors = exc.errors()
    error_details = {
        "field": errors[0].get("loc")[-1] if errors and errors[0].get("loc") else None,
        "message": errors[0].get("msg") if errors else "검증 오류"
    }

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(
            code="REQUEST_VALIDATION_ERROR",
            message="요청 데이터 검증 실패",
            details=error_details
        )
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    """입력 검증 에러 핸들러 (상태/선행 조건 오류 포함)"""
    if isinstance(exc, InvalidStatusError):
        code = "INVALID_STATUS"
    elif isinstance(exc, PreconditionFailedError):
        code = "PRECONDITION_FAILED"
    else:
        code = "VALIDATION_ERROR"

    details = dict(exc.details or {})
    if exc.field:
        details["field"] = exc.field

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            code=code,
            message=exc.message,
            details=details or None
        )
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    """엔티티 없음 에러 핸들러"""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_response(
            code="NOT_FOUND",
            message=str(exc),
            details={"entity": exc.entity, "id": exc.identifier}
        )
    )


async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
    """유니크 제약 위반 에러 핸들러"""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_response(
            code="CONSTRAINT_VIOLATION",
            message=str(exc),
            details={"field": exc.field} if exc.field else None
        )
    )


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    """인증 실패 에러 핸들러"""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_response(
            code="UNAUTHORIZED",
            message=str(exc)
        ),
        headers={"WWW-Authenticate": "Bearer"}
    )


async def analysis_trigger_failed_handler(request: Request, exc: AnalysisTriggerFailed):
    """외부 분석기 호출 실패 핸들러"""
    logger.error(f"분석 요청 실패: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=error_response(
            code="ANALYSIS_TRIGGER_FAILED",
            message="외부 분석기 호출 중 오류가 발생했습니다.",
            details={"status_code": exc.status_code} if exc.status_code else None
        )
    )


async def storage_error_handler(request: Request, exc: StorageError):
    """저장소 에러 핸들러"""
    logger.error(f"저장소 오류: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="STORAGE_ERROR",
            message="데이터 저장 중 오류가 발생했습니다."
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """라우팅 등 프레임워크 HTTP 에러를 공통 포맷으로 변환"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            code="HTTP_ERROR",
            message=str(exc.detail)
        ),
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러"""
    logger.error(f"예상치 못한 오류: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="INTERNAL_SERVER_ERROR",
            message="서버 내부 오류가 발생했습니다."
        )
    )


def register_exception_handlers(app: FastAPI) -> None:
    """애플리케이션에 에러 핸들러 등록"""
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConstraintViolationError, constraint_violation_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)
    app.add_exception_handler(AnalysisTriggerFailed, analysis_trigger_failed_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
