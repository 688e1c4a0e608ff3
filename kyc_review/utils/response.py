"""
공통 응답 포맷 함수
"""
import math
from typing import Any, Optional, Dict


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    성공 응답 생성

    Args:
        data: 응답 데이터
        message: 응답 메시지

    Returns:
        성공 응답 딕셔너리
    """
    response = {
        "success": True,
        "data": data,
        "error": None
    }

    if message:
        response["message"] = message

    return response


def error_response(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    에러 응답 생성

    Args:
        code: 에러 코드
        message: 에러 메시지
        details: 추가 상세 정보

    Returns:
        에러 응답 딕셔너리
    """
    return {
        "success": False,
        "data": None,
        "error": {
            "code": code,
            "message": message,
            "details": details
        }
    }


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, int]:
    """목록 응답용 페이지네이션 정보"""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0
    }
