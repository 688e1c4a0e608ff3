"""
응답 포맷 함수 단위 테스트
"""
import pytest
from kyc_review.utils.response import success_response, error_response, pagination_meta


@pytest.mark.unit
def test_success_response():
    """성공 응답 테스트"""
    response = success_response({"key": "value"}, "성공")
    assert response["success"] is True
    assert response["data"] == {"key": "value"}
    assert response["error"] is None
    assert response["message"] == "성공"


@pytest.mark.unit
def test_success_response_without_message():
    """메시지 없는 성공 응답 테스트"""
    response = success_response({"key": "value"})
    assert response["success"] is True
    assert "message" not in response


@pytest.mark.unit
def test_error_response():
    """에러 응답 테스트"""
    response = error_response("VALIDATION_ERROR", "잘못된 입력", {"field": "clientName"})
    assert response["success"] is False
    assert response["data"] is None
    assert response["error"]["code"] == "VALIDATION_ERROR"
    assert response["error"]["message"] == "잘못된 입력"
    assert response["error"]["details"] == {"field": "clientName"}


@pytest.mark.unit
@pytest.mark.parametrize("total, limit, expected_pages", [
    (0, 20, 0),
    (1, 20, 1),
    (20, 20, 1),
    (21, 20, 2),
])
def test_pagination_meta(total, limit, expected_pages):
    """페이지네이션 정보 테스트"""
    meta = pagination_meta(page=1, limit=limit, total=total)
    assert meta == {"page": 1, "limit": limit, "total": total, "totalPages": expected_pages}
