"""
외부 분석기 클라이언트 단위 테스트
"""
import pytest
import requests
from unittest.mock import Mock
from kyc_review.services.analyzer_client import AnalyzerClient
from kyc_review.utils.exceptions import AnalysisTriggerFailed

PAYLOAD = {
    "caseId": "case_123",
    "caseNumber": "KYC-20240101-ABCDEF",
    "clientName": "Jane Roe",
    "clientType": "individual",
    "country": "Hong Kong",
    "businessType": None,
    "industry": None,
    "sourceOfWealth": None,
    "screeningReport": {
        "id": "doc_1", "fileName": "report.pdf", "locator": "case_123/a.pdf", "mimeType": "application/pdf"
    },
}


def _response(status_code, body=None):
    response = Mock()
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http_session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(http_session):
    return AnalyzerClient(
        webhook_url="http://analyzer.local/webhook/kyc",
        api_key="secret",
        timeout=5.0,
        session=http_session
    )


@pytest.mark.unit
def test_send_posts_payload_with_api_key(client, http_session):
    http_session.post.return_value = _response(200, {"status": "accepted"})

    assert client.send(PAYLOAD) == {"status": "accepted"}

    http_session.post.assert_called_once_with(
        "http://analyzer.local/webhook/kyc",
        json=PAYLOAD,
        headers={"Content-Type": "application/json", "X-API-Key": "secret"},
        timeout=5.0
    )


@pytest.mark.unit
def test_send_without_api_key_omits_header(http_session):
    http_session.post.return_value = _response(202)
    client = AnalyzerClient(webhook_url="http://analyzer.local", api_key="", session=http_session)

    assert client.send(PAYLOAD) == {}
    assert "X-API-Key" not in http_session.post.call_args.kwargs["headers"]


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
def test_non_2xx_raises(client, http_session, status_code):
    http_session.post.return_value = _response(status_code, {"error": "x"})

    with pytest.raises(AnalysisTriggerFailed) as exc_info:
        client.send(PAYLOAD)
    assert exc_info.value.status_code == status_code


@pytest.mark.unit
@pytest.mark.parametrize("error", [
    requests.Timeout("read timed out"),
    requests.ConnectionError("refused"),
])
def test_transport_errors_raise(client, http_session, error):
    http_session.post.side_effect = error

    with pytest.raises(AnalysisTriggerFailed):
        client.send(PAYLOAD)


@pytest.mark.unit
def test_is_configured():
    assert AnalyzerClient(webhook_url="http://analyzer.local").is_configured is True
    assert AnalyzerClient(webhook_url="").is_configured is False
