"""
케이스 API 통합 테스트
"""
import pytest


def _create(client, headers, payload):
    response = client.post("/cases", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.integration
class TestCaseApi:
    """케이스 CRUD 및 상태 변경 API 테스트"""

    def test_requires_authentication(self, client, sample_case_input):
        response = client.post("/cases", json=sample_case_input)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

        response = client.get("/cases", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_create_and_get_case(self, client, auth_headers, sample_case_input, rm_user):
        created = _create(client, auth_headers, sample_case_input)
        assert created["status"] == "pending"
        assert created["riskScore"] is None
        assert created["rmId"] == rm_user["id"]

        response = client.get(f"/cases/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["caseNumber"] == created["caseNumber"]
        assert data["data"]["relationshipManager"]["email"] == rm_user["email"]
        assert "password" not in data["data"]["relationshipManager"]

    def test_create_missing_required_field(self, client, auth_headers, sample_case_input):
        del sample_case_input["clientName"]
        response = client.post("/cases", json=sample_case_input, headers=auth_headers)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["field"] == "clientName"

    def test_create_with_empty_body(self, client, auth_headers):
        response = client.post("/cases", headers=auth_headers)
        assert response.status_code == 400

    def test_get_unknown_case(self, client, auth_headers):
        response = client.get("/cases/case_missing", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_list_cases(self, client, auth_headers, sample_case_input):
        for name in ["Jane Roe", "John Smith", "Acme Holdings"]:
            _create(client, auth_headers, dict(sample_case_input, clientName=name))

        response = client.get(
            "/cases",
            params={"search": "jo", "sortBy": "clientName", "sortOrder": "asc", "page": 1, "limit": 10},
            headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert [case["clientName"] for case in data["cases"]] == ["John Smith"]
        assert data["pagination"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}
        assert data["cases"][0]["documentCount"] == 0

    def test_list_cases_rejects_unknown_sort_field(self, client, auth_headers):
        response = client.get("/cases", params={"sortBy": "password"}, headers=auth_headers)
        assert response.status_code == 400

    def test_update_case_fields(self, client, auth_headers, sample_case_input):
        created = _create(client, auth_headers, sample_case_input)

        response = client.put(
            f"/cases/{created['id']}",
            json={"industry": "Finance", "caseNumber": "KYC-HIJACK", "status": "approved"},
            headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["industry"] == "Finance"
        assert data["caseNumber"] == created["caseNumber"]
        assert data["status"] == "pending"

        response = client.put("/cases/case_missing", json={"industry": "x"}, headers=auth_headers)
        assert response.status_code == 404

    def test_status_transitions(self, client, auth_headers, reviewer_headers, reviewer, sample_case_input):
        created = _create(client, auth_headers, sample_case_input)
        url = f"/cases/{created['id']}/status"

        response = client.patch(url, json={"status": "finished"}, headers=reviewer_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

        response = client.patch(url, json={"status": "ai_ready"}, headers=reviewer_headers)
        assert response.status_code == 400

        response = client.patch(url, json={"status": "in_review"}, headers=reviewer_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "in_review"

        response = client.patch(url, json={"status": "approved"}, headers=reviewer_headers)
        data = response.json()["data"]
        assert data["status"] == "approved"
        assert data["approvedBy"] == reviewer["id"]
        assert data["approvedAt"] is not None
        assert data["rejectedAt"] is None

        response = client.patch(
            "/cases/case_missing/status", json={"status": "approved"}, headers=reviewer_headers
        )
        assert response.status_code == 404

    def test_summary_missing(self, client, auth_headers, sample_case_input):
        created = _create(client, auth_headers, sample_case_input)
        response = client.get(f"/cases/{created['id']}/summary", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_case(self, client, auth_headers, sample_case_input):
        created = _create(client, auth_headers, sample_case_input)

        response = client.delete(f"/cases/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"id": created["id"]}

        assert client.get(f"/cases/{created['id']}", headers=auth_headers).status_code == 404
        assert client.delete(f"/cases/{created['id']}", headers=auth_headers).status_code == 404


@pytest.mark.integration
def test_health_and_root(client):
    assert client.get("/").json()["docs"] == "/docs"
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "healthy"
