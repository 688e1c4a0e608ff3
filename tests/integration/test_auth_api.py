"""
인증 API 통합 테스트
"""
import pytest
from kyc_review.services.user_service import create_access_token


@pytest.mark.integration
class TestAuthApi:
    """등록/로그인/토큰 API 테스트"""

    def test_register_and_me(self, client):
        response = client.post("/auth/register", json={
            "email": "New.RM@Example.com",
            "username": "newrm",
            "password": "s3cret",
            "name": "New RM",
            "role": "admin",
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "new.rm@example.com"
        assert data["user"]["role"] == "user"
        assert "password" not in data["user"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.json()["data"]["id"] == data["user"]["id"]

    def test_register_duplicate(self, client, rm_user):
        response = client.post("/auth/register", json={
            "email": rm_user["email"],
            "username": "someoneelse",
            "password": "x",
            "name": "Dup",
        })
        assert response.status_code == 409
        assert response.json()["error"]["details"]["field"] == "email"

    def test_register_missing_fields(self, client):
        response = client.post("/auth/register", json={"email": "a@b.com"})
        assert response.status_code == 400

    def test_login(self, client, rm_user):
        response = client.post("/auth/login", json={"email": "rm@example.com", "password": "password"})
        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == rm_user["id"]
        assert response.json()["data"]["token"]

        response = client.post("/auth/login", json={"email": "rm@example.com", "password": "wrong"})
        assert response.status_code == 401
        response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "password"})
        assert response.status_code == 401

    def test_expired_and_orphan_tokens_rejected(self, client, rm_user):
        expired = create_access_token(rm_user["id"], expires_minutes=-1)
        assert client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401

        orphan = create_access_token("user_deleted")
        assert client.get("/auth/me", headers={"Authorization": f"Bearer {orphan}"}).status_code == 401

    def test_logout(self, client, auth_headers):
        response = client.post("/auth/logout", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True
