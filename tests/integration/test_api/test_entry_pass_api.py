"""Integration tests for the personal entry pass."""
import base64

import pytest

from mice.core.constants import UserRole
from mice.core.security import create_access_token


@pytest.mark.integration
class TestEntryPass:

    def test_own_pass(self, client, attendee, attendee_headers):
        response = client.get("/api/users/me/entry-pass", headers=attendee_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == attendee.id
        assert data["qrData"] == str(attendee.id)
        assert base64.b64decode(data["qrImage"]).startswith(b"\x89PNG")

    def test_pass_admits_at_the_door(self, client, admin_headers, attendee_headers):
        qr_data = client.get("/api/users/me/entry-pass", headers=attendee_headers).json()["qrData"]

        response = client.post("/api/admin/event-entry", json={"userId": qr_data}, headers=admin_headers)

        assert response.status_code == 201

    def test_token_for_deleted_user(self, client):
        token = create_access_token(4242, UserRole.ATTENDEE)

        response = client.get(
            "/api/users/me/entry-pass", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}

    def test_token_user_id_beyond_key_range(self, client):
        token = create_access_token(10**30, UserRole.ATTENDEE)

        response = client.get(
            "/api/users/me/entry-pass", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}

    def test_requires_authentication(self, client):
        response = client.get("/api/users/me/entry-pass")

        assert response.status_code == 401
