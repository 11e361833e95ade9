"""Integration tests for session check-in with dynamic QR tokens."""
import pytest

from mice.core.constants import UserRole
from mice.core.security import create_access_token
from mice.db.models import AttendanceLog
from tests.utils import auth_headers, make_user


def issue_token(client, admin_headers, session_id):
    response = client.get(f"/api/sessions/{session_id}/dynamic-qr", headers=admin_headers)
    assert response.status_code == 200
    return response.json()["dynamicToken"]


@pytest.mark.integration
class TestCheckinFlow:
    """Attendee scans the session display and checks in."""

    def test_checkin_then_duplicate(self, client, admin_headers, attendee, attendee_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Check-in successful"
        log = data["attendanceLog"]
        assert log["userId"] == attendee.id
        assert log["sessionId"] == conference_session.id
        assert "checkedInAt" in log

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )
        assert response.status_code == 409
        assert response.json() == {"detail": "Already checked in to this session"}

    def test_expired_token(self, client, clock, admin_headers, attendee_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)
        clock.advance(61)

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid or expired QR code"}

    def test_token_expires_exactly_at_ttl(self, client, clock, admin_headers, attendee_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)
        clock.advance(60)

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )

        assert response.status_code == 400

    def test_token_still_valid_before_ttl(self, client, clock, admin_headers, attendee_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)
        clock.advance(59)

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )

        assert response.status_code == 201

    def test_unknown_token_same_response_as_expired(
        self, client, clock, admin_headers, attendee_headers, conference_session
    ):
        token = issue_token(client, admin_headers, conference_session.id)
        clock.advance(61)

        expired = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )
        unknown = client.post(
            "/api/sessions/check-in", json={"dynamicToken": "made-up-token"}, headers=attendee_headers
        )

        assert expired.status_code == unknown.status_code == 400
        assert expired.json() == unknown.json()

    @pytest.mark.parametrize("body", [{}, {"dynamicToken": ""}, {"dynamicToken": None}])
    def test_missing_token(self, client, attendee_headers, body):
        response = client.post("/api/sessions/check-in", json=body, headers=attendee_headers)

        assert response.status_code == 400
        assert response.json() == {"detail": "Dynamic token is required"}

    def test_oversized_token_rejected(self, client, attendee_headers):
        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": "x" * 500}, headers=attendee_headers
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid or expired QR code"}

    def test_session_deleted_after_token_issued(
        self, client, db_session, admin_headers, attendee_headers, conference_session
    ):
        token = issue_token(client, admin_headers, conference_session.id)
        db_session.delete(conference_session)
        db_session.commit()

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}
        assert db_session.query(AttendanceLog).count() == 0

    @pytest.mark.parametrize("user_id", [4242, 10**30])
    def test_token_for_missing_user(self, client, db_session, admin_headers, conference_session, user_id):
        token = issue_token(client, admin_headers, conference_session.id)
        headers = {"Authorization": f"Bearer {create_access_token(user_id, UserRole.ATTENDEE)}"}

        response = client.post("/api/sessions/check-in", json={"dynamicToken": token}, headers=headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}
        assert db_session.query(AttendanceLog).count() == 0

    def test_requires_authentication(self, client):
        response = client.post("/api/sessions/check-in", json={"dynamicToken": "abc"})

        assert response.status_code == 401

    def test_admin_cannot_check_in(self, client, admin_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=admin_headers
        )

        assert response.status_code == 403
        assert response.json() == {"detail": "Attendee access required"}

    def test_speaker_cannot_check_in(self, client, admin_headers, speaker, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)

        response = client.post(
            "/api/sessions/check-in", json={"dynamicToken": token}, headers=auth_headers(speaker)
        )

        assert response.status_code == 403

    def test_room_shares_one_token(self, client, db_session, admin_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)
        guests = [make_user(db_session, UserRole.ATTENDEE, name=f"Guest {i}") for i in range(3)]

        for guest in guests:
            response = client.post(
                "/api/sessions/check-in", json={"dynamicToken": token}, headers=auth_headers(guest)
            )
            assert response.status_code == 201

        response = client.get(
            f"/api/admin/sessions/{conference_session.id}/attendance", headers=admin_headers
        )
        assert response.json()["totalAttendees"] == 3


@pytest.mark.integration
class TestSessionAttendance:

    def test_attendance_listing(self, client, admin_headers, attendee, attendee_headers, conference_session):
        token = issue_token(client, admin_headers, conference_session.id)
        client.post("/api/sessions/check-in", json={"dynamicToken": token}, headers=attendee_headers)

        response = client.get(
            f"/api/admin/sessions/{conference_session.id}/attendance", headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["sessionId"] == conference_session.id
        assert data["totalAttendees"] == 1
        log = data["attendanceLogs"][0]
        assert log["user"] == {
            "id": attendee.id,
            "name": attendee.name,
            "email": attendee.email,
            "organization": "KAIST",
        }

    def test_attendance_unknown_session(self, client, admin_headers):
        response = client.get("/api/admin/sessions/99999/attendance", headers=admin_headers)

        assert response.status_code == 404

    def test_attendance_session_id_beyond_key_range(self, client, admin_headers):
        response = client.get(f"/api/admin/sessions/{10**30}/attendance", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}

    def test_attendance_requires_admin(self, client, attendee_headers, conference_session):
        response = client.get(
            f"/api/admin/sessions/{conference_session.id}/attendance", headers=attendee_headers
        )

        assert response.status_code == 403
        assert response.json() == {"detail": "Admin access required"}
