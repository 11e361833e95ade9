"""Integration tests for dynamic QR issuance and its SSE feed."""
import json
from unittest.mock import patch

import pytest

from tests.utils import auth_headers


def one_shot_generator(request, data_func, interval):
    """Stand-in for event_generator that emits a single real event."""
    async def gen():
        yield f"data: {json.dumps(data_func())}\n\n"
    return gen()


@pytest.mark.integration
class TestDynamicQREndpoint:

    def test_issue_token(self, client, admin_headers, conference_session, token_cache):
        response = client.get(
            f"/api/sessions/{conference_session.id}/dynamic-qr", headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"sessionId", "dynamicToken", "expiresIn", "generatedAt"}
        assert data["sessionId"] == conference_session.id
        assert data["expiresIn"] == 60
        assert token_cache.get(data["dynamicToken"]) == conference_session.id

    def test_each_call_issues_a_new_token(self, client, admin_headers, conference_session):
        url = f"/api/sessions/{conference_session.id}/dynamic-qr"
        first = client.get(url, headers=admin_headers).json()["dynamicToken"]
        second = client.get(url, headers=admin_headers).json()["dynamicToken"]

        assert first != second

    def test_unknown_session(self, client, admin_headers):
        response = client.get("/api/sessions/99999/dynamic-qr", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}

    def test_session_id_beyond_key_range(self, client, admin_headers):
        response = client.get(f"/api/sessions/{10**30}/dynamic-qr", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}

    def test_requires_token(self, client, conference_session):
        response = client.get(f"/api/sessions/{conference_session.id}/dynamic-qr")

        assert response.status_code == 401
        assert response.json()["detail"] == "No token provided"

    def test_requires_admin(self, client, attendee_headers, conference_session, token_cache):
        response = client.get(
            f"/api/sessions/{conference_session.id}/dynamic-qr", headers=attendee_headers
        )

        assert response.status_code == 403
        assert len(token_cache) == 0

    def test_speaker_cannot_issue(self, client, speaker, conference_session):
        response = client.get(
            f"/api/sessions/{conference_session.id}/dynamic-qr", headers=auth_headers(speaker)
        )

        assert response.status_code == 403


@pytest.mark.integration
class TestDynamicQRStream:

    @patch("mice.api.v1.endpoints.sse.event_generator", side_effect=one_shot_generator)
    def test_stream_emits_fresh_token(self, mock_generator, client, admin_headers, conference_session, token_cache):
        response = client.get(
            f"/api/sessions/{conference_session.id}/dynamic-qr/stream", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/event-stream; charset=utf-8"
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["x-accel-buffering"] == "no"

        event = json.loads(response.text.split("data: ", 1)[1])
        assert event["sessionId"] == conference_session.id
        assert event["expiresIn"] == 60
        assert event["refreshIn"] == 50
        assert event["refreshIn"] < event["expiresIn"]
        assert token_cache.get(event["dynamicToken"]) == conference_session.id

        assert mock_generator.call_args.kwargs["interval"] == 50

    def test_stream_unknown_session(self, client, admin_headers):
        response = client.get("/api/sessions/99999/dynamic-qr/stream", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}

    def test_stream_session_id_beyond_key_range(self, client, admin_headers):
        response = client.get(f"/api/sessions/{10**30}/dynamic-qr/stream", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}

    def test_stream_requires_admin(self, client, attendee_headers, conference_session):
        response = client.get(
            f"/api/sessions/{conference_session.id}/dynamic-qr/stream", headers=attendee_headers
        )

        assert response.status_code == 403
