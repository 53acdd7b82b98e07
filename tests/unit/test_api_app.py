"""Unit tests for prthread.api.app application factory and webhook route.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

import typing as typ

import falcon
import falcon.asgi
import falcon.testing
import pytest

from prthread.api.app import WEBHOOK_PATH, AppDependencies, create_app
from prthread.errors import (
    INVALID_SIGNATURE_MESSAGE,
    MISSING_EVENT_MESSAGE,
    MISSING_ROOM_MESSAGE,
    MISSING_SIGNATURE_MESSAGE,
)
from tests.helpers.github_events import (
    encode,
    issue_comment_payload,
    pull_request_payload,
    sign,
)

if typ.TYPE_CHECKING:
    from prthread.dispatcher import NotificationDispatcher
    from tests.helpers.fakes import FakeChatDelivery


@pytest.fixture
def health_client() -> falcon.testing.TestClient:
    """Build a test client for health-only mode."""
    return falcon.testing.TestClient(create_app())


@pytest.fixture
def client(dispatcher: NotificationDispatcher) -> falcon.testing.TestClient:
    """Build a test client serving the webhook endpoint."""
    return falcon.testing.TestClient(
        create_app(AppDependencies(dispatcher=dispatcher))
    )


def _post(
    client: falcon.testing.TestClient,
    body: bytes,
    *,
    headers: dict[str, str],
    room: str | None = "dev",
) -> falcon.testing.Result:
    params = {"room": room} if room is not None else None
    return client.simulate_post(WEBHOOK_PATH, body=body, headers=headers, params=params)


def _signed_headers(body: bytes, event: str = "pull_request") -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Hub-Signature": sign(body),
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
    }


class TestCreateAppHealthOnly:
    """Tests for create_app() without a dispatcher."""

    def test_returns_falcon_app(self) -> None:
        """Create_app() returns a Falcon ASGI App."""
        assert isinstance(create_app(), falcon.asgi.App), "expected Falcon ASGI App"

    def test_has_health_route(self, health_client: falcon.testing.TestClient) -> None:
        """Health-only app responds to /health."""
        result = health_client.simulate_get("/health")
        assert result.status == falcon.HTTP_200, "expected HTTP 200 from /health"
        assert result.json == {"status": "ok"}, "wrong /health body"

    def test_has_ready_route(self, health_client: falcon.testing.TestClient) -> None:
        """Health-only app responds to /ready."""
        result = health_client.simulate_get("/ready")
        assert result.status == falcon.HTTP_200, "expected HTTP 200 from /ready"
        assert result.json == {"status": "ready"}, "wrong /ready body"

    def test_webhook_endpoint_not_registered(
        self, health_client: falcon.testing.TestClient
    ) -> None:
        """Without a dispatcher the webhook path returns 404."""
        result = health_client.simulate_post(WEBHOOK_PATH)
        assert result.status == falcon.HTTP_404, "expected HTTP 404"


class TestWebhookRejections:
    """Rejected deliveries answer with the plain-text reason."""

    def test_missing_signature_is_401(
        self,
        client: falcon.testing.TestClient,
        delivery: FakeChatDelivery,
    ) -> None:
        """Unsigned requests are unauthorized."""
        body = encode(pull_request_payload("opened"))
        result = _post(client, body, headers={"X-GitHub-Event": "pull_request"})

        assert result.status == falcon.HTTP_401, "expected HTTP 401"
        assert result.text == MISSING_SIGNATURE_MESSAGE, "wrong rejection body"
        assert delivery.messages == [], "nothing should be posted"

    def test_invalid_signature_is_401(self, client: falcon.testing.TestClient) -> None:
        """Signatures over other bytes are unauthorized."""
        body = encode(pull_request_payload("opened"))
        headers = _signed_headers(b"{}")

        result = _post(client, body, headers=headers)

        assert result.status == falcon.HTTP_401, "expected HTTP 401"
        assert result.text == INVALID_SIGNATURE_MESSAGE, "wrong rejection body"

    def test_missing_room_is_400(self, client: falcon.testing.TestClient) -> None:
        """The room query parameter is required."""
        body = encode(pull_request_payload("opened"))

        result = _post(client, body, headers=_signed_headers(body), room=None)

        assert result.status == falcon.HTTP_400, "expected HTTP 400"
        assert result.text == MISSING_ROOM_MESSAGE, "wrong rejection body"

    def test_missing_event_is_400(self, client: falcon.testing.TestClient) -> None:
        """The X-GitHub-Event header is required."""
        body = encode(pull_request_payload("opened"))
        headers = _signed_headers(body)
        del headers["X-GitHub-Event"]

        result = _post(client, body, headers=headers)

        assert result.status == falcon.HTTP_400, "expected HTTP 400"
        assert result.text == MISSING_EVENT_MESSAGE, "wrong rejection body"


class TestWebhookAccepted:
    """Accepted deliveries always answer 200 with an empty body."""

    def test_pull_request_is_relayed(
        self,
        client: falcon.testing.TestClient,
        delivery: FakeChatDelivery,
    ) -> None:
        """A signed pull request event is posted to the room."""
        body = encode(pull_request_payload("opened"))

        result = _post(client, body, headers=_signed_headers(body))

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.text == "", "acknowledgement body should be empty"
        assert [m.destination for m in delivery.messages] == ["dev"]

    def test_comment_replies_in_thread(
        self,
        client: falcon.testing.TestClient,
        delivery: FakeChatDelivery,
    ) -> None:
        """A later comment on the same pull request is a thread reply."""
        opened = encode(pull_request_payload("opened"))
        comment = encode(issue_comment_payload())

        _post(client, opened, headers=_signed_headers(opened))
        _post(client, comment, headers=_signed_headers(comment, "issue_comment"))

        assert delivery.messages[1].notification.thread_ts == "1000.1"

    def test_ignored_event_is_acknowledged(
        self,
        client: falcon.testing.TestClient,
        delivery: FakeChatDelivery,
    ) -> None:
        """Unhandled events still answer 200."""
        body = encode({"zen": "Keep it logically awesome."})

        result = _post(client, body, headers=_signed_headers(body, "ping"))

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert delivery.messages == [], "nothing should be posted"

    def test_malformed_body_is_acknowledged(
        self, client: falcon.testing.TestClient
    ) -> None:
        """Processing failures never surface as HTTP errors."""
        body = b"[1, 2"

        result = _post(client, body, headers=_signed_headers(body))

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.text == "", "acknowledgement body should be empty"
