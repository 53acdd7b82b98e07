"""Behavioural coverage for threading webhook events into chat."""

from __future__ import annotations

import typing as typ

import falcon.testing
import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from prthread.api.app import WEBHOOK_PATH, AppDependencies, create_app
from prthread.dispatcher import DispatcherDependencies, NotificationDispatcher
from prthread.github import IssueSearchResult, ThreadKeyResolver
from prthread.registry import InMemoryThreadRegistry
from tests.helpers.fakes import FakeChatDelivery, FakeSearchClient
from tests.helpers.github_events import (
    SECRET,
    encode,
    issue_comment_payload,
    pull_request_payload,
    pull_request_url,
    sign,
    status_payload,
)

if typ.TYPE_CHECKING:
    from falcon.testing.client import Result

scenarios("../thread_relay.feature")


class RelayContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    room: str
    delivery: FakeChatDelivery
    search_client: FakeSearchClient
    client: falcon.testing.TestClient
    responses: list[Result]


@pytest.fixture
def relay_context() -> RelayContext:
    """Provision fakes shared by the relay steps."""
    return {
        "delivery": FakeChatDelivery(),
        "search_client": FakeSearchClient(),
        "responses": [],
    }


def _client(context: RelayContext) -> falcon.testing.TestClient:
    if "client" not in context:
        dispatcher = NotificationDispatcher(
            DispatcherDependencies(
                registry=InMemoryThreadRegistry(),
                delivery=context["delivery"],
                resolver=ThreadKeyResolver(context["search_client"]),
            ),
            secret=SECRET,
        )
        context["client"] = falcon.testing.TestClient(
            create_app(AppDependencies(dispatcher=dispatcher))
        )
    return context["client"]


def _send(
    context: RelayContext,
    event: str,
    payload: dict[str, typ.Any],
    *,
    signed: bool = True,
) -> None:
    body = encode(payload)
    headers = {"X-GitHub-Event": event}
    if signed:
        headers["X-Hub-Signature"] = sign(body)
    response = _client(context).simulate_post(
        WEBHOOK_PATH,
        params={"room": context["room"]},
        headers=headers,
        body=body,
    )
    context["responses"].append(response)


@given(parsers.parse('a relay posting to room "{room}"'))
def given_relay(relay_context: RelayContext, room: str) -> None:
    """Record the destination room used by every delivery."""
    relay_context["room"] = room


@given(
    parsers.parse(
        "issue search finds pull requests {first:d} and {second:d} for the commit"
    )
)
def given_search_results(relay_context: RelayContext, first: int, second: int) -> None:
    """Seed the search client with matching pull requests."""
    relay_context["search_client"].results = [
        IssueSearchResult(number=number, html_url=pull_request_url(number))
        for number in (first, second)
    ]


@when(
    parsers.parse(
        'GitHub sends a signed "pull_request" event opening pull request {number:d}'
    )
)
def when_pull_request_opened(relay_context: RelayContext, number: int) -> None:
    """Deliver a signed pull request opened event."""
    _send(relay_context, "pull_request", pull_request_payload("opened", number=number))


@when(
    parsers.parse(
        'GitHub sends an unsigned "pull_request" event opening pull request {number:d}'
    )
)
def when_unsigned_pull_request(relay_context: RelayContext, number: int) -> None:
    """Deliver a pull request event without a signature header."""
    _send(
        relay_context,
        "pull_request",
        pull_request_payload("opened", number=number),
        signed=False,
    )


@when(
    parsers.parse(
        'GitHub sends a signed "issue_comment" event on pull request {number:d}'
    )
)
def when_issue_comment(relay_context: RelayContext, number: int) -> None:
    """Deliver a signed issue comment event."""
    _send(relay_context, "issue_comment", issue_comment_payload(number=number))


@when('GitHub sends a signed "status" event for the commit')
def when_status(relay_context: RelayContext) -> None:
    """Deliver a signed commit status event."""
    _send(relay_context, "status", status_payload("failure"))


@then(parsers.parse('{count:d} messages are posted to room "{room}"'))
def then_message_count(relay_context: RelayContext, count: int, room: str) -> None:
    """Assert how many messages reached the room."""
    messages = relay_context["delivery"].messages
    assert len(messages) == count, f"expected {count} messages, got {len(messages)}"
    assert all(message.destination == room for message in messages)


@then(parsers.parse("message {reply:d} replies to message {origin:d}"))
def then_message_replies(relay_context: RelayContext, reply: int, origin: int) -> None:
    """Assert that a message was posted into another message's thread."""
    delivery = relay_context["delivery"]
    origin_message = delivery.messages[origin - 1]
    reply_message = delivery.messages[reply - 1]
    assert origin_message.notification.thread_ts is None, "origin must be top-level"
    assert reply_message.notification.thread_ts == "1000.1", (
        f"expected reply to 1000.1, got {reply_message.notification.thread_ts}"
    )


@then("every response is 200 with an empty body")
def then_all_ok(relay_context: RelayContext) -> None:
    """Assert every delivery was acknowledged."""
    for response in relay_context["responses"]:
        assert response.status_code == 200, f"got {response.status_code}"
        assert response.text == "", "acknowledgement body should be empty"


@then(parsers.parse('the response is {status:d} with body "{body}"'))
def then_response(relay_context: RelayContext, status: int, body: str) -> None:
    """Assert the last response status and plain-text body."""
    response = relay_context["responses"][-1]
    assert response.status_code == status, f"got {response.status_code}"
    assert response.text == body, f"got {response.text!r}"
