"""Typed models for inbound GitHub webhook deliveries."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

import msgspec


class EventType(enum.StrEnum):
    """Webhook event types understood by the relay.

    Values match the ``X-GitHub-Event`` header. Anything else maps to
    ``UNKNOWN`` so the classifier can drop it without raising.
    """

    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    ISSUE_COMMENT = "issue_comment"
    STATUS = "status"
    UNKNOWN = "unknown"

    @classmethod
    def from_header(cls, value: str) -> EventType:
        """Map an ``X-GitHub-Event`` header value onto an event type."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


PULL_REQUEST_EVENTS: typ.Final[frozenset[EventType]] = frozenset(
    {
        EventType.PULL_REQUEST,
        EventType.PULL_REQUEST_REVIEW,
        EventType.PULL_REQUEST_REVIEW_COMMENT,
    }
)


@dataclasses.dataclass(frozen=True, slots=True)
class WebhookDelivery:
    """Raw request material handed from the HTTP layer to the dispatcher."""

    raw_body: bytes
    signature: str | None
    event_header: str | None
    destination: str | None


@dataclasses.dataclass(frozen=True, slots=True)
class InboundEvent:
    """A verified webhook event with its decoded payload."""

    event_type: EventType
    raw_body: bytes
    payload: dict[str, typ.Any]

    @classmethod
    def decode(cls, event_header: str, raw_body: bytes) -> InboundEvent:
        """Decode a raw JSON body into an event.

        Raises
        ------
        msgspec.DecodeError
            If the body is not a JSON object.

        """
        payload = msgspec.json.decode(raw_body, type=dict[str, typ.Any])
        return cls(
            event_type=EventType.from_header(event_header),
            raw_body=raw_body,
            payload=payload,
        )


class IssueSearchResult(msgspec.Struct, kw_only=True, frozen=True):
    """Single item returned by the GitHub issue search API.

    Attributes
    ----------
    number : int
        Issue or pull request number within its repository.
    html_url : str
        Canonical browser URL of the issue or pull request.

    """

    number: int
    html_url: str


class IssueSearchPage(msgspec.Struct, kw_only=True):
    """Subset of the ``/search/issues`` response body the relay consumes."""

    items: list[IssueSearchResult]
    total_count: int = 0
