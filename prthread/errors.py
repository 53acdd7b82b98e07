"""Webhook rejection errors raised before an event is processed.

The messages are returned verbatim to GitHub as the response body, which
shows them in the repository's webhook delivery log.
"""

from __future__ import annotations

MISSING_SIGNATURE_MESSAGE = "ERROR: GitHub Secret not set. Rejecting request!"
INVALID_SIGNATURE_MESSAGE = "ERROR: GitHub Secret invalid. Rejecting request!"
MISSING_ROOM_MESSAGE = 'ERROR: No room was defined. Please pass the parameter "room"!'
MISSING_EVENT_MESSAGE = (
    "ERROR: No event type was defined. Please send the X-GitHub-Event header!"
)


class WebhookRejectedError(Exception):
    """Base class for requests refused without processing."""

    def __init__(self, message: str) -> None:
        """Store the message returned to the caller."""
        self.message = message
        super().__init__(message)


class WebhookUnauthorizedError(WebhookRejectedError):
    """Raised when a delivery is not signed with the configured secret."""

    @classmethod
    def missing_signature(cls) -> WebhookUnauthorizedError:
        """Return an error for a request without ``X-Hub-Signature``."""
        return cls(MISSING_SIGNATURE_MESSAGE)

    @classmethod
    def invalid_signature(cls) -> WebhookUnauthorizedError:
        """Return an error for a mismatched or unverifiable signature."""
        return cls(INVALID_SIGNATURE_MESSAGE)


class WebhookBadRequestError(WebhookRejectedError):
    """Raised when a required request parameter or header is missing."""

    @classmethod
    def missing_room(cls) -> WebhookBadRequestError:
        """Return an error for a request without the ``room`` parameter."""
        return cls(MISSING_ROOM_MESSAGE)

    @classmethod
    def missing_event_type(cls) -> WebhookBadRequestError:
        """Return an error for a request without ``X-GitHub-Event``."""
        return cls(MISSING_EVENT_MESSAGE)
