"""Chat delivery errors."""

from __future__ import annotations


class DeliveryError(RuntimeError):
    """Raised when a notification could not be posted."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> DeliveryError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"Slack API HTTP {status_code}", status_code=status_code)

    @classmethod
    def slack_error(cls, error: object) -> DeliveryError:
        """Return an error for ``ok: false`` Slack responses."""
        return cls(f"Slack API error: {error}")

    @classmethod
    def network_error(cls, detail: str) -> DeliveryError:
        """Return an error for DNS, connection, TLS or timeout failures."""
        return cls(f"Slack API network error: {detail}")


class DeliveryConfigError(RuntimeError):
    """Raised when delivery configuration is invalid."""

    @classmethod
    def missing_token(cls) -> DeliveryConfigError:
        """Return an error when no Slack token is configured."""
        return cls("PRTHREAD_SLACK_TOKEN is required for Slack delivery")

    @classmethod
    def empty_token(cls) -> DeliveryConfigError:
        """Return an error when the provided token is empty."""
        return cls("Slack token must be non-empty")
