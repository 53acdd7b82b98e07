"""Slack Web API implementation of the ChatDelivery protocol."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx
import msgspec

from .errors import DeliveryConfigError, DeliveryError
from .models import DeliveryReceipt

if typ.TYPE_CHECKING:
    from .models import Notification

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_API_URL = "https://slack.com/api"
_DEFAULT_TIMEOUT_S = 10.0

# Slack errors meaning the destination does not exist for this bot.
_MISSING_CHANNEL_ERRORS = frozenset(
    {"channel_not_found", "not_in_channel", "is_archived"}
)


@dataclasses.dataclass(frozen=True, slots=True)
class SlackConfig:
    """Configuration for the Slack Web API client."""

    token: str
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> SlackConfig:
        """Build configuration from ``PRTHREAD_SLACK_*`` variables."""
        token = os.environ.get("PRTHREAD_SLACK_TOKEN", "").strip()
        if not token:
            raise DeliveryConfigError.missing_token()
        api_url = os.environ.get("PRTHREAD_SLACK_API_URL", "").strip()
        return cls(token=token, api_url=api_url or _DEFAULT_API_URL)


class _PostMessageResponse(msgspec.Struct):
    """Subset of the ``chat.postMessage`` response body."""

    ok: bool
    error: str | None = None
    channel: str | None = None
    ts: str | None = None


class SlackChatDelivery:
    """Post notifications as Slack attachments via ``chat.postMessage``."""

    def __init__(
        self,
        config: SlackConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise DeliveryConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Content-Type": "application/json; charset=utf-8",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def deliver(
        self,
        destination: str,
        notification: Notification,
    ) -> DeliveryReceipt | None:
        """Post ``notification`` to the Slack channel ``destination``."""
        body: dict[str, typ.Any] = {
            "channel": destination,
            "text": notification.fallback_text,
            "attachments": [notification.to_attachment()],
        }
        if notification.thread_ts is not None:
            body["thread_ts"] = notification.thread_ts

        url = f"{self._config.api_url.rstrip('/')}/chat.postMessage"
        try:
            response = await self._client.post(url, json=body)
        except httpx.RequestError as exc:
            raise DeliveryError.network_error(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise DeliveryError.http_error(response.status_code)

        try:
            result = msgspec.json.decode(response.content, type=_PostMessageResponse)
        except msgspec.DecodeError as exc:
            raise DeliveryError.slack_error("malformed response") from exc

        if not result.ok:
            if result.error in _MISSING_CHANNEL_ERRORS:
                return None
            raise DeliveryError.slack_error(result.error)
        if result.ts is None:
            raise DeliveryError.slack_error("response missing ts")
        return DeliveryReceipt(
            channel=result.channel or destination,
            timestamp=result.ts,
        )


__all__ = ["SlackChatDelivery", "SlackConfig"]
