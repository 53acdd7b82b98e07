"""Turn verified GitHub webhook deliveries into threaded chat notifications.

The dispatcher is the only component that knows the full pipeline:

1. Verify the ``X-Hub-Signature`` against the configured secret.
2. Require the ``room`` destination and the ``X-GitHub-Event`` header.
3. Decode and classify the payload; unrecognised events end here.
4. Resolve the thread key and look up the thread's origin message.
5. Post the notification, as a reply when an origin exists.
6. Record the posted message as origin when the thread was new.

Steps 1 and 2 raise :class:`~prthread.errors.WebhookRejectedError`
subclasses. Failures after that point are logged with the request body and
reported through :class:`DispatchOutcome`; they never propagate, so GitHub
always receives an acknowledgement and does not redeliver.

Usage
-----
Build a dispatcher from its collaborators::

    dispatcher = NotificationDispatcher(
        DispatcherDependencies(
            registry=InMemoryThreadRegistry(),
            delivery=SlackChatDelivery(SlackConfig.from_env()),
            resolver=ThreadKeyResolver(search_client),
        ),
        secret=config.github_secret,
    )
    outcome = await dispatcher.dispatch(delivery)

"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from prthread.delivery.errors import DeliveryError
from prthread.errors import WebhookBadRequestError, WebhookUnauthorizedError
from prthread.github.formatting import classify
from prthread.github.models import InboundEvent
from prthread.github.signature import verify_signature
from prthread.logging import get_logger, log_error, log_exception, log_info

if typ.TYPE_CHECKING:
    from prthread.delivery.models import Notification
    from prthread.delivery.protocol import ChatDelivery
    from prthread.github.models import WebhookDelivery
    from prthread.github.threads import ThreadKeyResolver
    from prthread.registry.protocol import ThreadRegistry

__all__ = ["DispatchOutcome", "DispatcherDependencies", "NotificationDispatcher"]

logger = get_logger(__name__)


class DispatchOutcome(enum.StrEnum):
    """How an accepted webhook delivery ended."""

    IGNORED = "ignored"
    DELIVERED = "delivered"
    THREADED = "threaded"
    UNDELIVERABLE = "undeliverable"
    FAILED = "failed"


@dc.dataclass(frozen=True, slots=True)
class DispatcherDependencies:
    """Collaborators injected into :class:`NotificationDispatcher`.

    Attributes
    ----------
    registry
        Origin timestamp store shared by all requests.
    delivery
        Chat adapter that posts notifications.
    resolver
        Thread key resolver, including the commit search lookup.

    """

    registry: ThreadRegistry
    delivery: ChatDelivery
    resolver: ThreadKeyResolver


class NotificationDispatcher:
    """Verify, classify, thread and deliver GitHub webhook events."""

    def __init__(
        self,
        dependencies: DispatcherDependencies,
        *,
        secret: str | None,
        debug: bool = False,
    ) -> None:
        """Configure the dispatcher with collaborators and settings.

        Parameters
        ----------
        dependencies
            Registry, delivery adapter and thread key resolver.
        secret
            Webhook secret; ``None`` rejects every delivery.
        debug
            Log payloads of events that produce no notification.

        """
        self._registry = dependencies.registry
        self._delivery = dependencies.delivery
        self._resolver = dependencies.resolver
        self._secret = secret
        self._debug = debug

    async def dispatch(self, request: WebhookDelivery) -> DispatchOutcome:
        """Process one webhook delivery.

        Raises
        ------
        WebhookUnauthorizedError
            If the signature is missing, the secret is not configured or the
            signature does not match.
        WebhookBadRequestError
            If the ``room`` parameter or ``X-GitHub-Event`` header is missing.

        """
        self._authorize(request)
        if request.destination is None:
            log_error(logger, "%s", WebhookBadRequestError.missing_room())
            raise WebhookBadRequestError.missing_room()
        if request.event_header is None:
            log_error(logger, "%s", WebhookBadRequestError.missing_event_type())
            raise WebhookBadRequestError.missing_event_type()

        try:
            event = InboundEvent.decode(request.event_header, request.raw_body)
            return await self._process(event, request.destination)
        except DeliveryError as exc:
            log_error(
                logger,
                "Posting to room %s failed: %s. Request: %s",
                request.destination,
                exc,
                _body_text(request.raw_body),
            )
        except Exception as exc:  # noqa: BLE001 - GitHub must always get an ack
            log_exception(
                logger,
                f"github pull request notifier error: {exc}. "
                f"Request: {_body_text(request.raw_body)}",
                exc,
            )
        return DispatchOutcome.FAILED

    def _authorize(self, request: WebhookDelivery) -> None:
        if request.signature is None:
            log_error(logger, "%s", WebhookUnauthorizedError.missing_signature())
            raise WebhookUnauthorizedError.missing_signature()
        if not self._secret:
            log_error(
                logger,
                "ERROR: Secret not set! Please specify PRTHREAD_GITHUB_SECRET.",
            )
            raise WebhookUnauthorizedError.invalid_signature()
        if not verify_signature(self._secret, request.signature, request.raw_body):
            log_error(logger, "%s", WebhookUnauthorizedError.invalid_signature())
            raise WebhookUnauthorizedError.invalid_signature()

    async def _process(self, event: InboundEvent, destination: str) -> DispatchOutcome:
        notification = classify(event.event_type, event.payload, debug=self._debug)
        if notification is None:
            return DispatchOutcome.IGNORED

        key = await self._resolver.resolve(event.payload)
        origin = await self._registry.get(key) if key is not None else None
        if origin is not None:
            notification = notification.in_thread(origin)

        return await self._deliver(destination, notification, key)

    async def _deliver(
        self,
        destination: str,
        notification: Notification,
        key: str | None,
    ) -> DispatchOutcome:
        receipt = await self._delivery.deliver(destination, notification)
        if receipt is None:
            log_error(
                logger,
                "ERROR: No delivery channel for room %s. "
                "Was the Slack integration successful?",
                destination,
            )
            return DispatchOutcome.UNDELIVERABLE

        if notification.thread_ts is not None:
            return DispatchOutcome.THREADED

        if key is not None and not await self._registry.set_if_absent(
            key, receipt.timestamp
        ):
            log_info(
                logger,
                "Thread %s was started concurrently; message %s stays unthreaded",
                key,
                receipt.timestamp,
            )
        return DispatchOutcome.DELIVERED


def _body_text(raw_body: bytes) -> str:
    return raw_body.decode("utf-8", errors="replace")
