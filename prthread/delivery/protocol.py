"""ChatDelivery protocol for posting notifications to a chat service."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from .models import DeliveryReceipt, Notification


@typ.runtime_checkable
class ChatDelivery(typ.Protocol):
    """Protocol for posting notifications into a chat destination.

    The protocol is runtime_checkable to support isinstance checks for
    dependency injection and testing scenarios.

    """

    async def deliver(
        self,
        destination: str,
        notification: Notification,
    ) -> DeliveryReceipt | None:
        """Post ``notification`` to ``destination``.

        Parameters
        ----------
        destination
            Channel name or identifier taken from the webhook ``room``
            parameter.
        notification
            Notification to post; a set ``thread_ts`` posts it as a reply.

        Returns
        -------
        DeliveryReceipt | None
            Receipt carrying the new message timestamp, or ``None`` when no
            delivery channel exists for ``destination``.

        Raises
        ------
        DeliveryError
            If the chat service rejected the message or could not be reached.

        """
        ...
