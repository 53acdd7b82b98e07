"""GitHub webhook resource.

``POST /hubot/gh-pull-requests?room=<channel>`` receives pull request, review,
issue comment and status events and relays them into chat threads.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/hubot/gh-pull-requests", WebhookResource(dispatcher))

"""

from __future__ import annotations

import typing as typ

import falcon

from prthread.github.models import WebhookDelivery
from prthread.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from prthread.dispatcher import NotificationDispatcher

__all__ = ["EVENT_HEADER", "SIGNATURE_HEADER", "WebhookResource"]

SIGNATURE_HEADER = "X-Hub-Signature"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"

logger = get_logger(__name__)


class WebhookResource:
    """Resource accepting signed GitHub webhook deliveries.

    Accepted deliveries always answer ``200`` with an empty body, whatever
    happened downstream. Rejections surface as ``WebhookRejectedError``
    subclasses and are mapped to ``401`` or ``400`` by the app's error
    handlers.

    """

    def __init__(self, dispatcher: NotificationDispatcher) -> None:
        """Configure the resource with the dispatcher it feeds."""
        self._dispatcher = dispatcher

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle a webhook delivery.

        Parameters
        ----------
        req
            Falcon request carrying the signed JSON body.
        resp
            Falcon response acknowledging the delivery.

        """
        delivery = WebhookDelivery(
            raw_body=await req.stream.read(),
            signature=req.get_header(SIGNATURE_HEADER),
            event_header=req.get_header(EVENT_HEADER),
            destination=req.get_param("room"),
        )
        outcome = await self._dispatcher.dispatch(delivery)
        log_info(
            logger,
            "Webhook delivery %s (%s) for room %s: %s",
            req.get_header(DELIVERY_HEADER) or "-",
            delivery.event_header,
            delivery.destination,
            outcome,
        )

        resp.status = falcon.HTTP_200
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = ""
