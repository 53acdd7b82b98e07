"""Application factory for the prthread Falcon ASGI application.

This module provides ``create_app()`` which builds and configures the
Falcon ASGI application with health endpoints and, when a dispatcher is
supplied, the GitHub webhook endpoint.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app with the webhook endpoint::

    from prthread.api.app import AppDependencies, create_app

    app = create_app(AppDependencies(dispatcher=dispatcher))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from prthread.api.errors import handle_bad_request, handle_unauthorized
from prthread.api.health.resources import HealthResource, ReadyResource
from prthread.errors import WebhookBadRequestError, WebhookUnauthorizedError

if typ.TYPE_CHECKING:
    from prthread.api.middleware import LifespanHooks
    from prthread.dispatcher import NotificationDispatcher

__all__ = ["WEBHOOK_PATH", "AppDependencies", "create_app"]

WEBHOOK_PATH = "/hubot/gh-pull-requests"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    dispatcher
        Dispatcher behind the webhook endpoint. Without one only the health
        endpoints are registered.
    lifespan
        Optional startup/shutdown hooks for process-wide resources.

    """

    dispatcher: NotificationDispatcher | None = None
    lifespan: LifespanHooks | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies.  When ``None``, only health
        endpoints are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    middleware: list[object] = []
    if deps.lifespan is not None:
        middleware.append(deps.lifespan)

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

    if deps.dispatcher is not None:
        from prthread.api.webhooks.resources import WebhookResource

        app.add_route(WEBHOOK_PATH, WebhookResource(deps.dispatcher))

    app.add_error_handler(WebhookUnauthorizedError, handle_unauthorized)
    app.add_error_handler(WebhookBadRequestError, handle_bad_request)

    return app
