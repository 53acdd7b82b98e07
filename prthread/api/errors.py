"""Falcon error handlers for webhook rejections.

Usage
-----
Register error handlers on the Falcon app::

    from prthread.api.errors import handle_bad_request, handle_unauthorized
    from prthread.errors import WebhookBadRequestError, WebhookUnauthorizedError

    app.add_error_handler(WebhookUnauthorizedError, handle_unauthorized)
    app.add_error_handler(WebhookBadRequestError, handle_bad_request)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from prthread.errors import (
        WebhookBadRequestError,
        WebhookRejectedError,
        WebhookUnauthorizedError,
    )

__all__ = ["handle_bad_request", "handle_unauthorized"]


def _reject(resp: Response, status: str, ex: WebhookRejectedError) -> None:
    resp.status = status
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = ex.message


async def handle_unauthorized(
    _req: Request,
    resp: Response,
    ex: WebhookUnauthorizedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookUnauthorizedError`` to an HTTP 401 plain-text response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and body are set.
    ex
        The rejection carrying the message returned to GitHub.
    _params
        URI template parameters (unused).

    """
    _reject(resp, falcon.HTTP_401, ex)


async def handle_bad_request(
    _req: Request,
    resp: Response,
    ex: WebhookBadRequestError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookBadRequestError`` to an HTTP 400 plain-text response."""
    _reject(resp, falcon.HTTP_400, ex)
