"""prthread HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives GitHub webhooks.

Usage
-----
Create and run the application::

    from prthread.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # with the webhook endpoint

"""

from prthread.api.app import create_app

__all__ = ["create_app"]
