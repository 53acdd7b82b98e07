"""ASGI lifespan middleware for the relay's long-lived resources.

The runtime opens HTTP clients and a database engine once per process. This
middleware runs registered startup hooks (for example creating the thread
registry table) before the first request, and shutdown hooks (closing HTTP
clients, disposing the engine) when the server stops.

Usage
-----
Register the middleware when creating the Falcon app::

    lifespan = LifespanHooks()
    lifespan.on_startup(lambda: init_registry_storage(engine))
    lifespan.on_shutdown(engine.dispose)
    app = falcon.asgi.App(middleware=[lifespan])

"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from prthread.logging import get_logger, log_error, log_info

__all__ = ["AsyncHook", "LifespanHooks"]

logger = get_logger(__name__)

AsyncHook: typ.TypeAlias = cabc.Callable[[], cabc.Awaitable[object]]


class LifespanHooks:
    """Falcon middleware running async hooks at ASGI startup and shutdown.

    Startup hooks run in registration order and a failure aborts startup.
    Shutdown hooks run in reverse order; each failure is logged and the
    remaining hooks still run so every resource gets a chance to close.

    """

    def __init__(self) -> None:
        """Initialise empty hook lists."""
        self._startup: list[AsyncHook] = []
        self._shutdown: list[AsyncHook] = []

    def on_startup(self, hook: AsyncHook) -> None:
        """Register ``hook`` to run before the first request."""
        self._startup.append(hook)

    def on_shutdown(self, hook: AsyncHook) -> None:
        """Register ``hook`` to run when the server stops."""
        self._shutdown.append(hook)

    async def process_startup(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup:
            await hook()
        log_info(logger, "Ran %d startup hook(s)", len(self._startup))

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Run shutdown hooks in reverse registration order."""
        for hook in reversed(self._shutdown):
            try:
                await hook()
            except Exception:  # noqa: BLE001 - keep closing remaining resources
                log_error(logger, "Shutdown hook %r failed", hook, exc_info=True)
