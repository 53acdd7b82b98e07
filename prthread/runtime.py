"""prthread runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`prthread.api.app.create_app` for application
construction while keeping the ``prthread.runtime:create_app`` entrypoint
stable.

Configuration is driven by environment variables:

- ``PRTHREAD_HOST``: Bind address (default ``0.0.0.0``)
- ``PRTHREAD_PORT``: Listen port (default ``8080``)
- ``PRTHREAD_LOG_LEVEL``: Log level (default ``INFO``)
- ``PRTHREAD_SLACK_TOKEN``: Slack bot token (required)
- the ``PRTHREAD_*`` settings read by :class:`prthread.config.RelayConfig`

Run the service directly with ``python -m prthread.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from prthread.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

    from prthread.api.middleware import LifespanHooks
    from prthread.config import RelayConfig
    from prthread.registry import ThreadRegistry

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid PRTHREAD_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def _build_registry(config: RelayConfig, lifespan: LifespanHooks) -> ThreadRegistry:
    """Return the SQL registry when a database is configured, else in-memory."""
    from prthread.registry import InMemoryThreadRegistry

    if config.database_url is None:
        log_warning(
            logger,
            "PRTHREAD_DATABASE_URL not set; thread origins are lost on restart",
        )
        return InMemoryThreadRegistry()

    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from prthread.registry import SQLThreadRegistry, init_registry_storage

    engine = create_async_engine(config.database_url)

    async def _init_storage() -> None:
        await init_registry_storage(engine)

    lifespan.on_startup(_init_storage)
    lifespan.on_shutdown(engine.dispose)
    return SQLThreadRegistry(async_sessionmaker(engine, expire_on_commit=False))


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    Returns
    -------
    falcon.asgi.App
        Application serving the webhook and health endpoints.

    """
    from prthread.api.app import AppDependencies
    from prthread.api.app import create_app as _create_api_app
    from prthread.api.middleware import LifespanHooks
    from prthread.config import RelayConfig
    from prthread.delivery import SlackChatDelivery, SlackConfig
    from prthread.dispatcher import DispatcherDependencies, NotificationDispatcher
    from prthread.github import GitHubSearchClient, ThreadKeyResolver

    config = RelayConfig.from_env()
    lifespan = LifespanHooks()

    if config.github_secret is None:
        log_error(
            logger,
            "ERROR: Secret not set! Please specify PRTHREAD_GITHUB_SECRET.",
        )

    search_client: GitHubSearchClient | None = None
    search_config = config.search_config()
    if search_config is None:
        log_warning(
            logger,
            "GitHub search credentials not set; status events are threaded by SHA",
        )
    else:
        search_client = GitHubSearchClient(search_config)
        lifespan.on_shutdown(search_client.aclose)

    delivery = SlackChatDelivery(SlackConfig.from_env())
    lifespan.on_shutdown(delivery.aclose)

    dispatcher = NotificationDispatcher(
        DispatcherDependencies(
            registry=_build_registry(config, lifespan),
            delivery=delivery,
            resolver=ThreadKeyResolver(search_client),
        ),
        secret=config.github_secret,
        debug=config.debug,
    )
    return _create_api_app(AppDependencies(dispatcher=dispatcher, lifespan=lifespan))


def main() -> None:
    """Start the prthread runtime server using Granian.

    Reads ``PRTHREAD_HOST``, ``PRTHREAD_PORT``, and ``PRTHREAD_LOG_LEVEL`` from
    the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("PRTHREAD_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("PRTHREAD_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("PRTHREAD_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid PRTHREAD_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting prthread runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "prthread.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
