"""SQLAlchemy-backed thread registry."""

from __future__ import annotations

import typing as typ

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .storage import ThreadOrigin

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class SQLThreadRegistry:
    """Thread registry persisted in the ``thread_origins`` table.

    The primary key on ``thread_key`` makes ``set_if_absent`` atomic across
    concurrent requests and processes: the losing insert fails with an
    ``IntegrityError`` and is reported as not established.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for registry operations."""
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        """Return the origin timestamp recorded for ``key``, if any."""
        async with self._session_factory() as session:
            stmt = select(ThreadOrigin.message_ts).where(
                ThreadOrigin.thread_key == key
            )
            return await session.scalar(stmt)

    async def set_if_absent(self, key: str, timestamp: str) -> bool:
        """Insert the origin for ``key``; return ``False`` if one exists."""
        async with self._session_factory() as session:
            session.add(ThreadOrigin(thread_key=key, message_ts=timestamp))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return False
            return True
