"""ThreadRegistry protocol for origin message timestamps."""

from __future__ import annotations

import typing as typ


@typ.runtime_checkable
class ThreadRegistry(typ.Protocol):
    """Durable mapping from thread key to origin message timestamp.

    Entries are write-once: the first message successfully posted for a key
    becomes its origin and is never replaced.

    Examples
    --------
    >>> from prthread.registry import InMemoryThreadRegistry, ThreadRegistry
    >>> isinstance(InMemoryThreadRegistry(), ThreadRegistry)
    True

    """

    async def get(self, key: str) -> str | None:
        """Return the origin timestamp recorded for ``key``, if any."""
        ...

    async def set_if_absent(self, key: str, timestamp: str) -> bool:
        """Record ``timestamp`` as the origin for ``key`` unless one exists.

        Returns
        -------
        bool
            ``True`` when this call established the mapping, ``False`` when
            another writer got there first.

        """
        ...
