"""Process-local thread registry."""

from __future__ import annotations

import asyncio
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class InMemoryThreadRegistry:
    """Thread registry held in a dict for the lifetime of the process.

    Parameters
    ----------
    initial
        Optional mapping used to pre-load known origins.

    """

    def __init__(self, initial: cabc.Mapping[str, str] | None = None) -> None:
        """Copy ``initial`` into the registry."""
        self._origins: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        """Return the number of recorded threads."""
        return len(self._origins)

    async def get(self, key: str) -> str | None:
        """Return the origin timestamp recorded for ``key``, if any."""
        return self._origins.get(key)

    async def set_if_absent(self, key: str, timestamp: str) -> bool:
        """Record ``timestamp`` for ``key`` unless an origin already exists."""
        async with self._lock:
            if key in self._origins:
                return False
            self._origins[key] = timestamp
            return True
