"""Thread registry: origin message timestamps keyed by thread."""

from __future__ import annotations

from .memory import InMemoryThreadRegistry
from .protocol import ThreadRegistry
from .sql import SQLThreadRegistry
from .storage import ThreadOrigin, init_registry_storage

__all__ = [
    "InMemoryThreadRegistry",
    "SQLThreadRegistry",
    "ThreadOrigin",
    "ThreadRegistry",
    "init_registry_storage",
]
