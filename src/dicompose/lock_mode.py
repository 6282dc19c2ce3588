from __future__ import annotations

from enum import Enum


class LockMode(str, Enum):
    """Select how the container serializes compilation and service resolution.

    Resolution is synchronous and re-entrant: ``get`` calls ``get`` for every
    dependency on the same call path. Circular reference detection relies on a
    single, strictly nested load stack, so concurrent callers must not
    interleave their first-time resolutions.
    """

    THREAD = "thread"
    """Guard ``compile`` and ``get`` with one re-entrant ``threading.RLock``."""

    NONE = "none"
    """Disable locking. Use only when a single thread ever touches the container."""
