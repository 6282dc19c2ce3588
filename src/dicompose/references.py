from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Reference:
    """Stand in for the service registered under ``service_id``.

    Argument compilation replaces a reference with ``container.get(service_id)``.
    This is the only way one service depends on another.
    """

    service_id: str

    def __str__(self) -> str:
        return f"@{self.service_id}"


@dataclass(frozen=True, slots=True)
class TaggedReference:
    """Stand in for every service whose definition carries ``tag``.

    Compiles to a list of resolved services in definition registration order.
    """

    tag: str

    def __str__(self) -> str:
        return self.tag


__all__ = ["Reference", "TaggedReference"]
