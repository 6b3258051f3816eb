"""Authoritative mapping from body identifier to simulation state."""
from __future__ import annotations

from collections.abc import Iterator

from .model import Body


class BodyStore:
    """Arena of :class:`Body` records addressed by stable integer handles.

    Handles come from a counter and are never reused, so a stale handle can
    only miss, never alias a newer body. A separate id-to-handle map gives
    constant-time lookup by the external identifier.
    """

    def __init__(self) -> None:
        self._bodies: dict[int, Body] = {}
        self._handles: dict[str, int] = {}
        self._next_handle = 0

    def add(self, body: Body) -> int:
        if body.id in self._handles:
            raise ValueError(f"duplicate body id {body.id!r}")
        handle = self._next_handle
        self._next_handle += 1
        self._bodies[handle] = body
        self._handles[body.id] = handle
        return handle

    def remove(self, handle: int) -> Body:
        body = self._bodies.pop(handle)
        del self._handles[body.id]
        return body

    def get(self, handle: int) -> Body:
        return self._bodies[handle]

    def handle_of(self, body_id: str) -> int | None:
        return self._handles.get(body_id)

    def by_id(self, body_id: str) -> Body:
        return self._bodies[self._handles[body_id]]

    def handles(self) -> list[int]:
        return list(self._bodies)

    def ids(self) -> list[str]:
        return [body.id for body in self._bodies.values()]

    def items(self) -> list[tuple[int, Body]]:
        return list(self._bodies.items())

    def clear(self) -> None:
        self._bodies.clear()
        self._handles.clear()

    def __contains__(self, body_id: object) -> bool:
        return body_id in self._handles

    def __iter__(self) -> Iterator[Body]:
        return iter(list(self._bodies.values()))

    def __len__(self) -> int:
        return len(self._bodies)


__all__ = ["BodyStore"]
