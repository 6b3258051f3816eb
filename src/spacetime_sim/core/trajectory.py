"""Bounded per-body position history used for trail rendering."""
from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from .model import Body
from .vector import is_finite_vec, to_tuple

Point = tuple[float, float, float]


class TrajectoryTracker:
    """FIFO trail buffers keyed by body-store handle.

    Buffers hold at most ``max_length`` points, oldest first. Turning trails
    off discards the history rather than hiding it.
    """

    def __init__(self, max_length: int = 200) -> None:
        self.max_length = max(0, int(max_length))
        self._buffers: dict[int, deque[Point]] = {}

    def track(self, handle: int) -> None:
        self._buffers[handle] = deque()

    def forget(self, handle: int) -> None:
        self._buffers.pop(handle, None)

    def clear(self, handle: int) -> None:
        buffer = self._buffers.get(handle)
        if buffer is not None:
            buffer.clear()

    def clear_all(self) -> None:
        for buffer in self._buffers.values():
            buffer.clear()

    def set_max_length(self, max_length: int) -> None:
        self.max_length = max(0, int(max_length))
        for buffer in self._buffers.values():
            self._truncate(buffer)

    def update(self, tracked: Iterable[tuple[int, Body]], enabled: bool) -> None:
        """Sample the current position of every ``(handle, body)`` pair."""

        for handle, body in tracked:
            buffer = self._buffers.setdefault(handle, deque())
            if not is_finite_vec(body.position):
                continue
            if enabled:
                buffer.append(to_tuple(body.position))
                self._truncate(buffer)
            else:
                buffer.clear()

    def points(self, handle: int) -> list[Point]:
        return list(self._buffers.get(handle, ()))

    def _truncate(self, buffer: deque[Point]) -> None:
        while len(buffer) > self.max_length:
            buffer.popleft()

    def __contains__(self, handle: object) -> bool:
        return handle in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)


__all__ = ["Point", "TrajectoryTracker"]
