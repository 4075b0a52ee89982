"""FIFO queue passing messages between tasks."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, TypeVar

T = TypeVar("T")


class TaskQueue(Generic[T]):
    """First-in first-out queue; truthy while it holds elements."""

    def __init__(self) -> None:
        self._elements: Deque[T] = deque()

    def put(self, elem: T) -> None:
        self._elements.append(elem)

    def get(self) -> T:
        """Remove and return the oldest element; IndexError when empty."""
        if not self._elements:
            raise IndexError("get from an empty TaskQueue")
        return self._elements.popleft()

    def __bool__(self) -> bool:
        return bool(self._elements)

    def __len__(self) -> int:
        return len(self._elements)