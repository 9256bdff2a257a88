"""Lightweight signals and the hook interface used to intercept dispatching."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable


class Signal:
    """An ordered list of callables that are invoked together on emit."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        """Append a slot; connecting the same slot twice calls it twice."""
        if not callable(slot):
            raise TypeError(f"slot must be callable, not {type(slot).__name__}")
        self._slots.append(slot)

    def disconnect(self, slot: Callable[..., Any]) -> None:
        """Remove the first connection of ``slot``."""
        try:
            self._slots.remove(slot)
        except ValueError:
            raise ValueError("slot is not connected") from None

    def disconnect_all(self) -> None:
        """Remove every connected slot."""
        self._slots.clear()

    def emit(self, *args: Any) -> None:
        """Call every connected slot with ``args``, in connection order."""
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)


class Hook(ABC):
    """Sits between a dispatcher and its listeners.

    A dispatcher hands each action to :meth:`dispatch`; the hook emits
    :attr:`dispatched` for every action that should reach the listeners.
    """

    def __init__(self) -> None:
        self.dispatched = Signal()

    @abstractmethod
    def dispatch(self, type: str, message: Any) -> None:
        """Receive an action from the dispatcher."""