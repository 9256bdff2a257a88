"""Filter that re-emits only the actions of chosen types."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from fluxkit.hook import Signal

logger = logging.getLogger("fluxkit")


class Filter:
    """Listens to a parent's ``dispatched`` signal and re-emits matching actions."""

    def __init__(
        self,
        type: Optional[str] = None,
        *,
        types: Iterable[str] = (),
        parent: Any = None,
        children: Iterable[Any] = (),
    ) -> None:
        self.dispatched = Signal()
        self.children = list(children)
        self._types: list[str] = list(types)
        if type is not None:
            self.type = type
        self._parent_signal: Optional[Signal] = None
        self.parent: Any = None
        if parent is not None:
            self.attach(parent)

    @property
    def type(self) -> str:
        """The first filtered type, or an empty string if there is none."""
        return self._types[0] if self._types else ""

    @type.setter
    def type(self, value: str) -> None:
        self._types = [value]

    @property
    def types(self) -> list[str]:
        """All types this filter lets through."""
        return list(self._types)

    @types.setter
    def types(self, values: Iterable[str]) -> None:
        self._types = list(values)

    def attach(self, parent: Any) -> bool:
        """Listen to ``parent.dispatched``; return whether that succeeded."""
        if self._parent_signal is not None:
            self._parent_signal.disconnect(self._filter)
            self._parent_signal = None
        self.parent = parent

        if parent is None:
            logger.debug("Filter - Disabled due to missing parent.")
            return False

        signal = getattr(parent, "dispatched", None)
        if not isinstance(signal, Signal):
            logger.debug("Filter - Disabled due to missing dispatched signal in parent object.")
            return False

        signal.connect(self._filter)
        self._parent_signal = signal
        return True

    def _filter(self, type: str, message: Any) -> None:
        if type in self._types:
            self.dispatched.emit(type, message)