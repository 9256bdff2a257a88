"""A listener registered with a dispatcher."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from fluxkit.hook import Signal

if TYPE_CHECKING:
    from fluxkit.dispatcher import Dispatcher

logger = logging.getLogger("fluxkit")


@dataclass(eq=False)
class Listener:
    """Receives every action delivered by a dispatcher.

    Before its own callback runs, the listener asks the dispatcher to
    deliver the action to the listeners named in :attr:`wait_for`.
    """

    callback: Optional[Callable[[str, Any], Any]] = None
    listener_id: int = 0
    wait_for: list[int] = field(default_factory=list)
    dispatched: Signal = field(default_factory=Signal, repr=False)

    def dispatch(self, dispatcher: Dispatcher, type: str, message: Any) -> None:
        """Deliver an action: honour ``wait_for``, run the callback, emit."""
        if self.wait_for:
            dispatcher.wait_for(self.wait_for)

        if callable(self.callback):
            try:
                self.callback(type, message)
            except Exception:
                logger.warning("Listener %d callback failed", self.listener_id, exc_info=True)

        self.dispatched.emit(type, message)