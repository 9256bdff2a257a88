"""Action dispatcher and the application-wide shared dispatcher."""

from __future__ import annotations

import logging
import traceback
from collections import deque
from typing import Any, Callable, ClassVar, Iterable, Optional, Union

from fluxkit.hook import Hook, Signal
from fluxkit.listener import Listener

logger = logging.getLogger("fluxkit")


def log_exception(error: BaseException) -> str:
    """Log ``error`` as ``file:line: Name: message`` and return that text."""
    frames = traceback.extract_tb(error.__traceback__) if error.__traceback__ else []
    if frames:
        filename, lineno = frames[-1].filename, str(frames[-1].lineno)
    else:
        filename, lineno = "", ""
    text = f"{filename}:{lineno}: {type(error).__name__}: {error}"
    logger.warning(text)
    return text


class Dispatcher:
    """Delivers actions to registered listeners and the ``dispatched`` signal.

    Actions dispatched while another is being delivered are queued and
    delivered afterwards, first come first served. When a hook is set, every
    action passes through it and only what the hook emits is delivered.
    """

    def __init__(self) -> None:
        self.dispatched = Signal()
        self._dispatching = False
        self._queue: deque[tuple[str, Any]] = deque()
        self._next_listener_id = 1
        self._listeners: dict[int, Listener] = {}
        self._current_listener_id = 0
        self._message: Any = None
        self._message_type = ""
        self._pending: set[int] = set()
        self._waiting: set[int] = set()
        self._hook: Optional[Hook] = None

    @property
    def hook(self) -> Optional[Hook]:
        return self._hook

    @hook.setter
    def hook(self, hook: Optional[Hook]) -> None:
        if self._hook is not None:
            self._hook.dispatched.disconnect(self._send)
        self._hook = hook
        if hook is not None:
            hook.dispatched.connect(self._send)

    def dispatch(self, type: str, message: Any = None) -> None:
        """Dispatch an action, or queue it if one is being delivered."""
        if self._dispatching:
            self._queue.append((type, message))
            return

        self._dispatching = True
        try:
            self._process(type, message)
            while self._queue:
                self._process(*self._queue.popleft())
        finally:
            self._queue.clear()
            self._dispatching = False

    def wait_for(self, ids: Iterable[int]) -> None:
        """Deliver the current action to ``ids`` before the calling listener."""
        ids = list(ids)
        if not self._dispatching or not ids:
            return
        current = self._current_listener_id
        self._waiting.add(current)
        self._invoke_listeners(ids)
        self._waiting.discard(current)

    def add_listener(self, listener: Union[Listener, Callable[[str, Any], Any]]) -> int:
        """Register a listener or a ``callback(type, message)``; return its id."""
        if not isinstance(listener, Listener):
            if not callable(listener):
                raise TypeError("listener must be a Listener or a callable")
            listener = Listener(callback=listener)
        listener_id = self._next_listener_id
        self._next_listener_id += 1
        self._listeners[listener_id] = listener
        listener.listener_id = listener_id
        return listener_id

    def remove_listener(self, listener_id: int) -> None:
        """Unregister a listener; unknown ids are ignored."""
        self._listeners.pop(listener_id, None)

    def _process(self, type: str, message: Any) -> None:
        if self._hook is None:
            self._send(type, message)
        else:
            self._hook.dispatch(type, message)

    def _send(self, type: str, message: Any) -> None:
        self._message = message
        self._message_type = type
        ids = sorted(self._listeners)
        self._pending = set(ids)
        self._waiting = set()
        self._invoke_listeners(ids)
        self.dispatched.emit(type, message)

    def _invoke_listeners(self, ids: Iterable[int]) -> None:
        for listener_id in ids:
            if listener_id in self._waiting:
                logger.warning("Dispatcher: Cyclic dependency detected")
            if listener_id not in self._pending:
                continue
            self._pending.discard(listener_id)
            self._current_listener_id = listener_id
            listener = self._listeners.get(listener_id)
            if listener is not None:
                listener.dispatch(self, self._message_type, self._message)


class AppDispatcher(Dispatcher):
    """The application-wide shared dispatcher."""

    _shared: ClassVar[Optional["AppDispatcher"]] = None

    @classmethod
    def instance(cls) -> "AppDispatcher":
        """Return the shared dispatcher, creating it on first use."""
        if AppDispatcher._shared is None:
            AppDispatcher._shared = cls()
        return AppDispatcher._shared

    @classmethod
    def reset(cls) -> None:
        """Forget the shared dispatcher; the next ``instance()`` makes a new one."""
        AppDispatcher._shared = None