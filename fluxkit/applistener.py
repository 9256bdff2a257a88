"""Listeners that attach to a dispatcher and filter the actions they receive."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Optional

from fluxkit.dispatcher import AppDispatcher, Dispatcher, log_exception
from fluxkit.hook import Signal
from fluxkit.listener import Listener


class AppListener:
    """Receives actions from a dispatcher and re-emits them on ``dispatched``.

    Only actions whose type matches ``filter`` or ``filters`` are emitted on
    :attr:`dispatched`; when neither is set every action is emitted. Callbacks
    registered with :meth:`on` run for their type regardless of the filters.
    Without an explicit target the listener attaches to the shared
    :class:`AppDispatcher`.
    """

    def __init__(
        self,
        target: Optional[Dispatcher] = None,
        *,
        filter: str = "",
        filters: Iterable[str] = (),
        always_on: bool = False,
        wait_for: Iterable[int] = (),
        enabled: bool = True,
        children: Iterable[Any] = (),
    ) -> None:
        self.dispatched = Signal()
        self.filter = filter
        self.filters = list(filters)
        self.always_on = always_on
        self.enabled = enabled
        self.children = list(children)
        self._wait_for = list(wait_for)
        self._callbacks: dict[str, list[Callable[[Any], Any]]] = {}
        self._target: Optional[Dispatcher] = None
        self._listener: Optional[Listener] = None
        self.listener_id = 0
        self.target = target if target is not None else AppDispatcher.instance()

    @property
    def target(self) -> Optional[Dispatcher]:
        """The dispatcher this listener is registered with."""
        return self._target

    @target.setter
    def target(self, target: Optional[Dispatcher]) -> None:
        self._detach()
        self._target = target
        if target is not None:
            self._listener = Listener(wait_for=list(self._wait_for))
            self.listener_id = target.add_listener(self._listener)
            self._listener.dispatched.connect(self._on_message_received)

    @property
    def wait_for(self) -> list[int]:
        """Listener ids that must receive an action before this one."""
        return list(self._wait_for)

    @wait_for.setter
    def wait_for(self, ids: Iterable[int]) -> None:
        self._wait_for = list(ids)
        if self._listener is not None:
            self._listener.wait_for = list(self._wait_for)

    def on(self, type: str, callback: Callable[[Any], Any]) -> "AppListener":
        """Append ``callback(message)`` for actions of ``type``; return self."""
        self._callbacks.setdefault(type, []).append(callback)
        return self

    def remove_listener(self, type: str, callback: Callable[[Any], Any]) -> None:
        """Remove the first registration of ``callback`` for ``type``."""
        callbacks = self._callbacks.get(type)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def remove_all_listener(self, type: str = "") -> None:
        """Remove the callbacks for ``type``, or all of them if ``type`` is empty."""
        if type:
            self._callbacks.pop(type, None)
        else:
            self._callbacks.clear()

    def close(self) -> None:
        """Unregister from the target dispatcher."""
        self._detach()
        self._target = None

    def __enter__(self) -> "AppListener":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _detach(self) -> None:
        if self._target is not None:
            self._target.remove_listener(self.listener_id)
        if self._listener is not None:
            self._listener.dispatched.disconnect_all()
            self._listener = None
        self.listener_id = 0

    def _rules(self) -> list[str]:
        rules = list(self.filters)
        if self.filter:
            rules.append(self.filter)
        return rules

    def _on_message_received(self, type: str, message: Any) -> None:
        if not self.enabled and not self.always_on:
            return

        rules = self._rules()
        if not rules or type in rules:
            self.dispatched.emit(type, message)

        for callback in list(self._callbacks.get(type, ())):
            if callable(callback):
                try:
                    callback(message)
                except Exception as error:
                    log_exception(error)


class AppListenerGroup:
    """Groups listeners so that they all wait for one shared listener.

    Every :class:`AppListener` found among ``children`` (searched recursively
    through any ``children`` attribute) is made to wait for the group, and the
    group itself waits for the ids in :attr:`wait_for`.
    """

    def __init__(
        self,
        children: Iterable[Any] = (),
        *,
        wait_for: Iterable[int] = (),
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        self.children = list(children)
        self._wait_for = list(wait_for)
        self._dispatcher = dispatcher if dispatcher is not None else AppDispatcher.instance()
        self._listener: Optional[Listener] = Listener(wait_for=list(self._wait_for))
        self.listener_id = self._dispatcher.add_listener(self._listener)
        self.listener_ids = list(self._search(self))

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def wait_for(self) -> list[int]:
        """Listener ids that must receive an action before the group."""
        return list(self._wait_for)

    @wait_for.setter
    def wait_for(self, ids: Iterable[int]) -> None:
        self._wait_for = list(ids)
        if self._listener is not None:
            self._listener.wait_for = list(self._wait_for)

    def close(self) -> None:
        """Unregister the group's own listener from the dispatcher."""
        if self._listener is not None:
            self._dispatcher.remove_listener(self.listener_id)
            self._listener = None
            self.listener_id = 0

    def _search(self, item: Any) -> Iterator[int]:
        if isinstance(item, AppListener):
            yield item.listener_id
            item.wait_for = [self.listener_id]
        for child in getattr(item, "children", ()):
            yield from self._search(child)