"""Middlewares that sit between a dispatcher and its listeners."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from fluxkit.actioncreator import ActionCreator
from fluxkit.dispatcher import Dispatcher, log_exception
from fluxkit.hook import Hook, Signal

logger = logging.getLogger("fluxkit")


class Middleware:
    """A step in the chain an action passes through before reaching listeners.

    Subclasses define ``dispatch(type, message)`` and call :meth:`next` to pass
    the action on; an action that is never passed on is dropped. With
    :attr:`filter_function_enabled` set, a method named after the action type,
    taking the message, is called instead of ``dispatch``. A middleware with
    neither passes every action straight through.
    """

    def __init__(self, *, filter_function_enabled: bool = False) -> None:
        self.filter_function_enabled = filter_function_enabled
        self.next_callback: Optional[Callable[[str, Any], Any]] = None

    def next(self, type: str, message: Any = None) -> None:
        """Pass an action to the next middleware, or to the listeners if last."""
        if callable(self.next_callback):
            try:
                self.next_callback(type, message)
            except Exception as error:
                log_exception(error)


class MiddlewaresHook(Hook):
    """Runs each action through a list of middlewares before emitting it."""

    def __init__(self, middlewares: Any = None) -> None:
        super().__init__()
        self._middlewares: Any = None
        if middlewares is not None:
            self.setup(middlewares)

    def setup(self, middlewares: Any) -> None:
        """Use ``middlewares``: a MiddlewareList or an iterable of middlewares."""
        self._middlewares = middlewares
        for index, item in enumerate(self._items()):
            if isinstance(item, Middleware):
                item.next_callback = self._make_callback(index)

    def dispatch(self, type: str, message: Any = None) -> None:
        """Start an action at the first middleware."""
        if self._middlewares is None:
            self.dispatched.emit(type, message)
        else:
            self.next(-1, type, message)

    def next(self, sender_index: int, type: str, message: Any = None) -> None:
        """Hand an action from middleware ``sender_index`` to the one after it."""
        try:
            self._invoke(sender_index + 1, type, message)
        except Exception as error:
            log_exception(error)

    def resolve(self, type: str, message: Any = None) -> None:
        """Deliver an action that has passed every middleware."""
        self.dispatched.emit(type, message)

    def _items(self) -> list[Any]:
        if self._middlewares is None:
            return []
        children = getattr(self._middlewares, "children", None)
        if children is not None:
            return list(children)
        return list(self._middlewares)

    def _make_callback(self, index: int) -> Callable[[str, Any], None]:
        def callback(type: str, message: Any = None) -> None:
            self.next(index, type, message)

        return callback

    def _invoke(self, receiver_index: int, type: str, message: Any) -> None:
        items = self._items()
        while receiver_index < len(items):
            item = items[receiver_index]
            handler = _filter_function(item, type)
            if handler is not None:
                handler(message)
                return
            dispatch = getattr(item, "dispatch", None)
            if callable(dispatch):
                dispatch(type, message)
                return
            receiver_index += 1
        self.resolve(type, message)


def _filter_function(item: Any, type: str) -> Optional[Callable[[Any], Any]]:
    if not getattr(item, "filter_function_enabled", False):
        return None
    if not type or type.startswith("_") or hasattr(Middleware, type):
        return None
    function = getattr(item, type, None)
    return function if callable(function) else None


class MiddlewareList:
    """Installs a chain of middlewares on a Dispatcher or an ActionCreator's dispatcher."""

    def __init__(self, children: Iterable[Any] = (), *, apply_target: Any = None) -> None:
        self.apply_target_changed = Signal()
        self.children = list(children)
        self._apply_target: Any = None
        self._action_creator: Optional[ActionCreator] = None
        self._dispatcher: Optional[Dispatcher] = None
        self._hook: Optional[MiddlewaresHook] = None
        if apply_target is not None:
            self.apply_target = apply_target

    @property
    def apply_target(self) -> Any:
        """The Dispatcher or ActionCreator the middlewares are applied to."""
        return self._apply_target

    @apply_target.setter
    def apply_target(self, target: Any) -> None:
        self._apply_target = target
        self._setup()
        self.apply_target_changed.emit()

    @property
    def hook(self) -> Optional[MiddlewaresHook]:
        """The hook installed on the current dispatcher, if any."""
        return self._hook

    def apply(self, target: Any) -> None:
        """Apply the middlewares to ``target``."""
        self.apply_target = target

    def next(self, sender_index: int, type: str, message: Any = None) -> None:
        """Hand an action from middleware ``sender_index`` to the one after it."""
        if self._hook is not None:
            self._hook.next(sender_index, type, message)

    def _setup(self) -> None:
        target = self._apply_target
        creator = target if isinstance(target, ActionCreator) else None
        if creator is not None:
            dispatcher = creator.dispatcher
        else:
            dispatcher = target if isinstance(target, Dispatcher) else None

        if creator is None and dispatcher is None:
            logger.warning("MiddlewareList.apply(): Invalid input")

        if creator is self._action_creator and dispatcher is self._dispatcher:
            return

        if self._action_creator is not None and self._action_creator is not creator:
            self._action_creator.dispatcher_changed.disconnect(self._setup)

        if self._dispatcher is not None and self._dispatcher is not dispatcher:
            self._dispatcher.hook = None
            self._hook = None

        previous_creator = self._action_creator
        self._action_creator = creator
        self._dispatcher = dispatcher

        if creator is not None and creator is not previous_creator:
            creator.dispatcher_changed.connect(self._setup)

        if dispatcher is not None:
            hook = MiddlewaresHook(self)
            dispatcher.hook = hook
            self._hook = hook