"""Stores that receive actions and pass them on to nested stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from fluxkit.actioncreator import ActionCreator
from fluxkit.dispatcher import Dispatcher
from fluxkit.filter import Filter
from fluxkit.hook import Signal

_CO_VARARGS = 0x04


@dataclass(eq=False)
class Container:
    """A plain object that holds nested children."""

    children: list[Any] = field(default_factory=list)


class Store:
    """Receives actions and delivers them to nested stores, then to itself.

    On each action the store first re-dispatches it to its child stores in
    order, then to the stores in :attr:`redispatch_targets`, then, if
    :attr:`filter_function_enabled` is set, calls a method named after the
    action type, and finally emits :attr:`dispatched`.
    """

    def __init__(
        self,
        bind_source: Any = None,
        *,
        children: Iterable[Any] = (),
        redispatch_targets: Iterable[Any] = (),
        filter_function_enabled: bool = False,
    ) -> None:
        self.dispatched = Signal()
        self.children = list(children)
        self.redispatch_targets = list(redispatch_targets)
        self.filter_function_enabled = filter_function_enabled
        self._bind_source: Any = None
        self._action_creator: Optional[ActionCreator] = None
        self._dispatcher: Optional[Dispatcher] = None

        for child in self.children:
            if isinstance(child, Filter) and child.parent is None:
                child.attach(self)

        if bind_source is not None:
            self.bind_source = bind_source

    @property
    def bind_source(self) -> Any:
        """The ActionCreator or Dispatcher the store listens to."""
        return self._bind_source

    @bind_source.setter
    def bind_source(self, source: Any) -> None:
        self._bind_source = source
        self._setup()

    def bind(self, source: Any) -> None:
        """Listen to ``source``, an ActionCreator or a Dispatcher."""
        self.bind_source = source

    def dispatch(self, type: str, message: Any = None) -> None:
        """Deliver an action to the nested stores and then to this store."""
        for child in list(self.children):
            if isinstance(child, Store):
                child.dispatch(type, message)

        for target in list(self.redispatch_targets):
            if isinstance(target, Store):
                target.dispatch(type, message)

        if self.filter_function_enabled:
            self._call_filter_function(type, message)

        self.dispatched.emit(type, message)

    def _call_filter_function(self, type: str, message: Any) -> None:
        if not type or type.startswith("_") or hasattr(Store, type):
            return
        method = getattr(self, type, None)
        if not callable(method):
            return
        func = getattr(method, "__func__", method)
        code = getattr(func, "__code__", None)
        if code is None:
            return
        bound = func is not method and getattr(method, "__self__", None) is not None
        required = code.co_argcount - len(func.__defaults__ or ()) - (1 if bound else 0)
        required = max(required, 0)
        accepts_var = bool(code.co_flags & _CO_VARARGS)
        if required == 1 or (required == 0 and accepts_var):
            method(message)
        elif required == 0:
            method()

    def _setup(self) -> None:
        source = self._bind_source
        creator = source if isinstance(source, ActionCreator) else None
        if creator is not None:
            dispatcher = creator.dispatcher
        else:
            dispatcher = source if isinstance(source, Dispatcher) else None

        if creator is self._action_creator and dispatcher is self._dispatcher:
            return

        if self._action_creator is not None and self._action_creator is not creator:
            self._action_creator.dispatcher_changed.disconnect(self._setup)
        if self._dispatcher is not None and self._dispatcher is not dispatcher:
            self._dispatcher.dispatched.disconnect(self.dispatch)

        previous_creator, previous_dispatcher = self._action_creator, self._dispatcher
        self._action_creator = creator
        self._dispatcher = dispatcher

        if creator is not None and creator is not previous_creator:
            creator.dispatcher_changed.connect(self._setup)
        if dispatcher is not None and dispatcher is not previous_dispatcher:
            dispatcher.dispatched.connect(self.dispatch)