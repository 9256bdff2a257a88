"""Action creators: methods that turn their call arguments into dispatched actions."""

from __future__ import annotations

import functools
import types
from typing import Any, Callable, Optional

from fluxkit.dispatcher import AppDispatcher, Dispatcher
from fluxkit.hook import Signal

_CO_VARARGS = 0x04
_CO_VARKEYWORDS = 0x08


class _Action:
    """A method of an ActionCreator that dispatches its arguments as a message."""

    def __init__(self, func: Callable[..., Any]) -> None:
        functools.update_wrapper(self, func)
        self.name: str = func.__name__
        code = func.__code__
        names = code.co_varnames
        count = code.co_argcount
        kwonly = code.co_kwonlyargcount
        # The first parameter receives the creator itself and is not part of the message.
        self._positional = tuple(names[1:count])
        self._positional_only = tuple(names[1:code.co_posonlyargcount])
        self._keyword_only = tuple(names[count:count + kwonly])
        index = count + kwonly
        self._var_positional: Optional[str] = None
        if code.co_flags & _CO_VARARGS:
            self._var_positional = names[index]
            index += 1
        self._var_keyword: Optional[str] = (
            names[index] if code.co_flags & _CO_VARKEYWORDS else None
        )
        defaults = func.__defaults__ or ()
        self._defaults: dict[str, Any] = dict(zip(names[count - len(defaults):count], defaults))
        self._defaults.update(func.__kwdefaults__ or {})

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __call__(self, creator: "ActionCreator", *args: Any, **kwargs: Any) -> None:
        creator.dispatch(self.name, self._bind(args, kwargs))

    def _bind(self, args: tuple, kwargs: dict[str, Any]) -> dict[str, Any]:
        if len(args) > len(self._positional) and self._var_positional is None:
            raise TypeError(
                f"{self.name}() takes {len(self._positional)} positional arguments "
                f"but {len(args)} were given"
            )
        values = dict(zip(self._positional, args))
        extra_args = tuple(args[len(self._positional):])
        extra_kwargs: dict[str, Any] = {}

        for key, value in kwargs.items():
            known = key in self._positional or key in self._keyword_only
            if key in self._positional_only or not known:
                if self._var_keyword is None:
                    raise TypeError(f"{self.name}() got an unexpected keyword argument {key!r}")
                extra_kwargs[key] = value
            elif key in values:
                raise TypeError(f"{self.name}() got multiple values for argument {key!r}")
            else:
                values[key] = value

        message: dict[str, Any] = {}
        missing: list[str] = []
        for name in self._positional:
            if name in values:
                message[name] = values[name]
            elif name in self._defaults:
                message[name] = self._defaults[name]
            else:
                missing.append(name)
        if self._var_positional is not None:
            message[self._var_positional] = extra_args
        for name in self._keyword_only:
            if name in values:
                message[name] = values[name]
            elif name in self._defaults:
                message[name] = self._defaults[name]
            else:
                missing.append(name)
        if missing:
            listed = ", ".join(repr(name) for name in missing)
            raise TypeError(f"{self.name}() missing required arguments: {listed}")
        if self._var_keyword is not None:
            message[self._var_keyword] = extra_kwargs
        return message


def action(func: Callable[..., Any]) -> _Action:
    """Turn a method of an :class:`ActionCreator` into an action.

    Calling the method dispatches an action whose type is the method name and
    whose message maps each parameter name to the value it was given. The
    method body is not run.
    """
    return _Action(func)


class ActionCreator:
    """Dispatches an action for each call of a method marked with :func:`action`.

    The target dispatcher defaults to the shared :class:`AppDispatcher`.
    """

    def __init__(self, dispatcher: Optional[Dispatcher] = None) -> None:
        self.dispatcher_changed = Signal()
        self._dispatcher: Optional[Dispatcher] = (
            dispatcher if dispatcher is not None else AppDispatcher.instance()
        )

    @property
    def dispatcher(self) -> Optional[Dispatcher]:
        """The dispatcher that receives the actions."""
        return self._dispatcher

    @dispatcher.setter
    def dispatcher(self, value: Optional[Dispatcher]) -> None:
        self._dispatcher = value
        self.dispatcher_changed.emit()

    @classmethod
    def action_names(cls) -> list[str]:
        """Names of the actions of this class, base classes first."""
        seen: dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, _Action):
                    seen[name] = None
        return [name for name in seen if isinstance(getattr(cls, name, None), _Action)]

    def gen_key_table(self) -> str:
        """Return a KeyTable document with one string property per action."""
        imports = ["pragma Singleton", "import QtQuick 2.0", "import QuickFlux 1.0\n"]
        header = ["KeyTable {\n"]
        properties = [f"    property string {name};\n" for name in self.action_names()]
        footer = ["}"]
        return "\n".join(imports + header + properties + footer)

    def dispatch(self, type: str, message: Any = None) -> None:
        """Dispatch an action through the target dispatcher, if there is one."""
        if self._dispatcher is not None:
            self._dispatcher.dispatch(type, message)