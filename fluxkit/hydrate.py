"""Convert objects to nested dictionaries and back."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any

from fluxkit.hook import Signal
from fluxkit.store import Container, Store

logger = logging.getLogger("fluxkit")

_BASE_IGNORED = ("parent", "object_name")
_CONTAINER_IGNORED = _BASE_IGNORED + ("children",)
_STORE_IGNORED = _CONTAINER_IGNORED + (
    "bind_source",
    "redispatch_targets",
    "filter_function_enabled",
)

_PLAIN = (str, bytes, bytearray, int, float, complex, bool, list, tuple, dict, set, frozenset)


def _is_object(value: Any) -> bool:
    return (
        value is not None
        and not isinstance(value, _PLAIN)
        and not isinstance(value, (Signal, enum.Enum))
        and not callable(value)
        and hasattr(value, "__dict__")
    )


def _property_names(obj: Any) -> list[str]:
    names: dict[str, None] = {}
    for klass in reversed(type(obj).__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_"):
                names[name] = None
    for name in getattr(obj, "__dict__", {}):
        if not name.startswith("_"):
            names[name] = None

    result = []
    for name in names:
        try:
            value = getattr(obj, name)
        except AttributeError:
            continue
        if isinstance(value, Signal) or callable(value):
            continue
        result.append(name)
    return result


def _ignored(source: Any) -> tuple[str, ...]:
    if isinstance(source, Store):
        return _STORE_IGNORED
    if isinstance(source, Container):
        return _CONTAINER_IGNORED
    return _BASE_IGNORED


def dehydrate(source: Any) -> dict[str, Any]:
    """Serialize the public properties of ``source`` into a dictionary.

    Nested objects become nested dictionaries; signals, methods and the
    structural properties of stores and containers are left out.
    """
    ignored = _ignored(source)
    dest: dict[str, Any] = {}
    for name in _property_names(source):
        if name in ignored:
            continue
        value = getattr(source, name)
        if _is_object(value):
            value = dehydrate(value)
        dest[name] = value
    return dest


def rehydrate(dest: Any, source: Mapping[str, Any]) -> None:
    """Write the values of ``source`` into the matching properties of ``dest``.

    Keys without a matching property are logged and skipped; a dictionary
    for a nested object is written into that object.
    """
    if not isinstance(source, Mapping):
        raise TypeError(f"source must be a mapping, not {type(source).__name__}")

    names = set(_property_names(dest))
    for key in sorted(source):
        if key not in names:
            logger.warning("Hydrate.rehydrate: %s property is not existed", key)
            continue

        orig = getattr(dest, key)
        value = source[key]

        if _is_object(orig):
            if not isinstance(value, Mapping):
                logger.warning(
                    "Hydrate.rehydrate: expect a mapping property but it is not: %s", key
                )
            else:
                rehydrate(orig, value)
        elif orig != value:
            try:
                setattr(dest, key, value)
            except AttributeError:
                logger.warning("Hydrate.rehydrate: %s property is read-only", key)