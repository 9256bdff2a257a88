"""Key tables: classes whose string properties default to their own names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PointF:
    """A point with floating point coordinates."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class RectF:
    """A rectangle with floating point geometry."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


_TYPE_NAMES: dict[type, str] = {
    str: "QString",
    int: "int",
    float: "qreal",
    bool: "bool",
    PointF: "QPointF",
    RectF: "QRectF",
}

_ANNOTATIONS: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "PointF": PointF,
    "RectF": RectF,
}

_DEFAULTS: dict[type, Any] = {
    int: 0,
    float: 0.0,
    bool: False,
    PointF: PointF(),
    RectF: RectF(),
}


def _resolve(annotation: Any) -> Optional[type]:
    if isinstance(annotation, type):
        return annotation
    return _ANNOTATIONS.get(str(annotation).strip())


def _is_class_var(annotation: Any) -> bool:
    text = annotation if isinstance(annotation, str) else repr(annotation)
    return text.startswith(("ClassVar", "typing.ClassVar"))


def _number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _number(value)
    return str(value)


class KeyTable:
    """A table of keys declared as annotated class attributes.

    Every ``str`` property left unassigned is set to its own name once the
    table is complete. The table can also be written out as a C++ header and
    source pair holding the same values.
    """

    def __init__(self, **values: Any) -> None:
        declared = self._declared()
        unknown = set(values) - set(declared)
        if unknown:
            raise TypeError(f"unknown key table properties: {', '.join(sorted(unknown))}")

        cls = type(self)
        for name, kind in declared.items():
            if name in values:
                value = values[name]
            elif hasattr(cls, name):
                value = getattr(cls, name)
            else:
                value = _DEFAULTS.get(kind) if kind is not None else None
            setattr(self, name, value)
        self.complete()

    @classmethod
    def _declared(cls) -> dict[str, Optional[type]]:
        declared: dict[str, Optional[type]] = {}
        for klass in reversed(cls.__mro__):
            for name, annotation in vars(klass).get("__annotations__", {}).items():
                if name.startswith("_") or _is_class_var(annotation):
                    continue
                declared[name] = _resolve(annotation)
        return declared

    def complete(self) -> None:
        """Set every unassigned string property to its own name."""
        for name, kind in self._declared().items():
            if kind is str and getattr(self, name, None) is None:
                setattr(self, name, name)

    def gen_header_file(self, class_name: str) -> str:
        """Return a C++ header declaring the properties as static members."""
        header = ["#pragma once", "#include <QString>\n"]
        clazz = [f"class {class_name} {{\n", "public:\n"]
        included_point = included_rect = False

        for name, kind in self._declared().items():
            type_name = _TYPE_NAMES.get(kind) if kind is not None else None
            if type_name is None:
                continue
            clazz.append(f"    static {type_name} {name};\n")
            if kind is PointF and not included_point:
                included_point = True
                header.append("#include <QPointF>")
            elif kind is RectF and not included_rect:
                included_rect = True
                header.append("#include <QRectF>")

        clazz.append("};\n")
        return "\n".join(header + clazz)

    def gen_source_file(self, class_name: str, header_file: str) -> str:
        """Return a C++ source defining the static members with their values."""
        source = [f'#include "{header_file}"\n']

        for name, kind in self._declared().items():
            type_name = _TYPE_NAMES.get(kind) if kind is not None else None
            if type_name is None:
                continue
            value = getattr(self, name)

            if kind is str:
                source.append(f'{type_name} {class_name}::{name} = "{_to_string(value)}";\n')
            elif kind is PointF:
                point = value if isinstance(value, PointF) else PointF()
                source.append(
                    f"QPointF {class_name}::{name} = "
                    f"QPointF({_number(point.x)},{_number(point.y)});\n"
                )
            elif kind is RectF:
                rect = value if isinstance(value, RectF) else RectF()
                source.append(
                    f"QRectF {class_name}::{name} = QRect("
                    f"{_number(rect.x)},{_number(rect.y)},"
                    f"{_number(rect.width)},{_number(rect.height)});\n"
                )
            else:
                source.append(f"{type_name} {class_name}::{name} = {_to_string(value)};\n")

        return "\n".join(source)