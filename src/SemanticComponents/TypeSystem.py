"""Static type representation and coercion rules.

Primitive types form a closed enumeration. Arrays, pointers and references
are value-compared dataclasses wrapped around a primitive (or another shape),
so `==` is the only type-equality test anyone needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Type(Enum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    VOID = "void"
    ANY = "any"


@dataclass(frozen=True, slots=True)
class ArrayType:
    element: "StaticType"
    size: str = ""


@dataclass(frozen=True, slots=True)
class PointerType:
    target: "StaticType"


@dataclass(frozen=True, slots=True)
class ReferenceType:
    target: "StaticType"


StaticType = Union[Type, ArrayType, PointerType, ReferenceType]


_PRINTABLE_NAMES: dict[Type, str] = {
    Type.INT: "integer",
    Type.FLOAT: "float",
    Type.BOOL: "boolean",
    Type.VOID: "void",
    Type.ANY: "value",
}

_TYPE_NAMES: dict[str, Type] = {
    "int": Type.INT,
    "float": Type.FLOAT,
    "bool": Type.BOOL,
    "void": Type.VOID,
}


def type_to_string(t: StaticType) -> str:
    """Spelling of `t` in generated code (`int`, `float[10]`, `int*`...)."""
    if isinstance(t, Type):
        return t.value
    if isinstance(t, ArrayType):
        return f"{type_to_string(t.element)}[{t.size}]"
    if isinstance(t, PointerType):
        return f"{type_to_string(t.target)}*"
    if isinstance(t, ReferenceType):
        return f"{type_to_string(t.target)}&"
    return str(t)


def printable_type(t: StaticType) -> str:
    """Human-readable name of `t`, used only in diagnostics."""
    if isinstance(t, Type):
        return _PRINTABLE_NAMES[t]
    if isinstance(t, ArrayType):
        return f"array of {printable_type(t.element)}"
    if isinstance(t, PointerType):
        return f"pointer to {printable_type(t.target)}"
    if isinstance(t, ReferenceType):
        return f"reference to {printable_type(t.target)}"
    return str(t)


def parse_type_name(type_name: str) -> Type:
    """Parse a primitive type name as written in declarations (e.g. "int").

    Raises:
        ValueError: if the name is not one of the primitive type names.
    """

    name = type_name.strip().lower()
    if name not in _TYPE_NAMES:
        raise ValueError(f"Unknown type name: {type_name!r}")
    return _TYPE_NAMES[name]


def type_matches(target: StaticType, source: StaticType) -> bool:
    return target == source


def can_coerce(target: StaticType, source: StaticType) -> bool:
    """The only implicit conversion: an integer widened to a float."""
    return target == Type.FLOAT and source == Type.INT


def is_assignable(target: StaticType, source: StaticType) -> bool:
    return type_matches(target, source) or can_coerce(target, source)


def is_error(t: StaticType) -> bool:
    return t == Type.ANY
