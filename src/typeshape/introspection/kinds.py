"""Type classification and naming for Python type annotations.

Maps annotations (classes, generic aliases, unions, forward references) to a
display name, a TypeKind and, for containers, their element slots.
"""

import collections
import collections.abc as cabc
import dataclasses
import datetime
import decimal
import enum
import inspect
import pathlib
import types
import typing
import uuid
from typing import Any, List, Tuple, Union, get_args, get_origin

from typeshape.graph.schemas import TypeKind


NoneType = type(None)

PRIMITIVE_TYPES = frozenset({
    NoneType,
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    decimal.Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
})

CONTAINER_BASES = (list, tuple, set, frozenset, dict, collections.deque)

_UNION_ORIGINS = tuple(
    origin for origin in (Union, getattr(types, "UnionType", None)) if origin is not None
)


def is_union(tp: Any) -> bool:
    return get_origin(tp) in _UNION_ORIGINS


def unwrap(tp: Any) -> Any:
    """Strip Annotated[...] and Optional[...] down to the underlying type."""
    while True:
        origin = get_origin(tp)
        if origin is typing.Annotated:
            tp = get_args(tp)[0]
        elif is_union(tp):
            options = [arg for arg in get_args(tp) if arg is not NoneType]
            if len(options) != 1:
                return tp
            tp = options[0]
        else:
            return tp


def is_class_var(tp: Any) -> bool:
    return tp is typing.ClassVar or get_origin(tp) is typing.ClassVar


def _class_name(cls: type) -> str:
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def type_display_name(tp: Any) -> str:
    """
    Canonical display name of an annotation.

    Builtins use their bare name, other classes are module-qualified so that
    two distinct classes never share a name. Generics render as origin[args].
    """
    if tp is None or tp is NoneType:
        return "None"
    if tp is Ellipsis:
        return "..."
    if tp is typing.Any:
        return "Any"
    if isinstance(tp, str):
        return tp
    if isinstance(tp, typing.ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, typing.TypeVar):
        return tp.__name__

    origin = get_origin(tp)
    if origin is not None:
        args = get_args(tp)
        if is_union(tp):
            return " | ".join(type_display_name(arg) for arg in args)
        if origin is typing.Literal:
            return f"Literal[{', '.join(repr(arg) for arg in args)}]"
        base = _class_name(origin) if isinstance(origin, type) else type_display_name(origin)
        if not args:
            return base
        return f"{base}[{', '.join(type_display_name(arg) for arg in args)}]"

    if isinstance(tp, type):
        return _class_name(tp)
    if isinstance(tp, (list, tuple)):
        # Callable parameter lists
        return f"[{', '.join(type_display_name(arg) for arg in tp)}]"
    return repr(tp)


def short_name(tp: Any) -> str:
    """Unqualified name used for the root member."""
    tp = unwrap(tp)
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__name__
    return type_display_name(tp)


def is_typeddict(cls: type) -> bool:
    return issubclass(cls, dict) and hasattr(cls, "__total__")


def is_namedtuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def is_container_class(cls: Any) -> bool:
    if not isinstance(cls, type) or cls in (str, bytes, bytearray):
        return False
    if issubclass(cls, CONTAINER_BASES):
        return True
    return cls.__module__ == "collections.abc" and issubclass(cls, cabc.Iterable)


def is_mapping_class(cls: Any) -> bool:
    return isinstance(cls, type) and (issubclass(cls, dict) or issubclass(cls, cabc.Mapping))


def classify(tp: Any) -> TypeKind:
    """Coarse TypeKind for an (already unwrapped) annotation."""
    if tp is None:
        return TypeKind.PRIMITIVE

    origin = get_origin(tp)
    if origin is not None:
        if is_union(tp) or origin is typing.Literal:
            return TypeKind.OTHER
        if is_container_class(origin):
            return TypeKind.COLLECTION
        if isinstance(origin, type):
            return classify(origin)
        return TypeKind.OTHER

    if not isinstance(tp, type):
        return TypeKind.OTHER
    if issubclass(tp, enum.Enum):
        return TypeKind.ENUM
    if tp in PRIMITIVE_TYPES or issubclass(tp, pathlib.PurePath):
        return TypeKind.PRIMITIVE
    if is_typeddict(tp) or is_namedtuple(tp):
        return TypeKind.STRUCT
    if is_container_class(tp):
        return TypeKind.COLLECTION
    if dataclasses.is_dataclass(tp) and tp.__dataclass_params__.frozen:
        return TypeKind.STRUCT
    if getattr(tp, "_is_protocol", False) or inspect.isabstract(tp):
        return TypeKind.INTERFACE
    return TypeKind.CLASS


def element_slots(tp: Any) -> List[Tuple[str, Any]]:
    """
    Member slots of a parameterised container.

    Returns:
        ("key", K), ("value", V) for mappings, ("[i]", T) per position for
        fixed-length tuples, ("item", T) otherwise. Empty for bare containers.
    """
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is None or not args:
        return []

    if is_mapping_class(origin) and len(args) == 2:
        return [("key", args[0]), ("value", args[1])]

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return [("item", args[0])]
        if args == ((),):
            return []
        return [(f"[{index}]", arg) for index, arg in enumerate(args)]

    return [("item", args[0])]
