# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Declared value kinds — what a field annotation asks the converter to produce.

:func:`describe` reduces any annotation (``int``, ``list[Address]``,
``Optional[dict[str, Money]]``, ``Annotated[int, Field(gt=0)]``) to a
:class:`TypeDescriptor` tree the converter can walk without re-parsing
typing constructs.
"""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import datetime
import enum
import fractions
import types
import uuid
from decimal import Decimal
from pathlib import PurePath
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin

NoneType = type(None)


class ValueKind(enum.Enum):
    """Declared shape of a field value."""

    SCALAR = "scalar"
    OBJECT = "object"
    COLLECTION = "collection"
    MAPPING = "mapping"
    ANY = "any"


SCALAR_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    fractions.Fraction,
    uuid.UUID,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    PurePath,
    enum.Enum,
)

# Abstract or unconstructible container origins and the concrete class built for them.
_COLLECTION_ORIGINS: dict[Any, type] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.deque: collections.deque,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Collection: list,
    collections.abc.Iterable: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

_MAPPING_ORIGINS: dict[Any, type] = {
    dict: dict,
    collections.OrderedDict: collections.OrderedDict,
    collections.defaultdict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}

_ZERO_SCALARS: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
    bytearray: bytearray(),
    Decimal: Decimal(0),
    fractions.Fraction: fractions.Fraction(0),
    datetime.timedelta: datetime.timedelta(0),
}


@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """Parsed form of a field annotation.

    Attributes:
        kind: The declared value kind.
        type: Scalar or object class for SCALAR/OBJECT; the concrete
            container class to build for COLLECTION/MAPPING; ``None`` for ANY.
        args: Element descriptor for collections (one per position for
            fixed-length tuples), key and value descriptors for mappings.
        optional: ``None`` is an accepted value.
        variadic: ``tuple[T, ...]``; ``args`` then holds the single ``T``.
        annotation: The original annotation, ``Annotated`` metadata included.
    """

    kind: ValueKind
    type: Any = None
    args: tuple[TypeDescriptor, ...] = ()
    optional: bool = False
    variadic: bool = False
    annotation: Any = dataclasses.field(default=None, compare=False)

    @property
    def element(self) -> TypeDescriptor:
        return self.args[0] if self.args else ANY_TYPE

    @property
    def key(self) -> TypeDescriptor:
        return self.args[0] if self.args else ANY_TYPE

    @property
    def value(self) -> TypeDescriptor:
        return self.args[1] if len(self.args) > 1 else ANY_TYPE

    @property
    def is_constrained(self) -> bool:
        """Whether the annotation carries ``Annotated`` metadata at any depth."""
        return has_constraints(self.annotation)

    def zero_value(self) -> Any:
        """The value an unset field of this type receives."""
        if self.optional or self.kind in (ValueKind.ANY, ValueKind.OBJECT):
            return None
        if self.kind is ValueKind.COLLECTION:
            if self.type is tuple and not self.variadic:
                # One zero per position keeps the declared arity.
                return tuple(a.zero_value() for a in self.args)
            return self.type()
        if self.kind is ValueKind.MAPPING:
            return self.type()
        for scalar, zero in _ZERO_SCALARS.items():
            if self.type is scalar:
                return zero
        return None

    def describe_name(self) -> str:
        if self.kind is ValueKind.ANY:
            return "Any"
        name = getattr(self.type, "__qualname__", repr(self.type))
        if self.args:
            inner = ", ".join(a.describe_name() for a in self.args)
            if self.variadic:
                inner += ", ..."
            name = f"{name}[{inner}]"
        return f"{name} | None" if self.optional else name


ANY_TYPE = TypeDescriptor(kind=ValueKind.ANY, optional=True)


def is_scalar_type(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, SCALAR_TYPES)


def is_object_type(cls: Any) -> bool:
    """Whether *cls* is a user class the shape analyzer can walk into."""
    if not isinstance(cls, type) or cls is object or cls is type:
        return False
    if is_scalar_type(cls):
        return False
    if cls in _COLLECTION_ORIGINS or cls in _MAPPING_ORIGINS:
        return False
    if issubclass(cls, (str, bytes, collections.abc.Mapping)):
        return False
    return cls.__module__ != "builtins"


def describe(annotation: Any) -> TypeDescriptor:
    """Parse *annotation* into a :class:`TypeDescriptor`."""
    return _describe(annotation, annotation)


def _describe(annotation: Any, raw: Any) -> TypeDescriptor:
    if annotation is None or annotation is NoneType:
        return dataclasses.replace(ANY_TYPE, annotation=raw)

    origin = get_origin(annotation)

    if origin is Annotated:
        return _describe(get_args(annotation)[0], raw)

    if origin is ClassVar:
        return dataclasses.replace(ANY_TYPE, annotation=raw)

    if origin is Union or isinstance(annotation, types.UnionType):
        args = get_args(annotation)
        non_none = [a for a in args if a is not NoneType]
        optional = len(non_none) != len(args)
        if len(non_none) == 1:
            inner = _describe(non_none[0], raw)
            return dataclasses.replace(inner, optional=inner.optional or optional)
        return TypeDescriptor(kind=ValueKind.ANY, optional=True, annotation=raw)

    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:
        return _describe(supertype, raw)

    if origin is not None:
        if origin in _COLLECTION_ORIGINS:
            return _describe_collection(origin, get_args(annotation), raw)
        if origin in _MAPPING_ORIGINS:
            args = get_args(annotation)
            key = _describe(args[0], args[0]) if args else ANY_TYPE
            value = _describe(args[1], args[1]) if len(args) > 1 else ANY_TYPE
            return TypeDescriptor(
                kind=ValueKind.MAPPING,
                type=_MAPPING_ORIGINS[origin],
                args=(key, value),
                annotation=raw,
            )
        # Literal, Callable, user generics and the like carry no shape we can rebuild.
        if isinstance(origin, type) and is_object_type(origin):
            return TypeDescriptor(kind=ValueKind.OBJECT, type=origin, annotation=raw)
        return TypeDescriptor(kind=ValueKind.ANY, optional=True, annotation=raw)

    if not isinstance(annotation, type):
        # Any, TypeVar, string forward references
        return TypeDescriptor(kind=ValueKind.ANY, optional=True, annotation=raw)

    if is_scalar_type(annotation):
        return TypeDescriptor(kind=ValueKind.SCALAR, type=annotation, annotation=raw)
    if annotation in _COLLECTION_ORIGINS:
        return _describe_collection(annotation, (), raw)
    if annotation in _MAPPING_ORIGINS:
        return TypeDescriptor(
            kind=ValueKind.MAPPING,
            type=_MAPPING_ORIGINS[annotation],
            args=(ANY_TYPE, ANY_TYPE),
            annotation=raw,
        )
    if is_object_type(annotation):
        return TypeDescriptor(kind=ValueKind.OBJECT, type=annotation, annotation=raw)
    return TypeDescriptor(kind=ValueKind.ANY, optional=True, annotation=raw)


def _describe_collection(origin: Any, args: tuple[Any, ...], raw: Any) -> TypeDescriptor:
    container = _COLLECTION_ORIGINS[origin]
    if container is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeDescriptor(
                kind=ValueKind.COLLECTION,
                type=tuple,
                args=(_describe(args[0], args[0]),),
                variadic=True,
                annotation=raw,
            )
        if not args:
            return TypeDescriptor(
                kind=ValueKind.COLLECTION, type=tuple, args=(ANY_TYPE,), variadic=True, annotation=raw
            )
        return TypeDescriptor(
            kind=ValueKind.COLLECTION,
            type=tuple,
            args=tuple(_describe(a, a) for a in args),
            annotation=raw,
        )
    element = _describe(args[0], args[0]) if args else ANY_TYPE
    return TypeDescriptor(kind=ValueKind.COLLECTION, type=container, args=(element,), annotation=raw)


def has_constraints(annotation: Any) -> bool:
    if get_origin(annotation) is Annotated:
        return True
    return any(has_constraints(arg) for arg in get_args(annotation))


def is_class_var(annotation: Any) -> bool:
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation is ClassVar or get_origin(annotation) is ClassVar


__all__ = [
    "ANY_TYPE",
    "SCALAR_TYPES",
    "TypeDescriptor",
    "ValueKind",
    "describe",
    "has_constraints",
    "is_class_var",
    "is_object_type",
    "is_scalar_type",
]
