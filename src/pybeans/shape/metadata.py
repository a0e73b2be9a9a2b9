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
"""Structural metadata produced by the shape analyzer."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Callable, Iterator
from typing import Any

from pybeans.shape.types import TypeDescriptor, ValueKind


class ConstructionKind(enum.Enum):
    """How instances of a type get their field values."""

    MUTABLE = "mutable"
    """No-argument construction, then one setter per field."""

    IMMUTABLE = "immutable"
    """Every field is passed to the constructor."""

    HYBRID = "hybrid"
    """Constructor fields first, the remaining fields through setters."""


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """One field of an introspected type.

    Attributes:
        name: Attribute name, unique within its ShapeMetadata.
        type: Parsed declared type.
        readable: The value can be read with ``getattr``.
        writable: The value can be assigned with ``setattr``.
        slot: Position of the matching ``__init__`` parameter, if any.
        keyword_only: The ``__init__`` parameter must be passed by keyword.
        positional_only: The ``__init__`` parameter cannot be passed by keyword.
        default: Declared default value, or ``MISSING``.
        default_factory: Declared default factory, or ``None``.
    """

    name: str
    type: TypeDescriptor
    readable: bool = True
    writable: bool = True
    slot: int | None = None
    keyword_only: bool = False
    positional_only: bool = False
    default: Any = dataclasses.field(default=MISSING, compare=False)
    default_factory: Callable[[], Any] | None = dataclasses.field(default=None, compare=False)

    @property
    def kind(self) -> ValueKind:
        return self.type.kind

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not None

    @property
    def is_constructor_slot(self) -> bool:
        return self.slot is not None

    @property
    def derived(self) -> bool:
        """Read-only with no constructor parameter; computed from other fields."""
        return self.slot is None and not self.writable

    def zero_value(self) -> Any:
        """The declared default if there is one, else the type's zero value."""
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not MISSING:
            return self.default
        return self.type.zero_value()


@dataclasses.dataclass(frozen=True)
class ShapeMetadata:
    """Cached structure of one type: its fields and how to construct it."""

    type: type
    fields: tuple[FieldDescriptor, ...]
    construction: ConstructionKind
    required_slots: frozenset[str] = frozenset()
    _by_name: dict[str, FieldDescriptor] = dataclasses.field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        by_name = {f.name: f for f in self.fields}
        if len(by_name) != len(self.fields):
            raise ValueError(f"Duplicate field names in shape of {self.type.__qualname__}")
        object.__setattr__(self, "_by_name", by_name)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def name(self) -> str:
        return self.type.__qualname__

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> FieldDescriptor | None:
        return self._by_name.get(name)

    def readable_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if f.readable]

    def buildable_fields(self) -> list[FieldDescriptor]:
        """Fields a transformation can populate: every field that is not derived."""
        return [f for f in self.fields if not f.derived]

    def constructor_fields(self) -> list[FieldDescriptor]:
        """Constructor-bound fields in parameter order."""
        return sorted((f for f in self.fields if f.slot is not None), key=lambda f: f.slot or 0)

    def setter_fields(self) -> list[FieldDescriptor]:
        """Fields populated through setters for this construction kind."""
        if self.construction is ConstructionKind.MUTABLE:
            return [f for f in self.fields if f.writable]
        if self.construction is ConstructionKind.HYBRID:
            return [f for f in self.fields if f.slot is None and f.writable]
        return []
