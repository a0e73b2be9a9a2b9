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
"""Value converter — turns one source value into the shape a destination field declares."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pybeans.kernel.exceptions import BeanTransformationError, IncompatibleTypeError
from pybeans.shape.types import TypeDescriptor, ValueKind, is_object_type
from pybeans.transformer.coercion import CoercionRegistry
from pybeans.transformer.settings import ConfigScope

NestedTransform = Callable[[Any, type, ConfigScope], Any]
"""Builds a nested destination object: ``(source value, destination type, scope) -> instance``."""


class ValueConverter:
    """Converts values recursively according to a :class:`TypeDescriptor`.

    Nested objects are handed back to the owning session through
    *nested_transform*, which applies the cycle and depth guards.
    """

    def __init__(self, coercions: CoercionRegistry, nested_transform: NestedTransform) -> None:
        self._coercions = coercions
        self._nested_transform = nested_transform

    def convert(self, value: Any, target: TypeDescriptor, scope: ConfigScope) -> Any:
        """Convert *value* for a field declared as *target*.

        *scope* is the configuration scope of the destination field itself,
        so nested objects and collection elements see the overrides
        registered below that field's path.
        """
        if value is None:
            return None
        if target.kind is ValueKind.ANY:
            return value
        if target.kind is ValueKind.SCALAR:
            return self._coercions.coerce(value, target.type)
        if target.kind is ValueKind.OBJECT:
            return self._convert_object(value, target, scope)
        if target.kind is ValueKind.COLLECTION:
            return self._convert_collection(value, target, scope)
        return self._convert_mapping(value, target, scope)

    def _convert_object(self, value: Any, target: TypeDescriptor, scope: ConfigScope) -> Any:
        if not is_object_type(type(value)):
            raise IncompatibleTypeError(value, target.type, "expected an object with fields")
        return self._nested_transform(value, target.type, scope)

    def _convert_collection(self, value: Any, target: TypeDescriptor, scope: ConfigScope) -> Any:
        if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Iterable):
            raise IncompatibleTypeError(value, target.type, "expected a collection")
        items = list(value)

        if target.type is tuple and not target.variadic:
            if len(items) != len(target.args):
                raise IncompatibleTypeError(
                    value, target.type, f"expected {len(target.args)} items, got {len(items)}"
                )
            return tuple(
                self._convert_item(item, element, scope, f"[{i}]")
                for i, (item, element) in enumerate(zip(items, target.args))
            )

        element = target.element
        return target.type(
            self._convert_item(item, element, scope, f"[{i}]") for i, item in enumerate(items)
        )

    def _convert_mapping(self, value: Any, target: TypeDescriptor, scope: ConfigScope) -> Any:
        if not isinstance(value, Mapping):
            raise IncompatibleTypeError(value, target.type, "expected a mapping")
        converted = target.type()
        for key, item in value.items():
            new_key = self._convert_item(key, target.key, scope, f"[{key!r}]")
            converted[new_key] = self._convert_item(item, target.value, scope, f"[{key!r}]")
        return converted

    def _convert_item(self, item: Any, target: TypeDescriptor, scope: ConfigScope, segment: str) -> Any:
        try:
            return self.convert(item, target, scope)
        except BeanTransformationError as exc:
            raise exc.prepend_path(segment)
