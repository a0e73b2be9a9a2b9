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
"""Field resolver — pairs each destination field with where its value comes from.

Resolution order for one destination field:

1. Skipped fields are left out entirely.
2. A configured FieldTransformer wins; it is fed the source value found by
   steps 3-4 when there is one, otherwise the whole source object.
3. A configured FieldMapping names the source path explicitly.
4. Otherwise the same name is looked up on the source.  With flat
   matching enabled the lookup searches the whole source shape
   breadth-first, matching on the terminal field name or on the
   underscore-joined path (``dept.code`` matches ``dept_code``).
5. With no match, the field gets its zero value when missing fields
   default, and resolution fails with MissingFieldError otherwise.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections import deque
from collections.abc import Iterable

from pybeans.kernel.exceptions import InvalidMappingError, MissingFieldError, UnsupportedShapeError
from pybeans.model.field import FieldTransformer
from pybeans.shape.analyzer import ShapeAnalyzer
from pybeans.shape.metadata import FieldDescriptor, ShapeMetadata
from pybeans.shape.types import ValueKind
from pybeans.transformer.settings import ConfigScope

logger = logging.getLogger(__name__)


class BindingKind(enum.Enum):
    SOURCE = "source"
    """Read the value at ``source_path`` and convert it."""

    TRANSFORMER = "transformer"
    """Hand the source value (or whole source object) to a FieldTransformer."""

    FLAT_DESCENT = "flat_descent"
    """Build the nested destination object from the current source object."""

    DEFAULT = "default"
    """Use the destination field's zero value."""


@dataclasses.dataclass(frozen=True)
class FieldBinding:
    """Resolved correspondence for one destination field."""

    field: FieldDescriptor
    kind: BindingKind
    source_path: tuple[str, ...] = ()
    transformer: FieldTransformer | None = None

    @property
    def name(self) -> str:
        return self.field.name


class FieldResolver:
    """Computes :class:`FieldBinding` lists for a (source, destination) shape pair."""

    def __init__(self, analyzer: ShapeAnalyzer) -> None:
        self._analyzer = analyzer

    def resolve(
        self,
        source_shape: ShapeMetadata,
        dest_shape: ShapeMetadata,
        scope: ConfigScope,
        *,
        fields: Iterable[FieldDescriptor] | None = None,
        building: tuple[type, ...] = (),
    ) -> list[FieldBinding]:
        """Resolve *fields* (all buildable destination fields by default) in declaration order.

        Args:
            building: Destination types already under construction above
                this level; flat descent never re-enters one of them.

        Raises:
            InvalidMappingError: a configured source path does not exist.
            MissingFieldError: no correspondence and missing fields do not default.
        """
        bindings: list[FieldBinding] = []
        for field in dest_shape.buildable_fields() if fields is None else fields:
            if scope.is_skipped(field.name):
                continue
            bindings.append(self._resolve_field(source_shape, field, scope, building))
        return bindings

    def _resolve_field(
        self,
        source_shape: ShapeMetadata,
        field: FieldDescriptor,
        scope: ConfigScope,
        building: tuple[type, ...],
    ) -> FieldBinding:
        mapping = scope.mapping_for(field.name)
        if mapping is not None:
            path = self.resolve_path(source_shape, mapping.source_field_name, field.name)
        else:
            path = self.match(source_shape, field.name, flat=scope.flat)

        transformer = scope.transformer_for(field.name)
        if transformer is not None:
            return FieldBinding(field, BindingKind.TRANSFORMER, path or (), transformer)
        if path is not None:
            return FieldBinding(field, BindingKind.SOURCE, path)
        if scope.flat and self._can_descend(source_shape, field, building):
            return FieldBinding(field, BindingKind.FLAT_DESCENT)
        if scope.settings.default_value_for_missing_field:
            return FieldBinding(field, BindingKind.DEFAULT)
        raise MissingFieldError(field.name, source_shape.type)

    def resolve_path(self, source_shape: ShapeMetadata, dotted: str, dest_field: str) -> tuple[str, ...]:
        """Check that *dotted* exists on *source_shape* and split it."""
        segments = tuple(dotted.split("."))
        shape: ShapeMetadata | None = source_shape
        for i, segment in enumerate(segments):
            descriptor = shape.get(segment) if shape is not None else None
            if descriptor is None or not descriptor.readable:
                raise InvalidMappingError(dest_field, dotted, source_shape.type)
            if i < len(segments) - 1:
                shape = self._nested_shape(descriptor)
        return segments

    def match(self, source_shape: ShapeMetadata, name: str, *, flat: bool) -> tuple[str, ...] | None:
        """Find the source path corresponding to destination field *name*."""
        direct = source_shape.get(name)
        if direct is not None and direct.readable:
            return (name,)
        if not flat:
            return None

        # Each entry carries the types above it so recursive shapes are walked once per path.
        queue: deque[tuple[ShapeMetadata, tuple[str, ...], frozenset[type]]] = deque(
            [(source_shape, (), frozenset({source_shape.type}))]
        )
        while queue:
            shape, prefix, ancestors = queue.popleft()
            for descriptor in shape.readable_fields():
                path = (*prefix, descriptor.name)
                if descriptor.name == name or "_".join(path) == name:
                    return path
                nested = self._nested_shape(descriptor)
                if nested is not None and nested.type not in ancestors:
                    queue.append((nested, path, ancestors | {nested.type}))
        return None

    def _can_descend(
        self,
        source_shape: ShapeMetadata,
        field: FieldDescriptor,
        building: tuple[type, ...],
    ) -> bool:
        if field.kind is not ValueKind.OBJECT or field.type.type in building:
            return False
        nested = self._nested_shape(field)
        if nested is None:
            return False
        return any(
            self.match(source_shape, child.name, flat=True) is not None
            for child in nested.buildable_fields()
            if child.kind is not ValueKind.OBJECT
        )

    def _nested_shape(self, descriptor: FieldDescriptor) -> ShapeMetadata | None:
        if descriptor.kind is not ValueKind.OBJECT:
            return None
        try:
            return self._analyzer.analyze(descriptor.type.type)
        except UnsupportedShapeError as exc:
            logger.debug("Not walking into field %s: %s", descriptor.name, exc)
            return None
