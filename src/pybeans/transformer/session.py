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
"""Transformation session — orchestrates one ``transform`` call.

A session resolves the destination fields against the source shape,
converts each bound value (recursing into nested sessions for nested
objects, which share the call's :class:`TransformationContext`), and hands
the results to the :class:`ObjectBuilder`.
"""

from __future__ import annotations

import logging
from typing import Any

from pybeans.kernel.exceptions import BeanTransformationError, InvalidArgumentError, ValidationError
from pybeans.shape.analyzer import ShapeAnalyzer
from pybeans.shape.metadata import ShapeMetadata
from pybeans.transformer.builder import ObjectBuilder
from pybeans.transformer.coercion import CoercionRegistry
from pybeans.transformer.context import TransformationContext
from pybeans.transformer.converter import ValueConverter
from pybeans.transformer.resolver import BindingKind, FieldBinding, FieldResolver
from pybeans.transformer.settings import ConfigScope, TransformerSettings
from pybeans.validation.validator import Validator

logger = logging.getLogger(__name__)


def read_path(source: Any, path: tuple[str, ...]) -> Any:
    """Follow *path* from *source*; a ``None`` along the way yields ``None``."""
    value = source
    for segment in path:
        if value is None:
            return None
        value = getattr(value, segment, None)
    return value


class TransformationSession:
    """Runs one top-level transformation and every nested one below it."""

    def __init__(
        self,
        settings: TransformerSettings,
        *,
        analyzer: ShapeAnalyzer,
        coercions: CoercionRegistry,
        builder: ObjectBuilder | None = None,
        validator: Validator | None = None,
    ) -> None:
        self.context = TransformationContext(settings.snapshot())
        self._analyzer = analyzer
        self._resolver = FieldResolver(analyzer)
        self._converter = ValueConverter(coercions, self._transform_nested)
        self._builder = builder or ObjectBuilder()
        self._validator = validator

    def transform(self, source: Any, dest_type: type) -> Any:
        """Build a new *dest_type* instance from *source*."""
        source_shape, dest_shape = self._shapes(source, dest_type)
        scope = self.context.settings.scope()
        logger.debug("Transforming %s into %s", source_shape.name, dest_shape.name)
        with self.context.enter(source, dest_type):
            instance = self._build(source, source_shape, dest_shape, scope)
        self._validate(instance)
        return instance

    def transform_into(self, source: Any, destination: Any) -> Any:
        """Copy *source* into the writable fields of an existing *destination*.

        A destination that fails validation is put back to its previous state
        before the error is raised.
        """
        source_shape, dest_shape = self._shapes(source, type(destination))
        writable = [f for f in dest_shape.fields if f.writable]
        if not writable:
            raise InvalidArgumentError(f"Destination '{dest_shape.name}' has no writable fields")

        scope = self.context.settings.scope()
        logger.debug("Transforming %s into existing %s", source_shape.name, dest_shape.name)
        with self.context.enter(source, dest_shape.type):
            bindings = self._resolver.resolve(
                source_shape, dest_shape, scope, fields=writable, building=self.context.dest_types
            )
            values = self._values(source, bindings, scope)
            # Defaulted fields keep whatever the existing instance holds.
            for binding in bindings:
                if binding.kind is BindingKind.DEFAULT and binding.field.has_default:
                    values.pop(binding.name, None)
        previous = self._builder.populate(destination, dest_shape, values)
        try:
            self._validate(destination)
        except ValidationError:
            self._builder.restore(destination, previous)
            raise
        return destination

    def _shapes(self, source: Any, dest_type: type) -> tuple[ShapeMetadata, ShapeMetadata]:
        return self._analyzer.analyze(type(source)), self._analyzer.analyze(dest_type)

    def _transform_nested(self, source: Any, dest_type: type, scope: ConfigScope) -> Any:
        with self.context.enter(source, dest_type):
            return self._build(
                source, self._analyzer.analyze(type(source)), self._analyzer.analyze(dest_type), scope
            )

    def _build(
        self,
        source: Any,
        source_shape: ShapeMetadata,
        dest_shape: ShapeMetadata,
        scope: ConfigScope,
    ) -> Any:
        bindings = self._resolver.resolve(source_shape, dest_shape, scope, building=self.context.dest_types)
        return self._builder.build(dest_shape, self._values(source, bindings, scope))

    def _values(self, source: Any, bindings: list[FieldBinding], scope: ConfigScope) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for binding in bindings:
            if binding.kind is BindingKind.DEFAULT:
                # Declared defaults are left to the constructor or the instance.
                if not binding.field.has_default:
                    values[binding.name] = binding.field.zero_value()
                continue
            try:
                values[binding.name] = self._value(source, binding, scope)
            except BeanTransformationError as exc:
                raise exc.prepend_path(binding.name)
        return values

    def _value(self, source: Any, binding: FieldBinding, scope: ConfigScope) -> Any:
        field_scope = scope.nested(binding.name)
        if binding.kind is BindingKind.TRANSFORMER:
            assert binding.transformer is not None
            argument = read_path(source, binding.source_path) if binding.source_path else source
            return binding.transformer.apply(argument)
        if binding.kind is BindingKind.FLAT_DESCENT:
            # Same source object, one level deeper in the destination.
            with self.context.enter(source, binding.field.type.type, track_identity=False):
                return self._build(
                    source,
                    self._analyzer.analyze(type(source)),
                    self._analyzer.analyze(binding.field.type.type),
                    field_scope,
                )
        raw = read_path(source, binding.source_path)
        return self._converter.convert(raw, binding.field.type, field_scope)

    def _validate(self, instance: Any) -> None:
        if self.context.settings.validation_enabled and self._validator is not None:
            self._validator.validate(instance)
