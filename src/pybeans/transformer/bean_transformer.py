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
"""BeanTransformer — populates mutable, immutable and hybrid objects from another object.

Example::

    transformer = (
        BeanTransformer()
        .with_field_mapping(FieldMapping("name", "full_name"))
        .with_field_transformer(FieldTransformer("full_name", str.upper))
        .set_flat_field_name_transformation(True)
    )
    dto = transformer.transform(employee, EmployeeDTO)

Configuration calls mutate the instance and take effect on the next
``transform``.  An instance must not be reconfigured while another thread
is running ``transform`` on it.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar, overload

from pybeans.kernel.exceptions import InvalidArgumentError, MissingFieldError
from pybeans.model.field import FieldMapping, FieldTransformer
from pybeans.shape.analyzer import ShapeAnalyzer
from pybeans.transformer.builder import ObjectBuilder
from pybeans.transformer.coercion import CoercionRegistry
from pybeans.transformer.session import TransformationSession
from pybeans.transformer.settings import TransformerProperties, TransformerSettings
from pybeans.validation.validator import Validator

D = TypeVar("D")


@dataclasses.dataclass(frozen=True)
class TransformResult(Generic[D]):
    """Outcome of :meth:`BeanTransformer.try_transform`.

    Exactly one of ``value`` and ``missing_field`` is meaningful.
    """

    value: D | None = None
    missing_field: MissingFieldError | None = None

    @property
    def ok(self) -> bool:
        return self.missing_field is None

    def unwrap(self) -> D:
        if self.missing_field is not None:
            raise self.missing_field
        return self.value  # type: ignore[return-value]


class BeanTransformer:
    """Default :class:`~pybeans.transformer.port.TransformerPort` implementation."""

    def __init__(
        self,
        settings: TransformerSettings | None = None,
        *,
        analyzer: ShapeAnalyzer | None = None,
        validator: Validator | None = None,
    ) -> None:
        self._settings = settings or TransformerSettings()
        self._analyzer = analyzer or ShapeAnalyzer()
        self._validator = validator or Validator(self._analyzer)
        self._coercions = CoercionRegistry()
        self._builder = ObjectBuilder()

    @classmethod
    def from_properties(cls, properties: TransformerProperties) -> BeanTransformer:
        return cls(TransformerSettings.from_properties(properties))

    @property
    def settings(self) -> TransformerSettings:
        """The live configuration store of this transformer."""
        return self._settings

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    @overload
    def transform(self, source: Any, destination: type[D]) -> D: ...

    @overload
    def transform(self, source: Any, destination: D) -> D: ...

    def transform(self, source: Any, destination: Any) -> Any:
        """Copy *source* into a new instance of a type, or into an existing instance.

        Raises:
            InvalidArgumentError: *source* or *destination* is ``None`` or
                not introspectable.
            BeanTransformationError: any other transformation failure; the
                concrete subclass names the cause.
        """
        if source is None:
            raise InvalidArgumentError("Source object must not be None")
        if destination is None:
            raise InvalidArgumentError("Destination type or instance must not be None")

        session = self._session()
        if isinstance(destination, type):
            return session.transform(source, destination)
        return session.transform_into(source, destination)

    def transform_list(self, sources: Iterable[Any], dest_type: type[D]) -> list[D]:
        """Transform each source object into a new *dest_type* instance."""
        return [self.transform(source, dest_type) for source in sources]

    def try_transform(self, source: Any, destination: Any) -> TransformResult[Any]:
        """Like :meth:`transform`, but report a missing field as a result.

        Every failure other than :class:`MissingFieldError` still raises.
        """
        try:
            return TransformResult(value=self.transform(source, destination))
        except MissingFieldError as exc:
            return TransformResult(missing_field=exc)

    def _session(self) -> TransformationSession:
        return TransformationSession(
            self._settings,
            analyzer=self._analyzer,
            coercions=self._coercions,
            builder=self._builder,
            validator=self._validator,
        )

    # ------------------------------------------------------------------
    # Field mappings
    # ------------------------------------------------------------------

    def with_field_mapping(self, *mappings: FieldMapping) -> BeanTransformer:
        """Map destination fields to explicit source paths; replaces earlier entries."""
        for mapping in mappings:
            self._settings.add_mapping(mapping)
        return self

    def remove_field_mapping(self, dest_field_name: str) -> None:
        if not dest_field_name:
            raise InvalidArgumentError("The destination field name must be provided")
        self._settings.field_mappings.pop(dest_field_name, None)

    def reset_fields_mapping(self) -> None:
        self._settings.field_mappings.clear()

    # ------------------------------------------------------------------
    # Field transformers
    # ------------------------------------------------------------------

    def with_field_transformer(self, *transformers: FieldTransformer) -> BeanTransformer:
        """Compute destination fields with functions; replaces earlier entries."""
        for transformer in transformers:
            self._settings.add_transformer(transformer)
        return self

    def remove_field_transformer(self, dest_field_name: str) -> None:
        if not dest_field_name:
            raise InvalidArgumentError("The destination field name must be provided")
        self._settings.field_transformers.pop(dest_field_name, None)

    def reset_fields_transformer(self) -> None:
        self._settings.field_transformers.clear()

    # ------------------------------------------------------------------
    # Policy flags
    # ------------------------------------------------------------------

    def set_default_value_for_missing_field(self, use_default_value: bool) -> BeanTransformer:
        """Give unmatched destination fields their zero value instead of raising."""
        self._settings.default_value_for_missing_field = use_default_value
        return self

    def set_flat_field_name_transformation(self, use_flat_transformation: bool) -> BeanTransformer:
        """Match fields by terminal name anywhere in the source graph."""
        self._settings.flat_field_name_transformation = use_flat_transformation
        return self

    def set_validation_enabled(self, validation_enabled: bool) -> BeanTransformer:
        """Validate every destination object once it is built."""
        self._settings.validation_enabled = validation_enabled
        return self

    def set_max_depth(self, max_depth: int) -> BeanTransformer:
        """Limit how deep nested objects may be transformed."""
        if max_depth < 0:
            raise InvalidArgumentError(f"max_depth must not be negative, got {max_depth}")
        self._settings.max_depth = max_depth
        return self

    # ------------------------------------------------------------------
    # Skipped fields and coercions
    # ------------------------------------------------------------------

    def skip_transformation_for_field(self, *field_names: str) -> BeanTransformer:
        """Leave the given destination fields at their default value."""
        self._settings.skipped_fields.update(field_names)
        return self

    def reset_fields_transformation_skip(self) -> None:
        self._settings.skipped_fields.clear()

    def with_type_coercion(
        self,
        source_type: type,
        dest_type: type,
        function: Callable[[Any], Any],
    ) -> BeanTransformer:
        """Register a scalar coercion used when a value's type differs from the field's."""
        self._coercions.register(source_type, dest_type, function)
        return self
