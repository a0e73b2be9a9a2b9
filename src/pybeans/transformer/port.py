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
"""TransformerPort — the hexagonal port for object-graph transformation."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

from pybeans.model.field import FieldMapping, FieldTransformer


@runtime_checkable
class TransformerPort(Protocol):
    """Contract for populating mutable, immutable and hybrid objects from another object."""

    def transform(self, source: Any, destination: Any) -> Any: ...
    def transform_list(self, sources: Iterable[Any], dest_type: type) -> list[Any]: ...
    def try_transform(self, source: Any, destination: Any) -> Any: ...

    def with_field_mapping(self, *mappings: FieldMapping) -> TransformerPort: ...
    def remove_field_mapping(self, dest_field_name: str) -> None: ...
    def reset_fields_mapping(self) -> None: ...

    def with_field_transformer(self, *transformers: FieldTransformer) -> TransformerPort: ...
    def remove_field_transformer(self, dest_field_name: str) -> None: ...
    def reset_fields_transformer(self) -> None: ...

    def set_default_value_for_missing_field(self, use_default_value: bool) -> TransformerPort: ...
    def set_flat_field_name_transformation(self, use_flat_transformation: bool) -> TransformerPort: ...
    def set_validation_enabled(self, validation_enabled: bool) -> TransformerPort: ...
    def set_max_depth(self, max_depth: int) -> TransformerPort: ...

    def skip_transformation_for_field(self, *field_names: str) -> TransformerPort: ...
    def reset_fields_transformation_skip(self) -> None: ...

    def with_type_coercion(
        self, source_type: type, dest_type: type, function: Callable[[Any], Any]
    ) -> TransformerPort: ...
