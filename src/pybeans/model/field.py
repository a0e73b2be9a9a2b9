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
"""Field correspondence overrides registered on a transformer.

Example::

    transformer.with_field_mapping(FieldMapping("name", "full_name"))
    transformer.with_field_transformer(FieldTransformer("full_name", str.upper))
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any


@dataclasses.dataclass(frozen=True)
class FieldMapping:
    """Binds a destination field to a source field path.

    Attributes:
        source_field_name: Dotted path relative to the source object of the
            session that resolves it (``"dept.code"``).
        dest_field_name: Destination field path from the root of the
            top-level destination type (``"address.city"``).
    """

    source_field_name: str
    dest_field_name: str

    def __post_init__(self) -> None:
        if not self.source_field_name or not self.dest_field_name:
            raise ValueError("FieldMapping requires both a source and a destination field name")


@dataclasses.dataclass(frozen=True)
class FieldTransformer:
    """Computes a destination field value with a user function.

    The function receives the source value resolved for the destination
    field, or the whole source object when no source field corresponds.
    Its return value is used as-is.
    """

    dest_field_name: str
    transformer_function: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not self.dest_field_name:
            raise ValueError("FieldTransformer requires a destination field name")
        if not callable(self.transformer_function):
            raise ValueError(f"Transformer for '{self.dest_field_name}' is not callable")

    def apply(self, value: Any) -> Any:
        return self.transformer_function(value)
