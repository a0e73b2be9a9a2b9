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
"""Transformer configuration store and its bound properties.

A :class:`TransformerSettings` is owned by one transformer instance and is
mutated directly by its ``with_*``/``set_*``/``reset_*`` calls.  Each
``transform`` call works on a :meth:`~TransformerSettings.snapshot`, so a
configuration change takes effect on the next call.  Reconfiguring an
instance from one thread while another thread is inside ``transform`` on
that same instance is not supported; callers must serialize the two.
"""

from __future__ import annotations

import copy
import dataclasses

from pybeans.core.config import config_properties
from pybeans.model.field import FieldMapping, FieldTransformer

DEFAULT_MAX_DEPTH = 64


@config_properties(prefix="pybeans.transformer")
@dataclasses.dataclass
class TransformerProperties:
    """Policy flags bound from the ``pybeans.transformer`` configuration section."""

    default_value_for_missing_field: bool = False
    flat_field_name_transformation: bool = False
    validation_enabled: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclasses.dataclass
class TransformerSettings:
    """Mutable per-transformer configuration store.

    Mappings, transformers and skipped fields are keyed by destination
    field path from the root of the top-level destination type.
    """

    field_mappings: dict[str, FieldMapping] = dataclasses.field(default_factory=dict)
    field_transformers: dict[str, FieldTransformer] = dataclasses.field(default_factory=dict)
    skipped_fields: set[str] = dataclasses.field(default_factory=set)
    default_value_for_missing_field: bool = False
    flat_field_name_transformation: bool = False
    validation_enabled: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_properties(cls, properties: TransformerProperties) -> TransformerSettings:
        return cls(
            default_value_for_missing_field=properties.default_value_for_missing_field,
            flat_field_name_transformation=properties.flat_field_name_transformation,
            validation_enabled=properties.validation_enabled,
            max_depth=properties.max_depth,
        )

    def add_mapping(self, mapping: FieldMapping) -> None:
        self.field_mappings[mapping.dest_field_name] = mapping

    def add_transformer(self, transformer: FieldTransformer) -> None:
        self.field_transformers[transformer.dest_field_name] = transformer

    def snapshot(self) -> TransformerSettings:
        """Copy whose containers are independent of this store."""
        return dataclasses.replace(
            self,
            field_mappings=dict(self.field_mappings),
            field_transformers=dict(self.field_transformers),
            skipped_fields=copy.copy(self.skipped_fields),
        )

    def scope(self) -> ConfigScope:
        return ConfigScope(self)


@dataclasses.dataclass(frozen=True)
class ConfigScope:
    """The part of a settings snapshot visible to one nesting level.

    A session building the destination object found at ``prefix`` looks
    its fields up as ``prefix + "." + name``; policy flags are shared by
    every level.
    """

    settings: TransformerSettings
    prefix: str = ""

    @property
    def flat(self) -> bool:
        return self.settings.flat_field_name_transformation

    def path_of(self, name: str) -> str:
        return f"{self.prefix}.{name}" if self.prefix else name

    def nested(self, name: str) -> ConfigScope:
        return ConfigScope(self.settings, self.path_of(name))

    def mapping_for(self, name: str) -> FieldMapping | None:
        return self.settings.field_mappings.get(self.path_of(name))

    def transformer_for(self, name: str) -> FieldTransformer | None:
        transformer = self.settings.field_transformers.get(self.path_of(name))
        if transformer is None and self.flat:
            transformer = self.settings.field_transformers.get(name)
        return transformer

    def is_skipped(self, name: str) -> bool:
        skipped = self.settings.skipped_fields
        return self.path_of(name) in skipped or (self.flat and name in skipped)
