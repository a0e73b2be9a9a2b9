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
"""Tests for FieldResolver — binding destination fields to source paths."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from pybeans.kernel.exceptions import InvalidMappingError, MissingFieldError
from pybeans.model.field import FieldMapping, FieldTransformer
from pybeans.shape.analyzer import ShapeAnalyzer
from pybeans.transformer.resolver import BindingKind, FieldResolver
from pybeans.transformer.settings import TransformerSettings


@dataclass
class Dept:
    code: str
    name: str


@dataclass
class Employee:
    id: int
    name: str
    dept: Dept


@dataclass
class Badge:
    code: str


@dataclass
class View:
    id: int
    full_name: str
    dept_code: str


@dataclass
class Nested:
    id: int
    badge: Badge


@dataclass
class Tree:
    label: str
    child: Tree | None = None


@pytest.fixture
def analyzer():
    return ShapeAnalyzer()


@pytest.fixture
def resolver(analyzer):
    return FieldResolver(analyzer)


def _resolve(resolver, analyzer, settings, dest=View, source=Employee):
    return {
        b.name: b
        for b in resolver.resolve(analyzer.analyze(source), analyzer.analyze(dest), settings.scope())
    }


class TestDirectAndMappedFields:
    def test_same_name_binds_to_source(self, resolver, analyzer):
        settings = TransformerSettings(default_value_for_missing_field=True)
        bindings = _resolve(resolver, analyzer, settings)
        assert bindings["id"].kind is BindingKind.SOURCE
        assert bindings["id"].source_path == ("id",)

    def test_mapping_names_dotted_path(self, resolver, analyzer):
        settings = TransformerSettings()
        settings.add_mapping(FieldMapping("name", "full_name"))
        settings.add_mapping(FieldMapping("dept.code", "dept_code"))
        bindings = _resolve(resolver, analyzer, settings)
        assert bindings["full_name"].source_path == ("name",)
        assert bindings["dept_code"].source_path == ("dept", "code")

    def test_invalid_mapping(self, resolver, analyzer):
        settings = TransformerSettings()
        settings.add_mapping(FieldMapping("name.first", "full_name"))
        with pytest.raises(InvalidMappingError) as exc_info:
            _resolve(resolver, analyzer, settings)
        assert exc_info.value.field_path == "full_name"

    def test_missing_field(self, resolver, analyzer):
        with pytest.raises(MissingFieldError) as exc_info:
            _resolve(resolver, analyzer, TransformerSettings())
        assert exc_info.value.dest_field == "full_name"

    def test_default_binding(self, resolver, analyzer):
        settings = TransformerSettings(default_value_for_missing_field=True)
        bindings = _resolve(resolver, analyzer, settings)
        assert bindings["full_name"].kind is BindingKind.DEFAULT


class TestTransformersAndSkips:
    def test_transformer_with_source_value(self, resolver, analyzer):
        settings = TransformerSettings()
        settings.add_transformer(FieldTransformer("id", abs))
        settings.add_mapping(FieldMapping("name", "full_name"))
        settings.skipped_fields.add("dept_code")
        binding = _resolve(resolver, analyzer, settings)["id"]
        assert binding.kind is BindingKind.TRANSFORMER
        assert binding.source_path == ("id",)

    def test_transformer_without_source_value(self, resolver, analyzer):
        settings = TransformerSettings()
        settings.add_transformer(FieldTransformer("full_name", lambda e: e.name))
        settings.skipped_fields.add("dept_code")
        binding = _resolve(resolver, analyzer, settings)["full_name"]
        assert binding.kind is BindingKind.TRANSFORMER
        assert binding.source_path == ()

    def test_transformer_still_checks_mapping(self, resolver, analyzer):
        settings = TransformerSettings()
        settings.add_transformer(FieldTransformer("full_name", str.upper))
        settings.add_mapping(FieldMapping("nope", "full_name"))
        with pytest.raises(InvalidMappingError):
            _resolve(resolver, analyzer, settings)

    def test_skipped_fields_are_left_out(self, resolver, analyzer):
        settings = TransformerSettings()
        settings.skipped_fields.update({"full_name", "dept_code"})
        assert list(_resolve(resolver, analyzer, settings)) == ["id"]


class TestFlatMatching:
    def test_underscore_joined_path(self, resolver, analyzer):
        path = resolver.match(analyzer.analyze(Employee), "dept_code", flat=True)
        assert path == ("dept", "code")

    def test_terminal_name_anywhere(self, resolver, analyzer):
        assert resolver.match(analyzer.analyze(Employee), "code", flat=True) == ("dept", "code")

    def test_direct_field_beats_nested_one(self, resolver, analyzer):
        assert resolver.match(analyzer.analyze(Employee), "name", flat=True) == ("name",)

    def test_disabled_flat_matching(self, resolver, analyzer):
        assert resolver.match(analyzer.analyze(Employee), "code", flat=False) is None

    def test_recursive_source_shape_terminates(self, resolver, analyzer):
        assert resolver.match(analyzer.analyze(Tree), "missing", flat=True) is None

    def test_flat_descent_into_nested_destination(self, resolver, analyzer):
        settings = TransformerSettings(flat_field_name_transformation=True)
        bindings = _resolve(resolver, analyzer, settings, dest=Nested)
        assert bindings["badge"].kind is BindingKind.FLAT_DESCENT

    def test_no_flat_descent_into_type_under_construction(self, resolver, analyzer):
        settings = TransformerSettings(flat_field_name_transformation=True)
        with pytest.raises(MissingFieldError):
            resolver.resolve(
                analyzer.analyze(Employee),
                analyzer.analyze(Nested),
                settings.scope(),
                building=(Badge,),
            )
