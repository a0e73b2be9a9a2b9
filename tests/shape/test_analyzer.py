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
"""Tests for ShapeAnalyzer — introspection and the process-wide shape cache."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import ClassVar, NamedTuple

import pytest
from pydantic import BaseModel, ConfigDict

from pybeans.kernel.exceptions import InvalidArgumentError, UnsupportedShapeError
from pybeans.shape.analyzer import ShapeAnalyzer, analyze
from pybeans.shape.metadata import MISSING, ConstructionKind
from pybeans.shape.types import ValueKind


@dataclass
class MutableData:
    name: str = ""
    tags: list[str] = field(default_factory=list)


@dataclass
class RequiredData:
    name: str
    age: int = 0


@dataclass(frozen=True)
class FrozenData:
    name: str
    age: int


class MutableBean:
    name: str = ""
    count: int = 0
    registry: ClassVar[dict] = {}
    _internal: int = 0


class ImmutableBean:
    def __init__(self, name: str, age: int = 1) -> None:
        self._name = name
        self._age = age

    @property
    def name(self) -> str:
        return self._name

    @property
    def age(self) -> int:
        return self._age


class HybridBean:
    nickname: str = ""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name


class PositionalOnly:
    def __init__(self, name: str, /) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name


class Unbindable:
    def __init__(self, _secret: str) -> None:
        self.__secret = _secret


class Tally:
    count: int = 0

    def __init__(self) -> None:
        pass

    @property
    def doubled(self) -> int:
        return self.count * 2


class Model(BaseModel):
    name: str
    age: int = 0


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class Pair(NamedTuple):
    left: int
    right: int = 0


@pytest.fixture(autouse=True)
def _fresh_cache():
    ShapeAnalyzer.clear_cache()
    yield
    ShapeAnalyzer.clear_cache()


class TestDataclassShapes:
    def test_mutable_dataclass(self):
        shape = analyze(MutableData)
        assert shape.construction is ConstructionKind.MUTABLE
        assert shape.field_names == ["name", "tags"]
        assert shape.get("tags").kind is ValueKind.COLLECTION
        assert shape.get("tags").default_factory is list

    def test_dataclass_with_required_field_is_immutable(self):
        shape = analyze(RequiredData)
        assert shape.construction is ConstructionKind.IMMUTABLE
        assert shape.required_slots == frozenset({"name"})
        assert shape.get("age").default == 0

    def test_frozen_dataclass(self):
        shape = analyze(FrozenData)
        assert shape.construction is ConstructionKind.IMMUTABLE
        assert not any(f.writable for f in shape)
        assert [f.slot for f in shape.constructor_fields()] == [0, 1]


class TestPlainClassShapes:
    def test_mutable_bean(self):
        shape = analyze(MutableBean)
        assert shape.construction is ConstructionKind.MUTABLE
        assert shape.field_names == ["name", "count"]
        assert shape.get("count").default == 0

    def test_immutable_bean_from_properties(self):
        shape = analyze(ImmutableBean)
        assert shape.construction is ConstructionKind.IMMUTABLE
        name = shape.get("name")
        assert name.readable and not name.writable
        assert name.type.type is str
        assert shape.get("age").default == 1

    def test_hybrid_bean(self):
        shape = analyze(HybridBean)
        assert shape.construction is ConstructionKind.HYBRID
        assert [f.name for f in shape.setter_fields()] == ["nickname"]
        assert [f.name for f in shape.constructor_fields()] == ["name"]

    def test_positional_only_parameter(self):
        shape = analyze(PositionalOnly)
        assert shape.get("name").positional_only

    def test_unbound_constructor_parameter_is_rejected(self):
        with pytest.raises(UnsupportedShapeError, match="_secret"):
            analyze(Unbindable)

    def test_derived_property_is_readable_but_not_buildable(self):
        shape = analyze(Tally)
        doubled = shape.get("doubled")
        assert shape.construction is ConstructionKind.MUTABLE
        assert doubled.readable and not doubled.writable
        assert doubled.derived
        assert [f.name for f in shape.buildable_fields()] == ["count"]
        assert [f.name for f in shape.setter_fields()] == ["count"]


class TestOtherShapes:
    def test_pydantic_model(self):
        shape = analyze(Model)
        assert shape.field_names == ["name", "age"]
        assert shape.get("age").default == 0
        assert shape.get("name").default is MISSING
        assert shape.get("name").keyword_only

    def test_frozen_pydantic_model(self):
        shape = analyze(FrozenModel)
        assert shape.construction is ConstructionKind.IMMUTABLE
        assert not shape.get("name").writable

    def test_namedtuple(self):
        shape = analyze(Pair)
        assert shape.construction is ConstructionKind.IMMUTABLE
        assert shape.get("right").default == 0


class TestRejectedTypes:
    @pytest.mark.parametrize("cls", [int, str, list, dict, object])
    def test_builtins_are_unsupported(self, cls):
        with pytest.raises(UnsupportedShapeError):
            analyze(cls)

    def test_non_class_is_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            analyze(MutableData())


class TestShapeCache:
    def test_shape_is_cached(self):
        first = ShapeAnalyzer().analyze(RequiredData)
        second = ShapeAnalyzer().analyze(RequiredData)
        assert first is second
        assert ShapeAnalyzer.is_cached(RequiredData)

    def test_clear_cache(self):
        analyze(RequiredData)
        ShapeAnalyzer.clear_cache()
        assert not ShapeAnalyzer.is_cached(RequiredData)

    def test_concurrent_first_use_yields_one_shape(self):
        barrier = threading.Barrier(8)

        def analyze_after_barrier(_):
            barrier.wait()
            return ShapeAnalyzer().analyze(FrozenData)

        with ThreadPoolExecutor(max_workers=8) as pool:
            shapes = list(pool.map(analyze_after_barrier, range(8)))

        assert all(shape is shapes[0] for shape in shapes)
