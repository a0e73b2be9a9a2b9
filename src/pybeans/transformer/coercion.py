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
"""Scalar coercions applied when a source value's type differs from the field's.

Coercions are looked up by walking the MRO of the destination type and,
for each entry, the MRO of the source value's type, so one function
registered for ``(str, Enum)`` serves every Enum subclass.
"""

from __future__ import annotations

import datetime
import enum
import fractions
import uuid
from collections.abc import Callable
from decimal import Decimal
from pathlib import PurePath
from typing import Any

from pybeans.kernel.exceptions import IncompatibleTypeError

Coercion = Callable[[Any, type], Any]

_TRUE = frozenset({"true", "1", "yes", "y", "on"})
_FALSE = frozenset({"false", "0", "no", "n", "off"})


def _parse_bool(value: str, target: type) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"'{value}' is not a boolean literal")


def _to_enum(value: Any, target: type) -> Any:
    if isinstance(value, enum.Enum):
        return target[value.name]  # type: ignore[index]
    if isinstance(value, str) and value in target.__members__:  # type: ignore[attr-defined]
        return target[value]  # type: ignore[index]
    return target(value)


def _iso(value: Any, target: type) -> str:
    return value.isoformat()


def _construct(value: Any, target: type) -> Any:
    return target(value)


def _bool_as_int(value: Any, target: type) -> bool:
    return isinstance(value, bool) and target is not bool and issubclass(target, int)


def _default_coercions() -> dict[tuple[type, type], Coercion]:
    table: dict[tuple[type, type], Coercion] = {
        (int, float): _construct,
        (int, complex): _construct,
        (float, complex): _construct,
        (int, Decimal): _construct,
        (float, Decimal): lambda v, t: Decimal(str(v)),
        (int, fractions.Fraction): _construct,
        (bool, int): _construct,
        (str, int): lambda v, t: int(v.strip()),
        (str, float): lambda v, t: float(v.strip()),
        (str, Decimal): lambda v, t: Decimal(v.strip()),
        (str, bool): _parse_bool,
        (str, uuid.UUID): _construct,
        (str, datetime.datetime): lambda v, t: datetime.datetime.fromisoformat(v),
        (str, datetime.date): lambda v, t: datetime.date.fromisoformat(v),
        (str, datetime.time): lambda v, t: datetime.time.fromisoformat(v),
        (str, PurePath): _construct,
        (str, bytes): lambda v, t: v.encode("utf-8"),
        (bytes, str): lambda v, t: v.decode("utf-8"),
        (datetime.date, str): _iso,
        (datetime.time, str): _iso,
        (enum.Enum, str): lambda v, t: v.name,
        (str, enum.Enum): _to_enum,
        (int, enum.Enum): _to_enum,
        (enum.Enum, enum.Enum): _to_enum,
    }
    for scalar in (int, float, complex, Decimal, fractions.Fraction, uuid.UUID, PurePath):
        table[(scalar, str)] = lambda v, t: str(v)
    return table


class CoercionRegistry:
    """Registry of ``(source type, destination type)`` scalar coercions."""

    def __init__(self) -> None:
        self._coercions: dict[tuple[type, type], Coercion] = _default_coercions()

    def register(self, source_type: type, dest_type: type, function: Callable[[Any], Any]) -> None:
        """Register *function* to turn ``source_type`` values into ``dest_type``."""
        self._coercions[(source_type, dest_type)] = lambda v, t: function(v)

    def copy(self) -> CoercionRegistry:
        clone = CoercionRegistry.__new__(CoercionRegistry)
        clone._coercions = dict(self._coercions)
        return clone

    def find(self, source_type: type, dest_type: type) -> Coercion | None:
        for dest in dest_type.__mro__:
            for source in source_type.__mro__:
                coercion = self._coercions.get((source, dest))
                if coercion is not None:
                    return coercion
        return None

    def coerce(self, value: Any, target: type) -> Any:
        """Return *value* as an instance of *target*.

        Values that already are instances are returned unchanged, except
        that a ``bool`` headed for an ``int`` type becomes a real ``int``.

        Raises:
            IncompatibleTypeError: no coercion applies, or the applicable
                one rejects the value.
        """
        if isinstance(value, target) and not _bool_as_int(value, target):
            return value
        coercion = self.find(type(value), target)
        if coercion is None:
            raise IncompatibleTypeError(value, target)
        try:
            return coercion(value, target)
        except (ValueError, TypeError, KeyError, ArithmeticError) as exc:
            raise IncompatibleTypeError(value, target, str(exc)) from exc
