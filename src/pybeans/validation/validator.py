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
"""Post-build validation backed by Pydantic.

Pydantic models are revalidated as a whole.  For every other shape each
field whose annotation carries ``Annotated`` constraints
(``Annotated[int, Field(gt=0)]``, ``Annotated[str, MinLen(1)]``) is
checked with a :class:`pydantic.TypeAdapter`, and nested objects are
walked recursively.  All violations are collected before anything is
raised.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from pybeans.kernel.exceptions import ValidationError
from pybeans.shape.analyzer import ShapeAnalyzer
from pybeans.shape.metadata import FieldDescriptor
from pybeans.shape.types import ValueKind, is_object_type

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ConstraintViolation:
    """One failed constraint on a validated object."""

    field_path: str
    message: str
    invalid_value: Any = None

    def __str__(self) -> str:
        return f"{self.field_path}: {self.message}" if self.field_path else self.message


class Validator:
    """Checks objects against the constraints declared on their fields."""

    def __init__(self, analyzer: ShapeAnalyzer | None = None) -> None:
        self._analyzer = analyzer or ShapeAnalyzer()
        self._adapters: dict[tuple[type, str], TypeAdapter[Any]] = {}
        self._lock = threading.Lock()

    def get_constraint_violations(self, obj: Any) -> list[ConstraintViolation]:
        """Return every violation found on *obj* and the objects it contains."""
        violations: list[ConstraintViolation] = []
        self._collect(obj, "", violations, set())
        return violations

    def validate(self, obj: Any) -> None:
        """Raise :class:`ValidationError` if *obj* violates any constraint."""
        violations = self.get_constraint_violations(obj)
        if violations:
            logger.warning(
                "Validation of %s failed with %d violation(s)", type(obj).__qualname__, len(violations)
            )
            raise ValidationError(violations)

    def _collect(self, obj: Any, prefix: str, violations: list[ConstraintViolation], seen: set[int]) -> None:
        if id(obj) in seen:
            return
        seen.add(id(obj))

        if isinstance(obj, BaseModel):
            try:
                type(obj).model_validate(obj.model_dump())
            except PydanticValidationError as exc:
                violations.extend(_violations(exc, prefix))
            return

        shape = self._analyzer.analyze(type(obj))
        for field in shape.readable_fields():
            value = getattr(obj, field.name, None)
            path = f"{prefix}.{field.name}" if prefix else field.name
            if field.type.is_constrained:
                try:
                    self._adapter(shape.type, field).validate_python(value)
                except PydanticValidationError as exc:
                    violations.extend(_violations(exc, path))
            for child_path, child in _nested_objects(field, value, path):
                self._collect(child, child_path, violations, seen)

    def _adapter(self, owner: type, field: FieldDescriptor) -> TypeAdapter[Any]:
        key = (owner, field.name)
        adapter = self._adapters.get(key)
        if adapter is None:
            adapter = TypeAdapter(field.type.annotation)
            with self._lock:
                adapter = self._adapters.setdefault(key, adapter)
        return adapter


def _nested_objects(field: FieldDescriptor, value: Any, path: str) -> Iterable[tuple[str, Any]]:
    if value is None:
        return []
    if field.kind is ValueKind.OBJECT and is_object_type(type(value)):
        return [(path, value)]
    if field.kind is ValueKind.COLLECTION and field.type.element.kind is ValueKind.OBJECT:
        return [(f"{path}[{i}]", item) for i, item in enumerate(value) if item is not None]
    if field.kind is ValueKind.MAPPING and field.type.value.kind is ValueKind.OBJECT:
        return [(f"{path}[{key!r}]", item) for key, item in value.items() if item is not None]
    return []


def _violations(exc: PydanticValidationError, prefix: str) -> list[ConstraintViolation]:
    result = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"])
        path = ".".join(part for part in (prefix, loc) if part)
        result.append(ConstraintViolation(field_path=path, message=error["msg"], invalid_value=error.get("input")))
    return result
