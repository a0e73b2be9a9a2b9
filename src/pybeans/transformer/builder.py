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
"""Object builder — materializes destination instances from resolved field values."""

from __future__ import annotations

import logging
from typing import Any

from pybeans.kernel.exceptions import BuildError
from pybeans.shape.metadata import MISSING, ConstructionKind, FieldDescriptor, ShapeMetadata

logger = logging.getLogger(__name__)


class ObjectBuilder:
    """Builds instances according to their :class:`ConstructionKind`.

    On any failure a :class:`BuildError` is raised and no instance escapes.
    """

    def build(self, shape: ShapeMetadata, values: dict[str, Any]) -> Any:
        """Create a new ``shape.type`` instance holding *values*.

        Constructor-bound fields absent from *values* keep their declared
        default or, when the parameter is required, get the field's zero
        value.  Setter fields absent from *values* and without a declared
        default are set to their zero value.
        """
        unknown = [name for name in values if name not in shape]
        if unknown:
            raise RuntimeError(
                f"Resolved values {unknown} have no field on {shape.name}; the resolver produced an invalid binding"
            )

        if shape.construction is ConstructionKind.MUTABLE:
            instance = self._instantiate(shape, (), {})
            self._apply(instance, shape, values, shape.setter_fields())
            return instance

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for field in shape.constructor_fields():
            if field.name in values:
                value = values[field.name]
            elif field.positional_only or field.name in shape.required_slots:
                value = field.zero_value()
            else:
                continue
            if field.positional_only:
                args.append(value)
            else:
                kwargs[field.name] = value

        instance = self._instantiate(shape, tuple(args), kwargs)
        if shape.construction is ConstructionKind.HYBRID:
            self._apply(instance, shape, values, shape.setter_fields())
        return instance

    def populate(self, instance: Any, shape: ShapeMetadata, values: dict[str, Any]) -> list[tuple[str, Any]]:
        """Assign *values* to an existing *instance* through its setters.

        If an assignment fails, the attributes already assigned are put
        back to their previous values before the error is raised.

        Returns:
            The previous value of every assigned attribute, in assignment
            order, for :meth:`restore`.
        """
        previous: list[tuple[str, Any]] = []
        try:
            for name, value in values.items():
                previous.append((name, getattr(instance, name, MISSING)))
                self._set(instance, shape, name, value)
        except BuildError:
            self.restore(instance, previous[:-1])
            raise
        return previous

    def _instantiate(self, shape: ShapeMetadata, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        try:
            return shape.type(*args, **kwargs)
        except Exception as exc:
            raise BuildError(shape.type, f"constructor failed: {type(exc).__name__}: {exc}") from exc

    def _apply(
        self,
        instance: Any,
        shape: ShapeMetadata,
        values: dict[str, Any],
        setters: list[FieldDescriptor],
    ) -> None:
        for field in setters:
            if field.name in values:
                self._set(instance, shape, field.name, values[field.name])
            elif not field.has_default and not hasattr(instance, field.name):
                self._set(instance, shape, field.name, field.zero_value())

    @staticmethod
    def _set(instance: Any, shape: ShapeMetadata, name: str, value: Any) -> None:
        try:
            setattr(instance, name, value)
        except Exception as exc:
            error = BuildError(shape.type, f"cannot set '{name}': {type(exc).__name__}: {exc}")
            error.field_path = name
            raise error from exc

    @staticmethod
    def restore(instance: Any, previous: list[tuple[str, Any]]) -> None:
        """Undo a :meth:`populate`, newest assignment first."""
        for name, value in reversed(previous):
            try:
                if value is MISSING:
                    delattr(instance, name)
                else:
                    setattr(instance, name, value)
            except (AttributeError, TypeError) as exc:
                logger.warning("Could not restore %s.%s after failed populate: %s", type(instance).__name__, name, exc)
