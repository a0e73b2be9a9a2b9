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
"""Shape analyzer — introspects a type once into cached ShapeMetadata.

Supports dataclasses (plain and frozen), pydantic models, NamedTuples and
ordinary classes whose fields are declared through annotations,
``__init__`` parameters or properties.

Example::

    shape = ShapeAnalyzer().analyze(UserDTO)
    shape.construction   # ConstructionKind.IMMUTABLE
    [f.name for f in shape]
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import threading
import typing
from typing import Any, ClassVar

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from pybeans.kernel.exceptions import UnsupportedShapeError
from pybeans.shape.metadata import MISSING, ConstructionKind, FieldDescriptor, ShapeMetadata
from pybeans.shape.types import describe, is_class_var, is_object_type

logger = logging.getLogger(__name__)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclasses.dataclass
class _FieldDraft:
    """Mutable scratch record while a type is being introspected."""

    name: str
    annotation: Any = None
    writable: bool = True
    readable: bool = True
    default: Any = MISSING
    default_factory: Any = None


class ShapeAnalyzer:
    """Introspects types into :class:`ShapeMetadata`.

    Results are kept in a process-wide cache keyed by type.  Computing a
    shape is pure, so threads racing on the first use of a type may both
    compute it; the first one stored is the one every caller gets back.
    """

    _cache: ClassVar[dict[type, ShapeMetadata]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def analyze(self, cls: Any) -> ShapeMetadata:
        """Return the metadata of *cls*, introspecting it on first use.

        Raises:
            UnsupportedShapeError: *cls* is not a class, is a built-in
                scalar or container, or requires a constructor argument
                that matches no field.
        """
        if not isinstance(cls, type):
            raise UnsupportedShapeError(cls, "not a class")
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        metadata = self._introspect(cls)
        with self._lock:
            stored = self._cache.setdefault(cls, metadata)
        logger.debug(
            "Analyzed shape of %s: construction=%s fields=%s",
            cls.__qualname__,
            stored.construction.value,
            stored.field_names,
        )
        return stored

    @classmethod
    def clear_cache(cls) -> None:
        with cls._lock:
            cls._cache.clear()

    @classmethod
    def is_cached(cls, type_: type) -> bool:
        return type_ in cls._cache

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def _introspect(self, cls: type) -> ShapeMetadata:
        if not is_object_type(cls):
            raise UnsupportedShapeError(cls, "built-in types have no introspectable fields")

        parameters = self._constructor_parameters(cls)
        hints = self._type_hints(cls)

        if dataclasses.is_dataclass(cls):
            drafts = self._dataclass_fields(cls, hints)
        elif issubclass(cls, BaseModel):
            drafts = self._pydantic_fields(cls, hints)
        elif issubclass(cls, tuple) and hasattr(cls, "_fields"):
            drafts = self._namedtuple_fields(cls, hints)
        else:
            drafts = self._plain_fields(cls, hints, parameters)

        positions = {p.name: i for i, p in enumerate(parameters)}
        names = {draft.name for draft in drafts}
        unbound = [
            p.name
            for p in parameters
            if p.default is inspect.Parameter.empty and p.name not in names
        ]
        if unbound:
            raise UnsupportedShapeError(
                cls, f"constructor parameters {unbound} do not correspond to any field"
            )

        fields: list[FieldDescriptor] = []
        for draft in drafts:
            param = next((p for p in parameters if p.name == draft.name), None)
            default, factory = draft.default, draft.default_factory
            declared = default is not MISSING or factory is not None
            if param is not None and param.default is not inspect.Parameter.empty and not declared:
                default = param.default
            fields.append(
                FieldDescriptor(
                    name=draft.name,
                    type=describe(draft.annotation),
                    readable=draft.readable,
                    writable=draft.writable,
                    slot=positions.get(draft.name),
                    keyword_only=param is not None and param.kind is inspect.Parameter.KEYWORD_ONLY,
                    positional_only=param is not None and param.kind is inspect.Parameter.POSITIONAL_ONLY,
                    default=default,
                    default_factory=factory,
                )
            )

        required = frozenset(p.name for p in parameters if p.default is inspect.Parameter.empty)
        construction = self._construction_kind(fields, required)
        return ShapeMetadata(type=cls, fields=tuple(fields), construction=construction, required_slots=required)

    @staticmethod
    def _construction_kind(
        fields: list[FieldDescriptor],
        required: frozenset[str],
    ) -> ConstructionKind:
        # Derived read-only fields are never populated.
        buildable = [f for f in fields if not f.derived]
        if not required and all(f.writable for f in buildable):
            return ConstructionKind.MUTABLE
        if all(f.slot is not None for f in buildable):
            return ConstructionKind.IMMUTABLE
        return ConstructionKind.HYBRID

    @staticmethod
    def _constructor_parameters(cls: type) -> list[inspect.Parameter]:
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            if cls.__init__ is object.__init__:  # type: ignore[misc]
                return []
            raise UnsupportedShapeError(cls, "constructor signature cannot be inspected") from None
        return [p for p in signature.parameters.values() if p.kind not in _VARIADIC]

    @staticmethod
    def _type_hints(cls: type) -> dict[str, Any]:
        try:
            return typing.get_type_hints(cls, include_extras=True)
        except (NameError, TypeError):
            # Unresolvable forward references: fall back to the raw annotations.
            hints: dict[str, Any] = {}
            for klass in reversed(cls.__mro__):
                hints.update(getattr(klass, "__annotations__", {}))
            return hints

    @staticmethod
    def _dataclass_fields(cls: type, hints: dict[str, Any]) -> list[_FieldDraft]:
        frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
        drafts = []
        for f in dataclasses.fields(cls):
            drafts.append(
                _FieldDraft(
                    name=f.name,
                    annotation=hints.get(f.name, f.type),
                    writable=not frozen,
                    default=f.default if f.default is not dataclasses.MISSING else MISSING,
                    default_factory=f.default_factory if f.default_factory is not dataclasses.MISSING else None,
                )
            )
        return drafts

    @staticmethod
    def _pydantic_fields(cls: type[BaseModel], hints: dict[str, Any]) -> list[_FieldDraft]:
        frozen_model = bool(cls.model_config.get("frozen", False))
        drafts = []
        for name, info in cls.model_fields.items():
            drafts.append(
                _FieldDraft(
                    name=name,
                    annotation=hints.get(name, info.annotation),
                    writable=not (frozen_model or info.frozen),
                    default=info.default if info.default is not PydanticUndefined else MISSING,
                    default_factory=info.default_factory,
                )
            )
        return drafts

    @staticmethod
    def _namedtuple_fields(cls: type, hints: dict[str, Any]) -> list[_FieldDraft]:
        defaults: dict[str, Any] = getattr(cls, "_field_defaults", {})
        return [
            _FieldDraft(
                name=name,
                annotation=hints.get(name),
                writable=False,
                default=defaults.get(name, MISSING),
            )
            for name in cls._fields  # type: ignore[attr-defined]
        ]

    def _plain_fields(
        self,
        cls: type,
        hints: dict[str, Any],
        parameters: list[inspect.Parameter],
    ) -> list[_FieldDraft]:
        drafts: dict[str, _FieldDraft] = {}

        for name, annotation in hints.items():
            if name.startswith("_") or is_class_var(annotation):
                continue
            drafts[name] = _FieldDraft(name=name, annotation=annotation)

        init_hints = self._init_hints(cls)
        for param in parameters:
            if param.name not in drafts and not param.name.startswith("_"):
                drafts[param.name] = _FieldDraft(name=param.name, annotation=init_hints.get(param.name))

        for klass in cls.__mro__:
            for name, attr in vars(klass).items():
                if isinstance(attr, property) and not name.startswith("_") and name not in drafts:
                    drafts[name] = _FieldDraft(name=name, annotation=self._property_hint(attr))

        for draft in drafts.values():
            static = inspect.getattr_static(cls, draft.name, MISSING)
            if isinstance(static, property):
                draft.readable = static.fget is not None
                draft.writable = static.fset is not None
                if draft.annotation is None:
                    draft.annotation = self._property_hint(static)
            elif static is not MISSING and not callable(static) and not inspect.isdatadescriptor(static):
                draft.default = static

        return list(drafts.values())

    @staticmethod
    def _init_hints(cls: type) -> dict[str, Any]:
        try:
            return typing.get_type_hints(cls.__init__, include_extras=True)  # type: ignore[misc]
        except (NameError, TypeError):
            return {}

    @staticmethod
    def _property_hint(prop: property) -> Any:
        if prop.fget is None:
            return None
        try:
            return typing.get_type_hints(prop.fget, include_extras=True).get("return")
        except (NameError, TypeError):
            return None


_default_analyzer = ShapeAnalyzer()


def analyze(cls: Any) -> ShapeMetadata:
    """Module-level shortcut for ``ShapeAnalyzer().analyze(cls)``."""
    return _default_analyzer.analyze(cls)
