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
"""Configuration for pybeans: YAML/TOML files, ``PYBEANS_*`` env vars, property binding.

Keys use dot-notation (``pybeans.transformer.max_depth``). An environment
variable derived from the key wins over the file value:
``pybeans.transformer.max_depth`` is read from
``PYBEANS_TRANSFORMER_MAX_DEPTH`` when that variable is set.

Example::

    config = Config.from_file("pybeans.yaml", active_profiles=["strict"])
    properties = config.bind(TransformerProperties)
"""

from __future__ import annotations

import dataclasses
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

T = TypeVar("T")

_PREFIX_ATTR = "__pybeans_config_prefix__"
_ENV_PREFIX = "PYBEANS_"
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_MAX_NESTING = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Bind a dataclass or pydantic model to the configuration section at *prefix*.

    Usage:
        @config_properties(prefix="pybeans.transformer")
        @dataclass
        class TransformerProperties:
            max_depth: int = 64
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


_LOADERS: dict[str, Callable[[Path], dict[str, Any]]] = {
    ".toml": _load_toml,
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
}


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge *overlay* into a copy of *base*; nested sections merge key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        merged[key] = _merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def _parse_flag(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


# Environment variables and placeholders always produce strings.
_FROM_STRING: dict[Any, Callable[[str], Any]] = {
    int: int,
    float: float,
    bool: _parse_flag,
}


class Config:
    """Read-only view over nested configuration data.

    Lookup order for a key (first hit wins):
    1. The ``PYBEANS_*`` environment variable derived from the key
    2. The loaded data, with ``${...}`` placeholders resolved
    3. The caller's default, or the bound class's field default
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = []

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load *path* and overlay ``<stem>-<profile><suffix>`` files for each active profile.

        A missing *path* yields an empty configuration; missing profile
        files are skipped.
        """
        path = Path(path)
        config = cls()
        if not path.exists():
            return config

        loader = _LOADERS.get(path.suffix, _load_yaml)
        config._data = loader(path)
        config._sources.append(str(path))
        for profile in active_profiles or []:
            overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
            if overlay.exists():
                config._data = _merge(config._data, loader(overlay))
                config._sources.append(f"{overlay} (profile: {profile})")
        return config

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, base file first."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Look *key* up in the environment, then in the loaded data."""
        from_env = os.environ.get(self.env_key(key))
        if from_env is not None:
            return from_env
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str):
            return self._interpolate(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """The nested mapping stored under *prefix*, or an empty dict."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    @staticmethod
    def env_key(key: str) -> str:
        """``pybeans.transformer.max-depth`` -> ``PYBEANS_TRANSFORMER_MAX_DEPTH``."""
        name = re.sub(r"[.\-]", "_", key.removeprefix("pybeans."))
        return _ENV_PREFIX + name.upper()

    def bind(self, properties_cls: type[T]) -> T:
        """Build a ``@config_properties`` class from its configuration section.

        Raises:
            ValueError: the class is not decorated, or a pydantic model
                rejects the bound values.
        """
        prefix = getattr(properties_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{properties_cls.__name__} is not decorated with @config_properties")

        values = dict(self.get_section(prefix))
        for name in [*values, *_field_names(properties_cls)]:
            value = self.get(f"{prefix}.{name}")
            if value is not None:
                values[name] = value

        if issubclass(properties_cls, BaseModel):
            try:
                return cast(T, properties_cls.model_validate(values))
            except PydanticValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{properties_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc
        return self._bind_dataclass(properties_cls, values)

    @staticmethod
    def _bind_dataclass(properties_cls: type[T], values: dict[str, Any]) -> T:
        hints = get_type_hints(properties_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(properties_cls):  # type: ignore[arg-type]
            if field.name not in values:
                continue
            value = values[field.name]
            parse = _FROM_STRING.get(hints.get(field.name))
            kwargs[field.name] = parse(value) if parse is not None and isinstance(value, str) else value
        return properties_cls(**kwargs)

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _interpolate(self, value: str, nesting: int = 0) -> str:
        """Replace ``${name}`` and ``${name:fallback}`` with env vars or other keys."""
        if "${" not in value:
            return value
        if nesting > _MAX_NESTING:
            raise ValueError(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references."
            )

        def substitute(match: re.Match[str]) -> str:
            name, has_fallback, fallback = match.group(1).partition(":")
            from_env = os.environ.get(name)
            if from_env is not None:
                return from_env
            referenced = self._lookup(name)
            if referenced is not None:
                return self._interpolate(str(referenced), nesting + 1)
            if has_fallback:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}': not found in environment or config")

        return _PLACEHOLDER.sub(substitute, value)


def _field_names(properties_cls: type) -> list[str]:
    if issubclass(properties_cls, BaseModel):
        return list(properties_cls.model_fields)
    if dataclasses.is_dataclass(properties_cls):
        return [f.name for f in dataclasses.fields(properties_cls)]
    return []
