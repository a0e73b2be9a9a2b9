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
"""LoggingPort — the hexagonal port for library logging setup.

pybeans modules emit records through ``logging.getLogger(__name__)``.
A LoggingPort adapter decides how those records are rendered and at which
levels, based on the ``pybeans.logging`` configuration section.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from pybeans.core.config import Config, config_properties


@config_properties(prefix="pybeans.logging")
@dataclass
class LoggingProperties:
    """Logging settings bound from ``pybeans.logging``.

    Attributes:
        level: Logger name to level; the ``root`` key sets the root level.
        format: ``console`` or ``json``.
    """

    level: dict[str, str] = field(default_factory=dict)
    format: str = "console"

    @property
    def root_level(self) -> str:
        return str(self.level.get("root", "INFO")).upper()

    @property
    def module_levels(self) -> dict[str, str]:
        return {k: str(v).upper() for k, v in self.level.items() if k != "root"}


@runtime_checkable
class LoggingPort(Protocol):
    """Port defining the logging contract for pybeans."""

    def configure(self, config: Config) -> None: ...
    def get_logger(self, name: str) -> Any: ...
    def set_level(self, name: str, level: str) -> None: ...
