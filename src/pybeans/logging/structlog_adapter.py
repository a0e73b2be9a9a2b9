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
"""StructlogAdapter — default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from pybeans.core.config import Config
from pybeans.logging.port import LoggingProperties


def _add_error_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Flatten ``code`` and ``field_path`` of a logged pybeans error into the event."""
    error = event_dict.get("error")
    if error is not None:
        code = getattr(error, "code", None)
        path = getattr(error, "field_path", None)
        if code:
            event_dict.setdefault("error_code", code)
        if path:
            event_dict.setdefault("field_path", path)
    return event_dict


class StructlogAdapter:
    """Default logging adapter backed by structlog."""

    def __init__(self) -> None:
        self._properties = LoggingProperties()

    @property
    def properties(self) -> LoggingProperties:
        return self._properties

    def configure(self, config: Config) -> None:
        """Configure structlog from the ``pybeans.logging`` section of config."""
        self._properties = config.bind(LoggingProperties)
        self._setup_structlog()
        for module, level in self._properties.module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        """Get a structlog BoundLogger by name."""
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the log level for a specific stdlib logger."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _setup_structlog(self) -> None:
        log_level = getattr(logging, self._properties.root_level, logging.INFO)

        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_error_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

        if self._properties.format.lower() == "json":
            processors.append(structlog.processors.JSONRenderer(default=str))
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)
