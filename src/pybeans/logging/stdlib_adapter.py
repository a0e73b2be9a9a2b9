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
"""StdlibLoggingAdapter — LoggingPort implementation on plain ``logging``.

Used where structlog is unwanted. Loggers accept the same
``logger.info(event, **fields)`` calls as structlog's; the fields are
rendered after the event, and a pybeans error passed as ``error=`` adds
its code and failing field path.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

from pybeans.core.config import Config
from pybeans.logging.port import LoggingProperties

_FORMATS = {
    "json": '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
    "console": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
}


class FieldLogger(logging.LoggerAdapter):
    """Renders keyword fields as ``event | key=value ...``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        passthrough = {k: kwargs.pop(k) for k in ("exc_info", "stack_info", "stacklevel", "extra") if k in kwargs}
        error = kwargs.get("error")
        if error is not None:
            for attr, key in (("code", "error_code"), ("field_path", "field_path")):
                value = getattr(error, attr, None)
                if value:
                    kwargs.setdefault(key, value)
        if kwargs:
            msg = f"{msg} | " + " ".join(f"{k}={v}" for k, v in kwargs.items())
        return msg, passthrough


class StdlibLoggingAdapter:
    """LoggingPort backed by ``logging.basicConfig`` and :class:`FieldLogger`."""

    def __init__(self) -> None:
        self._properties = LoggingProperties()

    @property
    def properties(self) -> LoggingProperties:
        return self._properties

    def configure(self, config: Config) -> None:
        self._properties = config.bind(LoggingProperties)
        logging.basicConfig(
            format=_FORMATS.get(self._properties.format.lower(), _FORMATS["console"]),
            stream=sys.stdout,
            level=getattr(logging, self._properties.root_level, logging.INFO),
            force=True,
        )
        for name, level in self._properties.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> FieldLogger:
        return FieldLogger(logging.getLogger(name), {})

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))
