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
"""Tests for StructlogAdapter — default LoggingPort implementation."""

import logging

from pybeans.core.config import Config
from pybeans.kernel.exceptions import MissingFieldError
from pybeans.logging.port import LoggingPort
from pybeans.logging.structlog_adapter import StructlogAdapter, _add_error_context


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        adapter = StructlogAdapter()
        assert isinstance(adapter, LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter.properties.format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pybeans": {"logging": {"level": {"root": "DEBUG"}}}}))
        assert adapter.properties.root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pybeans": {"logging": {"format": "json"}}}))
        assert adapter.properties.format == "json"

    def test_configure_applies_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"pybeans": {"logging": {"level": {"root": "INFO", "pybeans.shape.analyzer": "DEBUG"}}}})
        adapter.configure(config)
        assert adapter.properties.module_levels == {"pybeans.shape.analyzer": "DEBUG"}
        assert logging.getLogger("pybeans.shape.analyzer").level == logging.DEBUG


class TestStructlogAdapterGetLogger:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("pybeans.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))


class TestStructlogAdapterSetLevel:
    def test_set_level_updates_module_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("pybeans.transformer", "warning")
        assert logging.getLogger("pybeans.transformer").level == logging.WARNING


class TestErrorContextProcessor:
    def test_adds_code_and_field_path_of_logged_error(self):
        error = MissingFieldError("city", object).prepend_path("address")
        event = _add_error_context(None, "error", {"event": "failed", "error": error})
        assert event["error_code"] == "MISSING_FIELD"
        assert event["field_path"] == "address.city"

    def test_leaves_events_without_error_untouched(self):
        event = _add_error_context(None, "info", {"event": "ok"})
        assert event == {"event": "ok"}
