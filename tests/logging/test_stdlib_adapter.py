"""Tests for StdlibLoggingAdapter."""

import logging

from pybeans.core.config import Config
from pybeans.kernel.exceptions import MissingFieldError
from pybeans.logging.port import LoggingPort
from pybeans.logging.stdlib_adapter import StdlibLoggingAdapter


class TestStdlibLoggingAdapter:
    def test_implements_logging_port(self):
        assert isinstance(StdlibLoggingAdapter(), LoggingPort)

    def test_configure_sets_root_level(self):
        adapter = StdlibLoggingAdapter()
        adapter.configure(Config({"pybeans": {"logging": {"level": {"root": "WARNING"}}}}))
        assert logging.getLogger().level == logging.WARNING

    def test_configure_applies_module_levels(self):
        adapter = StdlibLoggingAdapter()
        adapter.configure(Config({"pybeans": {"logging": {"level": {"pybeans.validation": "ERROR"}}}}))
        assert logging.getLogger("pybeans.validation").level == logging.ERROR

    def test_structured_logger_formats_key_values(self, caplog):
        adapter = StdlibLoggingAdapter()
        logger = adapter.get_logger("pybeans.stdlib.test")
        with caplog.at_level(logging.INFO, logger="pybeans.stdlib.test"):
            logger.info("transformed", source="Employee", target="EmployeeView")
        assert "transformed | source=Employee target=EmployeeView" in caplog.text

    def test_structured_logger_plain_event(self, caplog):
        logger = StdlibLoggingAdapter().get_logger("pybeans.stdlib.plain")
        with caplog.at_level(logging.WARNING, logger="pybeans.stdlib.plain"):
            logger.warning("careful")
        assert "careful" in caplog.text

    def test_error_field_adds_code_and_path(self, caplog):
        error = MissingFieldError("zip", object).prepend_path("address")
        logger = StdlibLoggingAdapter().get_logger("pybeans.stdlib.error")
        with caplog.at_level(logging.ERROR, logger="pybeans.stdlib.error"):
            logger.error("transform failed", error=error)
        assert "error_code=MISSING_FIELD" in caplog.text
        assert "field_path=address.zip" in caplog.text
