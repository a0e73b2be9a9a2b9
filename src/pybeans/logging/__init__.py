"""pybeans Logging — hexagonal logging port and adapters."""

from pybeans.logging.port import LoggingPort, LoggingProperties
from pybeans.logging.stdlib_adapter import StdlibLoggingAdapter
from pybeans.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "LoggingProperties", "StdlibLoggingAdapter", "StructlogAdapter"]
