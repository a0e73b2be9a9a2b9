"""pybeans kernel — the library-wide exception hierarchy."""

from pybeans.kernel.exceptions import (
    BeanTransformationError,
    BuildError,
    CyclicGraphError,
    DepthExceededError,
    IncompatibleTypeError,
    InvalidArgumentError,
    InvalidMappingError,
    MissingFieldError,
    PyBeansException,
    UnsupportedShapeError,
    ValidationError,
)

__all__ = [
    "BeanTransformationError",
    "BuildError",
    "CyclicGraphError",
    "DepthExceededError",
    "IncompatibleTypeError",
    "InvalidArgumentError",
    "InvalidMappingError",
    "MissingFieldError",
    "PyBeansException",
    "UnsupportedShapeError",
    "ValidationError",
]
