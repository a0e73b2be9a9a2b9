"""Unified exception hierarchy for pybeans.

All library exceptions inherit from PyBeansException, enabling unified
error handling: catch PyBeansException to handle every failure raised by
the library, or catch a specific subclass for targeted handling.

Categories:
- InvalidArgumentError: bad call-site input (UnsupportedShapeError included)
- Resolution errors: InvalidMappingError, MissingFieldError
- Conversion errors: IncompatibleTypeError, CyclicGraphError, DepthExceededError
- BuildError: destination construction or accessor failure
- ValidationError: post-build constraint violations
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Base Exceptions
# =============================================================================


class PyBeansException(Exception):
    """Base exception for all pybeans errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "MISSING_FIELD").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context: dict = context if context is not None else {}


class BeanTransformationError(PyBeansException):
    """Failure raised while transforming one object graph into another.

    Carries the destination ``field_path`` at which the failure happened.
    Nested sessions prepend their own field name while the error travels
    up, so the top-level caller sees the full path (``"dept.code"``).
    """

    default_code: str = "TRANSFORMATION_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
        field_path: str = "",
    ) -> None:
        super().__init__(message, code=code or self.default_code, context=context)
        self.field_path = field_path

    def prepend_path(self, segment: str) -> BeanTransformationError:
        """Prefix the failing path with the enclosing field *segment*."""
        if not segment:
            return self
        if not self.field_path:
            self.field_path = segment
        elif self.field_path.startswith("["):
            self.field_path = f"{segment}{self.field_path}"
        else:
            self.field_path = f"{segment}.{self.field_path}"
        return self

    def __str__(self) -> str:
        if self.field_path:
            return f"{self.field_path}: {self.message}"
        return self.message


# =============================================================================
# Argument and Shape Errors
# =============================================================================


class InvalidArgumentError(BeanTransformationError):
    """A ``transform`` argument is absent or cannot be used."""

    default_code = "INVALID_ARGUMENT"


class UnsupportedShapeError(InvalidArgumentError):
    """A type cannot be introspected into a known construction shape."""

    default_code = "UNSUPPORTED_SHAPE"

    def __init__(self, type_: Any, reason: str) -> None:
        self.type_ = type_
        self.reason = reason
        name = getattr(type_, "__qualname__", repr(type_))
        super().__init__(
            f"Type '{name}' has no supported construction shape: {reason}",
            context={"type": name},
        )


# =============================================================================
# Resolution Errors
# =============================================================================


class InvalidMappingError(BeanTransformationError):
    """A configured source path does not exist on the source shape."""

    default_code = "INVALID_MAPPING"

    def __init__(self, dest_field: str, source_path: str, source_type: Any) -> None:
        self.dest_field = dest_field
        self.source_path = source_path
        name = getattr(source_type, "__qualname__", repr(source_type))
        super().__init__(
            f"Mapping for '{dest_field}' points to '{source_path}', which does not exist on '{name}'",
            context={"dest_field": dest_field, "source_path": source_path, "source_type": name},
            field_path=dest_field,
        )


class MissingFieldError(BeanTransformationError):
    """No source correspondence for a destination field and no default allowed."""

    default_code = "MISSING_FIELD"

    def __init__(self, dest_field: str, source_type: Any) -> None:
        self.dest_field = dest_field
        name = getattr(source_type, "__qualname__", repr(source_type))
        super().__init__(
            f"No field in '{name}' matches destination field '{dest_field}'",
            context={"dest_field": dest_field, "source_type": name},
            field_path=dest_field,
        )


# =============================================================================
# Conversion Errors
# =============================================================================


class IncompatibleTypeError(BeanTransformationError):
    """A scalar value cannot be coerced to the destination type."""

    default_code = "INCOMPATIBLE_TYPE"

    def __init__(self, value: Any, target: Any, reason: str | None = None) -> None:
        self.value = value
        self.target = target
        target_name = getattr(target, "__qualname__", repr(target))
        message = f"Cannot convert {type(value).__qualname__} value {value!r} to '{target_name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"source_type": type(value).__qualname__, "target": target_name})


class CyclicGraphError(BeanTransformationError):
    """The source graph refers back to an object already on the current path."""

    default_code = "CYCLIC_GRAPH"

    def __init__(self, source: Any) -> None:
        self.source_type = type(source)
        super().__init__(
            f"Cycle detected: '{type(source).__qualname__}' instance is already being transformed",
            context={"source_type": type(source).__qualname__},
        )


class DepthExceededError(BeanTransformationError):
    """Nested transformation went deeper than the configured maximum."""

    default_code = "DEPTH_EXCEEDED"

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"Maximum transformation depth of {max_depth} exceeded",
            context={"max_depth": max_depth},
        )


# =============================================================================
# Build and Validation Errors
# =============================================================================


class BuildError(BeanTransformationError):
    """The destination instance could not be constructed or populated."""

    default_code = "BUILD_ERROR"

    def __init__(self, dest_type: Any, reason: str) -> None:
        self.dest_type = dest_type
        name = getattr(dest_type, "__qualname__", repr(dest_type))
        super().__init__(f"Cannot build '{name}': {reason}", context={"dest_type": name})


class ValidationError(BeanTransformationError):
    """A built destination instance violates one or more constraints.

    ``violations`` holds every
    :class:`~pybeans.validation.validator.ConstraintViolation` found.
    """

    default_code = "VALIDATION_ERROR"

    def __init__(self, violations: list[Any]) -> None:
        self.violations = list(violations)
        detail = "; ".join(str(v) for v in self.violations)
        super().__init__(
            f"Validation failed: {detail}",
            context={"violations": [str(v) for v in self.violations]},
        )
