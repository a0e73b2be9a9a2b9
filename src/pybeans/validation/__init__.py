"""pybeans Validation — Pydantic-backed constraint checking of built objects."""

from pybeans.validation.validator import ConstraintViolation, Validator

__all__ = ["ConstraintViolation", "Validator"]
