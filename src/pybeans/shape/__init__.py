"""pybeans shape — structural introspection of source and destination types."""

from pybeans.shape.analyzer import ShapeAnalyzer, analyze
from pybeans.shape.metadata import MISSING, ConstructionKind, FieldDescriptor, ShapeMetadata
from pybeans.shape.types import TypeDescriptor, ValueKind, describe

__all__ = [
    "MISSING",
    "ConstructionKind",
    "FieldDescriptor",
    "ShapeAnalyzer",
    "ShapeMetadata",
    "TypeDescriptor",
    "ValueKind",
    "analyze",
    "describe",
]
