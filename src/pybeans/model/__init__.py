"""pybeans model — FieldMapping and FieldTransformer value objects."""

from pybeans.model.field import FieldMapping, FieldTransformer

__all__ = ["FieldMapping", "FieldTransformer"]
