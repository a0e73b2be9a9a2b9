"""Tests for FieldMapping and FieldTransformer."""

import dataclasses

import pytest

from pybeans.model.field import FieldMapping, FieldTransformer


class TestFieldMapping:
    def test_holds_both_names(self):
        mapping = FieldMapping("dept.code", "dept_code")
        assert mapping.source_field_name == "dept.code"
        assert mapping.dest_field_name == "dept_code"

    @pytest.mark.parametrize("source, dest", [("", "x"), ("x", ""), ("", "")])
    def test_rejects_empty_names(self, source, dest):
        with pytest.raises(ValueError):
            FieldMapping(source, dest)

    def test_is_immutable(self):
        mapping = FieldMapping("a", "b")
        with pytest.raises(dataclasses.FrozenInstanceError):
            mapping.dest_field_name = "c"  # type: ignore[misc]


class TestFieldTransformer:
    def test_apply_calls_function(self):
        transformer = FieldTransformer("name", str.title)
        assert transformer.apply("ann lee") == "Ann Lee"

    def test_rejects_empty_name(self):
        with pytest.raises(ValueError):
            FieldTransformer("", str.upper)

    def test_rejects_non_callable(self):
        with pytest.raises(ValueError, match="not callable"):
            FieldTransformer("name", "upper")  # type: ignore[arg-type]
