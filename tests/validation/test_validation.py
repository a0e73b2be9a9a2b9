"""Tests for validation module: constraint checks on built objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, Field

from pybeans.kernel.exceptions import ValidationError
from pybeans.validation.validator import ConstraintViolation, Validator


@dataclass
class Address:
    city: Annotated[str, Field(min_length=1)]
    zip: str = ""


@dataclass
class Customer:
    name: Annotated[str, Field(min_length=2)]
    age: Optional[Annotated[int, Field(ge=0)]] = None
    address: Optional[Address] = None
    previous: list[Address] = field(default_factory=list)
    by_label: dict[str, Address] = field(default_factory=dict)


@dataclass
class Unconstrained:
    name: str
    count: int


class Account(BaseModel):
    owner: str = Field(min_length=1)
    balance: int = Field(ge=0)


@pytest.fixture
def validator():
    return Validator()


class TestConstraintViolation:
    def test_str_with_path(self):
        assert str(ConstraintViolation("age", "too small", -1)) == "age: too small"

    def test_str_without_path(self):
        assert str(ConstraintViolation("", "bad object")) == "bad object"


class TestPlainObjects:
    def test_valid_object_has_no_violations(self, validator):
        customer = Customer(name="Ann", age=3, address=Address("Rome"))
        assert validator.get_constraint_violations(customer) == []
        validator.validate(customer)

    def test_unconstrained_object(self, validator):
        assert validator.get_constraint_violations(Unconstrained("x", -5)) == []

    def test_top_level_violations_are_all_collected(self, validator):
        violations = validator.get_constraint_violations(Customer(name="A", age=-1))
        assert sorted(v.field_path for v in violations) == ["age", "name"]
        age = next(v for v in violations if v.field_path == "age")
        assert age.invalid_value == -1

    def test_none_for_optional_constraint_is_valid(self, validator):
        assert validator.get_constraint_violations(Customer(name="Ann", age=None)) == []

    def test_nested_object_path(self, validator):
        violations = validator.get_constraint_violations(Customer(name="Ann", address=Address("")))
        assert [v.field_path for v in violations] == ["address.city"]

    def test_collection_and_mapping_paths(self, validator):
        customer = Customer(
            name="Ann",
            previous=[Address("Oslo"), Address("")],
            by_label={"work": Address("")},
        )
        paths = [v.field_path for v in validator.get_constraint_violations(customer)]
        assert paths == ["previous[1].city", "by_label['work'].city"]


class TestPydanticModels:
    def test_revalidates_model(self, validator):
        account = Account(owner="bob", balance=10)
        account.balance = -3
        violations = validator.get_constraint_violations(account)
        assert [v.field_path for v in violations] == ["balance"]

    def test_valid_model(self, validator):
        assert validator.get_constraint_violations(Account(owner="bob", balance=0)) == []


class TestValidate:
    def test_raises_validation_error_with_violations(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(Customer(name="A"))
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert [v.field_path for v in exc_info.value.violations] == ["name"]
        assert "name:" in exc_info.value.message
