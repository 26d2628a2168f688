"""Tests for the schema validation engine."""

import datetime

from schemaforge.schema.resolver import resolve_field, resolve_schema
from schemaforge.schema.types import MISSING
from schemaforge.validation.engine import (
    check_attributes,
    check_field,
    validate_attributes,
)
from schemaforge.validation.types import Violation, ViolationKind


def make_field(key="testField", **options):
    """Helper to resolve a single options declaration."""
    return resolve_field(key, options)


# =============================================================================
# Required
# =============================================================================


class TestRequired:
    def test_missing_value(self):
        violation = check_field(make_field("name", required=True), MISSING)
        assert violation == Violation(ViolationKind.REQUIRED, "name", '"name" is required.')

    def test_none_and_nan_are_not_defined(self):
        field = make_field("name", required=True)
        assert check_field(field, None).kind is ViolationKind.REQUIRED
        assert check_field(field, float("nan")).kind is ViolationKind.REQUIRED

    def test_falsy_values_are_defined(self):
        field = make_field("name", required=True)
        assert check_field(field, "") is None
        assert check_field(field, 0) is None
        assert check_field(field, False) is None

    def test_optional_missing_skips_other_checks(self):
        assert check_field(make_field("n", type=int, min=5), MISSING) is None


# =============================================================================
# Type
# =============================================================================


class TestType:
    def test_message(self):
        violation = check_field(make_field("age", type=int), "old")
        assert violation.kind is ViolationKind.TYPE
        assert violation.message == '"age" must be of type Number.'

    def test_array_message(self):
        violation = check_field(resolve_field("tags", [str]), ["a", 1])
        assert violation.message == '"tags" must be of type [String].'

    def test_none_on_typed_field(self):
        assert check_field(make_field("age", type=int), None).kind is ViolationKind.TYPE

    def test_none_on_untyped_field(self):
        assert check_field(make_field("anything"), None) is None

    def test_type_checked_before_bounds(self):
        violation = check_field(make_field("age", type=int, min=0), "x")
        assert violation.kind is ViolationKind.TYPE


# =============================================================================
# Bounds
# =============================================================================


class TestBounds:
    def test_below_min(self):
        violation = check_field(make_field("age", type=int, min=18), 17)
        assert violation.kind is ViolationKind.MIN
        assert violation.message == '"17" is lower than 18 for field "age".'

    def test_above_max(self):
        violation = check_field(make_field("age", type=int, max=150), 151)
        assert violation.kind is ViolationKind.MAX
        assert violation.message == '"151" is higher than 150 for field "age".'

    def test_bounds_are_inclusive(self):
        field = make_field("age", type=int, min=0, max=10)
        assert check_field(field, 0) is None
        assert check_field(field, 10) is None

    def test_zero_bound_is_enforced(self):
        assert check_field(make_field("n", min=0), -1).kind is ViolationKind.MIN
        assert check_field(make_field("n", max=0), 1).kind is ViolationKind.MAX

    def test_date_bounds(self):
        field = make_field("start", type=datetime.date, min=datetime.date(2024, 1, 1))
        assert check_field(field, datetime.date(2023, 12, 31)).kind is ViolationKind.MIN
        assert check_field(field, datetime.date(2024, 6, 1)) is None

    def test_incomparable_value_is_skipped(self):
        assert check_field(make_field("n", min=0), "abc") is None


# =============================================================================
# Whole-record passes
# =============================================================================


class TestCheckAttributes:
    def test_first_violation_in_declaration_order(self):
        schema = resolve_schema(
            {
                "b": {"required": True},
                "a": {"type": int},
            }
        )
        violation = check_attributes(schema, {"a": "x"})
        assert violation.field == "b"

    def test_valid(self):
        schema = resolve_schema({"a": str, "b": {"type": int, "min": 0}})
        assert check_attributes(schema, {"a": "x", "b": 1}) is None

    def test_unknown_keys_are_ignored(self):
        schema = resolve_schema({"a": str})
        assert check_attributes(schema, {"other": 1}) is None

    def test_validate_attributes_returns_message(self):
        schema = resolve_schema({"a": {"required": True}})
        assert validate_attributes(schema, {}) == '"a" is required.'
        assert validate_attributes(schema, {"a": 1}) is None

    def test_idempotent(self):
        schema = resolve_schema({"a": str})
        attrs = {"a": "x"}
        assert check_attributes(schema, attrs) is None
        assert check_attributes(schema, attrs) is None


class TestViolation:
    def test_codes(self):
        assert Violation(ViolationKind.REQUIRED, "a", "m").code == "REQUIRED"
        assert Violation(ViolationKind.TYPE, "a", "m").code == "INVALID_TYPE"
        assert Violation(ViolationKind.MIN, "a", "m").code == "BELOW_MIN"
        assert Violation(ViolationKind.MAX, "a", "m").code == "ABOVE_MAX"

    def test_to_dict(self):
        violation = Violation(ViolationKind.TYPE, "age", '"age" must be of type Number.')
        assert violation.to_dict() == {
            "message": '"age" must be of type Number.',
            "code": "INVALID_TYPE",
            "field": "age",
        }
        assert str(violation) == violation.message
