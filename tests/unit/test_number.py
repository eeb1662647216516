from decimal import Decimal
from typing import Any

import numpy as np
import pytest

from jsonexpect import (
    AssertionFailedError,
    AssertionRange,
    CollectingReporter,
    DecodeTarget,
    FailureKind,
    JSONNumber,
    Number,
    RaisingReporter,
    Value,
    new_number,
    reporter_scope,
)


@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


def kinds(reporter: CollectingReporter) -> list[FailureKind]:
    return [record.kind for record in reporter.records]


class TestConstruction:
    def test_value_is_canonicalized(self, reporter):
        number = Number(reporter, np.int32(123))

        assert number.raw == Decimal(123)
        assert not number.chain.failed()
        assert reporter.records == []

    def test_invalid_value_yields_poisoned_instance(self, reporter):
        number = Number(reporter, "123")

        assert isinstance(number, Number)
        assert number.chain.failed()
        assert kinds(reporter) == [FailureKind.USAGE]
        assert reporter.records[0].trail == ["Number()"]

        number.is_equal(0).gt(1000).in_list(1, 2)

        assert len(reporter.records) == 1

    def test_missing_reporter_is_an_error(self):
        with pytest.raises(ValueError):
            Number(None, 1)

    def test_new_number_uses_bound_reporter(self):
        with reporter_scope(CollectingReporter()) as bound:
            new_number(123).gt(200)

        assert kinds(bound) == [FailureKind.GT]

    def test_as_float_and_as_int(self, reporter):
        assert Number(reporter, 123).as_int() == 123
        assert Number(reporter, np.float32(0.1)).as_float(32) == np.float32(0.1)

        assert Number(reporter, 1.5).as_int() == 0
        assert kinds(reporter) == [FailureKind.USAGE]


class TestEquality:
    def test_cross_type_equality(self, reporter):
        Number(reporter, np.int32(123)).is_equal(123.0).is_equal(np.uint8(123)).is_equal(JSONNumber("123"))

        assert reporter.records == []

    def test_is_equal_failure_record(self, reporter):
        Number(reporter, 123).is_equal(124)

        record = reporter.records[0]
        assert record.kind == FailureKind.EQUAL
        assert record.actual == Decimal(123)
        assert record.expected == Decimal(124)
        assert record.errors == ["expected: numbers are equal"]
        assert record.trail == ["Number()", "is_equal()"]

    def test_comparison_is_exact(self, reporter):
        Number(reporter, 2**64 + 1).not_equal(float(2**64))
        Number(reporter, JSONNumber("0.1")).not_equal(0.1)
        Number(reporter, np.uint64(2**64 - 1)).is_equal(2**64 - 1)

        assert reporter.records == []

    def test_not_equal(self, reporter):
        Number(reporter, 123).not_equal(321)
        assert reporter.records == []

        Number(reporter, 123).not_equal(123.0)
        assert kinds(reporter) == [FailureKind.NOT_EQUAL]

    def test_not_equal_with_invalid_argument_reports_usage_once(self, reporter):
        Number(reporter, 123).not_equal("abc")

        assert kinds(reporter) == [FailureKind.USAGE]

    def test_equal_alias(self, reporter):
        Number(reporter, 1).equal(2)
        assert kinds(reporter) == [FailureKind.EQUAL]


def test_fail_fast_reports_only_first_failure(reporter):
    number = Number(reporter, 123)

    number.is_equal(1).is_equal(2).gt(1000).in_range(0, 1).not_in_list(123)

    assert len(reporter.records) == 1
    assert reporter.records[0].trail[-1] == "is_equal()"
    assert number.chain.depth == 0


def test_alias_names_failures(reporter):
    Number(reporter, 123).alias("price").gt(200)

    record = reporter.records[0]
    assert record.name == "price"
    assert record.trail == ["Number()", "gt()"]


class TestDelta:
    @pytest.mark.parametrize("subject", [123.2, 122.8, 123.0])
    def test_in_delta_succeeds(self, reporter, subject):
        Number(reporter, subject).in_delta(123.0, 0.3)
        assert reporter.records == []

    def test_in_delta_fails(self, reporter):
        Number(reporter, 123.4).in_delta(123.0, 0.3)

        record = reporter.records[0]
        assert record.kind == FailureKind.EQUAL
        assert record.delta == Decimal(0.3)
        assert record.errors == ["expected: numbers lie within delta"]

    def test_not_in_delta(self, reporter):
        Number(reporter, 123.0).not_in_delta(123.2, 0.1)
        assert reporter.records == []

        Number(reporter, 123.0).not_in_delta(123.2, 0.3)
        assert kinds(reporter) == [FailureKind.NOT_EQUAL]

    def test_delta_boundary_is_inclusive(self, reporter):
        Number(reporter, 10).in_delta(12, 2).in_delta(8, 2)
        assert reporter.records == []

        Number(reporter, 10).not_in_delta(12, 2)
        assert kinds(reporter) == [FailureKind.NOT_EQUAL]

    def test_nan_is_incomparable(self, reporter):
        Number(reporter, 1.0).in_delta(float("nan"), 0.1)
        Number(reporter, 1.0).not_in_delta(1.0, float("nan"))

        assert kinds(reporter) == [FailureKind.EQUAL, FailureKind.NOT_EQUAL]
        assert all(r.errors == ["expected: numbers are comparable"] for r in reporter.records)

    def test_negative_delta_is_usage_error(self, reporter):
        Number(reporter, 1).in_delta(1, -0.5)
        assert kinds(reporter) == [FailureKind.USAGE]

    def test_invalid_delta_is_usage_error(self, reporter):
        Number(reporter, 1).in_delta(1, "wide")
        assert kinds(reporter) == [FailureKind.USAGE]

    def test_extreme_exponents(self, reporter):
        huge, tiny = JSONNumber("1e999999999999999"), JSONNumber("1e-999999999999999")

        Number(reporter, huge).not_in_delta(tiny, 1)
        Number(reporter, tiny).in_delta(0, tiny).not_in_delta(JSONNumber("-1e-999999999999999"), tiny)
        assert reporter.records == []

        Number(reporter, huge).in_delta(tiny, 1)
        assert kinds(reporter) == [FailureKind.EQUAL]
        assert reporter.records[0].errors == ["expected: numbers lie within delta"]


class TestRange:
    @pytest.mark.parametrize("subject", [100, 150, 200, 100.0, np.int16(200)])
    def test_in_range_is_inclusive(self, reporter, subject):
        Number(reporter, subject).in_range(100, 200)
        assert reporter.records == []

    @pytest.mark.parametrize("subject", [100, 200])
    def test_not_in_range_fails_on_boundaries(self, reporter, subject):
        Number(reporter, subject).not_in_range(100, 200)
        assert kinds(reporter) == [FailureKind.NOT_IN_RANGE]

    def test_in_range_failure_record(self, reporter):
        Number(reporter, 99).in_range(np.float32(100), np.int32(200))

        record = reporter.records[0]
        assert record.kind == FailureKind.IN_RANGE
        assert record.expected == AssertionRange(min=Decimal(100), max=Decimal(200))

    def test_not_in_range_succeeds_outside(self, reporter):
        Number(reporter, 100).not_in_range(0, 99).not_in_range(101, 200)
        assert reporter.records == []

    def test_invalid_bound_reports_only_conversion(self, reporter):
        Number(reporter, 1000).in_range("low", 10)
        Number(reporter, 5).not_in_range(0, None)

        assert kinds(reporter) == [FailureKind.USAGE, FailureKind.USAGE]


class TestList:
    def test_in_list(self, reporter):
        Number(reporter, 123).in_list(1, 123.0, np.int32(5))
        assert reporter.records == []

        Number(reporter, 123).in_list(1, 2)
        record = reporter.records[0]
        assert record.kind == FailureKind.BELONGS
        assert record.expected == [Decimal(1), Decimal(2)]

    def test_in_list_invalid_element_reports_conversion_only(self, reporter):
        Number(reporter, 123).in_list(123, "not-a-number")
        Number(reporter, 5).in_list(123, "not-a-number")

        assert kinds(reporter) == [FailureKind.USAGE, FailureKind.USAGE]
        assert all("unexpected non-number argument" in r.errors for r in reporter.records)

    def test_not_in_list(self, reporter):
        Number(reporter, 123).not_in_list(456.0, np.int32(456))
        assert reporter.records == []

        Number(reporter, 123).not_in_list(1, 123, 2)
        assert kinds(reporter) == [FailureKind.NOT_BELONGS]

    def test_not_in_list_stops_at_first_match(self, reporter):
        Number(reporter, 123).not_in_list(123, "never inspected")
        assert kinds(reporter) == [FailureKind.NOT_BELONGS]

    @pytest.mark.parametrize("method", ["in_list", "not_in_list"])
    def test_empty_list_is_usage_error(self, reporter, method):
        getattr(Number(reporter, 123), method)()

        record = reporter.records[0]
        assert record.kind == FailureKind.USAGE
        assert record.actual is None
        assert record.errors == ["unexpected empty list argument"]


class TestOrdering:
    @pytest.mark.parametrize(
        ("method", "fails"),
        [("gt", True), ("ge", False), ("lt", True), ("le", False)],
    )
    def test_strict_and_non_strict(self, reporter, method, fails):
        getattr(Number(reporter, 123), method)(123)
        assert bool(reporter.records) is fails

    def test_ordering_against_other_types(self, reporter):
        Number(reporter, 123).gt(np.int8(122)).ge(122.5).lt(JSONNumber("123.0001")).le(np.float32(123))
        assert reporter.records == []

    @pytest.mark.parametrize(
        ("method", "kind"),
        [("gt", FailureKind.GT), ("ge", FailureKind.GE), ("lt", FailureKind.LT), ("le", FailureKind.LE)],
    )
    def test_failure_kinds(self, reporter, method, kind):
        value = 200 if method in ("gt", "ge") else 0
        getattr(Number(reporter, 100), method)(value)
        assert kinds(reporter) == [kind]

    def test_invalid_operand_reports_only_conversion(self, reporter):
        Number(reporter, 1).gt([1])
        assert kinds(reporter) == [FailureKind.USAGE]

    def test_nan_subject_is_incomparable(self, reporter):
        Number(reporter, float("nan")).le(1)

        assert reporter.records[0].errors == ["expected: numbers are comparable"]


class TestDecode:
    def test_decode_into_int(self, reporter):
        target = DecodeTarget(int)
        Number(reporter, 123.0).decode(target)

        assert target.value == 123
        assert type(target.value) is int

    def test_decode_into_any(self, reporter):
        integral, fractional = DecodeTarget(), DecodeTarget(Any)
        Number(reporter, np.uint16(7)).decode(integral)
        Number(reporter, 1.25).decode(fractional)

        assert integral.value == 7
        assert fractional.value == 1.25

    def test_decode_non_integral_into_int_fails(self, reporter):
        target = DecodeTarget(np.int64)
        Number(reporter, 1.5).decode(target)

        assert target.value is None
        assert kinds(reporter) == [FailureKind.USAGE]
        assert reporter.records[0].errors[0] == "conversion error"

    def test_decode_into_unsupported_target(self, reporter):
        Number(reporter, 1).decode(DecodeTarget(str))
        Number(reporter, 1).decode(int)

        assert kinds(reporter) == [FailureKind.USAGE, FailureKind.USAGE]


class TestPath:
    def test_root_pointer_returns_value(self, reporter):
        value = Number(reporter, JSONNumber("12.50")).path("")

        assert isinstance(value, Value)
        assert value.raw == Decimal("12.50")
        value.number().is_equal(12.5)
        assert reporter.records == []

    def test_unresolvable_pointer_poisons_value(self, reporter):
        number = Number(reporter, 123)
        value = number.path("/a")

        assert kinds(reporter) == [FailureKind.USAGE]
        assert value.chain.failed()
        assert number.chain.failed()
        assert reporter.records[0].trail == ["Number()", "path('/a')"]

    def test_path_child_trail(self, reporter):
        Number(reporter, 5).path("").number().gt(10)

        assert reporter.records[0].trail == ["Number()", "path('')", "number()", "gt()"]


class TestSchema:
    def test_schema_passes(self, reporter):
        Number(reporter, 123).schema({"type": "integer", "minimum": 100})
        Number(reporter, 123).schema('{"type": "number", "maximum": 123}')
        assert reporter.records == []

    def test_schema_violation(self, reporter):
        Number(reporter, 99).schema({"type": "integer", "minimum": 100})

        record = reporter.records[0]
        assert record.kind == FailureKind.SCHEMA
        assert record.errors[0] == "expected: value matches schema"

    def test_multiple_of_is_exact(self, reporter):
        Number(reporter, JSONNumber("0.3")).schema({"multipleOf": 0.1})
        assert reporter.records == []

        Number(reporter, JSONNumber("0.35")).schema({"multipleOf": 0.1})
        assert kinds(reporter) == [FailureKind.SCHEMA]

    def test_multiple_of_with_long_quotient(self, reporter):
        Number(reporter, 10**30).schema({"multipleOf": 0.01})
        Number(reporter, JSONNumber("1e40")).schema('{"multipleOf": 1e-20}')
        assert reporter.records == []

        Number(reporter, JSONNumber("1000000000000000000000000000000.005")).schema({"multipleOf": 0.01})
        assert kinds(reporter) == [FailureKind.SCHEMA]

    def test_invalid_schema_is_usage_error(self, reporter):
        Number(reporter, 1).schema({"type": 5})
        Number(reporter, 1).schema("{not json")

        assert kinds(reporter) == [FailureKind.USAGE, FailureKind.USAGE]

    def test_non_finite_value_has_no_json_form(self, reporter):
        Number(reporter, float("inf")).schema({"type": "number"})
        assert kinds(reporter) == [FailureKind.USAGE]


class TestRaisingReporter:
    def test_failure_raises_assertion_error(self):
        with pytest.raises(AssertionFailedError) as excinfo:
            Number(RaisingReporter(), 123).alias("count").gt(200)

        assert excinfo.value.record.kind == FailureKind.GT
        assert "count" in str(excinfo.value)
        assert "expected: number is larger than given value" in str(excinfo.value)

    def test_construction_failure_raises(self):
        with pytest.raises(AssertionError):
            Number(RaisingReporter(), None)
