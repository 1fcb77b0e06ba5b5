"""
Unit tests for the TypeCoercer.
"""

from __future__ import annotations

import logging

import pytest

from topic_mapper.coercer import TypeCoercer
from topic_mapper.schema import DeclaredType


@pytest.fixture
def coercer() -> TypeCoercer:
    return TypeCoercer()


# ======================================================================
# Float
# ======================================================================

class TestFloat:
    def test_numeric_string(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("3.5", DeclaredType.FLOAT) == 3.5

    def test_integer_input(self, coercer: TypeCoercer) -> None:
        value = coercer.coerce(42, "float")
        assert value == 42.0
        assert isinstance(value, float)

    def test_negative_string(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("-1200.25", DeclaredType.FLOAT) == -1200.25

    def test_garbage_is_absent_and_logged(
        self, coercer: TypeCoercer, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="topic_mapper"):
            assert coercer.coerce("n/a", DeclaredType.FLOAT) is None
        assert "Failed to convert 'n/a' to float" in caplog.text

    def test_structure_is_absent(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce({"a": 1}, DeclaredType.FLOAT) is None

    @pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity", float("nan")])
    def test_non_finite_is_absent_and_logged(
        self, coercer: TypeCoercer, caplog: pytest.LogCaptureFixture, raw: object
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="topic_mapper"):
            assert coercer.coerce(raw, DeclaredType.FLOAT) is None
        assert "not finite" in caplog.text


# ======================================================================
# Integer
# ======================================================================

class TestInteger:
    def test_rounds_down(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("41.4", DeclaredType.INTEGER) == 41

    def test_rounds_up(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("41.6", DeclaredType.INTEGER) == 42

    def test_half_to_even(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("2.5", DeclaredType.INTEGER) == 2
        assert coercer.coerce("3.5", DeclaredType.INTEGER) == 4
        assert coercer.coerce(-2.5, DeclaredType.INTEGER) == -2

    def test_result_is_int(self, coercer: TypeCoercer) -> None:
        assert isinstance(coercer.coerce(7.0, DeclaredType.INTEGER), int)

    def test_garbage_is_absent_and_logged(
        self, coercer: TypeCoercer, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="topic_mapper"):
            assert coercer.coerce("abc", DeclaredType.INTEGER) is None
        assert "to integer" in caplog.text

    def test_infinity_is_absent(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("inf", DeclaredType.INTEGER) is None


# ======================================================================
# Boolean
# ======================================================================

class TestBoolean:
    @pytest.mark.parametrize(
        "raw", ["true", "TRUE", "On", "1", "ok", "OK", "yes", "YES", "on", 1, True]
    )
    def test_truthy(self, coercer: TypeCoercer, raw: object) -> None:
        assert coercer.coerce(raw, DeclaredType.BOOLEAN) is True

    @pytest.mark.parametrize("raw", ["0", "false", "off", "no", "1.0", 0, False])
    def test_falsy(self, coercer: TypeCoercer, raw: object) -> None:
        assert coercer.coerce(raw, DeclaredType.BOOLEAN) is False

    def test_empty_string_is_false(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("", DeclaredType.BOOLEAN) is False


# ======================================================================
# String and unsupported types
# ======================================================================

class TestString:
    def test_string_unchanged(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("charging", DeclaredType.STRING) == "charging"

    def test_number_stringified(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce(12.5, DeclaredType.STRING) == "12.5"

    def test_json_spelling_for_booleans(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce(True, DeclaredType.STRING) == "true"

    def test_structure_as_json(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce([1, 2], DeclaredType.STRING) == "[1, 2]"


class TestUnsupported:
    def test_unknown_type_name(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("1.5", "decimal") is None

    def test_missing_type(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce("1.5", None) is None

    def test_none_passes_through(self, coercer: TypeCoercer) -> None:
        assert coercer.coerce(None, DeclaredType.BOOLEAN) is None
