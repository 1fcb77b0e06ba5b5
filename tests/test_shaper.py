"""
Unit tests for the RecordShaper.
"""

from __future__ import annotations

import pytest

from topic_mapper.schema import MappingDefinition, OutputRecord
from topic_mapper.schema_builder import SchemaBuilder
from topic_mapper.shaper import RecordShaper


def _signed(type_name: str = "integer") -> MappingDefinition:
    return SchemaBuilder.build_definition({
        "topic": "battery/power",
        "type": type_name,
        "measurement_positive": "battery",
        "field_positive": "charging_power",
        "measurement_negative": "battery",
        "field_negative": "discharging_power",
    })


def _default() -> MappingDefinition:
    return SchemaBuilder.build_definition({
        "topic": "pv/power",
        "type": "float",
        "measurement": "pv",
        "field": "power",
    })


@pytest.fixture
def shaper() -> RecordShaper:
    return RecordShaper()


# ======================================================================
# Default layout
# ======================================================================

class TestDefault:
    def test_single_record(self, shaper: RecordShaper) -> None:
        assert shaper.shape(_default(), 3.5) == [OutputRecord("pv", "power", 3.5)]

    def test_absent_value_kept_as_candidate(self, shaper: RecordShaper) -> None:
        assert shaper.shape(_default(), None) == [
            OutputRecord("pv", "power", None)
        ]

    def test_negative_value_untouched(self, shaper: RecordShaper) -> None:
        assert shaper.shape(_default(), -2.0)[0].value == -2.0


# ======================================================================
# Signed layout
# ======================================================================

class TestSigned:
    def test_positive_value(self, shaper: RecordShaper) -> None:
        assert shaper.shape(_signed(), 500) == [
            OutputRecord("battery", "discharging_power", 0),
            OutputRecord("battery", "charging_power", 500),
        ]

    def test_negative_value(self, shaper: RecordShaper) -> None:
        assert shaper.shape(_signed(), -300) == [
            OutputRecord("battery", "discharging_power", 300),
            OutputRecord("battery", "charging_power", 0),
        ]

    def test_zero_yields_two_zero_records(self, shaper: RecordShaper) -> None:
        records = shaper.shape(_signed(), 0)
        assert len(records) == 2
        assert [r.value for r in records] == [0, 0]

    def test_absent_value_on_both_sides(self, shaper: RecordShaper) -> None:
        records = shaper.shape(_signed(), None)
        assert [r.value for r in records] == [None, None]

    def test_float_zero_literal(self, shaper: RecordShaper) -> None:
        records = shaper.shape(_signed("float"), -1.5)
        assert records[0].value == 1.5
        assert records[1].value == 0.0
        assert isinstance(records[1].value, float)

    def test_integer_zero_literal(self, shaper: RecordShaper) -> None:
        records = shaper.shape(_signed("integer"), 7)
        assert records[0].value == 0
        assert isinstance(records[0].value, int)
