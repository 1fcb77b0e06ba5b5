"""
Record Shaping Layer.

Turns a resolved value into the candidate records of a mapping.

* Default layout: one record on ``measurement:field``.
* Signed layout: two records, negative side first.  The sign of the value
  picks the side that carries it (as an absolute value on the negative
  side); the other side receives the zero literal of the declared type.
  Zero itself yields zero on both sides.

Candidates may carry ``None``; the mapper drops those.
"""

from __future__ import annotations

from typing import Any, List

from topic_mapper.schema import DeclaredType, MappingDefinition, OutputRecord


class RecordShaper:
    """Builds ``OutputRecord`` candidates for a single mapping."""

    def shape(self, definition: MappingDefinition, value: Any) -> List[OutputRecord]:
        if definition.is_signed:
            return self.shape_signed(definition, value)
        return [OutputRecord(definition.measurement, definition.field, value)]

    @staticmethod
    def shape_signed(
        definition: MappingDefinition, value: Any
    ) -> List[OutputRecord]:
        if value is None:
            negative = positive = None
        else:
            zero = (definition.declared_type or DeclaredType.INTEGER).zero
            negative = abs(value) if value < 0 else zero
            positive = value if value > 0 else zero

        return [
            OutputRecord(
                definition.measurement_negative,
                definition.field_negative,
                negative,
            ),
            OutputRecord(
                definition.measurement_positive,
                definition.field_positive,
                positive,
            ),
        ]
