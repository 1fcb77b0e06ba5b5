"""
Mapping definitions and output records.

Defines the closed set of declared types, value sources and output layouts
a mapping can use, and the typed data structures carried through the
resolver.  Everything here is decided once at load time; nothing is
re-derived per message.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from topic_mapper.formula import Formula


# ---------------------------------------------------------------------------
# Closed variants
# ---------------------------------------------------------------------------

class DeclaredType(str, Enum):
    """Every type a mapping can coerce its value into."""

    FLOAT = "float"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"

    @property
    def is_numeric(self) -> bool:
        return self in (DeclaredType.FLOAT, DeclaredType.INTEGER)

    @property
    def zero(self) -> Any:
        """Zero literal used for the unfilled side of a signed pair."""
        return 0.0 if self is DeclaredType.FLOAT else 0


def declared_type_lookup(name: Any) -> Optional[DeclaredType]:
    """Return the ``DeclaredType`` for *name*, or ``None`` if unsupported."""
    if isinstance(name, DeclaredType):
        return name
    try:
        return DeclaredType(name)
    except ValueError:
        return None


class MappingKind(str, Enum):
    """Output layout of a mapping."""

    DEFAULT = "default"
    SIGNED = "signed"


class ValueSource(str, Enum):
    """Where a mapping takes its raw value from."""

    IMPLICIT = "implicit"  # the whole message is the value
    JSON_KEY = "json_key"
    JSON_PATH = "json_path"
    JSON_FORMULA = "json_formula"


# All four must be present for a mapping to use the signed layout.
SIGNED_KEYS: tuple[str, ...] = (
    "measurement_positive",
    "field_positive",
    "measurement_negative",
    "field_negative",
)

DEFAULT_KEYS: tuple[str, ...] = ("measurement", "field")

# Precedence when a definition carries more than one source key.
SOURCE_KEYS: tuple[str, ...] = ("json_path", "json_key", "json_formula")


# ---------------------------------------------------------------------------
# Definitions and records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MappingDefinition:
    """One configured rule binding a topic to one or two output fields."""

    topic: str
    type_name: str
    declared_type: Optional[DeclaredType]
    source: ValueSource
    kind: MappingKind

    measurement: Optional[str] = None
    field: Optional[str] = None
    measurement_positive: Optional[str] = None
    field_positive: Optional[str] = None
    measurement_negative: Optional[str] = None
    field_negative: Optional[str] = None

    json_key: Optional[str] = None
    json_path: Optional[str] = None
    json_formula: Optional[str] = None

    # Compiled once by the schema builder
    path_query: Any = dataclasses.field(
        default=None, compare=False, repr=False
    )
    formula: Optional[Formula] = dataclasses.field(
        default=None, compare=False, repr=False
    )

    @property
    def is_signed(self) -> bool:
        return self.kind is MappingKind.SIGNED

    def describe(self) -> str:
        """Human-readable summary, e.g. ``"power:value (float)"``."""
        if self.is_signed:
            target = (
                f"{self.measurement_positive}:{self.field_positive} (+) "
                f"{self.measurement_negative}:{self.field_negative} (-)"
            )
        else:
            target = f"{self.measurement}:{self.field}"
        return f"{target} ({self.type_name})"


@dataclass(frozen=True)
class OutputRecord:
    """A single measurement/field/value triple ready for a time-series sink."""

    measurement: str
    field: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "measurement": self.measurement,
            "field": self.field,
            "value": self.value,
        }
