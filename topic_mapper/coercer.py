"""
Type Coercion Layer.

Converts a raw scalar (the whole message, or a value pulled out of a JSON
document) into the type a mapping declares.

Rules
-----
* ``float``   – ``float(raw)``; failures and non-finite results (``inf``,
  ``nan``) are logged and yield ``None``.
* ``integer`` – ``float(raw)`` rounded with Python's ``round`` (half to
  even: ``2.5 → 2``, ``3.5 → 4``); failures yield ``None``.
* ``boolean`` – ``True`` iff the lower-cased text is a truthy token,
  otherwise ``False``.  Never ``None``.
* ``string``  – always succeeds.

Unsupported declared types yield ``None`` so no record is produced.
"""

from __future__ import annotations

import json
import math
from typing import Any, Optional, Union

from topic_mapper.logging_setup import get_logger
from topic_mapper.schema import DeclaredType, declared_type_lookup

logger = get_logger("coercer")


TRUTHY_TOKENS: frozenset[str] = frozenset({"true", "ok", "yes", "on", "1"})


class TypeCoercer:
    """Stateless type coercer.  All methods are pure apart from logging."""

    def coerce(
        self,
        raw: Any,
        declared_type: Union[DeclaredType, str, None],
    ) -> Any:
        """Return *raw* converted to *declared_type*, or ``None``.

        Parameters
        ----------
        raw:
            The unconverted value.  ``None`` is passed straight through.
        declared_type:
            A ``DeclaredType`` or its configured name.
        """
        if raw is None:
            return None

        kind = declared_type_lookup(declared_type)
        if kind is None:
            logger.debug("No coercion for unsupported type %r", declared_type)
            return None

        if kind is DeclaredType.FLOAT:
            return self.to_float(raw)
        if kind is DeclaredType.INTEGER:
            return self.to_integer(raw)
        if kind is DeclaredType.BOOLEAN:
            return self.to_boolean(raw)
        return self.to_string(raw)

    # ------------------------------------------------------------------ #
    # Individual conversions
    # ------------------------------------------------------------------ #

    @staticmethod
    def to_float(raw: Any) -> Optional[float]:
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning("Failed to convert %r to float", raw)
            return None
        if not math.isfinite(value):
            logger.warning("Failed to convert %r to float (not finite)", raw)
            return None
        return value

    @staticmethod
    def to_integer(raw: Any) -> Optional[int]:
        try:
            return round(float(raw))
        except (TypeError, ValueError, OverflowError):
            logger.warning("Failed to convert %r to integer", raw)
            return None

    @staticmethod
    def to_boolean(raw: Any) -> bool:
        return str(raw).lower() in TRUTHY_TOKENS

    @staticmethod
    def to_string(raw: Any) -> str:
        if isinstance(raw, str):
            return raw
        # JSON spelling for true/false and nested structures
        if isinstance(raw, (bool, dict, list)):
            return json.dumps(raw)
        return str(raw)
