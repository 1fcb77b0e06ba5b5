"""
Validation Layer.

Load-time checks on raw mapping definitions, run *before* they are compiled
into ``MappingDefinition`` objects.  Only what resolution depends on is
checked; anything else in a definition is ignored.

Errors
------
1. Definition is not an object, or has no topic.
2. Output layout incomplete (neither all four signed keys nor
   ``measurement`` + ``field``).
3. Signed layout combined with a non-numeric declared type.
4. ``json_path`` or formula placeholders that cannot be compiled, including
   placeholders that collide after normalisation.

Warnings
--------
* Declared type outside ``float | integer | boolean | string`` (the mapping
  will never yield records).
* Some but not all signed keys present (treated as the default layout).
* More than one value source key.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from topic_mapper.formula import template_problems
from topic_mapper.json_extractor import path_problem
from topic_mapper.logging_setup import get_logger
from topic_mapper.schema import (
    DEFAULT_KEYS,
    SIGNED_KEYS,
    SOURCE_KEYS,
    declared_type_lookup,
)

logger = get_logger("validator")


class ValidationReport:
    """Accumulates errors and warnings during a validation pass."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)
        logger.error("Validation ERROR: %s", msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)
        logger.warning("Validation WARNING: %s", msg)


def _present(item: Mapping[str, Any], key: str) -> bool:
    return item.get(key) not in (None, "")


class DefinitionValidator:
    """Validates a sequence of raw mapping definitions."""

    def validate(self, items: Sequence[Any]) -> ValidationReport:
        """Run all checks and return a ``ValidationReport``."""
        report = ValidationReport()
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                report.add_error(
                    f"Mapping #{index} is not an object: {item!r}"
                )
                continue
            label = f"Mapping #{index} ({item.get('topic')!r})"
            if not self._check_topic(item, label, report):
                continue
            self._check_type(item, label, report)
            self._check_layout(item, label, report)
            self._check_sources(item, label, report)
        return report

    # ------------------------------------------------------------------ #
    # Individual checks
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_topic(
        item: Mapping[str, Any], label: str, report: ValidationReport
    ) -> bool:
        topic = item.get("topic")
        if not isinstance(topic, str) or not topic:
            report.add_error(f"{label}: 'topic' must be a non-empty string")
            return False
        return True

    @staticmethod
    def _check_type(
        item: Mapping[str, Any], label: str, report: ValidationReport
    ) -> None:
        if declared_type_lookup(item.get("type")) is None:
            report.add_warning(
                f"{label}: unsupported type {item.get('type')!r}; "
                f"no records will be produced"
            )

    @staticmethod
    def _check_layout(
        item: Mapping[str, Any], label: str, report: ValidationReport
    ) -> None:
        signed = [key for key in SIGNED_KEYS if _present(item, key)]

        if len(signed) == len(SIGNED_KEYS):
            declared = declared_type_lookup(item.get("type"))
            if declared is not None and not declared.is_numeric:
                report.add_error(
                    f"{label}: signed layout requires a numeric type, "
                    f"got {declared.value!r}"
                )
            return

        if signed:
            report.add_warning(
                f"{label}: only {', '.join(signed)} of the signed layout "
                f"given; using measurement/field"
            )

        missing = [key for key in DEFAULT_KEYS if not _present(item, key)]
        if missing:
            report.add_error(f"{label}: missing {', '.join(missing)}")

    @staticmethod
    def _check_sources(
        item: Mapping[str, Any], label: str, report: ValidationReport
    ) -> None:
        sources: List[str] = [key for key in SOURCE_KEYS if _present(item, key)]
        if len(sources) > 1:
            report.add_warning(
                f"{label}: several value sources ({', '.join(sources)}); "
                f"using {sources[0]}"
            )
        if not sources:
            return

        chosen = sources[0]
        value = item[chosen]
        if not isinstance(value, str):
            report.add_error(f"{label}: {chosen} must be a string")
            return

        if chosen == "json_path":
            problem = path_problem(value)
            if problem:
                report.add_error(f"{label}: {problem}")
        elif chosen == "json_formula":
            for problem in template_problems(value):
                report.add_error(f"{label}: {problem}")
