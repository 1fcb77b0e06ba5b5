"""
Schema Builder.

Responsible for turning raw mapping configuration into validated, compiled
``MappingDefinition`` objects.  Supports plain Python dicts, a JSON string
and a JSON file.  Two JSON shapes are accepted:

* Object ``{"mappings": [{...}, ...]}``
* Array ``[{...}, ...]``

Each entry uses the configuration keys ``topic``, ``type``, one of
``json_key`` / ``json_path`` / ``json_formula`` (or none, meaning the whole
message is the value), and either ``measurement`` + ``field`` or all four of
``measurement_positive``, ``field_positive``, ``measurement_negative``,
``field_negative``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from topic_mapper.exceptions import MappingConfigError
from topic_mapper.formula import compile_formula
from topic_mapper.json_extractor import compile_path
from topic_mapper.logging_setup import get_logger
from topic_mapper.schema import (
    SIGNED_KEYS,
    SOURCE_KEYS,
    MappingDefinition,
    MappingKind,
    ValueSource,
    declared_type_lookup,
)
from topic_mapper.validator import DefinitionValidator

logger = get_logger("schema_builder")


def _text(item: Mapping[str, Any], key: str) -> Optional[str]:
    value = item.get(key)
    if value in (None, ""):
        return None
    return str(value)


class SchemaBuilder:
    """Builds ``MappingDefinition`` objects from raw configuration."""

    # ------------------------------------------------------------------ #
    # Input readers: produce [MappingDefinition, ...]
    # ------------------------------------------------------------------ #

    @staticmethod
    def read_dicts(items: Sequence[Mapping[str, Any]]) -> List[MappingDefinition]:
        """Validate and compile raw definitions.

        Raises
        ------
        MappingConfigError
            If any definition fails validation.
        """
        report = DefinitionValidator().validate(items)
        if not report.is_valid:
            raise MappingConfigError(report.errors)

        definitions = [SchemaBuilder.build_definition(item) for item in items]
        logger.info("Loaded %d mapping definition(s)", len(definitions))
        return definitions

    @staticmethod
    def read_json(source: Union[str, Path]) -> List[MappingDefinition]:
        """Read definitions from a JSON file or JSON string."""
        if isinstance(source, Path) or (
            isinstance(source, str) and not source.lstrip().startswith(("{", "["))
        ):
            path = Path(source)
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
            logger.info("Reading mapping definitions from %s", path)
        else:
            data = json.loads(source)

        if isinstance(data, dict):
            if "mappings" not in data:
                raise MappingConfigError(["JSON object has no 'mappings' key"])
            data = data["mappings"]

        if not isinstance(data, list):
            raise MappingConfigError(
                [f"Unsupported mappings type: {type(data).__name__}"]
            )

        return SchemaBuilder.read_dicts(data)

    # ------------------------------------------------------------------ #
    # Compilation
    # ------------------------------------------------------------------ #

    @staticmethod
    def build_definition(item: Mapping[str, Any]) -> MappingDefinition:
        """Compile one raw definition.  Assumes it has passed validation."""
        type_name = item.get("type")
        kind = (
            MappingKind.SIGNED
            if all(_text(item, key) for key in SIGNED_KEYS)
            else MappingKind.DEFAULT
        )

        source = ValueSource.IMPLICIT
        for key in SOURCE_KEYS:
            if _text(item, key):
                source = ValueSource(key)
                break

        path_query = None
        formula = None
        if source is ValueSource.JSON_PATH:
            path_query = compile_path(item["json_path"])
        elif source is ValueSource.JSON_FORMULA:
            formula = compile_formula(item["json_formula"])

        definition = MappingDefinition(
            topic=item["topic"],
            type_name="" if type_name is None else str(type_name),
            declared_type=declared_type_lookup(type_name),
            source=source,
            kind=kind,
            measurement=_text(item, "measurement"),
            field=_text(item, "field"),
            measurement_positive=_text(item, "measurement_positive"),
            field_positive=_text(item, "field_positive"),
            measurement_negative=_text(item, "measurement_negative"),
            field_negative=_text(item, "field_negative"),
            json_key=_text(item, "json_key"),
            json_path=_text(item, "json_path"),
            json_formula=_text(item, "json_formula"),
            path_query=path_query,
            formula=formula,
        )
        logger.debug(
            "Compiled mapping: %s → %s", definition.topic, definition.describe()
        )
        return definition
