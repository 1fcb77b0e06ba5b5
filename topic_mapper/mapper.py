"""
Mapper Orchestrator.

The central entry point that wires together every layer:

    (topic, message)  →  definitions for topic
                      →  JSON Extractor | Formula Evaluator | pass-through
                      →  Type Coercer  →  Record Shaper  →  records

Usage
-----
>>> from topic_mapper.mapper import Mapper
>>>
>>> mapper = Mapper.from_dicts([
...     {"topic": "meter/power", "type": "float",
...      "json_key": "power", "measurement": "meter", "field": "power"},
... ])
>>> mapper.resolve("meter/power", '{"power": "3.5"}')
[OutputRecord(measurement='meter', field='power', value=3.5)]
"""

from __future__ import annotations

from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from topic_mapper.coercer import TypeCoercer
from topic_mapper.config import MapperConfig
from topic_mapper.exceptions import MappingConfigError, UnknownTopicError
from topic_mapper.formula import FormulaEvaluator
from topic_mapper.json_extractor import JsonExtractor
from topic_mapper.logging_setup import configure_logging, get_logger
from topic_mapper.schema import MappingDefinition, OutputRecord, ValueSource
from topic_mapper.schema_builder import SchemaBuilder
from topic_mapper.shaper import RecordShaper
from topic_mapper.topic_matcher import TopicMatcher

logger = get_logger("mapper")


class Mapper:
    """Resolves topic-addressed messages into time-series records.

    All lookup structures are built in the constructor and never mutated
    afterwards, so one instance can serve many threads.

    Parameters
    ----------
    definitions:
        Compiled mapping definitions, in configuration order.  When omitted
        they are loaded from ``config.mapping_path``.
    config:
        All tuneable knobs.
    """

    def __init__(
        self,
        definitions: Optional[Iterable[MappingDefinition]] = None,
        config: Optional[MapperConfig] = None,
    ) -> None:
        self._config = config or MapperConfig()

        # Bootstrap logging before anything else
        if self._config.configure_logging:
            configure_logging(level=self._config.log_level)

        if definitions is None:
            if self._config.mapping_path is None:
                raise MappingConfigError(
                    ["No mapping definitions given and no mapping_path configured"]
                )
            definitions = SchemaBuilder.read_json(Path(self._config.mapping_path))

        self._definitions: Tuple[MappingDefinition, ...] = tuple(definitions)

        by_topic: Dict[str, List[MappingDefinition]] = {}
        for definition in self._definitions:
            by_topic.setdefault(definition.topic, []).append(definition)
        self._by_topic: Dict[str, Tuple[MappingDefinition, ...]] = {
            topic: tuple(items) for topic, items in by_topic.items()
        }
        self._topics: Tuple[str, ...] = tuple(sorted(self._by_topic))

        # Construct layers
        self._coercer = TypeCoercer()
        self._extractor = JsonExtractor()
        self._formula = FormulaEvaluator()
        self._shaper = RecordShaper()
        self._matcher = TopicMatcher(self._config.suggestions, self._topics)

        logger.info(
            "Mapper initialised: definitions=%d, topics=%d",
            len(self._definitions),
            len(self._topics),
        )

    # ------------------------------------------------------------------ #
    # Alternative constructors (one per configuration format)
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dicts(
        cls,
        items: Sequence[Mapping[str, Any]],
        config: Optional[MapperConfig] = None,
    ) -> "Mapper":
        """Build a mapper from raw definition dicts."""
        return cls(SchemaBuilder.read_dicts(items), config=config)

    @classmethod
    def from_json(
        cls,
        source: Union[str, Path],
        config: Optional[MapperConfig] = None,
    ) -> "Mapper":
        """Build a mapper from a JSON file path or JSON string."""
        return cls(SchemaBuilder.read_json(source), config=config)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def topics(self) -> Tuple[str, ...]:
        """Sorted, distinct topics across all definitions."""
        return self._topics

    def definitions_for(self, topic: str) -> Tuple[MappingDefinition, ...]:
        return self._by_topic.get(topic, ())

    def describe(self, topic: str) -> str:
        """Summary of every definition for *topic*; ``""`` if there are none."""
        return ", ".join(d.describe() for d in self.definitions_for(topic))

    # ------------------------------------------------------------------ #
    # Core resolution logic
    # ------------------------------------------------------------------ #

    def resolve(self, topic: str, message: Any) -> List[OutputRecord]:
        """Resolve one message into records.

        Raises
        ------
        UnknownTopicError
            If no definitions exist for *topic*.
        InvalidMessageTypeError
            If a JSON-based definition receives a non-text message.
        """
        if message == "":
            return []

        definitions = self.definitions_for(topic)
        if not definitions:
            raise UnknownTopicError(topic, self._matcher.suggest(topic))

        records: list[OutputRecord] = []
        for definition in definitions:
            value = self._value_from(message, definition)
            for record in self._shaper.shape(definition, value):
                if record.value is None:
                    logger.debug(
                        "DROPPED: %s %s:%s has no value",
                        topic,
                        record.measurement,
                        record.field,
                    )
                    continue
                records.append(record)

        logger.debug("RESOLVED: %s → %d record(s)", topic, len(records))
        return records

    def resolve_many(
        self, topic: str, messages: Iterable[Any]
    ) -> List[OutputRecord]:
        """Resolve several messages for one topic, concatenating the records."""
        records: list[OutputRecord] = []
        for message in messages:
            records.extend(self.resolve(topic, message))
        return records

    def _value_from(self, message: Any, definition: MappingDefinition) -> Any:
        """Resolve the raw value of *definition* and coerce it."""
        if definition.source in (ValueSource.JSON_KEY, ValueSource.JSON_PATH):
            raw = self._extractor.extract(message, definition)
        elif definition.source is ValueSource.JSON_FORMULA:
            raw = self._formula.evaluate(message, definition)
        else:
            raw = message

        return self._coercer.coerce(raw, definition.declared_type)

    @property
    def definition_count(self) -> int:
        return len(self._definitions)
