"""
Topic Mapper: declarative message-to-record mapping for time-series stores.

Converts topic-addressed messages (plain text or JSON payloads) into typed
measurement/field/value records, driven entirely by a list of mapping
definitions.  Values can be taken from the whole message, a JSON key, a
JSONPath query or an arithmetic formula over JSON values.

Malformed payloads never abort a batch: they are logged and produce no
record.  Contract violations (unknown topic, non-text payload for a JSON
mapping, invalid configuration) raise typed exceptions.
"""

__version__ = "1.0.0"

from topic_mapper.exceptions import (  # noqa: F401
    InvalidMessageTypeError,
    MapperError,
    MappingConfigError,
    UnknownTopicError,
)
from topic_mapper.mapper import Mapper  # noqa: F401
from topic_mapper.schema import OutputRecord  # noqa: F401
