"""
JSON Extraction Layer.

Parses a JSON-encoded message and pulls a single scalar out of it, either
by top-level key or by a JSONPath query (``jsonpath-ng`` extended syntax).

* A message that is not text is a caller error and raises
  ``InvalidMessageTypeError``.
* A message that is text but not valid JSON is logged and yields ``None``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.jsonpath import JSONPath
from jsonpath_ng.ext import parse as parse_path

from topic_mapper.exceptions import InvalidMessageTypeError
from topic_mapper.logging_setup import get_logger
from topic_mapper.schema import MappingDefinition, ValueSource

logger = get_logger("json_extractor")


def compile_path(expression: str) -> JSONPath:
    """Compile a JSONPath expression.

    Raises
    ------
    JSONPathError
        If the expression cannot be parsed.
    """
    return parse_path(expression)


def path_problem(expression: str) -> Optional[str]:
    """Return a description of why *expression* does not compile, if it doesn't."""
    try:
        compile_path(expression)
    except JSONPathError as exc:
        return f"invalid JSONPath {expression!r}: {exc}"
    return None


def first_match(query: JSONPath, document: Any) -> Any:
    """Value of the first node *query* selects in *document*, or ``None``."""
    if not isinstance(document, (dict, list)):
        return None
    matches = query.find(document)
    if not matches:
        return None
    return matches[0].value


def parse_document(message: Any) -> Any:
    """Decode *message* as JSON.

    Returns ``None`` (after logging a warning) when the text is not JSON.
    """
    if not isinstance(message, str):
        raise InvalidMessageTypeError(message)

    try:
        return json.loads(message)
    except json.JSONDecodeError:
        logger.warning("Failed to parse JSON: %r", message)
        return None


class JsonExtractor:
    """Resolves ``json_key`` and ``json_path`` mappings against a message."""

    def extract(self, message: Any, definition: MappingDefinition) -> Any:
        """Return the scalar *definition* selects from *message*, or ``None``."""
        document = parse_document(message)
        if document is None:
            return None

        if definition.source is ValueSource.JSON_PATH:
            query = definition.path_query or compile_path(definition.json_path)
            value = first_match(query, document)
            logger.debug(
                "json_path %r on %r → %r", definition.json_path, message, value
            )
            return value

        if definition.source is ValueSource.JSON_KEY:
            if not isinstance(document, dict):
                return None
            return document.get(definition.json_key)

        raise ValueError(
            f"Mapping for topic {definition.topic!r} has no json_key/json_path"
        )
