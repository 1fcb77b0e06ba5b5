"""Typed exceptions raised by Topic Mapper.

Recoverable problems (bad JSON, failed coercion, failed formula) are logged
and absorbed; everything here signals a caller or configuration contract
violation and is meant to propagate.
"""

from __future__ import annotations

from typing import Sequence


class MapperError(Exception):
    """Base exception for all Topic Mapper failures."""


class UnknownTopicError(MapperError, LookupError):
    """A message arrived for a topic with no mapping definitions.

    Attributes:
        topic: The topic that could not be resolved.
        suggestions: Registered topics that look similar, best first.
    """

    def __init__(self, topic: str, suggestions: Sequence[str] = ()):
        message = f"Unknown mapping for topic: {topic}"
        if suggestions:
            message += f" (did you mean: {', '.join(suggestions)}?)"
        super().__init__(message)
        self.topic = topic
        self.suggestions = list(suggestions)


class InvalidMessageTypeError(MapperError, TypeError):
    """A non-text message was handed to a JSON-based mapping."""

    def __init__(self, message: object):
        super().__init__(
            f"Message is not a string: {message!r} "
            f"({type(message).__name__})"
        )
        self.message_type = type(message)


class MappingConfigError(MapperError, ValueError):
    """Mapping definitions failed load-time validation.

    Attributes:
        errors: One human-readable entry per problem found.
    """

    def __init__(self, errors: Sequence[str]):
        super().__init__(
            f"Invalid mapping configuration ({len(errors)} error(s)):\n"
            + "\n".join(errors)
        )
        self.errors = list(errors)
