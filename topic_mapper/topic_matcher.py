"""
Topic Suggestion Layer.

When a message arrives for a topic without mapping definitions, this layer
uses ``rapidfuzz`` to find registered topics that look similar, so the
resulting error can point at a likely typo in the configuration or in the
publisher.  Suggestions below ``fuzzy_threshold`` are never offered.
"""

from __future__ import annotations

from typing import List, Sequence

from rapidfuzz import fuzz, process

from topic_mapper.config import SuggestionConfig
from topic_mapper.logging_setup import get_logger

logger = get_logger("topic_matcher")


class TopicMatcher:
    """Fuzzy-match an unknown topic against the registered topics.

    Parameters
    ----------
    config:
        Threshold and result limit.
    topics:
        Registered topics to suggest from.
    """

    def __init__(self, config: SuggestionConfig, topics: Sequence[str]) -> None:
        self._config = config
        self._topics: list[str] = list(topics)

    def suggest(self, topic: str) -> List[str]:
        """Registered topics similar to *topic*, best first."""
        if not topic or not self._topics:
            return []

        # Plain ratio: topic segments are positional, so word order matters.
        results = process.extract(
            topic,
            self._topics,
            scorer=fuzz.ratio,
            limit=self._config.limit,
            score_cutoff=self._config.fuzzy_threshold,
        )

        suggestions = [choice for choice, _score, _index in results]
        logger.debug("Suggestions for unknown topic %r: %s", topic, suggestions)
        return suggestions
