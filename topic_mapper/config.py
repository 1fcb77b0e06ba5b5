"""
Configuration module for Topic Mapper.

All tuneable parameters (thresholds, paths, feature flags) live here.
Mapping definitions themselves are data and are loaded by
``topic_mapper.schema_builder``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SuggestionConfig:
    """Controls the "did you mean" hints attached to unknown-topic errors."""

    # Minimum similarity score (0–100) for a registered topic to be suggested
    fuzzy_threshold: float = 80.0

    # Maximum number of suggestions carried by a single error
    limit: int = 3


@dataclass(frozen=True)
class MapperConfig:
    """Top-level configuration aggregating all sub-configs."""

    suggestions: SuggestionConfig = field(default_factory=SuggestionConfig)

    # Logging level for the resolution audit trail
    log_level: int = logging.INFO

    # Optional JSON file with the mapping definitions.  Used when the mapper
    # is constructed without explicit definitions.
    mapping_path: Optional[Path] = None

    # When False the mapper leaves logging setup to the embedding process.
    configure_logging: bool = True
