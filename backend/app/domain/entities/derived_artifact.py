"""Domain entities for the derived-artifact cache.

A derived artifact is an expensive AI-computed result (a passage rendering,
a syntax analysis, a quiz set) stored under a canonical reference key so
later requests for the same passage and language can reuse it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ArtifactKind(str, Enum):
    """Cache namespaces — one per kind of derived artifact."""

    PASSAGE_TEXT = "passage_text"
    SYNTAX_ANALYSIS = "syntax_analysis"
    QUIZ = "quiz"


@dataclass
class CachedArtifact:
    """A stored artifact plus its usage statistics.

    ``payload`` is opaque to the cache.
    """

    key: str
    payload: dict[str, Any]
    usage_count: int = 1
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_used_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CacheSource(str, Enum):
    PRIMARY = "primary"
    LEGACY = "legacy"


@dataclass
class CacheOutcome:
    """Result of a cache operation.

    Cache failures never raise; they surface here as ``error`` so callers can
    see that the cache was bypassed without having to catch anything.
    """

    key: str
    artifact: CachedArtifact | None = None
    source: CacheSource | None = None
    error: Exception | None = None

    @property
    def hit(self) -> bool:
        return self.artifact is not None

    @property
    def ok(self) -> bool:
        return self.error is None
