"""Derived-artifact cache — reuse of expensive AI results by canonical passage reference.

The cache is a pure performance optimization: every store failure is logged
and reported through :class:`CacheOutcome`, never raised, so a cache problem
cannot fail the computation it sits in front of.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from app.application.interfaces.artifact_store import ArtifactStore
from app.domain.entities.derived_artifact import (
    ArtifactKind,
    CacheOutcome,
    CacheSource,
)
from app.domain.reference_normalizer import language_code, legacy_key, normalize_reference

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "Spanish"


class DerivedArtifactCache:
    """Cache for one kind of artifact (passage text, syntax analysis, quiz).

    Keys are ``normalize_reference(reference, language)``. Entries written
    before keys carried a language suffix are still read for the default
    language, but new writes always use the scoped key.
    """

    def __init__(
        self,
        store: ArtifactStore,
        kind: ArtifactKind,
        *,
        default_language: str = DEFAULT_LANGUAGE,
    ):
        self._store = store
        self._kind = kind
        self._default_lang = language_code(default_language)

    @property
    def kind(self) -> ArtifactKind:
        return self._kind

    async def get(self, reference: str, language: str) -> CacheOutcome:
        """Look up an artifact; a hit bumps its usage statistics."""
        key = normalize_reference(reference, language, self._default_lang)
        candidates = [(key, CacheSource.PRIMARY)]
        if language_code(language, self._default_lang) == self._default_lang:
            candidates.append((legacy_key(reference), CacheSource.LEGACY))

        for candidate_key, source in candidates:
            try:
                artifact = await self._store.get(self._kind, candidate_key)
            except Exception as exc:
                logger.warning("[%s] Cache lookup failed for %s: %s", self._kind.value, candidate_key, exc)
                return CacheOutcome(key=key, error=exc)

            if artifact is None:
                continue

            logger.info("[%s] Cache HIT: %s (%s)", self._kind.value, candidate_key, source.value)
            await self._record_hit(candidate_key)
            artifact.usage_count += 1
            artifact.last_used_at = datetime.now(timezone.utc)
            return CacheOutcome(key=candidate_key, artifact=artifact, source=source)

        logger.info("[%s] Cache MISS: %s", self._kind.value, key)
        return CacheOutcome(key=key)

    async def put(self, reference: str, language: str, payload: dict[str, Any]) -> CacheOutcome:
        """Store an artifact under the language-scoped key (never the legacy one)."""
        key = normalize_reference(reference, language, self._default_lang)
        try:
            artifact = await self._store.upsert(self._kind, key, payload)
        except Exception as exc:
            logger.error("[%s] Failed to cache %s: %s", self._kind.value, key, exc)
            return CacheOutcome(key=key, error=exc)

        logger.info("[%s] Cached %s (usage=%d)", self._kind.value, key, artifact.usage_count)
        return CacheOutcome(key=key, artifact=artifact, source=CacheSource.PRIMARY)

    async def get_or_compute(
        self,
        reference: str,
        language: str,
        compute: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        """Return the cached payload, or compute, cache and return it.

        Errors raised by ``compute`` propagate; cache errors do not.
        """
        outcome = await self.get(reference, language)
        if outcome.artifact is not None:
            return outcome.artifact.payload

        payload = await compute()
        await self.put(reference, language, payload)
        return payload

    async def _record_hit(self, key: str) -> None:
        try:
            await self._store.record_hit(self._kind, key)
        except Exception as exc:
            logger.warning("[%s] Could not update usage stats for %s: %s", self._kind.value, key, exc)
