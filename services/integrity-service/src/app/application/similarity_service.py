from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Sequence

from app.application.fingerprint import FingerprintBuilder, SimHash64
from app.application.similarity import (
    DEFAULT_THRESHOLD,
    cluster_by_similarity,
    distance_to_similarity,
    find_similar_pairs,
    hamming_distance,
)
from integrity_shared.utils.logger import get_logger
from integrity_shared.utils.logging_config import log_performance

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContentItem:
    text: str
    item_id: str | None = None


def bookmark_text(
    title: str | None, description: str | None, url: str
) -> str:
    return f"{title or ''} {description or ''} {url}"


def note_text(title: str | None, content: str | None) -> str:
    return f"{title or ''} {content or ''}"


def bookmark_item(
    url: str,
    title: str | None = None,
    description: str | None = None,
    item_id: str | None = None,
) -> ContentItem:
    return ContentItem(text=bookmark_text(title, description, url), item_id=item_id)


def note_item(
    title: str | None = None,
    content: str | None = None,
    item_id: str | None = None,
) -> ContentItem:
    return ContentItem(text=note_text(title, content), item_id=item_id)


class FingerprintCache:
    """
    Fingerprints memoized by a stable item id.

    Owned by the caller; nothing here notices content edits, so callers must
    invalidate an id whenever its content changes. Empty ids are never cached.
    """

    def __init__(self, builder: FingerprintBuilder | None = None) -> None:
        self._builder = builder or FingerprintBuilder()
        self._entries: dict[str, SimHash64] = {}

    def get(self, item_id: str) -> SimHash64 | None:
        return self._entries.get(item_id)

    def put(self, item_id: str, fingerprint: SimHash64) -> None:
        self._entries[item_id] = fingerprint

    def get_or_compute(
        self,
        item_id: str | None,
        text: str,
        generate: Callable[[str], SimHash64] | None = None,
    ) -> SimHash64:
        if item_id:
            cached = self._entries.get(item_id)
            if cached is not None:
                return cached

        fingerprint = (generate or self._builder.generate)(text)
        if item_id:
            self._entries[item_id] = fingerprint
        return fingerprint

    def invalidate(self, item_id: str) -> None:
        self._entries.pop(item_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class SimilarityResult:
    item1_index: int
    item2_index: int
    similarity: int


@dataclass(frozen=True)
class SimilarityCluster:
    indices: list[int]

    @property
    def representative(self) -> int:
        return self.indices[0]


class SimilarityService:
    def __init__(
        self,
        builder: FingerprintBuilder | None = None,
        *,
        similarity_threshold: int = DEFAULT_THRESHOLD,
        duplicate_threshold: int = 3,
        duplicate_min_similarity: int = 90,
    ):
        self._builder = builder or FingerprintBuilder()
        self.similarity_threshold = similarity_threshold
        self.duplicate_threshold = duplicate_threshold
        self.duplicate_min_similarity = duplicate_min_similarity

    def fingerprint(
        self, item: ContentItem, cache: FingerprintCache | None = None
    ) -> SimHash64:
        if cache is None:
            return self._builder.generate(item.text)
        return cache.get_or_compute(item.item_id, item.text, self._builder.generate)

    def fingerprints(
        self, items: Sequence[ContentItem], cache: FingerprintCache | None = None
    ) -> list[SimHash64]:
        return [self.fingerprint(item, cache) for item in items]

    def compare_texts(self, first: str, second: str) -> int:
        distance = hamming_distance(
            self._builder.generate(first), self._builder.generate(second)
        )
        return distance_to_similarity(distance)

    def find_similar_items(
        self,
        items: Sequence[ContentItem],
        threshold: int | None = None,
        cache: FingerprintCache | None = None,
    ) -> list[SimilarityResult]:
        start = time.perf_counter()
        pairs = find_similar_pairs(
            self.fingerprints(items, cache),
            self.similarity_threshold if threshold is None else threshold,
        )
        log_performance(
            logger,
            "find_similar_items",
            (time.perf_counter() - start) * 1000,
            {"item_count": len(items), "pair_count": len(pairs)},
        )
        return [SimilarityResult(pair.i, pair.j, pair.similarity) for pair in pairs]

    def cluster_items(
        self,
        items: Sequence[ContentItem],
        threshold: int | None = None,
        cache: FingerprintCache | None = None,
    ) -> list[SimilarityCluster]:
        clusters = cluster_by_similarity(
            self.fingerprints(items, cache),
            self.similarity_threshold if threshold is None else threshold,
        )
        return [SimilarityCluster(indices) for indices in clusters]

    def duplicate_suggestions(
        self, items: Sequence[ContentItem], cache: FingerprintCache | None = None
    ) -> list[SimilarityResult]:
        return [
            result
            for result in self.find_similar_items(items, self.duplicate_threshold, cache)
            if result.similarity >= self.duplicate_min_similarity
        ]
