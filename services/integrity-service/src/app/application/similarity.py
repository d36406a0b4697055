from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from app.application.fingerprint import FINGERPRINT_BITS, SimHash64
from integrity_shared.utils.errors import InvalidInputError

DEFAULT_THRESHOLD = 6


@dataclass(frozen=True)
class SimilarPair:
    i: int
    j: int
    similarity: int


def hamming_distance(left: SimHash64, right: SimHash64) -> int:
    return (left.value ^ right.value).bit_count()


def distance_to_similarity(distance: int) -> int:
    if not 0 <= distance <= FINGERPRINT_BITS:
        raise InvalidInputError(
            "Hamming distance must be between 0 and 64",
            details={"distance": distance},
        )
    # Half-up rounding: distance 24 maps to 63, not 62.
    return math.floor((1 - distance / FINGERPRINT_BITS) * 100 + 0.5)


def is_similar(left: SimHash64, right: SimHash64, threshold: int = DEFAULT_THRESHOLD) -> bool:
    return hamming_distance(left, right) <= threshold


def find_similar_pairs(
    fingerprints: Sequence[SimHash64], threshold: int = DEFAULT_THRESHOLD
) -> list[SimilarPair]:
    """All index pairs i < j within threshold, most similar first (stable on ties)."""
    pairs: list[SimilarPair] = []
    for i in range(len(fingerprints)):
        for j in range(i + 1, len(fingerprints)):
            distance = hamming_distance(fingerprints[i], fingerprints[j])
            if distance <= threshold:
                pairs.append(SimilarPair(i, j, distance_to_similarity(distance)))
    return sorted(pairs, key=lambda pair: pair.similarity, reverse=True)


def cluster_by_similarity(
    fingerprints: Sequence[SimHash64], threshold: int = DEFAULT_THRESHOLD
) -> list[list[int]]:
    """
    Single-pass greedy clustering.

    Each unvisited item seeds a cluster and claims every later unvisited item
    within threshold of the seed itself. Membership is not transitive: an
    item similar only to a non-seed member starts its own cluster.
    """
    visited: set[int] = set()
    clusters: list[list[int]] = []

    for seed in range(len(fingerprints)):
        if seed in visited:
            continue
        cluster = [seed]
        visited.add(seed)
        for candidate in range(seed + 1, len(fingerprints)):
            if candidate in visited:
                continue
            if is_similar(fingerprints[seed], fingerprints[candidate], threshold):
                cluster.append(candidate)
                visited.add(candidate)
        clusters.append(cluster)

    return clusters
