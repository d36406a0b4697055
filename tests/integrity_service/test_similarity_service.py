from app.application.fingerprint import FingerprintBuilder, SimHash64
from app.application.similarity_service import (
    ContentItem,
    FingerprintCache,
    SimilarityCluster,
    SimilarityResult,
    SimilarityService,
    bookmark_item,
    bookmark_text,
    note_item,
    note_text,
)

NOTE_BODY = (
    "Kubernetes operators reconcile desired cluster state by watching custom "
    "resources, diffing live objects and issuing idempotent updates whenever "
    "deployments, services, secrets or persistent volumes drift from their manifests."
)
OTHER_BODY = (
    "Sourdough starters need regular feeding with rye flour and lukewarm water; "
    "a lively culture doubles within hours, smells pleasantly sour and leavens "
    "crusty loaves baked inside preheated cast iron dutch ovens."
)


def test_bookmark_and_note_text_layout() -> None:
    bookmark = bookmark_item("https://example.com", "Example", "A site", item_id="b1")
    assert bookmark.text == "Example A site https://example.com"
    assert bookmark.item_id == "b1"

    assert bookmark_item("https://example.com").text == "  https://example.com"
    assert note_item("Title", "Body").text == "Title Body"
    assert note_item(None, "Body").text == " Body"


def test_compare_texts_identical_is_100() -> None:
    service = SimilarityService()
    assert service.compare_texts(NOTE_BODY, NOTE_BODY) == 100


def test_find_similar_items_reports_duplicates() -> None:
    service = SimilarityService()
    items = [
        note_item("Operators", NOTE_BODY),
        note_item("Baking", OTHER_BODY),
        note_item("Operators", NOTE_BODY),
    ]

    results = service.find_similar_items(items)

    assert results == [SimilarityResult(0, 2, 100)]


def test_cluster_items_groups_duplicates() -> None:
    service = SimilarityService()
    items = [
        note_item("Operators", NOTE_BODY),
        note_item("Baking", OTHER_BODY),
        note_item("Operators", NOTE_BODY),
    ]

    clusters = service.cluster_items(items)

    assert clusters == [SimilarityCluster([0, 2]), SimilarityCluster([1])]
    assert clusters[0].representative == 0


def test_duplicate_suggestions_use_strict_threshold() -> None:
    service = SimilarityService(duplicate_threshold=3, duplicate_min_similarity=90)
    items = [
        bookmark_item("https://k8s.example/ops", "Operators", NOTE_BODY),
        bookmark_item("https://bread.example", "Baking", OTHER_BODY),
        bookmark_item("https://k8s.example/ops", "Operators", NOTE_BODY),
    ]

    assert service.duplicate_suggestions(items) == [SimilarityResult(0, 2, 100)]


def test_cache_reuses_fingerprints_until_invalidated() -> None:
    service = SimilarityService()
    cache = FingerprintCache()

    first = service.fingerprint(ContentItem(NOTE_BODY, item_id="n1"), cache)
    assert "n1" in cache
    assert len(cache) == 1

    # Edited content under the same id keeps the stale entry until invalidated.
    edited = ContentItem(OTHER_BODY, item_id="n1")
    assert service.fingerprint(edited, cache) == first

    cache.invalidate("n1")
    assert service.fingerprint(edited, cache) == FingerprintBuilder().generate(OTHER_BODY)

    cache.clear()
    assert len(cache) == 0


def test_items_without_usable_id_are_not_cached() -> None:
    service = SimilarityService()
    cache = FingerprintCache()

    service.fingerprints(
        [ContentItem(NOTE_BODY), ContentItem(OTHER_BODY), ContentItem(NOTE_BODY, item_id="")],
        cache,
    )

    assert len(cache) == 0


def test_cached_fingerprint_can_be_seeded_by_caller() -> None:
    service = SimilarityService()
    cache = FingerprintCache()
    cache.put("pinned", SimHash64(0))

    assert service.fingerprint(ContentItem(NOTE_BODY, item_id="pinned"), cache) == SimHash64(0)
    assert cache.get("missing") is None


def test_empty_and_single_item_inputs() -> None:
    service = SimilarityService()
    assert service.find_similar_items([]) == []
    assert service.cluster_items([]) == []
    assert service.cluster_items([note_item("Only", "one")]) == [SimilarityCluster([0])]


def test_text_builders_match_item_helpers() -> None:
    assert bookmark_text("Example", "A site", "https://example.com") == (
        "Example A site https://example.com"
    )
    assert bookmark_text(None, None, "https://example.com") == "  https://example.com"
    assert note_text("Title", None) == "Title "
    assert note_item("Title", "Body").text == note_text("Title", "Body")


def test_get_or_compute_memoizes_by_id() -> None:
    builder = FingerprintBuilder()
    cache = FingerprintCache(builder)

    first = cache.get_or_compute("n1", NOTE_BODY)
    assert first == builder.generate(NOTE_BODY)
    assert cache.get("n1") == first
    assert cache.get_or_compute("n1", OTHER_BODY) == first

    cache.invalidate("n1")
    assert cache.get_or_compute("n1", OTHER_BODY) == builder.generate(OTHER_BODY)


def test_get_or_compute_skips_empty_ids() -> None:
    cache = FingerprintCache()

    assert cache.get_or_compute("", NOTE_BODY) == FingerprintBuilder().generate(NOTE_BODY)
    assert cache.get_or_compute(None, NOTE_BODY) == FingerprintBuilder().generate(NOTE_BODY)
    assert len(cache) == 0
    assert "" not in cache


def test_get_or_compute_uses_supplied_generator() -> None:
    cache = FingerprintCache()
    legacy = FingerprintBuilder("legacy")

    assert cache.get_or_compute("b1", "foobar", legacy.generate) == legacy.generate("foobar")
