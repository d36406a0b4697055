import hashlib
import json

import pytest
from app.application.merkle import MerkleBuilder, build_merkle_root
from app.application.sealing import (
    MS_PER_DAY,
    SealManager,
    create_time_lock_seal,
    deserialize_seal,
    format_seal_timestamp,
    get_seal_age_days,
    serialize_seal,
    verify_time_lock_seal,
)

from integrity_shared.models.seal import TimeLockSeal, VerificationFailure
from integrity_shared.utils.errors import InvalidInputError, SealFormatError

FIXED_NOW = 1_700_000_000_000
FIXED_NONCE = "000102030405060708090a0b0c0d0e0f"


def _manager(now: int = FIXED_NOW) -> SealManager:
    return SealManager(clock=lambda: now, random_bytes=lambda size: bytes(range(size)))


def test_create_seal_binds_root_timestamp_and_nonce() -> None:
    content = "Sealed page body"
    seal = _manager().create_seal(content)

    root = build_merkle_root(content)
    expected = hashlib.sha256(f"{root}:{FIXED_NOW}:{FIXED_NONCE}".encode("utf-8")).hexdigest()

    assert seal.content_hash == root
    assert seal.timestamp == FIXED_NOW
    assert seal.nonce == FIXED_NONCE
    assert seal.seal_hash == expected
    assert seal.version == 1
    assert seal.seal_preimage() == f"{root}:{FIXED_NOW}:{FIXED_NONCE}"


def test_default_nonce_is_32_lowercase_hex_characters() -> None:
    first = create_time_lock_seal("same content")
    second = create_time_lock_seal("same content")

    assert len(first.nonce) == 32
    assert first.nonce == first.nonce.lower()
    int(first.nonce, 16)
    assert first.nonce != second.nonce
    assert first.content_hash == second.content_hash


def test_fresh_seal_verifies() -> None:
    content = "<html><body>Evidence</body></html>" * 500
    seal = create_time_lock_seal(content)

    result = verify_time_lock_seal(content, seal)
    assert result.valid is True
    assert result.reason is None


def test_empty_content_can_be_sealed_and_verified() -> None:
    manager = _manager()
    seal = manager.create_seal("")
    assert seal.content_hash == hashlib.sha256(b"").hexdigest()
    assert manager.verify_seal("", seal).valid is True


def test_modified_content_is_reported_first() -> None:
    manager = _manager()
    seal = manager.create_seal("original text")

    result = manager.verify_seal("original text!", seal)
    assert result.valid is False
    assert result.reason == VerificationFailure.CONTENT_MODIFIED.value

    # A rewritten content hash also breaks the seal hash, but content wins.
    forged = seal.model_copy(update={"content_hash": "0" * 64})
    assert manager.verify_seal("original text", forged).reason == "Content has been modified"


@pytest.mark.parametrize(
    "update",
    [
        {"nonce": "ff" * 16},
        {"seal_hash": "0" * 64},
        {"timestamp": FIXED_NOW - 1},
    ],
)
def test_tampered_seal_fields_are_detected(update) -> None:
    manager = _manager()
    seal = manager.create_seal("tamper target")

    result = manager.verify_seal("tamper target", seal.model_copy(update=update))
    assert result.valid is False
    assert result.reason == "Seal has been tampered with"


def test_future_timestamp_is_rejected() -> None:
    content = "time travelling content"
    future_seal = _manager(FIXED_NOW + 1_000_000).create_seal(content)

    result = _manager().verify_seal(content, future_seal)
    assert result.valid is False
    assert result.reason == "Timestamp is in the future"


def test_timestamp_equal_to_now_is_valid() -> None:
    manager = _manager()
    assert manager.verify_seal("edge", manager.create_seal("edge")).valid is True


@pytest.mark.parametrize(
    "seal",
    [
        {},
        {"contentHash": "abc"},
        {"contentHash": "a", "timestamp": "not-a-number", "nonce": "n", "sealHash": "s"},
        None,
    ],
)
def test_malformed_seal_yields_verification_error(seal) -> None:
    result = _manager().verify_seal("content", seal)
    assert result.valid is False
    assert result.reason == "Verification error"


def test_missing_content_yields_verification_error() -> None:
    manager = _manager()
    seal = manager.create_seal("content")
    assert manager.verify_seal(None, seal).reason == "Verification error"


def test_verify_accepts_camel_case_mapping() -> None:
    manager = _manager()
    seal = manager.create_seal("mapping content")
    payload = json.loads(serialize_seal(seal))

    assert manager.verify_seal("mapping content", payload).valid is True


def test_create_seal_rejects_non_string_content() -> None:
    with pytest.raises(InvalidInputError):
        _manager().create_seal(None)


def test_check_seal_reports_each_property() -> None:
    manager = _manager()
    seal = manager.create_seal("checked")
    checks = manager.check_seal("changed", seal.model_copy(update={"nonce": "00"}))

    assert checks.content_match is False
    assert checks.seal_intact is False
    assert checks.timestamp_valid is True


def test_custom_chunk_size_changes_root_for_large_content() -> None:
    content = "q" * 100
    small = SealManager(MerkleBuilder(chunk_size=16), clock=lambda: FIXED_NOW)
    seal = small.create_seal(content)

    assert small.verify_seal(content, seal).valid is True
    assert _manager().verify_seal(content, seal).reason == "Content has been modified"


def test_serialize_uses_camel_case_keys() -> None:
    seal = _manager().create_seal("serialize me")
    payload = json.loads(serialize_seal(seal))

    assert payload == {
        "contentHash": seal.content_hash,
        "timestamp": FIXED_NOW,
        "nonce": FIXED_NONCE,
        "sealHash": seal.seal_hash,
        "version": 1,
    }
    assert deserialize_seal(serialize_seal(seal)) == seal


def test_deserialize_accepts_payload_without_version() -> None:
    data = json.dumps(
        {"contentHash": "a" * 64, "timestamp": 1, "nonce": "b" * 32, "sealHash": "c" * 64}
    )
    seal = deserialize_seal(data)
    assert isinstance(seal, TimeLockSeal)
    assert seal.version == 1


@pytest.mark.parametrize(
    "data",
    [
        "not json",
        "[]",
        '{"contentHash": "a", "timestamp": 1, "nonce": "b"}',
        '{"contentHash": "a", "timestamp": "1", "nonce": "b", "sealHash": "c"}',
        '{"contentHash": "a", "timestamp": true, "nonce": "b", "sealHash": "c"}',
        '{"contentHash": 5, "timestamp": 1, "nonce": "b", "sealHash": "c"}',
    ],
)
def test_deserialize_rejects_malformed_payloads(data: str) -> None:
    assert deserialize_seal(data) is None
    with pytest.raises(SealFormatError):
        deserialize_seal(data, strict=True)


def test_format_seal_timestamp_is_iso_utc_with_milliseconds() -> None:
    seal = _manager(1_700_000_000_123).create_seal("x")
    assert format_seal_timestamp(seal) == "2023-11-14T22:13:20.123Z"
    assert format_seal_timestamp(_manager(0).create_seal("x")) == "1970-01-01T00:00:00.000Z"


def test_seal_age_is_whole_days() -> None:
    seal = _manager().create_seal("aging")

    assert get_seal_age_days(seal, now_ms=FIXED_NOW) == 0
    assert get_seal_age_days(seal, now_ms=FIXED_NOW + MS_PER_DAY - 1) == 0
    assert get_seal_age_days(seal, now_ms=FIXED_NOW + 3 * MS_PER_DAY + 5) == 3
    assert get_seal_age_days(seal) >= 0
