"""
Time-lock seals: a Merkle root bound to a creation timestamp and a random
nonce by a second SHA-256 hash.

Creation fails fast on bad input. Verification never raises; every failure
mode comes back as a VerificationResult with one of the fixed reasons.
"""

from __future__ import annotations

import json
import secrets
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from app.application.hashing import DEFAULT_CHUNK_SIZE, sha256_hex
from app.application.merkle import MerkleBuilder
from integrity_shared.models.seal import (
    SEAL_FORMAT_VERSION,
    TimeLockSeal,
    VerificationFailure,
    VerificationResult,
)
from integrity_shared.utils.errors import SealFormatError
from integrity_shared.utils.logger import get_logger
from integrity_shared.utils.logging_config import log_error_with_context

logger = get_logger(__name__)

DEFAULT_NONCE_BYTES = 16
MS_PER_DAY = 24 * 60 * 60 * 1000
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def current_time_ms() -> int:
    return time.time_ns() // 1_000_000


def seal_hash_for(content_hash: str, timestamp: int, nonce: str) -> str:
    return sha256_hex(f"{content_hash}:{timestamp}:{nonce}")


@dataclass(frozen=True)
class SealChecks:
    content_match: bool
    seal_intact: bool
    timestamp_valid: bool


def verification_result(checks: SealChecks) -> VerificationResult:
    # Content is reported before seal integrity, seal integrity before time.
    if not checks.content_match:
        return VerificationResult.failed(VerificationFailure.CONTENT_MODIFIED)
    if not checks.seal_intact:
        return VerificationResult.failed(VerificationFailure.SEAL_TAMPERED)
    if not checks.timestamp_valid:
        return VerificationResult.failed(VerificationFailure.FUTURE_TIMESTAMP)
    return VerificationResult.ok()


class SealManager:
    def __init__(
        self,
        merkle: MerkleBuilder | None = None,
        *,
        clock: Callable[[], int] = current_time_ms,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
        nonce_bytes: int = DEFAULT_NONCE_BYTES,
    ):
        self._merkle = merkle or MerkleBuilder(DEFAULT_CHUNK_SIZE)
        self._clock = clock
        self._random_bytes = random_bytes
        self._nonce_bytes = nonce_bytes

    def now_ms(self) -> int:
        return self._clock()

    def create_seal(self, content: str) -> TimeLockSeal:
        content_hash = self._merkle.build_root(content)
        timestamp = self._clock()
        nonce = self._random_bytes(self._nonce_bytes).hex()

        seal = TimeLockSeal(
            content_hash=content_hash,
            timestamp=timestamp,
            nonce=nonce,
            seal_hash=seal_hash_for(content_hash, timestamp, nonce),
            version=SEAL_FORMAT_VERSION,
        )
        logger.debug(
            "Time-lock seal created",
            extra={"content_hash": content_hash, "timestamp": timestamp},
        )
        return seal

    def check_seal(
        self, content: str, seal: TimeLockSeal | Mapping[str, Any]
    ) -> SealChecks:
        """
        Evaluate each seal property independently.

        Unlike verify_seal this raises on malformed input.
        """
        if not isinstance(seal, TimeLockSeal):
            seal = TimeLockSeal.model_validate(seal)

        return SealChecks(
            content_match=self._merkle.build_root(content) == seal.content_hash,
            seal_intact=seal_hash_for(seal.content_hash, seal.timestamp, seal.nonce)
            == seal.seal_hash,
            timestamp_valid=seal.timestamp <= self._clock(),
        )

    def verify_seal(
        self, content: str, seal: TimeLockSeal | Mapping[str, Any]
    ) -> VerificationResult:
        try:
            checks = self.check_seal(content, seal)
        except Exception as exc:
            log_error_with_context(logger, exc, {"operation": "verify_seal"})
            return VerificationResult.failed(VerificationFailure.VERIFICATION_ERROR)

        result = verification_result(checks)
        if not result.valid:
            logger.info("Seal verification failed", extra={"reason": result.reason})
        return result


_default_manager = SealManager()


def create_time_lock_seal(content: str) -> TimeLockSeal:
    return _default_manager.create_seal(content)


def verify_time_lock_seal(
    content: str, seal: TimeLockSeal | Mapping[str, Any]
) -> VerificationResult:
    return _default_manager.verify_seal(content, seal)


def iso_timestamp(timestamp_ms: int) -> str:
    """ISO-8601 UTC rendering with millisecond precision, e.g. 2024-01-01T00:00:00.000Z"""
    moment = _EPOCH + timedelta(milliseconds=timestamp_ms)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_seal_timestamp(seal: TimeLockSeal) -> str:
    return iso_timestamp(seal.timestamp)


def get_seal_age_days(seal: TimeLockSeal, now_ms: int | None = None) -> int:
    if now_ms is None:
        now_ms = current_time_ms()
    return (now_ms - seal.timestamp) // MS_PER_DAY


def serialize_seal(seal: TimeLockSeal) -> str:
    return seal.model_dump_json(by_alias=True)


def deserialize_seal(data: str, *, strict: bool = False) -> TimeLockSeal | None:
    """
    Parse a serialized seal.

    Args:
        data: JSON produced by serialize_seal or by the browser extension
        strict: Raise SealFormatError instead of returning None

    Returns:
        TimeLockSeal, or None when the payload is not a well-formed seal
    """
    try:
        payload = json.loads(data)
    except (TypeError, ValueError) as exc:
        return _reject(f"Seal is not valid JSON: {exc}", strict)

    if not isinstance(payload, dict):
        return _reject("Seal must be a JSON object", strict)

    for field in ("contentHash", "nonce", "sealHash"):
        if not isinstance(payload.get(field), str):
            return _reject(f"Seal field '{field}' must be a string", strict)

    timestamp = payload.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return _reject("Seal field 'timestamp' must be a number", strict)

    try:
        return TimeLockSeal.model_validate(payload)
    except ValidationError as exc:
        return _reject(f"Seal failed validation: {exc.error_count()} error(s)", strict)


def _reject(message: str, strict: bool) -> None:
    if strict:
        raise SealFormatError(message)
    return None
