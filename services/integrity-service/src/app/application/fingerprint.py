"""
64-bit SimHash fingerprints.

Each distinct token is hashed with FNV-1a 64 and votes on every bit position
with its term frequency as weight; a fingerprint bit is set when its vote
total is strictly positive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from app.application.tokenizer import term_frequencies, tokenize
from integrity_shared.utils.errors import DecodeError, InvalidInputError

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
UINT64_MASK = (1 << 64) - 1
UINT32_MASK = (1 << 32) - 1
FINGERPRINT_BITS = 64
HEX_LENGTH = 16

_LEGACY_OFFSET_LOW = 0x62B82175
_LEGACY_OFFSET_HIGH = 0xCBF29CE4
_LEGACY_PRIME_LOW = 0x01B3
_LEGACY_PRIME_HIGH = 0x0100
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{16}")


@dataclass(frozen=True)
class SimHash64:
    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidInputError("Fingerprint value must be an integer")
        if not 0 <= self.value <= UINT64_MASK:
            raise InvalidInputError(
                "Fingerprint value must fit in 64 unsigned bits",
                details={"value": self.value},
            )

    @classmethod
    def from_halves(cls, high: int, low: int) -> "SimHash64":
        return cls(((high & UINT32_MASK) << 32) | (low & UINT32_MASK))

    @property
    def high(self) -> int:
        return self.value >> 32

    @property
    def low(self) -> int:
        return self.value & UINT32_MASK

    def to_hex(self) -> str:
        return simhash_to_hex(self)


ZERO_FINGERPRINT = SimHash64(0)


def fnv1a_64(raw: bytes) -> int:
    value = FNV64_OFFSET_BASIS
    for byte in raw:
        value ^= byte
        value = (value * FNV64_PRIME) & UINT64_MASK
    return value


def fnv1a_64_text(token: str) -> int:
    return fnv1a_64(token.encode("utf-8"))


def fnv1a_64_legacy(token: str) -> int:
    """
    32-bit split arithmetic used by the browser client for stored fingerprints.

    Starts from a low offset word of 0x62b82175, XORs the low word as a
    signed 32-bit integer with each UTF-16 code unit and multiplies it by
    0x1b3 only. The high word is multiplied by 0x1b3 + 0x100 and receives
    the floored carry of the low product. Not true FNV-1a.
    """
    raw = token.encode("utf-16-le", "surrogatepass")
    low = _LEGACY_OFFSET_LOW
    high = _LEGACY_OFFSET_HIGH
    for index in range(0, len(raw), 2):
        unit = int.from_bytes(raw[index : index + 2], "little")
        signed = low ^ unit
        if signed >= 1 << 31:
            signed -= 1 << 32
        product = signed * _LEGACY_PRIME_LOW
        low = product & UINT32_MASK
        carry = product >> 32
        high = (high * _LEGACY_PRIME_LOW + high * _LEGACY_PRIME_HIGH + carry) & UINT32_MASK
    return (high << 32) | low


TOKEN_HASHES: dict[str, Callable[[str], int]] = {
    "standard": fnv1a_64_text,
    "legacy": fnv1a_64_legacy,
}


class FingerprintBuilder:
    def __init__(self, variant: str = "standard"):
        if variant not in TOKEN_HASHES:
            raise InvalidInputError(
                f"Unknown FNV-1a variant: {variant}",
                details={"supported": sorted(TOKEN_HASHES)},
            )
        self.variant = variant
        self._hash = TOKEN_HASHES[variant]

    def generate(self, text: str) -> SimHash64:
        frequencies = term_frequencies(tokenize(text))
        if not frequencies:
            return ZERO_FINGERPRINT

        vector = [0] * FINGERPRINT_BITS
        for token, weight in frequencies.items():
            hashed = self._hash(token)
            for bit_index in range(FINGERPRINT_BITS):
                if (hashed >> bit_index) & 1:
                    vector[bit_index] += weight
                else:
                    vector[bit_index] -= weight

        fingerprint = 0
        for bit_index, score in enumerate(vector):
            if score > 0:
                fingerprint |= 1 << bit_index
        return SimHash64(fingerprint)


def generate_fingerprint(text: str, variant: str = "standard") -> SimHash64:
    return FingerprintBuilder(variant).generate(text)


def simhash_to_hex(fingerprint: SimHash64) -> str:
    # High half first, both halves zero-padded to 8 hex digits.
    return f"{fingerprint.high:08x}{fingerprint.low:08x}"


def hex_to_simhash(text: str, *, strict: bool = False) -> SimHash64:
    """
    Parse a 16-character hex fingerprint.

    Malformed input yields the zero fingerprint unless strict is set, in
    which case DecodeError is raised. Callers should treat a zero
    fingerprint they did not generate themselves as suspect.
    """
    if isinstance(text, str) and _HEX_PATTERN.fullmatch(text):
        return SimHash64.from_halves(int(text[:8], 16), int(text[8:], 16))
    if strict:
        raise DecodeError(
            "Fingerprint must be 16 hexadecimal characters",
            details={"value": text if isinstance(text, str) else repr(text)},
        )
    return ZERO_FINGERPRINT
