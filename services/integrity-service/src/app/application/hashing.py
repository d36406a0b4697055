"""SHA-256 hashing and fixed-size chunking shared by the Merkle builder."""

from __future__ import annotations

import hashlib

from integrity_shared.utils.errors import InvalidInputError

DEFAULT_CHUNK_SIZE = 4096


def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates are encoded as U+FFFD, the way browser TextEncoder does.
        return (
            text.encode("utf-16-le", "surrogatepass")
            .decode("utf-16-le", "replace")
            .encode("utf-8")
        )


def sha256_hex(data: str | bytes) -> str:
    """
    Lowercase hex SHA-256 digest of a string (UTF-8 encoded) or raw bytes.

    Raises:
        InvalidInputError: If data is None or not str/bytes
    """
    if isinstance(data, str):
        raw = _utf8(data)
    elif isinstance(data, (bytes, bytearray, memoryview)):
        raw = bytes(data)
    else:
        raise InvalidInputError(
            "Hash input must be str or bytes",
            details={"type": type(data).__name__},
        )
    return hashlib.sha256(raw).hexdigest()


def chunk_content(content: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """
    Split content into consecutive chunks of at most chunk_size characters.

    Characters are counted in UTF-16 code units so chunk boundaries land where
    the embedded browser verifier puts them. A surrogate pair cut in half by a
    boundary leaves U+FFFD on each side. Empty content yields a single empty
    chunk.

    Raises:
        InvalidInputError: If content is not a string or chunk_size < 1
    """
    if not isinstance(content, str):
        raise InvalidInputError(
            "Content must be a string",
            details={"type": type(content).__name__},
        )
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
        raise InvalidInputError(
            "Chunk size must be a positive integer",
            details={"chunk_size": chunk_size},
        )

    if not content:
        return [""]

    if content.isascii():
        return [content[i : i + chunk_size] for i in range(0, len(content), chunk_size)]

    units = content.encode("utf-16-le", "surrogatepass")
    step = chunk_size * 2
    return [
        units[i : i + step].decode("utf-16-le", "replace")
        for i in range(0, len(units), step)
    ]
