from __future__ import annotations

from concurrent.futures import Executor

from app.application.hashing import DEFAULT_CHUNK_SIZE, chunk_content, sha256_hex


def merkle_parent(left: str, right: str) -> str:
    # Hex strings are concatenated as text, not as raw digest bytes.
    return sha256_hex(left + right)


def reduce_level(level: list[str]) -> list[str]:
    next_level: list[str] = []
    for index in range(0, len(level), 2):
        if index + 1 < len(level):
            next_level.append(merkle_parent(level[index], level[index + 1]))
        else:
            next_level.append(level[index])
    return next_level


class MerkleBuilder:
    """
    Binary SHA-256 hash tree over fixed-size content chunks.

    Leaves are hashed independently (optionally on an executor); each level
    pairs nodes left to right and promotes an odd trailing node unchanged.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        executor: Executor | None = None,
    ):
        self._chunk_size = chunk_size
        self._executor = executor

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def leaf_hashes(self, content: str) -> list[str]:
        chunks = chunk_content(content, self._chunk_size)
        if self._executor is not None and len(chunks) > 1:
            return list(self._executor.map(sha256_hex, chunks))
        return [sha256_hex(chunk) for chunk in chunks]

    def build_levels(self, content: str) -> list[list[str]]:
        levels = [self.leaf_hashes(content)]
        while len(levels[-1]) > 1:
            levels.append(reduce_level(levels[-1]))
        return levels

    def build_root(self, content: str) -> str:
        level = self.leaf_hashes(content)
        while len(level) > 1:
            level = reduce_level(level)
        return level[0]


def build_merkle_levels(content: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[list[str]]:
    return MerkleBuilder(chunk_size).build_levels(content)


def build_merkle_root(content: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    return MerkleBuilder(chunk_size).build_root(content)
