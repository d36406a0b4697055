from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

from integrity_shared.utils.errors import InvalidInputError

MIN_TOKEN_LENGTH = 2
MAX_TOKEN_LENGTH = 30

STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "or", "that",
        "the", "to", "was", "were", "will", "with", "you", "your", "this",
        "they", "we", "our", "have", "been", "not", "but", "what", "all",
        "can", "had", "her", "there", "which", "their", "if", "each",
        "about", "how", "up", "out", "them", "then", "she", "many", "some",
        "so", "these", "would", "other", "into", "who", "no", "more",
    }
)

# Word characters are ASCII only; every other non-space character splits tokens.
_NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE = re.compile(r"\s+")


def _keep(token: str) -> bool:
    return (
        MIN_TOKEN_LENGTH <= len(token) <= MAX_TOKEN_LENGTH
        and token not in STOP_WORDS
        and not token.isdigit()
    )


def tokenize(text: str) -> list[str]:
    if not isinstance(text, str):
        raise InvalidInputError(
            "Text to tokenize must be a string",
            details={"type": type(text).__name__},
        )
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [token for token in _WHITESPACE.split(cleaned) if _keep(token)]


def term_frequencies(tokens: Iterable[str]) -> Counter[str]:
    return Counter(tokens)
