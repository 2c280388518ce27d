"""Text normalization and tokenization shared by indexing and querying."""

import re
from typing import List

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace.

    >>> normalize("  BTC/USDT ")
    'btc usdt'
    """
    if not text:
        return ""
    text = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str, min_token_length: int = 2) -> List[str]:
    """Split normalized text into tokens of at least ``min_token_length`` chars."""
    return [token for token in normalize(text).split(" ") if len(token) >= min_token_length]
