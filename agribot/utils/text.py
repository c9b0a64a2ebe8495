"""
Text helpers.

Query normalization, hashing and the cheap token estimate used for
history budgeting.

Dependencies: hashlib (stdlib)
System role: Stateless text utilities
"""

import hashlib
import math
from collections.abc import Iterable


def normalize_query(query: str) -> str:
    """Lowercase and trim a search query."""
    return query.strip().lower()


def hash_query(query: str) -> str:
    """
    Hash a normalized query into a cache key.

    Args:
        query: Raw query text

    Returns:
        str: 64-char sha256 hex digest of the normalized query
    """
    return hashlib.sha256(normalize_query(query).encode("utf-8")).hexdigest()


def estimate_tokens(texts: Iterable[str]) -> int:
    """
    Approximate token count as characters / 4, rounded up.

    Texts are joined with a single space, matching how turns are
    concatenated before they reach the model.
    """
    joined = " ".join(t or "" for t in texts)
    return math.ceil(len(joined) / 4)


def truncate(text: str, max_length: int = 200) -> str:
    """Cut text to max_length characters, adding an ellipsis when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3].rstrip() + "..."
