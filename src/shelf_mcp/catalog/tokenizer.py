"""Text normalization shared by the index and the ranker."""

import re
from collections.abc import Iterator

from shelf_mcp.catalog.models import Entity

# Anything that is neither a word character nor whitespace becomes a separator
NON_WORD_PATTERN = re.compile(r"[^\w\s]")

# Shortest token kept by the index and by query parsing
MIN_INDEX_TOKEN_LENGTH = 3
MIN_QUERY_TOKEN_LENGTH = 2


def iter_tokens(text: str, min_length: int = MIN_INDEX_TOKEN_LENGTH) -> Iterator[str]:
    """
    Yield lowercase tokens from text, left to right.

    Non-alphanumeric characters are replaced by whitespace before splitting.
    Tokens shorter than min_length are dropped. No stemming, no stopwords.
    """
    normalized = NON_WORD_PATTERN.sub(" ", text.lower())
    for token in normalized.split():
        if len(token) >= min_length:
            yield token


def tokenize(text: str) -> list[str]:
    """Tokenize text for the search index."""
    return list(iter_tokens(text, MIN_INDEX_TOKEN_LENGTH))


def tokenize_query(query: str) -> list[str]:
    """Tokenize a query into the words used for relevance scoring."""
    return list(iter_tokens(query, MIN_QUERY_TOKEN_LENGTH))


def searchable_text(entity: Entity) -> str:
    """Concatenate every indexed field of an entity into one lowercase string."""
    parts = [
        entity.title,
        entity.subtitle or "",
        entity.description or "",
        entity.author,
        *entity.tags,
        *entity.topics,
        entity.language or "",
        entity.readme or "",
    ]
    return " ".join(parts).lower()
