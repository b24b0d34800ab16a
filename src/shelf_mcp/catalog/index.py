"""Inverted index from normalized token to entity ids."""

import logging
from collections.abc import Iterable

from shelf_mcp.catalog.models import Entity
from shelf_mcp.catalog.tokenizer import searchable_text, tokenize

logger = logging.getLogger(__name__)


class SearchIndex:
    """
    Token -> entity-id postings for an entity collection.

    The index is never updated incrementally. Every change to the collection
    goes through rebuild(), so stale postings cannot survive a mutation.
    """

    def __init__(self) -> None:
        self._postings: dict[str, set[str]] = {}

    def rebuild(self, entities: Iterable[Entity]) -> None:
        """Discard all postings and index the given entities from scratch."""
        self._postings.clear()

        count = 0
        for entity in entities:
            for token in tokenize(searchable_text(entity)):
                self._postings.setdefault(token, set()).add(entity.id)
            count += 1

        logger.debug(
            "Search index rebuilt: %d entities, %d tokens", count, len(self._postings)
        )

    def lookup(self, token: str) -> set[str]:
        """Return the ids of entities containing the token (a copy)."""
        return set(self._postings.get(token.lower(), ()))

    def tokens(self) -> list[str]:
        """All indexed tokens, sorted."""
        return sorted(self._postings)

    def snapshot(self) -> dict[str, frozenset[str]]:
        """Immutable copy of the postings, for comparison and inspection."""
        return {token: frozenset(ids) for token, ids in self._postings.items()}

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and token.lower() in self._postings
