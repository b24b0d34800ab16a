"""Multi-factor weighted relevance ranking."""

import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone

from shelf_mcp.catalog.models import Entity
from shelf_mcp.catalog.tokenizer import tokenize_query

# (max days since update, score); anything older scores RECENCY_FLOOR
RECENCY_STEPS = (
    (1, 1.0),
    (7, 0.8),
    (30, 0.6),
    (90, 0.4),
    (365, 0.2),
)
RECENCY_FLOOR = 0.1

# log10 scale divisor: a combined popularity of ~10k saturates at 1.0
POPULARITY_LOG_SCALE = 4.0

# Factors computed from the query text; the rest describe the entity alone
TEXT_FACTORS = (
    "title_match",
    "subtitle_match",
    "description_match",
    "author_match",
    "tag_match",
    "topic_match",
    "readme_match",
    "language_match",
)
GENERAL_FACTORS = ("recent_activity", "popularity", "completeness")


@dataclass
class RankingWeights:
    """Weight applied to each ranking factor."""

    title_match: float = 10.0
    subtitle_match: float = 8.0
    description_match: float = 5.0
    author_match: float = 4.0
    tag_match: float = 5.0
    topic_match: float = 5.0
    readme_match: float = 2.0
    language_match: float = 3.0
    recent_activity: float = 3.0
    popularity: float = 2.0
    completeness: float = 1.0

    def merged(
        self, overrides: Mapping[str, float] | None = None, **kwargs: float
    ) -> "RankingWeights":
        """Return a copy with only the provided weights changed.

        Raises:
            ValueError: If an override names an unknown weight
        """
        changes = {**(overrides or {}), **kwargs}
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown ranking weight(s): {', '.join(unknown)}")
        return replace(self, **{name: float(value) for name, value in changes.items()})

    def to_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_RANKING_WEIGHTS = RankingWeights()


@dataclass
class RankingFactors:
    """Raw (unweighted) sub-scores for one entity against one query."""

    title_match: float = 0.0
    subtitle_match: float = 0.0
    description_match: float = 0.0
    author_match: float = 0.0
    tag_match: float = 0.0
    topic_match: float = 0.0
    readme_match: float = 0.0
    language_match: float = 0.0
    recent_activity: float = 0.0
    popularity: float = 0.0
    completeness: float = 0.0


def text_match_score(text: str | None, query_words: list[str]) -> float:
    """
    Score a single text field against the query words.

    Per word found as a substring: 2 points on a whole-word match, else 1,
    plus 1 if the field starts with the word.
    """
    if not text or not query_words:
        return 0.0

    text_lower = text.lower()
    score = 0.0
    for word in query_words:
        if word not in text_lower:
            continue
        if re.search(rf"\b{re.escape(word)}\b", text_lower):
            score += 2
        else:
            score += 1
        if text_lower.startswith(word):
            score += 1
    return score


def array_match_score(items: Iterable[str], query_words: list[str]) -> float:
    """Score a list field: 3 per item equal to a word, 1 per item containing it."""
    if not query_words:
        return 0.0

    score = 0.0
    for item in items:
        item_lower = item.lower()
        for word in query_words:
            if word not in item_lower:
                continue
            score += 3 if item_lower == word else 1
    return score


def recency_score(entity: Entity, now: datetime | None = None) -> float:
    """Step score by days since the last update (0 without timestamps)."""
    updated_at = entity.updated_at
    if updated_at is None:
        return 0.0

    now = now or datetime.now(timezone.utc)
    days = (now - updated_at).total_seconds() / 86400
    for max_days, score in RECENCY_STEPS:
        if days <= max_days:
            return score
    return RECENCY_FLOOR


def popularity_score(entity: Entity) -> float:
    """Log-normalized combination of stars, forks and watchers in [0, 1]."""
    meta = entity.meta
    if meta is None:
        return 0.0

    raw = meta.stars * 2 + meta.forks * 3 + meta.watchers
    if raw <= 0:
        return 0.0
    return min(1.0, math.log10(raw + 1) / POPULARITY_LOG_SCALE)


def completeness_score(entity: Entity) -> float:
    """Fraction of six presence checks satisfied."""
    meta = entity.meta
    checks = (
        bool(entity.description),
        bool(entity.readme),
        bool(entity.tags),
        bool(meta and meta.topics),
        bool(meta and meta.license),
        bool(meta and meta.language),
    )
    return sum(checks) / len(checks)


class SearchRanking:
    """
    Relevance scorer for entities against free-text queries.

    The score is the weighted sum of eleven factors. An entity with no textual
    evidence for the query scores 0: recency, popularity and completeness only
    order entities that already match the text.
    """

    def __init__(
        self,
        weights: RankingWeights | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the ranker.

        Args:
            weights: Factor weights (defaults to DEFAULT_RANKING_WEIGHTS)
            clock: Returns "now" for recency scoring (defaults to UTC wall clock)
        """
        self._weights = replace(weights or DEFAULT_RANKING_WEIGHTS)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def get_weights(self) -> RankingWeights:
        """Current weights (a copy)."""
        return replace(self._weights)

    def set_weights(
        self, overrides: Mapping[str, float] | None = None, **kwargs: float
    ) -> None:
        """Merge a partial set of weights into the current ones."""
        self._weights = self._weights.merged(overrides, **kwargs)

    def calculate_factors(self, entity: Entity, query: str) -> RankingFactors:
        """Compute every ranking factor for an entity."""
        words = tokenize_query(query)
        meta = entity.meta
        return RankingFactors(
            title_match=text_match_score(entity.title, words),
            subtitle_match=text_match_score(entity.subtitle, words),
            description_match=text_match_score(entity.description, words),
            author_match=text_match_score(entity.author, words),
            tag_match=array_match_score(entity.tags, words),
            topic_match=array_match_score(meta.topics if meta else [], words),
            readme_match=text_match_score(entity.readme, words),
            language_match=text_match_score(meta.language if meta else None, words),
            recent_activity=recency_score(entity, self._clock()),
            popularity=popularity_score(entity),
            completeness=completeness_score(entity),
        )

    def calculate_relevance_score(self, entity: Entity, query: str) -> float:
        """Weighted relevance of an entity for a query (0 when the text does not match)."""
        factors = self.calculate_factors(entity, query)
        text_score = self._weighted(factors, TEXT_FACTORS)
        if text_score <= 0:
            return 0.0
        return text_score + self._weighted(factors, GENERAL_FACTORS)

    def calculate_general_relevance_score(self, entity: Entity) -> float:
        """Query-independent score from recency, popularity and completeness."""
        factors = RankingFactors(
            recent_activity=recency_score(entity, self._clock()),
            popularity=popularity_score(entity),
            completeness=completeness_score(entity),
        )
        return self._weighted(factors, GENERAL_FACTORS)

    def rank_entities(self, entities: Iterable[Entity], query: str) -> list[Entity]:
        """
        Rank entities for a query, best first.

        An empty query falls back to general relevance. Otherwise entities
        scoring 0 are dropped; ties keep their incoming order.
        """
        if not query.strip():
            return self.rank_by_general_relevance(entities)

        scored = [(entity, self.calculate_relevance_score(entity, query)) for entity in entities]
        scored = [item for item in scored if item[1] > 0]
        scored.sort(key=lambda item: item[1], reverse=True)
        return [entity for entity, _ in scored]

    def rank_by_general_relevance(self, entities: Iterable[Entity]) -> list[Entity]:
        """Order entities by query-independent relevance, best first."""
        return sorted(entities, key=self.calculate_general_relevance_score, reverse=True)

    def _weighted(self, factors: RankingFactors, names: tuple[str, ...]) -> float:
        return sum(getattr(factors, name) * getattr(self._weights, name) for name in names)
