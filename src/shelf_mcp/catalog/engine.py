"""Search engine: filtering, ranking, sorting, pagination, facets and suggestions."""

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from shelf_mcp.catalog.index import SearchIndex
from shelf_mcp.catalog.models import (
    SORT_ALPHABETICAL,
    SORT_DATE,
    SORT_KEYS,
    SORT_POPULARITY,
    SORT_RELEVANCE,
    Category,
    Entity,
    FilterOptions,
    SearchFacets,
    SearchFilters,
    SearchQuery,
    SearchResult,
)
from shelf_mcp.catalog.ranking import RankingWeights, SearchRanking

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_SUGGESTIONS = 5
DEFAULT_HISTORY_SIZE = 10

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class SearchStats:
    """Size summary of the collection and its index."""

    total_entities: int
    total_categories: int
    total_authors: int
    total_languages: int
    index_size: int


class SearchEngine:
    """
    In-memory search over an entity collection.

    The engine owns its entity snapshot and its index. Callers change the
    collection only through set_entities/add_entities/remove_entities, each of
    which rebuilds the index from scratch before returning.
    """

    def __init__(
        self,
        entities: Iterable[Entity] | None = None,
        ranking: SearchRanking | None = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        """
        Initialize the engine.

        Args:
            entities: Initial collection
            ranking: Relevance ranker (a default-weighted one if omitted)
            history_size: Maximum number of remembered queries
        """
        self._entities: list[Entity] = []
        self._index = SearchIndex()
        self._ranking = ranking or SearchRanking()
        self._history: list[str] = []
        self._history_size = history_size
        self.set_entities(entities or [])

    # Collection management

    def set_entities(self, entities: Iterable[Entity]) -> None:
        """Replace the whole collection and rebuild the index."""
        self._entities = list(entities)
        self._rebuild_index()

    def add_entities(self, entities: Iterable[Entity]) -> None:
        """Append entities to the collection and rebuild the index."""
        self._entities = [*self._entities, *entities]
        self._rebuild_index()

    def remove_entities(self, entity_ids: Iterable[str]) -> None:
        """Remove entities by id and rebuild the index."""
        to_remove = set(entity_ids)
        self._entities = [e for e in self._entities if e.id not in to_remove]
        self._rebuild_index()

    def _rebuild_index(self) -> None:
        self._index.rebuild(self._entities)

    @property
    def entities(self) -> list[Entity]:
        """The current collection (a shallow copy)."""
        return list(self._entities)

    @property
    def index(self) -> SearchIndex:
        return self._index

    @property
    def ranking(self) -> SearchRanking:
        return self._ranking

    @property
    def total_entities(self) -> int:
        return len(self._entities)

    def get_entity(self, entity_id: str) -> Entity | None:
        for entity in self._entities:
            if entity.id == entity_id:
                return entity
        return None

    def get_entities_by_ids(self, entity_ids: Iterable[str]) -> list[Entity]:
        wanted = set(entity_ids)
        return [e for e in self._entities if e.id in wanted]

    def get_entities_by_category(self) -> dict[Category, list[Entity]]:
        """Group the collection by category. Every category is present."""
        grouped: dict[Category, list[Entity]] = {category: [] for category in Category}
        for entity in self._entities:
            grouped[entity.category].append(entity)
        return grouped

    # Search

    def search(self, query: SearchQuery) -> SearchResult:
        """
        Run a query against the collection.

        Steps, in order: record history, rank by text, filter, compute facets,
        sort, paginate, suggest. total_count is the filtered count before
        pagination.
        """
        start = time.perf_counter()
        text = query.text.strip()
        filters = query.filters

        if text:
            self._add_to_history(text)

        results = self._ranking.rank_entities(self._entities, text) if text else list(self._entities)
        results = self._apply_filters(results, filters)
        facets = self._calculate_facets(results)
        results = self._sort_results(results, filters.sort_by, ranked=bool(text))

        total_count = len(results)
        offset = max(query.offset or 0, 0)
        limit = max(query.limit or DEFAULT_LIMIT, 0)
        page = results[offset : offset + limit]

        suggestions = self._generate_suggestions(text)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.debug(
            "Search %r: %d matches, returned %d in %.2fms",
            text,
            total_count,
            len(page),
            elapsed_ms,
        )
        return SearchResult(
            entities=page,
            total_count=total_count,
            facets=facets,
            suggestions=suggestions,
            search_time_ms=elapsed_ms,
        )

    def _apply_filters(self, entities: list[Entity], filters: SearchFilters) -> list[Entity]:
        return [e for e in entities if self._matches_filters(e, filters)]

    @staticmethod
    def _matches_filters(entity: Entity, filters: SearchFilters) -> bool:
        """True if the entity satisfies every active filter."""
        if filters.categories and entity.category not in filters.categories:
            return False

        if filters.authors and entity.author not in filters.authors:
            return False

        if filters.languages:
            if not entity.language or entity.language not in filters.languages:
                return False

        if filters.date_range is not None:
            # Entities without a creation date are not excluded by the range
            created_at = entity.created_at
            if created_at is not None:
                start, end = filters.date_range.start, filters.date_range.end
                if start is not None and created_at < start:
                    return False
                if end is not None and created_at > end:
                    return False

        if filters.visibility and filters.visibility != "all":
            if entity.is_public != (filters.visibility == "public"):
                return False

        if filters.has_readme is not None:
            if bool(entity.readme) != filters.has_readme:
                return False

        if filters.min_stars is not None and entity.stars < filters.min_stars:
            return False

        return True

    def _sort_results(self, entities: list[Entity], sort_by: str, ranked: bool) -> list[Entity]:
        if sort_by == SORT_ALPHABETICAL:
            return sorted(entities, key=lambda e: (e.title.casefold(), e.title))

        if sort_by == SORT_DATE:
            return sorted(entities, key=lambda e: e.updated_at or _EPOCH, reverse=True)

        if sort_by == SORT_POPULARITY:
            return sorted(entities, key=lambda e: (e.stars, e.forks), reverse=True)

        if sort_by not in SORT_KEYS:
            logger.debug("Unknown sort key %r, using %s", sort_by, SORT_RELEVANCE)

        # Relevance: text ranking already ordered the results
        if ranked:
            return entities
        return self._ranking.rank_by_general_relevance(entities)

    @staticmethod
    def _calculate_facets(entities: list[Entity]) -> SearchFacets:
        facets = SearchFacets()
        for entity in entities:
            _increment(facets.categories, entity.category.value)
            _increment(facets.authors, entity.author)
            if entity.language:
                _increment(facets.languages, entity.language)
            if entity.created_at is not None:
                _increment(facets.years, str(entity.created_at.year))
        return facets

    # Filters and suggestions

    def get_available_filters(self) -> FilterOptions:
        """Distinct filter values across the entire, unfiltered collection."""
        categories = {e.category for e in self._entities}
        authors = {e.author for e in self._entities}
        languages = {e.language for e in self._entities if e.language}
        years = {e.created_at.year for e in self._entities if e.created_at is not None}

        return FilterOptions(
            categories=sorted(categories, key=lambda c: c.value),
            authors=sorted(authors),
            languages=sorted(languages),
            years=sorted(years, reverse=True),
        )

    def get_suggestions(self, partial_query: str) -> list[str]:
        """Suggest titles, authors, topics and languages containing the partial query."""
        return self._generate_suggestions(partial_query)

    def _generate_suggestions(self, query: str) -> list[str]:
        if not query.strip():
            return []

        query_lower = query.lower()
        candidates: dict[str, None] = {}
        for entity in self._entities:
            values = [entity.title, entity.author, *entity.topics]
            if entity.language:
                values.append(entity.language)
            for value in values:
                if value and query_lower in value.lower():
                    candidates.setdefault(value, None)

        suggestions = [s for s in candidates if s.lower() != query_lower]
        return sorted(suggestions[:MAX_SUGGESTIONS])

    # History

    def _add_to_history(self, query: str) -> None:
        self._history = [q for q in self._history if q != query]
        self._history.insert(0, query)
        del self._history[self._history_size :]

    def get_recent_searches(self) -> list[str]:
        """Recent queries, most recent first (a copy)."""
        return list(self._history)

    def clear_history(self) -> None:
        self._history = []

    # Ranking configuration and stats

    def set_ranking_weights(
        self, overrides: Mapping[str, float] | None = None, **kwargs: float
    ) -> None:
        self._ranking.set_weights(overrides, **kwargs)

    def get_ranking_weights(self) -> RankingWeights:
        return self._ranking.get_weights()

    def get_search_stats(self) -> SearchStats:
        return SearchStats(
            total_entities=len(self._entities),
            total_categories=len({e.category for e in self._entities}),
            total_authors=len({e.author for e in self._entities}),
            total_languages=len({e.language for e in self._entities if e.language}),
            index_size=len(self._index),
        )


def _increment(counts: dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1
