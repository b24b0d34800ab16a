"""MCP read tools for the shelfMCP server.

- search: Ranked, filtered, faceted search over the catalog
- suggest: Autocomplete suggestions for a partial query
- available_filters: Distinct filter values across the catalog
- recent_searches: Recently executed queries
- categorize: Score a repository description against the category rules
- catalog_stats: Collection, index and categorization statistics
- get_ranking_weights: Current relevance weights
"""

from typing import Any

from fastmcp import FastMCP

from shelf_mcp.catalog import (
    CatalogCategorizer,
    Category,
    DateRange,
    RepositoryRecord,
    SearchEngine,
    SearchFilters,
    SearchQuery,
    SearchResult,
)
from shelf_mcp.catalog.models import SORT_KEYS, coerce_datetime

DEFAULT_TOOL_LIMIT = 20


def parse_categories(values: list[str] | None) -> list[Category]:
    """Resolve category names, rejecting anything outside the taxonomy.

    Raises:
        ValueError: If a value is not a known category
    """
    categories = []
    for value in values or []:
        category = Category.parse(value)
        if category is Category.MISCELLANEOUS and value.strip().lower() not in (
            Category.MISCELLANEOUS.value,
            Category.MISCELLANEOUS.name.lower(),
        ):
            raise ValueError(
                f"Unknown category '{value}'. Valid: {', '.join(c.value for c in Category)}"
            )
        categories.append(category)
    return categories


def _build_filters(
    categories: list[str] | None,
    authors: list[str] | None,
    languages: list[str] | None,
    date_from: str | None,
    date_to: str | None,
    visibility: str | None,
    sort_by: str,
    has_readme: bool | None,
    min_stars: int | None,
) -> SearchFilters:
    date_range = None
    if date_from or date_to:
        start, end = coerce_datetime(date_from), coerce_datetime(date_to)
        if date_from and start is None:
            raise ValueError(f"Invalid date_from '{date_from}', expected ISO-8601")
        if date_to and end is None:
            raise ValueError(f"Invalid date_to '{date_to}', expected ISO-8601")
        date_range = DateRange(start=start, end=end)

    if visibility not in (None, "public", "private", "all"):
        raise ValueError(f"Invalid visibility '{visibility}'. Valid: public, private, all")

    return SearchFilters(
        categories=parse_categories(categories),
        authors=list(authors or []),
        languages=list(languages or []),
        date_range=date_range,
        visibility=visibility,
        sort_by=sort_by,
        has_readme=has_readme,
        min_stars=min_stars,
    )


def format_search_result(result: SearchResult) -> dict[str, Any]:
    return {
        "entities": [entity.to_dict(include_readme=False) for entity in result.entities],
        "total_count": result.total_count,
        "facets": {
            "categories": result.facets.categories,
            "authors": result.facets.authors,
            "languages": result.facets.languages,
            "years": result.facets.years,
        },
        "suggestions": result.suggestions,
        "search_time_ms": round(result.search_time_ms, 2),
    }


def register_tools(mcp: FastMCP, engine: SearchEngine, categorizer: CatalogCategorizer) -> None:
    """Register all read tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        engine: Search engine holding the catalog
        categorizer: Categorization workflow (rules plus section mapping)
    """

    @mcp.tool()
    def search(
        query: str = "",
        categories: list[str] | None = None,
        authors: list[str] | None = None,
        languages: list[str] | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        visibility: str | None = None,
        sort_by: str = "relevance",
        has_readme: bool | None = None,
        min_stars: int | None = None,
        limit: int = DEFAULT_TOOL_LIMIT,
        offset: int = 0,
    ) -> dict:
        """Search the catalog of projects.

        Free text is matched against titles, descriptions, authors, tags,
        topics, languages and READMEs, then ranked by a weighted mix of text
        matches, recent activity, popularity and completeness. Filters are
        combined with AND.

        Args:
            query: Free-text query (empty lists everything)
            categories: Category ids to keep (e.g. "ai-ml", "web-apps")
            authors: Exact author names to keep
            languages: Exact primary languages to keep
            date_from: Earliest creation date (ISO-8601)
            date_to: Latest creation date (ISO-8601)
            visibility: "public", "private" or "all"
            sort_by: "relevance", "date", "popularity" or "alphabetical"
            has_readme: Keep only projects with (True) or without (False) a README
            min_stars: Minimum star count
            limit: Maximum results to return (default: 20)
            offset: Number of results to skip

        Returns:
            Dict with entities (without README bodies), total_count, facets,
            suggestions and search_time_ms, or an error field
        """
        try:
            filters = _build_filters(
                categories,
                authors,
                languages,
                date_from,
                date_to,
                visibility,
                sort_by,
                has_readme,
                min_stars,
            )
        except ValueError as e:
            return {"entities": [], "total_count": 0, "error": str(e)}

        result = engine.search(SearchQuery(text=query, filters=filters, limit=limit, offset=offset))
        response = format_search_result(result)
        if sort_by not in SORT_KEYS:
            response["warning"] = f"Unknown sort_by '{sort_by}', results sorted by relevance"
        return response

    @mcp.tool()
    def suggest(partial_query: str) -> list[str]:
        """Suggest titles, authors, topics and languages containing a partial query.

        Args:
            partial_query: What the user has typed so far

        Returns:
            Up to five suggestions, alphabetically sorted
        """
        return engine.get_suggestions(partial_query)

    @mcp.tool()
    def available_filters() -> dict:
        """List the distinct categories, authors, languages and years in the catalog."""
        options = engine.get_available_filters()
        return {
            "categories": [c.value for c in options.categories],
            "authors": options.authors,
            "languages": options.languages,
            "years": options.years,
        }

    @mcp.tool()
    def recent_searches() -> list[str]:
        """Recently executed non-empty queries, most recent first."""
        return engine.get_recent_searches()

    @mcp.tool()
    def categorize(
        name: str,
        description: str | None = None,
        language: str | None = None,
        topics: list[str] | None = None,
        files: list[str] | None = None,
        readme: str | None = None,
    ) -> dict:
        """Categorize a repository with the rule engine.

        Args:
            name: Repository name
            description: Repository description
            language: Primary language
            topics: Repository topics
            files: File paths in the repository
            readme: README text

        Returns:
            Dict with category, confidence (0-1), matched_rules and the
            section_id the category maps to
        """
        result = categorizer.categorize_and_assign_section(
            RepositoryRecord(
                name=name,
                description=description,
                language=language,
                topics=list(topics or []),
                files=list(files) if files else None,
                readme=readme,
            )
        )
        return {
            "category": result.category.value,
            "confidence": round(result.confidence, 4),
            "matched_rules": result.matched_rules,
            "section_id": result.section_id,
        }

    @mcp.tool()
    def catalog_stats() -> dict:
        """Collection, index and categorization statistics."""
        entities = engine.entities
        search_stats = engine.get_search_stats()
        categorization = categorizer.get_categorization_stats(entities)
        return {
            "total_entities": search_stats.total_entities,
            "total_categories": search_stats.total_categories,
            "total_authors": search_stats.total_authors,
            "total_languages": search_stats.total_languages,
            "index_size": search_stats.index_size,
            "entities_per_category": {
                category.value: count for category, count in categorization.category_stats.items()
            },
            "entities_per_section": categorization.section_stats,
            "entities_needing_review": [e.id for e in categorizer.entities_needing_review(entities)],
        }

    @mcp.tool()
    def get_ranking_weights() -> dict:
        """Current weight of each relevance ranking factor."""
        return engine.get_ranking_weights().to_dict()
