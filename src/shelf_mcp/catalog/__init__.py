"""
Catalog module for shelfMCP.

In-memory search over cataloged projects: tokenizing, indexing, ranking,
filtering and faceting, plus rule-based categorization and the mapping of
categories onto shelf sections.
"""

from shelf_mcp.catalog.categorizer import CategoryService
from shelf_mcp.catalog.engine import SearchEngine, SearchStats
from shelf_mcp.catalog.index import SearchIndex
from shelf_mcp.catalog.loader import CatalogError, entity_from_dict, load_catalog, load_rules
from shelf_mcp.catalog.models import (
    CategorizationResult,
    Category,
    DateRange,
    Entity,
    FilterOptions,
    RepositoryMeta,
    RepositoryRecord,
    SearchFacets,
    SearchFilters,
    SearchQuery,
    SearchResult,
    Section,
)
from shelf_mcp.catalog.ranking import RankingWeights, SearchRanking
from shelf_mcp.catalog.rules import DEFAULT_RULES, CategoryRule
from shelf_mcp.catalog.sections import SECTIONS, SectionMapping
from shelf_mcp.catalog.taxonomy import CATEGORY_INFO, CategoryInfo, get_categories
from shelf_mcp.catalog.transformer import categorize_repository_heuristic, transform_repository
from shelf_mcp.catalog.workflow import CatalogCategorizer

__all__ = [
    "CATEGORY_INFO",
    "CatalogCategorizer",
    "CatalogError",
    "CategorizationResult",
    "Category",
    "CategoryInfo",
    "CategoryRule",
    "CategoryService",
    "DEFAULT_RULES",
    "DateRange",
    "Entity",
    "FilterOptions",
    "RankingWeights",
    "RepositoryMeta",
    "RepositoryRecord",
    "SECTIONS",
    "SearchEngine",
    "SearchFacets",
    "SearchFilters",
    "SearchIndex",
    "SearchQuery",
    "SearchRanking",
    "SearchResult",
    "SearchStats",
    "Section",
    "SectionMapping",
    "categorize_repository_heuristic",
    "entity_from_dict",
    "get_categories",
    "load_catalog",
    "load_rules",
    "transform_repository",
]
