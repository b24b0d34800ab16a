"""Example MCP server serving the sample catalog.

Loads examples/catalog.yaml, fills in missing categories with the rule engine
and exposes the shelf resources plus a single search tool.
Run with: uv run python examples/example_server.py
"""

from pathlib import Path

from fastmcp import FastMCP

from shelf_mcp.catalog import (
    CatalogCategorizer,
    CategoryService,
    SearchEngine,
    SearchQuery,
    SectionMapping,
    load_catalog,
)
from shelf_mcp.resources import register_resources

CATALOG = Path(__file__).parent / "catalog.yaml"

sections = SectionMapping()
categorizer = CatalogCategorizer(CategoryService(), sections)

entities = load_catalog(CATALOG)
for entity in categorizer.entities_needing_review(entities):
    categorizer.recategorize_entity(entity)

engine = SearchEngine(entities)

mcp = FastMCP("shelf-mcp-example")
register_resources(mcp, engine, sections)


@mcp.tool()
def find_projects(query: str) -> list[str]:
    """Titles of the projects matching a query, best first.

    Args:
        query: Free-text query
    """
    return [entity.title for entity in engine.search(SearchQuery(text=query)).entities]


if __name__ == "__main__":
    print("Starting shelf-mcp example server...")
    print(f"\nLoaded {engine.total_entities} projects from {CATALOG.name}")
    print("\nAvailable resources:")
    print("  - shelf://sections")
    print("  - shelf://categories")
    print("  - shelf://entities/{entity_id}")
    print("\nAvailable tools:")
    print("  - find_projects")
    print("\nPress Ctrl+C to stop")

    mcp.run()
