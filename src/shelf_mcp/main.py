"""Main entry point for shelfmcp MCP server."""

import argparse
import logging
import sys

from fastmcp import FastMCP

from shelf_mcp.auth import get_auth_provider
from shelf_mcp.catalog import (
    CatalogCategorizer,
    CategoryService,
    SearchEngine,
    SectionMapping,
    load_catalog,
    load_rules,
)
from shelf_mcp.config import Config
from shelf_mcp.github import CatalogSync, GitHubClient
from shelf_mcp.resources import register_resources
from shelf_mcp.tools import register_tools
from shelf_mcp.tools_write import register_tools_write

logger = logging.getLogger(__name__)


def build_engine(config: Config) -> SearchEngine:
    """Create the search engine, seeded from SHELF_CATALOG when set."""
    entities = []
    if config.catalog_path is not None:
        logger.info("Loading catalog from %s", config.catalog_path)
        entities = load_catalog(config.catalog_path)
    return SearchEngine(entities, history_size=config.history_size)


def build_category_service(config: Config) -> CategoryService:
    """Create the rule engine, with rules from SHELF_RULES when set."""
    if config.rules_path is not None:
        logger.info("Loading category rules from %s", config.rules_path)
        return CategoryService(load_rules(config.rules_path))
    return CategoryService()


def create_server(config: Config) -> FastMCP:
    """Create and configure the MCP server with all components.

    Args:
        config: Configuration instance with all settings.
    """
    auth_provider = get_auth_provider(config)

    mcp = FastMCP(
        name="shelfMCP",
        instructions=(
            "shelfMCP catalogs software projects as books on a shelf. Use the search "
            "tool to find projects by text, category, author, language, date or "
            "popularity, the categorize tool to classify a repository, and the "
            "resources to browse sections, categories and individual projects."
        ),
        auth=auth_provider,
    )

    engine = build_engine(config)
    logger.info("Catalog ready: %d entities", engine.total_entities)

    sections = SectionMapping()
    categorizer = CatalogCategorizer(build_category_service(config), sections)
    sync = CatalogSync(GitHubClient(token=config.github_token))

    logger.info("Registering resources...")
    register_resources(mcp, engine, sections)

    logger.info("Registering read tools...")
    register_tools(mcp, engine, categorizer)

    logger.info("Registering write tools...")
    register_tools_write(mcp, config, engine, categorizer, sync)

    logger.info("Server configured successfully")
    return mcp


def main() -> None:
    """Main function - starts the MCP server."""
    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="shelfMCP - MCP server for a project shelf")
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Run in read-only mode (disable write tools)",
    )
    args = parser.parse_args()

    # CLI flag overrides env var
    config = Config.from_env(read_only_override=args.read_only if args.read_only else None)

    logger.info("=" * 50)
    logger.info("shelfMCP starting...")
    logger.info("  SHELF_CATALOG: %s", config.catalog_path or "(empty)")
    logger.info("  SHELF_RULES:   %s", config.rules_path or "(built-in)")
    logger.info("  SHELF_PORT:    %s", config.port)
    logger.info("  AUTH:          %s", "enabled" if config.auth_token else "disabled")
    logger.info("  READ_ONLY:     %s", config.read_only)
    logger.info("  GITHUB:        %s", "token" if config.github_token else "anonymous")
    logger.info("=" * 50)

    try:
        mcp = create_server(config)
        logger.info("Starting MCP server on port %s...", config.port)
        mcp.run(transport="sse", host="0.0.0.0", port=config.port)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
