"""Write tools for shelfMCP: change the catalog, its ranking and its categorization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shelf_mcp.auth import check_write_permission
from shelf_mcp.catalog import CatalogCategorizer, Entity, SearchEngine, entity_from_dict
from shelf_mcp.config import Config
from shelf_mcp.github import CatalogSync, SourceDataError
from shelf_mcp.tools import parse_categories

if TYPE_CHECKING:
    from fastmcp import FastMCP

logger = logging.getLogger(__name__)


def _parse_entities(records: list[dict[str, Any]]) -> list[Entity]:
    """Build entities from tool input, naming the first invalid record.

    Raises:
        ValueError: If a record is invalid
    """
    entities = []
    for position, record in enumerate(records):
        try:
            entities.append(entity_from_dict(record))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid entity at position {position}: {e}") from e
    return entities


def _get_entity(engine: SearchEngine, entity_id: str) -> Entity:
    entity = engine.get_entity(entity_id)
    if entity is None:
        raise ValueError(f"Entity '{entity_id}' not found")
    return entity


def register_tools_write(
    mcp: "FastMCP",
    config: Config,
    engine: SearchEngine,
    categorizer: CatalogCategorizer,
    sync: CatalogSync,
) -> None:
    """Register all write tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Config instance (read-only mode)
        engine: Search engine holding the catalog
        categorizer: Categorization workflow
        sync: GitHub importer
    """

    @mcp.tool()
    def add_entities(entities: list[dict], auto_categorize: bool = True) -> dict:
        """Add projects to the catalog.

        Each entity needs at least an id and a title. Repository metadata
        (language, topics, stars, forks, created_at, updated_at...) may be
        given at the top level or under "meta".

        Args:
            entities: Entity records to add
            auto_categorize: Categorize entities given without a category

        Returns:
            Dict with status, count and the ids added
        """
        check_write_permission(config)

        parsed = _parse_entities(entities)

        existing = {e.id for e in engine.entities}
        seen: set[str] = set()
        for entity in parsed:
            if entity.id in existing or entity.id in seen:
                raise ValueError(f"Entity '{entity.id}' already exists")
            seen.add(entity.id)

        categorized = []
        if auto_categorize:
            for record, entity in zip(entities, parsed):
                if not record.get("category"):
                    categorizer.recategorize_entity(entity)
                    categorized.append(entity.id)

        engine.add_entities(parsed)
        logger.info("Added %d entities (%d categorized)", len(parsed), len(categorized))

        return {
            "status": "added",
            "count": len(parsed),
            "ids": [e.id for e in parsed],
            "categorized": categorized,
            "total_entities": engine.total_entities,
        }

    @mcp.tool()
    def remove_entities(entity_ids: list[str]) -> dict:
        """Remove projects from the catalog by id.

        Args:
            entity_ids: Ids to remove (unknown ids are ignored)

        Returns:
            Dict with status and the number removed
        """
        check_write_permission(config)

        before = engine.total_entities
        engine.remove_entities(entity_ids)
        removed = before - engine.total_entities
        logger.info("Removed %d entities", removed)

        return {"status": "removed", "removed": removed, "total_entities": engine.total_entities}

    @mcp.tool()
    def clear_history() -> dict:
        """Forget recent searches."""
        check_write_permission(config)
        engine.clear_history()
        return {"status": "cleared"}

    @mcp.tool()
    def set_ranking_weights(weights: dict[str, float]) -> dict:
        """Change relevance ranking weights. Unspecified weights keep their value.

        Args:
            weights: Factor name to weight, e.g. {"title_match": 12, "popularity": 0}

        Returns:
            Dict with status and the full set of weights now in effect
        """
        check_write_permission(config)
        engine.set_ranking_weights(weights)
        logger.info("Ranking weights updated: %s", ", ".join(sorted(weights)))
        return {"status": "updated", "weights": engine.get_ranking_weights().to_dict()}

    @mcp.tool()
    def override_category(entity_id: str, category: str) -> dict:
        """Set a project's category by hand and move it to the matching section.

        Args:
            entity_id: Id of the project
            category: Category id (e.g. "games")

        Returns:
            Dict with status, category and section_id
        """
        check_write_permission(config)

        entity = _get_entity(engine, entity_id)
        (new_category,) = parse_categories([category])
        categorizer.override_category(entity, new_category)

        return {
            "status": "updated",
            "entity_id": entity.id,
            "category": entity.category.value,
            "section_id": entity.section_id,
        }

    @mcp.tool()
    def remap_section(category: str, section_id: str, move_entities: bool = False) -> dict:
        """Point a category at a different section.

        Args:
            category: Category id
            section_id: Target section id
            move_entities: Also move catalog entities whose section no longer
                matches their category

        Returns:
            Dict with status, whether the section exists in the catalog, and
            the ids of moved entities
        """
        check_write_permission(config)

        (target,) = parse_categories([category])
        categorizer.sections.update_mapping(target, section_id)

        moved = []
        if move_entities:
            moved = [fix.entity.id for fix in categorizer.fix_mismatched_entities(engine.entities)]

        return {
            "status": "remapped",
            "category": target.value,
            "section_id": section_id,
            "section_exists": categorizer.sections.validate_mapping(target),
            "moved": moved,
        }

    @mcp.tool()
    def import_github_user(
        username: str,
        include_readme: bool = False,
        max_repositories: int = 50,
        refine_categories: bool = False,
    ) -> dict:
        """Import a GitHub user's public repositories into the catalog.

        Repositories already in the catalog are replaced by the fresh copy.

        Args:
            username: GitHub login
            include_readme: Also fetch README files (one extra request each)
            max_repositories: Maximum repositories to import
            refine_categories: Re-categorize with the rule engine instead of
                the quick import heuristic

        Returns:
            Dict with status, count, ids and per-repository errors, or an
            error field if GitHub could not be reached
        """
        check_write_permission(config)

        try:
            result = sync.fetch_user_entities(
                username, include_readme=include_readme, max_repositories=max_repositories
            )
        except SourceDataError as e:
            logger.warning("GitHub import for %s failed: %s", username, e)
            return {"status": "failed", "error": f"Could not load source data: {e}"}

        if refine_categories:
            for entity in result.entities:
                categorizer.recategorize_entity(entity)

        ids = [e.id for e in result.entities]
        engine.remove_entities(ids)
        engine.add_entities(result.entities)

        return {
            "status": "imported",
            "count": len(ids),
            "ids": ids,
            "errors": result.errors,
            "total_entities": engine.total_entities,
        }
