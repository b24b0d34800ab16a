"""MCP Resources for shelfMCP.

Resources expose the shelf layout and catalog entries as read-only markdown.
"""

from shelf_mcp.catalog import CATEGORY_INFO, SearchEngine, SectionMapping


def get_sections_resource(engine: SearchEngine, sections: SectionMapping) -> str:
    """Resource: shelf://sections

    Lists every section with the categories mapped to it and its entity count.
    """
    counts = sections.get_section_stats(engine.entities)
    categories_by_section: dict[str, list[str]] = {}
    for assignment in sections.get_all_mappings():
        categories_by_section.setdefault(assignment.section_id, []).append(
            assignment.category.value
        )

    lines = ["# Shelf Sections\n", f"Total sections: {len(sections.sections)}\n", "\n"]
    for section in sections.sections:
        lines.append(f"## {section.name}\n")
        lines.append(f"- Id: `{section.id}`\n")
        mapped = categories_by_section.get(section.id)
        if mapped:
            lines.append(f"- Categories: {', '.join(mapped)}\n")
        lines.append(f"- Entities: {counts.get(section.id, 0)}\n")
        lines.append("\n")
    return "".join(lines)


def get_categories_resource(engine: SearchEngine, sections: SectionMapping) -> str:
    """Resource: shelf://categories

    Lists the taxonomy with descriptions, sections and entity counts.
    """
    counts = sections.get_category_stats(engine.entities)

    lines = ["# Categories\n", "\n"]
    for category, info in CATEGORY_INFO.items():
        lines.append(f"## {info.icon} {info.name}\n")
        lines.append(f"{info.description}\n\n")
        lines.append(f"- Id: `{category.value}`\n")
        lines.append(f"- Section: `{sections.get_section_id_for_category(category)}`\n")
        lines.append(f"- Entities: {counts[category]}\n")
        lines.append("\n")
    return "".join(lines)


def get_entity_resource(engine: SearchEngine, entity_id: str) -> str:
    """Resource: shelf://entities/{entity_id}

    Full detail of one catalog entry, README included.
    """
    entity = engine.get_entity(entity_id)
    if entity is None:
        raise ValueError(f"Entity '{entity_id}' not found")

    lines = [f"# {entity.emoji + ' ' if entity.emoji else ''}{entity.title}\n\n"]
    if entity.subtitle:
        lines.append(f"_{entity.subtitle}_\n\n")
    lines.append(f"**Id:** `{entity.id}`\n")
    lines.append(f"**Author:** {entity.author or 'unknown'}\n")
    lines.append(f"**Category:** {CATEGORY_INFO[entity.category].name}\n")
    if entity.section_id:
        lines.append(f"**Section:** `{entity.section_id}`\n")
    lines.append(f"**Visibility:** {'public' if entity.is_public else 'private'}\n")
    if entity.tags:
        lines.append(f"**Tags:** {', '.join(entity.tags)}\n")

    meta = entity.meta
    if meta is not None:
        lines.append("\n## Repository\n\n")
        if meta.url:
            lines.append(f"- URL: {meta.url}\n")
        if meta.language:
            lines.append(f"- Language: {meta.language}\n")
        if meta.topics:
            lines.append(f"- Topics: {', '.join(meta.topics)}\n")
        lines.append(f"- Stars: {meta.stars}, forks: {meta.forks}, watchers: {meta.watchers}\n")
        if meta.license:
            lines.append(f"- License: {meta.license.name or meta.license.key}\n")
        if meta.created_at:
            lines.append(f"- Created: {meta.created_at.isoformat()}\n")
        if entity.updated_at:
            lines.append(f"- Updated: {entity.updated_at.isoformat()}\n")
        if meta.is_archived:
            lines.append("- Archived\n")

    if entity.description and entity.description != entity.subtitle:
        lines.append(f"\n## Description\n\n{entity.description}\n")
    if entity.readme:
        lines.append(f"\n## README\n\n{entity.readme}\n")
    return "".join(lines)


def register_resources(mcp, engine: SearchEngine, sections: SectionMapping):
    """Register all resources with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        engine: Search engine holding the catalog
        sections: Category to section mapping
    """

    @mcp.resource("shelf://sections")
    def list_sections():
        """List shelf sections with their categories and entity counts."""
        return get_sections_resource(engine, sections)

    @mcp.resource("shelf://categories")
    def list_categories():
        """List categories with descriptions, sections and entity counts."""
        return get_categories_resource(engine, sections)

    @mcp.resource("shelf://entities/{entity_id}")
    def entity_detail(entity_id: str):
        """Get full detail of one catalog entry."""
        return get_entity_resource(engine, entity_id)
