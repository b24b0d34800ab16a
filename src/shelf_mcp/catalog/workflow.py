"""Categorization workflow: rule engine plus section assignment for entities."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from shelf_mcp.catalog.categorizer import CategoryService
from shelf_mcp.catalog.models import CategorizationResult, Category, Entity, RepositoryRecord, Section
from shelf_mcp.catalog.sections import SectionMapping

logger = logging.getLogger(__name__)

REVIEW_CONFIDENCE = 0.6


@dataclass
class EntityCategorization:
    """Category, section and confidence chosen for one repository."""

    category: Category
    section_id: str
    confidence: float
    matched_rules: list[str] = field(default_factory=list)


@dataclass
class SectionFix:
    entity: Entity
    old_section_id: str | None
    new_section_id: str


@dataclass
class CategorizationStats:
    category_stats: dict[Category, int]
    section_stats: dict[str, int]
    total_entities: int
    categories_with_entities: int
    sections_with_entities: int


@dataclass
class CategoryWithSection:
    id: Category
    name: str
    description: str
    color: str
    icon: str
    section_id: str
    section: Section | None


class CatalogCategorizer:
    """Ties the rule engine to the section mapping and applies results to entities."""

    def __init__(self, categories: CategoryService, sections: SectionMapping):
        self._categories = categories
        self._sections = sections

    @property
    def categories(self) -> CategoryService:
        return self._categories

    @property
    def sections(self) -> SectionMapping:
        return self._sections

    def categorize_and_assign_section(
        self, repo: RepositoryRecord | Mapping[str, Any]
    ) -> EntityCategorization:
        result = self._categories.categorize(repo)
        return EntityCategorization(
            category=result.category,
            section_id=self._sections.get_section_id_for_category(result.category),
            confidence=result.confidence,
            matched_rules=result.matched_rules,
        )

    def recategorize_entity(
        self, entity: Entity, repo: RepositoryRecord | Mapping[str, Any] | None = None
    ) -> EntityCategorization:
        """
        Re-run categorization and write the outcome onto the entity.

        Args:
            entity: Entity to update in place
            repo: Repository data to score (derived from the entity if omitted)
        """
        result = self.categorize_and_assign_section(repo or RepositoryRecord.from_entity(entity))
        entity.category = result.category
        entity.section_id = result.section_id
        entity.categorization_confidence = result.confidence
        logger.debug(
            "Entity %s categorized as %s (%.2f)", entity.id, result.category.value, result.confidence
        )
        return result

    def categorize_many(
        self, repos: Iterable[RepositoryRecord | Mapping[str, Any]]
    ) -> list[EntityCategorization]:
        return [self.categorize_and_assign_section(repo) for repo in repos]

    def categories_with_sections(self) -> list[CategoryWithSection]:
        return [
            CategoryWithSection(
                id=info.id,
                name=info.name,
                description=info.description,
                color=info.color,
                icon=info.icon,
                section_id=self._sections.get_section_id_for_category(info.id),
                section=self._sections.get_section_for_category(info.id),
            )
            for info in self._categories.get_categories()
        ]

    def validate_entity_section(self, entity: Entity) -> bool:
        """True if the entity sits in the section its category maps to."""
        return entity.section_id == self._sections.get_section_id_for_category(entity.category)

    def fix_mismatched_entities(self, entities: Iterable[Entity]) -> list[SectionFix]:
        """Move entities whose section disagrees with their category."""
        fixes = []
        for entity in entities:
            if self.validate_entity_section(entity):
                continue
            new_section_id = self._sections.get_section_id_for_category(entity.category)
            fixes.append(SectionFix(entity, entity.section_id, new_section_id))
            entity.section_id = new_section_id

        if fixes:
            logger.info("Moved %d entities to their category section", len(fixes))
        return fixes

    def get_categorization_stats(self, entities: Iterable[Entity]) -> CategorizationStats:
        entities = list(entities)
        category_stats = self._sections.get_category_stats(entities)
        section_stats = self._sections.get_section_stats(entities)
        return CategorizationStats(
            category_stats=category_stats,
            section_stats=section_stats,
            total_entities=len(entities),
            categories_with_entities=sum(1 for count in category_stats.values() if count > 0),
            sections_with_entities=sum(1 for count in section_stats.values() if count > 0),
        )

    def suggest_category(
        self,
        name: str,
        description: str | None = None,
        language: str | None = None,
        topics: list[str] | None = None,
        files: list[str] | None = None,
    ) -> CategorizationResult:
        """Categorize from manually entered fields."""
        return self._categories.categorize(
            RepositoryRecord(
                name=name,
                description=description,
                language=language,
                topics=topics or [],
                files=files,
            )
        )

    def entities_needing_review(self, entities: Iterable[Entity]) -> list[Entity]:
        """Entities never categorized or categorized with low confidence."""
        return [
            e
            for e in entities
            if not e.categorization_confidence or e.categorization_confidence < REVIEW_CONFIDENCE
        ]

    def override_category(self, entity: Entity, category: Category) -> None:
        """Set a category by hand and move the entity to the matching section."""
        entity.category = category
        entity.section_id = self._sections.get_section_id_for_category(category)
        logger.info("Category of %s overridden to %s", entity.id, category.value)
