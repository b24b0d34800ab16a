"""Category to section mapping and the static section catalog."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from shelf_mcp.catalog.models import Category, Entity, Section
from shelf_mcp.catalog.taxonomy import CATEGORY_INFO

logger = logging.getLogger(__name__)

DEFAULT_SECTION_IDS: dict[Category, str] = {
    Category.WEB_APPS: "sec-web-apps",
    Category.MOBILE_APPS: "sec-mobile-apps",
    Category.GAMES: "sec-games",
    Category.SOCIAL_MEDIA: "sec-social-media",
    Category.PRODUCTIVITY: "sec-productivity",
    Category.AI_ML: "sec-ai-ml",
    Category.UI_DESIGN: "sec-ui-design",
    Category.GRAPHICS: "sec-graphics",
    Category.TUTORIALS: "sec-tutorials",
    Category.DOCUMENTATION: "sec-documentation",
    Category.BUSINESS: "sec-business",
    Category.RESEARCH: "sec-research",
    Category.UTILITIES: "sec-utilities",
    Category.EDUCATIONAL: "sec-educational",
    Category.SELF_HELP: "sec-self-help",
    Category.MISCELLANEOUS: "sec-miscellaneous",
}

_unmapped = set(Category) - set(DEFAULT_SECTION_IDS)
if _unmapped:
    raise RuntimeError(f"Categories without a section: {sorted(c.value for c in _unmapped)}")

FALLBACK_SECTION_ID = DEFAULT_SECTION_IDS[Category.MISCELLANEOUS]

# Free-form shelves that exist alongside the category sections
_CUSTOM_SECTIONS = (
    Section("sec-contacts", "Contacts", "from-cyan-500 to-blue-500", 0),
    Section("sec-projects", "Projects", "from-amber-500 to-red-500", 1),
    Section("sec-ideas", "Ideas", "from-fuchsia-500 to-violet-500", 2),
)

SECTIONS: tuple[Section, ...] = _CUSTOM_SECTIONS + tuple(
    Section(
        id=section_id,
        name=CATEGORY_INFO[category].name,
        color=CATEGORY_INFO[category].color,
        order=len(_CUSTOM_SECTIONS) + position,
    )
    for position, (category, section_id) in enumerate(DEFAULT_SECTION_IDS.items())
)


@dataclass
class SectionAssignment:
    """One category with the section it maps to."""

    category: Category
    section_id: str
    section: Section


class SectionMapping:
    """
    Bidirectional category <-> section lookup.

    Every category maps to a section. Section ids without a category map back
    to MISCELLANEOUS.
    """

    def __init__(self, sections: Iterable[Section] = SECTIONS):
        self._sections: dict[str, Section] = {s.id: s for s in sections}
        self._category_to_section: dict[Category, str] = dict(DEFAULT_SECTION_IDS)
        self._section_to_category: dict[str, Category] = {
            section_id: category for category, section_id in self._category_to_section.items()
        }

    @property
    def sections(self) -> list[Section]:
        """The static section catalog, in display order."""
        return sorted(self._sections.values(), key=lambda s: s.order)

    def get_section_id_for_category(self, category: Category) -> str:
        return self._category_to_section.get(category, FALLBACK_SECTION_ID)

    def get_category_for_section(self, section_id: str) -> Category:
        return self._section_to_category.get(section_id, Category.MISCELLANEOUS)

    def get_mapped_sections(self) -> list[Section]:
        """Catalog sections that some category maps to."""
        return [s for s in self.sections if s.id in self._section_to_category]

    def get_section_for_category(self, category: Category) -> Section | None:
        return self._sections.get(self.get_section_id_for_category(category))

    def get_all_mappings(self) -> list[SectionAssignment]:
        """Every category whose section exists in the catalog, in taxonomy order."""
        assignments = []
        for category in Category:
            section_id = self.get_section_id_for_category(category)
            section = self._sections.get(section_id)
            if section is not None:
                assignments.append(SectionAssignment(category, section_id, section))
        return assignments

    def update_mapping(self, category: Category, section_id: str) -> None:
        """Point a category at a different section, updating both directions."""
        old_section_id = self._category_to_section.get(category)
        if old_section_id is not None and self._section_to_category.get(old_section_id) is category:
            del self._section_to_category[old_section_id]

        self._category_to_section[category] = section_id
        self._section_to_category[section_id] = category
        logger.info("Category %s now maps to section %s", category.value, section_id)

    def validate_mapping(self, category: Category) -> bool:
        """True if the category's section exists in the catalog."""
        section_id = self._category_to_section.get(category)
        return section_id is not None and section_id in self._sections

    def get_category_stats(self, entities: Iterable[Entity]) -> dict[Category, int]:
        """Entity count per category. Every category is present."""
        stats = {category: 0 for category in Category}
        for entity in entities:
            stats[entity.category] += 1
        return stats

    def get_section_stats(self, entities: Iterable[Entity]) -> dict[str, int]:
        """Entity count per section. Every mapped section is present."""
        stats = {section.id: 0 for section in self.get_mapped_sections()}
        for entity in entities:
            section_id = entity.section_id or self.get_section_id_for_category(entity.category)
            stats[section_id] = stats.get(section_id, 0) + 1
        return stats
