"""Turn raw GitHub repository payloads into catalog entities."""

from collections.abc import Mapping
from typing import Any

from shelf_mcp.catalog.models import Category, Entity, License, RepositoryMeta
from shelf_mcp.catalog.taxonomy import CATEGORY_INFO

# Checked in order; the first hit wins. Web apps come last because their
# keywords and languages show up in almost everything.
_HEURISTIC_CHECKS: tuple[tuple[Category, tuple[str, ...], tuple[str, ...], tuple[str, ...]], ...] = (
    # (category, keywords, exact topics, exact languages)
    (
        Category.GAMES,
        ("game", "gaming", "unity", "unreal", "godot", "pygame", "phaser", "canvas", "webgl", "three.js"),
        ("game", "gaming"),
        (),
    ),
    (
        Category.AI_ML,
        (
            "ai", "artificial-intelligence", "machine-learning", "ml", "deep-learning", "neural",
            "tensorflow", "pytorch", "scikit", "pandas", "numpy",
        ),
        ("machine-learning", "artificial-intelligence"),
        ("jupyter notebook",),
    ),
    (
        Category.MOBILE_APPS,
        ("android", "ios", "mobile", "react-native", "flutter", "swift", "kotlin", "xamarin"),
        ("android", "ios"),
        ("swift", "kotlin"),
    ),
    (
        Category.SOCIAL_MEDIA,
        (
            "social", "chat", "messaging", "communication", "forum", "community", "discord",
            "slack", "twitter", "facebook",
        ),
        (),
        (),
    ),
    (
        Category.PRODUCTIVITY,
        ("productivity", "tool", "utility", "automation", "workflow", "cli", "command-line", "script", "helper"),
        (),
        (),
    ),
    (
        Category.UI_DESIGN,
        ("design", "ui", "ux", "interface", "component", "design-system", "figma", "sketch", "prototype"),
        ("design", "ui", "ux"),
        (),
    ),
    (
        Category.GRAPHICS,
        ("graphics", "visual", "art", "image", "photo", "video", "animation", "svg", "canvas", "webgl"),
        (),
        (),
    ),
    (
        Category.TUTORIALS,
        ("tutorial", "guide", "documentation", "docs", "learning", "course", "example", "demo", "sample"),
        ("tutorial", "documentation"),
        (),
    ),
    (
        Category.DOCUMENTATION,
        ("api", "reference", "specification", "manual", "handbook"),
        (),
        (),
    ),
    (
        Category.BUSINESS,
        ("business", "strategy", "marketing", "sales", "finance", "startup", "entrepreneur"),
        (),
        (),
    ),
    (
        Category.RESEARCH,
        ("research", "analysis", "study", "paper", "academic", "science", "data-analysis"),
        ("research", "academic"),
        (),
    ),
    (
        Category.EDUCATIONAL,
        ("education", "educational", "school", "university", "course", "curriculum"),
        (),
        (),
    ),
    (
        Category.WEB_APPS,
        ("web", "website", "webapp", "react", "vue", "angular", "next", "nuxt", "svelte"),
        (),
        ("javascript", "typescript", "html", "css"),
    ),
)

# Shelf placement for imported repositories; a few categories share a shelf
IMPORT_SECTION_IDS: dict[Category, str] = {
    Category.GAMES: "sec-games",
    Category.WEB_APPS: "sec-web-apps",
    Category.MOBILE_APPS: "sec-mobile-apps",
    Category.SOCIAL_MEDIA: "sec-social-media",
    Category.PRODUCTIVITY: "sec-productivity",
    Category.AI_ML: "sec-ai-ml",
    Category.UI_DESIGN: "sec-ui-design",
    Category.GRAPHICS: "sec-graphics",
    Category.TUTORIALS: "sec-tutorials",
    Category.DOCUMENTATION: "sec-documentation",
    Category.BUSINESS: "sec-business",
    Category.RESEARCH: "sec-research",
    Category.UTILITIES: "sec-productivity",
    Category.EDUCATIONAL: "sec-tutorials",
    Category.SELF_HELP: "sec-tutorials",
    Category.MISCELLANEOUS: "sec-productivity",
}


def categorize_repository_heuristic(
    name: str,
    description: str | None = None,
    topics: list[str] | None = None,
    language: str | None = None,
) -> Category:
    """
    Quick keyword categorization used when importing repositories.

    Unlike CategoryService this has no confidence: the first matching check
    wins and nothing matching means MISCELLANEOUS.
    """
    topics_lower = [t.lower() for t in topics or []]
    language_lower = (language or "").lower()
    text = " ".join([name.lower(), (description or "").lower(), *topics_lower])

    for category, keywords, exact_topics, exact_languages in _HEURISTIC_CHECKS:
        if any(keyword in text for keyword in keywords):
            return category
        if any(topic in topics_lower for topic in exact_topics):
            return category
        if language_lower and language_lower in exact_languages:
            return category
    return Category.MISCELLANEOUS


def _license(raw: Any) -> License | None:
    if not isinstance(raw, Mapping):
        return None
    return License.from_dict(raw)


def transform_repository(
    raw: Mapping[str, Any],
    readme: str | None = None,
    section_id: str | None = None,
) -> Entity:
    """
    Build an entity from a GitHub repository payload.

    Args:
        raw: Repository JSON as returned by the GitHub REST API
        readme: Decoded README text, if fetched
        section_id: Explicit section (derived from the category if omitted)
    """
    name = raw.get("name") or ""
    description = raw.get("description") or None
    topics = list(raw.get("topics") or [])
    language = raw.get("language") or None
    owner = (raw.get("owner") or {}).get("login") or ""

    category = categorize_repository_heuristic(name, description, topics, language)
    info = CATEGORY_INFO[category]

    meta = RepositoryMeta(
        language=language,
        topics=topics,
        stars=raw.get("stargazers_count") or 0,
        forks=raw.get("forks_count") or 0,
        watchers=raw.get("watchers_count") or 0,
        open_issues=raw.get("open_issues_count") or 0,
        is_private=bool(raw.get("private")),
        is_archived=bool(raw.get("archived")),
        license=_license(raw.get("license")),
        created_at=raw.get("created_at"),
        updated_at=raw.get("updated_at"),
        pushed_at=raw.get("pushed_at"),
        github_id=raw.get("id"),
        url=raw.get("html_url"),
        default_branch=raw.get("default_branch"),
        size=raw.get("size") or 0,
    )

    return Entity(
        id=f"book-{raw.get('id')}",
        title=name,
        author=owner,
        category=category,
        subtitle=description,
        description=description,
        tags=list(topics),
        is_public=not raw.get("private", False),
        readme=readme,
        section_id=section_id or IMPORT_SECTION_IDS[category],
        emoji=info.icon,
        color=info.color,
        meta=meta,
    )
