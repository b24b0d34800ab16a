"""Display metadata for every taxonomy category."""

from dataclasses import dataclass

from shelf_mcp.catalog.models import Category


@dataclass(frozen=True)
class CategoryInfo:
    """Human-facing description of a category."""

    id: Category
    name: str
    description: str
    color: str  # gradient classes used by the shelf UI
    icon: str


CATEGORY_INFO: dict[Category, CategoryInfo] = {
    info.id: info
    for info in (
        CategoryInfo(
            Category.GAMES,
            "Games & Interactive",
            "Video games, interactive experiences, and game engines",
            "from-purple-500 to-pink-500",
            "🎮",
        ),
        CategoryInfo(
            Category.WEB_APPS,
            "Web Applications",
            "React, Vue, Angular, and other web applications",
            "from-blue-500 to-indigo-600",
            "🌐",
        ),
        CategoryInfo(
            Category.MOBILE_APPS,
            "Mobile Applications",
            "iOS, Android, React Native, and Flutter apps",
            "from-green-500 to-emerald-600",
            "📱",
        ),
        CategoryInfo(
            Category.SOCIAL_MEDIA,
            "Social Media & Communication",
            "Social platforms, chat apps, and communication tools",
            "from-cyan-500 to-blue-500",
            "💬",
        ),
        CategoryInfo(
            Category.PRODUCTIVITY,
            "Productivity & Tools",
            "Productivity apps, developer tools, and utilities",
            "from-amber-500 to-orange-500",
            "⚡",
        ),
        CategoryInfo(
            Category.AI_ML,
            "AI & Machine Learning",
            "AI models, machine learning projects, and data science",
            "from-violet-500 to-purple-600",
            "🤖",
        ),
        CategoryInfo(
            Category.UI_DESIGN,
            "UI/UX Design",
            "User interface designs, wireframes, and prototypes",
            "from-pink-500 to-rose-500",
            "🎨",
        ),
        CategoryInfo(
            Category.GRAPHICS,
            "Graphics & Visual Arts",
            "Illustrations, rendering, animation, and visual assets",
            "from-red-500 to-pink-500",
            "🖼️",
        ),
        CategoryInfo(
            Category.TUTORIALS,
            "Tutorials & Guides",
            "Step-by-step tutorials and learning walkthroughs",
            "from-emerald-500 to-green-600",
            "📚",
        ),
        CategoryInfo(
            Category.DOCUMENTATION,
            "Technical Documentation",
            "API docs, technical specifications, and references",
            "from-teal-500 to-cyan-600",
            "📖",
        ),
        CategoryInfo(
            Category.BUSINESS,
            "Business & Strategy",
            "Business plans, market analysis, and strategic documents",
            "from-yellow-500 to-amber-500",
            "💼",
        ),
        CategoryInfo(
            Category.RESEARCH,
            "Research & Analysis",
            "Research papers, data analysis, and academic work",
            "from-slate-500 to-gray-600",
            "🔬",
        ),
        CategoryInfo(
            Category.UTILITIES,
            "Utilities",
            "Helper libraries, frameworks, and development tools",
            "from-indigo-500 to-blue-600",
            "🛠️",
        ),
        CategoryInfo(
            Category.EDUCATIONAL,
            "Educational",
            "Academic projects, coursework, and learning materials",
            "from-lime-500 to-green-500",
            "🎓",
        ),
        CategoryInfo(
            Category.SELF_HELP,
            "Self Help",
            "Personal development and self-improvement resources",
            "from-orange-500 to-red-500",
            "💡",
        ),
        CategoryInfo(
            Category.MISCELLANEOUS,
            "Miscellaneous",
            "Other projects that don't fit into specific categories",
            "from-gray-500 to-slate-600",
            "📦",
        ),
    )
}

_missing = set(Category) - set(CATEGORY_INFO)
if _missing:
    raise RuntimeError(f"Categories without display metadata: {sorted(c.value for c in _missing)}")


def get_categories() -> list[CategoryInfo]:
    """All categories in taxonomy order."""
    return [CATEGORY_INFO[category] for category in Category]
