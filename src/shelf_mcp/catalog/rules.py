"""Categorization rules: weighted keyword, file, language and topic signals."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from shelf_mcp.catalog.models import Category


@dataclass(frozen=True)
class CategoryRule:
    """
    Signals that point a repository at one category.

    confidence is the rule-level multiplier in (0, 1]: how distinctive the
    signals are for the category.
    """

    name: str
    category: Category
    confidence: float
    keywords: tuple[str, ...] = ()
    file_patterns: tuple[str, ...] = ()
    language_patterns: tuple[str, ...] = ()
    topic_patterns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0 < self.confidence <= 1:
            raise ValueError(
                f"Rule {self.name!r}: confidence must be in (0, 1], got {self.confidence}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CategoryRule":
        """Build a rule from a mapping (as loaded from YAML).

        Raises:
            ValueError: If the category is unknown or the confidence is out of range
        """
        raw_category = str(data.get("category") or "")
        category = Category.parse(raw_category)
        if category is Category.MISCELLANEOUS and raw_category.lower() != Category.MISCELLANEOUS.value:
            raise ValueError(f"Unknown category: {raw_category!r}")

        return cls(
            name=str(data.get("name") or category.value),
            category=category,
            confidence=float(data.get("confidence", 0)),
            keywords=_string_tuple(data.get("keywords")),
            file_patterns=_string_tuple(data.get("file_patterns")),
            language_patterns=_string_tuple(data.get("language_patterns")),
            topic_patterns=_string_tuple(data.get("topic_patterns")),
        )


def _string_tuple(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


DEFAULT_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        name="games",
        category=Category.GAMES,
        confidence=0.9,
        keywords=(
            "game", "gaming", "unity", "unreal", "godot", "phaser", "pygame", "canvas",
            "webgl", "three.js", "babylonjs", "arcade", "puzzle", "rpg", "platformer",
            "shooter", "strategy", "simulation", "multiplayer", "gamedev",
        ),
        file_patterns=(
            "*.unity", "*.cs", "*.cpp", "*.h", "*.hlsl", "*.shader", "*.gd", "*.tscn", "*.godot",
        ),
        language_patterns=("c#", "c++", "gdscript", "lua"),
        topic_patterns=(
            "game", "gaming", "unity", "unreal", "godot", "phaser", "gamedev",
            "game-development", "indie-game", "html5-game",
        ),
    ),
    CategoryRule(
        name="web-apps",
        category=Category.WEB_APPS,
        confidence=0.85,
        keywords=(
            "web", "website", "webapp", "react", "vue", "angular", "svelte", "nextjs", "nuxt",
            "gatsby", "frontend", "backend", "fullstack", "spa", "pwa", "dashboard", "admin",
            "cms", "blog", "ecommerce", "portfolio",
        ),
        file_patterns=(
            "package.json", "*.jsx", "*.tsx", "*.vue", "*.svelte", "index.html",
            "webpack.config.js", "vite.config.js", "next.config.js",
        ),
        language_patterns=("javascript", "typescript", "html", "css", "scss", "sass"),
        topic_patterns=(
            "react", "vue", "angular", "svelte", "nextjs", "web", "frontend", "backend",
            "fullstack", "webapp", "website", "spa", "pwa",
        ),
    ),
    CategoryRule(
        name="mobile-apps",
        category=Category.MOBILE_APPS,
        confidence=0.9,
        keywords=(
            "mobile", "ios", "android", "react-native", "flutter", "xamarin", "cordova",
            "phonegap", "ionic", "app", "swift", "kotlin", "objective-c", "dart",
        ),
        file_patterns=(
            "*.swift", "*.kt", "*.java", "*.dart", "*.m", "*.mm", "pubspec.yaml", "Podfile",
            "build.gradle", "AndroidManifest.xml", "Info.plist",
        ),
        language_patterns=("swift", "kotlin", "java", "dart", "objective-c"),
        topic_patterns=(
            "ios", "android", "mobile", "react-native", "flutter", "swift", "kotlin",
            "mobile-app", "app",
        ),
    ),
    # Flutter is the one mobile stack with its own language; a narrow rule
    # lets a Dart repository reach a confident match without native signals.
    CategoryRule(
        name="mobile-cross-platform",
        category=Category.MOBILE_APPS,
        confidence=0.95,
        keywords=("flutter", "dart", "widget", "app"),
        file_patterns=("pubspec.yaml", "*.dart"),
        language_patterns=("dart",),
        topic_patterns=("flutter", "dart", "mobile", "cross-platform"),
    ),
    CategoryRule(
        name="ai-ml",
        category=Category.AI_ML,
        confidence=0.95,
        keywords=(
            "ai", "ml", "machine-learning", "deep-learning", "neural", "tensorflow", "pytorch",
            "keras", "scikit", "pandas", "numpy", "opencv", "nlp", "computer-vision",
            "data-science", "artificial-intelligence", "model", "training", "dataset",
            "algorithm",
        ),
        file_patterns=(
            "*.py", "*.ipynb", "*.h5", "*.pkl", "*.pt", "*.pth", "requirements.txt",
            "environment.yml",
        ),
        language_patterns=("python", "r", "julia"),
        topic_patterns=(
            "machine-learning", "deep-learning", "ai", "artificial-intelligence", "tensorflow",
            "pytorch", "data-science", "nlp", "computer-vision", "neural-network",
        ),
    ),
    CategoryRule(
        name="social-media",
        category=Category.SOCIAL_MEDIA,
        confidence=0.8,
        keywords=(
            "social", "chat", "messaging", "communication", "forum", "community", "discord",
            "slack", "telegram", "whatsapp", "twitter", "facebook", "instagram",
            "social-network", "real-time", "websocket", "socket.io",
        ),
        file_patterns=("*.js", "*.ts", "package.json"),
        language_patterns=("javascript", "typescript", "go", "elixir"),
        topic_patterns=(
            "social", "chat", "messaging", "communication", "discord-bot", "telegram-bot",
            "social-media", "real-time",
        ),
    ),
    CategoryRule(
        name="productivity",
        category=Category.PRODUCTIVITY,
        confidence=0.7,
        keywords=(
            "productivity", "tool", "utility", "cli", "automation", "workflow", "task", "todo",
            "calendar", "note", "editor", "ide", "extension", "plugin", "script", "helper",
            "converter", "generator", "organizer",
        ),
        file_patterns=("*.sh", "*.bat", "*.ps1", "Makefile", "Dockerfile", "*.py", "*.js", "*.go"),
        language_patterns=("python", "go", "rust", "bash", "powershell"),
        topic_patterns=(
            "cli", "tool", "utility", "automation", "productivity", "workflow", "script", "helper",
        ),
    ),
    CategoryRule(
        name="ui-design",
        category=Category.UI_DESIGN,
        confidence=0.8,
        keywords=(
            "design", "ui", "ux", "interface", "component", "design-system", "figma", "sketch",
            "adobe", "prototype", "wireframe", "mockup", "style-guide", "brand", "theme", "css",
            "sass", "styled-components",
        ),
        file_patterns=(
            "*.css", "*.scss", "*.sass", "*.less", "*.styl", "*.fig", "*.sketch", "*.psd", "*.ai",
        ),
        language_patterns=("css", "scss", "sass"),
        topic_patterns=(
            "design", "ui", "ux", "design-system", "components", "css", "styling", "theme",
        ),
    ),
    CategoryRule(
        name="graphics",
        category=Category.GRAPHICS,
        confidence=0.85,
        keywords=(
            "graphics", "visual", "art", "image", "photo", "video", "animation", "render", "3d",
            "blender", "maya", "photoshop", "illustrator", "after-effects", "cinema4d", "opengl",
            "vulkan", "directx",
        ),
        file_patterns=(
            "*.blend", "*.ma", "*.mb", "*.max", "*.c4d", "*.psd", "*.ai", "*.svg", "*.png",
            "*.jpg", "*.gif", "*.mp4", "*.mov",
        ),
        language_patterns=("glsl", "hlsl", "c++", "c#"),
        topic_patterns=(
            "graphics", "visual", "art", "3d", "animation", "rendering", "blender", "opengl",
        ),
    ),
    CategoryRule(
        name="tutorials",
        category=Category.TUTORIALS,
        confidence=0.75,
        keywords=(
            "tutorial", "guide", "learn", "course", "lesson", "example", "demo", "sample",
            "walkthrough", "how-to", "step-by-step", "beginner", "introduction",
            "getting-started", "workshop",
        ),
        file_patterns=("README.md", "*.md", "tutorial.md", "guide.md", "TUTORIAL.md", "GUIDE.md"),
        language_patterns=("markdown",),
        topic_patterns=(
            "tutorial", "guide", "learning", "course", "example", "demo", "education", "how-to",
        ),
    ),
    CategoryRule(
        name="documentation",
        category=Category.DOCUMENTATION,
        confidence=0.8,
        keywords=(
            "documentation", "docs", "api", "reference", "manual", "specification", "spec",
            "wiki", "knowledge", "help", "faq", "changelog", "release-notes",
        ),
        file_patterns=(
            "docs/", "documentation/", "*.md", "API.md", "CHANGELOG.md", "CONTRIBUTING.md",
            "LICENSE.md",
        ),
        language_patterns=("markdown",),
        topic_patterns=("documentation", "docs", "api", "reference", "manual", "wiki"),
    ),
    CategoryRule(
        name="business",
        category=Category.BUSINESS,
        confidence=0.7,
        keywords=(
            "business", "strategy", "plan", "market", "analysis", "finance", "accounting", "crm",
            "erp", "sales", "marketing", "startup", "entrepreneur", "investment", "revenue",
        ),
        file_patterns=("*.xlsx", "*.csv", "*.pdf", "business-plan.md", "strategy.md"),
        topic_patterns=("business", "strategy", "finance", "marketing", "startup", "entrepreneur"),
    ),
    CategoryRule(
        name="research",
        category=Category.RESEARCH,
        confidence=0.8,
        keywords=(
            "research", "analysis", "study", "paper", "thesis", "academic", "science",
            "experiment", "data", "statistics", "survey", "report", "findings", "methodology",
        ),
        file_patterns=("*.tex", "*.bib", "*.pdf", "*.csv", "*.xlsx", "*.r", "*.py", "*.ipynb"),
        language_patterns=("r", "python", "latex"),
        topic_patterns=(
            "research", "analysis", "academic", "science", "data-analysis", "statistics",
        ),
    ),
    CategoryRule(
        name="educational",
        category=Category.EDUCATIONAL,
        confidence=0.7,
        keywords=(
            "education", "school", "university", "college", "student", "teacher", "curriculum",
            "assignment", "homework", "project", "class", "lecture", "quiz", "exam",
        ),
        file_patterns=("*.md", "*.pdf", "*.ppt", "*.pptx"),
        topic_patterns=("education", "school", "university", "learning", "student", "curriculum"),
    ),
    CategoryRule(
        name="utilities",
        category=Category.UTILITIES,
        confidence=0.6,
        keywords=(
            "utility", "util", "helper", "library", "framework", "package", "module",
            "component", "boilerplate", "template", "starter", "scaffold",
        ),
        file_patterns=("package.json", "setup.py", "Cargo.toml", "go.mod", "composer.json"),
        topic_patterns=("utility", "library", "framework", "package", "boilerplate", "template"),
    ),
)
