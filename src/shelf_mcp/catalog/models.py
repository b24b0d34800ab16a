"""Data models for the catalog."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class Category(str, Enum):
    """Fixed project taxonomy. Every entity carries exactly one of these."""

    GAMES = "games"
    WEB_APPS = "web-apps"
    MOBILE_APPS = "mobile-apps"
    SOCIAL_MEDIA = "social-media"
    PRODUCTIVITY = "productivity"
    AI_ML = "ai-ml"
    UI_DESIGN = "ui-design"
    GRAPHICS = "graphics"
    TUTORIALS = "tutorials"
    DOCUMENTATION = "documentation"
    BUSINESS = "business"
    RESEARCH = "research"
    UTILITIES = "utilities"
    EDUCATIONAL = "educational"
    SELF_HELP = "self-help"
    MISCELLANEOUS = "miscellaneous"

    @classmethod
    def parse(cls, value: "Category | str | None") -> "Category":
        """Resolve a category from its value or member name.

        Unknown or empty values resolve to MISCELLANEOUS.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.MISCELLANEOUS
        text = str(value).strip()
        try:
            return cls(text.lower())
        except ValueError:
            pass
        member = cls.__members__.get(text.upper().replace("-", "_"))
        return member if member is not None else cls.MISCELLANEOUS


def coerce_datetime(value: Any) -> datetime | None:
    """Normalize a timestamp to an aware UTC datetime.

    Accepts datetimes, dates (YAML parses bare dates this way) and ISO-8601
    strings. Naive values are assumed to be UTC. Unparseable values give None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            result = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result


def coerce_count(value: Any, name: str = "count") -> int:
    """Normalize a repository counter. Missing or empty values are 0.

    Raises:
        ValueError: If the value is not a number
    """
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid {name} value: {value!r}") from e


def string_list(values: Any) -> list[str]:
    """Normalize tags or topics; a single string becomes a one-item list."""
    if not values:
        return []
    if isinstance(values, str):
        return [values]
    return [str(value) for value in values]


@dataclass
class License:
    """Repository license."""

    key: str = ""
    name: str = ""
    spdx_id: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "License":
        """Build from a GitHub license object, ignoring url, node_id and the like."""
        return cls(
            key=data.get("key") or "",
            name=data.get("name") or "",
            spdx_id=data.get("spdx_id"),
        )


_COUNT_FIELDS = ("stars", "forks", "watchers", "open_issues", "size")


@dataclass
class RepositoryMeta:
    """Metadata bundle carried over from the source repository."""

    language: str | None = None
    topics: list[str] = field(default_factory=list)
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    open_issues: int = 0
    is_private: bool = False
    is_archived: bool = False
    license: License | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pushed_at: datetime | None = None
    github_id: int | None = None
    url: str | None = None
    default_branch: str | None = None
    size: int = 0  # KB, as reported by GitHub

    def __post_init__(self) -> None:
        self.created_at = coerce_datetime(self.created_at)
        self.updated_at = coerce_datetime(self.updated_at)
        self.pushed_at = coerce_datetime(self.pushed_at)
        if isinstance(self.license, Mapping):
            self.license = License.from_dict(self.license)
        self.topics = string_list(self.topics)
        for name in _COUNT_FIELDS:
            setattr(self, name, coerce_count(getattr(self, name), name))


@dataclass
class Entity:
    """A cataloged project ("book") subject to search, ranking and categorization."""

    id: str
    title: str
    author: str = ""
    category: Category = Category.MISCELLANEOUS
    subtitle: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    is_public: bool = True
    readme: str | None = None
    section_id: str | None = None
    emoji: str | None = None
    color: str | None = None
    categorization_confidence: float | None = None
    meta: RepositoryMeta | None = None

    def __post_init__(self) -> None:
        self.category = Category.parse(self.category)
        self.tags = string_list(self.tags)

    @property
    def language(self) -> str | None:
        return self.meta.language if self.meta else None

    @property
    def topics(self) -> list[str]:
        return self.meta.topics if self.meta else []

    @property
    def stars(self) -> int:
        return self.meta.stars if self.meta else 0

    @property
    def forks(self) -> int:
        return self.meta.forks if self.meta else 0

    @property
    def created_at(self) -> datetime | None:
        return self.meta.created_at if self.meta else None

    @property
    def updated_at(self) -> datetime | None:
        """Last update time, falling back to creation time."""
        if self.meta is None:
            return None
        return self.meta.updated_at or self.meta.created_at

    def to_dict(self, include_readme: bool = True) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        data = _jsonable(asdict(self))
        if not include_readme:
            data.pop("readme", None)
            data["has_readme"] = bool(self.readme)
        return data


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass
class Section:
    """A named organizational bucket on the shelf."""

    id: str
    name: str
    color: str
    order: int


@dataclass
class RepositoryRecord:
    """Repository-like input to the categorization engine."""

    name: str
    description: str | None = None
    language: str | None = None
    topics: list[str] = field(default_factory=list)
    files: list[str] | None = None
    readme: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RepositoryRecord":
        return cls(
            name=str(data.get("name") or ""),
            description=data.get("description"),
            language=data.get("language"),
            topics=string_list(data.get("topics")),
            files=string_list(data.get("files")) or None,
            readme=data.get("readme"),
        )

    @classmethod
    def from_entity(cls, entity: Entity) -> "RepositoryRecord":
        return cls(
            name=entity.title,
            description=entity.description or entity.subtitle,
            language=entity.language,
            topics=list(entity.topics) or list(entity.tags),
            readme=entity.readme,
        )


@dataclass
class CategorizationResult:
    """Outcome of scoring a repository against the rule catalog."""

    category: Category
    confidence: float
    matched_rules: list[str] = field(default_factory=list)


# Sort keys understood by the search engine. Anything else falls back to relevance.
SORT_RELEVANCE = "relevance"
SORT_DATE = "date"
SORT_POPULARITY = "popularity"
SORT_ALPHABETICAL = "alphabetical"
SORT_KEYS = (SORT_RELEVANCE, SORT_DATE, SORT_POPULARITY, SORT_ALPHABETICAL)


@dataclass
class DateRange:
    """Inclusive creation-date window."""

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        self.start = coerce_datetime(self.start)
        self.end = coerce_datetime(self.end)


@dataclass
class SearchFilters:
    """Filter set applied conjunctively to search results.

    Empty lists and None values mean "no filter" for that dimension.
    """

    categories: list[Category] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    date_range: DateRange | None = None
    visibility: str | None = None  # public, private or all
    sort_by: str = SORT_RELEVANCE
    has_readme: bool | None = None
    min_stars: int | None = None


@dataclass
class SearchQuery:
    """A search request."""

    text: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    limit: int | None = None
    offset: int | None = None


@dataclass
class SearchFacets:
    """Per-dimension counts over the filtered result set."""

    categories: dict[str, int] = field(default_factory=dict)
    authors: dict[str, int] = field(default_factory=dict)
    languages: dict[str, int] = field(default_factory=dict)
    years: dict[str, int] = field(default_factory=dict)


@dataclass
class SearchResult:
    """A page of ranked results with facets and suggestions."""

    entities: list[Entity]
    total_count: int
    facets: SearchFacets
    suggestions: list[str]
    search_time_ms: float


@dataclass
class FilterOptions:
    """Distinct filter values present across the whole collection."""

    categories: list[Category]
    authors: list[str]
    languages: list[str]
    years: list[int]
