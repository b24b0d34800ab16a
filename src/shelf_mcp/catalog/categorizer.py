"""Rule-based repository categorization with normalized confidence."""

import functools
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from shelf_mcp.catalog.models import CategorizationResult, Category, RepositoryRecord
from shelf_mcp.catalog.rules import DEFAULT_RULES, CategoryRule
from shelf_mcp.catalog.taxonomy import CategoryInfo, get_categories

logger = logging.getLogger(__name__)

# Share of the rule score carried by each signal kind
KEYWORD_SLICE = 0.4
LANGUAGE_SLICE = 0.3
TOPIC_SLICE = 0.2
FILE_SLICE = 0.1

MIN_CONFIDENCE = 0.3
FALLBACK_CONFIDENCE = 0.5
FALLBACK_MARKER = "default-fallback"


@functools.lru_cache(maxsize=512)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    parts = (re.escape(part) for part in pattern.split("*"))
    return re.compile(".*".join(parts))


def matches_file_pattern(filename: str, pattern: str) -> bool:
    """
    Match a file path against a rule pattern.

    Patterns containing "*" are globs where "*" matches any sequence,
    including path separators. Other patterns match as substrings.
    """
    if "*" in pattern:
        return _glob_regex(pattern).fullmatch(filename) is not None
    return pattern in filename


def _keyword_text(repo: RepositoryRecord) -> str:
    return f"{repo.name} {repo.description or ''} {repo.readme or ''}".lower()


def _language_matches(repo: RepositoryRecord, rule: CategoryRule) -> bool:
    if not repo.language:
        return False
    language = repo.language.lower()
    return any(pattern.lower() in language for pattern in rule.language_patterns)


def _matching_topics(repo: RepositoryRecord, rule: CategoryRule) -> list[str]:
    topics = [topic.lower() for topic in repo.topics]
    return [
        pattern
        for pattern in rule.topic_patterns
        if any(pattern.lower() in topic for topic in topics)
    ]


def _matching_files(repo: RepositoryRecord, rule: CategoryRule) -> list[str]:
    files = repo.files or []
    return [
        pattern
        for pattern in rule.file_patterns
        if any(matches_file_pattern(name, pattern) for name in files)
    ]


class CategoryService:
    """
    Assigns a category to a repository-like record by scoring it against an
    ordered rule catalog.

    Each rule yields a normalized score in [0, 1] from up to four signal
    slices, scaled by the rule's own confidence. The best rule wins unless it
    falls under MIN_CONFIDENCE, in which case the record is filed under
    MISCELLANEOUS with FALLBACK_CONFIDENCE.
    """

    def __init__(self, rules: Iterable[CategoryRule] | None = None):
        self._rules: tuple[CategoryRule, ...] = tuple(
            DEFAULT_RULES if rules is None else rules
        )

    @property
    def rules(self) -> tuple[CategoryRule, ...]:
        return self._rules

    def replace_rules(self, rules: Iterable[CategoryRule]) -> None:
        """Swap the whole rule catalog."""
        self._rules = tuple(rules)
        logger.info("Category rules replaced: %d rules", len(self._rules))

    def get_categories(self) -> list[CategoryInfo]:
        return get_categories()

    def score_rule(self, repo: RepositoryRecord, rule: CategoryRule) -> float:
        """
        Normalized score of one rule against a record, before the rule's
        confidence multiplier.

        A slice counts toward the maximum only when the rule declares patterns
        of that kind and the record carries that kind of data. Keywords count
        whenever the rule declares any.
        """
        score = 0.0
        max_score = 0.0

        if rule.keywords:
            text = _keyword_text(repo)
            hits = sum(1 for keyword in rule.keywords if keyword.lower() in text)
            score += hits / len(rule.keywords) * KEYWORD_SLICE
            max_score += KEYWORD_SLICE

        if rule.language_patterns and repo.language:
            if _language_matches(repo, rule):
                score += LANGUAGE_SLICE
            max_score += LANGUAGE_SLICE

        if rule.topic_patterns and repo.topics:
            hits = len(_matching_topics(repo, rule))
            score += hits / len(rule.topic_patterns) * TOPIC_SLICE
            max_score += TOPIC_SLICE

        if rule.file_patterns and repo.files:
            hits = len(_matching_files(repo, rule))
            score += hits / len(rule.file_patterns) * FILE_SLICE
            max_score += FILE_SLICE

        return score / max_score if max_score > 0 else 0.0

    def matched_signals(self, repo: RepositoryRecord, rule: CategoryRule) -> list[str]:
        """Describe which signals of a rule fired, e.g. "keyword:react"."""
        text = _keyword_text(repo)
        matches = [f"keyword:{k}" for k in rule.keywords if k.lower() in text]
        if _language_matches(repo, rule):
            matches.append(f"language:{repo.language}")
        matches.extend(f"topic:{pattern}" for pattern in _matching_topics(repo, rule))
        matches.extend(f"file:{pattern}" for pattern in _matching_files(repo, rule))
        return matches

    def categorize(self, repo: RepositoryRecord | Mapping[str, Any]) -> CategorizationResult:
        """
        Categorize a repository.

        Args:
            repo: A RepositoryRecord or a mapping with name, description,
                language, topics, files and readme keys

        Returns:
            The best-scoring category with its confidence and matched signals
        """
        if isinstance(repo, Mapping):
            repo = RepositoryRecord.from_dict(repo)

        candidates: list[CategorizationResult] = []
        for rule in self._rules:
            score = self.score_rule(repo, rule)
            if score > 0:
                candidates.append(
                    CategorizationResult(
                        category=rule.category,
                        confidence=min(1.0, score * rule.confidence),
                        matched_rules=self.matched_signals(repo, rule),
                    )
                )

        # Stable sort keeps catalog order among equal scores
        candidates.sort(key=lambda result: result.confidence, reverse=True)

        if not candidates or candidates[0].confidence < MIN_CONFIDENCE:
            logger.debug(
                "No confident category for %r (best %.2f), using %s",
                repo.name,
                candidates[0].confidence if candidates else 0.0,
                Category.MISCELLANEOUS.value,
            )
            return CategorizationResult(
                category=Category.MISCELLANEOUS,
                confidence=FALLBACK_CONFIDENCE,
                matched_rules=[FALLBACK_MARKER],
            )

        return candidates[0]
