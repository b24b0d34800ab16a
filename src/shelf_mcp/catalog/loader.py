"""Load entity catalogs and categorization rules from YAML files."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from shelf_mcp.catalog.models import Entity, RepositoryMeta
from shelf_mcp.catalog.rules import CategoryRule

logger = logging.getLogger(__name__)

_META_FIELDS = {
    "language",
    "topics",
    "stars",
    "forks",
    "watchers",
    "open_issues",
    "is_private",
    "is_archived",
    "license",
    "created_at",
    "updated_at",
    "pushed_at",
    "github_id",
    "url",
    "default_branch",
    "size",
}
_ENTITY_FIELDS = {
    "author",
    "category",
    "subtitle",
    "description",
    "tags",
    "is_public",
    "readme",
    "section_id",
    "emoji",
    "color",
    "categorization_confidence",
}


class CatalogError(Exception):
    """A catalog or rules file could not be read or parsed."""


def entity_from_dict(data: Mapping[str, Any]) -> Entity:
    """
    Build an entity from a mapping.

    Repository metadata may be nested under "meta" or given at the top level
    (language, topics, stars, created_at...). Unknown keys are ignored.

    Raises:
        ValueError: If id or title is missing
    """
    entity_id = data.get("id")
    title = data.get("title")
    if not entity_id or not title:
        raise ValueError("Entity requires both 'id' and 'title'")

    meta_data = dict(data.get("meta") or {})
    for key in _META_FIELDS & data.keys():
        meta_data.setdefault(key, data[key])
    meta_data = {key: value for key, value in meta_data.items() if key in _META_FIELDS}

    fields = {key: data[key] for key in _ENTITY_FIELDS & data.keys()}

    return Entity(
        id=str(entity_id),
        title=str(title),
        meta=RepositoryMeta(**meta_data) if meta_data else None,
        **fields,
    )


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}") from e


def _records(document: Any, key: str, path: Path) -> list[Any]:
    if document is None:
        return []
    if isinstance(document, Mapping):
        document = document.get(key) or []
    if not isinstance(document, list):
        raise CatalogError(f"{path}: expected a list or a mapping with '{key}'")
    return document


def load_catalog(path: Path | str) -> list[Entity]:
    """
    Load entities from a YAML (or JSON) catalog file.

    Invalid records are skipped with a warning.

    Raises:
        CatalogError: If the file cannot be read or is not a catalog
    """
    path = Path(path).expanduser()
    entities = []
    for position, record in enumerate(_records(_read_yaml(path), "entities", path)):
        if not isinstance(record, Mapping):
            logger.warning("Skipping entry %d in %s: not a mapping", position, path)
            continue
        try:
            entities.append(entity_from_dict(record))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping entry %d in %s: %s", position, path, e)

    logger.info("Loaded %d entities from %s", len(entities), path)
    return entities


def load_rules(path: Path | str) -> list[CategoryRule]:
    """
    Load categorization rules from a YAML file.

    Unlike catalogs, a single bad rule rejects the whole file: a partial rule
    set would silently change how everything is categorized.

    Raises:
        CatalogError: If the file cannot be read or any rule is invalid
    """
    path = Path(path).expanduser()
    rules = []
    for position, record in enumerate(_records(_read_yaml(path), "rules", path)):
        if not isinstance(record, Mapping):
            raise CatalogError(f"{path}: rule {position} is not a mapping")
        try:
            rules.append(CategoryRule.from_dict(record))
        except (TypeError, ValueError) as e:
            raise CatalogError(f"{path}: rule {position}: {e}") from e

    if not rules:
        raise CatalogError(f"{path}: no rules defined")

    logger.info("Loaded %d category rules from %s", len(rules), path)
    return rules
