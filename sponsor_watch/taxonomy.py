"""Keyword taxonomy: maps sponsor keywords to gambling risk categories."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable

from config import DEFAULT_CATEGORY, KEYWORD_CATEGORIES, KeywordCategory
from sponsor_watch.exceptions import TaxonomyError

logger = logging.getLogger(__name__)


def _normalize_keywords(keywords: Iterable[str]) -> tuple[str, ...]:
    """Lowercase and dedupe keywords, keeping declaration order."""
    seen: set[str] = set()
    result: list[str] = []
    for keyword in keywords:
        kw = keyword.strip().lower()
        if not kw or kw in seen:
            continue
        seen.add(kw)
        result.append(kw)
    return tuple(result)


class KeywordTaxonomy:
    """
    Immutable, ordered table of keyword categories.

    Build it once and pass it to the pipeline stages; `default_taxonomy()`
    returns the process-wide instance built from `config.KEYWORD_CATEGORIES`.
    """

    def __init__(
        self,
        categories: Iterable[KeywordCategory],
        default: KeywordCategory = DEFAULT_CATEGORY,
    ):
        normalized: list[KeywordCategory] = []
        seen_ids: set[str] = {default.id}
        for category in categories:
            if category.id in seen_ids:
                raise TaxonomyError(f"duplicate category id: {category.id}")
            if category.severity not in (1, 2, 3):
                raise TaxonomyError(f"category {category.id} has invalid severity {category.severity}")
            seen_ids.add(category.id)
            normalized.append(
                KeywordCategory(
                    id=category.id,
                    display_name=category.display_name,
                    severity=category.severity,
                    keywords=_normalize_keywords(category.keywords),
                    legal_concern=category.legal_concern,
                    minor_impact=category.minor_impact,
                    description=category.description,
                )
            )
        if default.severity != 1:
            raise TaxonomyError("default category must have severity 1")

        self._categories: tuple[KeywordCategory, ...] = tuple(normalized)
        self._by_id: dict[str, KeywordCategory] = {c.id: c for c in normalized}
        self._by_id[default.id] = default
        self.default = default

    @property
    def categories(self) -> tuple[KeywordCategory, ...]:
        """Categories in declaration order (default category excluded)."""
        return self._categories

    def __iter__(self):
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def get(self, category_id: str) -> KeywordCategory:
        """Look up a category by id, falling back to the default category."""
        return self._by_id.get(category_id, self.default)

    def categorize(self, keyword: str) -> KeywordCategory:
        """
        Return the first category (declaration order) that has a keyword
        contained in `keyword`. Case-insensitive; never raises.
        """
        if not keyword or not isinstance(keyword, str):
            return self.default
        text = keyword.lower()
        for category in self._categories:
            if any(kw in text for kw in category.keywords):
                return category
        return self.default


@lru_cache(maxsize=1)
def default_taxonomy() -> KeywordTaxonomy:
    """Process-wide taxonomy built from the configured keyword table."""
    taxonomy = KeywordTaxonomy(KEYWORD_CATEGORIES)
    logger.debug(
        "[TAXONOMY] Loaded %s categories, %s keywords",
        len(taxonomy),
        sum(len(c.keywords) for c in taxonomy),
    )
    return taxonomy
