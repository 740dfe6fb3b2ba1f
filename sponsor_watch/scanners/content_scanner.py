"""Keyword scanner: finds sponsor keywords in content titles and descriptions."""

from __future__ import annotations

import logging

from sponsor_watch.models import ContentItem, Evidence, SponsorMatch
from sponsor_watch.taxonomy import KeywordTaxonomy

logger = logging.getLogger(__name__)

CONTEXT_WINDOW = 30


def normalize_text(item: ContentItem) -> str:
    """Title and description joined by a space, lowercased."""
    return f"{item.title or ''} {item.description or ''}".lower()


def extract_context(text: str, keyword: str, window: int = CONTEXT_WINDOW) -> str:
    """Text around the first occurrence of `keyword`, clamped to the text bounds."""
    index = text.find(keyword)
    if index < 0:
        return ""
    start = max(0, index - window)
    end = min(len(text), index + len(keyword) + window)
    return text[start:end]


def scan_item(item: ContentItem, taxonomy: KeywordTaxonomy) -> list[SponsorMatch]:
    """
    All keyword hits in one content item.
    Every category and every keyword is checked; a single item may match
    several keywords of several categories.
    """
    text = normalize_text(item)
    matches: list[SponsorMatch] = []
    for category in taxonomy:
        for keyword in category.keywords:
            if keyword in text:
                matches.append(
                    SponsorMatch(
                        keyword=keyword,
                        category_id=category.id,
                        context=extract_context(text, keyword),
                    )
                )
    return matches


def scan(items: list[ContentItem], taxonomy: KeywordTaxonomy) -> list[Evidence]:
    """
    Scan content items and return one Evidence entry per item with at least
    one match, in input order.
    """
    evidence: list[Evidence] = []
    for item in items:
        matches = scan_item(item, taxonomy)
        if not matches:
            continue
        logger.debug(
            "[SCAN] %s matches in %s '%s'",
            len(matches),
            item.platform,
            item.title[:60],
        )
        evidence.append(Evidence(content_item=item, sponsor_matches=tuple(matches)))
    return evidence
