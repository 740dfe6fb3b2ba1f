"""Advertising disclosure checks and compliance scoring."""

from __future__ import annotations

from typing import Sequence

from config import (
    AD_DISCLOSURE_TAGS,
    DISCLOSURE_CATEGORY,
    MINOR_UNSUITABLE_CATEGORIES,
    RELATIONSHIP_DISCLOSURE_TERMS,
)
from sponsor_watch.models import Evidence, SponsorMatch
from sponsor_watch.scoring.risk_scorer import round_half_up


def _is_disclosed(item: Evidence) -> bool:
    return any(match.category_id == DISCLOSURE_CATEGORY for match in item.sponsor_matches)


def has_disclosure(evidence: Sequence[Evidence]) -> bool:
    """True if any match belongs to the disclosure category (#publi, #ad, parceria, ...)."""
    return any(_is_disclosed(item) for item in evidence)


def compliance_score(evidence: Sequence[Evidence]) -> int:
    """Percentage of evidence items carrying a disclosure marker; 100 for no evidence."""
    if not evidence:
        return 100
    disclosed = sum(1 for item in evidence if _is_disclosed(item))
    return round_half_up(100 * disclosed / len(evidence))


def identify_compliance_issues(match: SponsorMatch, content_title: str) -> list[str]:
    """Compliance problems of a single sponsor mention, judged from the content title."""
    issues: list[str] = []
    title = (content_title or "").lower()

    if not any(tag in title for tag in AD_DISCLOSURE_TAGS):
        issues.append("Missing advertising identification")

    if match.category_id in MINOR_UNSUITABLE_CATEGORIES:
        issues.append("Content unsuitable for minors")

    if not any(term in title for term in RELATIONSHIP_DISCLOSURE_TERMS):
        issues.append("Commercial relationship not disclosed")

    return issues
