"""Per-platform sponsorship analysis: scan -> detect promos -> score -> evaluate."""

from __future__ import annotations

import logging

from sponsor_watch.models import ContentItem, PlatformAnalysis
from sponsor_watch.scanners import content_scanner, promo_detector
from sponsor_watch.scoring import compliance, risk_scorer
from sponsor_watch.taxonomy import KeywordTaxonomy

logger = logging.getLogger(__name__)


def analyze_platform(items: list[ContentItem], taxonomy: KeywordTaxonomy) -> PlatformAnalysis:
    """
    Build the PlatformAnalysis of one athlete on one platform from the
    content fetched for it.
    """
    evidence = content_scanner.scan(items, taxonomy)

    # Sponsors keep first-seen order; mentions count every hit
    sponsors: dict[str, None] = {}
    total_mentions = 0
    for item in evidence:
        for match in item.sponsor_matches:
            sponsors.setdefault(match.keyword, None)
            total_mentions += 1

    promo_patterns = promo_detector.detect(items)
    categories = risk_scorer.categories_found(evidence)
    score, level = risk_scorer.score(
        unique_sponsors=list(sponsors),
        total_mentions=total_mentions,
        categories_found=categories,
        promo_patterns=promo_patterns,
        videos_analyzed=len(items),
    )

    analysis = PlatformAnalysis(
        videos_analyzed=len(items),
        videos_with_sponsors=len(evidence),
        unique_sponsors=tuple(sponsors),
        total_mentions=total_mentions,
        evidence=tuple(evidence),
        promo_patterns=tuple(promo_patterns),
        risk_score=score,
        risk_level=level,
        risk_factors=tuple(risk_scorer.identify_risk_factors(evidence, promo_patterns)),
        has_disclosure=compliance.has_disclosure(evidence),
        compliance_score=compliance.compliance_score(evidence),
        categories_detected=tuple(categories),
    )
    logger.debug(
        "[ANALYZE] items=%s with_sponsors=%s sponsors=%s score=%s (%s)",
        analysis.videos_analyzed,
        analysis.videos_with_sponsors,
        len(analysis.unique_sponsors),
        analysis.risk_score,
        analysis.risk_level,
    )
    return analysis
