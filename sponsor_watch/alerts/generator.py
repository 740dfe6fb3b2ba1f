"""
Alert generation (Alert Generator)
Turns per-athlete, per-platform sponsorship analyses into alert records.

Generation runs per athlete (optionally on a thread pool). Units return
unnumbered drafts; ids are assigned in a single pass after merging, so the
numbering never depends on which worker finished first.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone

from config import (
    AUDIENCE_BUCKETS,
    HIGH_RISK_CATEGORY_ID,
    HIGH_RISK_CATEGORY_NAME,
    HIGH_RISK_THRESHOLD,
    HOME_COUNTRY,
    PLATFORMS,
    TRANSPARENCY_CATEGORY_ID,
    TRANSPARENCY_CATEGORY_NAME,
    TRANSPARENCY_LEGAL_IMPLICATIONS,
)
from sponsor_watch.alerts.isolation import Outcome, attempt, collect
from sponsor_watch.exceptions import MalformedInputError
from sponsor_watch.models import (
    Alert,
    Athlete,
    AthleteSnapshot,
    Diagnostic,
    Evidence,
    PlatformAnalysis,
    SponsorMatch,
)
from sponsor_watch.scoring.compliance import identify_compliance_issues
from sponsor_watch.taxonomy import KeywordTaxonomy

logger = logging.getLogger(__name__)

SPONSOR_DETECTED = "sponsor_detected"
HIGH_RISK_SCORE = "high_risk_score"
TRANSPARENCY_VIOLATION = "transparency_violation"


def audience_bucket(total_followers: int) -> str:
    """Audience size label from the athlete's total follower count."""
    for lower_bound, label in AUDIENCE_BUCKETS:
        if total_followers > lower_bound:
            return label
    return "low"


def geographic_reach(athlete: Athlete) -> str:
    return "national" if athlete.playing_country == HOME_COUNTRY else "international"


def _sponsor_alert(
    athlete: Athlete,
    snapshot: AthleteSnapshot,
    platform: str,
    evidence: Evidence,
    match: SponsorMatch,
    taxonomy: KeywordTaxonomy,
    created_at: str,
) -> Alert:
    category = taxonomy.categorize(match.keyword)
    item = evidence.content_item
    return Alert(
        id=0,
        athlete=snapshot,
        platform=platform,
        type=SPONSOR_DETECTED,
        category=category.id,
        category_name=category.display_name,
        severity=category.severity,
        title=f"{athlete.display_name} - {category.display_name} detected",
        description=f'Sponsor "{match.keyword or "unknown"}" found on {platform}',
        evidence={
            "content_title": item.title,
            "content_id": item.id,
            "published_at": item.published_at,
            "keyword_found": match.keyword,
            "context": match.context,
            "category_type": match.category_id,
        },
        risk_assessment={
            "legal_concern": category.legal_concern,
            "minor_impact": category.minor_impact,
            "audience_size": audience_bucket(snapshot.followers),
            "geographic_reach": geographic_reach(athlete),
        },
        compliance_issues=tuple(identify_compliance_issues(match, item.title)),
        created_at=created_at,
    )


def _high_risk_alert(
    athlete: Athlete,
    snapshot: AthleteSnapshot,
    platform: str,
    analysis: PlatformAnalysis,
    created_at: str,
) -> Alert:
    return Alert(
        id=0,
        athlete=snapshot,
        platform=platform,
        type=HIGH_RISK_SCORE,
        category=HIGH_RISK_CATEGORY_ID,
        category_name=HIGH_RISK_CATEGORY_NAME,
        severity=3,
        title=f"{athlete.display_name} - High risk on {platform}",
        description=f"Risk score: {analysis.risk_score}/100",
        evidence={
            "risk_score": analysis.risk_score,
            "risk_factors": list(analysis.risk_factors),
            "videos_analyzed": analysis.videos_analyzed,
            "videos_with_sponsors": analysis.videos_with_sponsors,
        },
        risk_assessment={
            "pattern_frequency": analysis.videos_with_sponsors / max(analysis.videos_analyzed, 1),
            "diversity_sponsors": len(analysis.unique_sponsors),
            "compliance_score": analysis.compliance_score,
        },
        created_at=created_at,
    )


def _transparency_alert(
    athlete: Athlete,
    snapshot: AthleteSnapshot,
    platform: str,
    analysis: PlatformAnalysis,
    created_at: str,
) -> Alert:
    count = len(analysis.unique_sponsors)
    return Alert(
        id=0,
        athlete=snapshot,
        platform=platform,
        type=TRANSPARENCY_VIOLATION,
        category=TRANSPARENCY_CATEGORY_ID,
        category_name=TRANSPARENCY_CATEGORY_NAME,
        severity=2,
        title=f"{athlete.display_name} - Sponsorships not disclosed",
        description=f"{count} sponsors without proper disclosure",
        evidence={
            "sponsors_undisclosed": list(analysis.unique_sponsors),
            "compliance_score": analysis.compliance_score,
        },
        legal_implications=TRANSPARENCY_LEGAL_IMPLICATIONS,
        created_at=created_at,
    )


def platform_alerts(
    athlete: Athlete,
    platform: str,
    payload: object,
    taxonomy: KeywordTaxonomy,
    created_at: str,
) -> list[Alert]:
    """Unnumbered alerts for one athlete on one platform, in generation order."""
    analysis = PlatformAnalysis.coerce(payload, platform=platform)
    snapshot = AthleteSnapshot.of(athlete)
    drafts: list[Alert] = []

    # 1. One alert per sponsor mention (not deduplicated by keyword)
    for evidence in analysis.evidence:
        for match in evidence.sponsor_matches:
            drafts.append(_sponsor_alert(athlete, snapshot, platform, evidence, match, taxonomy, created_at))

    # 2. High overall risk
    if analysis.risk_score >= HIGH_RISK_THRESHOLD:
        logger.info("[ALERTS] High risk: %s - score %s on %s", athlete.name, analysis.risk_score, platform)
        drafts.append(_high_risk_alert(athlete, snapshot, platform, analysis, created_at))

    # 3. Sponsors present but never disclosed
    if not analysis.has_disclosure and analysis.unique_sponsors:
        logger.info(
            "[ALERTS] Transparency: %s - %s undisclosed sponsors on %s",
            athlete.name,
            len(analysis.unique_sponsors),
            platform,
        )
        drafts.append(_transparency_alert(athlete, snapshot, platform, analysis, created_at))

    return drafts


def athlete_alerts(
    athlete: Athlete,
    taxonomy: KeywordTaxonomy,
    created_at: str,
) -> tuple[list[Alert], list[Diagnostic]]:
    """
    Unnumbered alerts for every platform of one athlete.
    A failing platform is recorded as a diagnostic and the others continue.
    """
    if not isinstance(athlete, Athlete):
        raise MalformedInputError(f"expected Athlete, got {type(athlete).__name__}")
    if not athlete.name:
        raise MalformedInputError("athlete has no name")

    drafts: list[Alert] = []
    diagnostics: list[Diagnostic] = []
    for platform in PLATFORMS:
        payload = athlete.platform_analyses.get(platform)
        if payload is None:
            logger.debug("[ALERTS] %s: no %s data", athlete.name, platform)
            continue
        outcome = attempt(
            "alerts",
            f"{athlete.name}/{platform}",
            platform_alerts,
            athlete,
            platform,
            payload,
            taxonomy,
            created_at,
        )
        if outcome.ok:
            drafts.extend(outcome.value)
        else:
            diagnostics.append(outcome.diagnostic)
    return drafts, diagnostics


def assign_ids(drafts: list[Alert], start: int = 1) -> list[Alert]:
    """Number merged drafts sequentially in generation order."""
    return [replace(alert, id=start + offset) for offset, alert in enumerate(drafts)]


def sort_by_severity(alerts: list[Alert]) -> list[Alert]:
    """Severity descending; equal severities keep generation order (stable sort)."""
    return sorted(alerts, key=lambda alert: alert.severity, reverse=True)


def generate_alerts(
    athletes: list[Athlete],
    taxonomy: KeywordTaxonomy,
    max_workers: int = 1,
    created_at: str | None = None,
) -> tuple[list[Alert], list[Diagnostic]]:
    """
    Generate, merge, number and sort alerts for all athletes.

    Returns:
        (alerts sorted by severity desc, diagnostics for skipped items)
    """
    if created_at is None:
        created_at = datetime.now(timezone.utc).isoformat()

    def _unit(index: int, athlete: Athlete) -> Outcome[tuple[list[Alert], list[Diagnostic]]]:
        source = getattr(athlete, "name", "") or f"athlete[{index}]"
        return attempt("alerts", source, athlete_alerts, athlete, taxonomy, created_at)

    if max_workers > 1 and len(athletes) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(_unit, i, athlete) for i, athlete in enumerate(athletes)]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [_unit(i, athlete) for i, athlete in enumerate(athletes)]

    # Merge in input order, then number, then sort
    unit_results, diagnostics = collect(outcomes)
    drafts: list[Alert] = []
    for unit_drafts, unit_diagnostics in unit_results:
        drafts.extend(unit_drafts)
        diagnostics.extend(unit_diagnostics)

    alerts = sort_by_severity(assign_ids(drafts))
    logger.info("[ALERTS] %s alerts generated (%s items skipped)", len(alerts), len(diagnostics))
    return alerts, diagnostics
