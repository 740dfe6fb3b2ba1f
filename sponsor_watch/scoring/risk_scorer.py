"""Risk scoring for one athlete/platform sponsorship analysis."""

from __future__ import annotations

import math
from typing import Collection, Iterable

from config import (
    HIGH_RISK_THRESHOLD,
    LOW_SAMPLE_PENALTY,
    MAX_MENTION_POINTS,
    MEDIUM_RISK_THRESHOLD,
    MIN_VIDEOS_FOR_FULL_SCORE,
    RISK_CATEGORIES,
)
from sponsor_watch.models import Evidence

# Risk factor texts, emitted in this order when the category is present
CATEGORY_RISK_FACTORS: tuple[tuple[str, str], ...] = (
    ("brazilian_games", "Casino games popular in Brazil (Tigrinho, etc.)"),
    ("skin_gambling", "Skin gambling / loot boxes"),
    ("online_casinos", "Online casinos"),
    ("predatory_mechanics", "Predatory mechanics detected"),
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def risk_level(score: int) -> str:
    if score >= HIGH_RISK_THRESHOLD:
        return "high"
    if score >= MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "low"


def score(
    unique_sponsors: Collection[str] | None = None,
    total_mentions: int | None = 0,
    categories_found: Iterable[str] | None = None,
    promo_patterns: Collection[str] | None = None,
    videos_analyzed: int | None = 0,
) -> tuple[int, str]:
    """
    Bounded 0-100 risk score and its tier.

    - 8 points per unique sponsor
    - 3 points per mention, capped at 30
    - 15 points per risk category present
    - 10 points per promo code match
    - x0.7 when fewer than 3 pieces of content were analysed
    """
    sponsors = len(unique_sponsors or ())
    mentions = max(0, total_mentions or 0)
    risk_categories = len(set(categories_found or ()) & RISK_CATEGORIES)
    promos = len(promo_patterns or ())

    value: float = (
        8 * sponsors
        + min(3 * mentions, MAX_MENTION_POINTS)
        + 15 * risk_categories
        + 10 * promos
    )
    if (videos_analyzed or 0) < MIN_VIDEOS_FOR_FULL_SCORE:
        value *= LOW_SAMPLE_PENALTY

    final = min(round_half_up(value), 100)
    return final, risk_level(final)


def categories_found(evidence: Iterable[Evidence]) -> list[str]:
    """Distinct category ids across the evidence, in first-seen order."""
    seen: dict[str, None] = {}
    for item in evidence:
        for match in item.sponsor_matches:
            seen.setdefault(match.category_id, None)
    return list(seen)


def identify_risk_factors(evidence: list[Evidence], promo_patterns: Collection[str]) -> list[str]:
    """Human-readable reasons behind a risk score."""
    factors: list[str] = []
    if evidence:
        factors.append("Gambling sponsorship detected")
    if promo_patterns:
        factors.append("Promotional codes identified")

    found = set(categories_found(evidence))
    for category_id, text in CATEGORY_RISK_FACTORS:
        if category_id in found:
            factors.append(text)
    return factors
