"""
Per-athlete roll-up (运动员汇总)
Combines each athlete's platform analyses into one profile, then summarises
the monitored group: coverage per platform, games, location and reach.
"""

from __future__ import annotations

import logging

from config import HIGH_RISK_THRESHOLD, HOME_COUNTRY, PLATFORMS
from sponsor_watch.models import Athlete, PlatformAnalysis
from sponsor_watch.scoring.risk_scorer import risk_level, round_half_up

logger = logging.getLogger(__name__)


def _unique(values) -> list[str]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(values))


def athlete_profile(athlete: Athlete) -> dict:
    """
    One athlete across all analysed platforms.
    risk_score is the half-up mean of the platform scores, capped at 100.
    """
    analyses = [
        PlatformAnalysis.coerce(athlete.platform_analyses[platform], platform=platform)
        for platform in PLATFORMS
        if athlete.platform_analyses.get(platform) is not None
    ]
    total = sum(analysis.risk_score for analysis in analyses)
    risk_score = min(round_half_up(total / max(len(analyses), 1)), 100)
    return {
        "name": athlete.name,
        "nickname": athlete.display_name,
        "game": athlete.game,
        "playing_country": athlete.playing_country,
        "platforms": [p for p in PLATFORMS if athlete.platform_analyses.get(p) is not None],
        "risk_score": risk_score,
        "risk_level": risk_level(risk_score),
        "sponsorships": _unique(s for analysis in analyses for s in analysis.unique_sponsors),
        "risk_factors": _unique(f for analysis in analyses for f in analysis.risk_factors),
        "total_followers": athlete.total_followers,
    }


def empty_athlete_summary() -> dict:
    return {
        "total_athletes": 0,
        "total_sponsorships": 0,
        "high_risk_count": 0,
        "avg_risk_score": 0,
        "platform_coverage": {platform: 0 for platform in PLATFORMS},
        "platform_percentage": {platform: 0 for platform in PLATFORMS},
        "games_distribution": [],
        "athlete_distribution": {
            "by_game": {},
            "by_location": {"playing_in_brazil": 0, "playing_abroad": 0},
        },
        "total_reach": 0,
        "athletes": [],
    }


def summarize_athletes(profiles: list[dict]) -> dict:
    """Group-level figures over athlete profiles (see athlete_profile)."""
    total = len(profiles)
    if total == 0:
        return empty_athlete_summary()

    coverage = {
        platform: sum(1 for profile in profiles if platform in profile["platforms"])
        for platform in PLATFORMS
    }
    games: dict[str, dict] = {}
    for profile in profiles:
        game = profile["game"] or "Unspecified"
        entry = games.setdefault(game, {"game": game, "athletes": 0, "sponsorships": 0})
        entry["athletes"] += 1
        entry["sponsorships"] += len(profile["sponsorships"])
    at_home = sum(1 for profile in profiles if profile["playing_country"] == HOME_COUNTRY)

    summary = {
        "total_athletes": total,
        "total_sponsorships": sum(len(profile["sponsorships"]) for profile in profiles),
        "high_risk_count": sum(1 for profile in profiles if profile["risk_score"] >= HIGH_RISK_THRESHOLD),
        "avg_risk_score": round_half_up(sum(profile["risk_score"] for profile in profiles) / total),
        "platform_coverage": coverage,
        "platform_percentage": {
            platform: round_half_up(100 * count / total) for platform, count in coverage.items()
        },
        "games_distribution": list(games.values()),
        "athlete_distribution": {
            "by_game": {game: entry["athletes"] for game, entry in games.items()},
            "by_location": {"playing_in_brazil": at_home, "playing_abroad": total - at_home},
        },
        "total_reach": sum(profile["total_followers"] for profile in profiles),
        "athletes": profiles,
    }
    logger.info(
        "[ANALYTICS] %s athletes summarised, %s high risk",
        total,
        summary["high_risk_count"],
    )
    return summary
