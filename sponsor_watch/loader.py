"""
Snapshot loading (快照加载)
Turns collector output (JSON) into Athlete objects for the analysis core.

Accepted athlete shapes:
- contract shape: ``followers: {platform: n}``, ``platforms: {platform: PlatformPayload}``
- collector shape: ``social_media.<platform>.subscribers|followers``,
  ``raw_data.<platform>.sponsorship_analysis``
- raw content: ``content: {platform: [{id, title, description, published_at}]}``,
  analysed here with the keyword taxonomy
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from config import PLATFORMS
from sponsor_watch.alerts.isolation import attempt
from sponsor_watch.analyzer import analyze_platform
from sponsor_watch.exceptions import MalformedInputError
from sponsor_watch.models import Athlete, ContentItem, Diagnostic, PlatformAnalysis, as_int
from sponsor_watch.taxonomy import KeywordTaxonomy

logger = logging.getLogger(__name__)


def load_snapshot(path: str) -> list[Any]:
    """Read athlete records from a JSON file (a list, or an object with an "athletes" list)."""
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    if isinstance(data, dict):
        data = data.get("athletes", [])
    if not isinstance(data, list):
        raise MalformedInputError(f"snapshot {path} does not contain an athlete list")
    logger.info("[LOAD] %s athlete records from %s", len(data), path)
    return data


def _followers(record: dict) -> dict[str, int]:
    followers = record.get("followers")
    if isinstance(followers, dict):
        return {platform: as_int(count) for platform, count in followers.items()}

    result: dict[str, int] = {}
    social = record.get("social_media") or {}
    if isinstance(social, dict):
        for platform in PLATFORMS:
            data = social.get(platform) or {}
            if isinstance(data, dict):
                count = data.get("subscribers") if platform == "youtube" else data.get("followers")
                result[platform] = as_int(count)
    return result


def _platform_payload(record: dict, platform: str) -> Any:
    platforms = record.get("platforms")
    if isinstance(platforms, dict) and platforms.get(platform) is not None:
        return platforms[platform]
    raw = record.get("raw_data")
    if isinstance(raw, dict) and isinstance(raw.get(platform), dict):
        return raw[platform].get("sponsorship_analysis")
    return None


def parse_content_items(entries: Any, platform: str) -> list[ContentItem]:
    if not isinstance(entries, list):
        raise MalformedInputError(f"{platform} content must be a list")
    items: list[ContentItem] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        items.append(
            ContentItem(
                platform=platform,
                id=str(entry.get("id") or entry.get("videoId") or ""),
                title=str(entry.get("title") or entry.get("text") or ""),
                description=str(entry.get("description") or ""),
                published_at=str(entry.get("published_at") or entry.get("published") or entry.get("created_at") or ""),
            )
        )
    return items


def _analysis_for(record: dict, platform: str, taxonomy: KeywordTaxonomy) -> PlatformAnalysis | None:
    payload = _platform_payload(record, platform)
    if payload is not None:
        return PlatformAnalysis.from_payload(payload, platform=platform)

    content = record.get("content")
    if isinstance(content, dict) and content.get(platform) is not None:
        return analyze_platform(parse_content_items(content[platform], platform), taxonomy)
    return None


def parse_athlete(record: Any, taxonomy: KeywordTaxonomy) -> tuple[Athlete, list[Diagnostic]]:
    """
    Build one Athlete. Malformed platform payloads are dropped with a
    diagnostic; the rest of the athlete is kept.
    """
    if not isinstance(record, dict):
        raise MalformedInputError(f"athlete record must be an object, got {type(record).__name__}")

    athlete = Athlete(
        name=str(record.get("name") or ""),
        nickname=str(record.get("nickname") or ""),
        game=str(record.get("game") or ""),
        team=str(record.get("team") or ""),
        playing_country=str(record.get("playing_country") or ""),
        followers=_followers(record),
    )
    diagnostics: list[Diagnostic] = []
    for platform in PLATFORMS:
        outcome = attempt("parse", f"{athlete.name or '?'}/{platform}", _analysis_for, record, platform, taxonomy)
        if not outcome.ok:
            diagnostics.append(outcome.diagnostic)
        elif outcome.value is not None:
            athlete.platform_analyses[platform] = outcome.value
    return athlete, diagnostics


def parse_athletes(records: Sequence[Any], taxonomy: KeywordTaxonomy) -> tuple[list[Athlete], list[Diagnostic]]:
    """
    Parse every record, keeping input order. Athlete objects are taken as
    they are; unusable records are skipped and reported.
    """
    athletes: list[Athlete] = []
    diagnostics: list[Diagnostic] = []
    for index, record in enumerate(records):
        if isinstance(record, Athlete):
            athletes.append(record)
            continue
        source = str(record.get("name") or "") if isinstance(record, dict) else ""
        outcome = attempt("parse", source or f"athlete[{index}]", parse_athlete, record, taxonomy)
        if not outcome.ok:
            diagnostics.append(outcome.diagnostic)
            continue
        athlete, athlete_diagnostics = outcome.value
        athletes.append(athlete)
        diagnostics.extend(athlete_diagnostics)
    return athletes, diagnostics
