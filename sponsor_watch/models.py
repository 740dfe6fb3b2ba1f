"""Data models used across the analysis pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from sponsor_watch.exceptions import MalformedInputError


def as_int(value: Any) -> int:
    """Coerce collector values ("1200", 1200.0, None) to int, 0 on failure."""
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def as_bool(value: Any) -> bool:
    """Collector flags arrive as bools, 0/1 or strings ("true", "false")."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


def as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


@dataclass(frozen=True)
class ContentItem:
    """
    Single piece of content fetched by a collector (video, stream VOD, tweet).
    Immutable once handed to the core.
    """
    platform: str           # "youtube", "twitch" or "twitter"
    id: str
    title: str
    description: str = ""
    published_at: str = ""  # ISO timestamp as delivered by the collector


@dataclass(frozen=True)
class SponsorMatch:
    keyword: str
    category_id: str
    context: str  # text around the match, 30 chars on each side


@dataclass(frozen=True)
class Evidence:
    """A content item together with every keyword match found in it."""
    content_item: ContentItem
    sponsor_matches: tuple[SponsorMatch, ...]

    def to_payload(self) -> dict:
        return {
            "video": {
                "title": self.content_item.title,
                "id": self.content_item.id,
                "published": self.content_item.published_at,
            },
            "sponsors_found": [
                {"keyword": m.keyword, "category": m.category_id, "context": m.context}
                for m in self.sponsor_matches
            ],
        }

    @classmethod
    def from_payload(cls, payload: dict, platform: str = "") -> Evidence:
        """Build evidence from the collector contract, tolerating missing fields."""
        if not isinstance(payload, dict):
            raise MalformedInputError(f"evidence entry must be an object, got {type(payload).__name__}")
        video = payload.get("video") or {}
        item = ContentItem(
            platform=platform,
            id=str(video.get("id") or ""),
            title=str(video.get("title") or ""),
            description=str(video.get("description") or ""),
            published_at=str(video.get("published") or ""),
        )
        matches = tuple(
            SponsorMatch(
                keyword=str(sponsor.get("keyword") or ""),
                category_id=str(sponsor.get("category") or ""),
                context=str(sponsor.get("context") or ""),
            )
            for sponsor in as_list(payload.get("sponsors_found"))
            if isinstance(sponsor, dict)
        )
        return cls(content_item=item, sponsor_matches=matches)


@dataclass(frozen=True)
class PromoCode:
    code: str
    content_id: str
    content_title: str


@dataclass(frozen=True)
class PlatformAnalysis:
    """
    Sponsorship analysis of one athlete on one platform.
    Computed once (by the analyzer or an external collector) and never mutated.
    """
    videos_analyzed: int = 0
    videos_with_sponsors: int = 0
    unique_sponsors: tuple[str, ...] = ()
    total_mentions: int = 0
    evidence: tuple[Evidence, ...] = ()
    promo_patterns: tuple[str, ...] = ()
    risk_score: int = 0
    risk_level: str = "low"
    risk_factors: tuple[str, ...] = ()
    has_disclosure: bool = False
    compliance_score: int = 100
    categories_detected: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict | None, platform: str = "") -> PlatformAnalysis:
        """
        Parse a collector payload (PlatformPayload contract).
        Missing or null fields default to empty/zero values.
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise MalformedInputError(f"platform payload must be an object, got {type(payload).__name__}")

        evidence = tuple(
            Evidence.from_payload(entry, platform=platform)
            for entry in as_list(payload.get("sponsorship_evidence"))
            if isinstance(entry, dict)
        )
        return cls(
            videos_analyzed=as_int(payload.get("videos_analyzed")),
            videos_with_sponsors=as_int(payload.get("videos_with_sponsors")),
            unique_sponsors=tuple(str(s) for s in as_list(payload.get("unique_sponsors"))),
            total_mentions=as_int(payload.get("total_sponsor_mentions")),
            evidence=evidence,
            promo_patterns=tuple(
                str(p.get("code", "")) if isinstance(p, dict) else str(p)
                for p in as_list(payload.get("promo_patterns"))
            ),
            risk_score=as_int(payload.get("risk_score")),
            risk_level=str(payload.get("risk_level") or "low"),
            risk_factors=tuple(str(f) for f in as_list(payload.get("risk_factors"))),
            has_disclosure=as_bool(payload.get("has_disclosure")),
            compliance_score=as_int(payload.get("compliance_score")),
            categories_detected=tuple(str(c) for c in as_list(payload.get("categories_detected"))),
        )

    @classmethod
    def coerce(cls, payload: Any, platform: str = "") -> PlatformAnalysis:
        """Accept an analysis object or a collector payload dict."""
        if isinstance(payload, PlatformAnalysis):
            return payload
        if isinstance(payload, dict):
            return cls.from_payload(payload, platform=platform)
        raise MalformedInputError(f"unsupported {platform} payload type {type(payload).__name__}")

    def to_payload(self) -> dict:
        return {
            "videos_analyzed": self.videos_analyzed,
            "videos_with_sponsors": self.videos_with_sponsors,
            "unique_sponsors": list(self.unique_sponsors),
            "total_sponsor_mentions": self.total_mentions,
            "sponsorship_evidence": [e.to_payload() for e in self.evidence],
            "categories_detected": list(self.categories_detected),
            "promo_patterns": list(self.promo_patterns),
            "risk_score": self.risk_score,
            "risk_level": self.risk_level,
            "risk_factors": list(self.risk_factors),
            "has_disclosure": self.has_disclosure,
            "compliance_score": self.compliance_score,
        }


@dataclass
class Athlete:
    """
    Monitored public figure. Owned by the caller; the core only reads it.
    """
    name: str
    nickname: str = ""
    game: str = ""
    team: str = ""
    playing_country: str = ""
    followers: dict[str, int] = field(default_factory=dict)  # per platform
    platform_analyses: dict[str, PlatformAnalysis] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    @property
    def total_followers(self) -> int:
        return sum(as_int(count) for count in self.followers.values())


@dataclass(frozen=True)
class AthleteSnapshot:
    """Copy of the athlete fields an alert needs, taken at generation time."""
    name: str
    nickname: str
    game: str
    team: str
    followers: int

    @classmethod
    def of(cls, athlete: Athlete) -> AthleteSnapshot:
        return cls(
            name=athlete.name,
            nickname=athlete.nickname or athlete.name,
            game=athlete.game or "Unspecified",
            team=athlete.team or "No team",
            followers=athlete.total_followers,
        )


@dataclass(frozen=True)
class Alert:
    """
    Alert record. `id` is a generation-order marker assigned once per run,
    after all per-athlete units have been merged.
    """
    id: int
    athlete: AthleteSnapshot
    platform: str
    type: str            # sponsor_detected | high_risk_score | transparency_violation
    category: str        # category id
    category_name: str
    severity: int        # 1..3, canonical scale
    title: str
    description: str
    evidence: dict = field(default_factory=dict)
    risk_assessment: dict = field(default_factory=dict)
    compliance_issues: tuple[str, ...] = ()
    legal_implications: tuple[str, ...] = ()
    created_at: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["compliance_issues"] = list(self.compliance_issues)
        data["legal_implications"] = list(self.legal_implications)
        return data


@dataclass(frozen=True)
class Recommendation:
    priority: str
    action: str
    rationale: str
    timeline: str


@dataclass(frozen=True)
class Diagnostic:
    """
    Diagnostic collected when a per-item step fails.
    Mirrors the stage failure records written by the CLI run summary.
    """
    stage: str          # e.g. "parse", "alerts", "analytics"
    error_type: str     # e.g. "MALFORMED", "INTERNAL"
    message: str
    source: str = ""    # athlete / platform the failure belongs to
