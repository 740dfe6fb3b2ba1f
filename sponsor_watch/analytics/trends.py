"""Trend identification over the alert set."""

from __future__ import annotations

from collections import Counter

from config import BRAZILIAN_SPECIFIC_CATEGORIES, HOME_COUNTRY, SKIN_GAMBLING_CATEGORIES
from sponsor_watch.analytics.aggregator import AnalyticsSnapshot
from sponsor_watch.models import Alert

INSUFFICIENT_DATA = "Insufficient data"

REGULATORY_GAPS: tuple[str, ...] = (
    "No oversight of athletes under foreign jurisdictions",
    "Skin gambling remains unregulated",
    "Inadequate protection of minors",
    "Insufficient advertising transparency",
)


def empty_trends() -> dict:
    return {
        "emerging_patterns": [],
        "demographic_insights": {
            "youth_exposure": INSUFFICIENT_DATA,
            "geographic_spread": INSUFFICIENT_DATA,
            "platform_preference": INSUFFICIENT_DATA,
        },
        "regulatory_gaps": [],
    }


def _exposure_label(estimate: int) -> str:
    if estimate >= 65:
        return "High"
    if estimate >= 40:
        return "Medium"
    return "Low"


def identify_trends(alerts: list[Alert], snapshot: AnalyticsSnapshot) -> dict:
    """Emerging patterns, demographic insights and regulatory gaps."""
    if not alerts:
        return empty_trends()

    international = sum(1 for a in alerts if a.risk_assessment.get("geographic_reach") == "international")
    platforms = Counter(a.platform for a in alerts).most_common()
    estimate = snapshot.summary["minor_exposure_estimate"]

    return {
        "emerging_patterns": [
            {
                "pattern": "Skin gambling growth",
                "description": "Sponsorships by skin gambling and loot box operators",
                "evidence": sum(1 for a in alerts if a.category in SKIN_GAMBLING_CATEGORIES),
                "concern_level": "High",
            },
            {
                "pattern": "Brazil-specific casino games",
                "description": "Focus on games popular in Brazil (Tigrinho, Aviator, etc.)",
                "evidence": sum(1 for a in alerts if a.category in BRAZILIAN_SPECIFIC_CATEGORIES),
                "concern_level": "Critical",
            },
            {
                "pattern": "Athletes abroad",
                "description": f"Sponsored athletes competing outside {HOME_COUNTRY}",
                "evidence": international,
                "concern_level": "Medium",
            },
        ],
        "demographic_insights": {
            "youth_exposure": f"{_exposure_label(estimate)} - estimated {estimate}% of the audience aged 13-25",
            "geographic_spread": (
                f"{international} of {len(alerts)} alerts involve athletes competing abroad"
                if international
                else "Domestic audiences only"
            ),
            "platform_preference": ", ".join(f"{name} ({count})" for name, count in platforms),
        },
        "regulatory_gaps": list(REGULATORY_GAPS),
    }
