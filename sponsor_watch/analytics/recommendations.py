"""Policy recommendations derived from an analytics snapshot."""

from __future__ import annotations

from dataclasses import asdict

from sponsor_watch.analytics.aggregator import AnalyticsSnapshot
from sponsor_watch.models import Recommendation

# (priority, action, rationale template, timeline); templates read snapshot fields
IMMEDIATE_ACTIONS: tuple[tuple[str, str, str, str], ...] = (
    (
        "Critical",
        "Enforce mandatory age verification",
        "{summary[minor_exposure_estimate]}% estimated exposure of minors",
        "30 days",
    ),
    (
        "High",
        "Require full transparency on sponsorships",
        "{content_analysis[transparency_issues]} transparency violations detected",
        "60 days",
    ),
    (
        "High",
        "Regulate skin gambling as a betting modality",
        "{content_analysis[skin_gambling]} skin gambling cases detected",
        "90 days",
    ),
)

REGULATORY_FRAMEWORK: tuple[dict, ...] = (
    {
        "area": "Esports-specific rules",
        "recommendation": "Create a dedicated regulatory category for professional athletes",
        "justification": "Disproportionate influence on young audiences",
    },
    {
        "area": "International jurisdiction",
        "recommendation": "Bilateral agreements to oversee Brazilian athletes competing abroad",
        "justification": "Sponsored content reaches Brazilian audiences from foreign jurisdictions",
    },
    {
        "area": "Protection of minors",
        "recommendation": "Specific framework for content aimed at minors",
        "justification": "Primary audience aged 13-25 is highly vulnerable",
    },
)

ACADEMIC_CONTRIBUTIONS: tuple[str, ...] = (
    "Systematic analysis of gambling exposure in Brazilian esports",
    "Replicable methodology for automated monitoring",
    "Empirical evidence for public policy design",
    "Baseline for longitudinal impact studies",
)

NEXT_RESEARCH_STEPS: tuple[str, ...] = (
    "Psychological impact on minors",
    "Effectiveness of regulatory measures",
    "International comparison of regulatory frameworks",
    "Automated detection tooling",
)


def empty_recommendations() -> dict:
    return {
        "immediate_actions": [],
        "regulatory_framework": [],
        "academic_contributions": [],
        "next_research_steps": [],
    }


def immediate_actions(snapshot: AnalyticsSnapshot) -> list[Recommendation]:
    fields = snapshot.to_dict()
    return [
        Recommendation(priority=priority, action=action, rationale=template.format(**fields), timeline=timeline)
        for priority, action, template, timeline in IMMEDIATE_ACTIONS
    ]


def generate_recommendations(snapshot: AnalyticsSnapshot) -> dict:
    """Fill the recommendation catalogue from the snapshot. No alerts, no recommendations."""
    if snapshot.summary.get("total_alerts", 0) == 0:
        return empty_recommendations()
    return {
        "immediate_actions": [asdict(r) for r in immediate_actions(snapshot)],
        "regulatory_framework": [dict(item) for item in REGULATORY_FRAMEWORK],
        "academic_contributions": list(ACADEMIC_CONTRIBUTIONS),
        "next_research_steps": list(NEXT_RESEARCH_STEPS),
    }
