from __future__ import annotations

import pytest

from config import TRANSPARENCY_CATEGORY_ID, TRANSPARENCY_LEGAL_IMPLICATIONS
from sponsor_watch.alerts.generator import SPONSOR_DETECTED, TRANSPARENCY_VIOLATION
from sponsor_watch.analytics.aggregator import (
    AnalyticsSnapshot,
    chart_breakdown,
    compliance_metrics,
    compute_analytics,
    executive_summary,
    minor_exposure_estimate,
)
from sponsor_watch.analytics.recommendations import generate_recommendations
from sponsor_watch.analytics.trends import identify_trends
from sponsor_watch.models import Alert, AthleteSnapshot


def _alert(
    alert_id: int = 1,
    severity: int = 3,
    platform: str = "youtube",
    category: str = "betting_sites",
    alert_type: str = SPONSOR_DETECTED,
    athlete: str = "Player One",
    followers: int = 1000,
    game: str = "CS2",
    reach: str = "national",
) -> Alert:
    legal = TRANSPARENCY_LEGAL_IMPLICATIONS if alert_type == TRANSPARENCY_VIOLATION else ()
    return Alert(
        id=alert_id,
        athlete=AthleteSnapshot(name=athlete, nickname=athlete.lower(), game=game, team="Demo", followers=followers),
        platform=platform,
        type=alert_type,
        category=category,
        category_name=category,
        severity=severity,
        title="t",
        description="d",
        risk_assessment={"geographic_reach": reach},
        legal_implications=legal,
        created_at="2024-05-01T12:00:00+00:00",
    )


def _transparency(alert_id: int = 1, **kwargs) -> Alert:
    return _alert(alert_id, severity=2, category=TRANSPARENCY_CATEGORY_ID, alert_type=TRANSPARENCY_VIOLATION, **kwargs)


def test_empty_alert_set_gives_empty_snapshot():
    snapshot = compute_analytics([])

    assert snapshot == AnalyticsSnapshot()
    assert snapshot.summary == {
        "total_alerts": 0,
        "unique_athletes": 0,
        "total_audience_impact": 0,
        "minor_exposure_estimate": 0,
    }
    assert snapshot.distributions == {"severity": {}, "category": {}, "platform": {}, "game": {}}
    assert snapshot.compliance_metrics == {"transparency_score": 100, "safety_score": 100, "overall_compliance": 100}
    assert set(snapshot.risk_indicators.values()) == {0}
    assert set(snapshot.content_analysis.values()) == {0}


@pytest.mark.parametrize("count, expected", [(1, 98.0), (49, 2.0), (50, 0), (51, 0), (80, 0)])
def test_overall_compliance_saturates_at_zero(count, expected):
    alerts = [_alert(i) for i in range(1, count + 1)]
    assert compliance_metrics(alerts)["overall_compliance"] == expected


def test_compliance_scores_keep_full_precision():
    alerts = [_transparency(1), _alert(2), _alert(3)]
    metrics = compliance_metrics(alerts)

    assert metrics["transparency_score"] == 100 - 100 * 1 / 3
    assert metrics["safety_score"] == pytest.approx(33.333333, abs=1e-6)
    assert metrics["overall_compliance"] == 94.0
    assert compute_analytics(alerts).risk_indicators["regulatory_risk"] == 100 * 2 / 3


def test_minor_exposure_uses_platform_weight():
    assert minor_exposure_estimate([_alert(1), _alert(2)]) == 65
    assert minor_exposure_estimate([_alert(i, platform="twitch") for i in range(3)]) == 72
    assert minor_exposure_estimate([_alert(1, platform="tiktok")]) == 0
    assert minor_exposure_estimate([]) == 0


def test_full_snapshot():
    alerts = [
        _alert(1, athlete="A", followers=100),
        _alert(2, athlete="A", followers=100, category="skin_gambling"),
        _alert(3, athlete="B", followers=50, category="brazilian_games", game="Valorant", reach="international"),
        _transparency(4, athlete="B", followers=50, game="Valorant", reach="international"),
    ]
    snapshot = compute_analytics(alerts)

    assert snapshot.summary == {
        "total_alerts": 4,
        "unique_athletes": 2,
        "total_audience_impact": 300,
        "minor_exposure_estimate": 65,
    }
    assert snapshot.distributions["severity"] == {3: 3, 2: 1}
    assert snapshot.distributions["game"] == {"CS2": 2, "Valorant": 2}
    assert snapshot.content_analysis == {
        "gambling_direct": 1,
        "skin_gambling": 1,
        "brazilian_specific": 1,
        "transparency_issues": 1,
    }
    assert snapshot.compliance_metrics == {
        "transparency_score": 75.0,
        "safety_score": 25.0,
        "overall_compliance": 92.0,
    }
    assert snapshot.risk_indicators == {
        "minor_exposure_risk": 65,
        "regulatory_risk": 75.0,
        "reputational_risk": 25.0,
        "legal_risk": 25.0,
    }

    summary = executive_summary(alerts, snapshot)
    assert summary["critical_issues"] == 3
    assert summary["athletes_affected"] == 2
    assert summary["compliance_score"] == 92.0

    breakdown = chart_breakdown(alerts)
    assert breakdown["temporal_distribution"] == {"2024-05-01": 4}
    assert breakdown["athlete_impact"] == {"a": 2, "b": 2}

    trends = identify_trends(alerts, snapshot)
    evidence = {p["pattern"]: p["evidence"] for p in trends["emerging_patterns"]}
    assert evidence == {"Skin gambling growth": 1, "Brazil-specific casino games": 1, "Athletes abroad": 2}
    assert trends["demographic_insights"]["youth_exposure"].startswith("High")
    assert trends["regulatory_gaps"]

    recommendations = generate_recommendations(snapshot)
    rationales = [a["rationale"] for a in recommendations["immediate_actions"]]
    assert rationales == [
        "65% estimated exposure of minors",
        "1 transparency violations detected",
        "1 skin gambling cases detected",
    ]
    assert len(recommendations["regulatory_framework"]) == 3


def test_empty_trends_and_recommendations():
    snapshot = compute_analytics([])
    trends = identify_trends([], snapshot)
    assert trends["emerging_patterns"] == []
    assert trends["demographic_insights"]["youth_exposure"] == "Insufficient data"
    assert generate_recommendations(snapshot) == {
        "immediate_actions": [],
        "regulatory_framework": [],
        "academic_contributions": [],
        "next_research_steps": [],
    }
    assert chart_breakdown([])["severity_distribution"] == {}


def test_analytics_is_recomputed_identically():
    alerts = [_alert(1), _transparency(2)]
    assert compute_analytics(alerts) == compute_analytics(list(alerts))
