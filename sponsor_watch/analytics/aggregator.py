"""Aggregate analytics over a full alert set."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Callable, Hashable

from config import (
    BRAZILIAN_SPECIFIC_CATEGORIES,
    COMPLIANCE_ALERT_CEILING,
    GAMBLING_DIRECT_CATEGORIES,
    PLATFORM_DEMOGRAPHIC_WEIGHTS,
    SKIN_GAMBLING_CATEGORIES,
    TRANSPARENCY_CATEGORY_ID,
)
from sponsor_watch.alerts.generator import TRANSPARENCY_VIOLATION
from sponsor_watch.models import Alert
from sponsor_watch.scoring.risk_scorer import round_half_up

logger = logging.getLogger(__name__)


def _empty_summary() -> dict:
    return {
        "total_alerts": 0,
        "unique_athletes": 0,
        "total_audience_impact": 0,
        "minor_exposure_estimate": 0,
    }


def _empty_distributions() -> dict:
    return {"severity": {}, "category": {}, "platform": {}, "game": {}}


def _empty_content_analysis() -> dict:
    return {
        "gambling_direct": 0,
        "skin_gambling": 0,
        "brazilian_specific": 0,
        "transparency_issues": 0,
    }


def _empty_compliance_metrics() -> dict:
    return {"transparency_score": 100, "safety_score": 100, "overall_compliance": 100}


def _empty_risk_indicators() -> dict:
    return {
        "minor_exposure_risk": 0,
        "regulatory_risk": 0,
        "reputational_risk": 0,
        "legal_risk": 0,
    }


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Read-only aggregate view over an alert set; the defaults are the empty snapshot."""
    summary: dict = field(default_factory=_empty_summary)
    distributions: dict = field(default_factory=_empty_distributions)
    content_analysis: dict = field(default_factory=_empty_content_analysis)
    compliance_metrics: dict = field(default_factory=_empty_compliance_metrics)
    risk_indicators: dict = field(default_factory=_empty_risk_indicators)

    def to_dict(self) -> dict:
        return asdict(self)


def empty_analytics() -> AnalyticsSnapshot:
    return AnalyticsSnapshot()


def group_count(alerts: list[Alert], key: Callable[[Alert], Hashable]) -> dict:
    """Count alerts per key value."""
    return dict(Counter(key(alert) for alert in alerts))


def _percent(part: int, total: int) -> float:
    return 100 * part / total


def minor_exposure_estimate(alerts: list[Alert]) -> int:
    """
    Demographic-weighted share (0-100) of the alert audience aged 13-25.
    Platforms without a weight contribute nothing.
    """
    if not alerts:
        return 0
    per_platform = Counter(alert.platform for alert in alerts)
    weighted = sum(
        count * PLATFORM_DEMOGRAPHIC_WEIGHTS.get(platform, 0.0)
        for platform, count in per_platform.items()
    )
    return round_half_up(100 * weighted / len(alerts))


def compliance_metrics(alerts: list[Alert]) -> dict:
    """
    Transparency, safety and overall compliance scores.
    overall_compliance saturates at 0 once the set reaches COMPLIANCE_ALERT_CEILING alerts.
    """
    total = len(alerts)
    if total == 0:
        return _empty_compliance_metrics()
    violations = sum(1 for a in alerts if a.type == TRANSPARENCY_VIOLATION)
    high_severity = sum(1 for a in alerts if a.severity >= 3)
    return {
        "transparency_score": max(0, 100 - 100 * violations / total),
        "safety_score": max(0, 100 - 100 * high_severity / total),
        "overall_compliance": max(0, 100 - 100 * total / COMPLIANCE_ALERT_CEILING),
    }


def risk_indicators(alerts: list[Alert]) -> dict:
    total = len(alerts)
    if total == 0:
        return _empty_risk_indicators()
    return {
        "minor_exposure_risk": minor_exposure_estimate(alerts),
        "regulatory_risk": _percent(sum(1 for a in alerts if a.severity >= 3), total),
        "reputational_risk": _percent(sum(1 for a in alerts if a.category == TRANSPARENCY_CATEGORY_ID), total),
        "legal_risk": _percent(sum(1 for a in alerts if a.legal_implications), total),
    }


def content_analysis(alerts: list[Alert]) -> dict:
    return {
        "gambling_direct": sum(1 for a in alerts if a.category in GAMBLING_DIRECT_CATEGORIES),
        "skin_gambling": sum(1 for a in alerts if a.category in SKIN_GAMBLING_CATEGORIES),
        "brazilian_specific": sum(1 for a in alerts if a.category in BRAZILIAN_SPECIFIC_CATEGORIES),
        "transparency_issues": sum(1 for a in alerts if a.type == TRANSPARENCY_VIOLATION),
    }


def compute_analytics(alerts: list[Alert]) -> AnalyticsSnapshot:
    """Full analytics snapshot; recomputed from scratch on every call."""
    total = len(alerts)
    if total == 0:
        logger.info("[ANALYTICS] No alerts, returning empty analytics")
        return empty_analytics()

    unique_athletes = len({a.athlete.name for a in alerts if a.athlete.name})
    # Each alert snapshots the audience on its own, so athletes may be counted repeatedly.
    total_audience = sum(a.athlete.followers for a in alerts)

    snapshot = AnalyticsSnapshot(
        summary={
            "total_alerts": total,
            "unique_athletes": unique_athletes,
            "total_audience_impact": total_audience,
            "minor_exposure_estimate": minor_exposure_estimate(alerts),
        },
        distributions={
            "severity": group_count(alerts, lambda a: a.severity),
            "category": group_count(alerts, lambda a: a.category),
            "platform": group_count(alerts, lambda a: a.platform),
            "game": group_count(alerts, lambda a: a.athlete.game),
        },
        content_analysis=content_analysis(alerts),
        compliance_metrics=compliance_metrics(alerts),
        risk_indicators=risk_indicators(alerts),
    )
    logger.info("[ANALYTICS] %s alerts, %s athletes affected", total, unique_athletes)
    return snapshot


def chart_breakdown(alerts: list[Alert]) -> dict:
    """Distributions used by report charts and tables."""
    if not alerts:
        return {
            "severity_distribution": {},
            "category_distribution": {},
            "platform_distribution": {},
            "temporal_distribution": {},
            "athlete_impact": {},
        }
    return {
        "severity_distribution": group_count(alerts, lambda a: a.severity),
        "category_distribution": group_count(alerts, lambda a: a.category),
        "platform_distribution": group_count(alerts, lambda a: a.platform),
        "temporal_distribution": group_count(alerts, lambda a: (a.created_at or "unknown")[:10]),
        "athlete_impact": group_count(alerts, lambda a: a.athlete.nickname or a.athlete.name or "unknown"),
    }


def executive_summary(alerts: list[Alert], snapshot: AnalyticsSnapshot) -> dict:
    return {
        "total_alerts": snapshot.summary["total_alerts"],
        "critical_issues": sum(1 for a in alerts if a.severity == 3),
        "athletes_affected": snapshot.summary["unique_athletes"],
        "estimated_minor_exposure": snapshot.summary["minor_exposure_estimate"],
        "compliance_score": snapshot.compliance_metrics["overall_compliance"],
    }
