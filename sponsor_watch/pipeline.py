"""
Analysis entry point: athletes -> alerts -> analytics -> trends -> recommendations,
plus the per-athlete summary.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from config import MAX_WORKERS
from sponsor_watch.alerts.generator import generate_alerts
from sponsor_watch.alerts.isolation import attempt
from sponsor_watch.analytics.aggregator import (
    AnalyticsSnapshot,
    chart_breakdown,
    compute_analytics,
    empty_analytics,
    executive_summary,
)
from sponsor_watch.analytics.athlete_summary import athlete_profile, empty_athlete_summary, summarize_athletes
from sponsor_watch.analytics.recommendations import empty_recommendations, generate_recommendations
from sponsor_watch.analytics.trends import empty_trends, identify_trends
from sponsor_watch.loader import parse_athletes
from sponsor_watch.models import Alert, Athlete, Diagnostic
from sponsor_watch.taxonomy import KeywordTaxonomy, default_taxonomy

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class AlertReport:
    """Result of one analysis run, handed to the reporting/export layer."""
    alerts: list[Alert] = field(default_factory=list)
    analytics: AnalyticsSnapshot = field(default_factory=empty_analytics)
    trends: dict = field(default_factory=empty_trends)
    recommendations: dict = field(default_factory=empty_recommendations)
    athlete_summary: dict = field(default_factory=empty_athlete_summary)
    generated_at: str = field(default_factory=_now)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def executive_summary(self) -> dict:
        return executive_summary(self.alerts, self.analytics)

    @property
    def alert_breakdown(self) -> dict:
        return chart_breakdown(self.alerts)

    def to_dict(self) -> dict:
        return {
            "alerts": [alert.to_dict() for alert in self.alerts],
            "analytics": self.analytics.to_dict(),
            "trends": self.trends,
            "recommendations": self.recommendations,
            "athlete_summary": self.athlete_summary,
            "generated_at": self.generated_at,
            "diagnostics": [asdict(d) for d in self.diagnostics],
        }


def empty_report(diagnostics: list[Diagnostic] | None = None) -> AlertReport:
    """Fully populated report with zeroed metrics and perfect compliance."""
    return AlertReport(diagnostics=list(diagnostics or []))


def _athlete_summary(athletes: list[Athlete]) -> tuple[dict, list[Diagnostic]]:
    profiles: list[dict] = []
    diagnostics: list[Diagnostic] = []
    for athlete in athletes:
        if not athlete.name:
            continue
        outcome = attempt("summary", athlete.name, athlete_profile, athlete)
        if outcome.ok:
            profiles.append(outcome.value)
        else:
            diagnostics.append(outcome.diagnostic)
    return summarize_athletes(profiles), diagnostics


def _run(athletes: list[Any], taxonomy: KeywordTaxonomy, max_workers: int) -> AlertReport:
    generated_at = _now()
    parsed, diagnostics = parse_athletes(athletes, taxonomy)

    alerts, alert_diagnostics = generate_alerts(parsed, taxonomy, max_workers=max_workers, created_at=generated_at)
    diagnostics.extend(alert_diagnostics)

    analytics = compute_analytics(alerts)
    trends = identify_trends(alerts, analytics)
    recommendations = generate_recommendations(analytics)
    summary, summary_diagnostics = _athlete_summary(parsed)
    diagnostics.extend(summary_diagnostics)

    return AlertReport(
        alerts=alerts,
        analytics=analytics,
        trends=trends,
        recommendations=recommendations,
        athlete_summary=summary,
        generated_at=generated_at,
        diagnostics=diagnostics,
    )


def analyze(
    athletes: Sequence[Any] | None,
    taxonomy: KeywordTaxonomy | None = None,
    max_workers: int | None = None,
) -> AlertReport:
    """
    Analyse a snapshot of athletes and return the alert report.

    Accepts a list or tuple of Athlete objects or raw athlete records (see
    sponsor_watch.loader). An explicitly passed taxonomy is used as given,
    even when it has no categories. Never raises: empty or unusable input,
    and any unexpected failure, yield the empty report.
    """
    if isinstance(athletes, (str, bytes)) or not isinstance(athletes, Sequence) or not athletes:
        logger.warning("[PIPELINE] Athlete data missing or empty, returning empty report")
        return empty_report()

    try:
        report = _run(
            list(athletes),
            taxonomy if taxonomy is not None else default_taxonomy(),
            max_workers if max_workers is not None else MAX_WORKERS,
        )
    except Exception as exc:
        logger.critical("[PIPELINE] Analysis failed unexpectedly: %s", exc)
        return empty_report(
            [Diagnostic(stage="pipeline", error_type=type(exc).__name__, message=str(exc))]
        )

    logger.info(
        "[PIPELINE] Analysis complete | athletes=%s alerts=%s diagnostics=%s",
        len(athletes),
        len(report.alerts),
        len(report.diagnostics),
    )
    return report
