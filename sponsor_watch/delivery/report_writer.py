"""
报告输出模块 (Report Delivery Module)
Writes the alert report as JSON and Markdown, or renders it as plain text for dry runs.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date

from jinja2 import Template

from config import REPORT_MAX_ALERTS
from sponsor_watch.models import Alert

logger = logging.getLogger(__name__)

# Presentation labels only; the analysis core works on the 1..3 integer scale.
SEVERITY_LABELS = {1: "low", 2: "medium", 3: "high"}


def severity_label(severity: int) -> str:
    return SEVERITY_LABELS.get(severity, "unknown")


def flatten_alert(alert: Alert) -> dict:
    """Flat row for report tables and spreadsheet exports."""
    return {
        "id": alert.id,
        "athlete": alert.athlete.name,
        "nickname": alert.athlete.nickname,
        "game": alert.athlete.game,
        "team": alert.athlete.team,
        "followers": alert.athlete.followers,
        "platform": alert.platform,
        "type": alert.type,
        "category": alert.category_name,
        "severity": severity_label(alert.severity),
        "title": alert.title,
        "description": alert.description,
        "keyword": alert.evidence.get("keyword_found", ""),
        "context": alert.evidence.get("context", ""),
        "compliance_issues": "; ".join(alert.compliance_issues),
        "created_at": alert.created_at,
    }


REPORT_TEMPLATE = Template(
    """\
# {{ today }} Esports Gambling Sponsorship Report

> **{{ summary.total_alerts }}** alerts | **{{ summary.critical_issues }}** critical | **{{ summary.athletes_affected }}** athletes affected

## Executive Summary

| Metric | Value |
|---|---|
| Total alerts | {{ summary.total_alerts }} |
| Critical issues | {{ summary.critical_issues }} |
| Athletes affected | {{ summary.athletes_affected }} |
| Estimated minor exposure | {{ summary.estimated_minor_exposure }}% |
| Overall compliance | {{ summary.compliance_score | round(2) }} |

## Athletes
{% if not athletes.athletes %}
No athletes analysed.
{% else %}
| Athlete | Game | Platforms | Risk score | Sponsorships |
|---|---|---|---|---|
{% for athlete in athletes.athletes -%}
| {{ athlete.nickname }} | {{ athlete.game or "-" }} | {{ athlete.platforms | join(", ") }} | {{ athlete.risk_score }} ({{ athlete.risk_level }}) | {{ athlete.sponsorships | join(", ") or "none" }} |
{% endfor %}
_{{ athletes.high_risk_count }} of {{ athletes.total_athletes }} athletes at high risk, average score {{ athletes.avg_risk_score }}._
{% endif %}

## Distribution

{% for name, counts in breakdown.items() if name != "temporal_distribution" -%}
**{{ name.replace("_", " ") | capitalize }}**: {% for key, value in counts.items() %}{{ key }} ({{ value }}){% if not loop.last %}, {% endif %}{% else %}none{% endfor %}

{% endfor -%}
## Alerts
{% if not rows %}
No alerts in this snapshot.
{% else %}
| # | Severity | Athlete | Platform | Category | Title |
|---|---|---|---|---|---|
{% for row in rows -%}
| {{ row.id }} | {{ row.severity }} | {{ row.nickname }} | {{ row.platform }} | {{ row.category }} | {{ row.title }} |
{% endfor %}
{%- if omitted %}
_{{ omitted }} more alerts in the JSON report._
{% endif %}
{%- endif %}

## Emerging Patterns
{% for pattern in trends.emerging_patterns %}
- **{{ pattern.pattern }}** ({{ pattern.concern_level }}): {{ pattern.description }}. Evidence: {{ pattern.evidence }}
{%- else %}
- Insufficient data
{%- endfor %}

## Recommendations
{% for action in recommendations.immediate_actions %}
- [{{ action.priority }}] {{ action.action }}: {{ action.rationale }} (within {{ action.timeline }})
{%- else %}
- No action required
{%- endfor %}
{% if diagnostics %}
## Skipped Items
{% for item in diagnostics %}
- {{ item.stage }} / {{ item.source or "-" }}: {{ item.error_type }} {{ item.message }}
{%- endfor %}
{% endif %}
"""
)


def render_report_markdown(report, today: str | None = None, max_alerts: int | None = None) -> str:
    """Render the report as Markdown (渲染 Markdown 报告)."""
    if today is None:
        today = date.today().strftime("%Y-%m-%d")
    if max_alerts is None:
        max_alerts = REPORT_MAX_ALERTS

    rows = [flatten_alert(alert) for alert in report.alerts[:max_alerts]]
    return REPORT_TEMPLATE.render(
        today=today,
        summary=report.executive_summary,
        breakdown=report.alert_breakdown,
        rows=rows,
        omitted=max(len(report.alerts) - len(rows), 0),
        trends=report.trends,
        recommendations=report.recommendations,
        athletes=report.athlete_summary,
        diagnostics=report.diagnostics,
    )


def save_report_markdown(report, output_dir: str = "output", today: str | None = None) -> str:
    if today is None:
        today = date.today().strftime("%Y-%m-%d")

    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, f"sponsorship-report-{today}.md")
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(render_report_markdown(report, today))

    logger.info("[REPORT] Markdown report saved to %s", filepath)
    return filepath


def save_report_json(report, output_dir: str = "output", today: str | None = None) -> str:
    """Save the full report (every alert) as JSON."""
    if today is None:
        today = date.today().strftime("%Y-%m-%d")

    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, f"sponsorship-report-{today}.json")
    payload = report.to_dict()
    payload["executive_summary"] = report.executive_summary
    payload["alert_breakdown"] = report.alert_breakdown
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, default=str)

    logger.info("[REPORT] JSON report saved to %s", filepath)
    return filepath


def render_report_text(report, today: str | None = None, max_alerts: int = 20) -> str:
    """Plain-text report for --dry-run."""
    if today is None:
        today = date.today().strftime("%Y-%m-%d")
    summary = report.executive_summary

    lines = [
        f"[Esports Sponsorship Report] {today}",
        f"Alerts: {summary['total_alerts']} | Critical: {summary['critical_issues']} | "
        f"Athletes: {summary['athletes_affected']}",
        f"Minor exposure: {summary['estimated_minor_exposure']}% | "
        f"Compliance: {round(summary['compliance_score'], 2)}",
        "",
    ]
    for alert in report.alerts[:max_alerts]:
        lines.append(f"[{severity_label(alert.severity).upper()}] #{alert.id} {alert.title}")
        lines.append(f"- {alert.platform}: {alert.description}")
    if len(report.alerts) > max_alerts:
        lines.append(f"... {len(report.alerts) - max_alerts} more")
    if report.diagnostics:
        lines.append("")
        lines.append(f"Skipped items: {len(report.diagnostics)}")
    return "\n".join(lines)
