from __future__ import annotations

import json

from sponsor_watch.analytics.aggregator import AnalyticsSnapshot
from sponsor_watch.delivery.report_writer import (
    flatten_alert,
    render_report_markdown,
    render_report_text,
    save_report_json,
    save_report_markdown,
    severity_label,
)
from sponsor_watch.pipeline import AlertReport, analyze

RECORD = {
    "name": "Player One",
    "nickname": "p1",
    "game": "CS2",
    "playing_country": "BR",
    "followers": {"youtube": 1000},
    "content": {"youtube": [{"id": "v1", "title": "Jogando CS com bet365"}]},
}


def test_severity_labels():
    assert [severity_label(s) for s in (1, 2, 3)] == ["low", "medium", "high"]
    assert severity_label(9) == "unknown"


def test_flatten_alert():
    alert = analyze([RECORD]).alerts[0]
    row = flatten_alert(alert)

    assert row["athlete"] == "Player One"
    assert row["severity"] == "high"
    assert row["keyword"] == "bet365"
    assert row["category"] == "Betting Sites"
    assert "Content unsuitable for minors" in row["compliance_issues"]


def test_markdown_report_contents():
    markdown = render_report_markdown(analyze([RECORD]), today="2024-05-01")

    assert "# 2024-05-01 Esports Gambling Sponsorship Report" in markdown
    assert "| Total alerts | 2 |" in markdown
    assert "| 1 | high | p1 | youtube | Betting Sites |" in markdown
    assert "Enforce mandatory age verification" in markdown


def test_markdown_report_truncates_alert_table():
    markdown = render_report_markdown(analyze([RECORD]), today="2024-05-01", max_alerts=1)
    assert "_1 more alerts in the JSON report._" in markdown


def test_empty_report_renders():
    markdown = render_report_markdown(analyze([]), today="2024-05-01")
    assert "No alerts in this snapshot." in markdown
    assert "Insufficient data" in markdown
    assert "Total alerts: 0" not in markdown

    text = render_report_text(analyze([]), today="2024-05-01")
    assert text.startswith("[Esports Sponsorship Report] 2024-05-01")


def test_reports_are_written(tmp_path):
    report = analyze([RECORD])

    json_path = save_report_json(report, output_dir=str(tmp_path), today="2024-05-01")
    md_path = save_report_markdown(report, output_dir=str(tmp_path), today="2024-05-01")

    assert json_path.endswith("sponsorship-report-2024-05-01.json")
    assert md_path.endswith("sponsorship-report-2024-05-01.md")
    data = json.loads((tmp_path / "sponsorship-report-2024-05-01.json").read_text(encoding="utf-8"))
    assert len(data["alerts"]) == 2
    assert data["executive_summary"]["total_alerts"] == 2
    assert data["alert_breakdown"]["platform_distribution"] == {"youtube": 2}


def test_text_report_lists_alerts():
    text = render_report_text(analyze([RECORD]), today="2024-05-01")
    assert "[HIGH] #1 p1 - Betting Sites detected" in text
    assert "[MEDIUM] #2 p1 - Sponsorships not disclosed" in text


def test_compliance_is_rounded_only_when_rendered():
    snapshot = AnalyticsSnapshot(
        compliance_metrics={"transparency_score": 100, "safety_score": 100, "overall_compliance": 100 - 100 / 3}
    )
    report = AlertReport(analytics=snapshot)

    assert report.executive_summary["compliance_score"] == 100 - 100 / 3
    assert "| Overall compliance | 66.67 |" in render_report_markdown(report, today="2024-05-01")
    assert "Compliance: 66.67" in render_report_text(report, today="2024-05-01")


def test_markdown_lists_athletes():
    markdown = render_report_markdown(analyze([RECORD]), today="2024-05-01")
    assert "## Athletes" in markdown
    assert "| p1 | CS2 | youtube |" in markdown
    assert "| bet365 |" in markdown
    assert "No athletes analysed." in render_report_markdown(analyze([]), today="2024-05-01")
