from __future__ import annotations

import json

import pytest

from sponsor_watch.exceptions import MalformedInputError
from sponsor_watch.loader import load_snapshot, parse_athlete, parse_athletes
from sponsor_watch.models import Athlete, PlatformAnalysis
from sponsor_watch.taxonomy import default_taxonomy

COLLECTOR_RECORD = {
    "name": "Player One",
    "nickname": "p1",
    "game": "CS2",
    "team": "Demo",
    "playing_country": "BR",
    "social_media": {
        "youtube": {"subscribers": "1200"},
        "twitch": {"followers": 300},
    },
    "raw_data": {
        "youtube": {
            "sponsorship_analysis": {
                "videos_analyzed": 4,
                "videos_with_sponsors": 1,
                "unique_sponsors": ["blaze"],
                "total_sponsor_mentions": 1,
                "sponsorship_evidence": [
                    {
                        "video": {"title": "Blaze hoje", "id": "abc", "published": "2024-04-01"},
                        "sponsors_found": [{"keyword": "blaze", "category": "online_casinos", "context": "blaze hoje"}],
                    }
                ],
                "risk_score": 26,
                "risk_level": "low",
                "has_disclosure": False,
                "compliance_score": 0,
            }
        }
    },
}


def test_load_snapshot_accepts_list_and_wrapped_forms(tmp_path):
    as_list = tmp_path / "list.json"
    as_list.write_text(json.dumps([{"name": "A"}]), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"athletes": [{"name": "A"}, {"name": "B"}]}), encoding="utf-8")

    assert load_snapshot(str(as_list)) == [{"name": "A"}]
    assert len(load_snapshot(str(wrapped))) == 2


def test_load_snapshot_rejects_non_list(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"athletes": "nope"}), encoding="utf-8")
    with pytest.raises(MalformedInputError):
        load_snapshot(str(path))


def test_collector_shape():
    athlete, diagnostics = parse_athlete(COLLECTOR_RECORD, default_taxonomy())

    assert diagnostics == []
    assert athlete.followers == {"youtube": 1200, "twitch": 300, "twitter": 0}
    assert athlete.total_followers == 1500
    assert list(athlete.platform_analyses) == ["youtube"]
    youtube = athlete.platform_analyses["youtube"]
    assert youtube.unique_sponsors == ("blaze",)
    assert youtube.evidence[0].content_item.id == "abc"


def test_contract_shape_and_raw_content():
    record = {
        "name": "Player Two",
        "followers": {"twitch": 5000},
        "platforms": {"twitch": {"unique_sponsors": ["stake"], "risk_score": 80}},
        "content": {"youtube": [{"id": "v1", "title": "Jogando CS com bet365"}, "skip me"]},
    }
    athlete, diagnostics = parse_athlete(record, default_taxonomy())

    assert diagnostics == []
    assert athlete.followers == {"twitch": 5000}
    assert athlete.platform_analyses["twitch"].risk_score == 80
    youtube = athlete.platform_analyses["youtube"]
    assert youtube.videos_analyzed == 1
    assert youtube.unique_sponsors == ("bet365",)


def test_malformed_platform_is_dropped_with_diagnostic():
    record = {
        "name": "Player Three",
        "platforms": {"youtube": ["not", "an", "object"], "twitch": {"risk_score": 10}},
        "content": {"twitter": "not a list"},
    }
    athlete, diagnostics = parse_athlete(record, default_taxonomy())

    assert list(athlete.platform_analyses) == ["twitch"]
    assert [d.source for d in diagnostics] == ["Player Three/youtube", "Player Three/twitter"]
    assert all(d.error_type == "MALFORMED" for d in diagnostics)


def test_parse_athletes_skips_non_objects():
    athletes, diagnostics = parse_athletes([COLLECTOR_RECORD, 7, None], default_taxonomy())
    assert [a.name for a in athletes] == ["Player One"]
    assert [d.source for d in diagnostics] == ["athlete[1]", "athlete[2]"]


def test_parse_athletes_keeps_athlete_objects_in_order():
    existing = Athlete(name="Already Parsed")
    athletes, diagnostics = parse_athletes([existing, COLLECTOR_RECORD, "junk"], default_taxonomy())

    assert athletes[0] is existing
    assert [a.name for a in athletes] == ["Already Parsed", "Player One"]
    assert [d.source for d in diagnostics] == ["athlete[2]"]


@pytest.mark.parametrize(
    "flag, expected",
    [("false", False), ("False", False), ("0", False), ("", False), ("true", True), (" TRUE ", True), (1, True), (None, False)],
)
def test_disclosure_flag_parsing(flag, expected):
    analysis = PlatformAnalysis.from_payload({"has_disclosure": flag})
    assert analysis.has_disclosure is expected
