from __future__ import annotations

import json
from argparse import Namespace

import main


def _args(tmp_path, **overrides) -> Namespace:
    values = dict(
        input=None,
        demo=True,
        seed=42,
        output="both",
        output_dir=str(tmp_path),
        dry_run=False,
        strict=False,
        log_format="text",
        max_workers=2,
    )
    values.update(overrides)
    return Namespace(**values)


def _write_snapshot(tmp_path, records) -> str:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"athletes": records}), encoding="utf-8")
    return str(path)


def test_parse_args_accepts_flags():
    args = main.parse_args(
        ["--input", "snap.json", "--output-dir", "tmp-out", "--strict", "--log-format", "json", "--output", "markdown"]
    )
    assert args.input == "snap.json"
    assert args.demo is False
    assert args.output_dir == "tmp-out"
    assert args.strict is True
    assert args.log_format == "json"
    assert args.output == "markdown"


def test_parse_args_defaults():
    args = main.parse_args(["--demo"])
    assert args.demo is True
    assert args.seed == 42
    assert args.output == "both"
    assert args.max_workers >= 1


def test_run_pipeline_demo_writes_both_reports(tmp_path):
    result = main.run_pipeline(_args(tmp_path))

    assert result.success is True
    assert result.exit_reason == "completed"
    assert result.athletes_loaded == 6
    assert result.report_path.endswith(".json")
    assert result.markdown_path.endswith(".md")
    data = json.loads(open(result.report_path, encoding="utf-8").read())
    assert len(data["alerts"]) == result.alerts_generated


def test_run_pipeline_markdown_only(tmp_path):
    result = main.run_pipeline(_args(tmp_path, output="markdown"))
    assert result.success is True
    assert result.report_path == ""
    assert result.markdown_path


def test_run_pipeline_from_snapshot(tmp_path):
    snapshot = _write_snapshot(
        tmp_path,
        [{"name": "Player One", "content": {"youtube": [{"id": "v1", "title": "Jogando CS com bet365"}]}}],
    )
    result = main.run_pipeline(_args(tmp_path, demo=False, input=snapshot, output="json"))

    assert result.success is True
    assert result.athletes_loaded == 1
    assert result.alerts_generated == 2
    assert result.diagnostics_count == 0


def test_dry_run_prints_and_writes_nothing(tmp_path, capsys):
    result = main.run_pipeline(_args(tmp_path, dry_run=True))

    assert result.success is True
    assert result.report_path == ""
    assert "[Esports Sponsorship Report]" in capsys.readouterr().out
    assert not list(tmp_path.glob("sponsorship-report-*"))


def test_skipped_items_fail_strict_runs(tmp_path):
    snapshot = _write_snapshot(tmp_path, [{"nickname": "nameless"}, {"name": "Ok"}])

    relaxed = main.run_pipeline(_args(tmp_path, demo=False, input=snapshot))
    strict = main.run_pipeline(_args(tmp_path, demo=False, input=snapshot, strict=True))

    assert relaxed.success is True
    assert relaxed.diagnostics_count == 1
    assert strict.success is False
    assert strict.exit_reason == "items skipped in strict mode"
    assert strict.failures[0].error_type == "MALFORMED"


def test_missing_input_file_fails_load(tmp_path):
    result = main.run_pipeline(_args(tmp_path, demo=False, input=str(tmp_path / "missing.json")))
    assert result.success is False
    assert result.exit_reason == "load stage failed"
    assert result.failures[0].stage == "load"


def test_empty_snapshot_is_not_an_error(tmp_path):
    snapshot = _write_snapshot(tmp_path, [])
    result = main.run_pipeline(_args(tmp_path, demo=False, input=snapshot))
    assert result.success is True
    assert result.exit_reason == "no athletes loaded"


def test_config_validation_failure_is_fatal(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "validate_config", lambda: (False, ["bad config"]))
    result = main.run_pipeline(_args(tmp_path))
    assert result.success is False
    assert result.exit_reason == "configuration validation failed"
    assert len(result.failures) == 1


def test_main_writes_run_summary_and_error_report(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "validate_config", lambda: (False, ["bad config"]))
    monkeypatch.setattr(main, "configure_logging", lambda log_format: None)

    exit_code = main.main(["--demo", "--output-dir", str(tmp_path)])

    assert exit_code == 1
    summaries = list(tmp_path.glob("run-summary-*.json"))
    errors = list(tmp_path.glob("error-*.json"))
    assert len(summaries) == 1 and len(errors) == 1
    error = json.loads(errors[0].read_text(encoding="utf-8"))
    assert error["failures"][0]["message"] == "bad config"


def test_main_success_exit_code(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "configure_logging", lambda log_format: None)
    assert main.main(["--demo", "--seed", "7", "--output-dir", str(tmp_path)]) == 0
    assert list(tmp_path.glob("sponsorship-report-*.md"))
