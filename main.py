#!/usr/bin/env python3
"""主流程控制器: 加载 -> 分析 -> 报告 (Load -> Analyze -> Report)."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
import traceback
from dataclasses import asdict, dataclass, field
from datetime import date

from config import MAX_WORKERS, OUTPUT_DIR, validate_config

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """
    简单的 JSON 日志格式化器 (Simple JSON Log Formatter)
    用于生成机器可读的流水线日志。
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "stage"):
            payload["stage"] = getattr(record, "stage")
        return json.dumps(payload, ensure_ascii=False)


@dataclass
class StageFailure:
    """
    阶段失败记录 (Stage Failure Record)
    记录流水线特定阶段的错误信息。
    """
    stage: str          # 发生错误的阶段 (e.g. "load", "analyze", "parse")
    error_type: str     # 错误类型 (e.g. "CONFIG", "MALFORMED")
    message: str        # 错误详情
    source: str = ""    # 相关运动员/平台 (optional)


@dataclass
class PipelineResult:
    """
    流水线执行结果数据类 (Pipeline Result Data Class)
    """
    run_id: str
    date: str
    strict: bool
    output: str
    success: bool = False
    exit_reason: str = ""
    duration_seconds: float = 0.0
    athletes_loaded: int = 0    # 输入运动员数量
    alerts_generated: int = 0   # 生成的警报数量
    diagnostics_count: int = 0  # 被跳过的条目数量
    report_path: str = ""       # JSON 报告路径
    markdown_path: str = ""     # Markdown 报告路径
    failures: list[StageFailure] = field(default_factory=list)


def configure_logging(log_format: str) -> None:
    """配置日志系统 (Configure Logging)"""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """解析命令行参数 (Parse Command Line Arguments)"""
    parser = argparse.ArgumentParser(
        description="Esports Gambling Sponsorship Monitor"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--input",
        help="运动员快照 JSON 文件 (Athlete snapshot JSON file)",
    )
    source.add_argument(
        "--demo",
        action="store_true",
        help="使用合成演示数据 (Use synthetic demo data)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="演示数据随机种子 (Seed for --demo, default: 42)",
    )
    parser.add_argument(
        "--output",
        choices=["json", "markdown", "both"],
        default="both",
        help="输出格式: json, markdown, 或 both",
    )
    parser.add_argument(
        "--output-dir",
        default=OUTPUT_DIR,
        help=f"产物输出目录 (default: {OUTPUT_DIR})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="仅打印报告到控制台，不写文件 (Print report to stdout without writing report files)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：任何被跳过的条目都返回非零退出码 (Fail run on any skipped item)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="日志格式 (text|json)",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=MAX_WORKERS,
        help=f"警报生成线程数 (Alert generation workers, default: {MAX_WORKERS})",
    )
    return parser.parse_args(argv)


def _append_failure(
    result: PipelineResult, stage: str, error_type: str, message: str, source: str = ""
) -> None:
    result.failures.append(
        StageFailure(stage=stage, error_type=error_type, message=message, source=source)
    )


def _write_json(path: str, data: dict) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)


def _emit_summary(result: PipelineResult, output_dir: str) -> None:
    """输出运行摘要统计 (Emit Run Summary)"""
    summary_path = os.path.join(output_dir, f"run-summary-{result.date}.json")
    _write_json(summary_path, asdict(result))
    logger.info("[SUMMARY] Wrote run summary: %s", summary_path)

    if not result.success:
        error_path = os.path.join(output_dir, f"error-{result.date}.json")
        _write_json(
            error_path,
            {
                "run_id": result.run_id,
                "date": result.date,
                "exit_reason": result.exit_reason,
                "failures": [asdict(item) for item in result.failures],
            },
        )
        logger.info("[SUMMARY] Wrote error report: %s", error_path)


def _finish(result: PipelineResult, started: float, reason: str, success: bool = False) -> PipelineResult:
    result.success = success
    result.exit_reason = reason
    result.duration_seconds = round(time.perf_counter() - started, 3)
    return result


def run_pipeline(args: argparse.Namespace) -> PipelineResult:
    """
    执行主流水线逻辑 (Execute Main Pipeline Logic)

    Steps:
    1. Validate Config (验证配置)
    2. Load snapshot or demo data (加载数据)
    3. Analyze (分析)
    4. Deliver report (交付)
    """
    os.makedirs(args.output_dir, exist_ok=True)
    today = date.today().strftime("%Y-%m-%d")
    run_id = f"{today}-{int(time.time())}"
    started = time.perf_counter()

    result = PipelineResult(run_id=run_id, date=today, strict=args.strict, output=args.output)

    logger.info("=" * 60)
    logger.info("Esports Sponsorship Monitor | date=%s run_id=%s", today, run_id)
    logger.info(
        "options input=%s demo=%s output=%s dry_run=%s strict=%s max_workers=%s",
        args.input,
        args.demo,
        args.output,
        args.dry_run,
        args.strict,
        args.max_workers,
    )

    # 1. 验证配置 (Validate Config)
    valid, config_errors = validate_config()
    if args.max_workers < 1:
        valid = False
        config_errors.append("--max-workers must be >= 1")
    if not valid:
        for item in config_errors:
            _append_failure(result, "config", "CONFIG", item)
        return _finish(result, started, "configuration validation failed")

    # 2. 加载数据 (Load)
    try:
        if args.demo:
            from sponsor_watch.demo import generate_demo_athletes

            athletes = generate_demo_athletes(seed=args.seed)
            logger.info("[LOAD] Generated %s synthetic demo athletes (seed=%s)", len(athletes), args.seed)
        elif args.input:
            from sponsor_watch.loader import load_snapshot

            athletes = load_snapshot(args.input)
        else:
            _append_failure(result, "load", "CONFIG", "either --input or --demo is required")
            return _finish(result, started, "no input given")
    except Exception as exc:
        _append_failure(result, "load", "LOAD", str(exc), source=args.input or "")
        return _finish(result, started, "load stage failed")

    result.athletes_loaded = len(athletes)
    if not athletes:
        return _finish(result, started, "no athletes loaded", success=not args.strict)

    # 3. 分析 (Analyze)
    from sponsor_watch.pipeline import analyze

    report = analyze(athletes, max_workers=args.max_workers)
    result.alerts_generated = len(report.alerts)
    result.diagnostics_count = len(report.diagnostics)
    for diagnostic in report.diagnostics:
        _append_failure(result, diagnostic.stage, diagnostic.error_type, diagnostic.message, diagnostic.source)
    if report.diagnostics:
        logger.warning("[ANALYZE] %s items skipped", len(report.diagnostics))

    # 4. 交付 (Delivery)
    try:
        from sponsor_watch.delivery.report_writer import (
            render_report_text,
            save_report_json,
            save_report_markdown,
        )

        if args.dry_run:
            print("\n" + render_report_text(report, today))
            logger.info("[DELIVERY] Dry run output printed")
        else:
            if args.output in ("json", "both"):
                result.report_path = save_report_json(report, output_dir=args.output_dir, today=today)
            if args.output in ("markdown", "both"):
                result.markdown_path = save_report_markdown(report, output_dir=args.output_dir, today=today)
    except Exception as exc:
        _append_failure(result, "delivery", "DELIVERY", str(exc))
        return _finish(result, started, "delivery stage failed")

    if args.strict and report.diagnostics:
        return _finish(result, started, "items skipped in strict mode")
    return _finish(result, started, "completed", success=True)


def main(argv: list[str] | None = None) -> int:
    """程序入口点：解析参数，运行流水线，处理异常。"""
    args = parse_args(argv)
    configure_logging(args.log_format)

    try:
        result = run_pipeline(args)
    except Exception as exc:
        logger.critical("Pipeline failed unexpectedly: %s", exc)
        traceback.print_exc()
        os.makedirs(args.output_dir, exist_ok=True)
        today = date.today().strftime("%Y-%m-%d")
        crash_result = PipelineResult(
            run_id=f"{today}-{int(time.time())}",
            date=today,
            strict=args.strict,
            output=args.output,
            success=False,
            exit_reason="unhandled exception",
        )
        _append_failure(crash_result, "runtime", "RUNTIME", str(exc))
        _emit_summary(crash_result, args.output_dir)
        return 1

    _emit_summary(result, args.output_dir)
    if result.success:
        logger.info(
            "Pipeline complete | athletes=%s alerts=%s skipped=%s duration=%.2fs",
            result.athletes_loaded,
            result.alerts_generated,
            result.diagnostics_count,
            result.duration_seconds,
        )
        return 0

    logger.error(
        "Pipeline ended with issues | reason=%s strict=%s failures=%s",
        result.exit_reason,
        result.strict,
        len(result.failures),
    )
    if result.strict or result.exit_reason.startswith("configuration"):
        return 1
    return 1 if result.exit_reason in ("no input given", "load stage failed", "delivery stage failed") else 0


if __name__ == "__main__":
    sys.exit(main())
