"""CLI entrypoint for the daily report aggregation pipeline."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from covid_stats.common.config_loader import AggregateConfig, load_config
from covid_stats.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS, STAGES
from covid_stats.common.errors import PipelineError
from covid_stats.common.http import HttpClient
from covid_stats.common.logging import build_logger, log_event
from covid_stats.common.time_utils import generate_run_id, parse_run_date
from covid_stats.pipeline.aggregate import run_aggregate
from covid_stats.pipeline.fetch import run_fetch
from covid_stats.pipeline.reports import write_run_summary


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--input-dir", default=None)
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--end-date", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def execute_stage(stage: str, config: AggregateConfig, args: argparse.Namespace, run_id: str, logger, results: dict):
    input_dir = Path(args.input_dir) if args.input_dir else config.daily_reports_dir
    if stage == "fetch":
        end_date = date.fromisoformat(parse_run_date(args.end_date))
        with HttpClient() as client:
            results["fetch"] = run_fetch(config.fetch, input_dir, end_date, client, run_id, logger)
    elif stage == "aggregate":
        results["aggregate"] = run_aggregate(config, input_dir, api_dir(config, args), run_id, logger)
    else:
        raise ValueError(f"Unknown stage: {stage}")


def api_dir(config: AggregateConfig, args: argparse.Namespace) -> Path:
    return Path(args.output_dir) if args.output_dir else config.api_dir


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(run_id, log_dir=Path(args.log_dir), level=args.log_level)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    stages = STAGES if args.command == "all" else (args.command,)

    try:
        config = load_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
    except PipelineError as exc:
        log_event(logger, str(exc), run_id=run_id, stage="config", event="CONFIG_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL

    results: dict = {}
    for stage in stages:
        log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
        try:
            execute_stage(stage, config, args, run_id, logger, results)
        except PipelineError as exc:
            log_event(
                logger,
                f"stage failed: {exc}",
                run_id=run_id,
                stage=stage,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return EXIT_HARD_FAIL
        except Exception as exc:
            log_event(
                logger,
                f"unexpected failure: {exc!r}",
                run_id=run_id,
                stage=stage,
                event="STAGE_FAIL",
                status="error",
                error_code="UNEXPECTED_ERROR",
            )
            return EXIT_HARD_FAIL
        log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok")

    if "aggregate" in results:
        write_run_summary(
            api_dir(config, args),
            run_id=run_id,
            status="success",
            aggregation=results["aggregate"],
            fetch_summary=results.get("fetch"),
        )
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
