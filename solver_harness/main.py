#!/usr/bin/env python3
"""CLI entrypoint: solve the sample problems and print the results.

Usage examples:
    python -m solver_harness.main
    python -m solver_harness.main --problem matrix_qp --backend gscip

Flags:
    --problem NAME        Sample to run (toy_lp, integer_vector, matrix_qp, all).
    --backend NAME        Solver backend (gscip, glop, pdlp); defaults to SOLVER_BACKEND.
    --time-limit SECONDS  Solver time limit; defaults to SOLVER_TIME_LIMIT_SECONDS.
    --log-level LEVEL     Logging level (INFO, DEBUG, WARNING, ERROR).

Exit codes:
    0 on success, 1 when a solver could not be created, 130 on interrupt.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional, Sequence

from solver_harness.config import parse_log_level, settings, setup_json_logging, setup_text_logging
from solver_harness.jobs.sample_run_job import run_sample
from solver_harness.services.sample_problems import SAMPLE_PROBLEMS
from solver_harness.services.solvers.errors import SolverUnavailableError
from solver_harness.services.solvers.ortools_mathopt_adapter import MathOptConfig

logger = logging.getLogger("solver_harness.main")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solve the sample optimization problems.")
    parser.add_argument(
        "--problem",
        type=str,
        choices=[*SAMPLE_PROBLEMS, "all"],
        default="all",
        help="Sample problem to solve (default: all).",
    )
    parser.add_argument(
        "--backend",
        type=str,
        default=None,
        help="Solver backend name (default: SOLVER_BACKEND setting).",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Solver time limit in seconds.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (e.g. INFO, DEBUG).",
    )
    return parser.parse_args(argv)


def configure_logging(level: Optional[str]) -> None:
    lvl = parse_log_level(level or settings.LOG_LEVEL)
    if settings.LOG_JSON:
        setup_json_logging(log_level=lvl)
    else:
        setup_text_logging(log_level=lvl)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    config = MathOptConfig.from_settings(settings)
    if args.backend:
        config = dataclasses.replace(config, backend=args.backend.strip().lower())
    if args.time_limit is not None:
        config = dataclasses.replace(config, time_limit_seconds=args.time_limit)

    names: List[str] = list(SAMPLE_PROBLEMS) if args.problem == "all" else [args.problem]
    logger.info("cli.start", extra={"backend": config.backend, "problem": args.problem})

    exit_code = 0
    try:
        for name in names:
            print(f"== {name} ==")
            try:
                outcome = run_sample(sample_name=name, solver_config=config)
            except SolverUnavailableError as e:
                logger.error("cli.solver_unavailable", extra={"problem": name, "backend": e.backend, "error": e.reason})
                print(f"Could not create solver: {e}")
                exit_code = 1
                continue
            print(outcome["report"])
    except KeyboardInterrupt:
        logger.warning("cli.interrupted")
        return 130

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
