#!/usr/bin/env python3
# cli.py: command line entry point for salvo

import argparse
import asyncio
import logging
import sys

from salvo.config import load_config
from salvo.core import ThreadGroup
from salvo.errors import ConfigError, ConnectionUnusableError
from salvo.listeners import StdoutListener
from salvo.logging_config import setup_logging
from salvo.models import Sampler, Summary
from salvo.persistence import ReportWriter

logger = logging.getLogger("salvo.cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Salvo: fire repeated HTTP POST / Rserve calls and report latency",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Load shape
    parser.add_argument(
        "--freq",
        type=int,
        default=10,
        help="Number of invocations per sampler",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=10,
        help="Worker pool size (1 runs sequentially)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run invocations one at a time, ignoring --threads",
    )
    parser.add_argument(
        "--grace-period",
        type=float,
        default=0.0,
        help="Seconds to wait after the last invocation before summarizing",
    )

    # Targets
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the sampler config file",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP request timeout in seconds",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort the run on the first HTTP transport error instead of counting it",
    )

    # Output
    parser.add_argument(
        "--report-file",
        default=None,
        help="Optional JSON file to write per-sampler summaries to",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    # Logging & Debugging
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., salvo.log)",
    )

    args = parser.parse_args(argv)
    if args.freq < 0:
        parser.error("--freq must be >= 0")
    if args.threads < 1:
        parser.error("--threads must be >= 1")
    if args.grace_period < 0:
        parser.error("--grace-period must be >= 0")
    return args


async def run_samplers(
    samplers: list[Sampler],
    freq: int,
    threads: int,
    grace_period_s: float = 0.0,
    use_progress_bar: bool = False,
) -> dict[str, Summary]:
    """Open every action, run each sampler in turn, close every action."""
    summaries: dict[str, Summary] = {}
    opened = []
    try:
        for sampler in samplers:
            await sampler.action.open()
            opened.append(sampler.action)

        for sampler in samplers:
            print(sampler.name)
            group = ThreadGroup(
                sampler,
                freq=freq,
                num_of_threads=threads,
                grace_period_s=grace_period_s,
                use_progress_bar=use_progress_bar,
            )
            summaries[sampler.name] = await group.start(StdoutListener())
    finally:
        for action in opened:
            await action.close()

    return summaries


async def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    setup_logging(level=log_level, log_file=args.log_file)

    threads = 1 if args.sequential else args.threads

    try:
        samplers = load_config(args.config, timeout_s=args.timeout, fail_fast=args.fail_fast)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if not samplers:
        logger.warning(f"No samplers defined in {args.config}")
        return 0

    logger.info(
        f"Starting salvo with {len(samplers)} samplers | "
        f"Mode: {'SEQUENTIAL' if threads == 1 else 'POOLED'} | "
        f"Freq: {args.freq} | Threads: {threads}"
    )

    try:
        summaries = await run_samplers(
            samplers,
            freq=args.freq,
            threads=threads,
            grace_period_s=args.grace_period,
            use_progress_bar=not args.no_progress,
        )
    except ConnectionUnusableError as e:
        logger.error(f"Aborting: {e}")
        return 1

    if args.report_file:
        ReportWriter(args.report_file).save(summaries)

    total_errors = sum(s.error_count for s in summaries.values())
    total_count = sum(s.count for s in summaries.values())
    logger.info(f"All runs completed: {total_count} samples, {total_errors} errors")
    return 0


def main():
    sys.exit(asyncio.run(run()))

if __name__ == "__main__":
    main()
