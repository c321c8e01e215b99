"""Command line entry point: ``python -m wasteroute run|schedule``."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import settings
from .data.snapshot_repository import SnapshotRequestSource
from .logging_config import configure_logging
from .persistence.filesystem import FileRouteSink, FileStorage
from .services.orchestration.scheduler import CycleScheduler
from .services.orchestration.service import RoutingOrchestrator

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="wasteroute", description=settings.app_name)
    p.add_argument("--log-level", default=None, help="Override WASTEROUTE_LOG_LEVEL")
    p.add_argument("--snapshot", type=Path, default=None, help="JSON snapshot of requests, agents and materials")
    p.add_argument("--data-root", type=Path, default=None, help="Directory that receives run outputs")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")

    sub = p.add_subparsers(dest="command", required=True)
    run = sub.add_parser("run", help="Run one routing cycle and print its summary as JSON")
    run.add_argument("--by-material", action="store_true", help="Plan separate routes per material")

    schedule = sub.add_parser("schedule", help="Run the automatic cycle on a fixed interval")
    schedule.add_argument("--interval-minutes", type=float, default=None)
    schedule.add_argument("--timeout-seconds", type=float, default=None)
    return p


def _build_orchestrator(args: argparse.Namespace) -> tuple[RoutingOrchestrator, FileRouteSink]:
    source = SnapshotRequestSource(args.snapshot.expanduser().resolve() if args.snapshot else None)
    sink = FileRouteSink(FileStorage(args.data_root))
    seed = args.seed if args.seed is not None else settings.random_seed
    return RoutingOrchestrator(source, sink, rng=random.Random(seed)), sink


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        orchestrator, sink = _build_orchestrator(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error(str(exc))
        return 2

    if args.command == "run":
        if args.by_material:
            summary = orchestrator.run_manual_by_material()
        else:
            summary = orchestrator.run_automatic_cycle()
        json.dump(summary.to_payload(), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")
        return 1 if summary.error else 0

    interval = args.interval_minutes * 60 if args.interval_minutes is not None else None

    def scheduled_cycle():
        sink.new_run()
        return orchestrator.run_automatic_cycle()

    scheduler = CycleScheduler(
        scheduled_cycle,
        interval_seconds=interval,
        timeout_seconds=args.timeout_seconds,
    )
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping scheduler")
    return 0


if __name__ == "__main__":
    sys.exit(main())
