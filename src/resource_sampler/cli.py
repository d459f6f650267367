"""CLI interface for resource_sampler."""

from __future__ import annotations

import argparse
import logging
import signal
import subprocess
import sys
import time

from . import __version__
from .config import load_config


def _parse_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"invalid --param {pair!r}, expected KEY=VALUE")
        params[key] = value
    return params


def _cmd_run(args: argparse.Namespace) -> int:
    """Sample host resources while a workload runs, then print the report."""
    cfg = load_config(args.config)
    if args.interval is not None:
        cfg.sampler.interval_seconds = args.interval
    if args.width is not None:
        cfg.chart.width = args.width
    if args.height is not None:
        cfg.chart.height = args.height
    params = {**cfg.params, **_parse_params(args.param)}

    from .measure import start_measure
    from .report import print_summary
    from .sink.factory import create_sink
    from .source.host import HostMetricSource

    command = list(args.workload)
    if command and command[0] == "--":
        command = command[1:]
    sink = create_sink(cfg)

    stop = False

    def _handle_signal(_sig: int, _frame: object) -> None:
        nonlocal stop
        stop = True

    previous = {sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)}

    measurement = start_measure(HostMetricSource(), sink, params, cfg, report_sink=print)
    print(f"resource-sampler running (interval={cfg.sampler.interval_seconds}s, sink={cfg.sink.kind})")

    proc = None
    deadline = time.monotonic() + args.duration if args.duration else None
    exit_code = 0
    try:
        if command:
            proc = subprocess.Popen(command)
        while not stop and measurement.error is None:
            if proc is not None and proc.poll() is not None:
                break
            if deadline is not None and time.monotonic() >= deadline:
                break
            time.sleep(0.2)
    finally:
        if proc is not None:
            if proc.poll() is None:
                proc.terminate()
            exit_code = proc.wait()
        report = measurement.stop_and_report()
        sink.shutdown()
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    print()
    print_summary(report.summaries)
    if measurement.error is not None:
        return 1
    return exit_code


def _cmd_version(_args: argparse.Namespace) -> int:
    print(f"resource_sampler {__version__}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for the resource-sampler CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        prog="resource-sampler",
        description="Sample host CPU, memory and network usage during a workload",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to resource_sampler.yaml")
    sub = parser.add_subparsers(dest="command")

    # run
    run_p = sub.add_parser("run", help="Sample resources and print charts on exit")
    run_p.add_argument("--duration", type=float, default=None, help="Stop after this many seconds")
    run_p.add_argument("--interval", type=float, default=None, help="Sampling interval in seconds")
    run_p.add_argument("--param", action="append", default=[], help="Report parameter KEY=VALUE")
    run_p.add_argument("--width", type=int, default=None, help="Chart width in columns")
    run_p.add_argument("--height", type=int, default=None, help="Chart height in rows")
    run_p.add_argument("workload", nargs=argparse.REMAINDER, help="Command to run while sampling")
    run_p.set_defaults(func=_cmd_run)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
