"""
Command line entry point.

Exit codes:
    0 = healthy
    1 = unhealthy
    2 = configuration / argument error
"""

import argparse
import logging
import sys
from typing import List, Optional

from vmhealth.config import ConfigurationError, get_settings, parse_policy
from vmhealth.report import render_report
from vmhealth.services.host_monitor import run_health_check

EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="vmhealth",
        description=(
            "Check the health of this host based on CPU, memory and disk "
            "utilisation.\nThe host is HEALTHY if ANY metric is below the "
            "threshold, UNHEALTHY if all three are at or above it."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Exit codes: 0 = healthy, 1 = unhealthy, 2 = bad arguments.",
    )
    parser.add_argument(
        "-t",
        "--threshold",
        default=settings.threshold,
        metavar="THRESHOLD",
        help=f"Threshold percent (default {settings.threshold}).",
    )
    parser.add_argument(
        "-i",
        "--interval",
        default=settings.interval,
        metavar="INTERVAL",
        help=(
            "Sample interval in seconds for the CPU calculation "
            f"(default {settings.interval})."
        ),
    )
    parser.add_argument(
        "-e",
        "--explain",
        action="store_true",
        default=settings.explain,
        help="Explain the reason for the health status.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON instead of text.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Log level for diagnostics on stderr (default {settings.log_level}).",
    )
    parser.add_argument(
        "words",
        nargs="*",
        metavar="explain",
        help="The word 'explain' is accepted like -e; other words are ignored.",
    )
    return parser


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)
    configure_logging(args.log_level)

    try:
        policy = parse_policy(args.threshold, args.interval)
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    explain = args.explain or "explain" in args.words
    report = run_health_check(policy, explain=explain)

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(render_report(report))

    return report.verdict.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
