"""pswap - command line entry point."""

import argparse
import logging
import os
import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

from pswap.logging_config import setup_logging
from pswap.models import ProcessStatus, ReadError
from pswap.reader import (
    PROC_ROOT,
    SortKey,
    SystemSwap,
    collect_report,
    iter_process_statuses,
    system_swap,
)

logger = logging.getLogger(__name__)

HEADER = "     PID          SWAP     NAME"


def format_row(status: ProcessStatus) -> str:
    """Format one report line; a missing VmSwap prints as 0."""
    return f"{status.pid:>8}     {status.swap_kb_or_zero:>6} kB     {status.name}"


def format_total(total_kb: int) -> str:
    return f"Total     {total_kb} kB"


def format_system(swap: SystemSwap) -> str:
    return f"System    {swap.used_kb} kB / {swap.total_kb} kB"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pswap",
        description="Report per-process swap usage from /proc.",
    )
    parser.add_argument(
        "-c", "--total", action="store_true",
        help="produce total swap usage",
    )
    parser.add_argument(
        "-s", "--sort", choices=[key.value for key in SortKey],
        help="sort rows (swap: largest first); default is directory order",
    )
    parser.add_argument(
        "--system", action="store_true",
        help="also print host-wide swap used/total",
    )
    parser.add_argument(
        "--proc-root", default=os.environ.get("PSWAP_PROC_ROOT", str(PROC_ROOT)),
        metavar="PATH",
        help="process information directory (default: $PSWAP_PROC_ROOT or /proc)",
    )
    parser.add_argument(
        "--allow-missing-pid", action="store_true",
        help="accept status records without a Pid line, reporting pid 0",
    )
    parser.add_argument(
        "--tui", action="store_true",
        help="show the report in an interactive table",
    )
    parser.add_argument(
        "--log-level", default=os.environ.get("PSWAP_LOG_LEVEL", "WARNING"),
        metavar="LEVEL",
        help="logging level (default: $PSWAP_LOG_LEVEL or WARNING)",
    )
    return parser


def print_report(
    results: Iterable[ProcessStatus | ReadError],
    *,
    show_total: bool,
    out: TextIO,
    err: TextIO,
) -> int:
    """
    Write rows to out and diagnostics to err as results are consumed.

    Returns:
        The total swap in kB over all parsed records.
    """
    total = 0
    print(HEADER, file=out)
    for result in results:
        if isinstance(result, ReadError):
            print(result, file=err)
            continue
        total += result.swap_kb_or_zero
        print(format_row(result), file=out)

    if show_total:
        print(format_total(total), file=out)
    return total


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the pswap command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    require_pid = not args.allow_missing_pid

    try:
        if args.tui or args.sort:
            sort_key = SortKey(args.sort) if args.sort else SortKey.SWAP
            report = collect_report(args.proc_root, sort_key=sort_key, require_pid=require_pid)
            if args.tui:
                from pswap.app import PswapApp

                PswapApp(report, proc_root=args.proc_root).run()
                return 0
            results = [*report.statuses, *report.errors]
        else:
            results = iter_process_statuses(args.proc_root, require_pid=require_pid)
    except OSError as exc:
        logger.error("Cannot list %s: %s", args.proc_root, exc)
        return 1

    print_report(results, show_total=args.total, out=sys.stdout, err=sys.stderr)

    if args.system:
        print(format_system(system_swap()), file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
