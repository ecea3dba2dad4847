#!/usr/bin/env python3
"""CLI entrypoint for drastic-idle."""
from __future__ import annotations

import argparse
import curses
import sys
from pathlib import Path
from typing import List, Optional

import di_daemon
from di_config import (
    DEFAULT_AUTO_SNOOZE_SECONDS,
    DEFAULT_PHASE1_SECONDS,
    DEFAULT_PHASE2_CMD,
    DEFAULT_PHASE2_SECONDS,
    DEFAULT_TICK_MS,
    Config,
    ConfigError,
    build_config,
)

PROG = "drastic-idle"

# Options whose value may itself start with "-" (e.g. "--auto-snooze -5").
VALUE_OPTIONS = {
    "--phase1",
    "-1",
    "--phase2",
    "-2",
    "--auto-snooze",
    "-a",
    "--phase1-cmd",
    "--phase2-cmd",
    "--tick-ms",
    "--log-file",
}

EPILOG = """\
keys:
  q, ctrl+c   quit
  any other key or mouse event resets the countdown
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Close the active window, then power off, after a period of inactivity.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-1", "--phase1", metavar="SEC", default=None,
        help=f"idle before phase1 (default {DEFAULT_PHASE1_SECONDS})",
    )
    parser.add_argument(
        "-2", "--phase2", metavar="SEC", default=None,
        help=f"idle before phase2 (default {DEFAULT_PHASE2_SECONDS})",
    )
    parser.add_argument(
        "-a", "--auto-snooze", metavar="SEC", default=None,
        help=f"snooze after phase1 (default {DEFAULT_AUTO_SNOOZE_SECONDS})",
    )
    parser.add_argument(
        "--phase1-cmd", metavar="CMD", default=None,
        help="run on phase1 through sh (default none)",
    )
    parser.add_argument(
        "--phase2-cmd", metavar="CMD", default=None,
        help=f"run on phase2 (default {DEFAULT_PHASE2_CMD}); use 'none' to disable",
    )
    parser.add_argument(
        "--tick-ms", metavar="MS", default=None,
        help=f"loop interval in milliseconds (default {DEFAULT_TICK_MS})",
    )
    parser.add_argument(
        "--no-window-close", action="store_true",
        help="do not close the last active window on phase1",
    )
    parser.add_argument("--log-file", metavar="PATH", default=None, help="log file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def normalize_argv(argv: List[str]) -> List[str]:
    """Attach option values to their flag so values like '-5' survive argparse."""
    out: List[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in VALUE_OPTIONS:
            # A trailing flag with no value is an empty value.
            value = argv[i + 1] if i + 1 < len(argv) else ""
            out.append(f"{arg}={value}")
            i += 2
            continue
        out.append(arg)
        i += 1
    return out


def config_from_args(args: argparse.Namespace) -> Config:
    return build_config(
        phase1=args.phase1,
        phase2=args.phase2,
        auto_snooze=args.auto_snooze,
        phase1_cmd=args.phase1_cmd,
        phase2_cmd=args.phase2_cmd,
        tick_ms=args.tick_ms,
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    # Unknown arguments are ignored.
    args, _unknown = parser.parse_known_args(normalize_argv(argv))

    try:
        config = config_from_args(args)
    except ConfigError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1

    log_path = Path(args.log_file).expanduser() if args.log_file else None
    try:
        return di_daemon.main(
            config,
            log_path=log_path,
            verbose=args.verbose,
            close_windows=not args.no_window_close,
        )
    except KeyboardInterrupt:
        return 0
    except (curses.error, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
