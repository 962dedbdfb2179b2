"""Blink CLI — blink dev.

Entry point for the ``blink`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the blink CLI."""
    parser = argparse.ArgumentParser(
        prog="blink",
        description="Static dev server that reloads the browser when files change.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # blink dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Serve a directory with live reload",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Directory to serve")
    dev_parser.add_argument("--host", default=None, help="Bind address (default 127.0.0.1)")
    dev_parser.add_argument("--port", type=int, default=None, help="Bind port (default 3000)")
    dev_parser.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help="Quiet window before reloading (default 200)",
    )
    dev_parser.add_argument(
        "--no-watch",
        dest="watch",
        action="store_false",
        default=None,
        help="Do not watch the directory for changes",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from blink import __version__

    return __version__


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    """Config overrides for the flags the user actually passed."""
    candidates = {
        "host": args.host,
        "port": args.port,
        "debounce_ms": args.debounce_ms,
        "watch": args.watch,
    }
    return {k: v for k, v in candidates.items() if v is not None}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from blink._errors import BlinkError
    from blink.app import dev

    if args.command == "dev":
        try:
            dev(root=args.root, **_overrides(args))
        except BlinkError as exc:
            print(f"blink: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
