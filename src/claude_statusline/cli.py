"""CLI entry point for claude-statusline.

Commands:
- render (default): read the session JSON from stdin, print the statusline
- platform: print the detected platform (decides emoji vs ASCII icons)
"""

import argparse
import sys

from .config import load_config
from .log import get_logger
from .session import InputError, ParseError, read_snapshot
from .statusline import render, to_ansi

_log = get_logger("cli")


def cmd_render(args: argparse.Namespace) -> None:
    """Render the statusline from the session JSON on stdin."""
    config = load_config()

    try:
        snapshot = read_snapshot(sys.stdin, config.context_default)
    except InputError as e:
        _log.error("%s", e)
        print("Error: Failed to read stdin", file=sys.stderr)
        sys.exit(1)
    except ParseError as e:
        _log.error("%s", e)
        print("Error: Failed to parse JSON input", file=sys.stderr)
        sys.exit(1)

    print(to_ansi(render(snapshot, config)))


def cmd_platform(args: argparse.Namespace) -> None:
    """Print the detected platform classification."""
    config = load_config()
    print(config.platform)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="claude-statusline",
        description="Single-line status display for Claude Code (reads session JSON on stdin)",
    )
    parser.set_defaults(func=cmd_render)
    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser(
        "render",
        help="Render the statusline (default; reads JSON from stdin)",
    )
    render_parser.set_defaults(func=cmd_render)

    platform_parser = subparsers.add_parser(
        "platform",
        help="Print the detected platform (set STATUSLINE_PLATFORM to override)",
    )
    platform_parser.set_defaults(func=cmd_platform)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
