"""Shared logging for claude-statusline.

All components log to ~/.local/state/claude-statusline/logs/statusline.log via
Python's logging module. stdout carries the rendered line and stderr the fatal
diagnostics, so nothing here ever writes to either.
Filter with grep: grep 'claude_statusline.git' ~/.local/state/claude-statusline/logs/statusline.log
"""

import logging
from pathlib import Path


def get_log_path() -> Path:
    """XDG state directory: ~/.local/state/claude-statusline/logs/statusline.log"""
    log_dir = Path.home() / ".local" / "state" / "claude-statusline" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "statusline.log"


def _make_handler() -> logging.Handler:
    try:
        handler: logging.Handler = logging.FileHandler(get_log_path())
    except OSError:
        # read-only home; rendering must not depend on the log file
        return logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(message)s", datefmt="%H:%M:%S"))
    return handler


_root = logging.getLogger("claude_statusline")
_root.addHandler(_make_handler())
_root.setLevel(logging.DEBUG)
# don't propagate to root logger (avoids duplicate output if someone
# configures the root logger elsewhere)
_root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return _root.getChild(name)
