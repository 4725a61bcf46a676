"""Session snapshot parsing.

Claude Code pipes a JSON document describing the session to the statusLine
command on every refresh. Only a handful of fields matter here:

{
  "model": {"display_name": "Opus"},
  "workspace": {"current_dir": "/x/project"},
  "context_window": {
    "context_window_size": 200000,
    "current_usage": {
      "input_tokens": 50000,
      "cache_creation_input_tokens": 10000,
      "cache_read_input_tokens": 5000
    }
  },
  "cost": {"total_cost_usd": 0.15, "total_lines_added": 156, "total_lines_removed": 23}
}

Any of these (or their parents) may be missing or null. Defaults are decided
here, once, so the component builders never have to ask "is this absent?".
"""

import json
import math
from dataclasses import dataclass
from typing import Any, TextIO

DEFAULT_CONTEXT_WINDOW_SIZE = 200_000
UNKNOWN_MODEL = "unknown"

_USAGE_FIELDS = ("input_tokens", "cache_creation_input_tokens", "cache_read_input_tokens")


class StatuslineError(Exception):
    """Base class for errors that prevent rendering a statusline."""


class InputError(StatuslineError):
    """stdin could not be read."""


class ParseError(StatuslineError):
    """The input is not a JSON object."""


@dataclass(frozen=True)
class SessionSnapshot:
    """The fields of a session snapshot the statusline displays."""

    model_name: str = UNKNOWN_MODEL
    current_dir: str | None = None
    context_window_size: int = DEFAULT_CONTEXT_WINDOW_SIZE
    current_usage: int = 0
    total_cost_usd: float = 0.0
    lines_added: int = 0
    lines_removed: int = 0


def single_line(value: str) -> str:
    """Collapse embedded line breaks so a value can't split the statusline."""
    return " ".join(value.splitlines())


def _get(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing or not a dict."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _as_float(value: Any, default: float) -> float:
    """Coerce a JSON number (or numeric string) to float; anything else is the default."""
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return default
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(_as_float(value, default))


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        value = json.dumps(value)
    return single_line(value) or None


def parse_snapshot(text: str, context_default: int = DEFAULT_CONTEXT_WINDOW_SIZE) -> SessionSnapshot:
    """Parse the JSON session snapshot.

    Raises ParseError if the text isn't JSON or isn't a JSON object. Everything
    below the top level is optional.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ParseError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}")

    usage = _get(data, "context_window", "current_usage")
    current_usage = sum(_as_int(_get(usage, name), 0) for name in _USAGE_FIELDS)

    return SessionSnapshot(
        model_name=_as_str(_get(data, "model", "display_name")) or UNKNOWN_MODEL,
        current_dir=_as_str(_get(data, "workspace", "current_dir")),
        context_window_size=_as_int(
            _get(data, "context_window", "context_window_size"), context_default
        ),
        current_usage=current_usage,
        total_cost_usd=_as_float(_get(data, "cost", "total_cost_usd"), 0.0),
        lines_added=_as_int(_get(data, "cost", "total_lines_added"), 0),
        lines_removed=_as_int(_get(data, "cost", "total_lines_removed"), 0),
    )


def read_snapshot(
    stream: TextIO, context_default: int = DEFAULT_CONTEXT_WINDOW_SIZE
) -> SessionSnapshot:
    """Read stdin (or any text stream) to EOF and parse it."""
    try:
        text = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"could not read input: {e}") from e
    return parse_snapshot(text, context_default)
