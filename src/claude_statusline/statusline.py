"""Claude Code statusline - assembles the segments into one line.

Format:

    🚀 Opus | 🔥 ████░░░░░░░░░░░ 32% | 📂 project 🎋 (main | 2 files +10 -3) | 💵 $0.15 | ✏️  +156/-23

Usage in ~/.claude/settings.json:

{
  "statusLine": {
    "type": "command",
    "command": "claude-statusline"
  }
}
"""

from rich.console import Console
from rich.text import Text

from .components import (
    build_context_component,
    build_cost_component,
    build_directory_component,
    build_git_component,
    build_lines_component,
    build_model_component,
)
from .config import StatuslineConfig
from .session import SessionSnapshot


def separator(config: StatuslineConfig) -> Text:
    return Text.assemble(" ", ("|", config.palette.muted), " ")


def assemble(
    model: Text,
    context: Text,
    directory: Text,
    git: Text,
    cost: Text,
    lines: Text,
    config: StatuslineConfig,
) -> Text:
    """Join the segments; cost and lines are skipped when empty."""
    sep = separator(config)
    line = Text()
    line.append_text(model)
    line.append_text(sep)
    line.append_text(context)
    line.append_text(sep)
    line.append_text(directory)
    line.append_text(git)
    for optional in (cost, lines):
        if optional:
            line.append_text(sep)
            line.append_text(optional)
    return line


def render(snapshot: SessionSnapshot, config: StatuslineConfig) -> Text:
    """Build every segment from the snapshot and assemble the statusline."""
    return assemble(
        build_model_component(snapshot.model_name, config),
        build_context_component(snapshot.context_window_size, snapshot.current_usage, config),
        build_directory_component(snapshot.current_dir, config),
        build_git_component(snapshot.current_dir, config),
        build_cost_component(snapshot.total_cost_usd, config),
        build_lines_component(snapshot.lines_added, snapshot.lines_removed, config),
        config,
    )


def to_ansi(line: Text) -> str:
    """Render styled text to a single line of ANSI-escaped output (no newline)."""
    console = Console(
        force_terminal=True,
        color_system="standard",
        soft_wrap=True,
        markup=False,
        emoji=False,
        highlight=False,
    )
    with console.capture() as capture:
        console.print(line, end="")
    # segments are single-line already; this guards the output contract
    return " ".join(capture.get().splitlines())
