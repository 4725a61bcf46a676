"""Statusline segments.

Each builder turns a few snapshot fields into a styled rich Text. An empty Text
means the segment is omitted.
"""

import os
from collections.abc import Callable

from rich.text import Text

from . import git
from .config import StatuslineConfig
from .git import Clean, Dirty, GitState, NotRepository

NOT_A_REPOSITORY = "(not a git repository)"


def build_progress_bar(percent: int, config: StatuslineConfig) -> str:
    """Render a fixed-width bar: width * percent // 100 cells filled.

    Usage past the context window would overflow the bar, so the filled count
    is clamped to the bar width.
    """
    filled = config.bar_width * percent // 100
    filled = max(0, min(config.bar_width, filled))
    empty = config.bar_width - filled
    return config.bar_filled * filled + config.bar_empty * empty


def context_percent(current_usage: int, context_window_size: int) -> int:
    if current_usage == 0 or context_window_size <= 0:
        return 0
    return current_usage * 100 // context_window_size


def build_model_component(model_name: str, config: StatuslineConfig) -> Text:
    text = Text(f"{config.icons.model} ")
    text.append(model_name, style=config.palette.model)
    return text


def build_context_component(
    context_window_size: int, current_usage: int, config: StatuslineConfig
) -> Text:
    """Context window usage as a bar plus a percentage."""
    percent = context_percent(current_usage, context_window_size)
    text = Text(f"{config.icons.context} ")
    text.append(build_progress_bar(percent, config), style=config.palette.muted)
    text.append(f" {percent}%")
    return text


def directory_name(current_dir: str | None) -> str:
    """Basename of the session directory, or of the process cwd if unset."""
    path = current_dir or os.getcwd()
    return os.path.basename(path.rstrip("/")) or path


def build_directory_component(current_dir: str | None, config: StatuslineConfig) -> Text:
    text = Text(f"{config.icons.directory} ")
    text.append(directory_name(current_dir), style=config.palette.directory)
    return text


def _ahead_behind(ahead: int, behind: int, config: StatuslineConfig) -> Text:
    """The " | ↑N ↓M" suffix, either half left out when zero; empty when both are."""
    palette = config.palette
    parts = Text()
    if ahead > 0:
        parts.append(f" ↑{ahead}", style=palette.ahead)
    if behind > 0:
        parts.append(f" ↓{behind}", style=palette.behind)
    if not parts:
        return parts
    return Text.assemble(" ", ("|", palette.muted), parts)


def format_git_state(state: GitState, config: StatuslineConfig) -> Text:
    """Render a GitState as "(branch | N files +A -R | ↑X ↓Y)"."""
    palette = config.palette
    match state:
        case NotRepository():
            return Text(NOT_A_REPOSITORY, style=palette.not_repo)
        case Clean(branch=branch, ahead=ahead, behind=behind):
            text = Text.assemble(("(", palette.muted), (branch, palette.branch))
        case Dirty(
            branch=branch,
            file_count=file_count,
            lines_added=added,
            lines_removed=removed,
            ahead=ahead,
            behind=behind,
        ):
            text = Text.assemble(
                ("(", palette.muted),
                (branch, palette.branch),
                " ",
                ("|", palette.muted),
                " ",
                (f"{file_count} files", palette.muted),
            )
            if added:
                text.append(f" +{added}", style=palette.added)
            if removed:
                text.append(f" -{removed}", style=palette.removed)
    text.append_text(_ahead_behind(ahead, behind, config))
    text.append(")", style=palette.muted)
    return text


def build_git_component(
    current_dir: str | None,
    config: StatuslineConfig,
    inspect: Callable[..., GitState] = git.inspect,
) -> Text:
    """Git summary appended to the directory segment.

    Repositories get the git icon in front of the summary; the not-a-repository
    marker stands alone.
    """
    state = inspect(current_dir, timeout=config.git_timeout)
    summary = format_git_state(state, config)
    if isinstance(state, NotRepository):
        return Text(" ").append_text(summary)
    return Text(f" {config.icons.git} ").append_text(summary)


def build_cost_component(total_cost_usd: float, config: StatuslineConfig) -> Text:
    if not total_cost_usd:
        return Text()
    text = Text(f"{config.icons.cost} ")
    text.append(f"${total_cost_usd:.2f}", style=config.palette.cost)
    return text


def build_lines_component(lines_added: int, lines_removed: int, config: StatuslineConfig) -> Text:
    """Session lines changed as +A/-R, omitted only when both counts are zero."""
    if not lines_added and not lines_removed:
        return Text()
    palette = config.palette
    return Text.assemble(
        f"{config.icons.lines} ",
        (f"+{lines_added}", palette.added),
        "/",
        (f"-{lines_removed}", palette.removed),
    )
