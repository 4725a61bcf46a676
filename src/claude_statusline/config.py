"""Configuration for claude-statusline.

There is no config file: everything is fixed except the icon set, which follows
the detected platform (see platforms.py). The config is built once at startup
and passed to every component builder.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .platforms import Platform, detect_platform


@dataclass(frozen=True)
class IconSet:
    """Glyphs that prefix each statusline segment."""

    model: str
    context: str
    directory: str
    git: str
    cost: str = "💵"
    lines: str = "✏️ "  # pencil renders narrow; pad so the text doesn't collide


EMOJI_ICONS = IconSet(model="🚀", context="🔥", directory="📂", git="🎋")
ASCII_ICONS = IconSet(model=">", context="[", directory="@", git="*")


@dataclass(frozen=True)
class Palette:
    """Rich style strings for each kind of text."""

    model: str = "cyan"
    directory: str = "blue"
    branch: str = "magenta"
    muted: str = "bright_black"  # separators, progress bar, file count
    added: str = "green"
    removed: str = "red"
    ahead: str = "green"
    behind: str = "red"
    cost: str = "green"
    not_repo: str = "italic yellow"


@dataclass(frozen=True)
class StatuslineConfig:
    """Statusline configuration."""

    platform: Platform = Platform.UNKNOWN
    icons: IconSet = EMOJI_ICONS
    palette: Palette = field(default_factory=Palette)
    bar_width: int = 15
    bar_filled: str = "█"
    bar_empty: str = "░"
    context_default: int = 200_000
    git_timeout: float = 2.0  # seconds, per git invocation


def icons_for(platform: Platform) -> IconSet:
    """ASCII glyphs for MINGW terminals, emoji everywhere else."""
    if platform is Platform.MINGW:
        return ASCII_ICONS
    return EMOJI_ICONS


def load_config(environ: Mapping[str, str] | None = None) -> StatuslineConfig:
    """Build the config for this process from the environment."""
    if environ is None:
        environ = os.environ

    platform = detect_platform(environ)
    return StatuslineConfig(platform=platform, icons=icons_for(platform))
