"""Git working-tree state for the statusline.

The statusline refreshes on every keystroke, so this sticks to at most three
git invocations:

1. `rev-parse --is-inside-work-tree` - are we in a repo at all?
2. `status --porcelain=v2 --branch` - branch, upstream, ahead/behind and one
   line per changed or untracked file, all in one call (git 2.11+).
3. `diff HEAD --numstat` - line counts, only when something changed.

Any git failure (no binary, corrupt repo, timeout, a git too old for porcelain
v2) degrades to NotRepository; it never breaks the statusline.
"""

import subprocess
from dataclasses import dataclass

from .log import get_logger
from .session import single_line

_log = get_logger("git")

DETACHED_HEAD = "detached HEAD"


@dataclass(frozen=True)
class NotRepository:
    """The directory is not inside a git working tree (or git couldn't tell us)."""


@dataclass(frozen=True)
class Clean:
    """A repository with no pending changes."""

    branch: str
    ahead: int = 0
    behind: int = 0


@dataclass(frozen=True)
class Dirty:
    """A repository with modified, staged or untracked files."""

    branch: str
    file_count: int
    lines_added: int = 0
    lines_removed: int = 0
    ahead: int = 0
    behind: int = 0


GitState = NotRepository | Clean | Dirty


class UnsupportedStatusFormat(ValueError):
    """`git status` output isn't porcelain v2 (git older than 2.11)."""


@dataclass(frozen=True)
class StatusSummary:
    """Parsed `git status --porcelain=v2 --branch` output."""

    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    file_count: int = 0


def parse_status(output: str) -> StatusSummary:
    """Parse `git status --porcelain=v2 --branch` output.

    Header lines start with "# branch."; every other non-empty line is one
    changed, unmerged or untracked file:

        # branch.oid 1f2e3d...
        # branch.head main
        # branch.upstream origin/main
        # branch.ab +2 -1
        1 .M N... 100644 100644 100644 abc... abc... src/app.py
        ? notes.txt
    """
    head: str | None = None
    upstream: str | None = None
    ahead = behind = 0
    file_count = 0

    for line in output.splitlines():
        if not line:
            continue
        if line.startswith("# "):
            key, _, value = line[2:].partition(" ")
            if key == "branch.head":
                head = value
            elif key == "branch.upstream":
                upstream = value or None
            elif key == "branch.ab":
                ahead, behind = _parse_ahead_behind(value)
            continue
        file_count += 1

    if head is None:
        raise UnsupportedStatusFormat("no '# branch.head' header in git status output")

    if not head or head == "(detached)":
        branch = DETACHED_HEAD
    else:
        branch = single_line(head)
    return StatusSummary(
        branch=branch, upstream=upstream, ahead=ahead, behind=behind, file_count=file_count
    )


def _parse_ahead_behind(value: str) -> tuple[int, int]:
    """Parse the "+N -M" payload of a `# branch.ab` header."""
    ahead = behind = 0
    for part in value.split():
        try:
            if part.startswith("+"):
                ahead = int(part[1:])
            elif part.startswith("-"):
                behind = int(part[1:])
        except ValueError:
            continue
    return ahead, behind


def parse_numstat(output: str) -> tuple[int, int]:
    """Sum the added/removed columns of `git diff --numstat` output.

    Binary files show "-" in both columns and count as 0.
    """
    added = removed = 0
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        if parts[0].isdigit():
            added += int(parts[0])
        if parts[1].isdigit():
            removed += int(parts[1])
    return added, removed


def _git(directory: str | None, *args: str, timeout: float) -> str | None:
    """Run a git command, returning stdout, or None if it failed in any way."""
    cmd = ["git"]
    if directory:
        cmd += ["-C", directory]
    cmd += ["--no-optional-locks", *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except (OSError, subprocess.SubprocessError) as e:
        _log.debug("git %s failed: %s", args[0], e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def inspect(directory: str | None = None, timeout: float = 2.0) -> GitState:
    """Determine the git state of a directory (None means the process cwd)."""
    inside = _git(directory, "rev-parse", "--is-inside-work-tree", timeout=timeout)
    if inside is None or inside.strip() != "true":
        return NotRepository()

    status = _git(
        directory,
        "status",
        "--porcelain=v2",
        "--branch",
        "--untracked-files=all",
        timeout=timeout,
    )
    if status is None:
        _log.debug("git status failed in %s", directory or ".")
        return NotRepository()

    try:
        summary = parse_status(status)
    except UnsupportedStatusFormat as e:
        _log.debug("unsupported git status output in %s: %s", directory or ".", e)
        return NotRepository()

    if summary.file_count == 0:
        return Clean(branch=summary.branch, ahead=summary.ahead, behind=summary.behind)

    # fails without a HEAD commit (fresh repo); the files are still dirty
    numstat = _git(directory, "diff", "HEAD", "--numstat", timeout=timeout)
    added, removed = parse_numstat(numstat) if numstat is not None else (0, 0)
    return Dirty(
        branch=summary.branch,
        file_count=summary.file_count,
        lines_added=added,
        lines_removed=removed,
        ahead=summary.ahead,
        behind=summary.behind,
    )
