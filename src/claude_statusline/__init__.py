"""claude-statusline: a single-line status display for Claude Code sessions.

Reads the session snapshot Claude Code pipes to its `statusLine` command and
prints one colorized line: model, context usage, directory, git state, cost
and lines changed.
"""
