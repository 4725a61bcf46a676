"""Tests for statusline assembly and the CLI."""

import io
import json
import re

import pytest
from rich.text import Text

from claude_statusline import cli
from claude_statusline.config import StatuslineConfig
from claude_statusline.session import SessionSnapshot
from claude_statusline.statusline import assemble, render, to_ansi

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

SCENARIO = {
    "model": {"display_name": "Opus"},
    "workspace": {"current_dir": "/x/project"},
    "context_window": {
        "context_window_size": 200000,
        "current_usage": {
            "input_tokens": 50000,
            "cache_creation_input_tokens": 10000,
            "cache_read_input_tokens": 5000,
        },
    },
    "cost": {"total_cost_usd": 0.15, "total_lines_added": 156, "total_lines_removed": 23},
}

CONFIG = StatuslineConfig()


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


def run_cli(monkeypatch, capsys, stdin: str, *argv: str):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
    code = 0
    try:
        cli.main(list(argv))
    except SystemExit as e:
        code = e.code
    captured = capsys.readouterr()
    return code, captured.out, captured.err


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Emoji icons and no enclosing git repo, whatever the host looks like."""
    monkeypatch.setenv("STATUSLINE_PLATFORM", "linux")
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.chdir(tmp_path)


def test_assemble_all_segments():
    line = assemble(
        Text("m"), Text("c"), Text("d"), Text(" g"), Text("$"), Text("l"), CONFIG
    )
    assert line.plain == "m | c | d g | $ | l"


def test_assemble_skips_empty_optional_segments():
    line = assemble(Text("m"), Text("c"), Text("d"), Text(" g"), Text(), Text(), CONFIG)
    assert line.plain == "m | c | d g"
    line = assemble(Text("m"), Text("c"), Text("d"), Text(" g"), Text(), Text("l"), CONFIG)
    assert line.plain == "m | c | d g | l"


def test_render_scenario_outside_git():
    snapshot = SessionSnapshot(
        model_name="Opus",
        current_dir="/x/project",
        current_usage=65000,
        total_cost_usd=0.15,
        lines_added=156,
        lines_removed=23,
    )
    line = render(snapshot, CONFIG).plain
    assert line == (
        "🚀 Opus | 🔥 ████░░░░░░░░░░░ 32% | 📂 project (not a git repository)"
        " | 💵 $0.15 | ✏️  +156/-23"
    )


def test_to_ansi_emits_color_on_one_line():
    line = Text.assemble("a\nb ", ("green", "green"))
    output = to_ansi(line)
    assert "\n" not in output
    assert "\x1b[" in output
    assert strip_ansi(output) == "a b green"


def test_cli_scenario(monkeypatch, capsys):
    code, out, err = run_cli(monkeypatch, capsys, json.dumps(SCENARIO))
    assert code == 0
    assert err == ""
    assert out.endswith("\n") and out.count("\n") == 1
    plain = strip_ansi(out)
    for expected in ("Opus", "32%", "project", "(not a git repository)", "$0.15", "+156/-23"):
        assert expected in plain


def test_cli_render_subcommand(monkeypatch, capsys):
    code, out, _ = run_cli(monkeypatch, capsys, json.dumps(SCENARIO), "render")
    assert code == 0
    assert "Opus" in strip_ansi(out)


def test_cli_is_idempotent(monkeypatch, capsys):
    first = run_cli(monkeypatch, capsys, json.dumps(SCENARIO))
    second = run_cli(monkeypatch, capsys, json.dumps(SCENARIO))
    assert first == second


def test_cli_missing_cost_omits_cost_and_lines(monkeypatch, capsys):
    data = {"model": {"display_name": "Opus"}, "cost": {}}
    code, out, _ = run_cli(monkeypatch, capsys, json.dumps(data))
    assert code == 0
    plain = strip_ansi(out)
    assert "$" not in plain
    assert "✏️" not in plain
    assert plain.count("|") == 2


def test_cli_zero_cost_omitted(monkeypatch, capsys):
    data = {"cost": {"total_cost_usd": 0, "total_lines_added": 3}}
    _, out, _ = run_cli(monkeypatch, capsys, json.dumps(data))
    plain = strip_ansi(out)
    assert "💵" not in plain
    assert "+3/-0" in plain


def test_cli_missing_usage_renders_empty_bar(monkeypatch, capsys):
    _, out, _ = run_cli(monkeypatch, capsys, json.dumps({"model": {"display_name": "Opus"}}))
    assert "░" * 15 + " 0%" in strip_ansi(out)


def test_cli_directory_defaults_to_cwd(monkeypatch, capsys, tmp_path):
    _, out, _ = run_cli(monkeypatch, capsys, "{}")
    assert f"📂 {tmp_path.name}" in strip_ansi(out)


def test_cli_mingw_override_uses_ascii_icons(monkeypatch, capsys):
    monkeypatch.setenv("STATUSLINE_PLATFORM", "mingw")
    _, out, _ = run_cli(monkeypatch, capsys, json.dumps(SCENARIO))
    plain = strip_ansi(out)
    assert plain.startswith("> Opus | [ ")
    assert "@ project" in plain
    assert "🚀" not in plain


def test_cli_clean_repository(monkeypatch, capsys, tmp_path):
    """A fresh repo on main with no upstream shows just the branch."""
    import shutil
    import subprocess

    if shutil.which("git") is None:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "-C", str(repo), "init", "-q"], check=True)
    subprocess.run(["git", "-C", str(repo), "symbolic-ref", "HEAD", "refs/heads/main"], check=True)
    data = {"workspace": {"current_dir": str(repo)}}
    _, out, _ = run_cli(monkeypatch, capsys, json.dumps(data))
    assert "📂 repo 🎋 (main)" in strip_ansi(out)


@pytest.mark.parametrize("stdin", ["", "{not json", "[1, 2, 3]"])
def test_cli_malformed_json_is_fatal(monkeypatch, capsys, stdin):
    code, out, err = run_cli(monkeypatch, capsys, stdin)
    assert code == 1
    assert out == ""
    assert "Failed to parse JSON input" in err


def test_cli_unreadable_stdin_is_fatal(monkeypatch, capsys):
    class BrokenStdin(io.StringIO):
        def read(self, *args):
            raise OSError("stdin closed")

    monkeypatch.setattr("sys.stdin", BrokenStdin())
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Failed to read stdin" in captured.err


def test_cli_platform_command(monkeypatch, capsys):
    monkeypatch.setenv("STATUSLINE_PLATFORM", "wsl")
    code, out, _ = run_cli(monkeypatch, capsys, "", "platform")
    assert code == 0
    assert out == "wsl\n"
