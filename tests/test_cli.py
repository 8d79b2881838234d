"""Tests for the CLI interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console as RichConsole

from cerebrus import __version__, cli
from cerebrus.cli import main
from cerebrus.rules import evaluate
from cerebrus.ui.console import Console

NOTE = "editions/tw5.com/tiddlers/releasenotes/5.4.0/9123.tid"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def github(fake_github, monkeypatch):
    """Route every GitHub call made by the CLI to the in-memory fake."""
    monkeypatch.setattr(cli, "_make_client", lambda ctx: fake_github)
    monkeypatch.setenv("GITHUB_TOKEN", "ghs_test")
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    return fake_github


class TestCLIBasics:
    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("rules", "changenotes", "size-calc", "size-comment", "action"):
            assert command in result.output


class TestCLICheckRules:
    def test_matching_rule(self, runner: CliRunner):
        result = runner.invoke(main, ["check-rules", "master", "editions/a.tid"])
        assert result.exit_code == 0
        assert "tiddlywiki-com" in result.output

    def test_no_match(self, runner: CliRunner):
        result = runner.invoke(main, ["check-rules", "master", "core/boot.js"])
        assert result.exit_code == 0
        assert "No rule matched" in result.output


class TestCLICheckNotes:
    def test_valid(self, runner: CliRunner, tw_repo: Path):
        result = runner.invoke(main, ["check-notes", NOTE, "--repo-path", str(tw_repo)])
        assert result.exit_code == 0
        assert "All change notes are valid" in result.output

    def test_invalid(self, runner: CliRunner, tw_repo: Path):
        note = tw_repo / NOTE
        note.write_text(note.read_text().replace("change-type: bugfix", "change-type: oops"))
        result = runner.invoke(main, ["check-notes", NOTE, "--repo-path", str(tw_repo)])
        assert result.exit_code == 1
        assert "oops" in result.output

    def test_missing_releases_info(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(main, ["check-notes", NOTE, "--repo-path", str(tmp_path)])
        assert result.exit_code == 1
        assert "ReleasesInfo.multids not found" in result.output

    def test_invalid_config_file(self, runner: CliRunner, tw_repo: Path):
        (tw_repo / ".cerebrus.json").write_text("{not json")
        result = runner.invoke(main, ["check-notes", NOTE, "--repo-path", str(tw_repo)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid .cerebrus.json" in result.output


class TestCLIModes:
    def test_rules_dry_run(self, runner: CliRunner, github):
        github.changed_files = ["editions/a.tid"]
        result = runner.invoke(main, ["rules", "--pr", "7", "--repo", "o/r", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert github.created == []
        assert "Using base branch: master" in result.output

    def test_rules_posts(self, runner: CliRunner, github):
        github.changed_files = ["editions/a.tid"]
        result = runner.invoke(main, ["rules", "--pr", "7", "--repo", "o/r", "-b", "master"])
        assert result.exit_code == 0, result.output
        assert len(github.created) == 1

    def test_missing_token(self, runner: CliRunner, github, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN")
        monkeypatch.delenv("GITHUB_PERSONAL_ACCESS_TOKEN", raising=False)
        result = runner.invoke(main, ["rules", "--pr", "7", "--repo", "o/r", "-b", "master"])
        assert result.exit_code == 1
        assert "Missing GitHub token" in result.output

    def test_bad_repo(self, runner: CliRunner, github):
        result = runner.invoke(main, ["rules", "--pr", "7", "--repo", "nope", "-b", "master"])
        assert result.exit_code == 1
        assert github.created == []

    def test_changenotes_failure_exits_nonzero(self, runner: CliRunner, github, tw_repo: Path):
        github.changed_files = ["core/boot.js"]
        result = runner.invoke(
            main,
            ["changenotes", "--pr", "7", "--repo", "o/r", "-b", "master", "--repo-path", str(tw_repo)],
        )
        assert result.exit_code == 1
        assert "Change note validation failed" in result.output
        assert "doesn't include a change note" in github.body

    def test_size_comment(self, runner: CliRunner, github):
        result = runner.invoke(
            main,
            ["size-comment", "--pr", "7", "--repo", "o/r", "-b", "master",
             "--pr-size", "2048", "--base-size", "1024"],
        )
        assert result.exit_code == 0, result.output
        assert "Build Size Comparison" in github.body

    def test_size_comment_rejects_zero_base(self, runner: CliRunner, github):
        result = runner.invoke(
            main,
            ["size-comment", "--pr", "7", "--repo", "o/r", "-b", "master",
             "--pr-size", "2048", "--base-size", "0"],
        )
        assert result.exit_code == 1
        assert github.created == []


class TestCLIAction:
    def test_action_env(self, runner: CliRunner, github):
        github.changed_files = ["editions/a.tid"]
        env = {
            "INPUT_REPO": "o/r",
            "INPUT_PR_NUMBER": "7",
            "INPUT_BASE_REF": "master",
            "INPUT_GITHUB_TOKEN": "ghs_test",
            "INPUT_MODE": "rules",
        }
        result = runner.invoke(main, ["action"], env=env)
        assert result.exit_code == 0, result.output
        assert len(github.created) == 1

    def test_action_missing_inputs(self, runner: CliRunner, github):
        result = runner.invoke(main, ["action"], env={"INPUT_REPO": "o/r"})
        assert result.exit_code == 1
        assert "::error::" in result.output


class TestRuleTable:
    def test_shows_severity_of_each_rule(self):
        out = Console()
        out.console = RichConsole(record=True, width=160)
        out.show_rule_results(evaluate("master", ["editions/a.tid"]))
        text = out.console.export_text()
        cells = [
            [cell.strip() for cell in line.split("│")[1:-1]]
            for line in text.splitlines()
            if line.count("│") == 5
        ]
        rows = {row[0]: row for row in cells}
        assert rows["2"][2:] == ["warning", "yes"]
        assert rows["4"][2:] == ["error", "no"]
