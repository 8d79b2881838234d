"""Command-line interface for Cerebrus."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from cerebrus import __version__
from cerebrus.config import (
    ActionContext,
    build_context,
    context_from_action_env,
    is_github_actions,
    load_config,
)
from cerebrus.exceptions import CerebrusError
from cerebrus.github.client import GitHubClient
from cerebrus.ui.console import Console

console = Console()

TOKEN_ENV_VARS = ("GITHUB_PERSONAL_ACCESS_TOKEN", "GITHUB_TOKEN")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console.console, show_path=False)],
        force=True,
    )


def _make_client(ctx: ActionContext) -> GitHubClient:
    return GitHubClient(ctx.repo, token=ctx.token)


def _token_from_env() -> str:
    for name in TOKEN_ENV_VARS:
        if os.environ.get(name):
            return os.environ[name]
    return ""


def _cli_context(mode: str, pr: int, repo: str, base_ref: str | None, dry_run: bool, **extra) -> ActionContext:
    """Build the run context from CLI options, asking GitHub for the base branch if needed."""
    token = _token_from_env()
    if not token and not dry_run:
        console.error(f"Missing GitHub token. Set {TOKEN_ENV_VARS[0]}.")
        sys.exit(1)

    try:
        ctx = build_context(
            repo=repo, pr_number=pr, base_ref=base_ref or "", token=token,
            mode=mode, dry_run=dry_run, **extra,
        )
        if not ctx.base_ref:
            ctx = ctx.model_copy(update={"base_ref": _make_client(ctx).get_base_ref(ctx.pr_number)})
            console.info(f"Using base branch: {ctx.base_ref}")
    except CerebrusError as e:
        console.error(str(e))
        sys.exit(1)
    return ctx


def _execute(ctx: ActionContext) -> dict:
    """Run one mode, turning Cerebrus errors into a failed exit."""
    from cerebrus.pipeline import run_mode

    try:
        config = load_config(Path(ctx.repo_path))
        return run_mode(ctx, _make_client(ctx), config)
    except CerebrusError as e:
        if is_github_actions(os.environ):
            click.echo(f"::error::Action failed: {e}")
        console.error(f"Validation failed: {e}")
        sys.exit(1)


def _pr_options(func):
    func = click.option("--dry-run", is_flag=True, help="Log the comment instead of posting it.")(func)
    func = click.option("--base-ref", "-b", default=None, help="Base branch (looked up when omitted).")(func)
    func = click.option("--repo", "-r", required=True, help='Repository as "owner/repo".')(func)
    func = click.option("--pr", type=int, required=True, help="Pull request number.")(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="cerebrus")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging.")
def main(verbose: bool):
    """Cerebrus - pull request checks for TiddlyWiki."""
    _configure_logging(verbose)


# =========================================================================
# GitHub-backed modes
# =========================================================================

@main.command()
@_pr_options
def rules(pr: int, repo: str, base_ref: str | None, dry_run: bool):
    """Check changed paths against the branch rules."""
    ctx = _cli_context("rules", pr, repo, base_ref, dry_run)
    result = _execute(ctx)
    console.show_rule_results(result["evaluation"])
    if dry_run:
        console.show_comment(result["comment"])


@main.command()
@_pr_options
@click.option("--repo-path", "-p", default=".", help="Checkout of the PR head.")
def changenotes(pr: int, repo: str, base_ref: str | None, dry_run: bool, repo_path: str):
    """Validate the change notes of a PR against a local checkout."""
    ctx = _cli_context("changenotes", pr, repo, base_ref, dry_run, repo_path=repo_path)
    result = _execute(ctx)
    console.success("Change note check passed")
    if dry_run:
        console.show_comment(result["comment"])


@main.command("size-calc")
@_pr_options
def size_calc(pr: int, repo: str, base_ref: str | None, dry_run: bool):
    """Build empty.html for the PR and its merge base, then dispatch the sizes."""
    ctx = _cli_context("size:calc", pr, repo, base_ref, dry_run)
    result = _execute(ctx)
    click.echo(json.dumps(result["sizes"], indent=2))
    if dry_run and "comment" in result:
        console.show_comment(result["comment"])


@main.command("size-comment")
@_pr_options
@click.option("--pr-size", type=int, required=True, help="Size of empty.html built from the PR, in bytes.")
@click.option("--base-size", type=int, required=True, help="Size of empty.html built from the base, in bytes.")
def size_comment(pr: int, repo: str, base_ref: str | None, dry_run: bool, pr_size: int, base_size: int):
    """Post the build size comparison section."""
    ctx = _cli_context("size:comment", pr, repo, base_ref, dry_run, pr_size=pr_size, base_size=base_size)
    result = _execute(ctx)
    if dry_run:
        console.show_comment(result["comment"])


@main.command()
def action():
    """Run inside a GitHub Action, reading INPUT_* variables."""
    try:
        ctx = context_from_action_env(os.environ)
    except CerebrusError as e:
        click.echo(f"::error::Action failed: {e}")
        sys.exit(1)
    _execute(ctx)


# =========================================================================
# Offline checks
# =========================================================================

@main.command("check-rules")
@click.argument("base_branch")
@click.argument("files", nargs=-1)
def check_rules(base_branch: str, files: tuple[str, ...]):
    """Evaluate the path rules for BASE_BRANCH and FILES without GitHub."""
    from cerebrus.rules.evaluator import evaluate, render_rules_section

    try:
        evaluation = evaluate(base_branch, list(files))
    except CerebrusError as e:
        console.error(str(e))
        sys.exit(1)
    console.show_rule_results(evaluation)
    if evaluation.messages:
        console.markdown(render_rules_section(evaluation))
    else:
        console.success("No rule matched")


@main.command("check-notes")
@click.argument("files", nargs=-1)
@click.option("--repo-path", "-p", default=".", help="Repository checkout.")
def check_notes(files: tuple[str, ...], repo_path: str):
    """Validate change-note FILES in a local checkout."""
    from cerebrus.changenotes.validator import check_needs_change_note, validate_change_notes_in_repo

    root = Path(repo_path)
    try:
        config = load_config(root)
        result = validate_change_notes_in_repo(list(files), root, config.releases_info_path)
    except CerebrusError as e:
        console.error(str(e))
        sys.exit(1)

    if check_needs_change_note(list(files)):
        console.info("These changes require a change note")
    console.show_validation(result)
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
