"""Run modes: one handler per check, each publishing its own comment section.

Handlers take the run context and a GitHub client and return a small result
dict. They never look at the environment; ``cli`` builds the context once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from cerebrus.buildsize.compare import EVENT_TYPE, BuildSizes, compare_build_size
from cerebrus.buildsize.report import parse_size_inputs, render_size_report
from cerebrus.changenotes.render import (
    doc_only_comment,
    doc_only_with_notes_comment,
    missing_change_note_comment,
    missing_notes_comment,
    success_comment,
    summarize_change_notes,
    validation_failed_comment,
)
from cerebrus.changenotes.schema import RELEASE_NOTE_FILE_RE
from cerebrus.changenotes.tiddler import parse_tiddler
from cerebrus.changenotes.validator import (
    ContentReader,
    ValidationResult,
    check_needs_change_note,
    classify_note,
    repo_reader,
    validate_change_notes_in_repo,
)
from cerebrus.comment.publisher import CommentClient, publish_section
from cerebrus.comment.sections import BUILD_SIZE_SECTION, CHANGE_NOTE_SECTION, RULES_SECTION
from cerebrus.config import ActionContext, CerebrusConfig
from cerebrus.exceptions import ChangeNoteValidationError, ConfigError
from cerebrus.rules.evaluator import evaluate, render_rules_section

logger = logging.getLogger("cerebrus.pipeline")


class PullRequestClient(CommentClient, Protocol):
    def get_changed_files(self, pr_number: int) -> list[str]: ...

    def dispatch_event(self, event_type: str, payload: dict) -> None: ...


Handler = Callable[[ActionContext, PullRequestClient, CerebrusConfig], dict[str, Any]]


# =========================================================================
# Path rules
# =========================================================================

def run_rules(ctx: ActionContext, client: PullRequestClient, config: CerebrusConfig) -> dict[str, Any]:
    changed_files = client.get_changed_files(ctx.pr_number)
    logger.info("Base branch: %s", ctx.base_ref)
    logger.debug("Changed files:\n- %s", "\n- ".join(changed_files))

    evaluation = evaluate(ctx.base_ref, changed_files)
    published = publish_section(
        client, ctx.pr_number, RULES_SECTION, render_rules_section(evaluation), ctx.dry_run,
    )
    return {
        "evaluation": evaluation,
        "changed_files": changed_files,
        "comment": published.body,
        "action": published.action,
    }


# =========================================================================
# Change notes
# =========================================================================

@dataclass(frozen=True)
class ChangeNoteOutcome:
    body: str
    passed: bool
    validation: ValidationResult | None = None


def _has_tagged_note(files: list[str], read: ContentReader) -> bool:
    for file in files:
        fields = parse_tiddler(read(file))
        if fields is not None and classify_note(fields) is not None:
            return True
    return False


def change_note_outcome(
    all_files: list[str],
    repo_path: Path | str,
    config: CerebrusConfig,
) -> ChangeNoteOutcome:
    """Decide the change-note section body and whether the check passed."""
    read = repo_reader(repo_path)
    note_files = [f for f in all_files if RELEASE_NOTE_FILE_RE.search(f)]
    needs_note = check_needs_change_note(all_files)
    logger.info("Found %d changed files, %d in releasenotes/", len(all_files), len(note_files))

    if not note_files:
        if needs_note:
            return ChangeNoteOutcome(missing_change_note_comment(config.docs_url), passed=False)
        return ChangeNoteOutcome(doc_only_comment(), passed=True)

    validation = validate_change_notes_in_repo(note_files, repo_path, config.releases_info_path)

    if validation.success:
        if needs_note:
            summaries = summarize_change_notes(note_files, read)
            return ChangeNoteOutcome(success_comment(summaries, config.docs_url), True, validation)
        return ChangeNoteOutcome(doc_only_with_notes_comment(), True, validation)

    if not _has_tagged_note(note_files, read):
        if needs_note:
            return ChangeNoteOutcome(missing_notes_comment(config.docs_url), False, validation)
        return ChangeNoteOutcome(doc_only_with_notes_comment(), True, validation)

    return ChangeNoteOutcome(
        validation_failed_comment(validation.errors, config.docs_url), False, validation,
    )


def run_change_notes(ctx: ActionContext, client: PullRequestClient, config: CerebrusConfig) -> dict[str, Any]:
    logger.info("Validating change notes in %s", Path(ctx.repo_path).resolve())
    changed_files = client.get_changed_files(ctx.pr_number)
    outcome = change_note_outcome(changed_files, ctx.repo_path, config)

    published = publish_section(client, ctx.pr_number, CHANGE_NOTE_SECTION, outcome.body, ctx.dry_run)
    if not outcome.passed:
        raise ChangeNoteValidationError(outcome.validation)
    return {"success": True, "comment": published.body, "action": published.action}


# =========================================================================
# Build size
# =========================================================================

def run_size_comment(ctx: ActionContext, client: PullRequestClient, config: CerebrusConfig) -> dict[str, Any]:
    pr_size, base_size, base_ref = parse_size_inputs(ctx.pr_size, ctx.base_size, ctx.base_ref)
    logger.info("Received payload: PR size: %d, base size: %d", pr_size, base_size)

    report = render_size_report(pr_size, base_size, base_ref, config.size_threshold_kb)
    published = publish_section(client, ctx.pr_number, BUILD_SIZE_SECTION, report, ctx.dry_run)
    return {"comment": published.body, "action": published.action}


def run_size_calc(ctx: ActionContext, client: PullRequestClient, config: CerebrusConfig) -> dict[str, Any]:
    sizes: BuildSizes = compare_build_size(
        ctx.repo_url, ctx.pr_number, ctx.base_ref, build_output=config.build_output,
    )
    logger.info("Calculated sizes of PR build and base (merge-base) build")

    payload = {
        "pr_number": ctx.pr_number,
        "pr_size": sizes.pr_size,
        "base_size": sizes.base_size,
        "base_branch": ctx.base_ref,
        "merge_base": sizes.merge_base,
    }
    result: dict[str, Any] = {"sizes": sizes.to_dict(), "payload": payload}

    if ctx.dry_run:
        logger.info("[dry-run] Would dispatch %s event to %s: %s", EVENT_TYPE, ctx.repo, payload)
        # Show the comment the dispatched event would eventually produce.
        follow_up = ctx.model_copy(update={"pr_size": sizes.pr_size, "base_size": sizes.base_size})
        result["comment"] = run_size_comment(follow_up, client, config)["comment"]
    else:
        logger.info("Dispatching %s event to %s", EVENT_TYPE, ctx.repo)
        client.dispatch_event(EVENT_TYPE, payload)
    return result


HANDLERS: dict[str, Handler] = {
    "rules": run_rules,
    "changenotes": run_change_notes,
    "size:calc": run_size_calc,
    "size:comment": run_size_comment,
}


def run_mode(
    ctx: ActionContext,
    client: PullRequestClient,
    config: CerebrusConfig | None = None,
) -> dict[str, Any]:
    """Dispatch to the handler for ``ctx.mode``."""
    handler = HANDLERS.get(ctx.mode)
    if handler is None:
        raise ConfigError(f"Unknown mode: {ctx.mode}")
    logger.info("Action mode: %s", ctx.mode)
    return handler(ctx, client, config or CerebrusConfig())
