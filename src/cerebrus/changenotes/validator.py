"""Change-note validation.

Release-note tiddlers changed by a PR are classified by their ``tags`` field
and checked field by field against the schema for their kind. Problems are
collected per file and reported, never raised; only a missing enumeration
file stops validation.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from cerebrus.changenotes.releases_info import (
    RELEASES_INFO_PATH,
    ReleasesInfo,
    load_releases_info,
    parse_releases_info,
)
from cerebrus.changenotes.schema import (
    CHANGE_NOTE_TAG,
    EDITIONS_TIDDLER_RE,
    IMPACT_NOTE_TAG,
    NOTE_SCHEMAS,
    RELEASE_NOTES_RE,
    REQUIRES_CHANGE_NOTE,
    SKIP_PATTERNS,
    FieldRule,
    NoteKind,
)
from cerebrus.changenotes.tiddler import parse_tiddler

logger = logging.getLogger("cerebrus.changenotes")

UNREADABLE_ISSUE = "File not found or cannot be read"

ContentReader = Callable[[str], "str | None"]

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


@dataclass
class FileIssues:
    file: str
    issues: list[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    errors: list[FileIssues] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def interpolate(template: str, values: Mapping[str, str]) -> str:
    """Fill ``{name}`` placeholders; unknown names are left as they are."""
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def classify_note(fields: Mapping[str, str]) -> NoteKind | None:
    """ChangeNote wins over ImpactNote; untagged tiddlers are not notes."""
    tags = fields.get("tags") or ""
    if CHANGE_NOTE_TAG in tags:
        return NoteKind.CHANGE
    if IMPACT_NOTE_TAG in tags:
        return NoteKind.IMPACT
    return None


def validate_field(rule: FieldRule, value: str | None, releases_info: ReleasesInfo) -> str | None:
    """Check one field, returning the first problem found or None."""
    valid = releases_info.values(rule.valid_values) if rule.valid_values else None
    valid_text = ", ".join(valid) if valid is not None else ""

    if not value:
        if rule.required:
            message = rule.missing_message or rule.error_message
            return interpolate(message, {"value": "", "validValues": valid_text})
        return None

    if rule.pattern is not None and not rule.pattern.search(value):
        return interpolate(rule.error_message, {"value": value})

    if rule.contains is not None and rule.contains not in value:
        return interpolate(rule.error_message, {"value": value})

    if valid is not None and value not in valid:
        return interpolate(rule.error_message, {"value": value, "validValues": valid_text})

    return None


def validate_note(kind: NoteKind, fields: Mapping[str, str], releases_info: ReleasesInfo) -> list[str]:
    """Every issue of one note, in schema order."""
    issues = []
    for rule in NOTE_SCHEMAS[kind]:
        issue = validate_field(rule, fields.get(rule.field), releases_info)
        if issue:
            issues.append(issue)
    return issues


def is_release_note_path(path: str) -> bool:
    return bool(RELEASE_NOTES_RE.search(path))


def validate_change_notes(
    files: Iterable[str],
    releases_info: ReleasesInfo,
    read: ContentReader,
) -> ValidationResult:
    """Validate every release-note file among ``files``.

    ``read`` returns a file's content, or None when it cannot be read.
    Files outside the release-notes folders, and release-note tiddlers that
    carry neither note tag, are skipped.
    """
    result = ValidationResult()

    for file in files:
        if not is_release_note_path(file):
            continue

        logger.info("Validating: %s", file)
        fields = parse_tiddler(read(file))
        if fields is None:
            result.errors.append(FileIssues(file, [UNREADABLE_ISSUE]))
            continue

        kind = classify_note(fields)
        if kind is None:
            logger.info("Skipping non-note file: %s", file)
            continue

        issues = validate_note(kind, fields, releases_info)
        if issues:
            result.errors.append(FileIssues(file, issues))

    return result


def repo_reader(repo_path: Path | str) -> ContentReader:
    """A reader over files of a local checkout."""
    root = Path(repo_path)

    def read(file: str) -> str | None:
        try:
            return (root / file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    return read


def validate_change_notes_in_repo(
    files: Iterable[str],
    repo_path: Path | str = ".",
    releases_info_path: Path | str = RELEASES_INFO_PATH,
) -> ValidationResult:
    """Validate against a checkout, loading ReleasesInfo.multids from it."""
    releases_info = load_releases_info(Path(repo_path), releases_info_path)
    return validate_change_notes(files, releases_info, repo_reader(repo_path))


def validate_change_notes_from_content(
    file_contents: Mapping[str, str],
    releases_info_content: str,
) -> ValidationResult:
    """Validate file contents that were fetched without a checkout."""
    releases_info = parse_releases_info(releases_info_content)
    return validate_change_notes(file_contents, releases_info, file_contents.get)


def check_needs_change_note(files: Sequence[str]) -> bool:
    """Whether the changed files call for a change note.

    Skip-listed files (docs, dot files, CI config, the release notes
    themselves) never do. Edition tiddlers only do when they live under a
    core, plugin.info or modules path. Anything else does.
    """
    for file in files:
        if any(p.search(file) for p in SKIP_PATTERNS):
            continue
        if EDITIONS_TIDDLER_RE.search(file):
            if any(p.search(file) for p in REQUIRES_CHANGE_NOTE):
                return True
            continue
        return True
    return False
