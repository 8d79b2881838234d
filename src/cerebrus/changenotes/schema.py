"""Field schemas for change notes and impact notes, plus path classification patterns."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

CHANGE_NOTE_TAG = "$:/tags/ChangeNote"
IMPACT_NOTE_TAG = "$:/tags/ImpactNote"

# Files under any edition's releasenotes/ folder are validated as notes.
RELEASE_NOTES_RE = re.compile(r"editions/.*/tiddlers/releasenotes/")
RELEASE_NOTE_FILE_RE = re.compile(r"editions/.*/tiddlers/releasenotes/.*\.tid$")
EDITIONS_TIDDLER_RE = re.compile(r"^editions/.*/tiddlers/.*\.tid$")

SKIP_PATTERNS: tuple[re.Pattern[str], ...] = tuple(re.compile(p) for p in (
    r"^\.github/",
    r"^\.vscode/",
    r"^\.editorconfig$",
    r"^\.gitignore$",
    r"^LICENSE$",
    r"\.md$",
    r"^bin/.*\.md$",
    r"^playwright-report/",
    r"^test-results/",
    r"^editions/.*-docs?/",
    r"^community/",
    r"/releasenotes/",
))

REQUIRES_CHANGE_NOTE: tuple[re.Pattern[str], ...] = (
    re.compile(r"/(core|plugin\.info|modules)/"),
)

TITLE_RE = re.compile(r"^\$:/changenotes/[0-9]+\.[0-9]+\.[0-9]+/(#[0-9]+|[a-f0-9]{40})$")
RELEASE_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+$")
IMPACT_TITLE_RE = re.compile(r"^\$:/changenotes/[0-9]+\.[0-9]+\.[0-9]+/.*/impacts/[a-z0-9-]+$")


class NoteKind(str, Enum):
    CHANGE = "ChangeNote"
    IMPACT = "ImpactNote"


@dataclass(frozen=True)
class FieldRule:
    """How one field of a note is checked.

    Messages may use ``{value}`` and ``{validValues}`` placeholders.
    ``valid_values`` names one of the ReleasesInfo enumerations.
    """

    field: str
    error_message: str
    required: bool = True
    pattern: re.Pattern[str] | None = None
    contains: str | None = None
    valid_values: str | None = None
    missing_message: str | None = None


CHANGE_NOTE_FIELDS: tuple[FieldRule, ...] = (
    FieldRule(
        "title",
        pattern=TITLE_RE,
        error_message="Title format: Expected `$:/changenotes/<version>/<#issue or commit-hash>`, found: `{value}`",
    ),
    FieldRule(
        "tags",
        contains=CHANGE_NOTE_TAG,
        error_message="Tags: Must include `$:/tags/ChangeNote`, found: `{value}`",
    ),
    FieldRule(
        "change-type",
        valid_values="change_types",
        error_message="Invalid change-type: `{value}` is not valid. Must be one of: `{validValues}`",
        missing_message="Missing field: `change-type` is required. Valid values: `{validValues}`",
    ),
    FieldRule(
        "change-category",
        valid_values="change_categories",
        error_message="Invalid change-category: `{value}` is not valid. Must be one of: `{validValues}`",
        missing_message="Missing field: `change-category` is required. Valid values: `{validValues}`",
    ),
    FieldRule("description", error_message="Missing field: `description` is required"),
    FieldRule(
        "release",
        pattern=RELEASE_RE,
        error_message="Invalid release format: Expected `X.Y.Z` format, found: `{value}`",
        missing_message="Missing field: `release` is required (e.g., `5.4.0`)",
    ),
    FieldRule("github-links", error_message="Missing field: `github-links` is required"),
    FieldRule("github-contributors", error_message="Missing field: `github-contributors` is required"),
)

IMPACT_NOTE_FIELDS: tuple[FieldRule, ...] = (
    FieldRule(
        "title",
        pattern=IMPACT_TITLE_RE,
        error_message=(
            "Title format: Expected `$:/changenotes/<version>/<change-id>/impacts/<identifier>`, "
            "found: `{value}`"
        ),
    ),
    FieldRule(
        "tags",
        contains=IMPACT_NOTE_TAG,
        error_message="Tags: Must include `$:/tags/ImpactNote`, found: `{value}`",
    ),
    FieldRule(
        "impact-type",
        valid_values="impact_types",
        error_message="Invalid impact-type: `{value}` is not valid. Must be one of: `{validValues}`",
        missing_message="Missing field: `impact-type` is required. Valid values: `{validValues}`",
    ),
    FieldRule(
        "changenote",
        error_message="Missing field: `changenote` is required (the title of the associated change note)",
    ),
    FieldRule("description", error_message="Missing field: `description` is required"),
    FieldRule(
        "created",
        error_message="Missing field: `created` is required (in DateFormat, e.g., `20250901000000000`)",
    ),
    FieldRule(
        "modified",
        error_message="Missing field: `modified` is required (in DateFormat, e.g., `20250901000000000`)",
    ),
)

NOTE_SCHEMAS: dict[NoteKind, tuple[FieldRule, ...]] = {
    NoteKind.CHANGE: CHANGE_NOTE_FIELDS,
    NoteKind.IMPACT: IMPACT_NOTE_FIELDS,
}
