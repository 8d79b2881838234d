"""Change notes: tiddler parsing, schema validation and summary rendering.

Usage:
    from cerebrus.changenotes import check_needs_change_note, validate_change_notes_in_repo

    if check_needs_change_note(files):
        result = validate_change_notes_in_repo(files, repo_path)
        for entry in result.errors:
            print(entry.file, entry.issues)
"""

from cerebrus.changenotes.releases_info import ReleasesInfo, load_releases_info, parse_releases_info
from cerebrus.changenotes.schema import NOTE_SCHEMAS, FieldRule, NoteKind
from cerebrus.changenotes.tiddler import parse_tiddler, read_tiddler
from cerebrus.changenotes.validator import (
    FileIssues,
    ValidationResult,
    check_needs_change_note,
    classify_note,
    validate_change_notes,
    validate_change_notes_from_content,
    validate_change_notes_in_repo,
)

__all__ = [
    "FieldRule",
    "FileIssues",
    "NOTE_SCHEMAS",
    "NoteKind",
    "ReleasesInfo",
    "ValidationResult",
    "check_needs_change_note",
    "classify_note",
    "load_releases_info",
    "parse_releases_info",
    "parse_tiddler",
    "read_tiddler",
    "validate_change_notes",
    "validate_change_notes_from_content",
    "validate_change_notes_in_repo",
]
