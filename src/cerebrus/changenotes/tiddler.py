"""Parser for ``.tid`` files: ``key: value`` header lines, a blank line, a body."""

from __future__ import annotations

import re
from pathlib import Path

FIELD_RE = re.compile(r"^([^:]+):\s*(.*)$")


def parse_tiddler(content: str | None) -> dict[str, str] | None:
    """Parse tiddler text into a field mapping.

    Header lines run up to the first blank line; each is split at its first
    colon and later duplicates overwrite earlier ones. The body, if there is a
    blank line at all, is stored under ``text``. Returns None for empty input.
    """
    if not content:
        return None

    lines = [line.rstrip("\r") for line in content.split("\n")]
    fields: dict[str, str] = {}
    body_start = -1

    for i, line in enumerate(lines):
        if not line.strip():
            body_start = i + 1
            break
        match = FIELD_RE.match(line)
        if match:
            fields[match.group(1)] = match.group(2)

    if body_start != -1:
        fields["text"] = "\n".join(lines[body_start:]).strip()

    return fields


def read_tiddler(path: Path) -> dict[str, str] | None:
    """Parse a tiddler file, or None if it does not exist or cannot be decoded."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    return parse_tiddler(content)
