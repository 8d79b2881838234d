"""Markdown for the change-note section of the PR comment."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from cerebrus.changenotes.schema import NoteKind
from cerebrus.changenotes.tiddler import parse_tiddler
from cerebrus.changenotes.validator import ContentReader, FileIssues, classify_note

DOCS_URL = "https://tiddlywiki.com/prerelease/#Release%20Notes%20and%20Changes"


def format_change_note(fields: Mapping[str, str]) -> str:
    out = f"### 📝 {fields.get('title') or 'Untitled'}\n\n"
    out += f"Type: **{fields.get('change-type')}** | Category: **{fields.get('change-category')}**\n"
    if fields.get("release"):
        out += f"Release: **{fields['release']}**\n"
    out += "\n"
    if fields.get("description"):
        out += f"> {fields['description']}\n\n"
    if fields.get("github-links"):
        out += f"🔗 {fields['github-links']}\n\n"
    if fields.get("github-contributors"):
        out += f"👥 Contributors: **{fields['github-contributors']}**\n\n"
    out += "---\n"
    return out


def format_impact_note(fields: Mapping[str, str]) -> str:
    out = f"### ⚠️ Impact: **{fields.get('title') or 'Untitled'}**\n\n"
    out += f"Impact Type: **{fields.get('impact-type')}**\n"
    if fields.get("changenote"):
        out += f"Related Change: **{fields['changenote']}**\n"
    out += "\n"
    if fields.get("description"):
        out += f"> {fields['description']}\n\n"
    out += "---\n"
    return out


def summarize_change_notes(files: Iterable[str], read: ContentReader) -> str:
    """Rendered summaries of every note among ``files``, in file order."""
    output = []
    for file in files:
        fields = parse_tiddler(read(file))
        if fields is None:
            continue
        kind = classify_note(fields)
        if kind is NoteKind.CHANGE:
            output.append(format_change_note(fields))
        elif kind is NoteKind.IMPACT:
            output.append(format_impact_note(fields))
    return "\n".join(output)


def success_comment(summaries: str, docs_url: str = DOCS_URL) -> str:
    return f"""## ✅ Change Note Status

All change notes are properly formatted and validated!

{summaries}

<details>
<summary>📖 Change Note Guidelines</summary>

Change notes help track and communicate changes effectively. See the [full documentation]({docs_url}) for details.

</details>"""


def validation_failed_comment(errors: Iterable[FileIssues], docs_url: str = DOCS_URL) -> str:
    error_text = ""
    for entry in errors:
        error_text += f"### 📄 `{entry.file}`\n\n"
        for issue in entry.issues:
            error_text += f"- {issue}\n"
        error_text += "\n"

    return f"""## ❌ Change Note Status

Change note validation failed. Please fix the following issues:

{error_text}

---

📚 **Documentation**: [Release Notes and Changes]({docs_url})"""


def missing_change_note_comment(docs_url: str = DOCS_URL) -> str:
    return f"""## ⚠️ Change Note Status

This PR appears to contain code changes but doesn't include a change note.

Please add a change note by creating a `.tid` file in `editions/tw5.com/tiddlers/releasenotes/<version>/`

📚 **Documentation**: [Release Notes and Changes]({docs_url})

💡 **Note**: If this is a documentation-only change, you can ignore this message."""


def missing_notes_comment(docs_url: str = DOCS_URL) -> str:
    return f"""## ⚠️ Change Note Status

This PR appears to contain code changes and modified files in the `releasenotes/` directory, but no valid Change Notes or Impact Notes were found.

Please ensure you've added proper change notes with the required tags (`$:/tags/ChangeNote` or `$:/tags/ImpactNote`).

📚 **Documentation**: [Release Notes and Changes]({docs_url})

Note: If this is a documentation-only change or doesn't require a change note, you can ignore this message."""


def doc_only_comment() -> str:
    return """## ✅ Change Note Status

This PR contains documentation or configuration changes that typically don't require a change note."""


def doc_only_with_notes_comment() -> str:
    return """## ✅ Change Note Status

This PR contains documentation or configuration changes (including changes to release notes documentation) that typically don't require a change note."""
