"""Shared test fixtures for Cerebrus."""

from __future__ import annotations

from pathlib import Path

import pytest

from cerebrus.github.client import Comment

RELEASES_INFO = """\
title: $:/tw5.com/releases/info/

change-types/bugfix/caption: Bugfix
change-types/bugfix/colour: #ffe246
change-types/feature/caption: Feature
change-types/enhancement/caption: Enhancement
categories/internal/caption: Internal
categories/widget/caption: Widgets
categories/translation/caption: Translation
impact-types/deprecation/caption: Deprecation
impact-types/compatibility-break/caption: Compatibility Break
"""

CHANGE_NOTE = """\
title: $:/changenotes/5.4.0/#9123
tags: $:/tags/ChangeNote
change-type: bugfix
change-category: widget
description: Fixed the list widget losing focus
release: 5.4.0
github-links: https://github.com/TiddlyWiki/TiddlyWiki5/pull/9123
github-contributors: alice

The list widget now keeps focus after a refresh.
"""

IMPACT_NOTE = """\
title: $:/changenotes/5.4.0/#9123/impacts/focus-handling
tags: $:/tags/ImpactNote
impact-type: compatibility-break
changenote: $:/changenotes/5.4.0/#9123
description: Plugins relying on the old focus behaviour need updating
created: 20250901000000000
modified: 20250901000000000
"""

RELEASES_INFO_PATH = "editions/tw5.com/tiddlers/releasenotes/ReleasesInfo.multids"
NOTES_DIR = "editions/tw5.com/tiddlers/releasenotes/5.4.0"


@pytest.fixture
def releases_info_text() -> str:
    return RELEASES_INFO


@pytest.fixture
def change_note_text() -> str:
    return CHANGE_NOTE


@pytest.fixture
def impact_note_text() -> str:
    return IMPACT_NOTE


@pytest.fixture
def tw_repo(tmp_path: Path) -> Path:
    """A minimal TiddlyWiki checkout with ReleasesInfo and two valid notes."""
    info = tmp_path / RELEASES_INFO_PATH
    info.parent.mkdir(parents=True)
    info.write_text(RELEASES_INFO)

    notes = tmp_path / NOTES_DIR
    notes.mkdir(parents=True)
    (notes / "9123.tid").write_text(CHANGE_NOTE)
    (notes / "9123-impact.tid").write_text(IMPACT_NOTE)
    return tmp_path


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, changed_files: list[str] | None = None, comments: list[Comment] | None = None):
        self.changed_files = list(changed_files or [])
        self.comments = list(comments or [])
        self.created: list[str] = []
        self.updated: list[tuple[int, str]] = []
        self.events: list[tuple[str, dict]] = []
        self._next_id = 1000

    def get_changed_files(self, pr_number: int) -> list[str]:
        return list(self.changed_files)

    def get_base_ref(self, pr_number: int) -> str:
        return "master"

    def find_comment(self, pr_number: int, identifier: str) -> Comment | None:
        for comment in self.comments:
            if identifier in comment.body:
                return comment
        return None

    def create_comment(self, pr_number: int, body: str) -> None:
        self.created.append(body)
        self._next_id += 1
        self.comments.append(Comment(id=self._next_id, body=body))

    def update_comment(self, comment_id: int, body: str) -> None:
        self.updated.append((comment_id, body))
        self.comments = [Comment(c.id, body) if c.id == comment_id else c for c in self.comments]

    def dispatch_event(self, event_type: str, payload: dict) -> None:
        self.events.append((event_type, payload))

    @property
    def body(self) -> str | None:
        return self.comments[0].body if self.comments else None


@pytest.fixture
def fake_github():
    return FakeGitHub()
