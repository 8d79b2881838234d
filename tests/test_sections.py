"""Tests for the sectioned PR comment."""

from __future__ import annotations

from cerebrus.comment import (
    BUILD_SIZE_SECTION,
    CHANGE_NOTE_SECTION,
    IDENTIFIER,
    KNOWN_SECTIONS,
    RULES_SECTION,
    PublishResult,
    SectionMarkers,
    find_section,
    publish_section,
    reconcile,
    tokenize,
)
from cerebrus.github.client import Comment

S = RULES_SECTION


class TestMarkers:
    def test_marker_text(self):
        assert CHANGE_NOTE_SECTION.start == "<!-- Change Note Section -->"
        assert CHANGE_NOTE_SECTION.end == "<!-- End Change Note Section -->"
        assert BUILD_SIZE_SECTION.start == "<!-- Build Size Section -->"
        assert IDENTIFIER == "<!-- Cerebrus PR report -->"

    def test_no_marker_contains_another(self):
        markers = [IDENTIFIER] + [m for s in KNOWN_SECTIONS for m in (s.start, s.end)]
        for a in markers:
            for b in markers:
                if a != b:
                    assert a not in b


class TestTokenize:
    def test_finds_sections_in_order(self):
        body = reconcile(None, BUILD_SIZE_SECTION, "size")
        body = reconcile(body, RULES_SECTION, "rules")
        sections = tokenize(body)
        assert [s.markers for s in sections] == [BUILD_SIZE_SECTION, RULES_SECTION]
        assert [s.content for s in sections] == ["size", "rules"]
        for s in sections:
            assert body[s.start:s.end].startswith(s.markers.start)
            assert body[s.start:s.end].endswith(s.markers.end)

    def test_unterminated_section_is_ignored(self):
        body = f"{IDENTIFIER}\n\n{S.start}\n\nbroken"
        assert tokenize(body) == []

    def test_nested_span_is_content(self):
        inner = BUILD_SIZE_SECTION.wrap("inner")
        body = f"{IDENTIFIER}\n\n{S.wrap(inner)}"
        sections = tokenize(body)
        assert [s.markers for s in sections] == [S]


class TestReconcile:
    def test_fresh_comment(self):
        body = reconcile(None, S, "X")
        assert body == f"{IDENTIFIER}\n\n{S.start}\n\nX\n\n{S.end}"

    def test_fresh_comment_empty_content(self):
        assert reconcile(None, S, "") == IDENTIFIER

    def test_replace_round_trip(self):
        body = reconcile(reconcile(None, S, "X"), S, "Y")
        assert body.count(IDENTIFIER) == 1
        assert body.count(S.start) == 1
        assert body.count(S.end) == 1
        assert find_section(body, S).content == "Y"
        assert "X" not in body.replace(IDENTIFIER, "")

    def test_idempotent(self):
        once = reconcile(reconcile(None, CHANGE_NOTE_SECTION, "notes"), S, "rules")
        twice = reconcile(once, S, "rules")
        assert twice == once

    def test_append_missing_section(self):
        first = reconcile(None, CHANGE_NOTE_SECTION, "notes")
        body = reconcile(first, BUILD_SIZE_SECTION, "size")
        assert body == f"{first}\n\n{BUILD_SIZE_SECTION.wrap('size')}"

    def test_missing_section_with_empty_content_is_noop(self):
        first = reconcile(None, CHANGE_NOTE_SECTION, "notes")
        assert reconcile(first, S, "") == first

    def test_remove_section_keeps_others(self):
        body = reconcile(None, CHANGE_NOTE_SECTION, "notes")
        body = reconcile(body, S, "rules")
        body = reconcile(body, BUILD_SIZE_SECTION, "size")

        stripped = reconcile(body, S, "")
        assert S.start not in stripped and S.end not in stripped
        assert find_section(stripped, CHANGE_NOTE_SECTION).content == "notes"
        assert find_section(stripped, BUILD_SIZE_SECTION).content == "size"
        assert "\n\n\n" not in stripped

    def test_remove_last_section_leaves_shell(self):
        body = reconcile(None, S, "rules")
        assert reconcile(body, S, "") == IDENTIFIER

    def test_replace_preserves_other_bytes(self):
        body = reconcile(None, CHANGE_NOTE_SECTION, "notes  \n\n  with   spacing")
        body = reconcile(body, S, "old")
        before = body[:find_section(body, S).start]
        updated = reconcile(body, S, "new")
        assert updated.startswith(before)
        assert find_section(updated, CHANGE_NOTE_SECTION) == find_section(body, CHANGE_NOTE_SECTION)

    def test_malformed_body_falls_back_to_append(self):
        body = f"{IDENTIFIER}\n\n{S.start}\n\nhalf written"
        updated = reconcile(body, S, "fresh")
        assert updated == f"{body}\n\n{S.wrap('fresh')}"

    def test_stale_start_marker_does_not_swallow_other_sections(self):
        body = f"{IDENTIFIER}\n\n{S.start}\n\nhalf written"
        body = reconcile(body, CHANGE_NOTE_SECTION, "notes")
        body = reconcile(body, S, "rules v1")
        updated = reconcile(body, S, "rules v2")

        assert find_section(updated, CHANGE_NOTE_SECTION).content == "notes"
        assert find_section(updated, S).content == "rules v2"
        assert updated.startswith(f"{IDENTIFIER}\n\n{S.start}\n\nhalf written")

        removed = reconcile(updated, S, "")
        assert find_section(removed, CHANGE_NOTE_SECTION).content == "notes"
        assert "rules v2" not in removed

    def test_unknown_section_name(self):
        custom = SectionMarkers("Custom")
        body = reconcile(None, custom, "a")
        body = reconcile(body, custom, "b")
        assert find_section(body, custom).content == "b"
        assert body.count(custom.start) == 1


class _Client:
    def __init__(self, comment: Comment | None = None):
        self.comment = comment
        self.calls: list[tuple] = []

    def find_comment(self, pr_number, identifier):
        return self.comment

    def create_comment(self, pr_number, body):
        self.calls.append(("create", body))
        self.comment = Comment(1, body)

    def update_comment(self, comment_id, body):
        self.calls.append(("update", comment_id, body))
        self.comment = Comment(comment_id, body)


class TestPublishSection:
    def test_creates_comment(self):
        client = _Client()
        result = publish_section(client, 5, S, "rules")
        assert result == PublishResult("created", reconcile(None, S, "rules"))
        assert client.calls[0][0] == "create"

    def test_empty_section_never_creates(self):
        client = _Client()
        assert publish_section(client, 5, S, "").action == "skipped"
        assert client.calls == []

    def test_updates_then_skips_unchanged(self):
        client = _Client()
        publish_section(client, 5, S, "rules")
        assert publish_section(client, 5, CHANGE_NOTE_SECTION, "notes").action == "updated"
        assert publish_section(client, 5, CHANGE_NOTE_SECTION, "notes").action == "unchanged"
        assert len(client.calls) == 2

    def test_dry_run_writes_nothing(self):
        client = _Client()
        result = publish_section(client, 5, S, "rules", dry_run=True)
        assert result.action == "dry-run"
        assert IDENTIFIER in result.body
        assert client.calls == []
