"""Create or update the Cerebrus comment one section at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from cerebrus.comment.sections import IDENTIFIER, SectionMarkers, reconcile
from cerebrus.github.client import Comment

logger = logging.getLogger("cerebrus.comment")


class CommentClient(Protocol):
    def find_comment(self, pr_number: int, identifier: str) -> Comment | None: ...

    def create_comment(self, pr_number: int, body: str) -> None: ...

    def update_comment(self, comment_id: int, body: str) -> None: ...


@dataclass(frozen=True)
class PublishResult:
    action: str  # 'created', 'updated', 'unchanged', 'skipped', 'dry-run'
    body: str


def publish_section(
    client: CommentClient,
    pr_number: int,
    markers: SectionMarkers,
    content: str,
    dry_run: bool = False,
) -> PublishResult:
    """Set one section of the PR's Cerebrus comment.

    The comment is created on the first non-empty section and edited in place
    afterwards. Unchanged bodies are not written back, so repeated runs on
    the same PR state make no API writes.
    """
    existing = client.find_comment(pr_number, IDENTIFIER)
    body = reconcile(existing.body if existing else None, markers, content)

    if existing is None and not content.strip():
        logger.info("No %s content and no existing comment; nothing to post", markers.name)
        return PublishResult("skipped", body)

    if existing is not None and body == existing.body:
        logger.info("%s section already up to date", markers.name)
        return PublishResult("unchanged", body)

    if dry_run:
        logger.info("[dry-run] Would %s comment:\n%s", "update" if existing else "post", body)
        return PublishResult("dry-run", body)

    if existing is None:
        client.create_comment(pr_number, body)
        logger.info("Posted Cerebrus comment on PR #%d", pr_number)
        return PublishResult("created", body)

    client.update_comment(existing.id, body)
    logger.info("Updated %s section of comment %d", markers.name, existing.id)
    return PublishResult("updated", body)
