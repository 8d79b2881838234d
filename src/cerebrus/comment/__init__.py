"""The shared Cerebrus PR comment and its independently owned sections."""

from cerebrus.comment.publisher import PublishResult, publish_section
from cerebrus.comment.sections import (
    BUILD_SIZE_SECTION,
    CHANGE_NOTE_SECTION,
    IDENTIFIER,
    KNOWN_SECTIONS,
    RULES_SECTION,
    Section,
    SectionMarkers,
    find_section,
    reconcile,
    tokenize,
)

__all__ = [
    "BUILD_SIZE_SECTION",
    "CHANGE_NOTE_SECTION",
    "IDENTIFIER",
    "KNOWN_SECTIONS",
    "PublishResult",
    "RULES_SECTION",
    "Section",
    "SectionMarkers",
    "find_section",
    "publish_section",
    "reconcile",
    "tokenize",
]
