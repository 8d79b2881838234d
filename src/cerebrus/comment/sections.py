"""Sectioned PR comment bodies.

Cerebrus keeps one comment per pull request, recognised by ``IDENTIFIER``.
Its body is made of independent sections, each owned by one check and
delimited by an HTML comment marker pair::

    <!-- Cerebrus PR report -->

    <!-- Path Rules Section -->
    ...
    <!-- End Path Rules Section -->

    <!-- Change Note Section -->
    ...
    <!-- End Change Note Section -->

``tokenize`` locates the sections in one pass and ``reconcile`` rewrites a
single section without touching bytes that belong to any other.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

IDENTIFIER = "<!-- Cerebrus PR report -->"


@dataclass(frozen=True)
class SectionMarkers:
    """The start/end marker pair of a named section."""

    name: str

    @property
    def start(self) -> str:
        return f"<!-- {self.name} Section -->"

    @property
    def end(self) -> str:
        return f"<!-- End {self.name} Section -->"

    def wrap(self, content: str) -> str:
        return f"{self.start}\n\n{content.strip()}\n\n{self.end}"


RULES_SECTION = SectionMarkers("Path Rules")
CHANGE_NOTE_SECTION = SectionMarkers("Change Note")
BUILD_SIZE_SECTION = SectionMarkers("Build Size")

KNOWN_SECTIONS: tuple[SectionMarkers, ...] = (
    RULES_SECTION,
    CHANGE_NOTE_SECTION,
    BUILD_SIZE_SECTION,
)


@dataclass(frozen=True)
class Section:
    """A located section: ``body[start:end]`` is the full marked span."""

    markers: SectionMarkers
    start: int
    end: int
    content: str


def _locate(body: str, markers: SectionMarkers) -> Section | None:
    first = body.find(markers.start)
    if first == -1:
        return None
    close = body.find(markers.end, first + len(markers.start))
    if close == -1:
        # Unterminated start marker: treated as absent.
        return None
    # An end marker belongs to the nearest start marker before it; stale
    # unterminated starts further up stay outside the span.
    begin = body.rfind(markers.start, first, close)
    inner = begin + len(markers.start)
    end = close + len(markers.end)
    return Section(markers, begin, end, body[inner:close].strip())


def tokenize(body: str, known: Iterable[SectionMarkers] = KNOWN_SECTIONS) -> list[Section]:
    """Find the first complete span of each known section, ordered by offset.

    A span that starts inside an earlier section is content of that section,
    not a section of its own, so returned spans never overlap.
    """
    found = [s for s in (_locate(body, m) for m in dict.fromkeys(known)) if s is not None]
    found.sort(key=lambda s: s.start)

    sections: list[Section] = []
    for section in found:
        if sections and section.start < sections[-1].end:
            continue
        sections.append(section)
    return sections


def find_section(
    body: str,
    markers: SectionMarkers,
    known: Iterable[SectionMarkers] = KNOWN_SECTIONS,
) -> Section | None:
    for section in tokenize(body, (*known, markers)):
        if section.markers == markers:
            return section
    return None


def reconcile(
    existing_body: str | None,
    markers: SectionMarkers,
    new_content: str,
    known: Iterable[SectionMarkers] = KNOWN_SECTIONS,
) -> str:
    """Return the comment body with ``markers``' section set to ``new_content``.

    - no existing comment: a fresh body, identifier first. With empty content
      this is the bare identifier.
    - section present: replaced in place, or removed when content is empty.
    - section absent: appended, or the body is returned unchanged when content
      is empty.
    """
    content = new_content.strip() if new_content else ""

    if existing_body is None:
        if not content:
            return IDENTIFIER
        return f"{IDENTIFIER}\n\n{markers.wrap(content)}"

    section = find_section(existing_body, markers, known)

    if section is None:
        if not content:
            return existing_body
        return f"{existing_body}\n\n{markers.wrap(content)}"

    if content:
        return existing_body[:section.start] + markers.wrap(content) + existing_body[section.end:]

    before = existing_body[:section.start].rstrip()
    after = existing_body[section.end:].strip()
    if before and after:
        return f"{before}\n\n{after}"
    return before or after
