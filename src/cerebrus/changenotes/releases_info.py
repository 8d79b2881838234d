"""Valid change types, categories and impact types, read from ReleasesInfo.multids.

The file is a TiddlyWiki multi-tiddler data file; Cerebrus only looks at the
caption lines::

    change-types/bugfix/caption: Bugfix
    categories/widget/caption: Widgets
    impact-types/deprecation/caption: Deprecation
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from cerebrus.exceptions import ReleasesInfoError

logger = logging.getLogger("cerebrus.changenotes")

RELEASES_INFO_PATH = Path("editions/tw5.com/tiddlers/releasenotes/ReleasesInfo.multids")

CHANGE_TYPE_RE = re.compile(r"^change-types/([^/]+)/caption:")
CATEGORY_RE = re.compile(r"^categories/([^/]+)/caption:")
IMPACT_TYPE_RE = re.compile(r"^impact-types/([^/]+)/caption:")


@dataclass
class ReleasesInfo:
    """The three enumerations, in first-seen order."""

    change_types: list[str] = field(default_factory=list)
    change_categories: list[str] = field(default_factory=list)
    impact_types: list[str] = field(default_factory=list)

    def values(self, name: str) -> list[str]:
        """Look up an enumeration by its schema name."""
        return {
            "change_types": self.change_types,
            "change_categories": self.change_categories,
            "impact_types": self.impact_types,
        }[name]


def parse_releases_info(content: str) -> ReleasesInfo:
    info = ReleasesInfo()
    targets = (
        (CHANGE_TYPE_RE, info.change_types),
        (CATEGORY_RE, info.change_categories),
        (IMPACT_TYPE_RE, info.impact_types),
    )
    for line in content.split("\n"):
        for pattern, values in targets:
            match = pattern.match(line)
            if match and match.group(1) not in values:
                values.append(match.group(1))
    return info


def load_releases_info(repo_path: Path, relative_path: Path | str = RELEASES_INFO_PATH) -> ReleasesInfo:
    """Read the enumeration file from a checkout.

    Raises:
        ReleasesInfoError: the file is missing. Validation cannot proceed
            without it.
    """
    path = Path(repo_path) / relative_path
    if not path.is_file():
        logger.error("ReleasesInfo.multids not found at %s", path)
        raise ReleasesInfoError(str(path))
    return parse_releases_info(path.read_text(encoding="utf-8"))
