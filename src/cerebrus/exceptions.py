"""Custom exceptions for Cerebrus."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cerebrus.changenotes.validator import ValidationResult


class CerebrusError(Exception):
    """Base exception for all Cerebrus errors."""


class ConfigError(CerebrusError):
    """Configuration and input errors."""


class ReleasesInfoError(ConfigError):
    """Raised when the release enumeration file cannot be found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"ReleasesInfo.multids not found at {path}")


class RuleError(CerebrusError):
    """A rule condition raised instead of returning a boolean."""

    def __init__(self, rule_id: int, rule_name: str, cause: Exception):
        self.rule_id = rule_id
        self.rule_name = rule_name
        super().__init__(f"Rule {rule_id} ({rule_name!r}) failed: {cause}")


class ChangeNoteValidationError(CerebrusError):
    """Raised after publishing when the change-note check did not pass."""

    def __init__(self, result: ValidationResult | None = None):
        self.result = result
        super().__init__("Change note validation failed")


class GitHubError(CerebrusError):
    """GitHub API errors."""


class BuildSizeError(CerebrusError):
    """Build size comparison errors."""
