"""Data models for path rules."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

Condition = Callable[[str, Sequence[str]], bool]


class Severity(str, Enum):
    """How a matched rule is presented in the PR comment."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Rule:
    """A declarative check over (base branch, changed files).

    ``condition`` must be pure and total: it may be called with any branch
    name and any file list, including an empty one.
    """

    id: int
    name: str
    condition: Condition
    message: str
    stop_processing: bool = False
    severity: Severity = Severity.ERROR


@dataclass(frozen=True)
class RuleMatch:
    """Outcome of one evaluated rule."""

    rule_id: int
    name: str
    matched: bool
    severity: Severity = Severity.ERROR


@dataclass
class RuleEvaluation:
    """Result of running a rule set."""

    messages: list[str] = field(default_factory=list)
    aborted: bool = False
    outcomes: list[RuleMatch] = field(default_factory=list)

    @property
    def matched_ids(self) -> list[int]:
        return [o.rule_id for o in self.outcomes if o.matched]
