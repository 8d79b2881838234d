"""Path rules evaluated against a pull request's base branch and changed files."""

from cerebrus.rules.builtin import DEFAULT_RULES, is_solo_license_change
from cerebrus.rules.evaluator import evaluate, render_rules_section
from cerebrus.rules.models import Rule, RuleEvaluation, RuleMatch

__all__ = [
    "DEFAULT_RULES",
    "Rule",
    "RuleEvaluation",
    "RuleMatch",
    "evaluate",
    "is_solo_license_change",
    "render_rules_section",
]
