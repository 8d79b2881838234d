"""Rule evaluation with short-circuit semantics."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cerebrus.exceptions import RuleError
from cerebrus.rules.builtin import DEFAULT_RULES
from cerebrus.rules.models import Rule, RuleEvaluation, RuleMatch

logger = logging.getLogger("cerebrus.rules")


def evaluate(
    base_branch: str,
    changed_files: Sequence[str],
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> RuleEvaluation:
    """Run ``rules`` in order against the PR.

    Every matched rule contributes its message. A matched rule with
    ``stop_processing`` ends the run; later rules are not evaluated and
    ``aborted`` is set.

    Raises:
        RuleError: a rule condition raised. Conditions are required to be
            total, so this is treated as fatal for the run.
    """
    result = RuleEvaluation()
    files = list(changed_files)

    for rule in rules:
        try:
            matched = bool(rule.condition(base_branch, files))
        except Exception as e:
            raise RuleError(rule.id, rule.name, e) from e

        logger.debug("Processed rule %r: matched=%s", rule.name, matched)
        result.outcomes.append(
            RuleMatch(rule_id=rule.id, name=rule.name, matched=matched, severity=rule.severity)
        )

        if matched:
            result.messages.append(rule.message)
            if rule.stop_processing:
                logger.info("Rule %d (%s) stopped processing", rule.id, rule.name)
                result.aborted = True
                break

    return result


def render_rules_section(evaluation: RuleEvaluation) -> str:
    """Markdown for the path-rules section; empty when nothing matched."""
    return "\n\n".join(evaluation.messages)
