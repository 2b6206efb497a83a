"""Static checks on a reviewpad configuration before it is evaluated."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from reviewpad.engine.lang import (
    KINDS,
    PadGroup,
    PadRule,
    PadWorkflow,
    ReviewpadFile,
    find_group,
    find_rule,
)

logger = logging.getLogger(__name__)

_RULE_CALL = r'\$rule\(".*"\)'
_GROUP_CALL = r'\$group\(".*"\)'
_QUOTED_NAME = re.compile(r'"(.*?)"')


class LintError(Exception):
    """Raised when a configuration fails a lint check."""


def _all_matches(
    pattern: str,
    groups: Iterable[PadGroup],
    rules: Iterable[PadRule],
    workflows: Iterable[PadWorkflow],
) -> list[str]:
    """Every match of ``pattern`` in group specs, rule specs and workflow actions."""
    regex = re.compile(pattern)
    matches: list[str] = []
    for group in groups:
        matches.extend(regex.findall(group.spec))
    for rule in rules:
        matches.extend(regex.findall(rule.spec))
    for workflow in workflows:
        for action in workflow.actions:
            matches.extend(regex.findall(action))
    return matches


def _mentioned_names(calls: Iterable[str]) -> Iterable[str]:
    for call in calls:
        found = _QUOTED_NAME.search(call)
        yield found.group(1) if found else ""


def _lint_groups(groups: Sequence[PadGroup]) -> None:
    seen: set[str] = set()
    for group in groups:
        logger.info("analyzing group %s", group.name)
        if not group.name:
            raise LintError(f"group {group!r} has invalid name")
        if group.name in seen:
            raise LintError(f"group with the name {group.name} already exists")
        seen.add(group.name)


def _lint_rules(rules: Sequence[PadRule]) -> None:
    seen: set[str] = set()
    for rule in rules:
        if not rule.name:
            raise LintError(f"rule {rule!r} has invalid name")
        if rule.name in seen:
            raise LintError(f"rule with the name {rule.name} already exists")
        if rule.kind not in KINDS:
            raise LintError(f"rule {rule.name} has invalid kind {rule.kind}")
        if not rule.spec:
            raise LintError(f"rule {rule.name} has empty spec")
        seen.add(rule.name)


def _lint_workflows(rules: Sequence[PadRule], workflows: Sequence[PadWorkflow]) -> None:
    seen: set[str] = set()
    has_extra_actions = False

    for workflow in workflows:
        logger.info("analyzing workflow %s", workflow.name)
        has_actions = bool(workflow.actions)

        if workflow.name in seen:
            raise LintError(f"workflow with the name {workflow.name} already exists")

        if not workflow.rules:
            raise LintError(f"workflow {workflow.name} does not have rules")

        for workflow_rule in workflow.rules:
            rule_name = workflow_rule.rule
            if not rule_name:
                raise LintError("workflow has an empty rule")
            if find_rule(rules, rule_name) is None:
                raise LintError(f"rule {rule_name} is unknown")

            has_extra_actions = bool(workflow_rule.extra_actions)
            if not has_extra_actions and not has_actions:
                logger.warning(
                    "warning: rule %s will be ignored since it has no actions", rule_name
                )

        if not has_actions and not has_extra_actions:
            logger.warning("warning: workflow has no actions")

        seen.add(workflow.name)


def _lint_rules_mentions(
    rules: Sequence[PadRule],
    groups: Sequence[PadGroup],
    workflows: Sequence[PadWorkflow],
) -> None:
    uses = {rule.name: 0 for rule in rules}

    for workflow in workflows:
        for workflow_rule in workflow.rules:
            if find_rule(rules, workflow_rule.rule) is not None:
                uses[workflow_rule.rule] += 1

    calls = _all_matches(_RULE_CALL, groups, rules, workflows)
    for rule_name in _mentioned_names(calls):
        if find_rule(rules, rule_name) is None:
            raise LintError(f"the rule {rule_name} isn't defined")
        uses[rule_name] += 1

    for rule_name, total in uses.items():
        if total == 0:
            raise LintError(f"unused rule {rule_name}")


def _lint_groups_mentions(
    groups: Sequence[PadGroup],
    rules: Sequence[PadRule],
    workflows: Sequence[PadWorkflow],
) -> None:
    calls = _all_matches(_GROUP_CALL, groups, rules, workflows)
    for group_name in _mentioned_names(calls):
        if find_group(groups, group_name) is None:
            raise LintError(f"the group {group_name} isn't defined")


def lint(file: ReviewpadFile) -> None:
    """Check a configuration, raising LintError at the first problem found."""
    groups = file.groups or []
    rules = file.rules or []
    workflows = file.workflows or []

    _lint_groups(groups)
    _lint_rules(rules)
    _lint_workflows(rules, workflows)
    _lint_rules_mentions(rules, groups, workflows)
    _lint_groups_mentions(groups, rules, workflows)