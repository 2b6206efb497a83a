import logging

import pytest

from reviewpad.engine.lang import (
    PadGroup,
    PadRule,
    PadWorkflow,
    PadWorkflowRule,
    ReviewpadFile,
)
from reviewpad.engine.linter import LintError, lint


def _valid_file() -> ReviewpadFile:
    return ReviewpadFile(
        groups=[PadGroup(name="seniors", kind="developers", spec='["john"]')],
        rules=[PadRule(name="tautology", kind="patch", spec="1 == 1")],
        workflows=[
            PadWorkflow(
                name="test",
                rules=[PadWorkflowRule(rule="tautology")],
                actions=['$assignReviewer($group("seniors"))'],
            )
        ],
    )


def test_valid_file_passes():
    assert lint(_valid_file()) is None


def test_workflow_without_actions_warns(caplog):
    file = _valid_file()
    file.workflows[0].actions = []
    with caplog.at_level(logging.WARNING, logger="reviewpad.engine.linter"):
        result = lint(file)
    assert result is None
    assert "warning: workflow has no actions" in caplog.text
    assert "warning: rule tautology will be ignored since it has no actions" in caplog.text


def test_group_with_empty_name():
    file = _valid_file()
    file.groups.append(PadGroup(name=""))
    with pytest.raises(LintError, match="has invalid name"):
        lint(file)


def test_duplicate_group():
    file = _valid_file()
    file.groups.append(PadGroup(name="seniors", spec='["jane"]'))
    with pytest.raises(LintError, match="group with the name seniors already exists"):
        lint(file)


def test_rule_with_empty_name():
    file = _valid_file()
    file.rules.append(PadRule(name="", kind="patch", spec="true"))
    with pytest.raises(LintError, match="has invalid name"):
        lint(file)


def test_duplicate_rule():
    file = _valid_file()
    file.rules.append(PadRule(name="tautology", kind="patch", spec="true"))
    with pytest.raises(LintError, match="rule with the name tautology already exists"):
        lint(file)


def test_rule_with_invalid_kind():
    file = _valid_file()
    file.rules[0].kind = "developers"
    with pytest.raises(LintError, match="rule tautology has invalid kind developers"):
        lint(file)


def test_rule_with_empty_spec():
    file = _valid_file()
    file.rules[0].spec = ""
    with pytest.raises(LintError, match="rule tautology has empty spec"):
        lint(file)


def test_duplicate_workflow():
    file = _valid_file()
    file.workflows.append(
        PadWorkflow(name="test", rules=[PadWorkflowRule(rule="tautology")])
    )
    with pytest.raises(LintError, match="workflow with the name test already exists"):
        lint(file)


def test_workflow_without_rules():
    file = _valid_file()
    file.workflows[0].rules = []
    with pytest.raises(LintError, match="workflow test does not have rules"):
        lint(file)


def test_workflow_with_empty_rule():
    file = _valid_file()
    file.workflows[0].rules.append(PadWorkflowRule(rule=""))
    with pytest.raises(LintError, match="workflow has an empty rule"):
        lint(file)


def test_workflow_with_unknown_rule():
    file = _valid_file()
    file.workflows[0].rules.append(PadWorkflowRule(rule="missing"))
    with pytest.raises(LintError, match="rule missing is unknown"):
        lint(file)


def test_unused_rule():
    file = _valid_file()
    file.rules.append(PadRule(name="lonely", kind="author", spec="true"))
    with pytest.raises(LintError, match="unused rule lonely"):
        lint(file)


def test_rule_mentioned_in_another_rule_counts_as_used():
    file = _valid_file()
    file.rules.append(PadRule(name="inner", kind="patch", spec="1 == 1"))
    file.rules[0].spec = '$rule("inner")'
    assert lint(file) is None


def test_mention_of_undefined_rule():
    file = _valid_file()
    file.rules[0].spec = '$rule("ghost")'
    with pytest.raises(LintError, match="the rule ghost isn't defined"):
        lint(file)


def test_mention_of_undefined_group():
    file = _valid_file()
    file.workflows[0].actions = ['$assignReviewer($group("juniors"))']
    with pytest.raises(LintError, match="the group juniors isn't defined"):
        lint(file)


def test_groups_are_checked_before_rules():
    file = _valid_file()
    file.groups.append(PadGroup(name=""))
    file.rules[0].spec = ""
    with pytest.raises(LintError, match="group"):
        lint(file)