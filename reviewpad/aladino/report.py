"""The report of which workflows ran, published as a pull request comment."""

from __future__ import annotations

from dataclasses import dataclass, field

from reviewpad.engine.program import Statement

REPORT_COMMENT_ANNOTATION = "<!--@annotation-reviewpad-report-->"

_TABLE_HEADER = (
    "| Workflows <sub><sup>activated</sup></sub> "
    "| Rules <sub><sup>triggered</sup></sub> "
    "| Actions <sub><sup>ran</sub></sup> "
    "| Description |\n"
)
_TABLE_SEPARATOR = "| - | - | - | - |\n"


@dataclass
class ReportWorkflowDetails:
    """What one activated workflow did: the rules that fired and its actions."""

    name: str
    description: str = ""
    rules: dict[str, bool] = field(default_factory=dict)
    actions: list[str] = field(default_factory=list)

    def merge(self, other: ReportWorkflowDetails) -> ReportWorkflowDetails:
        """Add the other details' rules to these; the actions stay as they are."""
        for rule in other.rules:
            self.rules.setdefault(rule, True)
        return self


@dataclass
class Report:
    """Details of every workflow that ran, keyed by workflow name."""

    workflow_details: dict[str, ReportWorkflowDetails] = field(default_factory=dict)

    def add(self, statement: Statement) -> None:
        """Record that a statement was executed."""
        workflow = statement.metadata.workflow
        details = ReportWorkflowDetails(
            name=workflow.name,
            description=workflow.description,
            rules={rule.rule: True for rule in statement.metadata.triggered_by},
            actions=[statement.code],
        )
        existing = self.workflow_details.get(workflow.name)
        if existing is None:
            self.workflow_details[workflow.name] = details
        else:
            self.workflow_details[workflow.name] = existing.merge(details)


def report_header() -> str:
    """The annotation that marks the report comment, followed by its title."""
    return f"{REPORT_COMMENT_ANNOTATION}\n**Reviewpad Report**\n\n"


def build_verbose_report(report: Report | None) -> str:
    """Render a report as a markdown table; an absent report renders as nothing."""
    if report is None:
        return ""

    parts = [":scroll: **Explanation**\n"]
    details = report.workflow_details
    if not details:
        parts.append("No workflows activated")
        return "".join(parts)

    parts.append(_TABLE_HEADER)
    parts.append(_TABLE_SEPARATOR)
    for workflow in details.values():
        rules = "".join(f"{rule}<br>" for rule in workflow.rules)
        actions = "".join(f"`{action}`<br>" for action in workflow.actions)
        parts.append(
            f"| {workflow.name} | {rules} | {actions} | {workflow.description} |\n"
        )
    return "".join(parts)


def build_report(report: Report | None) -> str:
    """The full comment body: header followed by the verbose report."""
    return report_header() + build_verbose_report(report)