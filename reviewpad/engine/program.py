"""The list of statements produced by evaluating workflows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from reviewpad.engine.lang import PadWorkflow, PadWorkflowRule


@dataclass
class Metadata:
    """Where a statement came from: its workflow and the rules that fired."""

    workflow: PadWorkflow
    triggered_by: list[PadWorkflowRule]


@dataclass
class Statement:
    """One action to execute."""

    code: str
    metadata: Metadata


@dataclass
class Program:
    """An ordered list of statements."""

    statements: list[Statement] = field(default_factory=list)

    def append(
        self,
        actions: Iterable[str],
        workflow: PadWorkflow,
        rules: Iterable[PadWorkflowRule],
    ) -> None:
        """Add one statement per action, tagged with the workflow and rules."""
        triggered_by = list(rules)
        self.statements.extend(
            Statement(code=action, metadata=Metadata(workflow, list(triggered_by)))
            for action in actions
        )