"""The environment the engine evaluates a configuration in."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from reviewpad.engine.program import Program, Statement


class GroupKind(str, Enum):
    """What a group is made of."""

    DEVELOPER = "developer"


class GroupType(str, Enum):
    """How a group's members are given."""

    STATIC = "static"
    FILTER = "filter"


class Interpreter(ABC):
    """The language back end that groups, rules and actions are handed to."""

    @abstractmethod
    def process_group(
        self,
        name: str,
        kind: GroupKind | str,
        type_of: GroupType | str,
        expr: str,
        param_expr: str,
        where_expr: str,
    ) -> None:
        """Evaluate a group definition and remember its value."""

    @abstractmethod
    def process_label(self, label_id: str, name: str) -> None:
        """Remember the repository name of the label known as ``label_id``."""

    @abstractmethod
    def process_rule(self, name: str, spec: str) -> None:
        """Remember a rule's specification."""

    @abstractmethod
    def eval_expr(self, kind: str, expr: str) -> bool:
        """Evaluate a condition."""

    @abstractmethod
    def exec_program(self, program: Program) -> None:
        """Execute every statement of a program in order."""

    @abstractmethod
    def exec_statement(self, statement: Statement) -> None:
        """Execute one statement."""

    @abstractmethod
    def report(self, mode: str) -> None:
        """Publish the report of what was executed."""


@dataclass
class Env:
    """Everything an evaluation needs: services, the pull request and an interpreter.

    ``pull_request`` is the pull request as the GitHub REST API describes it.
    """

    dry_run: bool
    client: Any
    collector: Any
    pull_request: dict[str, Any]
    interpreter: Interpreter
    client_gql: Any = None
    event_payload: Any = None