"""Data model of a reviewpad configuration file."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

PROFESSIONAL_EDITION = "professional"
TEAM_EDITION = "team"
SILENT_MODE = "silent"
VERBOSE_MODE = "verbose"

KINDS = ("patch", "author")


class _Comparable(Protocol):
    def equals(self, other) -> bool: ...


_T = TypeVar("_T", bound=_Comparable)


def _all_equal(left: Sequence[_T], right: Sequence[_T]) -> bool:
    return len(left) == len(right) and all(a.equals(b) for a, b in zip(left, right))


@dataclass
class PadImport:
    """A reference to another reviewpad file to inline."""

    url: str = ""

    def equals(self, other: PadImport) -> bool:
        return self.url == other.url


@dataclass
class PadRule:
    """A named condition written in the rule language."""

    name: str = ""
    kind: str = ""
    description: str = ""
    spec: str = ""

    def equals(self, other: PadRule) -> bool:
        return (
            self.name == other.name
            and self.kind == other.kind
            and self.description == other.description
            and self.spec == other.spec
        )


@dataclass
class PadWorkflowRule:
    """A rule reference inside a workflow, with actions of its own."""

    rule: str = ""
    extra_actions: list[str] = field(default_factory=list)

    def equals(self, other: PadWorkflowRule) -> bool:
        return self.rule == other.rule and list(self.extra_actions) == list(
            other.extra_actions
        )


@dataclass
class PadLabel:
    """A label that the engine makes sure exists in the repository."""

    name: str = ""
    color: str = ""
    description: str = ""

    def equals(self, other: PadLabel) -> bool:
        return (
            self.name == other.name
            and self.color == other.color
            and self.description == other.description
        )


@dataclass
class PadWorkflow:
    """Actions to run when any of the listed rules holds."""

    name: str = ""
    description: str = ""
    always_run: bool = False
    rules: list[PadWorkflowRule] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)

    def equals(self, other: PadWorkflow) -> bool:
        return (
            self.name == other.name
            and self.description == other.description
            and _all_equal(self.rules, other.rules)
            and self.always_run == other.always_run
            and list(self.actions) == list(other.actions)
        )


@dataclass
class PadGroup:
    """A named group of developers, static or defined by a filter."""

    name: str = ""
    description: str = ""
    kind: str = ""
    type: str = ""
    spec: str = ""
    param: str = ""
    where: str = ""

    def equals(self, other: PadGroup) -> bool:
        # The parameter name is not part of a group's identity.
        return (
            self.name == other.name
            and self.description == other.description
            and self.kind == other.kind
            and self.type == other.type
            and self.spec == other.spec
            and self.where == other.where
        )


@dataclass
class ReviewpadFile:
    """A whole reviewpad configuration."""

    version: str = ""
    edition: str = ""
    mode: str = ""
    ignore_errors: bool = False
    imports: list[PadImport] = field(default_factory=list)
    groups: list[PadGroup] = field(default_factory=list)
    rules: list[PadRule] = field(default_factory=list)
    labels: dict[str, PadLabel] = field(default_factory=dict)
    workflows: list[PadWorkflow] = field(default_factory=list)

    def equals(self, other: ReviewpadFile) -> bool:
        if (
            self.version != other.version
            or self.edition != other.edition
            or self.mode != other.mode
            or self.ignore_errors != other.ignore_errors
        ):
            return False
        if not _all_equal(self.imports or [], other.imports or []):
            return False
        if not _all_equal(self.rules or [], other.rules or []):
            return False
        own_labels = self.labels or {}
        other_labels = other.labels or {}
        if len(own_labels) != len(other_labels):
            return False
        for key, label in own_labels.items():
            if not label.equals(other_labels.get(key, PadLabel())):
                return False
        if not _all_equal(self.workflows or [], other.workflows or []):
            return False
        return _all_equal(self.groups or [], other.groups or [])

    def append_labels(self, other: ReviewpadFile) -> None:
        """Add the other file's labels, overriding labels with the same key."""
        if self.labels is None:
            self.labels = {}
        self.labels.update(other.labels or {})

    def append_rules(self, other: ReviewpadFile) -> None:
        self.rules = [*(self.rules or []), *(other.rules or [])]

    def append_groups(self, other: ReviewpadFile) -> None:
        self.groups = [*(self.groups or []), *(other.groups or [])]

    def append_workflows(self, other: ReviewpadFile) -> None:
        self.workflows = [*(self.workflows or []), *(other.workflows or [])]


def find_group(groups: Iterable[PadGroup], name: str) -> PadGroup | None:
    """Return the first group called ``name``, or None."""
    return next((group for group in groups if group.name == name), None)


def find_rule(rules: Iterable[PadRule], name: str) -> PadRule | None:
    """Return the first rule called ``name``, or None."""
    return next((rule for rule in rules if rule.name == name), None)