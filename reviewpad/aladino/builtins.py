"""Built-in functions and actions available to the rule language."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from reviewpad.aladino.types import Type

FunctionCode = Callable[[Any, list[Any]], Any]
ActionCode = Callable[[Any, list[Any]], None]


@dataclass
class BuiltInFunction:
    """A function that computes a value from its arguments."""

    type: Type | None
    code: FunctionCode


@dataclass
class BuiltInAction:
    """An action that acts on the pull request and returns nothing."""

    type: Type | None
    code: ActionCode


@dataclass
class BuiltIns:
    """The functions and actions known by name."""

    functions: dict[str, BuiltInFunction | None] = field(default_factory=dict)
    actions: dict[str, BuiltInAction | None] = field(default_factory=dict)


def merge_builtins(*builtins_list: BuiltIns) -> BuiltIns:
    """Combine several sets of built-ins; later entries win over earlier ones."""
    merged = BuiltIns()
    for builtins in builtins_list:
        merged.functions.update(builtins.functions)
        merged.actions.update(builtins.actions)
    return merged