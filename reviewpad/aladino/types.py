"""Types of the rule language and their structural equality."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import ClassVar

BOOL_TYPE = "BoolType"
INT_TYPE = "IntType"
STRING_TYPE = "StringType"
FUNCTION_TYPE = "FunctionType"
ARRAY_TYPE = "ArrayType"
ARRAY_OF_TYPE = "ArrayOfType"


class Type(ABC):
    """A type of the rule language."""

    kind: ClassVar[str]

    @abstractmethod
    def equals(self, other: Type | None) -> bool:
        """Tell whether two types are compatible for the type checker."""


def types_equal(left: Sequence[Type], right: Sequence[Type]) -> bool:
    """Pairwise equality of two lists of types of the same length."""
    return len(left) == len(right) and all(
        left_type.equals(right_type) for left_type, right_type in zip(left, right)
    )


def _optional_equal(left: Type | None, right: Type | None) -> bool:
    if left is None or right is None:
        return left is None and right is None
    return left.equals(right)


@dataclass
class StringType(Type):
    """The type of strings."""

    kind: ClassVar[str] = STRING_TYPE

    def equals(self, other: Type | None) -> bool:
        return other is not None and other.kind == self.kind


@dataclass
class IntType(Type):
    """The type of integers, timestamps included."""

    kind: ClassVar[str] = INT_TYPE

    def equals(self, other: Type | None) -> bool:
        return other is not None and other.kind == self.kind


@dataclass
class BoolType(Type):
    """The type of booleans."""

    kind: ClassVar[str] = BOOL_TYPE

    def equals(self, other: Type | None) -> bool:
        return other is not None and other.kind == self.kind


@dataclass
class FunctionType(Type):
    """The type of a function; a missing return type means no value."""

    param_types: list[Type] = field(default_factory=list)
    return_type: Type | None = None

    kind: ClassVar[str] = FUNCTION_TYPE

    def equals(self, other: Type | None) -> bool:
        if not isinstance(other, FunctionType):
            return False
        return types_equal(self.param_types, other.param_types) and _optional_equal(
            self.return_type, other.return_type
        )


@dataclass
class ArrayOfType(Type):
    """The type of arrays whose elements all have one type."""

    elem_type: Type

    kind: ClassVar[str] = ARRAY_OF_TYPE

    def equals(self, other: Type | None) -> bool:
        if isinstance(other, ArrayType):
            return other.equals(self)
        if isinstance(other, ArrayOfType):
            return self.elem_type.equals(other.elem_type)
        return False


@dataclass
class ArrayType(Type):
    """The type of a static array, one type per element."""

    elems_type: list[Type] = field(default_factory=list)

    kind: ClassVar[str] = ARRAY_TYPE

    def equals(self, other: Type | None) -> bool:
        if isinstance(other, ArrayType):
            return types_equal(other.elems_type, self.elems_type)
        if isinstance(other, ArrayOfType):
            expected = [other.elem_type] * len(self.elems_type)
            return types_equal(expected, self.elems_type)
        return False