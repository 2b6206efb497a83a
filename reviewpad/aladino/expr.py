"""Abstract syntax of the rule language."""

from __future__ import annotations

import calendar
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import ClassVar

from reviewpad.aladino.types import StringType, Type

BOOL_CONST = "BoolConst"
INT_CONST = "IntConst"
STRING_CONST = "StringConst"
TIME_CONST = "TimeConst"
VARIABLE_CONST = "Variable"
UNARY_OP_CONST = "UnaryOp"
BINARY_OP_CONST = "BinaryOp"
FUNCTION_CALL_CONST = "FunctionCall"
LAMBDA_CONST = "Lambda"
TYPED_EXPR = "TypedExpr"
ARRAY_CONST = "Array"


class Operator(str, Enum):
    """Unary and binary operators of the language."""

    NOT = "!"
    EQ = "=="
    NEQ = "!="
    AND = "&&"
    OR = "||"
    LESS_THAN = "<"
    LESS_EQ_THAN = "<="
    GREATER_THAN = ">"
    GREATER_EQ_THAN = ">="


_COMPARISONS = frozenset(
    {
        Operator.LESS_THAN,
        Operator.LESS_EQ_THAN,
        Operator.GREATER_THAN,
        Operator.GREATER_EQ_THAN,
    }
)


class Expr(ABC):
    """An expression of the language."""

    kind: ClassVar[str]

    @abstractmethod
    def equals(self, other: Expr) -> bool:
        """Structural equality of two expressions."""


def equal_list(left: Sequence[Expr], right: Sequence[Expr]) -> bool:
    """Pairwise structural equality of two expression lists."""
    return len(left) == len(right) and all(
        left_expr.equals(right_expr) for left_expr, right_expr in zip(left, right)
    )


@dataclass
class BoolConst(Expr):
    value: bool

    kind: ClassVar[str] = BOOL_CONST

    def equals(self, other: Expr) -> bool:
        return isinstance(other, BoolConst) and self.value == other.value


@dataclass
class StringConst(Expr):
    value: str

    kind: ClassVar[str] = STRING_CONST

    def equals(self, other: Expr) -> bool:
        return isinstance(other, StringConst) and self.value == other.value


@dataclass
class IntConst(Expr):
    value: int

    kind: ClassVar[str] = INT_CONST

    def equals(self, other: Expr) -> bool:
        return isinstance(other, IntConst) and self.value == other.value


@dataclass
class Variable(Expr):
    ident: str

    kind: ClassVar[str] = VARIABLE_CONST

    def equals(self, other: Expr) -> bool:
        return isinstance(other, Variable) and self.ident == other.ident


@dataclass
class UnaryOp(Expr):
    op: Operator
    expr: Expr

    kind: ClassVar[str] = UNARY_OP_CONST

    def equals(self, other: Expr) -> bool:
        return (
            isinstance(other, UnaryOp)
            and self.op == other.op
            and self.expr.equals(other.expr)
        )


@dataclass
class BinaryOp(Expr):
    lhs: Expr
    op: Operator
    rhs: Expr

    kind: ClassVar[str] = BINARY_OP_CONST

    def equals(self, other: Expr) -> bool:
        return (
            isinstance(other, BinaryOp)
            and self.op == other.op
            and self.lhs.equals(other.lhs)
            and self.rhs.equals(other.rhs)
        )


@dataclass
class FunctionCall(Expr):
    name: Variable
    arguments: list[Expr] = field(default_factory=list)

    kind: ClassVar[str] = FUNCTION_CALL_CONST

    def equals(self, other: Expr) -> bool:
        return (
            isinstance(other, FunctionCall)
            and self.name.equals(other.name)
            and equal_list(self.arguments, other.arguments)
        )


@dataclass
class Array(Expr):
    elems: list[Expr] = field(default_factory=list)

    kind: ClassVar[str] = ARRAY_CONST

    def equals(self, other: Expr) -> bool:
        return isinstance(other, Array) and equal_list(self.elems, other.elems)


@dataclass
class TypedExpr(Expr):
    expr: Expr
    type_of: Type

    kind: ClassVar[str] = TYPED_EXPR

    def equals(self, other: Expr) -> bool:
        return (
            isinstance(other, TypedExpr)
            and self.expr.equals(other.expr)
            and self.type_of.equals(other.type_of)
        )


@dataclass
class Lambda(Expr):
    parameters: list[Expr]
    body: Expr

    kind: ClassVar[str] = LAMBDA_CONST

    def equals(self, other: Expr) -> bool:
        return (
            isinstance(other, Lambda)
            and self.body.equals(other.body)
            and equal_list(self.parameters, other.parameters)
        )


def build_cmp_op(lhs: Expr, op: Operator | str, rhs: Expr) -> BinaryOp:
    """Build an ordering comparison; other operators are rejected."""
    try:
        operator = Operator(op)
    except ValueError:
        raise ValueError(f"cmpOp: invalid op {op}") from None
    if operator not in _COMPARISONS:
        raise ValueError(f"cmpOp: invalid op {operator.value}")
    return BinaryOp(lhs, operator, rhs)


_DATE = re.compile(r"^(\d{4})-?(\d{2})-?(\d{2})")
_TIME = re.compile(r"T(\d{2}):(\d{2}):(\d{2})\Z")
_TIME_UNIT = re.compile(r"year|month|week|day|hour|minute")
_TIME_AMOUNT = re.compile(r"^[0-9]+")


def build_time_const(text: str) -> IntConst:
    """Turn an ISO-like date, optionally with a time, into a UTC Unix timestamp."""
    date = _DATE.search(text)
    if date is None:
        raise ValueError(f"invalid date value {text!r}")
    year, month, day = (int(part) for part in date.groups())

    hour = minute = second = 0
    clock = _TIME.search(text)
    if clock is not None:
        hour, minute, second = (int(part) for part in clock.groups())

    return IntConst(calendar.timegm((year, month, day, hour, minute, second, 0, 0, 0)))


def _shift_months(moment: datetime, months: int) -> datetime:
    # Days past the end of the target month roll over into the next one.
    total = moment.year * 12 + (moment.month - 1) + months
    start = moment.replace(year=total // 12, month=total % 12 + 1, day=1)
    return start + timedelta(days=moment.day - 1)


def build_relative_time_const(text: str) -> IntConst:
    """Turn an amount of time units into the Unix timestamp that long ago."""
    unit_match = _TIME_UNIT.search(text)
    amount_match = _TIME_AMOUNT.search(text)
    if amount_match is None:
        raise ValueError(f"invalid relative time value {text!r}")
    amount = int(amount_match.group(0))
    unit = unit_match.group(0) if unit_match else ""

    now = datetime.now(timezone.utc)
    if unit == "year":
        moment = _shift_months(now, -12 * amount)
    elif unit == "month":
        moment = _shift_months(now, -amount)
    elif unit == "day":
        moment = now - timedelta(days=amount)
    elif unit == "week":
        moment = now - timedelta(weeks=amount)
    elif unit == "hour":
        moment = now - timedelta(hours=amount)
    elif unit == "minute":
        moment = now - timedelta(minutes=amount)
    else:
        raise ValueError(f"Unknown time unit {unit}")
    return IntConst(int(moment.timestamp()))


def build_filter(param: str, condition: Expr) -> FunctionCall:
    """Build a filter over the organization's members bound to ``param``."""
    organization = FunctionCall(Variable("organization"), [])
    return FunctionCall(
        Variable("filter"),
        [
            organization,
            Lambda([TypedExpr(Variable(param), StringType())], condition),
        ],
    )