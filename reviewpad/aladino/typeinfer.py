"""Type inference for expressions of the rule language."""

from __future__ import annotations

from collections.abc import Sequence

from reviewpad.aladino.builtins import BuiltIns
from reviewpad.aladino.expr import (
    Array,
    BinaryOp,
    BoolConst,
    Expr,
    FunctionCall,
    IntConst,
    Lambda,
    Operator,
    StringConst,
    TypedExpr,
    UnaryOp,
    Variable,
)
from reviewpad.aladino.types import (
    BOOL_TYPE,
    ArrayType,
    BoolType,
    FunctionType,
    IntType,
    StringType,
    Type,
)

TypeEnv = dict[str, "Type | None"]

_EQUALITIES = frozenset({Operator.EQ, Operator.NEQ})
_COMPARISONS = frozenset(
    {
        Operator.LESS_THAN,
        Operator.LESS_EQ_THAN,
        Operator.GREATER_THAN,
        Operator.GREATER_EQ_THAN,
    }
)
_CONNECTIVES = frozenset({Operator.AND, Operator.OR})


class TypeInferenceError(Exception):
    """Raised when an expression has no type."""


def new_type_env(builtins: BuiltIns) -> TypeEnv:
    """Map every built-in function and action name to its type."""
    env: TypeEnv = {
        name: function.type
        for name, function in builtins.functions.items()
        if function is not None
    }
    env.update(
        (name, action.type)
        for name, action in builtins.actions.items()
        if action is not None
    )
    return env


def _same(left: Type | None, right: Type | None) -> bool:
    if left is None or right is None:
        return left is None and right is None
    return left.equals(right)


def _all_same(left: Sequence[Type | None], right: Sequence[Type | None]) -> bool:
    return len(left) == len(right) and all(_same(a, b) for a, b in zip(left, right))


def _infer_all(env: TypeEnv, exprs: Sequence[Expr]) -> list[Type | None]:
    return [_infer(env, expr) for expr in exprs]


def _infer_unary(env: TypeEnv, expr: UnaryOp) -> Type:
    operand = _infer(env, expr.expr)
    if expr.op == Operator.NOT and operand is not None and operand.kind == BOOL_TYPE:
        return BoolType()
    raise TypeInferenceError("type inference failed")


def _infer_binary(env: TypeEnv, expr: BinaryOp) -> Type:
    lhs = _infer(env, expr.lhs)
    rhs = _infer(env, expr.rhs)

    if expr.op in _EQUALITIES:
        valid = _same(lhs, rhs)
    elif expr.op in _COMPARISONS:
        valid = _same(lhs, IntType()) and _same(rhs, IntType())
    elif expr.op in _CONNECTIVES:
        valid = _same(lhs, BoolType()) and _same(rhs, BoolType())
    else:
        valid = False

    if not valid:
        raise TypeInferenceError("type inference failed")
    return BoolType()


def _infer_call(env: TypeEnv, expr: FunctionCall) -> Type | None:
    argument_types = _infer_all(env, expr.arguments)
    function_type = _infer(env, expr.name)
    if not isinstance(function_type, FunctionType):
        raise TypeInferenceError(
            f"type inference failed: {expr.name.ident} is not a function"
        )
    if _all_same(argument_types, function_type.param_types):
        return function_type.return_type
    raise TypeInferenceError(
        f"type inference failed: mismatch in arg types on {expr.name.ident}"
    )


def _infer(env: TypeEnv, expr: Expr) -> Type | None:
    match expr:
        case BoolConst():
            return BoolType()
        case IntConst():
            return IntType()
        case StringConst():
            return StringType()
        case Variable(ident=name):
            if name not in env:
                raise TypeInferenceError(
                    f"no type for built-in {name}. Please check if the mode in "
                    "the reviewpad.yml file supports it"
                )
            return env[name]
        case TypedExpr(expr=inner, type_of=type_of):
            if not isinstance(inner, Variable):
                raise TypeInferenceError(
                    f"typed expression {inner!r} is not a variable"
                )
            env[inner.ident] = type_of
            return type_of
        case Array(elems=elems):
            return ArrayType(_infer_all(env, elems))
        case UnaryOp():
            return _infer_unary(env, expr)
        case BinaryOp():
            return _infer_binary(env, expr)
        case FunctionCall():
            return _infer_call(env, expr)
        case Lambda(parameters=parameters, body=body):
            parameter_types = _infer_all(env, parameters)
            return FunctionType(parameter_types, _infer(env, body))
    raise TypeInferenceError(f"type inference failed: unknown expression {expr!r}")


def type_inference(builtins: BuiltIns, expr: Expr) -> Type | None:
    """Infer the type of ``expr`` given the built-ins in scope.

    A call to an action has no type and gives None.
    """
    return _infer(new_type_env(builtins), expr)