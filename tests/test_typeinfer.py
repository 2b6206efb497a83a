import pytest

from reviewpad.aladino.builtins import BuiltInAction, BuiltInFunction, BuiltIns
from reviewpad.aladino.expr import (
    Array,
    BinaryOp,
    BoolConst,
    FunctionCall,
    IntConst,
    Lambda,
    Operator,
    StringConst,
    TypedExpr,
    UnaryOp,
    Variable,
)
from reviewpad.aladino.typeinfer import TypeInferenceError, new_type_env, type_inference
from reviewpad.aladino.types import (
    ArrayOfType,
    ArrayType,
    BoolType,
    FunctionType,
    IntType,
    StringType,
)


@pytest.fixture
def builtins():
    return BuiltIns(
        functions={
            "emptyFunction": BuiltInFunction(
                FunctionType([], None), lambda env, args: None
            ),
            "zeroConst": BuiltInFunction(
                FunctionType([], IntType()), lambda env, args: 0
            ),
            "returnStr": BuiltInFunction(
                FunctionType([StringType()], StringType()), lambda env, args: args[0]
            ),
        },
        actions={
            "emptyAction": BuiltInAction(
                FunctionType([], None), lambda env, args: None
            ),
        },
    )


def test_new_type_env(builtins):
    assert new_type_env(builtins) == {
        "emptyFunction": FunctionType([], None),
        "emptyAction": FunctionType([], None),
        "zeroConst": FunctionType([], IntType()),
        "returnStr": FunctionType([StringType()], StringType()),
    }


@pytest.mark.parametrize(
    ("expr", "want"),
    [
        (IntConst(1), IntType()),
        (StringConst("a"), StringType()),
        (BoolConst(True), BoolType()),
    ],
)
def test_constants(builtins, expr, want):
    assert type_inference(builtins, expr) == want


def test_equality_of_same_types(builtins):
    expr = BinaryOp(IntConst(1), Operator.EQ, IntConst(1))
    assert type_inference(builtins, expr) == BoolType()


def test_equality_of_different_types_fails(builtins):
    expr = BinaryOp(IntConst(1), Operator.EQ, StringConst("a"))
    with pytest.raises(TypeInferenceError, match="type inference failed"):
        type_inference(builtins, expr)


def test_comparison_needs_integers(builtins):
    expr = BinaryOp(StringConst("a"), Operator.LESS_THAN, IntConst(1))
    with pytest.raises(TypeInferenceError):
        type_inference(builtins, expr)


def test_comparison_of_builtin_int(builtins):
    expr = BinaryOp(
        FunctionCall(Variable("zeroConst"), []), Operator.GREATER_EQ_THAN, IntConst(1)
    )
    assert type_inference(builtins, expr) == BoolType()


def test_connective_of_booleans(builtins):
    expr = BinaryOp(BoolConst(True), Operator.AND, BoolConst(False))
    assert type_inference(builtins, expr) == BoolType()


def test_not_of_boolean(builtins):
    assert type_inference(builtins, UnaryOp(Operator.NOT, BoolConst(True))) == BoolType()


def test_not_of_integer_fails(builtins):
    with pytest.raises(TypeInferenceError):
        type_inference(builtins, UnaryOp(Operator.NOT, IntConst(1)))


def test_function_call_returns_declared_type(builtins):
    expr = FunctionCall(Variable("returnStr"), [StringConst("hello")])
    assert type_inference(builtins, expr) == StringType()


def test_function_call_with_wrong_arguments(builtins):
    expr = FunctionCall(Variable("returnStr"), [IntConst(1)])
    with pytest.raises(TypeInferenceError, match="mismatch in arg types on returnStr"):
        type_inference(builtins, expr)


def test_action_call_has_no_type(builtins):
    assert type_inference(builtins, FunctionCall(Variable("emptyAction"), [])) is None


def test_unknown_variable(builtins):
    with pytest.raises(TypeInferenceError, match="no type for built-in nonBuiltIn"):
        type_inference(builtins, FunctionCall(Variable("nonBuiltIn"), []))


def test_array_type(builtins):
    got = type_inference(builtins, Array([StringConst("a"), StringConst("b")]))
    assert got == ArrayType([StringType(), StringType()])
    assert got.equals(ArrayOfType(StringType()))


def test_lambda_binds_typed_parameter(builtins):
    expr = Lambda(
        [TypedExpr(Variable("dev"), StringType())],
        BinaryOp(Variable("dev"), Operator.EQ, StringConst("john")),
    )
    assert type_inference(builtins, expr) == FunctionType([StringType()], BoolType())
    assert "dev" not in new_type_env(builtins)


def test_typed_expression_must_be_variable(builtins):
    with pytest.raises(TypeInferenceError, match="is not a variable"):
        type_inference(builtins, TypedExpr(IntConst(1), IntType()))