"""Test class RPNEvaluator and the operator functions."""
import math

import pytest

from rpn_calculator.common.errors import (
    DivisionByZeroError,
    InsufficientOperandsError,
    MalformedExpressionError,
)
from rpn_calculator.common.evaluator import RPNEvaluator, power
from rpn_calculator.common.operations import OperationStep, PushStep
from rpn_calculator.common.parser import RPNParser


def run(expr, steps=None):
    return RPNEvaluator.evaluate(RPNParser.classify(RPNParser.tokenize(expr)), steps)


@pytest.mark.parametrize("expr,expected", [
    ("3 4 +", 7.0),
    ("10 4 -", 6.0),
    ("3 5 *", 15.0),
    ("8 2 /", 4.0),
    ("2 3 ^", 8.0),
    ("5 1 2 + 4 * + 3 -", 14.0),
    ("15 7 1 1 + - / 3 * 2 1 1 + + -", 5.0),
    ("1 2 + 3 4 + *", 21.0),
    ("4 2 + 3 5 1 - * +", 18.0),
    ("-2.5 2 *", -5.0),
    ("42", 42.0),
])
def test_evaluate_valid(expr, expected):
    """Evaluate returns correct result for valid expressions."""
    assert run(expr) == expected


def test_evaluate_native_division():
    """Division is plain double division, no rounding."""
    assert run("10 3 /") == 3.3333333333333335


@pytest.mark.parametrize("expr,expected", [
    ("3 1 -", 2.0),
    ("1 3 -", -2.0),
    ("8 2 /", 4.0),
    ("2 8 /", 0.25),
    ("2 3 ^", 8.0),
    ("3 2 ^", 9.0),
])
def test_operand_order(expr, expected):
    """The first pushed value is the left operand."""
    assert run(expr) == expected


@pytest.mark.parametrize("expr", ["5 0 /", "5 0.0 /", "5 -0 /", "1 1 1 - /"])
def test_division_by_zero(expr):
    """A zero divisor fails instead of producing infinity."""
    with pytest.raises(DivisionByZeroError):
        run(expr)


def test_insufficient_operands():
    """An operator with fewer than two stack values fails with its symbol."""
    with pytest.raises(InsufficientOperandsError) as exc_info:
        run("1 + 2")
    assert exc_info.value.operator == "+"
    assert str(exc_info.value) == "Insufficient operands for operator '+'"


@pytest.mark.parametrize("expr,size", [("3 4 5 +", 2), ("1 2 3", 3)])
def test_malformed_expression(expr, size):
    """Leftover values on the stack fail instead of being ignored."""
    with pytest.raises(MalformedExpressionError) as exc_info:
        run(expr)
    assert exc_info.value.stack_size == size


def test_evaluate_records_steps():
    """A steps list receives one entry per token with stack snapshots."""
    steps = []
    assert run("3 4 + 2 *", steps) == 14.0
    assert steps == [
        PushStep(token="3", value=3.0, stack_snapshot=(3.0,)),
        PushStep(token="4", value=4.0, stack_snapshot=(3.0, 4.0)),
        OperationStep(operator="+", operands=(3.0, 4.0), result=7.0, stack_snapshot=(7.0,)),
        PushStep(token="2", value=2.0, stack_snapshot=(7.0, 2.0)),
        OperationStep(operator="*", operands=(7.0, 2.0), result=14.0, stack_snapshot=(14.0,)),
    ]


def test_snapshots_are_copies():
    """Later pushes do not change earlier snapshots."""
    steps = []
    run("1 2 3 + +", steps)
    assert [step.stack_snapshot for step in steps] == [
        (1.0,),
        (1.0, 2.0),
        (1.0, 2.0, 3.0),
        (1.0, 5.0),
        (6.0,),
    ]


def test_power_follows_c_semantics():
    """power() returns IEEE values where math.pow would raise."""
    assert power(2.0, 10.0) == 1024.0
    assert power(4.0, 0.5) == 2.0
    assert power(-2.0, 3.0) == -8.0
    assert math.isnan(power(-8.0, 1.0 / 3.0))
    assert power(10.0, 400.0) == math.inf
    assert power(-10.0, 401.0) == -math.inf
    assert power(-10.0, 400.0) == math.inf
    assert power(0.0, -1.0) == math.inf
    assert power(-0.0, -1.0) == -math.inf
    assert power(0.0, 0.0) == 1.0


def test_overflow_propagates_as_infinity():
    """Overflowing arithmetic yields infinities rather than errors."""
    assert run("1e308 10 *") == math.inf
    assert run("10 400 ^") == math.inf
