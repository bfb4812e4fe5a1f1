"""Stack machine evaluating classified RPN tokens."""
from collections.abc import Callable as ABCCallable
import math
import operator
from typing import Callable, List, Optional

from rpn_calculator.common.errors import (
    DivisionByZeroError,
    InsufficientOperandsError,
    MalformedExpressionError,
)
from rpn_calculator.common.operations import OperationStep, PushStep, Step
from rpn_calculator.common.parser import ClassifiedToken, OperandToken, Operator


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]


def _signed_infinity(base: float, exponent: float) -> float:
    """Infinity carrying the sign pow() gives for this base and exponent."""
    odd_integer = exponent.is_integer() and math.fmod(exponent, 2.0) != 0.0
    if odd_integer and math.copysign(1.0, base) < 0:
        return -math.inf
    return math.inf


def power(base: float, exponent: float) -> float:
    """
    Raise base to exponent with C ``pow()`` semantics.

    math.pow raises where the C function returns a value: overflow and zero
    to a negative power give a signed infinity, a negative base with a
    fractional exponent gives NaN.

    :param float base: Left operand
    :param float exponent: Right operand

    :return: base raised to exponent
    :rtype: float
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return _signed_infinity(base, exponent)
    except ValueError:
        if base == 0.0:
            return _signed_infinity(base, exponent)
        return math.nan


def divide(dividend: float, divisor: float) -> float:
    """Divide, refusing a zero divisor instead of relying on infinities."""
    if divisor == 0.0:
        raise DivisionByZeroError()
    return dividend / divisor


# Mapping of operators to their implementation
OPERATORS: dict[Operator, OperatorFn] = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: divide,
    Operator.POW: power,
}


class RPNEvaluator:
    """
    Evaluate classified RPN tokens with a single left-to-right stack pass.

    Operands are pushed. An operator pops ``b`` (top) then ``a`` and pushes
    ``a <op> b``. Once every token is consumed exactly one value must remain.

    When a ``steps`` list is given, the same pass appends a PushStep or an
    OperationStep per token, each holding a copy of the stack. Verbose and
    plain evaluation therefore always agree on results and errors.
    """

    @staticmethod
    def evaluate(tokens: List[ClassifiedToken], steps: Optional[List[Step]] = None) -> float:
        """
        Run the stack machine over classified tokens.

        :param List[ClassifiedToken] tokens: Output of RPNParser.parse()
        :param Optional[List[Step]] steps: List receiving the trace, or None

        :return: The single value left on the stack
        :rtype: float
        :raises InsufficientOperandsError: If an operator finds fewer than two values
        :raises DivisionByZeroError: If ``/`` meets a zero right operand
        :raises MalformedExpressionError: If the final stack size is not one
        """
        stack: List[float] = []

        for token in tokens:
            if isinstance(token, OperandToken):
                stack.append(token.value)
                if steps is not None:
                    steps.append(
                        PushStep(token=token.text, value=token.value, stack_snapshot=tuple(stack))
                    )
                continue

            if len(stack) < 2:
                raise InsufficientOperandsError(token.text)
            b: float = stack.pop()
            a: float = stack.pop()
            result = OPERATORS[token.operator](a, b)
            stack.append(result)
            if steps is not None:
                steps.append(
                    OperationStep(
                        operator=token.text,
                        operands=(a, b),
                        result=result,
                        stack_snapshot=tuple(stack),
                    )
                )

        if len(stack) != 1:
            raise MalformedExpressionError(len(stack))

        return stack[0]
