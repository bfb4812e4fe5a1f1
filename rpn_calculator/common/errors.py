"""Error taxonomy raised while evaluating RPN expressions."""
from enum import Enum
from typing import Dict


class ErrorKind(str, Enum):
    """Classification of a failed evaluation."""

    EMPTY_EXPRESSION = "empty_expression"
    INVALID_TOKEN = "invalid_token"
    NO_OPERAND = "no_operand"
    TOO_MANY_OPERATORS = "too_many_operators"
    INSUFFICIENT_OPERANDS = "insufficient_operands"
    DIVISION_BY_ZERO = "division_by_zero"
    MALFORMED_EXPRESSION = "malformed_expression"


class CalculationError(ValueError):
    """
    Base class of every evaluation failure.

    Subclasses ValueError so callers treating any bad expression as a value
    error keep working. The ``kind`` attribute is the stable classification;
    the message is meant for humans and may be prefixed by callers.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        """
        Serialize the error for a transport layer.

        :return: Mapping with the error kind and message
        :rtype: Dict[str, str]
        """
        return {"kind": self.kind.value, "message": self.message}


class EmptyExpressionError(CalculationError):
    """The expression is empty or whitespace-only."""

    kind = ErrorKind.EMPTY_EXPRESSION

    def __init__(self) -> None:
        super().__init__("Expression cannot be empty")


class InvalidTokenError(CalculationError):
    """A token is neither a finite number nor a known operator."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, token: str) -> None:
        super().__init__(f"Invalid token: {token}")
        self.token = token


class NoOperandError(CalculationError):
    """The expression contains operators only."""

    kind = ErrorKind.NO_OPERAND

    def __init__(self) -> None:
        super().__init__("Expression must contain at least one number")


class InsufficientOperandsError(CalculationError):
    """An operator was reached with fewer than two values on the stack."""

    kind = ErrorKind.INSUFFICIENT_OPERANDS

    def __init__(self, operator: str) -> None:
        super().__init__(f"Insufficient operands for operator '{operator}'")
        self.operator = operator


class TooManyOperatorsError(InsufficientOperandsError):
    """
    Static pre-check failure: at least as many operators as operands.

    N operands can feed at most N - 1 binary operators, so some operator is
    bound to run out of operands. ``operator`` is the first operator that
    would do so.
    """

    kind = ErrorKind.TOO_MANY_OPERATORS

    def __init__(self, operator: str, operator_count: int, operand_count: int) -> None:
        CalculationError.__init__(self, "Invalid RPN expression: too many operators")
        self.operator = operator
        self.operator_count = operator_count
        self.operand_count = operand_count


class DivisionByZeroError(CalculationError):
    """The right operand of ``/`` is zero."""

    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self) -> None:
        super().__init__("Division by zero")


class MalformedExpressionError(CalculationError):
    """The stack does not hold exactly one value once every token is consumed."""

    kind = ErrorKind.MALFORMED_EXPRESSION

    def __init__(self, stack_size: int) -> None:
        super().__init__("Malformed expression: elements remaining in stack")
        self.stack_size = stack_size
